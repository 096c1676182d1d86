"""Closed set of expression node kinds understood by the evaluator.

Nodes are frozen: a tree is built once by the front end and never mutated while
it is being evaluated. `meta` carries the parser's source position (anything
with `line`/`column` attributes) and takes no part in equality.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple
from typing_extensions import TypeAlias, TypeGuard

from .types import CoalesceError, MalformedTree

@dataclass(frozen=True)
class Literal:
    value: Any
    meta: Optional[object] = field(default=None, compare=False, repr=False)

@dataclass(frozen=True)
class VariableRef:
    name: str
    meta: Optional[object] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise MalformedTree(f"Variable name must be a non-empty string, got {self.name!r}", self.meta)

@dataclass(frozen=True)
class Call:
    callee: 'Node'
    args: Tuple['Node', ...] = ()
    meta: Optional[object] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        # a bare Python callable is shorthand for a literal callee
        if not is_node(self.callee) and callable(self.callee):
            object.__setattr__(self, 'callee', Literal(self.callee))
        object.__setattr__(self, 'args', tuple(self.args))
        _require_nodes("Call", (self.callee, *self.args), self.meta)

@dataclass(frozen=True)
class ExceptionCoalesce:
    """`lhs ??? rhs`: fall back to `rhs` only when `lhs` raises."""
    lhs: 'Node'
    rhs: 'Node'
    meta: Optional[object] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        _require_nodes("ExceptionCoalesce", (self.lhs, self.rhs), self.meta)

@dataclass(frozen=True)
class NullCoalesce:
    """`lhs ?? rhs`: fall back to `rhs` only when `lhs` is null."""
    lhs: 'Node'
    rhs: 'Node'
    meta: Optional[object] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        _require_nodes("NullCoalesce", (self.lhs, self.rhs), self.meta)

@dataclass(frozen=True)
class Ternary:
    condition: 'Node'
    then_branch: 'Node'
    else_branch: 'Node'
    meta: Optional[object] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        _require_nodes("Ternary", (self.condition, self.then_branch, self.else_branch), self.meta)

@dataclass(frozen=True)
class ShortTernary:
    """`lhs ?: rhs`: keep `lhs` when truthy, otherwise evaluate `rhs`."""
    lhs: 'Node'
    rhs: 'Node'
    meta: Optional[object] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        _require_nodes("ShortTernary", (self.lhs, self.rhs), self.meta)

@dataclass(frozen=True)
class Raise:
    """Fixture node that always raises `exception`."""
    exception: Exception
    meta: Optional[object] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.exception, str):
            object.__setattr__(self, 'exception', CoalesceError(self.exception))

        if not isinstance(self.exception, Exception):
            raise MalformedTree(f"Raise expects an exception, got {type(self.exception).__name__}", self.meta)

Node: TypeAlias = (
    Literal
    | VariableRef
    | Call
    | ExceptionCoalesce
    | NullCoalesce
    | Ternary
    | ShortTernary
    | Raise
)

_NODE_TYPES: Tuple[type, ...] = (
    Literal,
    VariableRef,
    Call,
    ExceptionCoalesce,
    NullCoalesce,
    Ternary,
    ShortTernary,
    Raise,
)

def is_node(value: object) -> TypeGuard[Node]:
    return isinstance(value, _NODE_TYPES)

def _require_nodes(kind: str, children: Tuple[object, ...], meta: Optional[object]) -> None:
    for child in children:
        if not is_node(child):
            raise MalformedTree(f"{kind} child must be an expression node, got {type(child).__name__}", meta)

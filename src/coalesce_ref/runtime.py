from __future__ import annotations

from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Set

from .config import EvalOptions, max_depth_ceiling
from .nodes import Node
from .tracing import Tracer
from .types import Environment, EvalNameError, MalformedTree, Outcome, Raised, Success

class Frame:
    """Per-call evaluation state.

    The environment is snapshotted into a read-only view so nothing reachable
    from the tree (including user callables) can rebind names mid-evaluation,
    and nothing an evaluation does outlives the call.
    """

    def __init__(self, env: Optional[Environment]=None, tracer: Optional[Tracer]=None, options: Optional[EvalOptions]=None):
        self.vars: Mapping[str, Any] = MappingProxyType(dict(env) if env is not None else {})
        self.tracer = tracer
        self.options = options if options is not None else EvalOptions()
        self.max_depth = min(self.options.max_depth, max_depth_ceiling())
        self._stack: List[Node] = []
        self._active: Set[int] = set()

    def lookup(self, name: str) -> Outcome:
        if name in self.vars:
            return Success(self.vars[name])

        return Raised(EvalNameError(name))

    @property
    def depth(self) -> int:
        return len(self._stack)

    def push(self, node: Node) -> None:
        key = id(node)

        if key in self._active:
            raise MalformedTree("cyclic expression tree", getattr(node, "meta", None))

        if len(self._stack) >= self.max_depth:
            raise MalformedTree(f"expression tree deeper than max_depth={self.max_depth}", getattr(node, "meta", None))

        self._stack.append(node)
        self._active.add(key)

    def pop(self, node: Node) -> None:
        top = self._stack.pop()
        assert top is node, "unbalanced evaluation stack"
        self._active.discard(id(node))

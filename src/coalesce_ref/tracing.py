"""Diagnostic harness: observe which nodes get evaluated, and how often.

A tracer is passed explicitly to `evaluate`; all bookkeeping lives on the
tracer object, so tracing never changes an evaluation's result.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from typing_extensions import Protocol

from .nodes import Node
from .types import Outcome

class Tracer(Protocol):
    def enter(self, node: Node) -> None: ...
    def exit(self, node: Node, outcome: Outcome) -> None: ...

@dataclass(frozen=True)
class TraceEvent:
    kind: str  # "enter" | "exit"
    node: Node
    depth: int
    outcome: Optional[Outcome] = None

@dataclass
class EvalTrace:
    """Records enter/exit events; counts are keyed by node identity."""
    events: List[TraceEvent] = field(default_factory=list)
    _counts: Dict[int, int] = field(default_factory=dict, repr=False)
    _depth: int = field(default=0, repr=False)

    def enter(self, node: Node) -> None:
        self._counts[id(node)] = self._counts.get(id(node), 0) + 1
        self.events.append(TraceEvent("enter", node, self._depth))
        self._depth += 1

    def exit(self, node: Node, outcome: Outcome) -> None:
        self._depth -= 1
        self.events.append(TraceEvent("exit", node, self._depth, outcome))

    def count(self, node: Node) -> int:
        return self._counts.get(id(node), 0)

    def evaluated(self, node: Node) -> bool:
        return self.count(node) > 0

    def order(self) -> List[Node]:
        """Nodes in the order evaluation entered them."""
        return [ev.node for ev in self.events if ev.kind == "enter"]

    def outcome_of(self, node: Node) -> Optional[Outcome]:
        """Outcome of the most recent evaluation of `node`."""
        for ev in reversed(self.events):
            if ev.kind == "exit" and ev.node is node:
                return ev.outcome
        return None

    def balanced(self) -> bool:
        return self._depth == 0

    def reset(self) -> None:
        self.events.clear()
        self._counts.clear()
        self._depth = 0

class CountingCallable:
    """Wrap a callable and count invocations, for `Call` node fixtures."""

    def __init__(self, fn: Callable[..., Any], name: Optional[str]=None):
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "fn")
        self.calls: List[tuple] = []

    @property
    def count(self) -> int:
        return len(self.calls)

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        return self.fn(*args)

    def __repr__(self) -> str:
        return f"<counting {self.name} calls={self.count}>"

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .config import EvalOptions
from .nodes import (
    Call,
    ExceptionCoalesce,
    Literal,
    Node,
    NullCoalesce,
    Raise,
    ShortTernary,
    Ternary,
    VariableRef,
    is_node,
)
from .runtime import Frame
from .tracing import Tracer
from .types import CoalesceError, Environment, MalformedTree, Outcome, Raised, Success

from .eval.chains import eval_call, eval_variable
from .eval.control import eval_exception_coalesce, eval_raise
from .eval.expr import eval_null_coalesce, eval_short_ternary, eval_ternary

log = logging.getLogger(__name__)

EvalFunc = Callable[[Node, Frame], Outcome]

def _maybe_attach_location(outcome: Outcome, node: Node) -> None:
    if not isinstance(outcome, Raised):
        return

    exc = outcome.exception
    if not isinstance(exc, CoalesceError) or exc.meta is not None:
        return

    meta = getattr(node, "meta", None)

    if meta is not None and getattr(meta, "line", None) is not None:
        exc.meta = meta

# ---------------- Public API ----------------

def evaluate(
    node: Node,
    environment: Optional[Environment]=None,
    *,
    tracer: Optional[Tracer]=None,
    options: Optional[EvalOptions]=None,
) -> Outcome:
    """Evaluate `node` against `environment` and return its outcome.

    Runtime failures come back as `Raised`; only a malformed tree raises.
    """
    if not is_node(node):
        raise MalformedTree(f"Expected an expression node, got {type(node).__name__}")

    frame = Frame(environment, tracer=tracer, options=options)
    return eval_node(node, frame)

def eval_expr(
    node: Node,
    environment: Optional[Environment]=None,
    *,
    tracer: Optional[Tracer]=None,
    options: Optional[EvalOptions]=None,
) -> Any:
    """Like `evaluate`, but return the value or raise the carried exception."""
    return evaluate(node, environment, tracer=tracer, options=options).unwrap()

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> Outcome:
    frame.push(n)
    debug = frame.options.debug_trace

    if debug:
        log.debug("%senter %s", "  " * (frame.depth - 1), type(n).__name__)

    if frame.tracer is not None:
        frame.tracer.enter(n)

    outcome = _eval_node_inner(n, frame)
    _maybe_attach_location(outcome, n)

    if frame.tracer is not None:
        frame.tracer.exit(n, outcome)

    if debug:
        log.debug("%sexit %s -> %s", "  " * (frame.depth - 1), type(n).__name__, type(outcome).__name__)

    frame.pop(n)
    return outcome

def _eval_node_inner(n: Node, frame: Frame) -> Outcome:
    match n:
        case Literal(value=value):
            return Success(value)
        case VariableRef():
            return eval_variable(n, frame)
        case Call():
            return eval_call(n, frame, eval_node)
        case ExceptionCoalesce():
            return eval_exception_coalesce(n, frame, eval_node)
        case NullCoalesce():
            return eval_null_coalesce(n, frame, eval_node)
        case Ternary():
            return eval_ternary(n, frame, eval_node)
        case ShortTernary():
            return eval_short_ternary(n, frame, eval_node)
        case Raise():
            return eval_raise(n, frame)
        case _:
            raise MalformedTree(f"Unknown node: {type(n).__name__}", getattr(n, "meta", None))

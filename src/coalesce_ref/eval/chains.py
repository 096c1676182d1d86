from __future__ import annotations

from typing import Any, Callable, List

from ..nodes import Call, Node, VariableRef
from ..runtime import Frame
from ..types import CallError, MalformedTree, Outcome, Raised, Success

EvalFunc = Callable[[Node, Frame], Outcome]

def eval_variable(n: VariableRef, frame: Frame) -> Outcome:
    return frame.lookup(n.name)

def eval_args(args: tuple[Node, ...], frame: Frame, eval_func: EvalFunc) -> Outcome:
    """Evaluate arguments left to right; the first raise stops the walk."""
    values: List[Any] = []

    for arg in args:
        outcome = eval_func(arg, frame)

        if isinstance(outcome, Raised):
            return outcome

        values.append(outcome.value)

    return Success(values)

def eval_call(n: Call, frame: Frame, eval_func: EvalFunc) -> Outcome:
    callee = eval_func(n.callee, frame)
    if isinstance(callee, Raised):
        return callee

    args = eval_args(n.args, frame, eval_func)
    if isinstance(args, Raised):
        return args

    return call_value(callee.value, args.value)

def call_value(fn: Any, args: List[Any]) -> Outcome:
    if not callable(fn):
        return Raised(CallError(TypeError(f"'{type(fn).__name__}' object is not callable")))

    try:
        result = fn(*args)
    except MalformedTree:
        raise
    except Exception as exc:
        return Raised(CallError(exc))

    # whatever came back is a value, even if it looks like an outcome or marker
    return Success(result)

from __future__ import annotations

from typing import Callable

from ..nodes import Node, NullCoalesce, ShortTernary, Ternary
from ..runtime import Frame
from ..types import Outcome, Raised
from .helpers import is_null, truthiness

EvalFunc = Callable[[Node, Frame], Outcome]

def eval_null_coalesce(n: NullCoalesce, frame: Frame, eval_func: EvalFunc) -> Outcome:
    current = eval_func(n.lhs, frame)

    # `??` only reacts to null; a raise passes straight through
    if isinstance(current, Raised):
        return current

    if not is_null(current.value):
        return current

    return eval_func(n.rhs, frame)

def eval_ternary(n: Ternary, frame: Frame, eval_func: EvalFunc) -> Outcome:
    cond = eval_func(n.condition, frame)

    if isinstance(cond, Raised):
        return cond

    truth = truthiness(cond.value)
    if isinstance(truth, Raised):
        return truth

    if truth.value:
        return eval_func(n.then_branch, frame)

    return eval_func(n.else_branch, frame)

def eval_short_ternary(n: ShortTernary, frame: Frame, eval_func: EvalFunc) -> Outcome:
    current = eval_func(n.lhs, frame)

    if isinstance(current, Raised):
        return current

    truth = truthiness(current.value)
    if isinstance(truth, Raised):
        return truth

    if truth.value:
        return current

    return eval_func(n.rhs, frame)

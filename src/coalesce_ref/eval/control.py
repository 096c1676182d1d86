from __future__ import annotations

import logging
from typing import Callable

from ..nodes import ExceptionCoalesce, Node, Raise
from ..runtime import Frame
from ..types import CoalesceError, Outcome, Raised, Success

log = logging.getLogger(__name__)

EvalFunc = Callable[[Node, Frame], Outcome]

def eval_exception_coalesce(n: ExceptionCoalesce, frame: Frame, eval_func: EvalFunc) -> Outcome:
    """`lhs ??? rhs`.

    `lhs` is evaluated exactly once. Any success (null included) wins without
    touching `rhs`. On a raise the exception is dropped unread and the outcome
    of `rhs` is returned verbatim, so a raising fallback propagates outward.
    """
    current = eval_func(n.lhs, frame)

    if isinstance(current, Success):
        return current

    # the lhs exception is dropped here and never surfaces
    if frame.options.debug_trace:
        log.debug("exception-coalesce at depth %d: falling back to rhs", frame.depth)

    return eval_func(n.rhs, frame)

def eval_raise(n: Raise, frame: Frame) -> Outcome:
    exc = n.exception

    # the node keeps its own error; locations only ever land on a per-call copy
    if isinstance(exc, CoalesceError):
        return Raised(exc.clone())

    return Raised(exc)

"""Evaluation options, optionally resolved from the process environment."""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from .types import ConfigurationError

MAX_DEPTH_ENV = "COALESCE_MAX_DEPTH"
DEBUG_TRACE_ENV = "COALESCE_DEBUG_TRACE"

DEFAULT_MAX_DEPTH = 128

# interpreter frames one tree level costs (eval_node, dispatch, rule, args)
_FRAMES_PER_LEVEL = 4
# frames left over for the caller and for user callables
_STACK_HEADROOM = 200

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"", "0", "false", "no", "off"})

@dataclass(frozen=True)
class EvalOptions:
    """Knobs for a single `evaluate` call.

    `max_depth` bounds tree depth so an over-deep (or pathological) tree fails
    with `MalformedTree` instead of exhausting the interpreter stack. The
    evaluator never goes deeper than `max_depth_ceiling()`, whatever is asked.
    `debug_trace` logs node entry/exit at DEBUG level.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    debug_trace: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ConfigurationError(f"max_depth must be an int, got {type(self.max_depth).__name__}")

        if self.max_depth < 1:
            raise ConfigurationError(f"max_depth must be >= 1, got {self.max_depth}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]]=None) -> EvalOptions:
        env = os.environ if environ is None else environ

        max_depth = DEFAULT_MAX_DEPTH
        raw_depth = env.get(MAX_DEPTH_ENV)

        if raw_depth is not None and raw_depth.strip():
            try:
                max_depth = int(raw_depth.strip())
            except ValueError:
                raise ConfigurationError(f"{MAX_DEPTH_ENV} must be an integer, got {raw_depth!r}") from None

        return cls(max_depth=max_depth, debug_trace=_env_flag(env, DEBUG_TRACE_ENV))

def max_depth_ceiling() -> int:
    """Deepest tree the current recursion limit can evaluate without `RecursionError`."""
    return max(1, (sys.getrecursionlimit() - _STACK_HEADROOM) // _FRAMES_PER_LEVEL)

def _env_flag(env: Mapping[str, str], name: str) -> bool:
    raw = env.get(name)
    if raw is None:
        return False

    val = raw.strip().lower()

    if val in _TRUTHY:
        return True
    if val in _FALSY:
        return False

    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")

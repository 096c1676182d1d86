from __future__ import annotations

from typing import Any

from ..types import CallError, Outcome, Raised, Success

def is_null(value: Any) -> bool:
    return value is None

def truthiness(value: Any) -> Outcome:
    """Truth test as an outcome; a raising `__bool__`/`__len__` is a call failure."""
    try:
        truth = bool(value)
    except Exception as exc:
        return Raised(CallError(exc, f"truth test failed: {type(exc).__name__}: {exc}"))

    return Success(truth)

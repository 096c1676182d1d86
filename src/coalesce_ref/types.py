from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, NoReturn, Optional
from typing_extensions import TypeAlias, TypeGuard

# ---------- Errors ----------

class CoalesceError(Exception):
    """Runtime error raised inside an expression; recoverable by `???`."""
    meta: Optional[object]

    def __init__(self, message: str):
        super().__init__(message)
        self.meta = None

    def __str__(self) -> str:
        msg = super().__str__()

        meta = getattr(self, "meta", None)
        if meta is None:
            return msg

        line = getattr(meta, "line", None)
        col = getattr(meta, "column", None)

        if line is None:
            return msg

        if col is None:
            return f"{msg} (line {line})"

        return f"{msg} (line {line}, col {col})"

    def clone(self) -> CoalesceError:
        """Fresh instance with the same class, args, attributes and cause."""
        cls = type(self)
        dup = cls.__new__(cls, *self.args)
        dup.args = self.args
        dup.__dict__.update(self.__dict__)
        dup.__cause__ = self.__cause__
        return dup

class EvalNameError(CoalesceError):
    def __init__(self, name: str):
        super().__init__(f"Name '{name}' not found")
        self.name = name

class CallError(CoalesceError):
    """Invocation of a callable signaled failure; `cause` is what it raised."""

    def __init__(self, cause: BaseException, message: Optional[str] = None):
        super().__init__(message if message is not None else f"{type(cause).__name__}: {cause}")
        self.cause = cause
        self.__cause__ = cause

class MalformedTree(Exception):
    """Precondition violation in the expression tree itself.

    Never represented as a `Raised` outcome: a broken tree is a bug in whatever
    produced it, so it must not be silently coalesced into a fallback.
    """
    def __init__(self, message: str, meta: Optional[object] = None):
        super().__init__(message)
        self.meta = meta

    def __str__(self) -> str:
        msg = super().__str__()
        line = getattr(self.meta, "line", None)
        if line is None:
            return msg
        return f"{msg} (line {line}, col {getattr(self.meta, 'column', '?')})"

class ConfigurationError(Exception):
    pass

def same_exception(lhs: Optional[BaseException], rhs: Optional[BaseException]) -> bool:
    """Structural equivalence for exceptions carried by outcomes."""
    if lhs is rhs:
        return True

    if lhs is None or rhs is None:
        return False

    if type(lhs) is not type(rhs) or lhs.args != rhs.args:
        return False

    if isinstance(lhs, CallError) and isinstance(rhs, CallError):
        return same_exception(lhs.cause, rhs.cause)

    return True

# ---------- Outcome ----------

@dataclass(frozen=True, eq=False)
class Success:
    value: Any

    def unwrap(self) -> Any:
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Success):
            return NotImplemented
        return self.value is other.value or self.value == other.value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Success({self.value!r})"

@dataclass(frozen=True, eq=False)
class Raised:
    exception: Exception

    def unwrap(self) -> NoReturn:
        raise self.exception

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Raised):
            return NotImplemented
        return same_exception(self.exception, other.exception)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Raised({type(self.exception).__name__}: {self.exception})"

Outcome: TypeAlias = Success | Raised

Environment: TypeAlias = Mapping[str, Any]

def is_success(outcome: Outcome) -> TypeGuard[Success]:
    return isinstance(outcome, Success)

def is_raised(outcome: Outcome) -> TypeGuard[Raised]:
    return isinstance(outcome, Raised)

"""Reference evaluator for the exception-coalesce (`???`) operator and its siblings."""
from __future__ import annotations

import logging

from .compose import chain_operands, coalesce_chain, elvis_chain, fold_right, null_chain
from .config import EvalOptions
from .evaluator import eval_expr, evaluate
from .lower import lower
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
)
from .tracing import CountingCallable, EvalTrace
from .types import (
    CallError,
    CoalesceError,
    ConfigurationError,
    EvalNameError,
    MalformedTree,
    Outcome,
    Raised,
    Success,
)

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("coalesce_ref").addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "Call",
    "CallError",
    "CoalesceError",
    "ConfigurationError",
    "CountingCallable",
    "EvalNameError",
    "EvalOptions",
    "EvalTrace",
    "ExceptionCoalesce",
    "Literal",
    "MalformedTree",
    "Node",
    "NullCoalesce",
    "Outcome",
    "Raise",
    "Raised",
    "ShortTernary",
    "Success",
    "Ternary",
    "VariableRef",
    "chain_operands",
    "coalesce_chain",
    "elvis_chain",
    "eval_expr",
    "evaluate",
    "fold_right",
    "lower",
    "null_chain",
]

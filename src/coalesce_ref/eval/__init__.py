"""Per-node evaluation rules for the coalesce evaluator."""

__all__ = [
    "chains",
    "control",
    "expr",
    "helpers",
]

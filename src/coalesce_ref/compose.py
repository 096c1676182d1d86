from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Type

from .nodes import ExceptionCoalesce, Node, NullCoalesce, ShortTernary, is_node
from .types import MalformedTree

BinaryKind = Type[ExceptionCoalesce] | Type[NullCoalesce] | Type[ShortTernary]

def fold_right(kind: BinaryKind, operands: Sequence[Node], meta: Optional[object]=None) -> Node:
    """Fold `a, b, c` into `kind(a, kind(b, c))`."""
    if len(operands) < 2:
        raise MalformedTree(f"{kind.__name__} chain needs at least two operands, got {len(operands)}", meta)

    for operand in operands:
        if not is_node(operand):
            raise MalformedTree(f"{kind.__name__} operand must be an expression node, got {type(operand).__name__}", meta)

    acc = operands[-1]

    for operand in reversed(operands[:-1]):
        acc = kind(operand, acc, meta=meta)

    return acc

def chain_operands(node: Node) -> List[Node]:
    """Flatten a right-nested chain of one coalesce-family kind.

    Only the right spine is followed: a parenthesised group on the left is a
    distinct operand and stays intact.
    """
    if not isinstance(node, (ExceptionCoalesce, NullCoalesce, ShortTernary)):
        return [node]

    kind = type(node)
    out: List[Node] = []
    cur: Node = node

    while type(cur) is kind:
        out.append(cur.lhs)  # type: ignore[union-attr]
        cur = cur.rhs  # type: ignore[union-attr]

    out.append(cur)
    return out

def _chain_builder(kind: BinaryKind) -> Callable[..., Node]:
    def build(*operands: Node, meta: Optional[object]=None) -> Node:
        return fold_right(kind, operands, meta)

    build.__name__ = f"{kind.__name__}_chain"
    build.__doc__ = f"Build a right-associative {kind.__name__} chain from two or more operands."
    return build

coalesce_chain = _chain_builder(ExceptionCoalesce)
null_chain = _chain_builder(NullCoalesce)
elvis_chain = _chain_builder(ShortTernary)

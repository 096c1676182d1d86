"""Lowering from a front end's lark parse tree into evaluator nodes.

The parser itself lives elsewhere; this pass pins down the shape it must hand
over. Coalesce-family chains may arrive flat (`a ??? b ??? c` as one rule with
interleaved operator tokens) and are folded right-associatively here, so the
evaluator only ever sees binary nodes.
"""
from __future__ import annotations

from typing import Any, FrozenSet, List, Optional

from lark import Token, Transformer, Tree, v_args
from lark.exceptions import VisitError

from .compose import fold_right
from .nodes import (
    Call,
    ExceptionCoalesce,
    Literal,
    Node,
    NullCoalesce,
    ShortTernary,
    Ternary,
    VariableRef,
    is_node,
)
from .tree import ParseNode, is_token, source_pos, token_kind
from .types import MalformedTree

_CALL_PUNCT = frozenset({'(', ')', ','})
_GROUP_PUNCT = frozenset({'(', ')'})
_TERNARY_PUNCT = frozenset({'?', ':'})

def lower(tree: ParseNode) -> Node:
    """Lower a lark tree (or a lone token) into an evaluator node."""
    if is_token(tree):
        tree = Tree('group', [tree])

    try:
        result = _Lowerer().transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, MalformedTree):
            raise exc.orig_exc from None
        raise

    if not is_node(result):
        raise MalformedTree(f"Lowering produced {type(result).__name__}, not an expression node")

    return result

def _operands(kind: str, children: List[Any], allowed_tokens: FrozenSet[str], meta: Optional[object]) -> List[Node]:
    out: List[Node] = []

    for child in children:
        if is_node(child):
            out.append(child)
            continue

        if is_token(child) and child.value in allowed_tokens:
            continue

        if is_token(child):
            raise MalformedTree(f"Unexpected token {token_kind(child)}:{child.value!r} in {kind}", source_pos(child) or meta)

        raise MalformedTree(f"Unexpected child {type(child).__name__} in {kind}", meta)

    return out

def _number(text: str) -> int | float:
    try:
        return int(text)
    except ValueError:
        return float(text)

def _unquote(raw: str) -> str:
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ('"', "'"):
        return raw[1:-1]

    return raw

class _Lowerer(Transformer):
    # ---- tokens ----

    def NUMBER(self, tok: Token) -> Node:
        try:
            value = _number(tok.value)
        except ValueError:
            raise MalformedTree(f"Bad number literal {tok.value!r}", source_pos(tok)) from None
        return Literal(value, meta=source_pos(tok))

    def STRING(self, tok: Token) -> Node:
        return Literal(_unquote(tok.value), meta=source_pos(tok))

    def TRUE(self, tok: Token) -> Node:
        return Literal(True, meta=source_pos(tok))

    def FALSE(self, tok: Token) -> Node:
        return Literal(False, meta=source_pos(tok))

    def NULL(self, tok: Token) -> Node:
        return Literal(None, meta=source_pos(tok))

    def NAME(self, tok: Token) -> Node:
        return VariableRef(str(tok.value), meta=source_pos(tok))

    # ---- rules ----

    @v_args(meta=True)
    def literal(self, meta: Any, children: List[Any]) -> Node:
        if len(children) != 1 or not isinstance(children[0], Literal):
            raise MalformedTree(f"literal expects one literal token, got {len(children)} children", source_pos(meta))
        return children[0]

    @v_args(meta=True)
    def var(self, meta: Any, children: List[Any]) -> Node:
        if len(children) != 1 or not isinstance(children[0], VariableRef):
            raise MalformedTree("var expects exactly one NAME token", source_pos(meta))
        return children[0]

    @v_args(meta=True)
    def group(self, meta: Any, children: List[Any]) -> Node:
        pos = source_pos(meta)
        operands = _operands('group', children, _GROUP_PUNCT, pos)

        if len(operands) != 1:
            raise MalformedTree(f"group expects one expression, got {len(operands)}", pos)

        return operands[0]

    @v_args(meta=True)
    def call(self, meta: Any, children: List[Any]) -> Node:
        pos = source_pos(meta)
        operands = _operands('call', children, _CALL_PUNCT, pos)

        if not operands:
            raise MalformedTree("call requires a callee", pos)

        callee, *args = operands
        return Call(callee, tuple(args), meta=pos)

    @v_args(meta=True)
    def catch_coalesce(self, meta: Any, children: List[Any]) -> Node:
        pos = source_pos(meta)
        return fold_right(ExceptionCoalesce, _operands('catch_coalesce', children, frozenset({'???'}), pos), pos)

    @v_args(meta=True)
    def nullish(self, meta: Any, children: List[Any]) -> Node:
        pos = source_pos(meta)
        return fold_right(NullCoalesce, _operands('nullish', children, frozenset({'??'}), pos), pos)

    @v_args(meta=True)
    def elvis(self, meta: Any, children: List[Any]) -> Node:
        pos = source_pos(meta)
        return fold_right(ShortTernary, _operands('elvis', children, frozenset({'?:'}), pos), pos)

    @v_args(meta=True)
    def ternary(self, meta: Any, children: List[Any]) -> Node:
        pos = source_pos(meta)
        operands = _operands('ternary', children, _TERNARY_PUNCT, pos)

        if len(operands) != 3:
            raise MalformedTree(f"ternary expects 3 operands, got {len(operands)}", pos)

        cond, then_branch, else_branch = operands
        return Ternary(cond, then_branch, else_branch, meta=pos)

    def __default__(self, data: Any, children: List[Any], meta: Any) -> Any:
        raise MalformedTree(f"Unknown node: {data}", source_pos(meta))

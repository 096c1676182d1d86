"""Shared helpers for inspecting lark parse trees handed over by a front end."""
from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Optional
from typing_extensions import TypeAlias, TypeGuard

from lark import Token, Tree

ParseNode: TypeAlias = Tree | Token

def is_token(node: Any) -> TypeGuard[Token]:
    return isinstance(node, Token)

def token_kind(node: Any) -> Optional[str]:
    if not is_token(node):
        return None
    return str(node.type)

def source_pos(obj: Any) -> Optional[SimpleNamespace]:
    """Line/column of a token or lark `Meta`, or None when positions weren't kept."""
    if obj is None or getattr(obj, "empty", False):
        return None

    line = getattr(obj, "line", None)
    if line is None:
        return None

    return SimpleNamespace(line=line, column=getattr(obj, "column", None))

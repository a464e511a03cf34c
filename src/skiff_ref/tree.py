"""Shared helpers for working with the lark Tree/Token nodes the parser emits."""
from __future__ import annotations

from typing import Any, List, Optional, Union

from lark import Token, Tree
from lark.tree import Meta
from typing_extensions import TypeAlias, TypeGuard

Node: TypeAlias = Union[Tree, Token]


def make_meta(line: int, column: int) -> Meta:
    meta = Meta()
    meta.line = line
    meta.column = column
    meta.empty = False
    return meta

def is_tree(node: Any) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Any) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Any) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Any) -> List[Node]:
    if not is_tree(node):
        return []

    children = getattr(node, "children", None)
    if children is None:
        return []

    return list(children)

def node_meta(node: Any) -> Optional[Meta]:
    if is_tree(node):
        meta = node.meta
        return None if getattr(meta, "empty", True) else meta

    if is_token(node) and node.line is not None:
        return make_meta(node.line, node.column)

    return None

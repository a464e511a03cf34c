from __future__ import annotations

from typing import Callable, Dict

from ..runtime import Frame, SkfArray, SkfObject, SkfValue
from ..tree import Node, Tree, tree_children
from .common import token_string

EvalFunc = Callable[[Node, Frame], SkfValue]

def eval_array(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfArray:
    return SkfArray([eval_func(c, frame) for c in n.children])

def eval_object(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfObject:
    """Build a record literal; later duplicate keys overwrite earlier ones."""
    slots: Dict[str, SkfValue] = {}

    for item in tree_children(n):
        key_tok, value_node = item.children
        key = token_string(key_tok, frame).value
        slots[key] = eval_func(value_node, frame)

    return SkfObject(slots)

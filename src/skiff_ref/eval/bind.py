from __future__ import annotations

from typing import Callable

from ..runtime import NOTHING, Frame, SkfValue
from ..tree import Node, Tree
from .common import expect_ident_token

EvalFunc = Callable[[Node, Frame], SkfValue]

def eval_var_decl(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfValue:
    """`var name [= init];` always binds in the current frame."""
    name = expect_ident_token(n.children[0], "Variable name")
    value = eval_func(n.children[1], frame) if len(n.children) > 1 else NOTHING
    frame.define(name, value)

    return value

def eval_assign(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfValue:
    """`name = expr` rebinds the nearest existing binding; it never declares."""
    name_node, value_node = n.children
    name = expect_ident_token(name_node, "Assignment target")
    value = eval_func(value_node, frame)

    return frame.set(name, value)

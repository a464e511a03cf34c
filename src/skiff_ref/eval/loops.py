from __future__ import annotations

from typing import Callable

from ..runtime import NOTHING, Frame, SkfBool, SkfValue, SkiffTypeMismatch
from ..tree import Node, Tree
from ..types import type_label

EvalFunc = Callable[[Node, Frame], SkfValue]

def eval_condition(node: Node, frame: Frame, eval_func: EvalFunc, context: str) -> bool:
    value = eval_func(node, frame)

    if not isinstance(value, SkfBool):
        raise SkiffTypeMismatch(f"{context} expects a boolean condition, got {type_label(value)}")

    return value.value

def eval_if_stmt(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfValue:
    cond, then_body, else_body = n.children

    if eval_condition(cond, frame, eval_func, "if"):
        return eval_func(then_body, frame)

    return eval_func(else_body, frame)

def eval_while_stmt(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfValue:
    cond, body = n.children

    while eval_condition(cond, frame, eval_func, "while"):
        eval_func(body, frame)

    return NOTHING

from __future__ import annotations

from typing import Any, Callable, List

from ..runtime import Frame, SkfValue, call_value, ensure_callable
from ..tree import Node, Tree, tree_children, tree_label
from .mutation import get_item

EvalFunc = Callable[[Node, Frame], SkfValue]

def eval_args_node(args_node: Any, frame: Frame, eval_func: EvalFunc) -> List[SkfValue]:
    """Evaluate call arguments left to right in the caller's frame."""
    if tree_label(args_node) != 'args':
        return []

    return [eval_func(n, frame) for n in tree_children(args_node)]

def eval_call(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfValue:
    callee_node, args_node = n.children
    callee = ensure_callable(eval_func(callee_node, frame))
    args = eval_args_node(args_node, frame, eval_func)

    return call_value(callee, args, frame)

def eval_method_call(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfValue:
    """`recv.name(args)`: look the member up on `recv`, then call it with `recv` as receiver."""
    recv_node, key_node, args_node = n.children
    recv = eval_func(recv_node, frame)
    key = eval_func(key_node, frame)
    callee = ensure_callable(get_item(recv, key))
    args = eval_args_node(args_node, frame, eval_func)

    return call_value(callee, args, frame, receiver=recv)

from __future__ import annotations

from typing import Any, Callable, List

from ..runtime import NOTHING, Frame, SkfFn, SkfValue, SkiffRuntimeError
from ..tree import Node, Tree, tree_children, tree_label
from .common import expect_ident_token as _expect_ident_token

EvalFunc = Callable[[Node, Frame], SkfValue]

def extract_param_names(params_node: Any, context: str="parameter list") -> List[str]:
    if params_node is None:
        return []

    if tree_label(params_node) != 'paramlist':
        raise SkiffRuntimeError(f"Malformed {context}")

    return [_expect_ident_token(p, "Parameter") for p in tree_children(params_node)]

def eval_fn_def(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfValue:
    """Bind `fun name(...)` in the current frame, closing over that same frame."""
    name_node, params_node, body_node = n.children
    name = _expect_ident_token(name_node, "Function name")
    params = extract_param_names(params_node, context="function definition")

    # closure is the defining frame itself, shared with later sibling definitions
    frame.define(name, SkfFn(name=name, params=params, body=body_node, frame=frame))

    return NOTHING

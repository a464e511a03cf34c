from __future__ import annotations

from typing import Callable, List

from ..runtime import NOTHING, Frame, SkfValue
from ..tree import Node, Tree

EvalFunc = Callable[[Node, Frame], SkfValue]

def eval_program(children: List[Node], frame: Frame, eval_func: EvalFunc) -> SkfValue:
    """Run statements in order in `frame`, returning the last value."""
    result: SkfValue = NOTHING

    for child in children:
        result = eval_func(child, frame)

    return result

def eval_block(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfValue:
    """Run a braced block in a fresh frame enclosing `frame`."""
    return eval_program(n.children, frame.child(), eval_func)

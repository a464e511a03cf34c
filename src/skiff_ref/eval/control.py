from __future__ import annotations

from typing import Any, Callable

from ..runtime import NOTHING, Frame, SkfValue, SkiffReturnSignal
from ..tree import Node
from ..utils import stringify

EvalFunc = Callable[[Node, Frame], SkfValue]

def eval_return_stmt(children: list[Any], frame: Frame, eval_func: EvalFunc) -> SkfValue:
    value = eval_func(children[0], frame) if children else NOTHING

    raise SkiffReturnSignal(value)

def eval_print_stmt(children: list[Any], frame: Frame, eval_func: EvalFunc) -> SkfValue:
    value = eval_func(children[0], frame)
    print(stringify(value), file=frame.out)

    return value

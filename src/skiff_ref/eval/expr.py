from __future__ import annotations

import operator
from typing import Callable, Dict

from lark import Token

from ..runtime import Frame, SkfBool, SkfNumber, SkfValue, SkiffRuntimeError
from ..tree import Node, Tree
from ..utils import wrap_i32
from .common import require_number

EvalFunc = Callable[[Node, Frame], SkfValue]

_ARITHMETIC: Dict[str, Callable[[int, int], int]] = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
}

_COMPARISON: Dict[str, Callable[[int, int], bool]] = {
    '==': operator.eq,
    '!=': operator.ne,
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
}

def apply_binary_operator(op: str, lhs: SkfValue, rhs: SkfValue) -> SkfValue:
    """Number-only operators; no coercion between variants."""
    a = require_number(lhs, op)
    b = require_number(rhs, op)

    arith = _ARITHMETIC.get(op)
    if arith is not None:
        return SkfNumber(wrap_i32(arith(a, b)))

    compare = _COMPARISON.get(op)
    if compare is not None:
        return SkfBool(compare(a, b))

    raise SkiffRuntimeError(f"Unknown operator '{op}'")

def eval_binary(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfValue:
    lhs_node, op, rhs_node = n.children
    lhs = eval_func(lhs_node, frame)
    rhs = eval_func(rhs_node, frame)
    op_value = op.value if isinstance(op, Token) else str(op)

    return apply_binary_operator(op_value, lhs, rhs)

def eval_neg(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfNumber:
    value = eval_func(n.children[0], frame)

    return SkfNumber(wrap_i32(-require_number(value, '-')))

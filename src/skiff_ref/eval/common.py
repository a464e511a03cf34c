from __future__ import annotations

from typing import Any, Optional

from lark import Token

from ..runtime import Frame, SkfNumber, SkfString, SkiffRuntimeError, SkiffTypeMismatch
from ..tree import is_token
from ..types import SkfValue, type_label

def token_kind(node: Any) -> Optional[str]:
    if not is_token(node):
        return None
    tok: Token = node
    return str(tok.type)

def expect_ident_token(node: Any, context: str) -> str:
    if is_token(node) and token_kind(node) == 'IDENT':
        return str(node.value)

    raise SkiffRuntimeError(f"{context} must be an identifier")

def require_number(value: SkfValue, op: str) -> int:
    if not isinstance(value, SkfNumber):
        raise SkiffTypeMismatch(f"Operator '{op}' expects number operands, got {type_label(value)}")

    return value.value

def token_number(token: Token, _: Frame) -> SkfNumber:
    return SkfNumber(int(token.value))

def token_string(token: Token, _: Frame) -> SkfString:
    return SkfString(str(token.value))

"""Built-in host functions (println, typeof) registered via skiff_ref.runtime."""

from __future__ import annotations

from typing import List, Optional

from .runtime import register_stdlib, Frame, NOTHING, SkfNothing, SkfString, SkfValue
from .types import SkiffTypeMismatch, type_label
from .utils import stringify

@register_stdlib("println")
def std_println(frame: Frame, _recv: Optional[SkfValue], args: List[SkfValue]) -> SkfNothing:
    rendered = [stringify(arg) for arg in args]
    print(*rendered, file=frame.out)
    return NOTHING

@register_stdlib("typeof")
def std_typeof(_frame: Frame, _recv: Optional[SkfValue], args: List[SkfValue]) -> SkfString:
    if len(args) != 1:
        raise SkiffTypeMismatch(f"typeof expects exactly one argument; got {len(args)}")

    return SkfString(type_label(args[0]))

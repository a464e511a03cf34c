from __future__ import annotations

from typing import Callable

from ..runtime import (
    Frame,
    SkfArray,
    SkfNumber,
    SkfObject,
    SkfString,
    SkfValue,
    SkiffIndexOutOfRange,
    SkiffInvalidAccess,
    SkiffInvalidIndex,
    SkiffNoSuchProperty,
    array_member,
)
from ..tree import Node, Tree
from ..types import type_label

EvalFunc = Callable[[Node, Frame], SkfValue]

def _array_index(items: list, index: int) -> int:
    if index < 0:
        raise SkiffInvalidIndex(f"Negative array index {index}")

    if index >= len(items):
        raise SkiffIndexOutOfRange(index, len(items))

    return index

def _invalid_access(base: SkfValue, key: SkfValue) -> SkiffInvalidAccess:
    return SkiffInvalidAccess(f"Cannot access {type_label(base)} with {type_label(key)} key")

def get_item(base: SkfValue, key: SkfValue) -> SkfValue:
    """`base[key]` / `base.name` for arrays and objects."""
    match base, key:
        case SkfArray(items=items), SkfNumber(value=idx):
            return items[_array_index(items, idx)]
        case SkfArray(), SkfString(value=name):
            return array_member(base, name)
        case SkfObject(slots=slots), SkfString(value=name):
            if name not in slots:
                raise SkiffNoSuchProperty(name)
            return slots[name]
        case _:
            raise _invalid_access(base, key)

def set_item(base: SkfValue, key: SkfValue, value: SkfValue) -> SkfValue:
    """`base[key] = value`: replace an existing array slot or upsert an object field."""
    match base, key:
        case SkfArray(items=items), SkfNumber(value=idx):
            items[_array_index(items, idx)] = value
            return value
        case SkfObject(slots=slots), SkfString(value=name):
            slots[name] = value
            return value
        case _:
            raise _invalid_access(base, key)

def eval_get(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfValue:
    base_node, key_node = n.children
    base = eval_func(base_node, frame)
    key = eval_func(key_node, frame)

    return get_item(base, key)

def eval_set(n: Tree, frame: Frame, eval_func: EvalFunc) -> SkfValue:
    base_node, key_node, value_node = n.children
    base = eval_func(base_node, frame)
    key = eval_func(key_node, frame)
    value = eval_func(value_node, frame)

    return set_item(base, key, value)

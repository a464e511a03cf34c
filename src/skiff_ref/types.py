from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TextIO, Tuple, TypeVar
from typing_extensions import Protocol, TypeAlias, TypeGuard

from .tree import Node

# ---------- Value Model (Skf*) ----------
#
# Scalars are frozen: sharing one instance between bindings is
# indistinguishable from copying it. Arrays and objects compare by identity;
# every alias sees the same list/dict.

@dataclass(frozen=True)
class SkfNothing:
    pass

@dataclass(frozen=True)
class SkfNumber:
    value: int

@dataclass(frozen=True)
class SkfString:
    value: str

@dataclass(frozen=True)
class SkfBool:
    value: bool

@dataclass(eq=False)
class SkfArray:
    items: List['SkfValue']

@dataclass(eq=False)
class SkfObject:
    slots: Dict[str, 'SkfValue']

@dataclass(eq=False)
class SkfFn:
    name: str
    params: List[str]
    body: Node = field(repr=False)
    frame: 'Frame' = field(repr=False)  # closure frame

R_contra = TypeVar("R_contra", bound="SkfValue", contravariant=True)

class NativeFn(Protocol[R_contra]):
    def __call__(self, frame: 'Frame', recv: Optional[R_contra], args: List['SkfValue']) -> 'SkfValue': ...

@dataclass(eq=False)
class SkfNativeFn:
    """Host callable. `bound` pins the receiver (e.g. `arr.push`)."""
    name: str
    fn: NativeFn['SkfValue']
    bound: Optional['SkfValue'] = None

SkfValue: TypeAlias = (
    SkfNothing
    | SkfNumber
    | SkfString
    | SkfBool
    | SkfNativeFn
    | SkfFn
    | SkfArray
    | SkfObject
)

NOTHING = SkfNothing()

class Frame:
    """One lexical scope: a name table plus a link to the enclosing frame.

    `depth` counts active function calls, not lexical nesting.
    """
    def __init__(self, parent: Optional['Frame']=None, source: Optional[str]=None,
                 out: Optional[TextIO]=None, depth: Optional[int]=None):
        self.parent = parent
        self.vars: Dict[str, SkfValue] = {}
        self.source: Optional[str]
        self.out: TextIO

        if source is not None:
            self.source = source
        elif parent is not None:
            self.source = parent.source
        else:
            self.source = None

        if out is not None:
            self.out = out
        elif parent is not None:
            self.out = parent.out
        else:
            self.out = sys.stdout

        if depth is not None:
            self.depth = depth
        else:
            self.depth = parent.depth if parent is not None else 0

    def define(self, name: str, val: SkfValue) -> None:
        self.vars[name] = val

    def get(self, name: str) -> SkfValue:
        if name in self.vars:
            return self.vars[name]

        if self.parent is not None:
            return self.parent.get(name)

        raise SkiffUnknownName(name)

    def set(self, name: str, val: SkfValue) -> SkfValue:
        if name in self.vars:
            self.vars[name] = val
            return val

        if self.parent is not None:
            return self.parent.set(name, val)

        raise SkiffUnknownName(name)

    def child(self) -> 'Frame':
        return Frame(parent=self)

# ---------- Exceptions (keep Skiff* canonical) ----------

class SkiffRuntimeError(Exception):
    kind = "RuntimeError"
    skf_meta: Optional[object]

    def __init__(self, message: str):
        super().__init__(message)
        self.skf_meta = None

    def __str__(self) -> str:
        msg = super().__str__()

        meta = getattr(self, "skf_meta", None)
        if meta is None:
            return msg

        line = getattr(meta, "line", None)
        col = getattr(meta, "column", None)

        if line is None:
            return msg

        if col is None:
            return f"{msg} (line {line})"

        return f"{msg} (line {line}, col {col})"

class SkiffUnknownName(SkiffRuntimeError):
    kind = "UnknownName"

    def __init__(self, name: str):
        super().__init__(f"Name '{name}' not found")
        self.name = name

class SkiffTypeMismatch(SkiffRuntimeError):
    kind = "TypeMismatch"

class SkiffNotCallable(SkiffRuntimeError):
    kind = "NotCallable"

    def __init__(self, value: SkfValue):
        super().__init__(f"{type_label(value)} value is not callable")
        self.value = value

class SkiffIndexOutOfRange(SkiffRuntimeError):
    kind = "IndexOutOfRange"

    def __init__(self, index: int, length: int):
        super().__init__(f"Array index {index} out of range for length {length}")
        self.index = index
        self.length = length

class SkiffInvalidIndex(SkiffRuntimeError):
    kind = "InvalidIndex"

class SkiffNoSuchProperty(SkiffRuntimeError):
    kind = "NoSuchProperty"

    def __init__(self, key: str):
        super().__init__(f"No property named '{key}'")
        self.key = key

class SkiffInvalidAccess(SkiffRuntimeError):
    kind = "InvalidAccess"

class SkiffResourceExhausted(SkiffRuntimeError):
    kind = "ResourceExhausted"

class SkiffReturnSignal(Exception):
    """Internal control-flow exception used to implement `return`.

    Not a SkiffRuntimeError: only the call boundary may consume it.
    """
    def __init__(self, value: SkfValue):
        self.value = value

_TYPE_LABELS: Dict[type, str] = {
    SkfNothing: "nothing",
    SkfNumber: "number",
    SkfString: "string",
    SkfBool: "boolean",
    SkfNativeFn: "native",
    SkfFn: "function",
    SkfArray: "array",
    SkfObject: "object",
}

_SKF_VALUE_TYPES: Tuple[type, ...] = tuple(_TYPE_LABELS)

def type_label(value: SkfValue) -> str:
    return _TYPE_LABELS.get(type(value), type(value).__name__)

def is_skf_value(value: object) -> TypeGuard[SkfValue]:
    return isinstance(value, _SKF_VALUE_TYPES)

MemberGetter = Callable[[SkfArray], SkfValue]

class Builtins:
    array_members: Dict[str, MemberGetter] = {}
    stdlib_functions: Dict[str, SkfNativeFn] = {}

from __future__ import annotations

import importlib
import logging
from typing import List, Optional, TextIO

from .types import (
    NOTHING,
    Builtins,
    Frame,
    MemberGetter,
    NativeFn,
    SkfArray,
    SkfBool,
    SkfFn,
    SkfNativeFn,
    SkfNothing,
    SkfNumber,
    SkfObject,
    SkfString,
    SkfValue,
    SkiffIndexOutOfRange,
    SkiffInvalidAccess,
    SkiffInvalidIndex,
    SkiffNoSuchProperty,
    SkiffNotCallable,
    SkiffResourceExhausted,
    SkiffReturnSignal,
    SkiffRuntimeError,
    SkiffTypeMismatch,
    SkiffUnknownName,
    is_skf_value,
    type_label,
)
from .utils import max_call_depth

__all__ = [
    "NOTHING",
    "Frame",
    "SkfArray",
    "SkfBool",
    "SkfFn",
    "SkfNativeFn",
    "SkfNothing",
    "SkfNumber",
    "SkfObject",
    "SkfString",
    "SkfValue",
    "SkiffIndexOutOfRange",
    "SkiffInvalidAccess",
    "SkiffInvalidIndex",
    "SkiffNoSuchProperty",
    "SkiffNotCallable",
    "SkiffResourceExhausted",
    "SkiffReturnSignal",
    "SkiffRuntimeError",
    "SkiffTypeMismatch",
    "SkiffUnknownName",
    "array_member",
    "call_skffn",
    "call_value",
    "ensure_callable",
    "init_stdlib",
    "install_host_bindings",
    "make_root_frame",
    "register_array",
    "register_stdlib",
]

logger = logging.getLogger(__name__)

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_stdlib hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("skiff_ref.stdlib")
    _STDLIB_INITIALIZED = True

def register_array(name: str):
    def dec(fn: MemberGetter):
        Builtins.array_members[name] = fn
        return fn

    return dec

def register_stdlib(name: str):
    def dec(fn: NativeFn[SkfValue]):
        Builtins.stdlib_functions[name] = SkfNativeFn(name=name, fn=fn)
        return fn

    return dec

# ---------- Host bindings ----------

def install_host_bindings(frame: Frame) -> Frame:
    """Define every registered host function in `frame` (normally the root)."""
    init_stdlib()

    for name, native in Builtins.stdlib_functions.items():
        if name in frame.vars:
            logger.debug("Overwriting binding %s with host function", name)
        frame.define(name, native)

    logger.debug("Installed %d host bindings", len(Builtins.stdlib_functions))
    return frame

def make_root_frame(source: Optional[str]=None, out: Optional[TextIO]=None) -> Frame:
    return install_host_bindings(Frame(source=source, out=out))

# ---------- Array pseudo-members ----------

@register_array("length")
def _array_length(arr: SkfArray) -> SkfNumber:
    return SkfNumber(len(arr.items))

@register_array("push")
def _array_push_member(arr: SkfArray) -> SkfNativeFn:
    return SkfNativeFn(name="push", fn=_array_push, bound=arr)

def _array_push(_frame: Frame, recv: Optional[SkfValue], args: List[SkfValue]) -> SkfNothing:
    if not isinstance(recv, SkfArray):
        raise SkiffTypeMismatch(f"push expects an array receiver, got {type_label(recv) if recv is not None else 'none'}")

    recv.items.extend(args)
    return NOTHING

def array_member(arr: SkfArray, name: str) -> SkfValue:
    getter = Builtins.array_members.get(name)
    if getter is None:
        raise SkiffInvalidAccess(f"Array has no member '{name}'")

    return getter(arr)

# ---------- Call protocol ----------

def ensure_callable(callee: SkfValue) -> SkfValue:
    if not isinstance(callee, (SkfFn, SkfNativeFn)):
        raise SkiffNotCallable(callee)

    return callee

def call_value(callee: SkfValue, args: List[SkfValue], caller_frame: Frame, receiver: Optional[SkfValue]=None) -> SkfValue:
    """Invoke `callee` with already-evaluated `args`."""
    match callee:
        case SkfNativeFn(bound=bound):
            recv = bound if bound is not None else receiver
            return _ensure_skf_value(callee.fn(caller_frame, recv, args), callee.name)
        case SkfFn():
            return call_skffn(callee, args, caller_frame)
        case _:
            raise SkiffNotCallable(callee)

def call_skffn(fn: SkfFn, positional: List[SkfValue], caller_frame: Frame) -> SkfValue:
    """
    Call semantics:
    - the new frame encloses the closure frame, never the caller's
    - missing trailing arguments bind nothing; extras are ignored
    - no implicit return: falling off the end yields nothing
    """
    from .evaluator import eval_node  # local import to avoid cycle

    depth = caller_frame.depth + 1
    limit = max_call_depth()
    if depth > limit:
        raise SkiffResourceExhausted(f"Call depth limit of {limit} exceeded calling '{fn.name}'")

    callee_frame = Frame(parent=fn.frame, depth=depth)

    for idx, name in enumerate(fn.params):
        callee_frame.define(name, positional[idx] if idx < len(positional) else NOTHING)

    try:
        eval_node(fn.body, callee_frame)
    except SkiffReturnSignal as signal:
        return signal.value

    return NOTHING

def _ensure_skf_value(value: object, name: str) -> SkfValue:
    if value is None:
        return NOTHING
    if is_skf_value(value):
        return value
    raise SkiffRuntimeError(f"Host function '{name}' returned non-Skiff value {type(value).__name__}")

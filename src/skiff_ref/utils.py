from __future__ import annotations

import os as _os
from typing import Optional

from .types import (
    SkfValue,
    SkfArray,
    SkfBool,
    SkfFn,
    SkfNativeFn,
    SkfNothing,
    SkfNumber,
    SkfObject,
    SkfString,
)

DEFAULT_MAX_CALL_DEPTH = 10000

_TRUTHY_FLAGS = {"1", "true", "yes", "on"}


def wrap_i32(value: int) -> int:
    """Reduce `value` to the signed 32-bit range, two's complement."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def stringify(value: Optional[SkfValue]) -> str:
    """Render a value for print/println. Top-level strings are unquoted."""
    if isinstance(value, SkfString):
        return value.value

    return render(value)


def render(value: Optional[SkfValue]) -> str:
    match value:
        case None | SkfNothing():
            return "nothing"
        case SkfNumber(value=n):
            return str(n)
        case SkfString(value=s):
            return f'"{s}"'
        case SkfBool(value=b):
            return "true" if b else "false"
        case SkfArray(items=items):
            return "[" + ", ".join(render(v) for v in items) + "]"
        case SkfObject(slots=slots):
            return "{" + ", ".join(f"{k}: {render(v)}" for k, v in slots.items()) + "}"
        case SkfFn(name=name):
            return f"<fn {name}>"
        case SkfNativeFn(name=name):
            return f"<native fn {name}>"
        case _:
            return str(value)


def _env_flag(name: str) -> bool:
    return _os.environ.get(name, "").strip().lower() in _TRUTHY_FLAGS


def debug_py_trace_enabled() -> bool:
    """True when SKIFF_DEBUG_PY_TRACE asks for Python tracebacks on errors."""
    return _env_flag("SKIFF_DEBUG_PY_TRACE")


def max_call_depth() -> int:
    """Nested call limit from SKIFF_MAX_CALL_DEPTH; bad values use the default."""
    raw = _os.environ.get("SKIFF_MAX_CALL_DEPTH")
    if raw is None:
        return DEFAULT_MAX_CALL_DEPTH

    try:
        value = int(raw.strip())
    except ValueError:
        return DEFAULT_MAX_CALL_DEPTH

    return value if value > 0 else DEFAULT_MAX_CALL_DEPTH


def log_level_name(default: str = "WARNING") -> str:
    raw = _os.environ.get("SKIFF_LOG_LEVEL")
    return raw.strip().upper() if raw and raw.strip() else default

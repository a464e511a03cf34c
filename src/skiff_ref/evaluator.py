from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from lark import Token

from .runtime import (
    Frame,
    SkfBool,
    SkfValue,
    SkiffResourceExhausted,
    SkiffReturnSignal,
    SkiffRuntimeError,
    make_root_frame,
)
from .tree import Node, Tree, is_token, node_meta
from .utils import max_call_depth

from .eval.bind import eval_assign, eval_var_decl
from .eval.blocks import eval_block, eval_program
from .eval.chains import eval_call, eval_method_call
from .eval.common import token_number, token_string
from .eval.control import eval_print_stmt, eval_return_stmt
from .eval.expr import eval_binary, eval_neg
from .eval.fn import eval_fn_def
from .eval.loops import eval_if_stmt, eval_while_stmt
from .eval.mutation import eval_get, eval_set
from .eval.objects import eval_array, eval_object

logger = logging.getLogger(__name__)

EvalFunc = Callable[[Node, Frame], SkfValue]

# Python frames consumed per Skiff call, with slack; used to size the
# interpreter recursion limit for the configured call depth.
_PY_FRAMES_PER_CALL = 40


def _maybe_attach_location(exc: SkiffRuntimeError, node: Node) -> None:
    if getattr(exc, "_augmented", False):
        return

    meta = node_meta(node)

    if meta is not None and getattr(meta, "line", None) is not None:
        exc.skf_meta = meta
        exc._augmented = True  # type: ignore[attr-defined]

@contextmanager
def _recursion_headroom(depth: int) -> Iterator[None]:
    previous = sys.getrecursionlimit()
    wanted = depth * _PY_FRAMES_PER_CALL + 200

    if wanted > previous:
        sys.setrecursionlimit(wanted)

    try:
        yield
    finally:
        sys.setrecursionlimit(previous)

# ---------------- Public API ----------------

def execute(ast: Node, frame: Optional[Frame]=None) -> SkfValue:
    """
    Run a parsed program against `frame` (a fresh root frame with host
    bindings when omitted) and return the value of its last statement.

    Raises SkiffRuntimeError on failure. A `return` reaching the top level
    ends the program with its value.
    """
    if frame is None:
        frame = make_root_frame()

    logger.debug("Executing program (max call depth %d)", max_call_depth())

    try:
        with _recursion_headroom(max_call_depth()):
            return eval_node(ast, frame)
    except SkiffReturnSignal as signal:
        return signal.value
    except RecursionError:
        raise SkiffResourceExhausted("Evaluation recursion limit exceeded") from None

# ---------------- Core evaluator ----------------

def eval_node(n: Node, frame: Frame) -> SkfValue:
    try:
        return _eval_node_inner(n, frame)
    except SkiffRuntimeError as e:
        _maybe_attach_location(e, n)
        raise


def _eval_node_inner(n: Node, frame: Frame) -> SkfValue:
    if is_token(n):
        return _eval_token(n, frame)

    handler = _NODE_DISPATCH.get(n.data)
    if handler is not None:
        return handler(n, frame)

    raise SkiffRuntimeError(f"Unknown node: {n.data}")

# ---------------- Tokens ----------------

def _eval_token(t: Token, frame: Frame) -> SkfValue:
    handler = _TOKEN_DISPATCH.get(t.type)
    if handler:
        return handler(t, frame)

    if t.type == 'IDENT':
        return frame.get(t.value)

    raise SkiffRuntimeError(f"Unhandled token {t.type}:{t.value}")

# ---------------- Dispatch ----------------

_NODE_DISPATCH: dict[str, Callable[[Tree, Frame], SkfValue]] = {
    'stmtlist': lambda n, frame: eval_program(n.children, frame, eval_node),
    'block': lambda n, frame: eval_block(n, frame, eval_node),
    'exprstmt': lambda n, frame: eval_node(n.children[0], frame),
    'vardecl': lambda n, frame: eval_var_decl(n, frame, eval_node),
    'fndef': lambda n, frame: eval_fn_def(n, frame, eval_node),
    'returnstmt': lambda n, frame: eval_return_stmt(n.children, frame, eval_node),
    'printstmt': lambda n, frame: eval_print_stmt(n.children, frame, eval_node),
    'whilestmt': lambda n, frame: eval_while_stmt(n, frame, eval_node),
    'ifstmt': lambda n, frame: eval_if_stmt(n, frame, eval_node),
    'assign': lambda n, frame: eval_assign(n, frame, eval_node),
    'compare': lambda n, frame: eval_binary(n, frame, eval_node),
    'addexpr': lambda n, frame: eval_binary(n, frame, eval_node),
    'mulexpr': lambda n, frame: eval_binary(n, frame, eval_node),
    'neg': lambda n, frame: eval_neg(n, frame, eval_node),
    'array': lambda n, frame: eval_array(n, frame, eval_node),
    'object': lambda n, frame: eval_object(n, frame, eval_node),
    'call': lambda n, frame: eval_call(n, frame, eval_node),
    'methodcall': lambda n, frame: eval_method_call(n, frame, eval_node),
    'getitem': lambda n, frame: eval_get(n, frame, eval_node),
    'setitem': lambda n, frame: eval_set(n, frame, eval_node),
}

_TOKEN_DISPATCH: dict[str, Callable[[Token, Frame], SkfValue]] = {
    'NUMBER': token_number,
    'STRING': token_string,
    'TRUE': lambda _, __: SkfBool(True),
    'FALSE': lambda _, __: SkfBool(False),
}

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import Optional, TextIO

from .evaluator import execute
from .lexer_rd import LexError
from .parser_rd import ParseError, parse_source
from .runtime import Frame, SkfNothing, SkfValue, SkiffRuntimeError, make_root_frame
from .utils import debug_py_trace_enabled, log_level_name, render

logger = logging.getLogger(__name__)

def run(src: str, frame: Optional[Frame]=None, out: Optional[TextIO]=None) -> SkfValue:
    """Scan, parse and execute `src`; returns the program's final value."""
    ast = parse_source(src)
    logger.debug("Parsed %d top-level statements", len(ast.children))

    if frame is None:
        frame = make_root_frame(source=src, out=out)
    else:
        frame.source = src

    return execute(ast, frame)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else log_level_name()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

def report_error(exc: Exception) -> None:
    print(f"Error: {exc}", file=sys.stderr)

    if debug_py_trace_enabled() and isinstance(exc, SkiffRuntimeError):
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")

def main(argv: Optional[list[str]]=None) -> int:
    verbose = False
    show_result = False
    use_repl = False
    arg = None

    for token in (sys.argv[1:] if argv is None else argv):
        if token in ("-v", "--verbose"):
            verbose = True
            continue

        if token == "--show-result":
            show_result = True
            continue

        if token == "--repl":
            use_repl = True
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    _configure_logging(verbose)

    if use_repl:
        from .repl import repl
        repl()
        return 0

    source = _load_source(arg)

    try:
        result = run(source)
    except (LexError, ParseError, SkiffRuntimeError) as exc:
        report_error(exc)
        return 1

    if show_result and not isinstance(result, SkfNothing):
        print(render(result))

    return 0

if __name__ == "__main__":
    sys.exit(main())

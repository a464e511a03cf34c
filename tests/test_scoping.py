from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    SkiffUnknownName,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            var a = 1;
            { var a = 2; }
            a;
        """
        ),
        ("number", 1),
        None,
        id="block-shadow-does-not-leak",
    ),
    pytest.param(
        dedent(
            """\
            var a = 1;
            { a = 2; }
            a;
        """
        ),
        ("number", 2),
        None,
        id="block-assign-updates-outer",
    ),
    pytest.param(
        "{ var inner = 1; } inner;",
        None,
        SkiffUnknownName,
        id="block-local-gone-after-block",
    ),
    pytest.param(
        "b = 1;",
        None,
        SkiffUnknownName,
        id="assign-undeclared",
    ),
    pytest.param(
        "missing;",
        None,
        SkiffUnknownName,
        id="read-undeclared",
    ),
    pytest.param(
        "var a = 1; var a = 2; a;",
        ("number", 2),
        None,
        id="redeclare-same-scope",
    ),
    pytest.param(
        "var a; a;",
        ("nothing", None),
        None,
        id="declare-without-init",
    ),
    pytest.param(
        "var a = 3;",
        ("number", 3),
        None,
        id="declaration-yields-value",
    ),
    pytest.param(
        "var a = 1; a = 7;",
        ("number", 7),
        None,
        id="assignment-yields-value",
    ),
    pytest.param(
        "var a; var b; a = b = 4; a + b;",
        ("number", 8),
        None,
        id="assignment-right-assoc",
    ),
    pytest.param(
        dedent(
            """\
            fun f() { return g(); }
            fun g() { return 7; }
            f();
        """
        ),
        ("number", 7),
        None,
        id="closure-sees-later-sibling",
    ),
    pytest.param(
        dedent(
            """\
            var x = 1;
            fun get() { return x; }
            x = 5;
            get();
        """
        ),
        ("number", 5),
        None,
        id="closure-sees-later-update",
    ),
    pytest.param(
        dedent(
            """\
            var x = 1;
            fun f(x) { x = 10; return x; }
            f(3);
            x;
        """
        ),
        ("number", 1),
        None,
        id="param-shadows-global",
    ),
    pytest.param(
        dedent(
            """\
            fun inner() { return secret; }
            fun outer() { var secret = 1; return inner(); }
            outer();
        """
        ),
        None,
        SkiffUnknownName,
        id="no-dynamic-scope",
    ),
    pytest.param(
        dedent(
            """\
            var i = 0;
            var total = 0;
            while (i < 3) {
                var step = i;
                total = total + step;
                i = i + 1;
            }
            total;
        """
        ),
        ("number", 3),
        None,
        id="while-body-fresh-scope",
    ),
    pytest.param(
        dedent(
            """\
            var i = 0;
            while (i < 2) { var seen = i; i = i + 1; }
            seen;
        """
        ),
        None,
        SkiffUnknownName,
        id="while-body-local-gone",
    ),
    pytest.param(
        "for (var i = 0; i < 2; i = i + 1) {} i;",
        None,
        SkiffUnknownName,
        id="for-init-scoped-to-loop",
    ),
    pytest.param(
        dedent(
            """\
            var x = "outer";
            fun show() { return x; }
            fun run() { var x = "inner"; return show(); }
            run();
        """
        ),
        ("string", "outer"),
        None,
        id="lexical-not-dynamic",
    ),
    pytest.param(
        dedent(
            """\
            var seen = 0;
            if (true) { var seen = 5; }
            seen;
        """
        ),
        ("number", 0),
        None,
        id="if-body-fresh-scope",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_scoping_scenarios(source, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)

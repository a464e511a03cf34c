from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    SkfNativeFn,
    SkiffIndexOutOfRange,
    SkiffInvalidAccess,
    SkiffInvalidIndex,
    SkiffNoSuchProperty,
    SkiffTypeMismatch,
    run_program,
    run_runtime_case,
)

ARRAY_SCENARIOS = [
    pytest.param("[1, 2, 3];", ("array", [1, 2, 3]), None, id="array-literal"),
    pytest.param("[];", ("array", []), None, id="array-empty"),
    pytest.param("[1, 2,];", ("array", [1, 2]), None, id="array-trailing-comma"),
    pytest.param('[1, "a", true, [2]];', ("array", [1, "a", True, [2]]), None, id="array-mixed"),
    pytest.param("[10, 20][1];", ("number", 20), None, id="array-index"),
    pytest.param("[10, 20].length;", ("number", 2), None, id="array-length"),
    pytest.param('[10, 20]["length"];', ("number", 2), None, id="array-length-bracket"),
    pytest.param(
        "var a = [1, 2, 3]; var b = a; b.push(4); a.length;",
        ("number", 4),
        None,
        id="array-alias-push",
    ),
    pytest.param(
        "var a = [1, 2]; var b = a; b[0] = 9; a;",
        ("array", [9, 2]),
        None,
        id="array-alias-set",
    ),
    pytest.param(
        "fun add(arr) { arr.push(9); } var a = []; add(a); a;",
        ("array", [9]),
        None,
        id="array-passed-by-reference",
    ),
    pytest.param(
        "var a = [1, 2]; a[0] = 7;",
        ("number", 7),
        None,
        id="array-set-yields-value",
    ),
    pytest.param("var a = []; a.push(1);", ("nothing", None), None, id="push-yields-nothing"),
    pytest.param("var a = []; a.push(1, 2); a;", ("array", [1, 2]), None, id="push-many-in-order"),
    pytest.param("var a = [0]; a.push(); a;", ("array", [0]), None, id="push-nothing"),
    pytest.param(
        "var a = []; var p = a.push; p(5); a;",
        ("array", [5]),
        None,
        id="push-bound-to-array",
    ),
    pytest.param(
        "var a = []; var b = []; var o = {p: a.push}; o.p(1); [a.length, b.length];",
        ("array", [1, 0]),
        None,
        id="push-bound-receiver-wins",
    ),
    pytest.param(
        "var x = 1; var a = [x]; x = 2; a[0];",
        ("number", 1),
        None,
        id="scalars-copied-into-array",
    ),
    pytest.param(
        "var inner = [1]; var outer = [inner, inner]; outer[0].push(2); outer[1].length;",
        ("number", 2),
        None,
        id="nested-shared",
    ),
    pytest.param("[1][1];", None, SkiffIndexOutOfRange, id="index-out-of-range"),
    pytest.param("[][0];", None, SkiffIndexOutOfRange, id="index-empty"),
    pytest.param("var a = [1]; a[5] = 1;", None, SkiffIndexOutOfRange, id="set-no-auto-extend"),
    pytest.param("var a = [1]; a[1] = 1;", None, SkiffIndexOutOfRange, id="set-at-length"),
    pytest.param("var a = [1]; a[-1];", None, SkiffInvalidIndex, id="negative-index"),
    pytest.param("var a = [1]; a[-1] = 0;", None, SkiffInvalidIndex, id="negative-index-set"),
    pytest.param("[1].size;", None, SkiffInvalidAccess, id="unknown-array-member"),
    pytest.param("[1][true];", None, SkiffInvalidAccess, id="array-bool-key"),
    pytest.param('var a = [1]; a["length"] = 3;', None, SkiffInvalidAccess, id="array-set-string-key"),
    pytest.param("1 + [1];", None, SkiffTypeMismatch, id="array-in-arithmetic"),
]

RECORD_SCENARIOS = [
    pytest.param("var o = {x: 1, y: 2}; o.y;", ("number", 2), None, id="record-dot"),
    pytest.param('var o = {a: 1}; o["a"];', ("number", 1), None, id="record-bracket"),
    pytest.param('var o = {"quoted key": 3}; o["quoted key"];', ("number", 3), None, id="record-string-key"),
    pytest.param("var o = {}; o;", ("object", {}), None, id="record-empty"),
    pytest.param("var o = {a: 1, a: 2}; o.a;", ("number", 2), None, id="record-duplicate-key-last-wins"),
    pytest.param("var o = {}; o.y = 2; o;", ("object", {"y": 2}), None, id="record-upsert-new"),
    pytest.param("var o = {y: 1}; o.y = 2; o.y;", ("number", 2), None, id="record-upsert-existing"),
    pytest.param(
        "var o = {x: 1}; var p = o; p.x = 5; o.x;",
        ("number", 5),
        None,
        id="record-alias",
    ),
    pytest.param(
        "fun bump(r) { r.n = r.n + 1; } var c = {n: 0}; bump(c); bump(c); c.n;",
        ("number", 2),
        None,
        id="record-passed-by-reference",
    ),
    pytest.param(
        "var o = {items: []}; o.items.push(1); o.items;",
        ("array", [1]),
        None,
        id="record-nested-array",
    ),
    pytest.param(
        dedent(
            """\
            var log = [];
            fun t(x) { log.push(x); return x; }
            var o = {a: t(1), b: t(2)};
            log;
        """
        ),
        ("array", [1, 2]),
        None,
        id="record-fields-in-order",
    ),
    pytest.param("var o = {x: 1}; o.y;", None, SkiffNoSuchProperty, id="record-missing"),
    pytest.param("var o = {a: 1}; o[0];", None, SkiffInvalidAccess, id="record-number-key"),
    pytest.param("var o = {a: 1}; o[0] = 1;", None, SkiffInvalidAccess, id="record-set-number-key"),
    pytest.param('"abc"[0];', None, SkiffInvalidAccess, id="string-index"),
    pytest.param("var n = 1; n.x;", None, SkiffInvalidAccess, id="number-member"),
    pytest.param("var n = 1; n.x = 2;", None, SkiffInvalidAccess, id="number-member-set"),
    pytest.param('"abc".length;', None, SkiffInvalidAccess, id="string-length"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", ARRAY_SCENARIOS)
def test_array_scenarios(source, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


@pytest.mark.parametrize("source, expectation, expected_exc", RECORD_SCENARIOS)
def test_record_scenarios(source, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_array_literal_creates_new_storage() -> None:
    result = run_program("fun make() { return [1]; } [make(), make()];")

    first, second = result.items
    assert first is not second


def test_push_member_is_bound_native() -> None:
    result = run_program("var a = [1]; a.push;")

    assert isinstance(result, SkfNativeFn)
    assert result.name == "push"
    assert result.bound is not None
    assert [item.value for item in result.bound.items] == [1]

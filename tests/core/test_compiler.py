from __future__ import annotations

import dataclasses

import pytest

from jsonpath_stream.compiler import (
    CompiledPath,
    DescendantsSegment,
    FieldSegment,
    IndexSegment,
    Segment,
    SliceSegment,
    compile_path,
)
from jsonpath_stream.exceptions import PathSyntaxError, UnsupportedPathError


@pytest.mark.parametrize(
    "expression,segments",
    [
        pytest.param("$", (), id="root"),
        pytest.param("$.a", (FieldSegment(("a",)),), id="field"),
        pytest.param(
            "$.a.b",
            (FieldSegment(("a",)), FieldSegment(("b",))),
            id="nested-field",
        ),
        pytest.param("$['a']", (FieldSegment(("a",)),), id="bracket-field"),
        pytest.param("$.*", (FieldSegment(("*",)),), id="wildcard-field"),
        pytest.param(
            "$.a[*]",
            (FieldSegment(("a",)), SliceSegment(0, None, 1)),
            id="wildcard-index",
        ),
        pytest.param(
            "$.a[2]",
            (FieldSegment(("a",)), IndexSegment((2,))),
            id="index",
        ),
        pytest.param(
            "$.a[1:3]",
            (FieldSegment(("a",)), SliceSegment(1, 3, 1)),
            id="slice",
        ),
        pytest.param(
            "$..b",
            (FieldSegment(("b",), recursive=True),),
            id="descendants",
        ),
        pytest.param(
            "$.a..b.c",
            (
                FieldSegment(("a",)),
                FieldSegment(("b",), recursive=True),
                FieldSegment(("c",)),
            ),
            id="descendants-in-the-middle",
        ),

        pytest.param("$..@", (DescendantsSegment(),), id="descendants-of-root"),
        pytest.param(
            "$.a..@",
            (FieldSegment(("a",)), DescendantsSegment()),
            id="descendants-of-field",
        ),
    ],
)
def test_compile_segments(expression: str, segments: tuple):
    compiled = compile_path(expression)

    assert compiled.expression == expression
    assert compiled.segments == segments
    assert str(compiled) == expression


@pytest.mark.parametrize("expression", ["", "   ", "$.a[", "$.a]", None, 42])
def test_compile_invalid(expression):
    with pytest.raises(PathSyntaxError) as exc_info:
        compile_path(expression)

    assert exc_info.value.expression == expression


@pytest.mark.parametrize(
    "expression",
    [
        pytest.param("$.a[?(@.b > 1)]", id="filter"),
        pytest.param("$.a[-1]", id="negative-index"),
        pytest.param("$.a | $.b", id="union"),
    ],
)
def test_compile_unsupported(expression: str):
    with pytest.raises(UnsupportedPathError, match="cannot be evaluated"):
        compile_path(expression)


def test_unsupported_is_a_syntax_error():
    with pytest.raises(PathSyntaxError):
        compile_path("$.a[?(@.b > 1)]")


def test_compiled_path_is_immutable():
    compiled = compile_path("$.a")

    with pytest.raises(dataclasses.FrozenInstanceError):
        compiled.expression = "$.b"  # type: ignore[misc]

    with pytest.raises(dataclasses.FrozenInstanceError):
        compiled.segments[0].names = ("b",)  # type: ignore[misc]


def test_compiled_paths_compare_by_value():
    assert compile_path("$.a[*]") == compile_path("$.a[*]")
    assert hash(compile_path("$.a[*]")) == hash(compile_path("$.a[*]"))


@pytest.mark.parametrize(
    "expression,location,expected",
    [
        ("$", (), True),
        ("$", ("a",), False),
        ("$.a", ("a",), True),
        ("$.a", ("b",), False),
        ("$.a", (0,), False),
        ("$.a", ("a", "b"), False),
        ("$.*", ("anything",), True),
        ("$.*", (0,), False),
        ("$[*]", (7,), True),
        ("$[*]", ("a",), False),
        ("$[1]", (1,), True),
        ("$[1]", (2,), False),
        ("$[1:3]", (0,), False),
        ("$[1:3]", (2,), True),
        ("$[1:3]", (3,), False),
        ("$..b", ("b",), True),
        ("$..b", ("a", 0, "b"), True),
        ("$..b", ("a", "c"), False),
        ("$.a..b", ("b",), False),
        ("$.a..b", ("a", "x", "b"), True),
        ("$..@", (), True),
        ("$..@", ("a", 0, "b"), True),
        ("$.a..@", (), False),
        ("$.a..@", ("a",), True),
        ("$.a..@", ("a", "b", 1), True),
        ("$.a..@", ("b", "a"), False),
    ],
)
def test_matches(expression: str, location: tuple, expected: bool):
    assert compile_path(expression).matches(location) is expected


def test_slice_step():
    compiled = CompiledPath("$[1::2]", (SliceSegment(1, None, 2),))

    assert [i for i in range(8) if compiled.matches((i,))] == [1, 3, 5, 7]


def test_segment_is_abstract():
    with pytest.raises(TypeError):
        Segment(recursive=True)  # type: ignore[abstract]

"""Tests for intersecting the values of individual keywords."""

import pytest

from openapi_transformers import EmptyIntersectionError, IntersectNotSupportedError
from openapi_transformers._keywords import (
    IGNORE,
    KEYWORD_INTERSECTIONS,
    intersect_const,
    intersect_dependent_required,
    intersect_description,
    intersect_enum,
    intersect_multiple_of,
    intersect_pattern,
    intersect_type,
    is_number,
)


@pytest.mark.parametrize(
    "value1, value2, expected",
    [
        (4, 2, 4),
        (2, 4, 4),
        (1, 0.5, 1),
        (0.5, 1, 1),
        (2, 3, 6),
        (1.5, 2, 6),
        (0.1, 0.25, 0.5),
        (0.75, 0.5, 1.5),
    ],
)
def test_multiple_of_is_divisible_by_both(value1, value2, expected):
    result = intersect_multiple_of(value1, value2)
    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize("value", [0, -1, True, "1", None])
def test_multiple_of_must_be_positive_number(value):
    with pytest.raises(TypeError):
        intersect_multiple_of(value, 2)
    with pytest.raises(TypeError):
        intersect_multiple_of(2, value)


@pytest.mark.parametrize(
    "type1, type2, expected",
    [
        ("integer", "number", "integer"),
        ("number", "integer", "integer"),
        (["number", "integer"], ["integer"], "integer"),
        (["integer", "number"], "number", ["integer", "number"]),
        (["string", "null"], ["null", "string", "array"], ["string", "null"]),
        ("object", ["array", "object"], "object"),
    ],
)
def test_intersect_type(type1, type2, expected):
    assert intersect_type(type1, type2) == expected


def test_intersect_type_rejects_non_strings():
    with pytest.raises(TypeError):
        intersect_type(["string", 1], "string")


def test_intersect_type_empty():
    with pytest.raises(EmptyIntersectionError):
        intersect_type(["null", "boolean"], ["integer"])


def test_intersect_const_is_always_empty():
    with pytest.raises(EmptyIntersectionError, match="const"):
        intersect_const("a", "b")


def test_intersect_enum_keeps_order_of_first():
    assert intersect_enum(["c", "b", "a"], ["a", "b"]) == ["b", "a"]


def test_intersect_enum_compares_json_values():
    assert intersect_enum([0, False, 1.0], [1, 0.0]) == [0, 1.0]


@pytest.mark.parametrize("enum", [[[1]], [{"a": 1}], [1, []]])
def test_intersect_enum_of_containers_not_supported(enum):
    with pytest.raises(IntersectNotSupportedError, match="not supported"):
        intersect_enum(enum, [1])
    with pytest.raises(IntersectNotSupportedError):
        intersect_enum([1], enum)


@pytest.mark.parametrize(
    "text1, text2, expected",
    [
        ("A", "B", "Intersection of A and B"),
        ("A b", "C", "Intersection of (A b) and C"),
        ("A", "B c", "Intersection of A and (B c)"),
    ],
)
def test_intersect_description(text1, text2, expected):
    assert intersect_description(text1, text2) == expected


def test_intersect_pattern_mixes_anchored_and_unanchored():
    assert intersect_pattern("^a", "b$") == "^(?=^a)(?=.*b$)"


def test_intersect_dependent_required_skips_none():
    assert intersect_dependent_required({"a": ["b"]}, {"a": None, "c": ["a"]}) == {
        "a": ["b"],
        "c": ["a"],
    }


def test_intersect_dependent_required_does_not_modify_arguments():
    dep1 = {"a": ["b"]}
    intersect_dependent_required(dep1, {"a": ["c"]})
    assert dep1 == {"a": ["b"]}


@pytest.mark.parametrize("value", [1, 1.5, -2])
def test_is_number(value):
    assert is_number(value)


@pytest.mark.parametrize("value", [True, False, None, "1", [1]])
def test_is_not_number(value):
    assert not is_number(value)


def test_annotation_keywords_are_ignored():
    assert KEYWORD_INTERSECTIONS["example"] is IGNORE
    assert KEYWORD_INTERSECTIONS["deprecated"] is IGNORE


@pytest.mark.parametrize(
    "keyword",
    # These are handled by the property merger or recurse into intersect_schema,
    # or have no exact intersection which we know how to compute.
    ["properties", "patternProperties", "additionalProperties", "anyOf", "items", "not", "format"],
)
def test_keywords_not_in_table(keyword):
    assert keyword not in KEYWORD_INTERSECTIONS

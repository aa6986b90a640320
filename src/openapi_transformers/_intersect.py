"""
Intersection of JSON schemas.

`intersect_schema` computes a single schema which validates exactly the
instances validated by both of its arguments, by merging each keyword in
turn.  This is useful for tools which cannot handle allOf, anyOf or oneOf
(e.g. many strongly typed code generators, or OpenAPI 2.0 consumers), but
where sub-schemas are allowed ``{"allOf": [schema1, schema2]}`` is usually
the better choice.

The merge is conservative.  When two values of a keyword cannot be merged
exactly - because we don't know how, or because the result would need a
product-like expansion of anyOf alternatives - we raise
IntersectNotSupportedError instead of guessing.  When the values are
provably contradictory, we raise EmptyIntersectionError.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from ._encode import JSONType, encode_canonical_json, json_equal
from ._errors import (
    EmptyIntersectionError,
    IntersectDepthError,
    IntersectNotSupportedError,
)
from ._keywords import IGNORE, KEYWORD_INTERSECTIONS, is_number
from ._schema import (
    REJECT,
    Schema,
    SchemaOrBool,
    check_schema_shape,
    is_accept,
    present_keywords,
    schema_equal,
)

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "EmptyIntersectionError",
    "IntersectNotSupportedError",
    "intersect_any_of",
    "intersect_one_of",
    "intersect_schema",
]

DEFAULT_MAX_DEPTH = 256

# (exclusive keyword, inclusive keyword, is the exclusive bound at least as tight)
_BOUNDS = (
    ("exclusiveMaximum", "maximum", lambda excl, incl: excl <= incl),
    ("exclusiveMinimum", "minimum", lambda excl, incl: excl >= incl),
)


def _is_subset(schemas1: List, schemas2: List) -> bool:
    return all(any(schema_equal(a, b) for b in schemas2) for a in schemas1)


def _is_permutation(schemas1: List, schemas2: List) -> bool:
    # Compare as multisets: oneOf counts duplicate alternatives twice.
    return sorted(map(encode_canonical_json, schemas1)) == sorted(
        map(encode_canonical_json, schemas2)
    )


def _check_schema_list(value: Any, keyword: str) -> None:
    if not isinstance(value, list):
        raise TypeError(f"{keyword} must be an array, got {value!r}")


def _distribute_single(
    keyword: str, schemas1: List, schemas2: List, max_depth: int
) -> List[SchemaOrBool]:
    # X and (A or B) == (X and A) or (X and B), and the same holds for oneOf
    # since X either holds for every alternative or for none of them.
    if len(schemas1) == 1:
        single, alternatives = schemas1[0], schemas2
    elif len(schemas2) == 1:
        single, alternatives = schemas2[0], schemas1
    else:
        # Anything else would need the product of both lists.
        raise IntersectNotSupportedError(keyword, schemas1, schemas2)
    return [intersect_schema(s, single, max_depth=max_depth) for s in alternatives]


def intersect_any_of(
    any_of1: List, any_of2: List, *, max_depth: int = DEFAULT_MAX_DEPTH
) -> List[SchemaOrBool]:
    """Intersect the values of two anyOf keywords."""
    _check_schema_list(any_of1, "anyOf")
    _check_schema_list(any_of2, "anyOf")
    # If one is a subset of the other, an instance is valid against both
    # exactly when it is valid against the subset.
    if len(any_of1) <= len(any_of2) and _is_subset(any_of1, any_of2):
        return any_of1
    if len(any_of2) < len(any_of1) and _is_subset(any_of2, any_of1):
        return any_of2
    return _distribute_single("anyOf", any_of1, any_of2, max_depth)


def intersect_one_of(
    one_of1: List, one_of2: List, *, max_depth: int = DEFAULT_MAX_DEPTH
) -> List[SchemaOrBool]:
    """Intersect the values of two oneOf keywords."""
    _check_schema_list(one_of1, "oneOf")
    _check_schema_list(one_of2, "oneOf")
    # Unlike anyOf a subset is not enough, but order never matters.
    if _is_permutation(one_of1, one_of2):
        return one_of1
    return _distribute_single("oneOf", one_of1, one_of2, max_depth)


def _intersect_subschema(
    schema1: SchemaOrBool, schema2: SchemaOrBool, *, max_depth: int
) -> SchemaOrBool:
    return intersect_schema(schema1, schema2, max_depth=max_depth)


# Keywords with schema values, which recurse into intersect_schema.
SCHEMA_KEYWORD_INTERSECTIONS = {
    "additionalProperties": _intersect_subschema,
    "anyOf": intersect_any_of,
    "oneOf": intersect_one_of,
    "propertyNames": _intersect_subschema,
}


def _pattern_matches(pattern: str, name: str) -> bool:
    # Patterns are not implicitly anchored, so use search rather than match.
    try:
        return re.search(pattern, name) is not None
    except re.error as err:
        raise TypeError(
            f"Invalid patternProperties pattern {pattern!r}: {err}"
        ) from err


def _merge_properties(
    merged: Schema,
    properties1: Dict[str, SchemaOrBool],
    properties2: Optional[Dict[str, SchemaOrBool]],
    pattern_properties2: Optional[Dict[str, SchemaOrBool]],
    additional_properties2: Optional[SchemaOrBool],
    max_depth: int,
) -> None:
    """Merge each of properties1 with whatever applies to that name on the other side.

    That is the same-name entry of properties2 *or* every matching entry of
    pattern_properties2 *or* additional_properties2, in that order.  Names
    already in `merged` have been handled from the other side, and are skipped.
    """
    for name, property1 in properties1.items():
        if property1 is None or name in merged:
            continue
        if properties2 is not None and properties2.get(name) is not None:
            merged[name] = intersect_schema(
                property1, properties2[name], max_depth=max_depth
            )
            continue
        matching = [
            s
            for p, s in (pattern_properties2 or {}).items()
            if _pattern_matches(p, name)
        ]
        if matching:
            out = property1
            for s in matching:
                out = intersect_schema(out, s, max_depth=max_depth)
            merged[name] = out
        elif additional_properties2 is not None:
            merged[name] = intersect_schema(
                property1, additional_properties2, max_depth=max_depth
            )
        else:
            merged[name] = property1


def _get_property_space(schema: Schema) -> Tuple[Any, Any, Any]:
    properties = schema.get("properties")
    pattern_properties = schema.get("patternProperties")
    additional_properties = schema.get("additionalProperties")
    if properties is not None and not isinstance(properties, dict):
        raise TypeError(f"properties must be an object, got {properties!r}")
    if pattern_properties is not None and not isinstance(pattern_properties, dict):
        raise TypeError(
            f"patternProperties must be an object, got {pattern_properties!r}"
        )
    if additional_properties is not None:
        check_schema_shape(additional_properties, "additionalProperties")
    return properties, pattern_properties, additional_properties


def merge_property_space(
    schema1: Schema, schema2: Schema, *, max_depth: int = DEFAULT_MAX_DEPTH
) -> Tuple[Schema, Schema]:
    """Return the merged properties and patternProperties of two schemas.

    OK, this is a tricky bit, because we have three overlapping parts.  A
    member of an instance object is checked against the same-name entry of
    `properties`, against every `patternProperties` entry whose (unanchored)
    pattern matches its name, and against `additionalProperties` only if
    neither applies.  Each named property is therefore merged with whatever
    would check the same name under the other schema.  Patterns are then
    merged the same way, treating identical patterns as the same name.

    additionalProperties itself is merged as an ordinary schema keyword.
    """
    props1, pats1, add1 = _get_property_space(schema1)
    props2, pats2, add2 = _get_property_space(schema2)

    properties: Schema = {}
    if props1 is not None:
        _merge_properties(properties, props1, props2, pats2, add2, max_depth)
    if props2 is not None:
        _merge_properties(properties, props2, props1, pats1, add1, max_depth)

    pattern_properties: Schema = {}
    if pats1 is not None:
        _merge_properties(pattern_properties, pats1, pats2, None, add2, max_depth)
    if pats2 is not None:
        _merge_properties(pattern_properties, pats2, pats1, None, add1, max_depth)

    return properties, pattern_properties


def _normalise_exclusive_bounds(schema: Schema) -> Schema:
    """Convert draft-04 boolean exclusiveMinimum/exclusiveMaximum to numbers.

    In draft 4 (used by OpenAPI 2.0 and 3.0) ``"exclusiveMaximum": true``
    modifies ``maximum``; from draft 6 on the exclusive bound is a number.
    """
    if not any(isinstance(schema.get(excl), bool) for excl, _, _ in _BOUNDS):
        return schema
    schema = dict(schema)
    for excl, incl, _ in _BOUNDS:
        if schema.get(excl) is True:
            if incl in schema:
                schema[excl] = schema.pop(incl)
            else:
                del schema[excl]
        elif schema.get(excl) is False:
            del schema[excl]
    return schema


def _reconcile_bounds(schema: Schema, boolean_form: Dict[str, bool]) -> None:
    # Keep whichever of each inclusive/exclusive pair is tighter, converting
    # back to the boolean form if either input used it.
    for excl, incl, at_least_as_tight in _BOUNDS:
        excl_value = schema.get(excl)
        incl_value = schema.get(incl)
        for value in (excl_value, incl_value):
            if value is not None and not is_number(value):
                raise TypeError(f"{excl} and {incl} must be numbers, got {value!r}")
        if excl_value is not None and (
            incl_value is None or at_least_as_tight(excl_value, incl_value)
        ):
            if boolean_form[excl]:
                schema[incl] = excl_value
                schema[excl] = True
            else:
                schema.pop(incl, None)
        else:
            schema.pop(excl, None)


def _intersect_keyword(
    keyword: str, value1: JSONType, value2: JSONType, max_depth: int
) -> JSONType:
    if keyword in SCHEMA_KEYWORD_INTERSECTIONS:
        intersect_schemas = SCHEMA_KEYWORD_INTERSECTIONS[keyword]
        return intersect_schemas(value1, value2, max_depth=max_depth)
    intersect = KEYWORD_INTERSECTIONS.get(keyword)
    if intersect is None:
        raise IntersectNotSupportedError(keyword, value1, value2)
    if intersect is IGNORE:
        return value1
    return intersect(value1, value2)  # type: ignore


def intersect_schema(
    schema1: SchemaOrBool,
    schema2: SchemaOrBool,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> SchemaOrBool:
    """Create a schema which validates exactly the values valid against both schemas.

    Neither argument is modified.  The result may share sub-values with the
    arguments, so treat it as immutable too.

    Raises TypeError if either argument is not a schema, or a keyword value
    has the wrong type; EmptyIntersectionError if the schemas have a pair of
    mutually exclusive keyword values (but not for every unsatisfiable
    combination, e.g. ``{"minimum": 2}`` and ``{"maximum": 1}`` are merged);
    IntersectNotSupportedError if a keyword has differing values which we
    don't know how to merge; and IntersectDepthError if the schemas are
    nested more than `max_depth` levels deep.

    Errors from sub-schemas (properties, additionalProperties, propertyNames
    and anyOf/oneOf alternatives) propagate unchanged.  An empty intersection
    there may only rule out part of an instance, so whether to replace it
    with ``False`` is up to the caller.
    """
    check_schema_shape(schema1, "schema1")
    check_schema_shape(schema2, "schema2")
    if max_depth < 0:
        raise IntersectDepthError()

    # Anything and false is false, and true (or {}) is the identity.
    if schema1 is REJECT or schema2 is REJECT:
        return REJECT
    if is_accept(schema2):
        return schema1
    if is_accept(schema1):
        return schema2
    if schema_equal(schema1, schema2):
        return schema1
    assert isinstance(schema1, dict) and isinstance(schema2, dict)

    schema1 = present_keywords(schema1)
    schema2 = present_keywords(schema2)
    boolean_form = {
        excl: isinstance(schema1.get(excl), bool) or isinstance(schema2.get(excl), bool)
        for excl, _, _ in _BOUNDS
    }
    schema1 = _normalise_exclusive_bounds(schema1)
    schema2 = _normalise_exclusive_bounds(schema2)

    out = dict(schema1)
    for key, value in zip(
        ("properties", "patternProperties"),
        merge_property_space(schema1, schema2, max_depth=max_depth - 1),
    ):
        # An empty object is the same as no properties at all
        if value:
            out[key] = value
        else:
            out.pop(key, None)

    for keyword, value2 in schema2.items():
        if keyword in ("properties", "patternProperties"):
            continue
        if keyword not in out:
            out[keyword] = value2
        elif not json_equal(out[keyword], value2):
            out[keyword] = _intersect_keyword(
                keyword, out[keyword], value2, max_depth - 1
            )

    # A merged schema is only deprecated if both sources were.
    if schema1.get("deprecated") is True and schema2.get("deprecated") is True:
        out["deprecated"] = True
    else:
        out.pop("deprecated", None)

    _reconcile_bounds(out, boolean_form)
    return out

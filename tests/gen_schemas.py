"""Hypothesis strategies for generating JSON schemata and instances."""

from typing import Any, Dict, List, Union

import hypothesis.strategies as st

from openapi_transformers._encode import encode_canonical_json
from openapi_transformers._schema import Schema

# A small universe of values, so that generated instances often hit the
# boundaries of generated schemas.
NAMES = st.sampled_from(["a", "b", "c"])
PRIMITIVES = (
    st.none()
    | st.booleans()
    | st.integers(-3, 3)
    | st.sampled_from([-1.5, 0.5])
    | st.sampled_from(["", "a", "b", "ab", "ba"])
)
JSON_STRATEGY = st.recursive(
    PRIMITIVES,
    lambda children: st.lists(children, max_size=3)
    | st.dictionaries(NAMES, children, max_size=3),
    max_leaves=8,
)

TYPES = ["null", "boolean", "integer", "number", "string", "array", "object"]
# Instance strings never contain a newline, which `.` would not match.
PATTERNS = ["a", "^a", "b$", "ab", "^$"]
SMALL_INTS = st.integers(-3, 3)
SIZES = st.integers(0, 3)


def gen_type() -> st.SearchStrategy[Union[str, List[str]]]:
    """Return a strategy for the value of the type keyword."""
    return st.sampled_from(TYPES) | st.lists(
        st.sampled_from(TYPES), min_size=1, max_size=3, unique=True
    )


def gen_enum() -> st.SearchStrategy[List[Any]]:
    return st.lists(PRIMITIVES, min_size=1, max_size=4, unique_by=encode_canonical_json)


# Keywords which validate an instance without looking at sub-schemas.
FLAT_KEYWORDS: Dict[str, st.SearchStrategy] = {
    "type": gen_type(),
    "enum": gen_enum(),
    "const": PRIMITIVES,
    "minimum": SMALL_INTS,
    "maximum": SMALL_INTS,
    "exclusiveMinimum": SMALL_INTS,
    "exclusiveMaximum": SMALL_INTS,
    "multipleOf": st.integers(1, 4),
    "minLength": SIZES,
    "maxLength": SIZES,
    "pattern": st.sampled_from(PATTERNS),
    "minItems": SIZES,
    "maxItems": SIZES,
    "uniqueItems": st.booleans(),
    "required": st.lists(NAMES, min_size=1, unique=True),
    "minProperties": SIZES,
    "maxProperties": SIZES,
    "title": st.sampled_from(["A title", "Other"]),
    "deprecated": st.booleans(),
    "readOnly": st.booleans(),
}


def flat_schemata() -> st.SearchStrategy[Union[bool, Schema]]:
    """Return a strategy for schemata without sub-schemas."""
    return st.booleans() | st.fixed_dictionaries({}, optional=FLAT_KEYWORDS)


def json_schemata() -> st.SearchStrategy[Union[bool, Schema]]:
    """Return a Hypothesis strategy for JSON schemata, nested up to one level.

    Every schema drawn from this strategy uses only keywords which
    `intersect_schema` can merge exactly, except that some pairs raise
    IntersectNotSupportedError.  We leave out patternProperties, as
    intersecting it with additionalProperties is only an approximation.
    """
    return _json_schemata()


@st.composite  # type: ignore
def _json_schemata(draw: Any) -> Any:
    schema = draw(flat_schemata())
    if isinstance(schema, bool):
        return schema
    sub = flat_schemata()
    nested = draw(
        st.fixed_dictionaries(
            {},
            optional={
                "properties": st.dictionaries(NAMES, sub, min_size=1, max_size=2),
                "additionalProperties": sub,
                "propertyNames": st.fixed_dictionaries(
                    {},
                    optional={"pattern": st.sampled_from(PATTERNS), "maxLength": SIZES},
                ),
                "allOf": st.lists(sub, min_size=1, max_size=2),
                "anyOf": st.lists(sub, min_size=1, max_size=2),
                "oneOf": st.lists(sub, min_size=1, max_size=2),
            },
        )
    )
    return {**schema, **nested}

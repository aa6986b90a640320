"""
The schema model shared by the intersection engine and the transformers.

A schema is either a boolean literal or a keyword map.  ``True`` (ACCEPT) is
equivalent to ``{}`` and validates everything; ``False`` (REJECT) is
equivalent to ``{"not": {}}`` and validates nothing.  Keyword maps are
treated as immutable: every function here and in the engine returns new
values instead of updating its arguments.
"""

import contextlib
import json
from functools import lru_cache
from typing import Any, Dict, Union

import jsonschema

from ._encode import JSONType, json_equal

Schema = Dict[str, JSONType]
SchemaOrBool = Union[bool, Schema]
JSONSchemaValidator = Union[
    jsonschema.validators.Draft4Validator,
    jsonschema.validators.Draft6Validator,
    jsonschema.validators.Draft7Validator,
    jsonschema.validators.Draft202012Validator,
]

ACCEPT = True
REJECT = False

COMBINATOR_KEYS = ("allOf", "anyOf", "oneOf")
# Names of keywords where the associated values may be schemas or lists of schemas.
SCHEMA_KEYS = (
    *COMBINATOR_KEYS,
    *(
        "items prefixItems additionalItems contains additionalProperties "
        "propertyNames unevaluatedItems unevaluatedProperties "
        "if then else not".split()
    ),
)
# Names of keywords where the value is an object whose values are schemas.
SCHEMA_OBJECT_KEYS = (
    "properties",
    "patternProperties",
    "dependentSchemas",
    "$defs",
    "definitions",
)
# Keywords whose value may be null, rather than null meaning "not present".
NULLABLE_KEYS = ("const", "default", "example")


def is_schema(value: Any) -> bool:
    """Is ``value`` shaped like a schema (boolean or keyword map)?"""
    return isinstance(value, (bool, dict))


def check_schema_shape(value: Any, name: str = "schema") -> None:
    if not is_schema(value):
        raise TypeError(
            f"{name} must be an object or boolean, "
            f"got {value!r} of type {type(value).__name__}"
        )


def is_accept(schema: Any) -> bool:
    return schema is ACCEPT or (isinstance(schema, dict) and not schema)


def schema_equal(schema1: SchemaOrBool, schema2: SchemaOrBool) -> bool:
    """Do two schemas have exactly the same value?

    Note that this is value equality, not semantic equality - for example
    ``{"type": ["string", "null"]}`` and ``{"type": ["null", "string"]}``
    are different values.
    """
    return json_equal(schema1, schema2)


def present_keywords(schema: SchemaOrBool) -> Schema:
    """Return the keywords of a schema, treating ``None`` values as absent.

    Keywords where null is a meaningful value, such as ``{"const": None}``,
    are kept.
    """
    if isinstance(schema, bool):
        return {}
    return {
        k: v for k, v in schema.items() if v is not None or k in NULLABLE_KEYS
    }


class CacheableSchema:
    """Cache schema by its JSON representation."""

    __slots__ = ("schema", "encoded")

    def __init__(self, schema: SchemaOrBool) -> None:
        self.schema = schema
        self.encoded = hash(json.dumps(schema, sort_keys=True))

    def __eq__(self, other: "CacheableSchema") -> bool:  # type: ignore
        return self.encoded == other.encoded

    def __hash__(self) -> int:
        return self.encoded


def _get_validator_class(schema: SchemaOrBool) -> JSONSchemaValidator:
    return __get_validator_class(CacheableSchema(schema))


@lru_cache(maxsize=128)
def __get_validator_class(wrapper: CacheableSchema) -> JSONSchemaValidator:
    # OpenAPI 3.1 schemas follow draft 2020-12, OpenAPI 3.0 schemas are
    # close to draft 7, and OpenAPI 2.0 uses the boolean exclusive bounds
    # of draft 4; pick the newest draft that accepts the schema.
    schema = wrapper.schema
    with contextlib.suppress(jsonschema.exceptions.SchemaError):
        validator = jsonschema.validators.validator_for(schema)
        validator.check_schema(schema)
        return validator
    with contextlib.suppress(jsonschema.exceptions.SchemaError):
        jsonschema.Draft7Validator.check_schema(schema)
        return jsonschema.Draft7Validator
    jsonschema.Draft4Validator.check_schema(schema)
    return jsonschema.Draft4Validator


def check_schema(schema: SchemaOrBool) -> None:
    """Raise ``jsonschema.exceptions.SchemaError`` if no supported draft accepts it."""
    check_schema_shape(schema)
    _get_validator_class(schema)

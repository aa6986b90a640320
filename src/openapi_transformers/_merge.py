"""
Transformers which merge allOf, anyOf and oneOf sub-schemas into their parent.

This is useful for converting to OpenAPI 2.0 (which lacks anyOf and oneOf)
from later versions, or for code generators which handle combinators badly.
Each combinator is replaced by the intersection of its members with the
rest of the schema, as computed by `intersect_schema`.
"""

import functools
import logging
from typing import Callable, List, Union

from ._errors import EmptyIntersectionError, IntersectNotSupportedError
from ._intersect import intersect_schema
from ._schema import Schema, SchemaOrBool
from ._transform import OpenApiTransformer

logger = logging.getLogger(__name__)

SkipOption = Union[bool, Callable[[List[SchemaOrBool]], bool]]


def _without(schema: Schema, keyword: str) -> Schema:
    return {k: v for k, v in schema.items() if k != keyword}


class MergeAllOfTransformer(OpenApiTransformer):
    """Merge allOf schemas into the parent schema.

    With ``only_single=True``, only allOf arrays with exactly one element are
    merged - a common pattern for adding a description to a ``$ref``.
    Failures to intersect are raised to the caller.
    """

    def __init__(self, *, only_single: bool = False) -> None:
        self.only_single = only_single

    def transform_schema(self, schema: SchemaOrBool) -> SchemaOrBool:
        new_schema = super().transform_schema(schema)
        if not isinstance(new_schema, dict) or "allOf" not in new_schema:
            return new_schema

        all_of = new_schema["allOf"]
        if not isinstance(all_of, list):
            self.warn("Unable to merge non-array allOf %r", all_of)
            return new_schema
        if not all_of:
            # Every instance is valid against all of zero schemas, so an empty
            # allOf (which JSON Schema disallows) can be removed safely.
            logger.debug("Removing empty allOf")
            return _without(new_schema, "allOf")
        if self.only_single and len(all_of) > 1:
            return new_schema
        return functools.reduce(intersect_schema, all_of, _without(new_schema, "allOf"))


class _MergeAlternativesTransformer(OpenApiTransformer):
    keyword: str

    def transform_schema(self, schema: SchemaOrBool) -> SchemaOrBool:
        new_schema = super().transform_schema(schema)
        if not isinstance(new_schema, dict) or self.keyword not in new_schema:
            return new_schema

        alternatives = new_schema[self.keyword]
        if not isinstance(alternatives, list):
            self.warn("Unable to merge non-array %s %r", self.keyword, alternatives)
            return new_schema
        if not alternatives:
            # No instance is valid against one of zero schemas, so removing an
            # empty array would change the schema from rejecting everything
            # to accepting everything.
            self.warn("Unable to merge empty %s array", self.keyword)
            return new_schema
        if len(alternatives) > 1:
            raise NotImplementedError(
                f"Merging multiple {self.keyword} schemas not implemented"
            )
        return intersect_schema(_without(new_schema, self.keyword), alternatives[0])


class MergeAnyOfTransformer(_MergeAlternativesTransformer):
    """Merge a single-element anyOf into the parent schema."""

    keyword = "anyOf"


class MergeOneOfTransformer(_MergeAlternativesTransformer):
    """Merge a single-element oneOf into the parent schema."""

    keyword = "oneOf"


def merge_all_of(schema: Schema) -> SchemaOrBool:
    all_of = schema.get("allOf")
    if not isinstance(all_of, list) or not all_of:
        return schema
    return functools.reduce(intersect_schema, all_of, _without(schema, "allOf"))


def merge_any_of(schema: Schema) -> SchemaOrBool:
    any_of = schema.get("anyOf")
    if not isinstance(any_of, list) or not any_of:
        return schema
    if len(any_of) > 1:
        # Needs a union of schemas, which we can't express without anyOf.
        raise NotImplementedError("Union of multiple anyOf schemas not implemented")
    return intersect_schema(_without(schema, "anyOf"), any_of[0])


def merge_one_of(schema: Schema) -> SchemaOrBool:
    one_of = schema.get("oneOf")
    if not isinstance(one_of, list) or not one_of:
        return schema
    if len(one_of) > 1:
        raise NotImplementedError(
            "Symmetric difference of multiple oneOf schemas not implemented"
        )
    return intersect_schema(_without(schema, "oneOf"), one_of[0])


def _should_skip(skip: SkipOption, schemas: List[SchemaOrBool]) -> bool:
    if callable(skip):
        return bool(skip(schemas))
    return bool(skip)


class MergeSubschemasTransformer(OpenApiTransformer):
    """Merge allOf, anyOf and oneOf schemas into the parent schema, where possible.

    This is a best-effort pass over the whole document: schemas which can't be
    merged (because the intersection is empty, unsupported, or would need a
    union or symmetric difference) are logged and left as they are.  Empty
    arrays are never removed.

    Each ``skip_*`` option is either a boolean, or a predicate which is called
    with the combinator's array and returns True to leave that array alone.
    """

    def __init__(
        self,
        *,
        skip_all_of: SkipOption = False,
        skip_any_of: SkipOption = False,
        skip_one_of: SkipOption = False,
    ) -> None:
        self.skip_all_of = skip_all_of
        self.skip_any_of = skip_any_of
        self.skip_one_of = skip_one_of

    def transform_schema(self, schema: SchemaOrBool) -> SchemaOrBool:
        new_schema = super().transform_schema(schema)
        for keyword, merge, skip in (
            ("allOf", merge_all_of, self.skip_all_of),
            ("anyOf", merge_any_of, self.skip_any_of),
            ("oneOf", merge_one_of, self.skip_one_of),
        ):
            if not isinstance(new_schema, dict):
                # e.g. an earlier merge found the schema unsatisfiable
                break
            schemas = new_schema.get(keyword)
            if not isinstance(schemas, list):
                continue
            if not schemas:
                if keyword != "allOf":
                    self.warn("Unable to merge empty %s array", keyword)
                continue
            if _should_skip(skip, schemas):
                continue
            try:
                new_schema = merge(new_schema)
            except (
                EmptyIntersectionError,
                IntersectNotSupportedError,
                NotImplementedError,
            ) as err:
                logger.debug(
                    "Unable to merge %s schemas for %r: %s", keyword, new_schema, err
                )
        return new_schema

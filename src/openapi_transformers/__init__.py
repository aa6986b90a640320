"""Transformers which merge allOf, anyOf and oneOf schemas in OpenAPI documents.

The core is `intersect_schema`, which combines two JSON schemas into one
schema valid for exactly the values valid against both.  The ``Merge*``
transformers apply it across a whole OpenAPI document.
"""

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_MAX_DEPTH",
    "EmptyIntersectionError",
    "IntersectDepthError",
    "IntersectNotSupportedError",
    "MergeAllOfTransformer",
    "MergeAnyOfTransformer",
    "MergeOneOfTransformer",
    "MergeSubschemasTransformer",
    "OpenApiTransformer",
    "check_schema",
    "intersect_schema",
]

from ._errors import (
    EmptyIntersectionError,
    IntersectDepthError,
    IntersectNotSupportedError,
)
from ._intersect import DEFAULT_MAX_DEPTH, intersect_schema
from ._merge import (
    MergeAllOfTransformer,
    MergeAnyOfTransformer,
    MergeOneOfTransformer,
    MergeSubschemasTransformer,
)
from ._schema import check_schema
from ._transform import OpenApiTransformer

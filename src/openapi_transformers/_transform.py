"""
Traversal of OpenAPI documents.

OpenApiTransformer walks an OpenAPI 2.0, 3.0 or 3.1 document and calls a
``transform_*`` method for each object it finds, rebuilding the document from
the return values.  Subclasses override the methods for the objects they care
about - usually just `transform_schema` - and call the base implementation
first, so that children are transformed before their parents.  The input
document is never modified.
"""

import logging
from typing import Any, Callable, Dict, List, Tuple

from ._schema import SCHEMA_KEYS, SCHEMA_OBJECT_KEYS, SchemaOrBool

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
# Keywords whose value may be a list of schemas, rather than a single schema.
_SCHEMA_LIST_KEYS = ("allOf", "anyOf", "oneOf", "items", "prefixItems")


def _is_extension(key: str) -> bool:
    return isinstance(key, str) and key.startswith("x-")


class OpenApiTransformer:
    """Base class for transformers of OpenAPI documents.

    Without overrides, `transform_openapi` returns an equal copy of its
    argument.  References (``$ref``) are passed through unresolved.
    """

    def warn(self, message: str, *args: Any) -> None:
        logger.warning(message, *args)

    def _transform_map(self, mapping: Any, transform: Callable[[Any], Any]) -> Any:
        if not isinstance(mapping, dict):
            return mapping
        return {
            k: v if _is_extension(k) else transform(v) for k, v in mapping.items()
        }

    def _transform_list(self, values: Any, transform: Callable[[Any], Any]) -> Any:
        if not isinstance(values, list):
            return values
        return [transform(v) for v in values]

    def transform_schema(self, schema: SchemaOrBool) -> SchemaOrBool:
        if isinstance(schema, bool):
            return schema
        if not isinstance(schema, dict):
            self.warn("Ignoring non-object Schema %r", schema)
            return schema

        out = dict(schema)
        for key in SCHEMA_KEYS:
            value = out.get(key)
            if isinstance(value, list) and key in _SCHEMA_LIST_KEYS:
                out[key] = [self.transform_schema(v) for v in value]
            elif isinstance(value, (bool, dict)):
                out[key] = self.transform_schema(value)
        for key in SCHEMA_OBJECT_KEYS:
            value = out.get(key)
            if isinstance(value, dict):
                out[key] = {
                    k: v if v is None else self.transform_schema(v)
                    for k, v in value.items()
                }
        return out

    def transform_media_type(self, media_type: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(media_type, dict) or "schema" not in media_type:
            return media_type
        return {**media_type, "schema": self.transform_schema(media_type["schema"])}

    def _transform_content(self, obj: Dict[str, Any]) -> Dict[str, Any]:
        # Parameter, Header, Response and Request Body objects all carry an
        # optional Schema (OpenAPI 2.0 and 3.x) and/or content map (3.x).
        out = dict(obj)
        if "schema" in out:
            out["schema"] = self.transform_schema(out["schema"])
        if "content" in out:
            out["content"] = self._transform_map(
                out["content"], self.transform_media_type
            )
        return out

    def transform_header(self, header: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(header, dict):
            return header
        return self._transform_content(header)

    def transform_parameter(self, parameter: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(parameter, dict):
            return parameter
        return self._transform_content(parameter)

    def transform_request_body(self, request_body: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(request_body, dict):
            return request_body
        return self._transform_content(request_body)

    def transform_response(self, response: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(response, dict):
            return response
        out = self._transform_content(response)
        if "headers" in out:
            out["headers"] = self._transform_map(out["headers"], self.transform_header)
        return out

    def transform_responses(self, responses: Dict[str, Any]) -> Dict[str, Any]:
        return self._transform_map(responses, self.transform_response)

    def transform_callback(self, callback: Dict[str, Any]) -> Dict[str, Any]:
        return self._transform_map(callback, self.transform_path_item)

    def transform_operation(self, operation: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(operation, dict):
            return operation
        out = dict(operation)
        if "parameters" in out:
            out["parameters"] = self._transform_list(
                out["parameters"], self.transform_parameter
            )
        if "requestBody" in out:
            out["requestBody"] = self.transform_request_body(out["requestBody"])
        if "responses" in out:
            out["responses"] = self.transform_responses(out["responses"])
        if "callbacks" in out:
            out["callbacks"] = self._transform_map(
                out["callbacks"], self.transform_callback
            )
        return out

    def transform_path_item(self, path_item: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(path_item, dict):
            return path_item
        out = dict(path_item)
        if "parameters" in out:
            out["parameters"] = self._transform_list(
                out["parameters"], self.transform_parameter
            )
        for method in HTTP_METHODS:
            if method in out:
                out[method] = self.transform_operation(out[method])
        return out

    def transform_components(self, components: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(components, dict):
            return components
        out = dict(components)
        for key, transform in (
            ("schemas", self.transform_schema),
            ("parameters", self.transform_parameter),
            ("responses", self.transform_response),
            ("requestBodies", self.transform_request_body),
            ("headers", self.transform_header),
            ("callbacks", self.transform_callback),
            ("pathItems", self.transform_path_item),
        ):
            if key in out:
                out[key] = self._transform_map(out[key], transform)
        return out

    def transform_openapi(self, openapi: Dict[str, Any]) -> Dict[str, Any]:
        """Return a transformed copy of an OpenAPI document."""
        if not isinstance(openapi, dict):
            raise TypeError(
                f"OpenAPI document must be an object, got {type(openapi).__name__}"
            )
        out = dict(openapi)
        if "components" in out:
            out["components"] = self.transform_components(out["components"])
        for key in ("paths", "webhooks"):
            if key in out:
                out[key] = self._transform_map(out[key], self.transform_path_item)
        # OpenAPI 2.0 keeps these at the top level instead of in components.
        for key, transform in (
            ("definitions", self.transform_schema),
            ("parameters", self.transform_parameter),
            ("responses", self.transform_response),
        ):
            if key in out:
                out[key] = self._transform_map(out[key], transform)
        return out


def iter_component_schemas(openapi: Dict[str, Any]) -> List[Tuple[str, SchemaOrBool]]:
    """Return ``(name, schema)`` for each named schema in a document."""
    components = openapi.get("components")
    schemas = components.get("schemas") if isinstance(components, dict) else None
    if not isinstance(schemas, dict):
        schemas = openapi.get("definitions")
    if not isinstance(schemas, dict):
        return []
    return list(schemas.items())

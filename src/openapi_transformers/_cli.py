import enum
import json
import logging
import sys
from importlib.metadata import version as vers
from typing import Annotated, Optional

import jsonschema
import typer

from openapi_transformers._errors import (
    EmptyIntersectionError,
    IntersectDepthError,
    IntersectNotSupportedError,
)
from openapi_transformers._merge import (
    MergeAllOfTransformer,
    MergeAnyOfTransformer,
    MergeOneOfTransformer,
    MergeSubschemasTransformer,
)
from openapi_transformers._schema import check_schema
from openapi_transformers._transform import OpenApiTransformer, iter_component_schemas

app = typer.Typer(help="Merge allOf/anyOf/oneOf schemas in an OpenAPI document")


class Merge(str, enum.Enum):
    all_of = "all-of"
    any_of = "any-of"
    one_of = "one-of"
    subschemas = "subschemas"


def version_callback(value: bool) -> None:
    """Callback to show the version of openapi-transformers"""
    if value:
        print(vers("openapi-transformers"))
        raise typer.Exit()


def make_transformer(
    merge: Merge,
    *,
    only_single: bool = False,
    skip_all_of: bool = False,
    skip_any_of: bool = False,
    skip_one_of: bool = False,
) -> OpenApiTransformer:
    if merge is Merge.all_of:
        return MergeAllOfTransformer(only_single=only_single)
    if merge is Merge.any_of:
        return MergeAnyOfTransformer()
    if merge is Merge.one_of:
        return MergeOneOfTransformer()
    return MergeSubschemasTransformer(
        skip_all_of=skip_all_of, skip_any_of=skip_any_of, skip_one_of=skip_one_of
    )


@app.command()
def main(
    merge: Annotated[Merge, typer.Option(help="which combinator(s) to merge")] = Merge.subschemas,
    only_single: Annotated[bool, typer.Option(help="with all-of, only merge single-element allOf")] = False,
    skip_all_of: Annotated[bool, typer.Option(help="with subschemas, leave allOf alone")] = False,
    skip_any_of: Annotated[bool, typer.Option(help="with subschemas, leave anyOf alone")] = False,
    skip_one_of: Annotated[bool, typer.Option(help="with subschemas, leave oneOf alone")] = False,
    check: Annotated[bool, typer.Option(help="check merged schemas against the JSON Schema meta-schema")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="log debug messages")] = False,
    document: Annotated[
        Optional[typer.FileText], typer.Option(help="the OpenAPI document to read. will read from stdin if not specified")
    ] = None,
    output: Annotated[
        Optional[typer.FileTextWrite], typer.Option(help="file to write the result to. will write to stdout if not specified")
    ] = None,
    version: Annotated[
        Optional[bool], typer.Option(help="Show the version of openapi-transformers", callback=version_callback, is_eager=True)
    ] = None,
):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    if document:
        document_data = document.read()
    else:
        document_data_via_stdin = sys.stdin
        if (
            hasattr(document_data_via_stdin, "isatty") and document_data_via_stdin.isatty()
        ):  # Check if stdin is connected to a terminal
            raise typer.BadParameter("No input provided via stdin.", param_hint="--document")
        document_data = document_data_via_stdin.read()
    if not document_data or not document_data.strip():
        raise typer.BadParameter("document is empty", param_hint="--document")
    try:
        openapi = json.loads(document_data)
    except json.JSONDecodeError as err:
        raise typer.BadParameter(f"document is not valid JSON: {err}", param_hint="--document")

    transformer = make_transformer(
        merge,
        only_single=only_single,
        skip_all_of=skip_all_of,
        skip_any_of=skip_any_of,
        skip_one_of=skip_one_of,
    )
    try:
        result = transformer.transform_openapi(openapi)
    except (
        EmptyIntersectionError,
        IntersectNotSupportedError,
        IntersectDepthError,
        NotImplementedError,
    ) as err:
        typer.echo(f"error: {err}", err=True)
        raise typer.Exit(1)

    if check:
        for name, schema in iter_component_schemas(result):
            try:
                check_schema(schema)
            except (jsonschema.exceptions.SchemaError, TypeError) as err:
                typer.echo(f"error: schema {name!r} is invalid: {err}", err=True)
                raise typer.Exit(1)

    typer.echo(json.dumps(result, indent=2), file=output)

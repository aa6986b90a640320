import json
from io import StringIO

import pytest
from skeletons import schema3
from typer.testing import CliRunner, Result

from openapi_transformers import __version__
from openapi_transformers._cli import app


def invoke(document, *args):
    stdin_mock = StringIO(json.dumps(document))
    stdin_mock.seek(0)  # Ensure the StringIO object is at the beginning
    runner = CliRunner()
    return runner.invoke(app, list(args), input=stdin_mock.getvalue(), catch_exceptions=False)


@pytest.mark.parametrize(
    "args, schema, expected",
    [
        ([], {"maximum": 5, "allOf": [{"minimum": 3}]}, {"maximum": 5, "minimum": 3}),
        ([], {"anyOf": [{"type": "string"}, {"type": "number"}]}, {"anyOf": [{"type": "string"}, {"type": "number"}]}),
        (["--merge", "all-of"], {"allOf": []}, {}),
        (["--merge", "all-of", "--only-single"], {"allOf": [{"minimum": 3}, {"maximum": 5}]}, {"allOf": [{"minimum": 3}, {"maximum": 5}]}),
        (["--merge", "any-of"], {"anyOf": [{"minimum": 3}], "oneOf": [{"maximum": 5}]}, {"minimum": 3, "oneOf": [{"maximum": 5}]}),
        (["--merge", "one-of"], {"anyOf": [{"minimum": 3}], "oneOf": [{"maximum": 5}]}, {"anyOf": [{"minimum": 3}], "maximum": 5}),
        (["--skip-all-of"], {"allOf": [{"minimum": 3}], "anyOf": [{"maximum": 5}]}, {"allOf": [{"minimum": 3}], "maximum": 5}),
        (["--skip-any-of", "--skip-one-of"], {"anyOf": [{"minimum": 3}], "oneOf": [{"maximum": 5}]}, {"anyOf": [{"minimum": 3}], "oneOf": [{"maximum": 5}]}),
        (["--check"], {"allOf": [{"type": "integer"}], "minimum": 0}, {"minimum": 0, "type": "integer"}),
    ],
)
def test_cli_runner(args, schema, expected):
    result: Result = invoke(schema3(schema), *args)
    assert result.exit_code == 0, f"CLI failed with exit code {result.exit_code}. Output: {result.stdout}"
    assert json.loads(result.stdout) == schema3(expected)


@pytest.mark.parametrize(
    "args, schema",
    [
        (["--merge", "all-of"], {"type": "string", "allOf": [{"type": "number"}]}),
        (["--merge", "any-of"], {"anyOf": [{"type": "string"}, {"type": "number"}]}),
        (["--check"], {"type": "not-a-type"}),
    ],
)
def test_cli_errors(args, schema):
    result = invoke(schema3(schema), *args)
    assert result.exit_code == 1
    assert "error:" in result.output


def test_cli_reads_and_writes_files(tmp_path):
    document = tmp_path / "openapi.json"
    output = tmp_path / "merged.json"
    document.write_text(json.dumps(schema3({"allOf": [{"minimum": 3}]})))
    result = CliRunner().invoke(
        app, ["--document", str(document), "--output", str(output)], catch_exceptions=False
    )
    assert result.exit_code == 0, result.output
    assert json.loads(output.read_text()) == schema3({"minimum": 3})


def test_cli_rejects_empty_input():
    result = CliRunner().invoke(app, [], input="")
    assert result.exit_code != 0


def test_cli_version():
    result = CliRunner().invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_cli_rejects_malformed_json():
    result = CliRunner().invoke(app, [], input="{not json")
    assert result.exit_code == 2
    assert "JSON" in result.output

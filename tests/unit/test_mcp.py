"""Unit tests for MCP server tools — direct function calls, no transport.

FastMCP's ``@mcp.tool`` wraps functions in ``FunctionTool`` objects.  We call
the underlying function via ``.fn`` to test the business logic directly.
"""

from __future__ import annotations

import json

import pytest
from fastmcp.exceptions import ToolError

# Import the module-level state so we can swap it between tests
import reqlint.mcp.server as mcp_mod
from reqlint.mcp.server import (
    get_request_schema,
    list_operations,
    list_specs,
    load_spec,
    remove_spec,
    validate_json,
    validate_payload,
)
from reqlint.service.spec_store import SpecStore
from tests.conftest import SAMPLE_SPEC_YAML

# Unwrap FunctionTool → raw functions
_validate_json = validate_json.fn
_validate_payload = validate_payload.fn
_load_spec = load_spec.fn
_list_specs = list_specs.fn
_list_operations = list_operations.fn
_get_request_schema = get_request_schema.fn
_remove_spec = remove_spec.fn


@pytest.fixture(autouse=True)
def _fresh_store() -> None:
    """Give each test an empty SpecStore."""
    mcp_mod._store = SpecStore()


def _load_sample() -> str:
    result = _load_spec(SAMPLE_SPEC_YAML)
    return result.split("spec_id: ")[1].split("\n")[0].strip()


# ---------------------------------------------------------------------------
# Validation tools
# ---------------------------------------------------------------------------


class TestValidateJson:
    def test_valid(self) -> None:
        result = _validate_json('{"a": 1}')
        assert result == "Payload is valid JSON (no request-body schema was checked)."

    def test_syntax_error_with_snippet(self) -> None:
        result = _validate_json('{"a": tru}')
        assert result.startswith("Invalid JSON (line 1, column 7): ")
        assert "near: " in result
        assert ">>>tru<<<" in result

    def test_multiline_snippet_escapes_newlines(self) -> None:
        result = _validate_json('{\n  "a": 1\n  "b": 2\n}')
        assert "(line 3, column 3)" in result
        assert '>>>"b"<<<' in result
        assert "\\n" in result

    def test_schema_errors(self) -> None:
        schema = json.dumps({"type": "object", "required": ["id", "name"]})
        result = _validate_json('{"id": 1}', schema)
        assert result.startswith("Schema errors (1):")
        assert '  - name: Required field "name" is missing' in result

    def test_schema_match(self) -> None:
        schema = json.dumps({"properties": {"id": {"type": "integer"}}})
        result = _validate_json('{"id": 1}', schema)
        assert result == "Payload is valid JSON and matches the request schema."

    def test_invalid_schema_json(self) -> None:
        with pytest.raises(ToolError, match="not valid JSON"):
            _validate_json("{}", "{nope")

    def test_schema_must_be_object(self) -> None:
        with pytest.raises(ToolError, match="must be a JSON object"):
            _validate_json("{}", "[1, 2]")

    def test_blank_schema_is_ignored(self) -> None:
        assert "no request-body schema" in _validate_json("{}", "   ")


class TestValidatePayload:
    def test_against_loaded_spec(self) -> None:
        spec_id = _load_sample()
        result = _validate_payload(spec_id, "POST", "/users", '{"id": "abc", "name": "Ada"}')
        assert result.startswith("Schema errors (1):")
        assert 'Field "id" must be of type integer, got string' in result

    def test_operation_without_schema(self) -> None:
        spec_id = _load_sample()
        result = _validate_payload(spec_id, "get", "/users/{id}", "{}")
        assert "no request-body schema was checked" in result

    def test_unknown_spec(self) -> None:
        with pytest.raises(ToolError, match="No specification loaded"):
            _validate_payload("nope", "post", "/users", "{}")


# ---------------------------------------------------------------------------
# Spec tools
# ---------------------------------------------------------------------------


class TestLoadSpec:
    def test_load(self) -> None:
        result = _load_spec(SAMPLE_SPEC_YAML)
        assert result.startswith("Specification loaded successfully.")
        assert "Users API" in result
        assert "operations: 2 (1 with a JSON request body)" in result

    def test_load_invalid(self) -> None:
        with pytest.raises(ToolError, match="Could not load specification"):
            _load_spec("openapi: 3.0.0\n")


class TestListTools:
    def test_list_specs_empty(self) -> None:
        assert _list_specs() == "No specifications loaded."

    def test_list_specs(self) -> None:
        spec_id = _load_sample()
        result = _list_specs()
        assert spec_id in result
        assert "Users API" in result

    def test_list_operations(self) -> None:
        spec_id = _load_sample()
        lines = _list_operations(spec_id).splitlines()
        assert lines[0].split() == ["POST", "/users", "[body", "schema]"]
        assert lines[1].split() == ["GET", "/users/{id}"]

    def test_list_operations_unknown(self) -> None:
        with pytest.raises(ToolError):
            _list_operations("nope")


class TestGetRequestSchema:
    def test_schema_as_json(self) -> None:
        spec_id = _load_sample()
        schema = json.loads(_get_request_schema(spec_id, "post", "/users"))
        assert schema["required"] == ["id", "name"]
        assert schema["properties"]["tags"] == {"type": "array", "items": {"type": "string"}}

    def test_no_schema(self) -> None:
        spec_id = _load_sample()
        result = _get_request_schema(spec_id, "get", "/users/{id}")
        assert result == "No JSON request-body schema for GET /users/{id}."

    def test_schema_with_date_example(self) -> None:
        spec = (
            "openapi: 3.0.0\n"
            "paths:\n"
            "  /events:\n"
            "    post:\n"
            "      requestBody:\n"
            "        content:\n"
            "          application/json:\n"
            "            schema:\n"
            "              type: object\n"
            "              properties:\n"
            "                day:\n"
            "                  type: string\n"
            "                  example: 2024-01-01\n"
        )
        spec_id = _load_spec(spec).split("spec_id: ")[1].split("\n")[0].strip()
        schema = json.loads(_get_request_schema(spec_id, "post", "/events"))
        assert schema["properties"]["day"]["example"] == "2024-01-01"


class TestRemoveSpec:
    def test_remove(self) -> None:
        spec_id = _load_sample()
        assert _remove_spec(spec_id) == f"Specification {spec_id} removed."
        assert _list_specs() == "No specifications loaded."

    def test_remove_unknown(self) -> None:
        with pytest.raises(ToolError):
            _remove_spec("nope")


class TestUninitialisedStore:
    def test_tools_require_store(self) -> None:
        mcp_mod._store = None
        with pytest.raises(ToolError, match="not initialised"):
            _list_specs()

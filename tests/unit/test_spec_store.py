"""Tests for the in-memory SpecStore service."""

from __future__ import annotations

import pytest

from reqlint.models.errors import SpecLoadError
from reqlint.service.spec_store import SpecStore
from tests.conftest import PETSTORE_V2, PETSTORE_V3, SAMPLE_SPEC_YAML


class TestLoadSpec:
    def test_load_returns_summary(self, store: SpecStore) -> None:
        result = store.load_spec(SAMPLE_SPEC_YAML)
        assert len(result.spec_id) == 8
        assert result.title == "Users API"
        assert result.version == "1.0"
        assert result.openapi_version == "3.0.0"
        assert result.operations == 2
        assert result.operations_with_body == 1

    def test_load_v2_json(self, store: SpecStore) -> None:
        result = store.load_spec(PETSTORE_V2.read_text(encoding="utf-8"))
        assert result.title == "Legacy Petstore"
        assert result.openapi_version == "2.0"
        assert result.operations_with_body == 1

    def test_ids_are_unique(self, store: SpecStore) -> None:
        first = store.load_spec(SAMPLE_SPEC_YAML)
        second = store.load_spec(SAMPLE_SPEC_YAML)
        assert first.spec_id != second.spec_id

    def test_parse_error_carries_position(self, store: SpecStore) -> None:
        with pytest.raises(SpecLoadError) as exc_info:
            store.load_spec('{\n  "paths": {,}\n}')
        assert exc_info.value.messages[0].endswith("(line 2, column 13)")

    def test_unsafe_document(self, store: SpecStore) -> None:
        with pytest.raises(SpecLoadError, match="Unsafe specification document"):
            store.load_spec("paths: {}\na: &a [1]\nb: *a\n")

    def test_size_limit(self) -> None:
        store = SpecStore(max_spec_size=50)
        with pytest.raises(SpecLoadError, match="maximum size"):
            store.load_spec(SAMPLE_SPEC_YAML)

    def test_failed_load_stores_nothing(self, store: SpecStore) -> None:
        with pytest.raises(SpecLoadError):
            store.load_spec("openapi: 3.0.0\n")
        assert store.list_specs() == []


class TestRegistry:
    def test_list_specs(self, store: SpecStore) -> None:
        result = store.load_spec(PETSTORE_V3.read_text(encoding="utf-8"))
        specs = store.list_specs()
        assert len(specs) == 1
        assert specs[0].spec_id == result.spec_id
        assert specs[0].title == "Petstore"
        assert specs[0].operations == 5

    def test_get_spec(self, store: SpecStore) -> None:
        result = store.load_spec(SAMPLE_SPEC_YAML)
        assert "/users" in store.get_spec(result.spec_id)["paths"]

    def test_list_operations(self, store: SpecStore) -> None:
        result = store.load_spec(SAMPLE_SPEC_YAML)
        operations = store.list_operations(result.spec_id)
        assert [(op.method, op.path, op.operation_id) for op in operations] == [
            ("POST", "/users", "createUser"),
            ("GET", "/users/{id}", "getUser"),
        ]

    def test_remove_spec(self, store: SpecStore) -> None:
        result = store.load_spec(SAMPLE_SPEC_YAML)
        store.remove_spec(result.spec_id)
        assert store.list_specs() == []
        with pytest.raises(KeyError):
            store.get_spec(result.spec_id)

    @pytest.mark.parametrize("method_name", ["get_spec", "list_operations", "remove_spec"])
    def test_unknown_id(self, store: SpecStore, method_name: str) -> None:
        with pytest.raises(KeyError, match="No specification loaded with id 'nope'"):
            getattr(store, method_name)("nope")


class TestValidation:
    def test_get_request_schema(self, store: SpecStore) -> None:
        result = store.load_spec(SAMPLE_SPEC_YAML)
        schema = store.get_request_schema(result.spec_id, "post", "/users")
        assert schema is not None
        assert schema.required == ["id", "name"]
        assert store.get_request_schema(result.spec_id, "get", "/users/{id}") is None

    def test_validate_payload(self, store: SpecStore) -> None:
        result = store.load_spec(SAMPLE_SPEC_YAML)
        outcome = store.validate_payload(result.spec_id, "post", "/users", '{"id": 1}')
        assert outcome.schema_checked is True
        assert [e.message for e in outcome.schema_errors] == ['Required field "name" is missing']

    def test_validate_payload_unknown_spec(self, store: SpecStore) -> None:
        with pytest.raises(KeyError):
            store.validate_payload("nope", "post", "/users", "{}")

    def test_validate_text_syntax_only(self, store: SpecStore) -> None:
        outcome = store.validate_text('{"a": 1')
        assert outcome.syntax.valid is False
        assert outcome.syntax.offset == 7

    def test_validate_text_with_schema(self, store: SpecStore) -> None:
        outcome = store.validate_text('{"a": 1}', {"properties": {"a": {"type": "string"}}})
        assert [e.path for e in outcome.schema_errors] == ["a"]

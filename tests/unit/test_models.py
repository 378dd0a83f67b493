"""Tests for the schema node and outcome models."""

from __future__ import annotations

from typing import Any

from reqlint.models.diagnostics import HighlightRange, SchemaError, SyntaxDiagnosis, ValidationOutcome
from reqlint.models.errors import ReqlintError, SpecLoadError, SpecParseError, SpecSafetyError
from reqlint.models.schema import SchemaNode


class TestSchemaNode:
    def test_from_raw_known_fields(self) -> None:
        node = SchemaNode.from_raw(
            {
                "type": "object",
                "required": ["a", "a", "b"],
                "properties": {"a": {"type": "string", "nullable": True}},
            }
        )
        assert node is not None
        assert node.type == "object"
        assert node.required == ["a", "b"]
        assert node.properties["a"].nullable is True

    def test_from_raw_non_mapping(self) -> None:
        assert SchemaNode.from_raw(None) is None
        assert SchemaNode.from_raw("object") is None
        assert SchemaNode.from_raw([{"type": "string"}]) is None

    def test_ref_alias(self) -> None:
        node = SchemaNode.from_raw({"$ref": "#/components/schemas/X"})
        assert node.is_ref
        assert node.ref == "#/components/schemas/X"
        assert node.to_raw() == {"$ref": "#/components/schemas/X"}

    def test_extra_keywords_preserved(self) -> None:
        raw = {"type": "string", "format": "email", "description": "Contact address"}
        assert SchemaNode.from_raw(raw).to_raw() == raw

    def test_wrongly_shaped_fields_dropped(self) -> None:
        node = SchemaNode.from_raw(
            {"type": ["string", "null"], "required": "id", "items": 5, "nullable": "yes"}
        )
        assert node.type is None
        assert node.required == []
        assert node.items is None
        assert node.nullable is False

    def test_in_memory_cycle_is_cut(self) -> None:
        raw: dict[str, Any] = {"type": "object", "properties": {}}
        raw["properties"]["self"] = raw
        node = SchemaNode.from_raw(raw)
        assert node.properties["self"].type is None

    def test_passes_through_existing_node(self) -> None:
        node = SchemaNode(type="string")
        assert SchemaNode.from_raw(node) is node


class TestValidationOutcome:
    def test_valid_when_syntax_ok_and_no_schema_errors(self) -> None:
        outcome = ValidationOutcome(syntax=SyntaxDiagnosis(valid=True))
        assert outcome.valid is True

    def test_schema_errors_make_it_invalid(self) -> None:
        outcome = ValidationOutcome(
            syntax=SyntaxDiagnosis(valid=True),
            schema_errors=[SchemaError(path="id", message="bad")],
            schema_checked=True,
        )
        assert outcome.valid is False

    def test_serialises_valid_flag(self) -> None:
        outcome = ValidationOutcome(
            syntax=SyntaxDiagnosis(valid=False, error_message="x", offset=0, line=1, column=1),
            ranges=[HighlightRange(start=0, end=1)],
        )
        dumped = outcome.model_dump()
        assert dumped["valid"] is False
        assert dumped["ranges"] == [{"start": 0, "end": 1}]


class TestErrors:
    def test_hierarchy(self) -> None:
        assert issubclass(SpecSafetyError, ReqlintError)
        assert issubclass(SpecParseError, ReqlintError)
        assert issubclass(SpecLoadError, ReqlintError)

    def test_parse_error_position(self) -> None:
        exc = SpecParseError("bad", line=3, column=7)
        assert (exc.line, exc.column) == (3, 7)
        assert str(exc) == "bad"

    def test_load_error_joins_messages(self) -> None:
        exc = SpecLoadError(["one", "two"])
        assert exc.messages == ["one", "two"]
        assert str(exc) == "one; two"

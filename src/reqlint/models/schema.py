"""Schema node model: the restricted JSON-Schema/OpenAPI subset that reqlint checks."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Keys interpreted by SchemaNode; everything else is kept as extra data.
_KNOWN_KEYS = frozenset({"type", "properties", "required", "items", "nullable", "$ref"})


class SchemaNode(BaseModel):
    """One node of a request-body schema.

    Only ``type``, ``properties``, ``required``, ``items``, ``nullable`` and
    ``$ref`` carry meaning for validation.  Other keywords (``format``,
    ``description``, ``oneOf`` ...) are preserved as extra fields so a node can
    be rendered back to the document it came from, but they are never checked.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str | None = None
    properties: dict[str, SchemaNode] | None = None
    required: list[str] = []
    items: SchemaNode | None = None
    nullable: bool = False
    ref: str | None = Field(default=None, alias="$ref")

    @property
    def is_ref(self) -> bool:
        return self.ref is not None

    @classmethod
    def from_raw(cls, raw: Any) -> SchemaNode | None:
        """Leniently convert a raw schema mapping into a ``SchemaNode``.

        Returns ``None`` when *raw* is not a mapping.  Fields of unexpected
        shape are dropped rather than rejected, so a malformed document turns
        into "no constraint" instead of an exception.
        """
        if isinstance(raw, SchemaNode):
            return raw
        if not isinstance(raw, Mapping):
            return None
        return cls._coerce(raw, frozenset())

    @classmethod
    def _coerce(cls, raw: Mapping[str, Any], seen: frozenset[int]) -> SchemaNode:
        # In-memory documents may contain real cycles; cut them off.
        if id(raw) in seen:
            return cls()
        seen = seen | {id(raw)}

        data: dict[str, Any] = {
            key: value
            for key, value in raw.items()
            if isinstance(key, str) and key not in _KNOWN_KEYS
        }

        type_ = raw.get("type")
        if isinstance(type_, str):
            data["type"] = type_

        properties = raw.get("properties")
        if isinstance(properties, Mapping):
            data["properties"] = {
                str(name): cls._coerce(sub, seen) if isinstance(sub, Mapping) else cls()
                for name, sub in properties.items()
            }

        required = raw.get("required")
        if isinstance(required, list | tuple):
            data["required"] = list(dict.fromkeys(r for r in required if isinstance(r, str)))

        items = raw.get("items")
        if isinstance(items, Mapping):
            data["items"] = cls._coerce(items, seen)

        nullable = raw.get("nullable")
        if isinstance(nullable, bool):
            data["nullable"] = nullable

        ref = raw.get("$ref")
        if isinstance(ref, str):
            data["$ref"] = ref

        return cls.model_validate(data)

    def to_raw(self) -> dict[str, Any]:
        """Render the node back to a plain JSON-Schema-style mapping."""
        return self.model_dump(by_alias=True, exclude_defaults=True)

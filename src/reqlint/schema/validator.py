"""Recursive validation of parsed JSON data against a resolved schema node.

Checks a deliberately small subset of JSON Schema: ``required``, ``type``,
``nullable`` and nested ``properties``/``items``.  Every failing check
contributes its own error, in schema declaration order and then array index
order; unknown properties in the data are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Any

from reqlint.models.diagnostics import SchemaError
from reqlint.models.schema import SchemaNode

logger = logging.getLogger(__name__)

RefLookup = Callable[[str], SchemaNode | None]


class JsonKind(StrEnum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


def kind_of(value: Any) -> str:
    """Runtime JSON kind of a decoded value."""
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, int):
        return JsonKind.INTEGER
    if isinstance(value, float):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, Mapping):
        return JsonKind.OBJECT
    if isinstance(value, list | tuple):
        return JsonKind.ARRAY
    return type(value).__name__


def _type_matches(value: Any, kind: str, expected: str) -> bool:
    if kind == expected:
        return True
    # integers are numbers; integral floats (``1.0``) are integers
    if expected == JsonKind.NUMBER:
        return kind == JsonKind.INTEGER
    if expected == JsonKind.INTEGER:
        return kind == JsonKind.NUMBER and float(value).is_integer()
    return False


def _prefixed(errors: list[SchemaError], prefix: str) -> list[SchemaError]:
    return [SchemaError(path=f"{prefix}{e.path}", message=e.message) for e in errors]


class SchemaValidator:
    """Validates decoded JSON values against :class:`SchemaNode` trees.

    *lookup_ref* dereferences ``$ref`` nodes met inside the schema (usually
    :meth:`SchemaResolver.lookup_ref`).  Without it, reference nodes carry no
    constraints.  Self-referential schemas are safe: recursion follows the
    data, which is finite.
    """

    def __init__(self, lookup_ref: RefLookup | None = None) -> None:
        self._lookup_ref = lookup_ref

    def validate(self, data: Any, schema: SchemaNode | Mapping[str, Any] | None) -> list[SchemaError]:
        """Return every schema violation in *data*; an empty list means valid."""
        try:
            node = self._deref(SchemaNode.from_raw(schema))
            if node is None:
                return []
            if isinstance(data, list) and node.type == JsonKind.ARRAY and node.items is not None:
                return self._check_items("", data, node.items)
            return self._check_object(data, node)
        except RecursionError:
            logger.warning("Payload is nested too deeply for schema validation")
            return [SchemaError(path="", message="Payload is nested too deeply to validate")]

    # -- internal ------------------------------------------------------------

    def _deref(self, node: SchemaNode | None) -> SchemaNode | None:
        """Follow a chain of ``$ref`` nodes; unresolvable or cyclic chains stop where they are."""
        seen: set[str] = set()
        while node is not None and node.ref is not None and self._lookup_ref is not None:
            if node.ref in seen:
                break
            seen.add(node.ref)
            target = self._lookup_ref(node.ref)
            if target is None:
                break
            node = target
        return node

    def _check_object(self, data: Any, node: SchemaNode) -> list[SchemaError]:
        if not isinstance(data, Mapping):
            return []
        errors: list[SchemaError] = []

        for name in node.required:
            if name not in data:
                errors.append(
                    SchemaError(path=name, message=f'Required field "{name}" is missing')
                )

        for key, prop in (node.properties or {}).items():
            if key in data:
                errors.extend(self._check_property(key, data[key], self._deref(prop)))

        return errors

    def _check_property(self, key: str, value: Any, prop: SchemaNode | None) -> list[SchemaError]:
        if prop is None:
            return []
        errors: list[SchemaError] = []
        kind = kind_of(value)

        if prop.type is not None and not _type_matches(value, kind, prop.type):
            if not (kind == JsonKind.NULL and prop.nullable):
                errors.append(
                    SchemaError(
                        path=key,
                        message=f'Field "{key}" must be of type {prop.type}, got {kind}',
                    )
                )

        if (
            prop.type == JsonKind.OBJECT
            and prop.properties is not None
            and isinstance(value, Mapping)
        ):
            errors.extend(_prefixed(self._check_object(value, prop), f"{key}."))

        if prop.type == JsonKind.ARRAY and prop.items is not None and isinstance(value, list):
            errors.extend(self._check_items(key, value, prop.items))

        return errors

    def _check_items(self, key: str, values: list[Any], items: SchemaNode) -> list[SchemaError]:
        resolved = self._deref(items)
        if resolved is None:
            return []
        errors: list[SchemaError] = []

        for index, item in enumerate(values):
            location = f"{key}[{index}]"
            kind = kind_of(item)
            if resolved.type is not None and not _type_matches(item, kind, resolved.type):
                errors.append(
                    SchemaError(
                        path=location,
                        message=(
                            f'Array element "{location}" must be of type '
                            f"{resolved.type}, got {kind}"
                        ),
                    )
                )
            if (
                resolved.type == JsonKind.OBJECT
                and resolved.properties is not None
                and isinstance(item, Mapping)
            ):
                errors.extend(_prefixed(self._check_object(item, resolved), f"{location}."))

        return errors


def validate(
    data: Any,
    schema: SchemaNode | Mapping[str, Any] | None,
    lookup_ref: RefLookup | None = None,
) -> list[SchemaError]:
    """Validate *data* against *schema*; see :class:`SchemaValidator`."""
    return SchemaValidator(lookup_ref).validate(data, schema)

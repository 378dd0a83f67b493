"""Request-body schema resolution from OpenAPI 2/3 specification documents."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from reqlint.models.schema import SchemaNode

logger = logging.getLogger(__name__)

# Probed in this order: OpenAPI 3 first, then OpenAPI 2.
_REF_TABLES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("#/components/schemas/", ("components", "schemas")),
    ("#/definitions/", ("definitions",)),
)
_MEDIA_TYPES = ("application/json", "application/*", "*/*")
_HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


@dataclass(frozen=True)
class OperationInfo:
    """One operation declared in a specification document."""

    method: str
    path: str
    operation_id: str | None
    summary: str | None
    has_request_schema: bool


def _dig(value: Any, *keys: str) -> Any:
    """Follow *keys* through nested mappings; ``None`` as soon as a step is missing."""
    for key in keys:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _unescape_pointer(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def is_local_ref(ref: str) -> bool:
    """True when *ref* points into a schema table this resolver understands."""
    return any(ref.startswith(prefix) for prefix, _table in _REF_TABLES)


class SchemaResolver:
    """Resolves request-body schemas from one specification document.

    A resolver is bound to a single document, so its memo of resolved schemas
    can never leak between documents: give a different document a different
    resolver.  Lookups never raise; anything missing or malformed resolves to
    ``None``.
    """

    def __init__(self, spec: Mapping[str, Any]) -> None:
        self._spec = spec if isinstance(spec, Mapping) else {}
        self._lock = threading.Lock()
        self._schemas: dict[tuple[str, str], SchemaNode | None] = {}
        self._refs: dict[str, SchemaNode | None] = {}

    # -- public API ----------------------------------------------------------

    def resolve(self, method: str, path: str) -> SchemaNode | None:
        """Return the request-body schema of ``method path``, or ``None``."""
        if not isinstance(method, str) or not isinstance(path, str):
            return None
        key = (method.lower(), path)
        with self._lock:
            if key in self._schemas:
                return self._schemas[key]
        node = self._resolve_uncached(*key)
        with self._lock:
            self._schemas[key] = node
        return node

    def lookup_ref(self, ref: str) -> SchemaNode | None:
        """Return the schema a local ``$ref`` names, or ``None`` if it cannot be found."""
        with self._lock:
            if ref in self._refs:
                return self._refs[ref]
        node = self._safe_from_raw(self._lookup_raw(ref))
        with self._lock:
            self._refs[ref] = node
        return node

    def list_operations(self) -> list[OperationInfo]:
        """All operations in the document, in declaration order."""
        return [
            OperationInfo(
                method=method.upper(),
                path=path,
                operation_id=_str_or_none(operation.get("operationId")),
                summary=_str_or_none(operation.get("summary")),
                has_request_schema=self.resolve(method, path) is not None,
            )
            for method, path, operation in self._iter_operations()
        ]

    # -- internal ------------------------------------------------------------

    def _iter_operations(self) -> Iterator[tuple[str, str, Mapping[str, Any]]]:
        paths = self._spec.get("paths")
        if not isinstance(paths, Mapping):
            return
        for path, item in paths.items():
            if not isinstance(item, Mapping):
                continue
            for method in _HTTP_METHODS:
                operation = item.get(method)
                if isinstance(operation, Mapping):
                    yield method, str(path), operation

    def _resolve_uncached(self, method: str, path: str) -> SchemaNode | None:
        content = _dig(self._spec, "paths", path, method, "requestBody", "content")
        if not isinstance(content, Mapping):
            return None

        media = next(
            (content[m] for m in _MEDIA_TYPES if isinstance(content.get(m), Mapping)),
            None,
        )
        if media is None:
            return None

        raw = media.get("schema")
        if not isinstance(raw, Mapping):
            # Some tooling stores the reference beside the media type instead.
            schema_ref = media.get("schemaRef")
            raw = {"$ref": schema_ref} if isinstance(schema_ref, str) else schema_ref
        if not isinstance(raw, Mapping):
            return None

        # Exactly one dereferencing hop; nested references are the validator's job.
        ref = raw.get("$ref")
        if isinstance(ref, str) and is_local_ref(ref):
            raw = self._lookup_raw(ref)

        node = self._safe_from_raw(raw)
        if node is None:
            logger.debug("No request schema for %s %s", method.upper(), path)
        return node

    def _lookup_raw(self, ref: str) -> Any:
        for prefix, table_keys in _REF_TABLES:
            if ref.startswith(prefix):
                table = _dig(self._spec, *table_keys)
                if not isinstance(table, Mapping):
                    return None
                return table.get(_unescape_pointer(ref[len(prefix) :]))
        return None

    @staticmethod
    def _safe_from_raw(raw: Any) -> SchemaNode | None:
        try:
            return SchemaNode.from_raw(raw)
        except RecursionError:
            logger.warning("Schema is nested too deeply to resolve; skipping schema validation")
            return None


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def resolve_request_schema(spec: Mapping[str, Any], method: str, path: str) -> SchemaNode | None:
    """Locate and dereference the request-body schema of ``method path`` in *spec*.

    Uses a throwaway :class:`SchemaResolver`; keep a resolver around to
    benefit from its memo when the same document is queried repeatedly.
    """
    return SchemaResolver(spec).resolve(method, path)

"""In-memory specification registry — core service layer reusable by MCP and REST API."""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Any

from reqlint.engine.pipeline import ValidationPipeline
from reqlint.models.diagnostics import ValidationOutcome
from reqlint.models.errors import SpecLoadError, SpecParseError, SpecSafetyError
from reqlint.models.schema import SchemaNode
from reqlint.parser.loader import SpecLoader
from reqlint.schema.resolver import OperationInfo, SchemaResolver

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class SpecLoadResult:
    """Result of loading a specification into the store."""

    spec_id: str
    title: str | None
    version: str | None
    openapi_version: str | None
    operations: int
    operations_with_body: int


@dataclass
class SpecSummary:
    """Short summary for listing specifications."""

    spec_id: str
    title: str | None
    version: str | None
    openapi_version: str | None
    operations: int


@dataclass
class _LoadedSpec:
    document: dict[str, Any]
    resolver: SchemaResolver
    operations: list[OperationInfo]


def _info_field(document: dict[str, Any], key: str) -> str | None:
    info = document.get("info")
    value = info.get(key) if isinstance(info, dict) else None
    return None if value is None else str(value)


def _openapi_version(document: dict[str, Any]) -> str | None:
    value = document.get("openapi", document.get("swagger"))
    return None if value is None else str(value)


# ---------------------------------------------------------------------------
# SpecStore
# ---------------------------------------------------------------------------


class SpecStore:
    """In-memory specification registry.  Thread-safe via ``threading.Lock``.

    Specs are keyed by short UUID (8-char hex).  Each loaded document gets its
    own :class:`SchemaResolver`, so resolved schemas are cached per document
    and dropped with it.
    """

    def __init__(self, max_spec_size: int | None = None) -> None:
        self._lock = threading.Lock()
        self._specs: dict[str, _LoadedSpec] = {}

        # Internal pipeline singletons (stateless, safe to share).
        self._loader = SpecLoader() if max_spec_size is None else SpecLoader(max_size=max_spec_size)
        self._pipeline = ValidationPipeline()

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex[:8]

    def _get(self, spec_id: str) -> _LoadedSpec:
        with self._lock:
            try:
                return self._specs[spec_id]
            except KeyError:
                raise KeyError(f"No specification loaded with id '{spec_id}'") from None

    # -- public API ----------------------------------------------------------

    def load_spec(self, spec_text: str) -> SpecLoadResult:
        """Parse and store a specification document.  Returns id + summary.

        Raises ``SpecLoadError`` if the document cannot be loaded.
        """
        try:
            document = self._loader.load_string(spec_text)
        except SpecSafetyError as exc:
            raise SpecLoadError([f"Unsafe specification document: {exc}"]) from exc
        except SpecParseError as exc:
            location = f" (line {exc.line}, column {exc.column})" if exc.line is not None else ""
            raise SpecLoadError([f"{exc}{location}"]) from exc

        resolver = SchemaResolver(document)
        operations = resolver.list_operations()
        spec_id = self._new_id()
        with self._lock:
            self._specs[spec_id] = _LoadedSpec(
                document=document, resolver=resolver, operations=operations
            )
        logger.info("Loaded specification %s with %d operation(s)", spec_id, len(operations))

        return SpecLoadResult(
            spec_id=spec_id,
            title=_info_field(document, "title"),
            version=_info_field(document, "version"),
            openapi_version=_openapi_version(document),
            operations=len(operations),
            operations_with_body=sum(1 for op in operations if op.has_request_schema),
        )

    def get_spec(self, spec_id: str) -> dict[str, Any]:
        """Look up a loaded document.  Raises ``KeyError`` if not found."""
        return self._get(spec_id).document

    def list_specs(self) -> list[SpecSummary]:
        """Return a short summary for every loaded specification."""
        with self._lock:
            items = list(self._specs.items())
        return [
            SpecSummary(
                spec_id=sid,
                title=_info_field(loaded.document, "title"),
                version=_info_field(loaded.document, "version"),
                openapi_version=_openapi_version(loaded.document),
                operations=len(loaded.operations),
            )
            for sid, loaded in items
        ]

    def list_operations(self, spec_id: str) -> list[OperationInfo]:
        """Operations declared by a loaded specification."""
        return list(self._get(spec_id).operations)

    def remove_spec(self, spec_id: str) -> None:
        """Unload a specification.  Raises ``KeyError`` if not found."""
        with self._lock:
            try:
                del self._specs[spec_id]
            except KeyError:
                raise KeyError(f"No specification loaded with id '{spec_id}'") from None

    def get_request_schema(self, spec_id: str, method: str, path: str) -> SchemaNode | None:
        """Resolved request-body schema for an operation, or ``None``."""
        return self._get(spec_id).resolver.resolve(method, path)

    def validate_payload(self, spec_id: str, method: str, path: str, text: str) -> ValidationOutcome:
        """Validate payload text against an operation of a loaded specification."""
        loaded = self._get(spec_id)
        return self._pipeline.run(text, method=method, path=path, resolver=loaded.resolver)

    def validate_text(
        self, text: str, schema: SchemaNode | dict[str, Any] | None = None
    ) -> ValidationOutcome:
        """Validate payload text against an explicit schema (or syntax only)."""
        return self._pipeline.run(text, schema=schema)

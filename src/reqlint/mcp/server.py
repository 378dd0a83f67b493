"""FastMCP server exposing reqlint's validation pipeline as MCP tools.

Run via::

    reqlint-mcp                       # reads .env (default: stdio)
    MCP_TRANSPORT=http reqlint-mcp    # streamable HTTP on port 9000
    MCP_TRANSPORT=sse  reqlint-mcp    # legacy SSE on port 9000

All tools share one in-memory ``SpecStore``.  Settings are loaded from
environment variables and ``.env`` file.
"""

from __future__ import annotations

import json
import logging

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from reqlint import __version__
from reqlint.models.diagnostics import HighlightRange, ValidationOutcome
from reqlint.models.errors import SpecLoadError
from reqlint.parser.ranges import split_highlights
from reqlint.parser.syntax import parse_json
from reqlint.service.spec_store import SpecStore
from reqlint.settings import Settings

# ---------------------------------------------------------------------------
# Server + shared state
# ---------------------------------------------------------------------------

logger = logging.getLogger("reqlint.mcp")

mcp = FastMCP("reqlint")
_store: SpecStore | None = None

_SNIPPET_CONTEXT = 30


def _resolve_store() -> SpecStore:
    if _store is None:
        raise ToolError("Spec store not initialised")
    return _store


def _snippet(text: str, outcome: ValidationOutcome) -> str | None:
    """One-line excerpt around the highlighted span, marked with ``>>> <<<``."""
    if not outcome.ranges:
        return None
    first = outcome.ranges[0]
    lo = max(0, first.start - _SNIPPET_CONTEXT)
    hi = min(len(text), first.end + _SNIPPET_CONTEXT)
    window = [
        HighlightRange(start=r.start - lo, end=r.end - lo)
        for r in outcome.ranges
        if r.start >= lo and r.end <= hi
    ]
    pieces = [
        f">>>{segment}<<<" if highlighted else segment
        for segment, highlighted in split_highlights(text[lo:hi], window)
    ]
    return "".join(pieces).replace("\n", "\\n")


def _format_outcome(text: str, outcome: ValidationOutcome) -> str:
    syntax = outcome.syntax
    if not syntax.valid:
        where = (
            f" (line {syntax.line}, column {syntax.column})" if syntax.has_position else ""
        )
        lines = [f"Invalid JSON{where}: {syntax.error_message}"]
        snippet = _snippet(text, outcome)
        if snippet is not None:
            lines.append(f"  near: {snippet}")
        return "\n".join(lines)

    if outcome.schema_errors:
        lines = [f"Schema errors ({len(outcome.schema_errors)}):"]
        lines.extend(f"  - {e.path}: {e.message}" for e in outcome.schema_errors)
        return "\n".join(lines)

    if outcome.schema_checked:
        return "Payload is valid JSON and matches the request schema."
    return "Payload is valid JSON (no request-body schema was checked)."


# ---------------------------------------------------------------------------
# Validation tools
# ---------------------------------------------------------------------------


@mcp.tool
def validate_json(text: str, schema_json: str | None = None) -> str:
    """Validate JSON payload text, optionally against an explicit JSON schema.

    Reports the parse error with line/column and the offending token, or the
    list of schema violations as ``path: message`` lines.

    Args:
        text: Candidate JSON payload.
        schema_json: Optional schema (JSON text) with type/properties/required/items/nullable.
    """
    logger.info("validate_json called (text length=%d)", len(text))
    schema = None
    if schema_json is not None and schema_json.strip():
        diagnosis, schema = parse_json(schema_json)
        if not diagnosis.valid:
            raise ToolError(f"schema_json is not valid JSON: {diagnosis.error_message}")
        if not isinstance(schema, dict):
            raise ToolError("schema_json must be a JSON object")
    outcome = _resolve_store().validate_text(text, schema)
    return _format_outcome(text, outcome)


@mcp.tool
def validate_payload(spec_id: str, method: str, path: str, text: str) -> str:
    """Validate JSON payload text against the request body of a loaded operation.

    Args:
        spec_id: Id returned by ``load_spec``.
        method: HTTP method (case-insensitive).
        path: Path exactly as declared in the spec, e.g. ``/users/{id}``.
        text: Candidate JSON payload.
    """
    logger.info("validate_payload called (%s %s, text length=%d)", method, path, len(text))
    store = _resolve_store()
    try:
        outcome = store.validate_payload(spec_id, method, path, text)
    except KeyError as exc:
        raise ToolError(str(exc.args[0])) from exc
    return _format_outcome(text, outcome)


# ---------------------------------------------------------------------------
# Spec tools
# ---------------------------------------------------------------------------


@mcp.tool
def load_spec(spec_text: str) -> str:
    """Load an OpenAPI 2 or 3 document (JSON or YAML) and return its spec_id.

    Args:
        spec_text: Complete specification document.
    """
    logger.info("load_spec called (length=%d)", len(spec_text))
    store = _resolve_store()
    try:
        result = store.load_spec(spec_text)
    except SpecLoadError as exc:
        logger.warning("load_spec failed: %s", exc)
        raise ToolError(f"Could not load specification: {exc}") from exc

    parts = [
        f"Specification loaded successfully.  spec_id: {result.spec_id}",
        f"  title:      {result.title or '-'}",
        f"  version:    {result.version or '-'}",
        f"  openapi:    {result.openapi_version or '-'}",
        f"  operations: {result.operations} ({result.operations_with_body} with a JSON request body)",
    ]
    return "\n".join(parts)


@mcp.tool
def list_specs() -> str:
    """List loaded specifications."""
    specs = _resolve_store().list_specs()
    if not specs:
        return "No specifications loaded."
    lines = ["Loaded specifications:", ""]
    for s in specs:
        lines.append(f"  {s.spec_id}  {s.title or '(untitled)'}  (operations: {s.operations})")
    return "\n".join(lines)


@mcp.tool
def list_operations(spec_id: str) -> str:
    """List the operations of a loaded specification.

    Args:
        spec_id: Id returned by ``load_spec``.
    """
    try:
        operations = _resolve_store().list_operations(spec_id)
    except KeyError as exc:
        raise ToolError(str(exc.args[0])) from exc
    if not operations:
        return "No operations declared."
    lines = []
    for op in operations:
        body = "  [body schema]" if op.has_request_schema else ""
        lines.append(f"  {op.method:<7} {op.path}{body}")
    return "\n".join(lines)


@mcp.tool
def get_request_schema(spec_id: str, method: str, path: str) -> str:
    """Return the resolved request-body schema of an operation as JSON.

    Args:
        spec_id: Id returned by ``load_spec``.
        method: HTTP method (case-insensitive).
        path: Path exactly as declared in the spec.
    """
    try:
        schema = _resolve_store().get_request_schema(spec_id, method, path)
    except KeyError as exc:
        raise ToolError(str(exc.args[0])) from exc
    if schema is None:
        return f"No JSON request-body schema for {method.upper()} {path}."
    return json.dumps(schema.to_raw(), indent=2)


@mcp.tool
def remove_spec(spec_id: str) -> str:
    """Unload a specification.

    Args:
        spec_id: Id returned by ``load_spec``.
    """
    try:
        _resolve_store().remove_spec(spec_id)
    except KeyError as exc:
        raise ToolError(str(exc.args[0])) from exc
    return f"Specification {spec_id} removed."


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the MCP server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "reqlint MCP Server v%s starting (transport=%s)",
        __version__,
        settings.mcp_transport,
    )

    global _store  # noqa: PLW0603
    _store = SpecStore(max_spec_size=settings.max_spec_size)

    if settings.mcp_transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(
            transport=settings.mcp_transport,
            host=settings.mcp_server_host,
            port=settings.mcp_server_port,
            log_level=settings.log_level.lower(),
        )


if __name__ == "__main__":
    main()

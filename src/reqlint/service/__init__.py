"""Service layer shared by the REST API and the MCP server."""

from reqlint.service.spec_store import SpecLoadResult, SpecStore, SpecSummary

__all__ = [
    "SpecLoadResult",
    "SpecStore",
    "SpecSummary",
]

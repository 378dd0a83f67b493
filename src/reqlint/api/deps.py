"""Dependency injection for FastAPI — SpecStore and pipeline singletons."""

from __future__ import annotations

from reqlint.engine.pipeline import ValidationPipeline
from reqlint.service.spec_store import SpecStore

_spec_store: SpecStore | None = None
_pipeline = ValidationPipeline()


def init_spec_store(store: SpecStore) -> None:
    """Set the global SpecStore (called at app startup)."""
    global _spec_store  # noqa: PLW0603
    _spec_store = store


def get_spec_store() -> SpecStore:
    """FastAPI ``Depends`` provider for SpecStore."""
    if _spec_store is None:
        raise RuntimeError("SpecStore not initialised — call init_spec_store() first")
    return _spec_store


def get_pipeline() -> ValidationPipeline:
    """FastAPI ``Depends`` provider for the stateless validation pipeline."""
    return _pipeline


def reset_spec_store() -> None:
    """Clear the global SpecStore (for tests)."""
    global _spec_store  # noqa: PLW0603
    _spec_store = None

"""Pydantic domain models for reqlint."""

from reqlint.models.diagnostics import (
    HighlightRange,
    SchemaError,
    SyntaxDiagnosis,
    ValidationOutcome,
)
from reqlint.models.errors import (
    ReqlintError,
    SpecLoadError,
    SpecParseError,
    SpecSafetyError,
)
from reqlint.models.schema import SchemaNode

__all__ = [
    "HighlightRange",
    "ReqlintError",
    "SchemaError",
    "SchemaNode",
    "SpecLoadError",
    "SpecParseError",
    "SpecSafetyError",
    "SyntaxDiagnosis",
    "ValidationOutcome",
]

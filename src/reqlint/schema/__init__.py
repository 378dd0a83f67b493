"""Schema resolution and validation for request bodies."""

from reqlint.schema.resolver import OperationInfo, SchemaResolver, resolve_request_schema
from reqlint.schema.validator import JsonKind, SchemaValidator, kind_of, validate

__all__ = [
    "JsonKind",
    "OperationInfo",
    "SchemaResolver",
    "SchemaValidator",
    "kind_of",
    "resolve_request_schema",
    "validate",
]

"""reqlint: live JSON request-body validation against OpenAPI schemas."""

from reqlint.engine.pipeline import ValidationPipeline
from reqlint.parser.ranges import find_error_ranges, merge_ranges
from reqlint.parser.syntax import validate_syntax
from reqlint.schema.resolver import SchemaResolver, resolve_request_schema
from reqlint.schema.validator import SchemaValidator, validate

__version__ = "0.1.0"

__all__ = [
    "SchemaResolver",
    "SchemaValidator",
    "ValidationPipeline",
    "__version__",
    "find_error_ranges",
    "merge_ranges",
    "resolve_request_schema",
    "validate",
    "validate_syntax",
]

"""Orchestrates the full validation pipeline: Syntax → Ranges → Schema resolution → Schema checks."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from reqlint.models.diagnostics import ValidationOutcome
from reqlint.models.schema import SchemaNode
from reqlint.parser.ranges import find_error_ranges, merge_ranges
from reqlint.parser.syntax import parse_json
from reqlint.schema.resolver import SchemaResolver
from reqlint.schema.validator import SchemaValidator

logger = logging.getLogger(__name__)


class ValidationPipeline:
    """Orchestrates: Syntax → Error ranges → Schema resolution → Schema validation.

    Stateless; one instance can be shared between threads.
    """

    def run(
        self,
        text: str,
        *,
        schema: SchemaNode | Mapping[str, Any] | None = None,
        spec: Mapping[str, Any] | None = None,
        method: str | None = None,
        path: str | None = None,
        resolver: SchemaResolver | None = None,
    ) -> ValidationOutcome:
        """Validate payload *text*.

        An explicit *schema* wins.  Otherwise the request-body schema of
        ``method path`` is resolved from *resolver* (or a throwaway resolver
        over *spec*).  Without any schema only syntax is checked.
        """
        # Phase 1: Syntax
        diagnosis, data = parse_json(text)
        if not diagnosis.valid:
            ranges = merge_ranges(find_error_ranges(text, diagnosis.offset))
            logger.debug(
                "Syntax error at offset %s (line %s, column %s): %s",
                diagnosis.offset, diagnosis.line, diagnosis.column, diagnosis.error_message,
            )
            return ValidationOutcome(syntax=diagnosis, ranges=ranges)

        if not text or not text.strip():
            return ValidationOutcome(syntax=diagnosis)

        # Phase 2: Schema resolution
        if resolver is None and spec is not None:
            resolver = SchemaResolver(spec)
        target: SchemaNode | Mapping[str, Any] | None = (
            schema if isinstance(schema, SchemaNode | Mapping) else None
        )
        if target is None and resolver is not None and method and path:
            target = resolver.resolve(method, path)
        if target is None:
            logger.debug("No schema available; syntax-only validation")
            return ValidationOutcome(syntax=diagnosis)

        # Phase 3: Schema validation
        validator = SchemaValidator(resolver.lookup_ref if resolver is not None else None)
        errors = validator.validate(data, target)
        logger.debug("Schema validation finished with %d error(s)", len(errors))
        return ValidationOutcome(syntax=diagnosis, schema_errors=errors, schema_checked=True)

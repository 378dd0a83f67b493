"""Stateless validation endpoints: payload text in, diagnosis out."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from reqlint.api.deps import get_pipeline
from reqlint.api.schemas import SyntaxRequest, SyntaxResponse, ValidateRequest
from reqlint.engine.pipeline import ValidationPipeline
from reqlint.models.diagnostics import ValidationOutcome
from reqlint.parser.ranges import find_error_ranges, merge_ranges
from reqlint.parser.syntax import validate_syntax

router = APIRouter()


@router.post("", response_model=ValidationOutcome)
async def validate_payload(
    body: ValidateRequest,
    pipeline: ValidationPipeline = Depends(get_pipeline),  # noqa: B008
) -> ValidationOutcome:
    """Validate payload text against an explicit schema or an inline OpenAPI document."""
    return pipeline.run(
        body.text,
        schema=body.body_schema,
        spec=body.spec,
        method=body.method,
        path=body.path,
    )


@router.post("/syntax", response_model=SyntaxResponse)
async def check_syntax(body: SyntaxRequest) -> SyntaxResponse:
    """Check JSON syntax only and return the span to highlight."""
    diagnosis = validate_syntax(body.text)
    ranges = merge_ranges(find_error_ranges(body.text, diagnosis.offset))
    return SyntaxResponse(syntax=diagnosis, ranges=ranges)

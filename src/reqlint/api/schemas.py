"""API request/response Pydantic schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from reqlint.models.diagnostics import HighlightRange, SyntaxDiagnosis


class ValidateRequest(BaseModel):
    """Request body for POST /validate."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(description="Candidate JSON payload text")
    body_schema: dict[str, Any] | None = Field(
        default=None,
        alias="schema",
        description="Explicit schema; takes precedence over spec/method/path",
    )
    spec: dict[str, Any] | None = Field(
        default=None, description="OpenAPI document to resolve the request-body schema from"
    )
    method: str | None = None
    path: str | None = Field(default=None, description="Templated path exactly as declared")


class SyntaxRequest(BaseModel):
    """Request body for POST /validate/syntax."""

    text: str


class SyntaxResponse(BaseModel):
    """Syntax diagnosis plus the ranges to highlight."""

    syntax: SyntaxDiagnosis
    ranges: list[HighlightRange] = []


class SpecLoadRequest(BaseModel):
    """Request body for POST /specs."""

    spec_text: str = Field(description="OpenAPI document as JSON or YAML text")


class SpecLoadResponse(BaseModel):
    """Response for POST /specs."""

    spec_id: str
    title: str | None = None
    version: str | None = None
    openapi_version: str | None = None
    operations: int
    operations_with_body: int


class SpecSummaryResponse(BaseModel):
    """Short spec summary for listing."""

    spec_id: str
    title: str | None = None
    version: str | None = None
    openapi_version: str | None = None
    operations: int


class OperationResponse(BaseModel):
    """One operation of a loaded specification."""

    method: str
    path: str
    operation_id: str | None = None
    summary: str | None = None
    has_request_schema: bool


class SchemaResponse(BaseModel):
    """Resolved request-body schema of an operation."""

    model_config = ConfigDict(populate_by_name=True)

    spec_id: str
    method: str
    path: str
    body_schema: dict[str, Any] = Field(alias="schema")


class PayloadValidateRequest(BaseModel):
    """Request body for POST /specs/{spec_id}/validate."""

    method: str
    path: str
    text: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""

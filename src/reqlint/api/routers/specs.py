"""Spec-store endpoints: load OpenAPI documents and validate payloads against them."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from reqlint.api.deps import get_spec_store
from reqlint.api.schemas import (
    OperationResponse,
    PayloadValidateRequest,
    SchemaResponse,
    SpecLoadRequest,
    SpecLoadResponse,
    SpecSummaryResponse,
)
from reqlint.models.diagnostics import ValidationOutcome
from reqlint.models.errors import SpecLoadError
from reqlint.service.spec_store import SpecStore

router = APIRouter()


def _not_found(spec_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Specification '{spec_id}' not found")


@router.post("", response_model=SpecLoadResponse, status_code=201)
async def load_spec(
    body: SpecLoadRequest,
    store: SpecStore = Depends(get_spec_store),  # noqa: B008
) -> SpecLoadResponse:
    """Load an OpenAPI document (JSON or YAML)."""
    try:
        result = store.load_spec(body.spec_text)
    except SpecLoadError as exc:
        raise HTTPException(
            status_code=422,
            detail={"message": "Invalid specification document", "errors": exc.messages},
        ) from None
    return SpecLoadResponse(
        spec_id=result.spec_id,
        title=result.title,
        version=result.version,
        openapi_version=result.openapi_version,
        operations=result.operations,
        operations_with_body=result.operations_with_body,
    )


@router.get("", response_model=list[SpecSummaryResponse])
async def list_specs(
    store: SpecStore = Depends(get_spec_store),  # noqa: B008
) -> list[SpecSummaryResponse]:
    """List all loaded specifications."""
    return [
        SpecSummaryResponse(
            spec_id=s.spec_id,
            title=s.title,
            version=s.version,
            openapi_version=s.openapi_version,
            operations=s.operations,
        )
        for s in store.list_specs()
    ]


@router.get("/{spec_id}/operations", response_model=list[OperationResponse])
async def list_operations(
    spec_id: str,
    store: SpecStore = Depends(get_spec_store),  # noqa: B008
) -> list[OperationResponse]:
    """List the operations of a loaded specification."""
    try:
        operations = store.list_operations(spec_id)
    except KeyError:
        raise _not_found(spec_id) from None
    return [
        OperationResponse(
            method=op.method,
            path=op.path,
            operation_id=op.operation_id,
            summary=op.summary,
            has_request_schema=op.has_request_schema,
        )
        for op in operations
    ]


@router.get("/{spec_id}/schema", response_model=SchemaResponse)
async def get_request_schema(
    spec_id: str,
    method: str,
    path: str,
    store: SpecStore = Depends(get_spec_store),  # noqa: B008
) -> SchemaResponse:
    """Return the resolved request-body schema of one operation."""
    try:
        schema = store.get_request_schema(spec_id, method, path)
    except KeyError:
        raise _not_found(spec_id) from None
    if schema is None:
        raise HTTPException(
            status_code=404, detail=f"No request-body schema for {method.upper()} {path}"
        )
    return SchemaResponse(spec_id=spec_id, method=method.upper(), path=path, schema=schema.to_raw())


@router.delete("/{spec_id}", status_code=204)
async def remove_spec(
    spec_id: str,
    store: SpecStore = Depends(get_spec_store),  # noqa: B008
) -> None:
    """Unload a specification."""
    try:
        store.remove_spec(spec_id)
    except KeyError:
        raise _not_found(spec_id) from None


@router.post("/{spec_id}/validate", response_model=ValidationOutcome)
async def validate_against_spec(
    spec_id: str,
    body: PayloadValidateRequest,
    store: SpecStore = Depends(get_spec_store),  # noqa: B008
) -> ValidationOutcome:
    """Validate payload text against an operation of a loaded specification."""
    try:
        return store.validate_payload(spec_id, body.method, body.path, body.text)
    except KeyError:
        raise _not_found(spec_id) from None

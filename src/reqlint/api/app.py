"""FastAPI application factory for reqlint."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from reqlint import __version__
from reqlint.api.deps import init_spec_store, reset_spec_store
from reqlint.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from reqlint.api.routers import specs, validation
from reqlint.api.schemas import HealthResponse
from reqlint.service.spec_store import SpecStore
from reqlint.settings import Settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Create/drop the SpecStore alongside the application."""
    settings: Settings = app.state.settings
    init_spec_store(SpecStore(max_spec_size=settings.max_spec_size))
    try:
        yield
    finally:
        reset_spec_store()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="reqlint",
        description="Validates JSON request payloads against OpenAPI request-body schemas.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(RequestBodyLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(RequestTimingMiddleware)

    app.include_router(validation.router, prefix="/validate", tags=["validation"])
    app.include_router(specs.router, prefix="/specs", tags=["specs"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("reqlint.api")
    logger.info(
        "reqlint API Server v%s starting (host=%s, port=%d)",
        __version__, settings.api_server_host, settings.effective_port,
    )

    uvicorn.run(
        "reqlint.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )

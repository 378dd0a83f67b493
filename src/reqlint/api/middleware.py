"""Middleware: request timing and body size limits."""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

_DEFAULT_MAX_BODY = 5 * 1024 * 1024  # 5 MB


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Add X-Request-Duration-Ms header with processing time."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-Duration-Ms"] = f"{duration_ms:.1f}"
        return response


class RequestBodyLimitMiddleware(BaseHTTPMiddleware):
    """Reject request bodies larger than ``max_body_bytes`` with 413.

    The ``Content-Length`` header is checked first for a cheap early
    rejection; the body is then streamed and counted so a missing or lying
    header cannot smuggle an oversized payload.  The consumed bytes are
    cached on ``request._body`` so downstream handlers can still use
    ``await request.body()``.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int = _DEFAULT_MAX_BODY) -> None:
        super().__init__(app)
        self._limit = max_body_bytes

    def _too_large(self) -> JSONResponse:
        limit_kb = self._limit // 1024
        return JSONResponse(
            status_code=413,
            content={"detail": f"Request body too large (max {limit_kb} KB)"},
        )

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                declared = None
            if declared is not None and declared > self._limit:
                return self._too_large()

        if request.method in ("POST", "PUT", "PATCH"):
            chunks: list[bytes] = []
            total = 0
            async for chunk in request.stream():
                total += len(chunk)
                if total > self._limit:
                    return self._too_large()
                chunks.append(chunk)
            request._body = b"".join(chunks)  # noqa: SLF001

        return await call_next(request)

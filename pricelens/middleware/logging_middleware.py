"""
Request/response logging middleware.

Logs API requests with timing and status codes, and binds a unique
``request_id`` to structlog's contextvars so engine logs emitted while
resolving a lookup (cache hits, matches, synthetic fallbacks) carry it.
"""

import logging
import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("pricelens.api")

QUIET_PATHS = frozenset({"/health"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every HTTP request and adds X-Request-ID / X-Response-Time headers."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = uuid.uuid4().hex[:8]

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.monotonic()
        try:
            response = await call_next(request)
        finally:
            duration_ms = round((time.monotonic() - start_time) * 1000, 1)

        if request.url.path not in QUIET_PATHS:
            logger.info(
                f"{request.method} {request.url.path} "
                f"→ {response.status_code} "
                f"({duration_ms}ms)"
            )

        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        response.headers["X-Request-ID"] = request_id

        structlog.contextvars.clear_contextvars()

        return response

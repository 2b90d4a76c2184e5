"""
Global exception handlers for the FastAPI application.

Catches:
1. QueryValidationError: 400 with the validation details.
2. CollaboratorError: 500 with a generic message; the failing data
   source is logged but never exposed to clients.
3. Other PriceLensError: 500.
4. Unhandled Exception: 500 with a unique ``error_id`` for correlation.

HTTPException is NOT handled here: FastAPI's built-in handler deals
with those.
"""

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pricelens.core.exceptions import CollaboratorError, PriceLensError, QueryValidationError

logger = logging.getLogger(__name__)

COLLABORATOR_FAILURE_DETAIL = "Failed to fetch price history"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers on the FastAPI app.

    Called from ``create_app()`` after all middleware and routers
    are registered.
    """

    @app.exception_handler(QueryValidationError)
    async def handle_validation_error(request: Request, exc: QueryValidationError) -> JSONResponse:
        logger.info(
            f"Rejected query: {exc.message}",
            extra={"path": request.url.path, "errors": exc.errors},
        )
        content: dict = {"detail": exc.message, "error_type": type(exc).__name__}
        if exc.errors:
            content["errors"] = exc.errors
        return JSONResponse(status_code=400, content=content)

    @app.exception_handler(CollaboratorError)
    async def handle_collaborator_error(request: Request, exc: CollaboratorError) -> JSONResponse:
        logger.error(
            f"{type(exc).__name__}: {exc.message}",
            exc_info=exc,
            extra={"collaborator": exc.source, "path": request.url.path},
        )
        return JSONResponse(
            status_code=500,
            content={"detail": COLLABORATOR_FAILURE_DETAIL, "error_type": "InternalError"},
        )

    @app.exception_handler(PriceLensError)
    async def handle_pricelens_error(request: Request, exc: PriceLensError) -> JSONResponse:
        logger.error(
            f"{type(exc).__name__}: {exc.message}",
            exc_info=exc,
            extra={"error_type": type(exc).__name__, "path": request.url.path},
        )
        return JSONResponse(
            status_code=500,
            content={"detail": exc.message, "error_type": type(exc).__name__},
        )

    @app.exception_handler(Exception)
    async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions: log, return 500 with error_id."""
        error_id = uuid.uuid4().hex[:8]
        logger.exception(
            f"Unhandled exception (error_id={error_id})",
            extra={"error_id": error_id, "path": request.url.path},
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "error_id": error_id,
            },
        )

"""Error Handlers — global exception handlers for the directory API.

Invariants:
    - DirectoryError → its own status with {"error", "code", ...}; validation adds "details"
    - RequestValidationError → 400 in the same shape as QueryValidationError
    - Exception (catch-all) → 500, never leaks internal details
    - "detail" (raw reason) is added to 500 bodies only when environment is development;
      it is always logged server-side

Design Decisions:
    - Three-layer handler: domain (DirectoryError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py to keep the app factory short
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from directory_api.config import get_settings
from directory_api.core.errors import (
    DirectoryError, ErrorSeverity, InternalQueryError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_directory_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _register_directory_error_handler(app: FastAPI) -> None:
    """Register directory domain/infrastructure error handler."""

    @app.exception_handler(DirectoryError)
    async def directory_error_handler(request: Request, exc: DirectoryError):
        """Handle all directory domain/infrastructure errors."""
        extra = {
            "error_code": exc.code,
            "path": request.url.path,
            "request_id": _request_id(request),
        }
        content = exc.to_response()
        if isinstance(exc, InternalQueryError):
            logger.error(
                f"{exc.code} during {exc.operation}: {exc.reason}",
                extra=extra, exc_info=exc,
            )
            if get_settings().is_development:
                content["detail"] = exc.reason
        elif exc.http_status >= 500:
            logger.error(f"{exc.code}: {exc.message}", extra=extra)
        else:
            logger.warning(f"{exc.code}: {exc.message}", extra=extra)
        return JSONResponse(status_code=exc.http_status, content=content)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"request_id": _request_id(request)},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details outside development."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            extra={"request_id": _request_id(request), "error_code": "INTERNAL_ERROR"},
            exc_info=True,
        )
        content = {
            "error": "Internal server error",
            "code": "INTERNAL_ERROR",
            "category": "internal",
            "severity": ErrorSeverity.CRITICAL.value,
        }
        if get_settings().is_development:
            content["detail"] = str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=content,
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": "Invalid request parameters",
        "code": "VALIDATION_ERROR",
        "category": "validation",
        "severity": ErrorSeverity.WARNING.value,
        "details": [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
            }
            for e in exc.errors()
        ],
    }

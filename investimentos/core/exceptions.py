"""
Global exception handlers for the FastAPI application.

Every error response follows the same JSON envelope::

    {
        "error": true,
        "message": "<human-readable description>"
    }

Request-validation failures add a ``details`` list of ``{field, message}``
entries and are reported as 400 Bad Request.

The domain exceptions below are raised by services and endpoint helpers
without importing FastAPI's HTTPException, keeping the service layer
framework-agnostic.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────────────
# Domain exceptions  (raised by service layer, caught by handlers below)
# ────────────────────────────────────────────────────────────────────────────


class AppException(Exception):
    """Base exception for all application-level errors."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundException(AppException):
    """Resource not found (404)."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            status_code=404,
            message=f"{resource} with id '{identifier}' not found",
        )


class BadRequestException(AppException):
    """Invalid input or a write the store refused (400)."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(status_code=400, message=message, details=details)


class ServiceUnavailableException(AppException):
    """A required collaborator (e.g. market-data provider) is not available (503)."""

    def __init__(self, message: str):
        super().__init__(status_code=503, message=message)


def format_validation_errors(errors: Any) -> list:
    """Flatten pydantic error dicts into ``{field, message}`` entries."""
    formatted = []
    for err in errors:
        loc = " -> ".join(str(part) for part in err["loc"])
        formatted.append({"field": loc, "message": err["msg"]})
    return formatted


# ────────────────────────────────────────────────────────────────────────────
# FastAPI exception handler registration
# ────────────────────────────────────────────────────────────────────────────


def add_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI application instance."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle domain-specific exceptions raised by the service layer."""
        content: dict = {"error": True, "message": exc.message}
        if exc.details is not None:
            content["details"] = exc.details
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle standard HTTP exceptions (e.g. 404 from path-not-found)."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": True, "message": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report request-validation failures as 400 with field-level messages."""
        errors = format_validation_errors(exc.errors())
        logger.info(
            "Validation failed on %s %s: %d error(s)",
            request.method,
            request.url.path,
            len(errors),
        )
        return JSONResponse(
            status_code=400,
            content={"error": True, "message": "Validation failed", "details": errors},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected exceptions — logged, then a generic 500."""
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": True,
                "message": "Internal Server Error. Please contact support.",
            },
        )

"""Error Handlers — global exception handlers rendering the error envelope.

Invariants:
    - InkpostError → its fixed status, message and optional field errors
    - RequestValidationError (FastAPI's own parsing) → 422 with field-level errors
    - HTTPException (unknown route, wrong method) → envelope with its status
    - Exception (catch-all) → generic 500, never leaks internal details
    - Domain errors and unhandled faults on audited mutations leave a
      success=False activity log entry

Design Decisions:
    - Four-layer handler: domain, framework validation, HTTP, catch-all
    - Log level follows ErrorSeverity: client mistakes are not server errors
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkpost.api.dependencies import audit_failed_request
from inkpost.api.responses import (
    send_error, send_internal_error, send_validation_error,
)
from inkpost.core.errors import ErrorSeverity, InkpostError
from inkpost.core.validation_rules import FieldError

logger = logging.getLogger(__name__)

_SEVERITY_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.ERROR,
}

_SEGMENT_PREFIXES = {"body", "query", "path", "header", "cookie"}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_inkpost_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_inkpost_error_handler(app: FastAPI) -> None:

    @app.exception_handler(InkpostError)
    async def inkpost_error_handler(request: Request, exc: InkpostError):
        """Handle all Inkpost domain/infrastructure errors."""
        logger.log(
            _SEVERITY_LEVELS[exc.severity],
            f"InkpostError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        await audit_failed_request(request, exc.http_status, exc.message)
        return send_error(request, exc.http_status, exc.message, exc.errors)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle FastAPI's own parameter validation errors."""
        logger.info(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return send_validation_error(
            request, errors=build_field_errors(exc.errors()),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Unknown routes, disallowed methods, explicit HTTPExceptions."""
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            message = f"Route {request.method} {request.url.path} not found"
        else:
            message = str(exc.detail)
        response = send_error(request, exc.status_code, message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path, "method": request.method},
        )
        await audit_failed_request(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error",
        )
        return send_internal_error(request)


def build_field_errors(errors: list[dict]) -> list[FieldError]:
    """FastAPI error locs → dot paths without the segment prefix."""
    result = []
    for err in errors:
        loc = list(err.get("loc", ()))
        if loc and loc[0] in _SEGMENT_PREFIXES:
            loc = loc[1:]
        result.append(FieldError(".".join(str(p) for p in loc), err["msg"]))
    return result

"""API Responses — wrap core envelopes into Starlette responses.

Invariants:
    - Every helper returns a response; none raise
    - path is the request path plus query string (what the client sent)
    - 204 responses carry no body at all
    - Payloads pass through jsonable_encoder (UUID, datetime, Enum safe)

Design Decisions:
    - Plain functions taking the Request, not a response class: routes stay
      one-liners and handlers in error_handlers.py reuse send_error
"""

from typing import Any, Iterable, Sequence

from fastapi import Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from inkpost.core.envelope import (
    PaginationMeta, build_error_envelope, build_success_envelope,
    calculate_pagination,
)
from inkpost.core.validation_rules import FieldError
from inkpost.schemas.envelope import ErrorEnvelope

_ERROR_DESCRIPTIONS = {
    400: "Malformed request",
    401: "Missing or invalid credential",
    403: "Insufficient permission",
    404: "Resource not found",
    409: "Uniqueness conflict",
    422: "Validation failed",
    500: "Internal server error",
}


def request_path(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


def send_success(
    request: Request,
    message: str,
    data: Any = None,
    pagination: PaginationMeta | None = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    content = build_success_envelope(
        message, jsonable_encoder(data), pagination, path=request_path(request),
    )
    return JSONResponse(status_code=status_code, content=content)


def send_created(request: Request, message: str, data: Any = None) -> JSONResponse:
    return send_success(request, message, data, status_code=status.HTTP_201_CREATED)


def send_paginated(
    request: Request,
    message: str,
    data: Sequence[Any],
    *,
    total_items: int,
    page: int,
    limit: int,
) -> JSONResponse:
    """Success envelope for a list page; pagination flags computed here."""
    pagination = calculate_pagination(total_items, page, limit)
    return send_success(request, message, list(data), pagination)


def send_no_content() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def send_error(
    request: Request,
    status_code: int,
    message: str,
    errors: Iterable[FieldError] | None = None,
) -> JSONResponse:
    content = build_error_envelope(message, errors, path=request_path(request))
    return JSONResponse(status_code=status_code, content=content)


def send_bad_request(
    request: Request, message: str = "Bad request",
    errors: Iterable[FieldError] | None = None,
) -> JSONResponse:
    return send_error(request, status.HTTP_400_BAD_REQUEST, message, errors)


def send_unauthorized(
    request: Request, message: str = "Unauthorized",
    errors: Iterable[FieldError] | None = None,
) -> JSONResponse:
    return send_error(request, status.HTTP_401_UNAUTHORIZED, message, errors)


def send_forbidden(
    request: Request, message: str = "Forbidden",
    errors: Iterable[FieldError] | None = None,
) -> JSONResponse:
    return send_error(request, status.HTTP_403_FORBIDDEN, message, errors)


def send_not_found(
    request: Request, message: str = "Resource not found",
    errors: Iterable[FieldError] | None = None,
) -> JSONResponse:
    return send_error(request, status.HTTP_404_NOT_FOUND, message, errors)


def send_conflict(
    request: Request, message: str = "Resource already exists",
    errors: Iterable[FieldError] | None = None,
) -> JSONResponse:
    return send_error(request, status.HTTP_409_CONFLICT, message, errors)


def send_validation_error(
    request: Request, message: str = "Validation failed",
    errors: Iterable[FieldError] | None = None,
) -> JSONResponse:
    return send_error(request, 422, message, errors)


def send_internal_error(
    request: Request, message: str = "Internal server error",
    errors: Iterable[FieldError] | None = None,
) -> JSONResponse:
    return send_error(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, message, errors,
    )


def error_responses(*codes: int) -> dict[int, dict]:
    """OpenAPI `responses=` entries documenting the error envelope."""
    return {
        code: {"model": ErrorEnvelope, "description": _ERROR_DESCRIPTIONS[code]}
        for code in codes
    }

"""Error Hierarchy — typed, categorized exceptions for every failure the API reports.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - http_status is fixed per class; messages never carry internal details
    - Only RequestValidationFailed (and callers that opt in) carry field-level errors

Design Decisions:
    - Single hierarchy with InkpostError base: one global handler renders all of them
      into the error envelope (ADR: uniform error shape)
    - Field errors stored as FieldError tuples, not dicts: same type the validator emits
"""

from enum import Enum

from inkpost.core.validation_rules import FieldError


class ErrorSeverity(str, Enum):
    """Error severity for observability and log level selection."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BAD_REQUEST = "bad_request"
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


class InkpostError(Exception):
    """Base exception for all Inkpost errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
        errors: list[FieldError] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.errors = list(errors) if errors else []


# ─── Client Errors (400-level) ──────────────────────────────────

class BadRequestError(InkpostError):
    """Client sent a request that cannot be interpreted."""
    def __init__(
        self, message: str = "Bad request", errors: list[FieldError] | None = None,
    ):
        super().__init__(
            message, "BAD_REQUEST", ErrorCategory.BAD_REQUEST,
            ErrorSeverity.WARNING, 400, errors,
        )


class UnauthorizedError(InkpostError):
    """Missing or invalid credential."""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, 401,
        )


class ForbiddenError(InkpostError):
    """Credential is valid but lacks permission."""
    def __init__(self, message: str = "Forbidden"):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, 403,
        )


class ResourceNotFoundError(InkpostError):
    """Requested resource does not exist."""
    def __init__(self, resource_type: str, message: str | None = None):
        super().__init__(
            message or f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, 404,
        )
        self.resource_type = resource_type


class ConflictError(InkpostError):
    """Uniqueness or state conflict with an existing resource."""
    def __init__(
        self,
        message: str = "Resource already exists",
        errors: list[FieldError] | None = None,
    ):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, 409, errors,
        )


class RequestValidationFailed(InkpostError):
    """One request segment violated its schema."""
    def __init__(
        self, errors: list[FieldError], message: str = "Validation failed",
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.INFO, 422, errors,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(InkpostError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            "Service temporarily unavailable",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, 503,
        )
        self.detail = message
        self.operation = operation

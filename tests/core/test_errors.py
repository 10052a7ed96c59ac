"""Error Hierarchy — fixed status, code and severity per error class."""

import pytest

from inkpost.core.errors import (
    BadRequestError, ConflictError, DatabaseError, ErrorCategory, ErrorSeverity,
    ForbiddenError, InkpostError, RequestValidationFailed, ResourceNotFoundError,
    UnauthorizedError,
)
from inkpost.core.validation_rules import FieldError


@pytest.mark.parametrize("error,status,code", [
    (BadRequestError(), 400, "BAD_REQUEST"),
    (UnauthorizedError(), 401, "UNAUTHORIZED"),
    (ForbiddenError(), 403, "FORBIDDEN"),
    (ResourceNotFoundError("Tag"), 404, "RESOURCE_NOT_FOUND"),
    (ConflictError(), 409, "CONFLICT"),
    (RequestValidationFailed([FieldError("name", "Name is required")]), 422, "VALIDATION_ERROR"),
    (DatabaseError("pool exhausted", "execute"), 503, "DATABASE_ERROR"),
])
def test_status_and_code_fixed_per_class(error, status, code):
    assert isinstance(error, InkpostError)
    assert error.http_status == status
    assert error.code == code


def test_not_found_default_message_names_resource():
    assert ResourceNotFoundError("Category").message == "Category not found"
    assert ResourceNotFoundError("Category", "Parent category not found").message == (
        "Parent category not found"
    )


def test_validation_failure_carries_field_errors():
    error = RequestValidationFailed([FieldError("slug", "Slug is required")])
    assert error.message == "Validation failed"
    assert error.errors == [FieldError("slug", "Slug is required")]
    assert error.category is ErrorCategory.VALIDATION
    assert error.severity is ErrorSeverity.INFO


def test_database_error_hides_internal_detail():
    error = DatabaseError("password authentication failed", "connect")
    assert error.message == "Service temporarily unavailable"
    assert error.detail == "password authentication failed"
    assert error.severity is ErrorSeverity.CRITICAL


def test_errors_without_field_errors_have_empty_list():
    assert ConflictError().errors == []

"""Response helpers — fixed status per helper, envelope body, empty 204."""

import json
from uuid import UUID

import pytest
from starlette.requests import Request

from inkpost.api.responses import (
    error_responses, send_bad_request, send_conflict, send_created, send_forbidden,
    send_internal_error, send_no_content, send_not_found, send_paginated,
    send_unauthorized, send_validation_error,
)
from inkpost.core.validation_rules import FieldError


def _request(path="/api/posts", query=b""):
    return Request({
        "type": "http", "method": "GET", "path": path,
        "query_string": query, "headers": [],
    })


@pytest.mark.parametrize("helper,status_code,message", [
    (send_bad_request, 400, "Bad request"),
    (send_unauthorized, 401, "Unauthorized"),
    (send_forbidden, 403, "Forbidden"),
    (send_not_found, 404, "Resource not found"),
    (send_conflict, 409, "Resource already exists"),
    (send_validation_error, 422, "Validation failed"),
    (send_internal_error, 500, "Internal server error"),
])
def test_error_helpers_fix_status_and_default_message(helper, status_code, message):
    response = helper(_request())
    body = json.loads(response.body)
    assert response.status_code == status_code
    assert body["success"] is False
    assert body["message"] == message
    assert "errors" not in body


def test_error_helper_carries_field_errors():
    response = send_unauthorized(
        _request(), "Invalid token", [FieldError("authorization", "Token expired")],
    )
    assert json.loads(response.body)["errors"] == [
        {"field": "authorization", "message": "Token expired"},
    ]


def test_path_includes_query_string():
    response = send_not_found(_request("/api/posts/x", b"draft=true"))
    assert json.loads(response.body)["path"] == "/api/posts/x?draft=true"


def test_created_serializes_payload():
    ident = UUID("12345678-1234-5678-1234-567812345678")
    response = send_created(_request(), "Created", {"id": ident})
    body = json.loads(response.body)
    assert response.status_code == 201
    assert body["data"] == {"id": "12345678-1234-5678-1234-567812345678"}


def test_paginated_clamps_page():
    response = send_paginated(
        _request(), "Posts retrieved", [], total_items=5, page=7, limit=2,
    )
    assert json.loads(response.body)["pagination"]["currentPage"] == 3


def test_no_content_has_empty_body():
    response = send_no_content()
    assert response.status_code == 204
    assert response.body == b""


def test_error_responses_document_envelope():
    docs = error_responses(404, 422)
    assert set(docs) == {404, 422}
    assert docs[404]["description"] == "Resource not found"

"""Response Envelope — pagination math and envelope shapes.

Tests:
    - calculate_pagination clamps page/limit and never divides by zero
    - hasNext/hasPrevious follow currentPage and totalPages
    - Success envelopes never carry errors; error envelopes never carry data
    - timestamp format is ISO-8601 UTC, millisecond precision, Z suffix
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from inkpost.core.envelope import (
    PaginationMeta, build_error_envelope, build_success_envelope,
    calculate_pagination, format_timestamp,
)
from inkpost.core.validation_rules import FieldError

NOW = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)


# ─── calculate_pagination ───────────────────────────────────────

def test_first_page_of_three():
    meta = calculate_pagination(25, 1, 10)
    assert meta == PaginationMeta(
        current_page=1, per_page=10, total_items=25, total_pages=3,
        has_next_page=True, has_previous_page=False,
    )


def test_middle_page_has_both_neighbours():
    meta = calculate_pagination(25, 2, 10)
    assert meta.has_next_page and meta.has_previous_page


def test_empty_collection_has_zero_pages_and_page_one():
    meta = calculate_pagination(0, 1, 10)
    assert meta.total_pages == 0
    assert meta.current_page == 1
    assert not meta.has_next_page
    assert not meta.has_previous_page


def test_page_past_the_end_clamped_to_last_page():
    meta = calculate_pagination(25, 99, 10)
    assert meta.current_page == 3
    assert not meta.has_next_page
    assert meta.has_previous_page


@pytest.mark.parametrize("page", [0, -4])
def test_page_below_one_clamped_to_one(page):
    assert calculate_pagination(25, page, 10).current_page == 1


@pytest.mark.parametrize("limit", [0, -1, 2.5, "20", True])
def test_invalid_limit_falls_back_to_default(limit):
    meta = calculate_pagination(25, 1, limit)
    assert meta.per_page == 10
    assert meta.total_pages == 3


def test_integral_floats_coerced_to_int():
    meta = calculate_pagination(25, 3.0, 10.0)
    assert meta.current_page == 3
    assert meta.per_page == 10
    assert isinstance(meta.per_page, int)
    assert calculate_pagination(25, 2.0, 5.0).to_dict()["perPage"] == 5


@pytest.mark.parametrize("total,limit,pages", [(1, 10, 1), (10, 10, 1), (11, 10, 2), (100, 7, 15)])
def test_total_pages_is_ceiling(total, limit, pages):
    assert calculate_pagination(total, 1, limit).total_pages == pages


def test_to_dict_uses_camel_case_keys():
    assert calculate_pagination(25, 1, 10).to_dict() == {
        "currentPage": 1,
        "perPage": 10,
        "totalItems": 25,
        "totalPages": 3,
        "hasNextPage": True,
        "hasPreviousPage": False,
    }


# ─── timestamp ──────────────────────────────────────────────────

def test_timestamp_format():
    assert format_timestamp(NOW) == "2025-01-15T10:30:00.000Z"


def test_timestamp_converted_to_utc():
    plus_two = timezone(timedelta(hours=2))
    moment = datetime(2025, 1, 15, 12, 30, 0, 123456, tzinfo=plus_two)
    assert format_timestamp(moment) == "2025-01-15T10:30:00.123Z"


def test_timestamp_defaults_to_now():
    assert re.fullmatch(
        r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", format_timestamp(),
    )


# ─── envelopes ──────────────────────────────────────────────────

def test_success_envelope_shape():
    envelope = build_success_envelope(
        "Tags retrieved successfully", [{"id": 1}], path="/api/tags", now=NOW,
    )
    assert envelope == {
        "success": True,
        "message": "Tags retrieved successfully",
        "data": [{"id": 1}],
        "timestamp": "2025-01-15T10:30:00.000Z",
        "path": "/api/tags",
    }


def test_success_envelope_keeps_null_data():
    envelope = build_success_envelope("Done", path="/api/x", now=NOW)
    assert "data" in envelope
    assert envelope["data"] is None
    assert "errors" not in envelope


def test_success_envelope_includes_pagination_only_when_given():
    meta = calculate_pagination(25, 1, 10)
    with_page = build_success_envelope("ok", [], meta, path="/p", now=NOW)
    without = build_success_envelope("ok", [], path="/p", now=NOW)
    assert with_page["pagination"]["totalPages"] == 3
    assert "pagination" not in without


def test_error_envelope_with_field_errors():
    envelope = build_error_envelope(
        "Validation failed",
        [FieldError("name", "Name is required")],
        path="/api/tags",
        now=NOW,
    )
    assert envelope == {
        "success": False,
        "message": "Validation failed",
        "errors": [{"field": "name", "message": "Name is required"}],
        "timestamp": "2025-01-15T10:30:00.000Z",
        "path": "/api/tags",
    }


def test_error_envelope_omits_empty_errors_and_data():
    envelope = build_error_envelope("Tag not found", [], path="/api/tags/1", now=NOW)
    assert "errors" not in envelope
    assert "data" not in envelope


def test_error_envelope_accepts_plain_dicts():
    envelope = build_error_envelope(
        "Bad", [{"field": "slug", "message": "taken"}], path="/", now=NOW,
    )
    assert envelope["errors"] == [{"field": "slug", "message": "taken"}]

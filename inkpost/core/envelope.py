"""Response Envelope — pure builders for the canonical API wire format.

Invariants:
    - success=True envelopes never carry "errors"; success=False never carry "data"
    - "pagination" present only when supplied; "errors" present only when non-empty
    - timestamp is ISO-8601 UTC with millisecond precision and a trailing "Z"
    - calculate_pagination never raises and never divides by zero:
      currentPage ∈ [1, max(totalPages, 1)]

Design Decisions:
    - Builders return plain dicts; HTTP wrapping lives in api/responses.py
      (ADR: core has no knowledge of Starlette)
    - `now` injectable so envelopes are deterministic under test
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from inkpost.core.validation_rules import FieldError

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class PaginationMeta:
    """Derived pagination metadata. Never stored."""
    current_page: int
    per_page: int
    total_items: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    def to_dict(self) -> dict:
        return {
            "currentPage": self.current_page,
            "perPage": self.per_page,
            "totalItems": self.total_items,
            "totalPages": self.total_pages,
            "hasNextPage": self.has_next_page,
            "hasPreviousPage": self.has_previous_page,
        }


def _as_int(value: Any) -> int | None:
    """Integral value as int; None for bools, fractions and non-numbers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def calculate_pagination(
    total_items: int,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> PaginationMeta:
    """Compute pagination metadata, clamping out-of-range input."""
    limit = _as_int(limit)
    if limit is None or limit < 1:
        limit = DEFAULT_PAGE_SIZE
    page = _as_int(page)
    if page is None:
        page = 1
    total_items = max(0, int(total_items))

    total_pages = math.ceil(total_items / limit)
    current_page = max(1, min(page, total_pages or 1))
    return PaginationMeta(
        current_page=current_page,
        per_page=limit,
        total_items=total_items,
        total_pages=total_pages,
        has_next_page=current_page < total_pages,
        has_previous_page=current_page > 1,
    )


def format_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC, milliseconds, Z suffix: 2025-01-15T10:30:00.000Z."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_success_envelope(
    message: str,
    data: Any = None,
    pagination: PaginationMeta | None = None,
    *,
    path: str,
    now: datetime | None = None,
) -> dict:
    envelope = {"success": True, "message": message, "data": data}
    if pagination is not None:
        envelope["pagination"] = pagination.to_dict()
    envelope["timestamp"] = format_timestamp(now)
    envelope["path"] = path
    return envelope


def build_error_envelope(
    message: str,
    errors: Iterable[FieldError] | None = None,
    *,
    path: str,
    now: datetime | None = None,
) -> dict:
    envelope = {"success": False, "message": message}
    error_list = [_error_entry(e) for e in errors or ()]
    if error_list:
        envelope["errors"] = error_list
    envelope["timestamp"] = format_timestamp(now)
    envelope["path"] = path
    return envelope


def _error_entry(error: FieldError | dict) -> dict:
    if isinstance(error, FieldError):
        return error.to_dict()
    return {"field": str(error.get("field", "")), "message": str(error["message"])}

"""Envelope Models — pydantic descriptions of the wire envelope, for OpenAPI only.

Invariants:
    - Mirrors core/envelope.py output key for key (camelCase)
    - Never used to build responses; builders in core/ are the source of truth
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FieldErrorItem(BaseModel):
    field: str
    message: str


class PaginationInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_page: int = Field(ge=1)
    per_page: int = Field(ge=1)
    total_items: int = Field(ge=0)
    total_pages: int = Field(ge=0)
    has_next_page: bool
    has_previous_page: bool


class SuccessEnvelope(BaseModel):
    """Canonical success response."""
    success: bool = True
    message: str
    data: Any = None
    pagination: PaginationInfo | None = None
    timestamp: str = Field(examples=["2025-01-15T10:30:00.000Z"])
    path: str = Field(examples=["/api/tags"])


class ErrorEnvelope(BaseModel):
    """Canonical error response."""
    success: bool = False
    message: str = Field(examples=["Validation failed"])
    errors: list[FieldErrorItem] | None = None
    timestamp: str = Field(examples=["2025-01-15T10:30:00.000Z"])
    path: str = Field(examples=["/api/tags"])

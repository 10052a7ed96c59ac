"""Category ORM — hierarchical content taxonomy.

Invariants:
    - slug is unique across all categories
    - parent_id references another category or is NULL (top level)
    - A category is never its own parent (enforced in services)
    - order_position >= 0, used as the default sort key

Design Decisions:
    - No relationship() attributes: trees and counts are built with explicit
      queries so nothing lazy-loads inside an async session
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from inkpost.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Category(Base):
    """Category entity — groups posts, optionally nested under a parent."""
    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True, index=True,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("categories.id"),
        nullable=True, index=True,
    )
    meta_title: Mapped[str | None] = mapped_column(String(60), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(
        String(160), nullable=True,
    )
    icon_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    order_position: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )

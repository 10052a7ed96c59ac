"""Tag Service — CRUD for tags with slug uniqueness and auditing.

Invariants:
    - Slug uniqueness pre-checked (409 with a slug field error); the unique
      index is the backstop for races (IntegrityError → ConflictError)
    - Every mutation stages one activity log entry in the same transaction
    - Functions return camelCase response dicts, never ORM instances
"""

import logging
import uuid
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.domain_types import ActivityAction, TagId
from inkpost.core.errors import ConflictError, ResourceNotFoundError
from inkpost.core.validation_rules import FieldError
from inkpost.models.tag import Tag
from inkpost.services.activity_log_service import AuditContext, record_activity

logger = logging.getLogger(__name__)

SORT_COLUMNS = {"name": Tag.name, "createdAt": Tag.created_at}
UPDATABLE_FIELDS = ("name", "slug", "description", "meta_title", "meta_description")


def to_tag_response(tag: Tag) -> dict:
    return {
        "id": tag.id,
        "name": tag.name,
        "slug": tag.slug,
        "description": tag.description,
        "metaTitle": tag.meta_title,
        "metaDescription": tag.meta_description,
        "createdAt": tag.created_at,
        "updatedAt": tag.updated_at,
    }


async def _ensure_slug_free(
    db: AsyncSession, slug: str, exclude_id: uuid.UUID | None = None,
) -> None:
    query = select(Tag.id).where(Tag.slug == slug)
    if exclude_id is not None:
        query = query.where(Tag.id != exclude_id)
    if await db.scalar(query) is not None:
        raise ConflictError(
            "Tag with this slug already exists",
            [FieldError("slug", "Slug is already in use")],
        )


async def _get_or_404(db: AsyncSession, tag_id: TagId) -> Tag:
    tag = await db.get(Tag, tag_id)
    if tag is None:
        raise ResourceNotFoundError("Tag")
    return tag


async def create_tag(
    db: AsyncSession, data: dict[str, Any], audit: AuditContext | None = None,
) -> dict:
    await _ensure_slug_free(db, data["slug"])
    tag = Tag(
        name=data["name"],
        slug=data["slug"],
        description=data.get("description") or None,
        meta_title=data.get("meta_title") or None,
        meta_description=data.get("meta_description") or None,
    )
    db.add(tag)
    await db.flush()
    response = to_tag_response(tag)
    await record_activity(
        db, audit,
        action=ActivityAction.CREATE, entity="Tag", entity_id=tag.id,
        description=f"Created tag: {tag.name}", new_data=response,
    )
    await db.commit()
    return response


async def list_tags(
    db: AsyncSession, query: dict[str, Any],
) -> tuple[list[dict], int]:
    """One page of tags plus the total matching count."""
    conditions = []
    if query.get("search"):
        pattern = f"%{query['search']}%"
        conditions.append(or_(
            Tag.name.ilike(pattern),
            Tag.description.ilike(pattern),
            Tag.slug.ilike(pattern),
        ))
    page, limit = query["page"], query["limit"]

    total = await db.scalar(select(func.count()).select_from(Tag).where(*conditions))
    column = SORT_COLUMNS[query["sort_by"]]
    order = column.desc() if query["sort_order"] == "desc" else column.asc()
    result = await db.execute(
        select(Tag)
        .where(*conditions)
        .order_by(order, Tag.id)
        .offset((page - 1) * limit)
        .limit(limit),
    )
    return [to_tag_response(t) for t in result.scalars().all()], total or 0


async def get_tag_by_id(db: AsyncSession, tag_id: TagId) -> dict:
    return to_tag_response(await _get_or_404(db, tag_id))


async def get_tag_by_slug(db: AsyncSession, slug: str) -> dict:
    tag = await db.scalar(select(Tag).where(Tag.slug == slug))
    if tag is None:
        raise ResourceNotFoundError("Tag")
    return to_tag_response(tag)


async def update_tag(
    db: AsyncSession,
    tag_id: TagId,
    data: dict[str, Any],
    audit: AuditContext | None = None,
) -> dict:
    """Partial update: only keys present in data are written."""
    tag = await _get_or_404(db, tag_id)
    if "slug" in data and data["slug"] != tag.slug:
        await _ensure_slug_free(db, data["slug"], exclude_id=tag.id)

    old_data = to_tag_response(tag)
    for key in UPDATABLE_FIELDS:
        if key in data:
            value = data[key]
            if key not in ("name", "slug"):
                value = value or None
            setattr(tag, key, value)
    await db.flush()
    response = to_tag_response(tag)
    await record_activity(
        db, audit,
        action=ActivityAction.UPDATE, entity="Tag", entity_id=tag.id,
        description=f"Updated tag: {tag.name}",
        old_data=old_data, new_data=response,
    )
    await db.commit()
    return response


async def delete_tag(
    db: AsyncSession, tag_id: TagId, audit: AuditContext | None = None,
) -> None:
    tag = await _get_or_404(db, tag_id)
    old_data = to_tag_response(tag)
    await db.delete(tag)
    await record_activity(
        db, audit,
        action=ActivityAction.DELETE, entity="Tag", entity_id=tag_id,
        description=f"Deleted tag: {old_data['name']}", old_data=old_data,
    )
    await db.commit()

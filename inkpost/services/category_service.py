"""Category Service — hierarchical categories: CRUD, tree, icon removal.

Invariants:
    - Slug uniqueness pre-checked (409); the unique index is the backstop
    - parent_id, when set, names an existing category (404 otherwise)
    - A category is never its own parent nor moved under its own descendant (400)
    - A category with children cannot be deleted (400)
    - Every mutation stages one activity log entry in the same transaction

Design Decisions:
    - Tree assembled in Python from one ordered query, not recursive SQL:
      category counts are small and the query stays portable to SQLite
    - Children counts via one GROUP BY per page, not per row
"""

import logging
import uuid
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.domain_types import ActivityAction, CategoryId
from inkpost.core.errors import (
    BadRequestError, ConflictError, RequestValidationFailed, ResourceNotFoundError,
)
from inkpost.core.validation_rules import FieldError
from inkpost.models.category import Category
from inkpost.services.activity_log_service import AuditContext, record_activity

logger = logging.getLogger(__name__)

TREE_DEPTH = 3
SORT_COLUMNS = {
    "name": Category.name,
    "orderPosition": Category.order_position,
    "createdAt": Category.created_at,
}
UPDATABLE_FIELDS = (
    "name", "slug", "description", "parent_id", "meta_title",
    "meta_description", "icon_url", "order_position",
)
_NULLABLE_TEXT = ("description", "meta_title", "meta_description", "icon_url")


def to_category_response(
    category: Category, children_count: int = 0,
) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "parentId": category.parent_id,
        "metaTitle": category.meta_title,
        "metaDescription": category.meta_description,
        "iconUrl": category.icon_url,
        "orderPosition": category.order_position,
        "createdAt": category.created_at,
        "updatedAt": category.updated_at,
        "childrenCount": children_count,
    }


def _summary(category: Category) -> dict:
    return {"id": category.id, "name": category.name, "slug": category.slug}


async def _get_or_404(db: AsyncSession, category_id: CategoryId) -> Category:
    category = await db.get(Category, category_id)
    if category is None:
        raise ResourceNotFoundError("Category")
    return category


async def _children_counts(
    db: AsyncSession, ids: list[uuid.UUID],
) -> dict[uuid.UUID, int]:
    if not ids:
        return {}
    result = await db.execute(
        select(Category.parent_id, func.count())
        .where(Category.parent_id.in_(ids))
        .group_by(Category.parent_id),
    )
    return {parent_id: n for parent_id, n in result.all()}


async def _ensure_slug_free(
    db: AsyncSession, slug: str, exclude_id: uuid.UUID | None = None,
) -> None:
    query = select(Category.id).where(Category.slug == slug)
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    if await db.scalar(query) is not None:
        raise ConflictError(
            "Category with this slug already exists",
            [FieldError("slug", "Slug is already in use")],
        )


async def _ensure_valid_parent(
    db: AsyncSession, parent_id: uuid.UUID, category_id: CategoryId | None = None,
) -> None:
    """Parent exists and does not create a cycle."""
    if category_id is not None and parent_id == category_id:
        raise BadRequestError("Category cannot be its own parent")
    parent = await db.get(Category, parent_id)
    if parent is None:
        raise ResourceNotFoundError("Category", "Parent category not found")
    if category_id is None:
        return
    ancestor_id = parent.parent_id
    while ancestor_id is not None:
        if ancestor_id == category_id:
            raise BadRequestError(
                "Category cannot be moved under one of its own subcategories",
            )
        ancestor_id = await db.scalar(
            select(Category.parent_id).where(Category.id == ancestor_id),
        )


async def _detail(db: AsyncSession, category: Category) -> dict:
    """Full representation: parent summary and ordered children."""
    children = (await db.execute(
        select(Category)
        .where(Category.parent_id == category.id)
        .order_by(Category.order_position, Category.name),
    )).scalars().all()
    parent = (
        await db.get(Category, category.parent_id)
        if category.parent_id is not None else None
    )
    response = to_category_response(category, len(children))
    response["parent"] = _summary(parent) if parent is not None else None
    response["children"] = [
        {**_summary(c), "orderPosition": c.order_position} for c in children
    ]
    return response


async def create_category(
    db: AsyncSession, data: dict[str, Any], audit: AuditContext | None = None,
) -> dict:
    await _ensure_slug_free(db, data["slug"])
    if data.get("parent_id") is not None:
        await _ensure_valid_parent(db, data["parent_id"])

    category = Category(
        name=data["name"],
        slug=data["slug"],
        parent_id=data.get("parent_id"),
        order_position=data.get("order_position", 0),
        **{key: data.get(key) or None for key in _NULLABLE_TEXT},
    )
    db.add(category)
    await db.flush()
    response = await _detail(db, category)
    await record_activity(
        db, audit,
        action=ActivityAction.CREATE, entity="Category", entity_id=category.id,
        description=f"Created category: {category.name}",
        new_data=to_category_response(category),
    )
    await db.commit()
    return response


def _parent_condition(raw: str):
    """parentId filter: "null" means top level, otherwise a category UUID."""
    if raw == "" or raw.lower() == "null":
        return Category.parent_id.is_(None)
    try:
        return Category.parent_id == uuid.UUID(raw)
    except ValueError:
        raise RequestValidationFailed(
            [FieldError("parentId", "Invalid parent ID format")],
        )


async def list_categories(
    db: AsyncSession, query: dict[str, Any],
) -> tuple[list[dict], int]:
    """One page of categories plus the total matching count."""
    conditions = []
    if query.get("search"):
        pattern = f"%{query['search']}%"
        conditions.append(or_(
            Category.name.ilike(pattern),
            Category.description.ilike(pattern),
            Category.slug.ilike(pattern),
        ))
    if query.get("parent_id") is not None:
        conditions.append(_parent_condition(query["parent_id"]))
    page, limit = query["page"], query["limit"]

    total = await db.scalar(
        select(func.count()).select_from(Category).where(*conditions),
    )
    column = SORT_COLUMNS[query["sort_by"]]
    order = column.desc() if query["sort_order"] == "desc" else column.asc()
    categories = (await db.execute(
        select(Category)
        .where(*conditions)
        .order_by(order, Category.id)
        .offset((page - 1) * limit)
        .limit(limit),
    )).scalars().all()

    counts = await _children_counts(db, [c.id for c in categories])
    items = [to_category_response(c, counts.get(c.id, 0)) for c in categories]
    return items, total or 0


async def get_category_tree(db: AsyncSession) -> list[dict]:
    """Top-level categories with children nested up to TREE_DEPTH levels."""
    categories = (await db.execute(
        select(Category).order_by(Category.order_position, Category.name),
    )).scalars().all()

    by_parent: dict[uuid.UUID | None, list[Category]] = {}
    for category in categories:
        by_parent.setdefault(category.parent_id, []).append(category)

    def build(parent_id: uuid.UUID | None, depth: int) -> list[dict]:
        nodes = []
        for category in by_parent.get(parent_id, []):
            node = {
                **_summary(category),
                "description": category.description,
                "iconUrl": category.icon_url,
                "orderPosition": category.order_position,
            }
            if depth < TREE_DEPTH:
                node["children"] = build(category.id, depth + 1)
            nodes.append(node)
        return nodes

    return build(None, 1)


async def get_category_by_id(db: AsyncSession, category_id: CategoryId) -> dict:
    return await _detail(db, await _get_or_404(db, category_id))


async def get_category_by_slug(db: AsyncSession, slug: str) -> dict:
    category = await db.scalar(select(Category).where(Category.slug == slug))
    if category is None:
        raise ResourceNotFoundError("Category")
    return await _detail(db, category)


async def update_category(
    db: AsyncSession,
    category_id: CategoryId,
    data: dict[str, Any],
    audit: AuditContext | None = None,
) -> dict:
    """Partial update; parentId null moves the category to the top level."""
    category = await _get_or_404(db, category_id)
    if "slug" in data and data["slug"] != category.slug:
        await _ensure_slug_free(db, data["slug"], exclude_id=category.id)
    if data.get("parent_id") is not None:
        await _ensure_valid_parent(db, data["parent_id"], category.id)

    old_data = to_category_response(category)
    for key in UPDATABLE_FIELDS:
        if key in data:
            value = data[key]
            if key in _NULLABLE_TEXT:
                value = value or None
            setattr(category, key, value)
    await db.flush()
    await record_activity(
        db, audit,
        action=ActivityAction.UPDATE, entity="Category", entity_id=category.id,
        description=f"Updated category: {category.name}",
        old_data=old_data, new_data=to_category_response(category),
    )
    response = await _detail(db, category)
    await db.commit()
    return response


async def delete_category_icon(
    db: AsyncSession, category_id: CategoryId, audit: AuditContext | None = None,
) -> dict:
    category = await _get_or_404(db, category_id)
    if not category.icon_url:
        raise ResourceNotFoundError("Category icon", "Category has no icon")

    old_icon = category.icon_url
    category.icon_url = None
    await db.flush()
    await record_activity(
        db, audit,
        action=ActivityAction.UPDATE, entity="Category", entity_id=category.id,
        description=f"Removed icon from category: {category.name}",
        old_data={"iconUrl": old_icon}, new_data={"iconUrl": None},
    )
    response = await _detail(db, category)
    await db.commit()
    return response


async def delete_category(
    db: AsyncSession, category_id: CategoryId, audit: AuditContext | None = None,
) -> None:
    category = await _get_or_404(db, category_id)
    children = await _children_counts(db, [category.id])
    if children.get(category.id):
        raise BadRequestError(
            "Cannot delete category with subcategories. "
            "Delete or reassign subcategories first.",
        )

    old_data = to_category_response(category)
    await db.delete(category)
    await record_activity(
        db, audit,
        action=ActivityAction.DELETE, entity="Category", entity_id=category_id,
        description=f"Deleted category: {old_data['name']}", old_data=old_data,
    )
    await db.commit()

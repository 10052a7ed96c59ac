"""User Service — account CRUD with uniqueness, reserved names and auditing.

Invariants:
    - username and email unique (409 with a field error); unique indexes
      are the backstop for races
    - Reserved usernames are rejected like any other invalid field (422)
    - Inactive accounts are invisible to public lookups (404)
    - Admin accounts cannot be deleted (403)
    - Every mutation stages one activity log entry in the same transaction
"""

import logging
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.domain_types import ActivityAction, UserId, UserRole
from inkpost.core.errors import (
    ConflictError, ForbiddenError, RequestValidationFailed, ResourceNotFoundError,
)
from inkpost.core.validation_rules import FieldError
from inkpost.models.user import User
from inkpost.services.activity_log_service import AuditContext, record_activity

logger = logging.getLogger(__name__)

RESERVED_USERNAMES = frozenset({
    "admin", "superadmin", "administrator", "root", "system", "support",
    "help", "info", "api", "www", "mail", "ftp", "localhost", "moderator", "mod",
})
SORT_COLUMNS = {
    "createdAt": User.created_at,
    "username": User.username,
    "name": User.name,
}
UPDATABLE_FIELDS = (
    "username", "email", "name", "bio", "location", "avatar_url", "role",
    "is_active",
)
_NULLABLE_TEXT = ("name", "bio", "location", "avatar_url")


def to_user_response(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "name": user.name,
        "avatarUrl": user.avatar_url,
        "bio": user.bio,
        "location": user.location,
        "role": user.role,
        "isActive": user.is_active,
        "emailVerifiedAt": user.email_verified_at,
        "createdAt": user.created_at,
        "updatedAt": user.updated_at,
    }


def to_public_user_response(user: User) -> dict:
    """What anyone may see: no email, no account state."""
    return {
        "id": user.id,
        "username": user.username,
        "name": user.name,
        "avatarUrl": user.avatar_url,
        "bio": user.bio,
        "location": user.location,
        "role": user.role,
        "createdAt": user.created_at,
    }


def _ensure_not_reserved(username: str) -> None:
    if username.lower() in RESERVED_USERNAMES:
        raise RequestValidationFailed(
            [FieldError("username", "This username is reserved and cannot be used")],
        )


async def _ensure_unique(
    db: AsyncSession, column, value: str, exclude_id: UserId | None,
    message: str, field_name: str,
) -> None:
    query = select(User.id).where(column == value)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    if await db.scalar(query) is not None:
        raise ConflictError(message, [FieldError(field_name, message)])


async def _check_identity(
    db: AsyncSession, data: dict[str, Any], exclude_id: UserId | None = None,
) -> None:
    if "username" in data:
        _ensure_not_reserved(data["username"])
        await _ensure_unique(
            db, User.username, data["username"], exclude_id,
            "Username is already taken", "username",
        )
    if "email" in data:
        await _ensure_unique(
            db, User.email, data["email"], exclude_id,
            "Email is already in use", "email",
        )


async def _get_or_404(db: AsyncSession, user_id: UserId) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User")
    return user


async def create_user(
    db: AsyncSession, data: dict[str, Any], audit: AuditContext | None = None,
) -> dict:
    await _check_identity(db, data)
    user = User(
        username=data["username"],
        email=data["email"],
        role=data.get("role") or UserRole.USER.value,
        **{key: data.get(key) or None for key in _NULLABLE_TEXT},
    )
    db.add(user)
    await db.flush()
    response = to_user_response(user)
    await record_activity(
        db, audit,
        action=ActivityAction.CREATE, entity="User", entity_id=user.id,
        description=f"Created user: {user.username}", new_data=response,
    )
    await db.commit()
    return response


async def list_users(
    db: AsyncSession, query: dict[str, Any],
) -> tuple[list[dict], int]:
    """One page of users plus the total matching count."""
    conditions = []
    if query.get("role") is not None:
        conditions.append(User.role == query["role"])
    if query.get("is_active") is not None:
        conditions.append(User.is_active == query["is_active"])
    if query.get("search"):
        pattern = f"%{query['search']}%"
        conditions.append(or_(
            User.name.ilike(pattern),
            User.username.ilike(pattern),
            User.email.ilike(pattern),
        ))
    page, limit = query["page"], query["limit"]

    total = await db.scalar(select(func.count()).select_from(User).where(*conditions))
    column = SORT_COLUMNS[query["sort_by"]]
    order = column.desc() if query["sort_order"] == "desc" else column.asc()
    result = await db.execute(
        select(User)
        .where(*conditions)
        .order_by(order, User.id)
        .offset((page - 1) * limit)
        .limit(limit),
    )
    return [to_user_response(u) for u in result.scalars().all()], total or 0


async def get_user_by_id(db: AsyncSession, user_id: UserId) -> dict:
    return to_user_response(await _get_or_404(db, user_id))


async def get_public_user_by_username(db: AsyncSession, username: str) -> dict:
    user = await db.scalar(select(User).where(User.username == username))
    if user is None:
        raise ResourceNotFoundError("User")
    if not user.is_active:
        raise ResourceNotFoundError("User", "User account is inactive")
    return to_public_user_response(user)


async def update_user(
    db: AsyncSession,
    user_id: UserId,
    data: dict[str, Any],
    audit: AuditContext | None = None,
) -> dict:
    """Partial update: only keys present in data are written."""
    user = await _get_or_404(db, user_id)
    changed = {
        key: data[key] for key in ("username", "email")
        if key in data and data[key] != getattr(user, key)
    }
    await _check_identity(db, changed, exclude_id=user.id)

    old_data = to_user_response(user)
    for key in UPDATABLE_FIELDS:
        if key in data:
            value = data[key]
            if key in _NULLABLE_TEXT:
                value = value or None
            setattr(user, key, value)
    await db.flush()
    response = to_user_response(user)
    await record_activity(
        db, audit,
        action=ActivityAction.UPDATE, entity="User", entity_id=user.id,
        description=f"Updated user: {user.username}",
        old_data=old_data, new_data=response,
    )
    await db.commit()
    return response


async def delete_user(
    db: AsyncSession, user_id: UserId, audit: AuditContext | None = None,
) -> None:
    user = await _get_or_404(db, user_id)
    if user.role == UserRole.ADMIN.value:
        raise ForbiddenError("Cannot delete admin users")

    old_data = to_user_response(user)
    await db.delete(user)
    await record_activity(
        db, audit,
        action=ActivityAction.DELETE, entity="User", entity_id=user_id,
        description=f"Deleted user: {old_data['username']}", old_data=old_data,
    )
    await db.commit()

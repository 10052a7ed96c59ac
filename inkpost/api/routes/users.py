"""User Routes — account management and public profiles.

Invariants:
    - Every segment a handler reads is validated first (validated() dependency)
    - /username/{username} returns the public profile and is registered before /{id}
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.api.dependencies import get_audit_context
from inkpost.api.responses import (
    error_responses, send_created, send_no_content, send_paginated, send_success,
)
from inkpost.api.validation import openapi_for, validated
from inkpost.core.validation_rules import Segment
from inkpost.infrastructure.database import get_db
from inkpost.schemas.envelope import SuccessEnvelope
from inkpost.schemas.user import (
    CREATE_USER, UPDATE_USER, USER_ID_PARAMS, USER_LIST_QUERY, USERNAME_PARAMS,
)
from inkpost.services import user_service
from inkpost.services.activity_log_service import AuditContext

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])

_by_id = validated(USER_ID_PARAMS, Segment.PARAMS)


@router.get(
    "", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(query=USER_LIST_QUERY),
    responses=error_responses(422),
)
async def list_users(
    request: Request,
    query: dict[str, Any] = Depends(validated(USER_LIST_QUERY, Segment.QUERY)),
    db: AsyncSession = Depends(get_db),
):
    """Paginated user list filtered by role, status and search text."""
    items, total = await user_service.list_users(db, query)
    return send_paginated(
        request, "Users retrieved successfully", items,
        total_items=total, page=query["page"], limit=query["limit"],
    )


@router.get(
    "/username/{username}", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(params=USERNAME_PARAMS),
    responses=error_responses(404, 422),
)
async def get_public_user(
    request: Request,
    params: dict[str, Any] = Depends(validated(USERNAME_PARAMS, Segment.PARAMS)),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.get_public_user_by_username(db, params["username"])
    return send_success(request, "User profile retrieved successfully", user)


@router.get(
    "/{id}", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(params=USER_ID_PARAMS),
    responses=error_responses(404, 422),
)
async def get_user(
    request: Request,
    params: dict[str, Any] = Depends(_by_id),
    db: AsyncSession = Depends(get_db),
):
    user = await user_service.get_user_by_id(db, params["id"])
    return send_success(request, "User retrieved successfully", user)


@router.post(
    "", response_model=SuccessEnvelope, status_code=status.HTTP_201_CREATED,
    openapi_extra=openapi_for(body=CREATE_USER),
    responses=error_responses(400, 409, 422),
)
async def create_user(
    request: Request,
    body: dict[str, Any] = Depends(validated(CREATE_USER)),
    db: AsyncSession = Depends(get_db),
    audit: AuditContext | None = Depends(get_audit_context),
):
    user = await user_service.create_user(db, body, audit)
    return send_created(request, "User created successfully", user)


@router.patch(
    "/{id}", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(body=UPDATE_USER, params=USER_ID_PARAMS),
    responses=error_responses(400, 404, 409, 422),
)
async def update_user(
    request: Request,
    params: dict[str, Any] = Depends(_by_id),
    body: dict[str, Any] = Depends(validated(UPDATE_USER)),
    db: AsyncSession = Depends(get_db),
    audit: AuditContext | None = Depends(get_audit_context),
):
    user = await user_service.update_user(db, params["id"], body, audit)
    return send_success(request, "User updated successfully", user)


@router.delete(
    "/{id}", status_code=status.HTTP_204_NO_CONTENT,
    openapi_extra=openapi_for(params=USER_ID_PARAMS),
    responses=error_responses(403, 404, 422),
)
async def delete_user(
    params: dict[str, Any] = Depends(_by_id),
    db: AsyncSession = Depends(get_db),
    audit: AuditContext | None = Depends(get_audit_context),
):
    await user_service.delete_user(db, params["id"], audit)
    return send_no_content()

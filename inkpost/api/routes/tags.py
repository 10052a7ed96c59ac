"""Tag Routes — CRUD endpoints for tags.

Invariants:
    - Every segment a handler reads is validated first (validated() dependency)
    - Handlers see only the normalized dicts, never raw request data
    - /slug/{slug} registered before /{id}
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
from inkpost.schemas.common import SLUG_PARAMS
from inkpost.schemas.envelope import SuccessEnvelope
from inkpost.schemas.tag import CREATE_TAG, TAG_ID_PARAMS, TAG_LIST_QUERY, UPDATE_TAG
from inkpost.services import tag_service
from inkpost.services.activity_log_service import AuditContext

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/tags", tags=["tags"])


@router.get(
    "", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(query=TAG_LIST_QUERY),
    responses=error_responses(422),
)
async def list_tags(
    request: Request,
    query: dict[str, Any] = Depends(validated(TAG_LIST_QUERY, Segment.QUERY)),
    db: AsyncSession = Depends(get_db),
):
    """Paginated tag list with search and sorting."""
    items, total = await tag_service.list_tags(db, query)
    return send_paginated(
        request, "Tags retrieved successfully", items,
        total_items=total, page=query["page"], limit=query["limit"],
    )


@router.get(
    "/slug/{slug}", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(params=SLUG_PARAMS),
    responses=error_responses(404, 422),
)
async def get_tag_by_slug(
    request: Request,
    params: dict[str, Any] = Depends(validated(SLUG_PARAMS, Segment.PARAMS)),
    db: AsyncSession = Depends(get_db),
):
    tag = await tag_service.get_tag_by_slug(db, params["slug"])
    return send_success(request, "Tag retrieved successfully", tag)


@router.get(
    "/{id}", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(params=TAG_ID_PARAMS),
    responses=error_responses(404, 422),
)
async def get_tag(
    request: Request,
    params: dict[str, Any] = Depends(validated(TAG_ID_PARAMS, Segment.PARAMS)),
    db: AsyncSession = Depends(get_db),
):
    tag = await tag_service.get_tag_by_id(db, params["id"])
    return send_success(request, "Tag retrieved successfully", tag)


@router.post(
    "", response_model=SuccessEnvelope, status_code=status.HTTP_201_CREATED,
    openapi_extra=openapi_for(body=CREATE_TAG),
    responses=error_responses(400, 409, 422),
)
async def create_tag(
    request: Request,
    body: dict[str, Any] = Depends(validated(CREATE_TAG)),
    db: AsyncSession = Depends(get_db),
    audit: AuditContext | None = Depends(get_audit_context),
):
    tag = await tag_service.create_tag(db, body, audit)
    return send_created(request, "Tag created successfully", tag)


@router.patch(
    "/{id}", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(body=UPDATE_TAG, params=TAG_ID_PARAMS),
    responses=error_responses(400, 404, 409, 422),
)
async def update_tag(
    request: Request,
    params: dict[str, Any] = Depends(validated(TAG_ID_PARAMS, Segment.PARAMS)),
    body: dict[str, Any] = Depends(validated(UPDATE_TAG)),
    db: AsyncSession = Depends(get_db),
    audit: AuditContext | None = Depends(get_audit_context),
):
    tag = await tag_service.update_tag(db, params["id"], body, audit)
    return send_success(request, "Tag updated successfully", tag)


@router.delete(
    "/{id}", status_code=status.HTTP_204_NO_CONTENT,
    openapi_extra=openapi_for(params=TAG_ID_PARAMS),
    responses=error_responses(404, 422),
)
async def delete_tag(
    params: dict[str, Any] = Depends(validated(TAG_ID_PARAMS, Segment.PARAMS)),
    db: AsyncSession = Depends(get_db),
    audit: AuditContext | None = Depends(get_audit_context),
):
    await tag_service.delete_tag(db, params["id"], audit)
    return send_no_content()

"""Category Routes — CRUD, tree and icon endpoints for categories.

Invariants:
    - Every segment a handler reads is validated first (validated() dependency)
    - Create/update accept JSON or multipart form bodies
    - /tree and /slug/{slug} registered before /{id}
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
from inkpost.schemas.category import (
    CATEGORY_ID_PARAMS, CATEGORY_LIST_QUERY, CREATE_CATEGORY, UPDATE_CATEGORY,
)
from inkpost.schemas.common import SLUG_PARAMS
from inkpost.schemas.envelope import SuccessEnvelope
from inkpost.services import category_service
from inkpost.services.activity_log_service import AuditContext

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/categories", tags=["categories"])

_by_id = validated(CATEGORY_ID_PARAMS, Segment.PARAMS)


@router.get(
    "", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(query=CATEGORY_LIST_QUERY),
    responses=error_responses(422),
)
async def list_categories(
    request: Request,
    query: dict[str, Any] = Depends(
        validated(CATEGORY_LIST_QUERY, Segment.QUERY),
    ),
    db: AsyncSession = Depends(get_db),
):
    """Paginated category list; parentId=null restricts to top level."""
    items, total = await category_service.list_categories(db, query)
    return send_paginated(
        request, "Categories retrieved successfully", items,
        total_items=total, page=query["page"], limit=query["limit"],
    )


@router.get("/tree", response_model=SuccessEnvelope)
async def get_category_tree(
    request: Request, db: AsyncSession = Depends(get_db),
):
    tree = await category_service.get_category_tree(db)
    return send_success(request, "Category tree retrieved successfully", tree)


@router.get(
    "/slug/{slug}", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(params=SLUG_PARAMS),
    responses=error_responses(404, 422),
)
async def get_category_by_slug(
    request: Request,
    params: dict[str, Any] = Depends(validated(SLUG_PARAMS, Segment.PARAMS)),
    db: AsyncSession = Depends(get_db),
):
    category = await category_service.get_category_by_slug(db, params["slug"])
    return send_success(request, "Category retrieved successfully", category)


@router.get(
    "/{id}", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(params=CATEGORY_ID_PARAMS),
    responses=error_responses(404, 422),
)
async def get_category(
    request: Request,
    params: dict[str, Any] = Depends(_by_id),
    db: AsyncSession = Depends(get_db),
):
    category = await category_service.get_category_by_id(db, params["id"])
    return send_success(request, "Category retrieved successfully", category)


@router.post(
    "", response_model=SuccessEnvelope, status_code=status.HTTP_201_CREATED,
    openapi_extra=openapi_for(body=CREATE_CATEGORY),
    responses=error_responses(400, 404, 409, 422),
)
async def create_category(
    request: Request,
    body: dict[str, Any] = Depends(validated(CREATE_CATEGORY)),
    db: AsyncSession = Depends(get_db),
    audit: AuditContext | None = Depends(get_audit_context),
):
    category = await category_service.create_category(db, body, audit)
    return send_created(request, "Category created successfully", category)


@router.patch(
    "/{id}", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(body=UPDATE_CATEGORY, params=CATEGORY_ID_PARAMS),
    responses=error_responses(400, 404, 409, 422),
)
async def update_category(
    request: Request,
    params: dict[str, Any] = Depends(_by_id),
    body: dict[str, Any] = Depends(validated(UPDATE_CATEGORY)),
    db: AsyncSession = Depends(get_db),
    audit: AuditContext | None = Depends(get_audit_context),
):
    category = await category_service.update_category(
        db, params["id"], body, audit,
    )
    return send_success(request, "Category updated successfully", category)


@router.delete(
    "/{id}/icon", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(params=CATEGORY_ID_PARAMS),
    responses=error_responses(404, 422),
)
async def delete_category_icon(
    request: Request,
    params: dict[str, Any] = Depends(_by_id),
    db: AsyncSession = Depends(get_db),
    audit: AuditContext | None = Depends(get_audit_context),
):
    category = await category_service.delete_category_icon(
        db, params["id"], audit,
    )
    return send_success(request, "Category icon deleted successfully", category)


@router.delete(
    "/{id}", status_code=status.HTTP_204_NO_CONTENT,
    openapi_extra=openapi_for(params=CATEGORY_ID_PARAMS),
    responses=error_responses(400, 404, 422),
)
async def delete_category(
    params: dict[str, Any] = Depends(_by_id),
    db: AsyncSession = Depends(get_db),
    audit: AuditContext | None = Depends(get_audit_context),
):
    await category_service.delete_category(db, params["id"], audit)
    return send_no_content()

"""Activity Log Routes — read, annotate and prune the audit trail.

Invariants:
    - No create endpoint: entries are written only by the services they audit
    - /stats registered before /{id}
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.api.responses import (
    error_responses, send_no_content, send_paginated, send_success,
)
from inkpost.api.validation import openapi_for, validated
from inkpost.core.validation_rules import Segment
from inkpost.infrastructure.database import get_db
from inkpost.schemas.activity_log import (
    ACTIVITY_LOG_ID_PARAMS, ACTIVITY_LOG_LIST_QUERY, ACTIVITY_LOG_STATS_QUERY,
    UPDATE_ACTIVITY_LOG,
)
from inkpost.schemas.envelope import SuccessEnvelope
from inkpost.services import activity_log_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/activity-logs", tags=["activity-logs"])

_by_id = validated(ACTIVITY_LOG_ID_PARAMS, Segment.PARAMS)


@router.get(
    "", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(query=ACTIVITY_LOG_LIST_QUERY),
    responses=error_responses(422),
)
async def list_activity_logs(
    request: Request,
    query: dict[str, Any] = Depends(
        validated(ACTIVITY_LOG_LIST_QUERY, Segment.QUERY),
    ),
    db: AsyncSession = Depends(get_db),
):
    """Paginated, filterable audit trail (newest first by default)."""
    items, total = await activity_log_service.list_activity_logs(db, query)
    return send_paginated(
        request, "Activity logs retrieved successfully", items,
        total_items=total, page=query["page"], limit=query["limit"],
    )


@router.get(
    "/stats", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(query=ACTIVITY_LOG_STATS_QUERY),
    responses=error_responses(422),
)
async def get_activity_log_stats(
    request: Request,
    query: dict[str, Any] = Depends(
        validated(ACTIVITY_LOG_STATS_QUERY, Segment.QUERY),
    ),
    db: AsyncSession = Depends(get_db),
):
    stats = await activity_log_service.get_activity_log_stats(db, query)
    return send_success(
        request, "Activity log statistics retrieved successfully", stats,
    )


@router.get(
    "/{id}", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(params=ACTIVITY_LOG_ID_PARAMS),
    responses=error_responses(404, 422),
)
async def get_activity_log(
    request: Request,
    params: dict[str, Any] = Depends(_by_id),
    db: AsyncSession = Depends(get_db),
):
    log = await activity_log_service.get_activity_log(db, params["id"])
    return send_success(request, "Activity log retrieved successfully", log)


@router.patch(
    "/{id}", response_model=SuccessEnvelope,
    openapi_extra=openapi_for(body=UPDATE_ACTIVITY_LOG, params=ACTIVITY_LOG_ID_PARAMS),
    responses=error_responses(400, 404, 422),
)
async def update_activity_log(
    request: Request,
    params: dict[str, Any] = Depends(_by_id),
    body: dict[str, Any] = Depends(validated(UPDATE_ACTIVITY_LOG)),
    db: AsyncSession = Depends(get_db),
):
    log = await activity_log_service.update_activity_log(db, params["id"], body)
    return send_success(request, "Activity log updated successfully", log)


@router.delete(
    "/{id}", status_code=status.HTTP_204_NO_CONTENT,
    openapi_extra=openapi_for(params=ACTIVITY_LOG_ID_PARAMS),
    responses=error_responses(404, 422),
)
async def delete_activity_log(
    params: dict[str, Any] = Depends(_by_id),
    db: AsyncSession = Depends(get_db),
):
    await activity_log_service.delete_activity_log(db, params["id"])
    return send_no_content()

"""Activity Log Service — records audit entries and serves the audit trail.

Invariants:
    - record_activity adds to the caller's session and never commits:
      the audited change and its log entry commit (or roll back) together
    - record_activity is a no-op when audit is None (auditing disabled)
    - Snapshots stored in old_data/new_data are JSON-safe
    - Filters combine with AND; search matches description case-insensitively
    - Failed mutations are recorded with success=False, the error message and
      a severity derived from the response status (5xx CRITICAL, 4xx ERROR)
    - duration is milliseconds since the request entered the app, when known

Design Decisions:
    - Explicit calls from services over response-sniffing middleware: the
      service knows the entity, its id and the before/after state
    - Failures recorded from the error handlers (api/dependencies.py), since
      the service never returns on those paths
"""

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from fastapi.encoders import jsonable_encoder
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.core.domain_types import ActivityAction, ActivityLogId, LogSeverity
from inkpost.core.errors import ResourceNotFoundError
from inkpost.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "createdAt": ActivityLog.created_at,
    "action": ActivityLog.action,
    "entity": ActivityLog.entity,
    "severity": ActivityLog.severity,
    "duration": ActivityLog.duration,
}


@dataclass(frozen=True)
class AuditContext:
    """Request metadata attached to every audit entry."""
    ip_address: str | None = None
    user_agent: str | None = None
    method: str | None = None
    endpoint: str | None = None
    user_id: str | None = None
    started_at: float | None = None

    def elapsed_ms(self) -> int | None:
        """Milliseconds since the request started; None when unknown."""
        if self.started_at is None:
            return None
        return max(0, round((time.perf_counter() - self.started_at) * 1000))


def severity_for_status(status_code: int) -> LogSeverity:
    if status_code >= 500:
        return LogSeverity.CRITICAL
    if status_code >= 400:
        return LogSeverity.ERROR
    if status_code >= 300:
        return LogSeverity.WARNING
    return LogSeverity.INFO


def action_for_method(method: str | None) -> ActivityAction:
    """CRUD action implied by an HTTP method."""
    return {
        "POST": ActivityAction.CREATE,
        "PUT": ActivityAction.UPDATE,
        "PATCH": ActivityAction.UPDATE,
        "DELETE": ActivityAction.DELETE,
    }.get((method or "").upper(), ActivityAction.READ)


def to_activity_log_response(log: ActivityLog) -> dict:
    return {
        "id": log.id,
        "userId": log.user_id,
        "action": log.action,
        "entity": log.entity,
        "entityId": log.entity_id,
        "description": log.description,
        "oldData": log.old_data,
        "newData": log.new_data,
        "ipAddress": log.ip_address,
        "userAgent": log.user_agent,
        "method": log.method,
        "endpoint": log.endpoint,
        "success": log.success,
        "errorMessage": log.error_message,
        "severity": log.severity,
        "duration": log.duration,
        "createdAt": log.created_at,
        "updatedAt": log.updated_at,
    }


def _to_list_item(log: ActivityLog) -> dict:
    item = to_activity_log_response(log)
    del item["oldData"], item["newData"], item["userAgent"], item["updatedAt"]
    return item


def _new_log(audit: AuditContext, **fields) -> ActivityLog:
    return ActivityLog(
        user_id=audit.user_id,
        ip_address=audit.ip_address,
        user_agent=audit.user_agent,
        method=audit.method,
        endpoint=audit.endpoint,
        duration=audit.elapsed_ms(),
        **fields,
    )


async def record_activity(
    db: AsyncSession,
    audit: AuditContext | None,
    *,
    action: ActivityAction,
    entity: str,
    entity_id: Any = None,
    description: str,
    old_data: Any = None,
    new_data: Any = None,
    severity: LogSeverity = LogSeverity.INFO,
) -> ActivityLog | None:
    """Stage one audit entry in the caller's session."""
    if audit is None:
        return None
    log = _new_log(
        audit,
        action=action.value,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        description=description,
        old_data=jsonable_encoder(old_data) if old_data is not None else None,
        new_data=jsonable_encoder(new_data) if new_data is not None else None,
        success=True,
        severity=severity.value,
    )
    db.add(log)
    logger.info(
        description,
        extra={"entity": entity, "entity_id": log.entity_id},
    )
    return log


async def record_failed_request(
    db: AsyncSession,
    audit: AuditContext,
    *,
    entity: str,
    entity_id: Any = None,
    status_code: int,
    error_message: str,
) -> ActivityLog:
    """Stage an entry for a mutation that ended in an error response.

    The failed request's own transaction is gone by now, so callers pass a
    fresh session and commit it themselves.
    """
    log = _new_log(
        audit,
        action=action_for_method(audit.method).value,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        description=f"Failed {audit.method} {audit.endpoint}",
        success=False,
        error_message=error_message,
        severity=severity_for_status(status_code).value,
    )
    db.add(log)
    logger.info(
        log.description,
        extra={
            "entity": entity, "entity_id": log.entity_id,
            "status_code": status_code,
        },
    )
    return log


def _filters(query: dict[str, Any]) -> list:
    conditions = []
    for key, column in (
        ("action", ActivityLog.action),
        ("entity", ActivityLog.entity),
        ("entity_id", ActivityLog.entity_id),
        ("success", ActivityLog.success),
        ("severity", ActivityLog.severity),
        ("method", ActivityLog.method),
    ):
        if query.get(key) is not None:
            conditions.append(column == query[key])
    start_date: datetime | None = query.get("start_date")
    end_date: datetime | None = query.get("end_date")
    if start_date is not None:
        conditions.append(ActivityLog.created_at >= start_date)
    if end_date is not None:
        conditions.append(ActivityLog.created_at <= end_date)
    if query.get("search"):
        conditions.append(ActivityLog.description.ilike(f"%{query['search']}%"))
    return conditions


async def list_activity_logs(
    db: AsyncSession, query: dict[str, Any],
) -> tuple[list[dict], int]:
    """One page of audit entries plus the total matching count."""
    conditions = _filters(query)
    page, limit = query["page"], query["limit"]

    total = await db.scalar(
        select(func.count()).select_from(ActivityLog).where(*conditions),
    )
    column = SORT_COLUMNS[query["sort_by"]]
    order = column.desc() if query["sort_order"] == "desc" else column.asc()
    result = await db.execute(
        select(ActivityLog)
        .where(*conditions)
        .order_by(order, ActivityLog.id)
        .offset((page - 1) * limit)
        .limit(limit),
    )
    return [_to_list_item(log) for log in result.scalars().all()], total or 0


async def _get_or_404(db: AsyncSession, log_id: ActivityLogId) -> ActivityLog:
    log = await db.get(ActivityLog, log_id)
    if log is None:
        raise ResourceNotFoundError("Activity log")
    return log


async def get_activity_log(db: AsyncSession, log_id: ActivityLogId) -> dict:
    return to_activity_log_response(await _get_or_404(db, log_id))


async def get_activity_log_stats(
    db: AsyncSession, query: dict[str, Any],
) -> dict:
    """Totals, success split, per-action/severity/entity counts, mean duration."""
    conditions = _filters(query)

    async def count(*extra) -> int:
        return await db.scalar(
            select(func.count()).select_from(ActivityLog).where(*conditions, *extra),
        ) or 0

    async def group_by(column) -> dict[str, int]:
        result = await db.execute(
            select(column, func.count()).where(*conditions).group_by(column),
        )
        return {key: n for key, n in result.all()}

    average = await db.scalar(
        select(func.avg(ActivityLog.duration))
        .where(*conditions, ActivityLog.duration.is_not(None)),
    )
    return {
        "totalLogs": await count(),
        "successfulActions": await count(ActivityLog.success.is_(True)),
        "failedActions": await count(ActivityLog.success.is_(False)),
        "byAction": await group_by(ActivityLog.action),
        "bySeverity": await group_by(ActivityLog.severity),
        "byEntity": await group_by(ActivityLog.entity),
        "averageDuration": float(average) if average is not None else None,
    }


async def update_activity_log(
    db: AsyncSession, log_id: ActivityLogId, data: dict[str, Any],
) -> dict:
    """Admin edit of severity, description, or error message."""
    log = await _get_or_404(db, log_id)
    for key in ("severity", "description", "error_message"):
        if key in data:
            setattr(log, key, data[key])
    await db.commit()
    await db.refresh(log)
    return to_activity_log_response(log)


async def delete_activity_log(db: AsyncSession, log_id: ActivityLogId) -> None:
    log = await _get_or_404(db, log_id)
    await db.delete(log)
    await db.commit()

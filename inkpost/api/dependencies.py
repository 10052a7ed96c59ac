"""Shared route dependencies and request auditing.

Invariants:
    - Audit context is None when auditing is disabled in settings
    - Only mutating requests (POST, PUT, PATCH, DELETE) on audited resources
      produce failure entries; the activity log does not audit itself
    - Recording a failure never changes the error response sent to the client
"""

import logging
import time
import uuid

from fastapi import Depends, Request

from inkpost.config import Settings, get_settings
from inkpost.core.errors import InkpostError
from inkpost.infrastructure.database import get_db_manager
from inkpost.services.activity_log_service import (
    AuditContext, record_failed_request,
)

logger = logging.getLogger(__name__)

AUDITED_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
AUDITED_RESOURCES = {"tags": "Tag", "categories": "Category", "users": "User"}


def client_ip(request: Request) -> str | None:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def build_audit_context(request: Request) -> AuditContext:
    return AuditContext(
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
        method=request.method,
        endpoint=request.url.path,
        started_at=getattr(request.state, "started_at", None) or time.perf_counter(),
    )


def get_audit_context(
    request: Request, settings: Settings = Depends(get_settings),
) -> AuditContext | None:
    """Audit metadata for the current request; None when auditing is off."""
    if not settings.activity_log_enabled:
        return None
    return build_audit_context(request)


def audited_resource(path: str, api_prefix: str) -> tuple[str, str | None] | None:
    """(entity, entity id) for a path under an audited resource, else None."""
    prefix = api_prefix.rstrip("/") + "/"
    if not path.startswith(prefix):
        return None
    parts = path[len(prefix):].strip("/").split("/")
    entity = AUDITED_RESOURCES.get(parts[0])
    if entity is None:
        return None
    entity_id = None
    if len(parts) > 1:
        try:
            entity_id = str(uuid.UUID(parts[1]))
        except ValueError:
            pass
    return entity, entity_id


async def audit_failed_request(
    request: Request, status_code: int, message: str,
) -> None:
    """Record a mutation that ended in an error response, in its own session."""
    if request.method not in AUDITED_METHODS:
        return
    settings = get_settings()
    if not settings.activity_log_enabled:
        return
    resource = audited_resource(request.url.path, settings.api_prefix)
    db_manager = get_db_manager(request)
    if resource is None or db_manager is None:
        return

    entity, entity_id = resource
    try:
        async with db_manager.session() as db:
            await record_failed_request(
                db, build_audit_context(request),
                entity=entity, entity_id=entity_id,
                status_code=status_code, error_message=message,
            )
            await db.commit()
    except InkpostError as e:
        logger.error(
            f"Could not record failed request: {e.message}",
            extra={"path": request.url.path, "method": request.method},
        )

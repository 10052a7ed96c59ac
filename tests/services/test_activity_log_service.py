"""Activity Log Service — audit staging, failure entries and stats aggregation."""

import time

import pytest
from sqlalchemy import select

from inkpost.core.domain_types import ActivityAction, LogSeverity
from inkpost.models.activity_log import ActivityLog
from inkpost.services.activity_log_service import (
    AuditContext, action_for_method, get_activity_log_stats, record_activity,
    record_failed_request, severity_for_status,
)


async def test_record_activity_is_noop_without_context(test_db):
    result = await record_activity(
        test_db, None,
        action=ActivityAction.CREATE, entity="Tag", description="Created tag: x",
    )
    assert result is None
    assert not test_db.new


async def test_record_activity_stages_without_committing(test_db, test_session_factory):
    await record_activity(
        test_db, AuditContext(method="POST"),
        action=ActivityAction.CREATE, entity="Tag", description="Created tag: x",
    )
    async with test_session_factory() as other:
        assert (await other.execute(select(ActivityLog))).scalars().all() == []

    await test_db.commit()
    async with test_session_factory() as other:
        assert len((await other.execute(select(ActivityLog))).scalars().all()) == 1


async def test_stats_average_duration_and_failures(test_db):
    test_db.add_all([
        ActivityLog(action="READ", entity="Tag", description="a", duration=10),
        ActivityLog(action="READ", entity="Tag", description="b", duration=30),
        ActivityLog(
            action="DELETE", entity="Tag", description="c", success=False,
            severity=LogSeverity.ERROR.value,
        ),
    ])
    await test_db.commit()

    stats = await get_activity_log_stats(test_db, {})
    assert stats["totalLogs"] == 3
    assert stats["failedActions"] == 1
    assert stats["averageDuration"] == 20.0
    assert stats["bySeverity"] == {"INFO": 2, "ERROR": 1}


@pytest.mark.parametrize("status_code,severity", [
    (200, LogSeverity.INFO),
    (302, LogSeverity.WARNING),
    (404, LogSeverity.ERROR),
    (422, LogSeverity.ERROR),
    (500, LogSeverity.CRITICAL),
    (503, LogSeverity.CRITICAL),
])
def test_severity_follows_status_code(status_code, severity):
    assert severity_for_status(status_code) is severity


@pytest.mark.parametrize("method,action", [
    ("POST", ActivityAction.CREATE),
    ("patch", ActivityAction.UPDATE),
    ("PUT", ActivityAction.UPDATE),
    ("DELETE", ActivityAction.DELETE),
    ("GET", ActivityAction.READ),
    (None, ActivityAction.READ),
])
def test_action_follows_method(method, action):
    assert action_for_method(method) is action


async def test_record_failed_request_stages_failure(test_db):
    audit = AuditContext(method="DELETE", endpoint="/api/categories/x", started_at=None)
    log = await record_failed_request(
        test_db, audit,
        entity="Category", status_code=400,
        error_message="Cannot delete category with subcategories.",
    )
    await test_db.commit()

    stored = await test_db.scalar(select(ActivityLog))
    assert stored is log
    assert stored.success is False
    assert stored.action == "DELETE"
    assert stored.severity == "ERROR"
    assert stored.description == "Failed DELETE /api/categories/x"
    assert stored.duration is None


def test_elapsed_ms_measures_from_start():
    audit = AuditContext(started_at=time.perf_counter() - 0.25)
    assert 250 <= audit.elapsed_ms() < 5000
    assert AuditContext().elapsed_ms() is None

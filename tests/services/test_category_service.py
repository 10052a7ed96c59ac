"""Category Service — hierarchy rules exercised without HTTP.

Tests:
    - Tree nesting stops at three levels
    - No audit context → no activity log rows
    - Unknown id → ResourceNotFoundError
"""

from uuid import uuid4

import pytest
from sqlalchemy import func, select

from inkpost.core.errors import BadRequestError, ResourceNotFoundError
from inkpost.models.activity_log import ActivityLog
from inkpost.services import category_service
from inkpost.services.activity_log_service import AuditContext


async def _chain(db, depth):
    parent_id = None
    created = []
    for level in range(depth):
        data = {"name": f"Level {level}", "slug": f"level-{level}"}
        if parent_id is not None:
            data["parent_id"] = parent_id
        category = await category_service.create_category(db, data)
        parent_id = category["id"]
        created.append(category)
    return created


async def test_tree_stops_at_three_levels(test_db):
    await _chain(test_db, 4)
    tree = await category_service.get_category_tree(test_db)

    level_2 = tree[0]["children"][0]
    level_3 = level_2["children"][0]
    assert level_3["slug"] == "level-2"
    assert "children" not in level_3


async def test_create_without_audit_writes_no_log(test_db):
    await category_service.create_category(test_db, {"name": "A", "slug": "a"})
    count = await test_db.scalar(select(func.count()).select_from(ActivityLog))
    assert count == 0


async def test_create_with_audit_writes_log(test_db):
    audit = AuditContext(ip_address="127.0.0.1", method="POST", endpoint="/api/categories")
    created = await category_service.create_category(
        test_db, {"name": "A", "slug": "a"}, audit,
    )
    log = await test_db.scalar(select(ActivityLog))
    assert log.entity == "Category"
    assert log.entity_id == str(created["id"])
    assert log.new_data["slug"] == "a"
    assert log.endpoint == "/api/categories"


async def test_deep_cycle_refused(test_db):
    top, middle, bottom = await _chain(test_db, 3)
    with pytest.raises(BadRequestError):
        await category_service.update_category(
            test_db, top["id"], {"parent_id": bottom["id"]},
        )


async def test_unknown_category_raises_not_found(test_db):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await category_service.get_category_by_id(test_db, uuid4())
    assert exc_info.value.http_status == 404
    assert exc_info.value.message == "Category not found"

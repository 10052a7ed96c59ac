"""Database Session Manager — error mapping and health check."""

import pytest

from inkpost.core.errors import ConflictError
from inkpost.db.base import Base
from inkpost.infrastructure.database import DatabaseSessionManager
from inkpost.models.tag import Tag


@pytest.fixture
async def manager(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'inkpost.db'}")
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.dispose()


async def test_health_check_succeeds(manager):
    assert await manager.health_check() is True


async def test_integrity_error_becomes_conflict(manager):
    async with manager.session() as db:
        db.add(Tag(name="Python", slug="python"))
        await db.commit()

    with pytest.raises(ConflictError):
        async with manager.session() as db:
            db.add(Tag(name="Again", slug="python"))
            await db.commit()

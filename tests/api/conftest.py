"""API test fixtures — FastAPI app over httpx with the test database.

Invariants:
    - get_db dependency overridden to use the test session factory
    - app.state.db_manager points at the test engine (readiness probe)
    - Overrides and state cleared after each test
"""

import pytest
from httpx import ASGITransport, AsyncClient

from inkpost.infrastructure.database import DatabaseSessionManager, get_db
from inkpost.main import app


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    # Lifespan does not run under ASGITransport
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    app.state.db_manager = manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    del app.state.db_manager


@pytest.fixture
async def created_tag(client):
    res = await client.post(
        "/api/tags", json={"name": "Python", "slug": "python"},
    )
    assert res.status_code == 201
    return res.json()["data"]


@pytest.fixture
async def created_category(client):
    res = await client.post(
        "/api/categories",
        json={"name": "Programming", "slug": "programming", "orderPosition": 1},
    )
    assert res.status_code == 201
    return res.json()["data"]


@pytest.fixture
async def created_user(client):
    res = await client.post(
        "/api/users",
        json={"username": "ada_l", "email": "Ada@Inkpost.io", "name": "Ada"},
    )
    assert res.status_code == 201
    return res.json()["data"]

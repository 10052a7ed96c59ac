"""Health probes — liveness always 200, readiness follows the database."""

from httpx import ASGITransport, AsyncClient

from inkpost.main import create_app


async def test_liveness(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["data"]["status"] == "healthy"


async def test_readiness_with_database(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json()["data"]["checks"] == {"database": "healthy"}


async def test_readiness_without_database_returns_503():
    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        res = await c.get("/api/health/ready")
    assert res.status_code == 503
    assert res.json()["message"] == "Database unavailable"

"""Error Handlers — every failure leaves the app in the error envelope.

Invariants:
    - Unknown route → 404 "Route METHOD path not found"
    - Malformed JSON → 400; non-object body → 422 on field "body"
    - Unhandled exception → 500 "Internal server error", no internals leaked
"""

from httpx import ASGITransport, AsyncClient

from inkpost.api.error_handlers import build_field_errors
from inkpost.core.validation_rules import FieldError
from inkpost.main import create_app


async def test_unknown_route_returns_404_envelope(client):
    res = await client.get("/api/nothing-here?x=1")
    assert res.status_code == 404
    body = res.json()
    assert body == {
        "success": False,
        "message": "Route GET /api/nothing-here not found",
        "timestamp": body["timestamp"],
        "path": "/api/nothing-here?x=1",
    }


async def test_wrong_method_returns_405_envelope(client):
    res = await client.put("/api/tags", json={})
    assert res.status_code == 405
    assert res.json()["success"] is False
    assert "allow" in res.headers


async def test_malformed_json_returns_400(client):
    res = await client.post(
        "/api/tags", content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Malformed JSON body"


async def test_non_object_body_returns_422(client):
    res = await client.post("/api/tags", json=["python"])
    assert res.status_code == 422
    assert res.json()["errors"] == [
        {"field": "body", "message": "Request body must be an object"},
    ]


async def test_empty_body_reports_required_fields(client):
    res = await client.post("/api/tags")
    assert res.status_code == 422
    assert [e["field"] for e in res.json()["errors"]] == ["name", "slug"]


async def test_unhandled_exception_returns_generic_500():
    app = create_app()

    @app.get("/api/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        res = await c.get("/api/boom")

    assert res.status_code == 500
    body = res.json()
    assert body["success"] is False
    assert body["message"] == "Internal server error"
    assert "hunter2" not in res.text


def test_build_field_errors_strips_segment_prefix():
    errors = build_field_errors([
        {"loc": ("body", "name"), "msg": "Field required"},
        {"loc": ("query", "page"), "msg": "Input should be a valid integer"},
        {"loc": ("path", "id"), "msg": "bad"},
    ])
    assert errors == [
        FieldError("name", "Field required"),
        FieldError("page", "Input should be a valid integer"),
        FieldError("id", "bad"),
    ]

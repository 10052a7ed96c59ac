"""Route dependencies — client IP resolution and audited resource detection."""

import pytest
from starlette.requests import Request

from inkpost.api.dependencies import audited_resource, client_ip

ID = "12345678-1234-5678-1234-567812345678"


def _request(headers=(), client=("192.168.1.5", 5000)):
    return Request({
        "type": "http", "method": "GET", "path": "/",
        "headers": [(k.encode(), v.encode()) for k, v in headers],
        "client": client,
    })


def test_client_ip_prefers_first_forwarded_hop():
    request = _request([("x-forwarded-for", "10.0.0.7, 10.0.0.1")])
    assert client_ip(request) == "10.0.0.7"


def test_client_ip_falls_back_to_peer():
    assert client_ip(_request()) == "192.168.1.5"
    assert client_ip(_request(client=None)) is None


@pytest.mark.parametrize("path,expected", [
    ("/api/tags", ("Tag", None)),
    (f"/api/tags/{ID}", ("Tag", ID)),
    (f"/api/categories/{ID}/icon", ("Category", ID)),
    ("/api/categories/slug/news", ("Category", None)),
    (f"/api/users/{ID}", ("User", ID)),
    ("/api/activity-logs", None),
    ("/api/health", None),
    ("/tags", None),
])
def test_audited_resource(path, expected):
    assert audited_resource(path, "/api") == expected

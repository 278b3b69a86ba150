from fastapi.testclient import TestClient

from src.main import app

client = TestClient(app)


def test_health_check():
    """Smoke test for health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_router_integration():
    """Test that editor endpoints are mounted under /api/editor."""
    paths = {route.path for route in app.routes}
    for expected in (
        "/api/editor/login",
        "/api/editor/state",
        "/api/editor/file/open",
        "/api/editor/file/save",
        "/api/editor/tree",
    ):
        assert expected in paths, f"{expected} should be routed"


def test_unknown_route_is_404():
    response = client.get("/api/obs/status")
    assert response.status_code == 404

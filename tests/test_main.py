"""
Tests for app wiring: health check, startup prerender, unknown routes
"""
from fastapi.testclient import TestClient

from portfolio.main import create_app


def test_health_reports_connected_store(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "portfolio", "database": "connected"}


def test_health_reports_unreachable_store(unreachable_store, stats_cache, page_cache):
    app = create_app(store=unreachable_store, stats_cache=stats_cache, page_cache=page_cache, prerender=False)

    response = TestClient(app).get("/api/health")

    assert response.json()["status"] == "degraded"
    assert response.json()["database"] == "disconnected"


def test_startup_prerenders_pages(store, stats_cache, page_cache):
    app = create_app(store=store, stats_cache=stats_cache, page_cache=page_cache, prerender=True)

    with TestClient(app) as client:
        assert page_cache.get("/") is not None
        assert client.get("/").headers["X-Cache"] == "HIT"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}


def test_cors_allows_site_origin(client):
    response = client.options(
        "/api/projects",
        headers={"Origin": "https://example.dev", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://example.dev"
    assert response.headers["access-control-allow-credentials"] == "true"

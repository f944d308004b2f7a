"""Tests for app-level routes, middleware headers and the error envelope."""
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from notegeek import dependencies


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == "NoteGeek API is running..."


def test_health(client):
    response = client.get("/api/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_readiness_reports_database(app, client):
    app.dependency_overrides[dependencies.get_db_client] = lambda: MagicMock()
    response = client.get("/api/health/ready")
    assert response.status_code == 200
    assert response.json()["database"] == "connected"


def test_readiness_reports_database_error(app, client):
    broken = MagicMock()
    broken.table.side_effect = RuntimeError("connection refused")
    app.dependency_overrides[dependencies.get_db_client] = lambda: broken

    response = client.get("/api/health/ready")
    assert response.status_code == 200
    assert response.json()["database"] == "error: connection refused"


def test_security_headers(client):
    response = client.get("/")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "Cache-Control" not in response.headers


def test_authenticated_responses_are_not_cached(client, user):
    response = client.get("/api/notes", headers=user["headers"])
    assert response.headers["Cache-Control"] == "no-store"

    response = client.post("/api/auth/login", json={"email": "user@example.com", "password": "secret123"})
    assert response.headers["Cache-Control"] == "no-store"


def test_unknown_route(client):
    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found - /api/nowhere"}


def test_unexpected_error_envelope(app):
    @app.get("/api/boom")
    async def boom():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/boom")

    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Server error"
    assert "RuntimeError: kaboom" in body["stack"]


def test_unexpected_error_hides_stack_in_production(app, monkeypatch):
    from notegeek.config import settings

    monkeypatch.setattr(settings, "environment", "production")

    @app.get("/api/boom")
    async def boom():
        raise RuntimeError("kaboom")

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/boom")

    assert response.status_code == 500
    assert response.json() == {"message": "Server error"}

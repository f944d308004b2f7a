"""Tests for registration, login, bearer authentication and SSO adoption."""
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from notegeek import dependencies
from notegeek.config import settings
from notegeek.utils.validation import validate_email_format
from tests.conftest import auth_headers, register


def make_token(claims, secret=None, expires_in=timedelta(hours=1)):
    payload = {"exp": datetime.now(UTC) + expires_in, **claims}
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm="HS256")


# =============================================================================
# Register
# =============================================================================


def test_register_returns_user_and_token(client):
    response = client.post("/api/auth/register", json={"email": "New@Example.com", "password": "secret123"})
    assert response.status_code == 201

    data = response.json()
    assert set(data) == {"id", "email", "createdAt", "token"}
    assert data["email"] == "new@example.com"

    claims = jwt.decode(data["token"], settings.jwt_secret, algorithms=["HS256"])
    assert claims["id"] == data["id"]
    assert claims["email"] == "new@example.com"


def test_register_stores_password_hash_only(client, user_repo):
    register(client, email="hash@example.com", password="secret123")
    stored = next(iter(user_repo.rows.values()))
    assert stored.password_hash != "secret123"
    assert stored.password_hash.startswith("$2")


def test_register_rejects_short_password(client):
    response = client.post("/api/auth/register", json={"email": "a@example.com", "password": "12345"})
    assert response.status_code == 400
    assert response.json()["message"] == "Password must be at least 6 characters long"


def test_register_accepts_minimum_length_password(client):
    response = client.post("/api/auth/register", json={"email": "a@example.com", "password": "123456"})
    assert response.status_code == 201


def test_register_rejects_invalid_email(client):
    response = client.post("/api/auth/register", json={"email": "not-an-email", "password": "secret123"})
    assert response.status_code == 400
    assert response.json()["message"] == "Please provide a valid email"


def test_email_format_rejects_trailing_newline():
    assert validate_email_format("a@example.com") == (True, None)
    assert validate_email_format("a@example.com\n")[0] is False


@pytest.mark.parametrize("body", [{}, {"email": "a@example.com"}, {"password": "secret123"}])
def test_register_requires_both_fields(client, body):
    response = client.post("/api/auth/register", json=body)
    assert response.status_code == 400
    assert response.json()["message"] == "Please provide email and password"


def test_register_duplicate_email(client):
    register(client, email="dup@example.com")
    response = client.post("/api/auth/register", json={"email": "DUP@example.com", "password": "secret123"})
    assert response.status_code == 400
    assert response.json()["message"] == "User already exists with this email"


# =============================================================================
# Login
# =============================================================================


def test_login_success(client):
    registered = register(client, email="login@example.com", password="secret123")
    response = client.post("/api/auth/login", json={"email": "login@example.com", "password": "secret123"})
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == registered["id"]
    assert data["token"]


@pytest.mark.parametrize(
    "credentials",
    [
        {"email": "login@example.com", "password": "wrong-password"},
        {"email": "nobody@example.com", "password": "secret123"},
    ],
)
def test_login_failures_share_one_message(client, credentials):
    register(client, email="login@example.com", password="secret123")
    response = client.post("/api/auth/login", json=credentials)
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_login_requires_both_fields(client):
    response = client.post("/api/auth/login", json={"email": "login@example.com"})
    assert response.status_code == 400


# =============================================================================
# Bearer authentication
# =============================================================================


def test_me_returns_current_user(client, user):
    response = client.get("/api/auth/me", headers=user["headers"])
    assert response.status_code == 200
    assert response.json() == {"id": user["id"], "email": "user@example.com"}


def test_missing_token(client):
    response = client.get("/api/notes")
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, no token"


@pytest.mark.parametrize("token", ["garbage", "a.b.c"])
def test_malformed_token(client, token):
    response = client.get("/api/notes", headers=auth_headers(token))
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_token_with_wrong_signature(client, user):
    token = make_token({"id": user["id"]}, secret="some-other-secret-of-sufficient-length")
    response = client.get("/api/notes", headers=auth_headers(token))
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_expired_token(client, user):
    token = make_token({"id": user["id"]}, expires_in=timedelta(seconds=-10))
    response = client.get("/api/notes", headers=auth_headers(token))
    assert response.status_code == 401
    assert response.json()["message"] == "Token expired"


def test_token_without_id_claim(client):
    token = make_token({"email": "someone@example.com"})
    response = client.get("/api/notes", headers=auth_headers(token))
    assert response.status_code == 401


def test_token_for_deleted_user(client, user, user_repo):
    user_repo.rows.clear()
    response = client.get("/api/notes", headers=user["headers"])
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, user not found"


# =============================================================================
# SSO
# =============================================================================


def test_validate_sso_creates_local_user(client, user_repo):
    token = make_token({"id": "geekbase-42", "email": "sso@example.com", "app": "notegeek"})
    response = client.post("/api/auth/validate-sso", json={"token": token})
    assert response.status_code == 200

    data = response.json()
    assert data["id"] == "geekbase-42"
    assert data["email"] == "sso@example.com"
    assert data["token"] == token
    assert "geekbase-42" in user_repo.rows

    # The adopted token now authenticates API calls
    assert client.get("/api/auth/me", headers=auth_headers(token)).json()["id"] == "geekbase-42"


def test_validate_sso_reuses_existing_user(client, user_repo):
    token = make_token({"id": "geekbase-7", "email": "sso@example.com", "app": "notegeek"})
    client.post("/api/auth/validate-sso", json={"token": token})
    client.post("/api/auth/validate-sso", json={"token": token})
    assert len(user_repo.rows) == 1


def test_sso_user_cannot_password_login(client):
    token = make_token({"id": "geekbase-8", "email": "sso@example.com", "app": "notegeek"})
    client.post("/api/auth/validate-sso", json={"token": token})
    response = client.post("/api/auth/login", json={"email": "sso@example.com", "password": "guess-me-123"})
    assert response.status_code == 401


def test_validate_sso_rejects_other_app(client):
    token = make_token({"id": "geekbase-1", "email": "sso@example.com", "app": "othergeek"})
    response = client.post("/api/auth/validate-sso", json={"token": token})
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, invalid app"


def test_validate_sso_rejects_bad_signature(client):
    token = make_token(
        {"id": "geekbase-1", "email": "sso@example.com", "app": "notegeek"},
        secret="not-the-shared-secret-at-all-nope",
    )
    response = client.post("/api/auth/validate-sso", json={"token": token})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_validate_sso_requires_token(client):
    response = client.post("/api/auth/validate-sso", json={})
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, no token"


def test_sso_token_works_as_bearer_with_distinct_secret(client, monkeypatch):
    monkeypatch.setattr(settings, "sso_secret", "geekbase-shared-secret-distinct-from-jwt")
    token = make_token(
        {"id": "geekbase-9", "email": "sso9@example.com", "app": "notegeek"},
        secret="geekbase-shared-secret-distinct-from-jwt",
    )

    adopted = client.post("/api/auth/validate-sso", json={"token": token}).json()["token"]

    response = client.get("/api/notes", headers=auth_headers(adopted))
    assert response.status_code == 200
    assert client.get("/api/auth/me", headers=auth_headers(adopted)).json()["id"] == "geekbase-9"


def test_bearer_for_other_app_rejected(client, user):
    token = make_token({"id": user["id"], "email": "user@example.com", "app": "othergeek"})
    response = client.get("/api/notes", headers=auth_headers(token))
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, invalid app"


def test_validate_sso_email_owned_by_local_account(client, user_repo):
    register(client, email="taken@example.com")
    token = make_token({"id": "geekbase-2", "email": "taken@example.com", "app": "notegeek"})

    response = client.post("/api/auth/validate-sso", json={"token": token})
    assert response.status_code == 401
    assert response.json()["message"] == "An account with this email already exists"
    assert "geekbase-2" not in user_repo.rows


# =============================================================================
# Rate limiting
# =============================================================================


def test_login_rate_limited(client, monkeypatch):
    monkeypatch.setattr(settings, "enable_rate_limiting", True)
    monkeypatch.setattr(settings, "max_login_attempts", 2)

    body = {"email": "nobody@example.com", "password": "secret123"}
    assert client.post("/api/auth/login", json=body).status_code == 401
    assert client.post("/api/auth/login", json=body).status_code == 401

    response = client.post("/api/auth/login", json=body)
    assert response.status_code == 429
    assert response.json()["message"] == "Too many login attempts. Please try again later."
    assert response.headers["RateLimit-Limit"] == "2"
    assert int(response.headers["Retry-After"]) >= 1


def test_successful_logins_are_not_throttled(client, monkeypatch):
    register(client, email="often@example.com", password="secret123")
    monkeypatch.setattr(settings, "enable_rate_limiting", True)
    monkeypatch.setattr(settings, "max_login_attempts", 2)

    body = {"email": "often@example.com", "password": "secret123"}
    statuses = [client.post("/api/auth/login", json=body).status_code for _ in range(6)]
    assert statuses == [200] * 6


def test_expired_failures_are_forgotten(client, monkeypatch):
    monkeypatch.setattr(settings, "enable_rate_limiting", True)
    client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert dependencies._failed_attempts

    monkeypatch.setattr(settings, "login_attempt_window", 0)
    client.post("/api/auth/register", json={"email": "fresh@example.com", "password": "secret123"})
    client.post("/api/auth/login", json={"email": "fresh@example.com", "password": "secret123"})

    assert dependencies._failed_attempts == {}

"""Common test fixtures for the NoteGeek API.

Settings are read from the environment at import time, so the required
values are set here before any ``notegeek`` module is imported.
"""
import os

os.environ.setdefault("APP_SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("APP_SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("APP_JWT_SECRET", "test-jwt-secret-with-enough-length-for-hs256")
os.environ.setdefault("APP_BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_ENABLE_RATE_LIMITING", "false")
os.environ.setdefault("APP_TRUSTED_HOSTS", '["testserver", "localhost"]')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from notegeek import dependencies  # noqa: E402
from notegeek.main import create_app  # noqa: E402
from tests.fakes import (  # noqa: E402
    InMemoryFolderRepository,
    InMemoryNoteRepository,
    InMemoryUserRepository,
)


@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    """Restrict anyio tests to asyncio only (trio is not installed)."""
    return request.param


@pytest.fixture
def note_repo():
    return InMemoryNoteRepository()


@pytest.fixture
def folder_repo():
    return InMemoryFolderRepository()


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def app(note_repo, folder_repo, user_repo):
    """Application wired to in-memory repositories."""
    application = create_app()
    application.dependency_overrides[dependencies.get_note_repository] = lambda: note_repo
    application.dependency_overrides[dependencies.get_folder_repository] = lambda: folder_repo
    application.dependency_overrides[dependencies.get_user_repository] = lambda: user_repo
    dependencies.reset_rate_limits()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def register(client, email="user@example.com", password="secret123"):
    response = client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(client):
    """A registered user with ready-to-use auth headers."""
    data = register(client)
    data["headers"] = auth_headers(data["token"])
    return data


@pytest.fixture
def other_user(client):
    data = register(client, email="other@example.com", password="another123")
    data["headers"] = auth_headers(data["token"])
    return data

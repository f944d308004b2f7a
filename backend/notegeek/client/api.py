from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5001/api"


class APIError(Exception):
    """Non-2xx response from the NoteGeek API, carrying the envelope message."""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        self.status_code = status_code
        self.message = message
        self.payload = payload
        super().__init__(f"{status_code}: {message}")


class NoteGeekAPI:
    """Thin wrapper over the REST API.

    The bearer token is held on the instance and sent with every request once set.
    Any ``httpx.Client`` can be injected, including a FastAPI ``TestClient``; paths
    are then resolved against ``base_path``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        client: httpx.Client | None = None,
        base_path: str = "",
        token: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self._base_path = base_path.rstrip("/")
        self.token = token

    def close(self) -> None:
        self._client.close()

    # Auth
    def login(self, email: str, password: str) -> dict:
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def register(self, email: str, password: str) -> dict:
        return self._request("POST", "/auth/register", json={"email": email, "password": password})

    def validate_sso(self, token: str) -> dict:
        return self._request("POST", "/auth/validate-sso", json={"token": token})

    def me(self) -> dict:
        return self._request("GET", "/auth/me")

    # Notes
    def get_notes(self, **filters: Any) -> list[dict]:
        params = {k: v for k, v in filters.items() if v is not None}
        return self._request("GET", "/notes", params=params)

    def get_note(self, note_id: str) -> dict:
        return self._request("GET", f"/notes/{note_id}")

    def create_note(self, data: dict) -> dict:
        return self._request("POST", "/notes", json=data)

    def update_note(self, note_id: str, data: dict) -> dict:
        return self._request("PUT", f"/notes/{note_id}", json=data)

    def delete_note(self, note_id: str) -> dict:
        return self._request("DELETE", f"/notes/{note_id}")

    def get_tag_hierarchy(self) -> dict:
        return self._request("GET", "/notes/tags")

    # Tags
    def get_tags(self) -> list[str]:
        return self._request("GET", "/tags")

    def rename_tag(self, old_tag: str, new_tag: str) -> dict:
        return self._request("PUT", "/tags/rename", json={"oldTag": old_tag, "newTag": new_tag})

    def delete_tag(self, tag: str) -> dict:
        return self._request("DELETE", f"/tags/{tag}")

    # Folders
    def get_folders(self) -> list[dict]:
        return self._request("GET", "/folders")

    def create_folder(self, name: str) -> dict:
        return self._request("POST", "/folders", json={"name": name})

    def update_folder(self, folder_id: str, name: str) -> dict:
        return self._request("PUT", f"/folders/{folder_id}", json={"name": name})

    def delete_folder(self, folder_id: str, cascade: bool = False) -> dict:
        return self._request(
            "DELETE", f"/folders/{folder_id}", params={"deleteNotes": str(cascade).lower()}
        )

    # Search
    def search(self, query: str) -> list[dict]:
        return self._request("GET", "/search", params={"q": query})

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = self._client.request(method, f"{self._base_path}{path}", headers=headers, **kwargs)
        if response.is_error:
            message = _error_message(response)
            logger.debug("API error %s %s: %s", method, path, message)
            raise APIError(response.status_code, message, payload=_json_or_none(response))
        return response.json()


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(response: httpx.Response) -> str:
    payload = _json_or_none(response)
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return response.reason_phrase or f"HTTP {response.status_code}"

"""Client-side state containers.

Each store is an ordinary object built around an injected ``NoteGeekAPI``;
a ``ClientSession`` groups the stores that belong to one signed-in user.
Mutations are not retried: a failure leaves a message on the store.
"""
from __future__ import annotations

import logging
import threading
from typing import Any

from notegeek.client.api import APIError, NoteGeekAPI
from notegeek.client.tokens import InvalidTokenFormat, read_token_claims
from notegeek.utils.tags import format_tag

logger = logging.getLogger(__name__)


def _message(err: Exception, fallback: str) -> str:
    if isinstance(err, APIError):
        return err.message or fallback
    return str(err) or fallback


class AuthStore:
    def __init__(self, api: NoteGeekAPI) -> None:
        self.api = api
        self.token: str | None = None
        self.user: dict[str, Any] | None = None
        self.is_authenticated = False
        self.is_loading = False
        self.error: str | None = None

    def login(self, email: str, password: str) -> bool:
        return self._authenticate(lambda: self.api.login(email, password), "Login failed")

    def register(self, email: str, password: str) -> bool:
        return self._authenticate(lambda: self.api.register(email, password), "Registration failed")

    def adopt_sso(self, token: str) -> bool:
        """Hand a GeekBase token to the server and sign in with it."""
        if not token:
            self._fail("Missing token")
            return False
        return self._authenticate(lambda: self.api.validate_sso(token), "SSO login failed")

    def hydrate(self, token: str) -> bool:
        """Restore a session from a stored token, confirming it with the server."""
        try:
            self._set_token(token)
            self.user = {**(self.user or {}), **self.api.me()}
            return True
        except (APIError, InvalidTokenFormat) as err:
            self._fail(_message(err, "Session expired"))
            return False

    def logout(self) -> None:
        self.token = None
        self.user = None
        self.is_authenticated = False
        self.api.token = None

    def _authenticate(self, call, fallback: str) -> bool:
        self.is_loading = True
        self.error = None
        try:
            data = call()
            token = data.get("token")
            if not token:
                raise InvalidTokenFormat("No token received from server")
            self._set_token(token)
            return True
        except (APIError, InvalidTokenFormat) as err:
            message = _message(err, fallback)
            logger.warning("Authentication failed: %s", message)
            self._fail(message)
            return False
        finally:
            self.is_loading = False

    def _set_token(self, token: str) -> None:
        claims = read_token_claims(token)
        self.token = token
        self.user = {"id": claims.id, "email": claims.email, "username": claims.username}
        self.is_authenticated = True
        self.error = None
        self.api.token = token

    def _fail(self, message: str) -> None:
        self.logout()
        self.error = message


class NoteStore:
    def __init__(self, api: NoteGeekAPI) -> None:
        self.api = api
        self.notes: list[dict] = []
        self.selected_note: dict | None = None
        self.is_loading_list = False
        self.is_loading_selected = False
        self.list_error: str | None = None
        self.selected_error: str | None = None
        self._fetch_seq = 0
        self._lock = threading.Lock()

    def fetch_notes(self, **filters: Any) -> list[dict]:
        self.is_loading_list = True
        self.list_error = None
        try:
            self.notes = self.api.get_notes(**filters)
        except APIError as err:
            self.list_error = _message(err, "Failed to fetch notes")
        finally:
            self.is_loading_list = False
        return self.notes

    def fetch_note_by_id(self, note_id: str) -> dict | None:
        """Load one note into ``selected_note``.

        When fetches overlap, only the most recently started one may commit;
        older responses are dropped instead of overwriting newer state.
        """
        with self._lock:
            self._fetch_seq += 1
            seq = self._fetch_seq
            self.is_loading_selected = True
            self.selected_error = None
            self.selected_note = None

        try:
            note = self.api.get_note(note_id)
        except APIError as err:
            with self._lock:
                if seq == self._fetch_seq:
                    self.selected_error = _message(err, "Failed to fetch note")
                    self.is_loading_selected = False
            return None

        with self._lock:
            if seq != self._fetch_seq:
                logger.debug("Discarding superseded fetch of note %s", note_id)
                return None
            self.selected_note = note
            self.is_loading_selected = False
            if note.get("isLocked") and note.get("message"):
                self.selected_error = note["message"]
        return note

    def clear_selected(self) -> None:
        self.selected_note = None
        self.selected_error = None

    def create_note(self, data: dict) -> dict | None:
        return self._mutate(lambda: self.api.create_note(data), "Failed to create note")

    def update_note(self, note_id: str, data: dict) -> dict | None:
        return self._mutate(lambda: self.api.update_note(note_id, data), "Failed to update note")

    def delete_note(self, note_id: str) -> bool:
        self.is_loading_selected = True
        self.selected_error = None
        try:
            self.api.delete_note(note_id)
        except APIError as err:
            self.selected_error = _message(err, "Failed to delete note")
            return False
        finally:
            self.is_loading_selected = False
        self.selected_note = None
        self.fetch_notes()
        return True

    def _mutate(self, call, fallback: str) -> dict | None:
        self.is_loading_selected = True
        self.selected_error = None
        try:
            self.selected_note = call()
            return self.selected_note
        except APIError as err:
            self.selected_error = _message(err, fallback)
            return None
        finally:
            self.is_loading_selected = False


class TagStore:
    def __init__(self, api: NoteGeekAPI) -> None:
        self.api = api
        self.tags: list[str] = []
        self.is_loading = False
        self.error: str | None = None

    def fetch_tags(self) -> list[str]:
        self.is_loading = True
        self.error = None
        try:
            self.tags = self.api.get_tags()
        except APIError as err:
            self.error = _message(err, "Failed to fetch tags")
        finally:
            self.is_loading = False
        return self.tags

    def add_tag(self, raw: str) -> str:
        """Normalize a typed tag and add it locally; raises ValueError if it is not valid."""
        tag = format_tag(raw)
        if tag not in self.tags:
            self.tags = sorted([*self.tags, tag])
        return tag

    def rename_tag(self, old_tag: str, new_tag: str) -> None:
        self._remote(lambda: self.api.rename_tag(old_tag, new_tag), "Failed to rename tag")
        prefix = f"{old_tag}/"
        self.tags = [
            new_tag if t == old_tag
            else new_tag + t[len(old_tag):] if t.startswith(prefix)
            else t
            for t in self.tags
        ]

    def delete_tag(self, tag: str) -> None:
        self._remote(lambda: self.api.delete_tag(tag), "Failed to delete tag")
        self.tags = [t for t in self.tags if t != tag and not t.startswith(f"{tag}/")]

    def clear(self) -> None:
        self.tags = []
        self.error = None

    def _remote(self, call, fallback: str) -> None:
        self.is_loading = True
        self.error = None
        try:
            call()
        except APIError as err:
            self.error = _message(err, fallback)
            raise
        finally:
            self.is_loading = False


class FolderStore:
    def __init__(self, api: NoteGeekAPI) -> None:
        self.api = api
        self.folders: list[dict] = []
        self.is_loading = False
        self.error: str | None = None

    def fetch_folders(self) -> list[dict]:
        folders = self._call(self.api.get_folders, "Failed to fetch folders")
        if folders is not None:
            self.folders = folders
        return self.folders

    def create_folder(self, name: str) -> dict | None:
        created = self._call(lambda: self.api.create_folder(name), "Failed to create folder")
        if created:
            self.folders = sorted([*self.folders, created], key=lambda f: f["name"])
        return created

    def update_folder(self, folder_id: str, name: str) -> dict | None:
        updated = self._call(lambda: self.api.update_folder(folder_id, name), "Failed to update folder")
        if updated:
            self.folders = [updated if f["id"] == folder_id else f for f in self.folders]
        return updated

    def delete_folder(self, folder_id: str, cascade: bool = False) -> bool:
        result = self._call(lambda: self.api.delete_folder(folder_id, cascade), "Failed to delete folder")
        if result is None:
            return False
        self.folders = [f for f in self.folders if f["id"] != folder_id]
        return True

    def _call(self, call, fallback: str):
        self.is_loading = True
        self.error = None
        try:
            return call()
        except APIError as err:
            self.error = _message(err, fallback)
            return None
        finally:
            self.is_loading = False


class ClientSession:
    """All client state for one user session, sharing a single API wrapper."""

    def __init__(self, api: NoteGeekAPI) -> None:
        self.api = api
        self.auth = AuthStore(api)
        self.notes = NoteStore(api)
        self.tags = TagStore(api)
        self.folders = FolderStore(api)

    def sign_out(self) -> None:
        self.auth.logout()
        self.notes = NoteStore(self.api)
        self.tags.clear()
        self.folders = FolderStore(self.api)

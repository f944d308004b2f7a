from .api import APIError, NoteGeekAPI
from .autosave import DebouncedSaver
from .stores import AuthStore, ClientSession, FolderStore, NoteStore, TagStore

__all__ = [
    "APIError",
    "AuthStore",
    "ClientSession",
    "DebouncedSaver",
    "FolderStore",
    "NoteGeekAPI",
    "NoteStore",
    "TagStore",
]

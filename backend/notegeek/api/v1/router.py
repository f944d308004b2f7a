from __future__ import annotations

from fastapi import APIRouter

from .endpoints import auth, folders, health, notes, search, tags

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(notes.router, prefix="/notes", tags=["notes"])
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])
api_router.include_router(folders.router, prefix="/folders", tags=["folders"])
api_router.include_router(search.router, prefix="/search", tags=["search"])

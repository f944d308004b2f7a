from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from notegeek.config import settings
from notegeek.dependencies import get_db_client
from notegeek.utils.logging import get_logger

if TYPE_CHECKING:
    from supabase import Client

logger = get_logger(__name__)

router = APIRouter()


@router.get("/")
async def health_check():
    """Health check endpoint."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy",
            "service": "notegeek-api",
            "version": "0.1.0"
        }
    )


@router.get("/ready")
async def readiness_check(client: Client = Depends(get_db_client)):
    """Readiness check endpoint."""
    db_status = "connected"
    try:
        await asyncio.to_thread(lambda: client.table("notes").select("id").limit(1).execute())
    except Exception as e:
        logger.warning("Readiness probe failed", extra={"error": str(e)})
        db_status = f"error: {str(e)}"

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "ready",
            "database": db_status,
            "api_prefix": settings.api_prefix
        }
    )

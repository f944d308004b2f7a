from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, status

from notegeek.api.v1.schemas.auth import (
    AuthResponse,
    CredentialsRequest,
    SSOValidateRequest,
    UserRead,
)
from notegeek.dependencies import (
    get_auth_service,
    get_current_user,
    throttled_attempt,
)
from notegeek.utils.logging import get_logger

if TYPE_CHECKING:
    from notegeek.core.schemas.auth import AuthUser
    from notegeek.core.services.auth_service import AuthService

logger = get_logger(__name__)

# Configure router with authentication-specific settings
router = APIRouter(
    responses={
        400: {"description": "Bad request"},
        401: {"description": "Unauthorized"},
        429: {"description": "Too many requests"}
    }
)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    payload: CredentialsRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Register with email and password."""
    with throttled_attempt(request, "register"):
        return await auth_service.register(payload)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: Request,
    payload: CredentialsRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Sign in with email and password."""
    with throttled_attempt(request, "login"):
        return await auth_service.login(payload)


@router.post("/validate-sso", response_model=AuthResponse)
async def validate_sso(
    request: Request,
    payload: SSOValidateRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Accept a GeekBase token and return it back with the local user."""
    with throttled_attempt(request, "sso"):
        return await auth_service.validate_sso(payload.token)


@router.get("/me", response_model=UserRead)
async def me(current_user: AuthUser = Depends(get_current_user)):
    """Return the user the bearer token belongs to."""
    return UserRead(id=current_user.id, email=current_user.email)

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import jwt
from pydantic import ValidationError

from notegeek.api.v1.schemas.auth import AuthResponse
from notegeek.config import settings
from notegeek.core.exceptions import Unauthorized, ValidationFailed
from notegeek.core.models.user import User
from notegeek.core.schemas.auth import AuthUser, TokenClaims
from notegeek.utils.logging import get_logger
from notegeek.utils.security import (
    create_access_token,
    decode_access_token,
    hash_secret,
    unusable_password_hash,
    verify_secret,
)
from notegeek.utils.validation import validate_email_format, validate_password_strength

if TYPE_CHECKING:
    from notegeek.api.v1.schemas.auth import CredentialsRequest
    from notegeek.core.repositories.user_repository import UserRepository


logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
SSO_EMAIL_TAKEN = "An account with this email already exists"


class AuthService:
    """Authentication service handling business logic for auth operations."""

    def __init__(self, users: UserRepository):
        self.users = users

    async def register(self, payload: CredentialsRequest) -> AuthResponse:
        """Create a local account and issue a token for it."""
        email = (payload.email or "").strip().lower()
        password = payload.password or ""

        if not email or not password:
            raise ValidationFailed("Please provide email and password")

        is_valid_password, password_error = validate_password_strength(
            password, settings.min_password_length
        )
        if not is_valid_password:
            raise ValidationFailed(password_error)

        is_valid_email, email_error = validate_email_format(email)
        if not is_valid_email:
            raise ValidationFailed(email_error)

        if await self.users.get_by_email(email):
            logger.warning("Sign up rejected, email already registered", extra={"email": email})
            raise ValidationFailed("User already exists with this email")

        password_hash = await asyncio.to_thread(hash_secret, password)
        user = await self.users.create(User(email=email, password_hash=password_hash))

        logger.info("User signed up successfully", extra={"email": user.email, "user_id": user.id})
        return self._auth_response(user, create_access_token(user.id, user.email))

    async def login(self, payload: CredentialsRequest) -> AuthResponse:
        """Check credentials and issue a token.

        The response never says which of email or password was wrong.
        """
        email = (payload.email or "").strip().lower()
        password = payload.password or ""

        if not email or not password:
            raise ValidationFailed("Please provide email and password")

        user = await self.users.get_by_email(email)
        if not user:
            logger.warning("Sign in failed: unknown email", extra={"email": email})
            raise Unauthorized(INVALID_CREDENTIALS)

        if not await asyncio.to_thread(verify_secret, password, user.password_hash):
            logger.warning("Sign in failed: wrong password", extra={"user_id": user.id})
            raise Unauthorized(INVALID_CREDENTIALS)

        logger.info("User signed in successfully", extra={"email": user.email, "user_id": user.id})
        return self._auth_response(user, create_access_token(user.id, user.email))

    async def authenticate_token(self, token: str) -> AuthUser:
        """Resolve a bearer token to the user it was issued for.

        Both locally issued tokens and adopted GeekBase tokens are accepted, so
        the token may be signed with either secret. Either way it must be
        issued for this app.
        """
        claims = self._decode(token, settings.jwt_secret, settings.effective_sso_secret)
        self._require_app(claims)
        user = await self.users.get(claims.id)
        if not user:
            raise Unauthorized("Not authorized, user not found")
        return AuthUser(id=user.id, email=user.email)

    async def validate_sso(self, token: str | None) -> AuthResponse:
        """Adopt a GeekBase-issued token.

        The local user keyed by the token id is created on first sight. No new
        session is minted; the same token is handed back.
        """
        if not token:
            raise Unauthorized("Not authorized, no token")

        claims = self._decode(token, settings.effective_sso_secret)
        self._require_app(claims)

        user = await self.users.get(claims.id)
        if not user:
            if not claims.email:
                raise Unauthorized("Invalid token")
            if await self.users.get_by_email(claims.email):
                # Accounts are not linked by email; the local owner keeps theirs
                logger.warning("SSO email belongs to a local account", extra={"user_id": claims.id})
                raise Unauthorized(SSO_EMAIL_TAKEN)
            password_hash = await asyncio.to_thread(unusable_password_hash)
            user = await self.users.create(
                User(id=claims.id, email=claims.email, password_hash=password_hash)
            )
            logger.info("Created local user from SSO token", extra={"user_id": user.id})

        return self._auth_response(user, token)

    @staticmethod
    def _require_app(claims: TokenClaims) -> None:
        if claims.app != settings.sso_app_name:
            logger.warning("Token issued for another app", extra={"app": claims.app})
            raise Unauthorized("Not authorized, invalid app")

    @staticmethod
    def _decode(token: str, *secrets: str) -> TokenClaims:
        try:
            raw = _verify_with_any(token, secrets)
        except jwt.ExpiredSignatureError as err:
            raise Unauthorized("Token expired") from err
        except jwt.InvalidTokenError as err:
            logger.warning(
                "JWT validation failed",
                extra={"error_type": type(err).__name__, "jwt_length": len(token)},
            )
            raise Unauthorized("Invalid token") from err

        try:
            return TokenClaims.model_validate(raw)
        except ValidationError as err:
            raise Unauthorized("Invalid token") from err

    @staticmethod
    def _auth_response(user: User, token: str) -> AuthResponse:
        return AuthResponse(id=user.id, email=user.email, created_at=user.created_at, token=token)


def _verify_with_any(token: str, secrets: tuple[str, ...]) -> dict[str, Any]:
    """Verify against each distinct secret in turn.

    Only a signature mismatch moves on to the next secret; expiry and format
    errors are raised at once.
    """
    error: jwt.InvalidSignatureError | None = None
    for secret in dict.fromkeys(secrets):
        try:
            return decode_access_token(token, secret)
        except jwt.InvalidSignatureError as err:
            error = err
    raise error or jwt.InvalidTokenError("No secret to verify with")

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from notegeek.config import settings

JWT_ALGORITHM = "HS256"


def hash_secret(plain: str) -> str:
    """Return a salted bcrypt hash for a password or note lock password."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_secret(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def unusable_password_hash() -> str:
    """Hash of a random secret nobody knows, for accounts created through SSO."""
    return hash_secret(secrets.token_urlsafe(32))


def create_access_token(user_id: str, email: str) -> str:
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "id": user_id,
        "email": email,
        "app": settings.sso_app_name,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expires_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret: str | None = None) -> dict[str, Any]:
    """Verify signature and expiry and return the raw claims.

    Raises ``jwt.ExpiredSignatureError`` or ``jwt.InvalidTokenError``.
    """
    return jwt.decode(
        token,
        secret or settings.jwt_secret,
        algorithms=[JWT_ALGORITHM],
        options={"require": ["exp"]},
    )

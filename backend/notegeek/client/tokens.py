from __future__ import annotations

import jwt
from pydantic import ValidationError

from notegeek.core.schemas.auth import TokenClaims


class InvalidTokenFormat(ValueError):
    pass


def read_token_claims(token: str) -> TokenClaims:
    """Read the claims of a token without verifying its signature.

    Only the server holds the signing secret; the client reads the payload to
    know who is signed in and still validates its shape.
    """
    try:
        raw = jwt.decode(token, options={"verify_signature": False})
    except jwt.DecodeError as err:
        raise InvalidTokenFormat(f"Invalid token format: {err}") from err
    try:
        return TokenClaims.model_validate(raw)
    except ValidationError as err:
        raise InvalidTokenFormat("Invalid token structure") from err

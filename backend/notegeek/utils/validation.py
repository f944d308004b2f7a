from __future__ import annotations

import re

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


def validate_password_strength(password: str, min_length: int) -> tuple[bool, str | None]:
    """Validate password length."""
    if len(password) < min_length:
        return False, f"Password must be at least {min_length} characters long"
    return True, None


def validate_email_format(email: str) -> tuple[bool, str | None]:
    if not EMAIL_PATTERN.fullmatch(email):
        return False, "Please provide a valid email"
    return True, None

"""Input validation helpers for user data."""
from __future__ import annotations
import re
import secrets
import string
from typing import Any, Optional

from dailyhug.core.errors import InvalidInput

EMAIL_MAX_LENGTH = 254
NAME_MAX_LENGTH = 128
PASSWORD_MIN_LENGTH = 6  # Firebase Auth minimum
TEMP_PASSWORD_LENGTH = 12
TEMP_PASSWORD_ALPHABET = string.ascii_letters + string.digits

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def generate_temp_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    """
    Generate a temporary password from a cryptographically secure source.

    Args:
        length: Password length (default: 12)

    Returns:
        Random string drawn from [A-Za-z0-9]
    """
    if length < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Temporary password must be at least {PASSWORD_MIN_LENGTH} characters")
    return "".join(secrets.choice(TEMP_PASSWORD_ALPHABET) for _ in range(length))


def validate_email(email: Any) -> str:
    """Validate email address.

    Args:
        email: Raw value from the request body

    Returns:
        Trimmed email address

    Raises:
        InvalidInput: If email is missing or malformed
    """
    if not isinstance(email, str) or not email.strip():
        raise InvalidInput("Valid email is required")

    email = email.strip()
    if len(email) > EMAIL_MAX_LENGTH:
        raise InvalidInput(f"Email must not exceed {EMAIL_MAX_LENGTH} characters")
    if not EMAIL_PATTERN.match(email):
        raise InvalidInput("Email format is invalid")

    return email


def validate_optional_name(name: Any, field: str) -> str:
    """Validate an optional first/last name; returns "" when absent."""
    if name is None:
        return ""
    if not isinstance(name, str):
        raise InvalidInput(f"{field} must be a string")

    name = name.strip()
    if len(name) > NAME_MAX_LENGTH:
        raise InvalidInput(f"{field} exceeds maximum length")
    if any(char in name for char in "<>"):
        raise InvalidInput(f"{field} contains invalid characters")

    return name


def validate_temp_password(password: Any) -> Optional[str]:
    """Validate a caller-supplied temporary password; returns None when absent."""
    if password is None or password == "":
        return None
    if not isinstance(password, str):
        raise InvalidInput("tempPassword must be a string")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise InvalidInput(f"tempPassword must be at least {PASSWORD_MIN_LENGTH} characters")
    return password


def validate_uid(uid: Any, *, required: bool = True) -> Optional[str]:
    """Validate a Firebase uid field."""
    if uid is None or (isinstance(uid, str) and not uid.strip()):
        if required:
            raise InvalidInput("uid is required")
        return None
    if not isinstance(uid, str):
        raise InvalidInput("uid must be a string")
    return uid.strip()

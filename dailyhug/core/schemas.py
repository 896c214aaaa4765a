"""Typed request bodies for the HTTP endpoints.

Each dataclass validates a raw JSON payload in ``from_json`` so route handlers
hand only typed values to the services.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional

from dailyhug.core.errors import InvalidInput
from dailyhug.core.validators import (
    validate_email,
    validate_optional_name,
    validate_temp_password,
    validate_uid,
)

ACCOUNT_STATUSES = ("Active", "Inactive")
TARGET_TYPES = ("all", "admin", "user")


def _require_object(payload: Any) -> dict:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidInput("Request body must be a JSON object")
    return payload


@dataclass(frozen=True)
class ProvisionRequest:
    """Body of the create-user / grant-admin endpoints."""
    email: str
    first_name: str = ""
    last_name: str = ""
    temp_password: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Any) -> "ProvisionRequest":
        payload = _require_object(payload)
        return cls(
            email=validate_email(payload.get("email")),
            first_name=validate_optional_name(payload.get("firstName"), "firstName"),
            last_name=validate_optional_name(payload.get("lastName"), "lastName"),
            temp_password=validate_temp_password(payload.get("tempPassword")),
        )


@dataclass(frozen=True)
class StatusRequest:
    """Body of the make-active / make-inactive endpoints (uid or email)."""
    uid: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Any) -> "StatusRequest":
        payload = _require_object(payload)
        uid = validate_uid(payload.get("uid"), required=False)
        raw_email = payload.get("email")
        email = None
        if raw_email not in (None, ""):
            email = validate_email(raw_email)
        if not uid and not email:
            raise InvalidInput("Either uid or email is required")
        return cls(uid=uid, email=email)


@dataclass(frozen=True)
class EmailRequest:
    """Body of the triple/double hugger endpoints."""
    email: str

    @classmethod
    def from_json(cls, payload: Any) -> "EmailRequest":
        payload = _require_object(payload)
        return cls(email=validate_email(payload.get("email")))


@dataclass(frozen=True)
class UidRequest:
    """Body of the remove-password-change-requirement endpoint."""
    uid: str

    @classmethod
    def from_json(cls, payload: Any) -> "UidRequest":
        payload = _require_object(payload)
        return cls(uid=validate_uid(payload.get("uid")))


@dataclass(frozen=True)
class NotificationRequest:
    """Body of POST /api/send-notification."""
    title: str
    body: str
    target_type: str = "all"
    target_users: tuple[str, ...] = ()
    icon: Optional[str] = None
    badge: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, payload: Any) -> "NotificationRequest":
        payload = _require_object(payload)

        title = payload.get("title")
        body = payload.get("body")
        if not isinstance(title, str) or not title.strip() or not isinstance(body, str) or not body.strip():
            raise InvalidInput("Title and body are required")

        target_users = payload.get("targetUsers") or []
        if not isinstance(target_users, list) or not all(
            isinstance(uid, str) and uid for uid in target_users
        ):
            raise InvalidInput("targetUsers must be a list of user ids")

        # An explicit recipient list makes targetType irrelevant
        target_type = payload.get("targetType") or "all"
        if not target_users and target_type not in TARGET_TYPES:
            raise InvalidInput(f"targetType must be one of: {', '.join(TARGET_TYPES)}")

        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise InvalidInput("data must be an object")

        for name in ("icon", "badge"):
            value = payload.get(name)
            if value is not None and not isinstance(value, str):
                raise InvalidInput(f"{name} must be a string")

        return cls(
            title=title,
            body=body,
            target_type=target_type,
            target_users=tuple(target_users),
            icon=payload.get("icon") or None,
            badge=payload.get("badge") or None,
            data=data,
        )

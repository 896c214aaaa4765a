"""Firebase Admin SDK gateways.

This package wraps the three managed services the backend brokers for.

Architecture:
- client.py: App bootstrap from service-account settings
- identity.py: Firebase Auth lookups, creation, passwords, claims, token checks
- profiles.py: Firestore user profile documents
- messaging.py: Cloud Messaging sends to single device tokens
- exceptions.py: Typed exceptions and SDK error translation

Usage:
    from dailyhug.core.firebase import FirebaseClient

    client = FirebaseClient.from_config(cfg)
    record = client.identity().find_user_by_email("alice@example.com")
"""
from .client import FirebaseClient
from .exceptions import (
    FirebaseServiceError,
    UserNotFoundError,
    EmailAlreadyExistsError,
    TokenValidationError,
    translate_error,
)
from .identity import IdentityGateway
from .messaging import MessagingGateway, PushPayload, DEFAULT_ICON
from .profiles import ProfileStore, ProfileDocument, SERVER_TIMESTAMP

__all__ = [
    "FirebaseClient",
    "FirebaseServiceError",
    "UserNotFoundError",
    "EmailAlreadyExistsError",
    "TokenValidationError",
    "translate_error",
    "IdentityGateway",
    "MessagingGateway",
    "PushPayload",
    "DEFAULT_ICON",
    "ProfileStore",
    "ProfileDocument",
    "SERVER_TIMESTAMP",
]

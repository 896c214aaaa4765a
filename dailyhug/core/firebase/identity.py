"""Firebase Authentication operations (identity provider)."""
from __future__ import annotations
import logging
from typing import Optional

import firebase_admin
from firebase_admin import auth
from firebase_admin.exceptions import FirebaseError

from .exceptions import TokenValidationError, translate_error

logger = logging.getLogger(__name__)


class IdentityGateway:
    """Service for managing Firebase Auth user records."""

    def __init__(self, app: firebase_admin.App):
        """Initialize identity gateway.

        Args:
            app: Initialized Firebase App
        """
        self.app = app

    def find_user_by_email(self, email: str) -> Optional[auth.UserRecord]:
        """Return the user record registered for the email.

        Args:
            email: Email address to search for

        Returns:
            UserRecord or None if no user has this email
        """
        try:
            return auth.get_user_by_email(email, app=self.app)
        except auth.UserNotFoundError:
            return None
        except FirebaseError as exc:
            raise translate_error(exc, "get_user_by_email") from exc

    def create_user(self, email: str, password: str) -> auth.UserRecord:
        """Create a new email/password identity.

        Raises:
            EmailAlreadyExistsError: If the email is already registered
            FirebaseServiceError: On any other upstream failure
        """
        try:
            record = auth.create_user(email=email, password=password, app=self.app)
        except FirebaseError as exc:
            raise translate_error(exc, "create_user") from exc
        logger.info("Created Firebase user uid=%s", record.uid)
        return record

    def update_user_password(self, uid: str, password: str) -> None:
        try:
            auth.update_user(uid, password=password, app=self.app)
        except FirebaseError as exc:
            raise translate_error(exc, "update_user") from exc
        logger.info("Password rotated for uid=%s", uid)

    def set_claims(self, uid: str, claims: dict) -> None:
        """Replace the user's custom claims (existing claims are not merged)."""
        try:
            auth.set_custom_user_claims(uid, claims, app=self.app)
        except FirebaseError as exc:
            raise translate_error(exc, "set_custom_user_claims") from exc

    def verify_token(self, id_token: str) -> dict:
        """Verify a Firebase ID token and return its decoded claims.

        Raises:
            TokenValidationError: Token malformed, expired, revoked or for a disabled user
            FirebaseServiceError: Public certificates could not be fetched
        """
        try:
            return auth.verify_id_token(id_token, app=self.app)
        except auth.ExpiredIdTokenError:
            raise TokenValidationError("Token expired")
        except auth.InvalidIdTokenError as exc:
            raise TokenValidationError(f"Invalid token: {exc}")
        except auth.UserDisabledError:
            raise TokenValidationError("User account is disabled")
        except ValueError as exc:
            raise TokenValidationError(f"Token decode error: {exc}")
        except FirebaseError as exc:
            raise translate_error(exc, "verify_id_token") from exc

"""Account status transitions and profile flags for existing users."""
from __future__ import annotations
import datetime
import logging
from typing import Optional

from dailyhug.core.errors import InvalidInput, NotFound
from dailyhug.core.firebase import IdentityGateway, ProfileStore
from dailyhug.core.provisioning_service import (
    MUST_CHANGE_PASSWORD_CLAIM,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
)
from dailyhug.core.validators import validate_email, validate_uid

logger = logging.getLogger(__name__)

HUGGER_YES = "Yes"
HUGGER_NO = "No"


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class LifecycleService:
    """Flips accountStatus and other single-field profile flags."""

    def __init__(self, identity: IdentityGateway, profiles: ProfileStore):
        self.identity = identity
        self.profiles = profiles

    def resolve_uid(self, uid: Optional[str] = None, email: Optional[str] = None) -> str:
        """Return ``uid`` as given, or look it up by ``email``.

        Raises:
            InvalidInput: Neither uid nor email supplied
            NotFound: No identity registered for the email
        """
        uid = validate_uid(uid, required=False)
        if uid:
            return uid
        if email is None or email == "":
            raise InvalidInput("Either uid or email is required")

        email = validate_email(email)
        record = self.identity.find_user_by_email(email)
        if record is None:
            raise NotFound(f"No user found with email {email}")
        return record.uid

    def set_status(self, uid: Optional[str] = None, email: Optional[str] = None, *, status: str) -> dict:
        """Set accountStatus to Active or Inactive.

        The merge write touches only accountStatus and updatedAt; a missing
        profile document is created with just those two fields.
        """
        if status not in (STATUS_ACTIVE, STATUS_INACTIVE):
            raise InvalidInput(f"status must be {STATUS_ACTIVE} or {STATUS_INACTIVE}")

        uid = self.resolve_uid(uid, email)
        self.profiles.set(uid, {"accountStatus": status, "updatedAt": _utcnow()}, merge=True)

        logger.info("accountStatus=%s for uid=%s", status, uid)
        return {"uid": uid, "accountStatus": status}

    def set_triple_hugger(self, email: str, enabled: bool) -> dict:
        """Tag the user found by email as a triple hugger ("Yes") or double hugger ("No")."""
        uid = self.resolve_uid(email=email)
        flag = HUGGER_YES if enabled else HUGGER_NO
        self.profiles.set(uid, {"is_triple_hugger": flag, "updatedAt": _utcnow()}, merge=True)

        logger.info("is_triple_hugger=%s for uid=%s", flag, uid)
        return {"uid": uid, "email": email.strip(), "is_triple_hugger": flag}

    def remove_password_change_requirement(self, uid: str) -> dict:
        """Clear the mustChangePassword claim (replaces all custom claims)."""
        uid = validate_uid(uid)
        self.identity.set_claims(uid, {MUST_CHANGE_PASSWORD_CLAIM: False})

        logger.info("mustChangePassword cleared for uid=%s", uid)
        return {"uid": uid, MUST_CHANGE_PASSWORD_CLAIM: False}

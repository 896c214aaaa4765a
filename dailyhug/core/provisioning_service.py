"""
Provisioning Service Layer - create-or-update users

This module guarantees that a Firebase Auth identity and a Firestore profile
exist for an email, with the requested role and provenance. It is used by the
admin API (bearer token), the GoHighLevel integration API (static key) and
the operator CLI.

Architecture:
    /api/grant-admin, /api/create-user ──┐
    /api/ghl/create-*-user ──────────────┼──> provisioning_service.py ──> IdentityGateway ──> Firebase Auth
    scripts/provision.py ────────────────┘                           └──> ProfileStore ───> Firestore

Features:
    - Lookup-or-create identity; no duplicate identities per email
    - Temporary password generation or caller-supplied rotation
    - mustChangePassword claim on every provisioning call
    - Profile merge write with provenance (creationEndpoint, createdBy)

The identity write and the profile write are sequential and not atomic: if the
profile write fails, the identity created or updated before it is left as is.
"""

from __future__ import annotations
import datetime
import logging
from dataclasses import dataclass
from typing import Any, Optional

from dailyhug.core.errors import Conflict, InvalidInput
from dailyhug.core.firebase import (
    EmailAlreadyExistsError,
    IdentityGateway,
    ProfileStore,
    SERVER_TIMESTAMP,
)
from dailyhug.core.validators import (
    generate_temp_password,
    validate_email,
    validate_optional_name,
    validate_temp_password,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Profile vocabulary
# ─────────────────────────────────────────────────────────────────────────────

ROLE_ADMIN = "admin"
ROLE_USER = "user"
ROLES = (ROLE_ADMIN, ROLE_USER)

ACCOUNT_PREMIUM = "Premium"
ACCOUNT_TRIAL = "Trial"
ACCOUNT_ADMIN_CREATED = "Admin-Created"
ACCOUNT_TYPES = (ACCOUNT_PREMIUM, ACCOUNT_TRIAL, ACCOUNT_ADMIN_CREATED)

STATUS_ACTIVE = "Active"
STATUS_INACTIVE = "Inactive"

PROVENANCE_GRANT_ADMIN = "grant_admin"
PROVENANCE_CREATE_USER = "create_user"
PROVENANCE_GHL_CREATE_USER = "ghl_create_user"
PROVENANCE_GHL_CREATE_TRIAL_USER = "ghl_create_trial_user"
PROVENANCE_TAGS = (
    PROVENANCE_GRANT_ADMIN,
    PROVENANCE_CREATE_USER,
    PROVENANCE_GHL_CREATE_USER,
    PROVENANCE_GHL_CREATE_TRIAL_USER,
)

MUST_CHANGE_PASSWORD_CLAIM = "mustChangePassword"


@dataclass(frozen=True)
class ProvisionResult:
    """Outcome of a provisioning call.

    ``temp_password`` is only set when a password was generated or rotated in
    this call; ``created`` tells whether the identity was created.
    """
    uid: str
    email: str
    temp_password: Optional[str] = None
    created: bool = False

    def to_dict(self) -> dict:
        body = {"uid": self.uid, "email": self.email}
        if self.temp_password:
            body["tempPassword"] = self.temp_password
        return body


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def compose_display_name(first_name: str, last_name: str, fallback: Optional[str] = None) -> str:
    """Join first and last name, falling back to an existing display name."""
    return f"{first_name or ''} {last_name or ''}".strip() or (fallback or "").strip()


class ProvisioningService:
    """Create-or-update workflow over the identity provider and profile store."""

    def __init__(self, identity: IdentityGateway, profiles: ProfileStore):
        self.identity = identity
        self.profiles = profiles

    def provision(
        self,
        email: Any,
        first_name: Any = None,
        last_name: Any = None,
        temp_password: Any = None,
        *,
        role: str,
        account_type: str,
        provenance: str,
        actor: str,
        allow_existing: bool,
    ) -> ProvisionResult:
        """Ensure an identity and a profile exist for ``email``.

        Args:
            email: Email of the user to provision
            first_name: Optional first name (omitted from the profile when empty)
            last_name: Optional last name (omitted from the profile when empty)
            temp_password: Optional password; rotates the password of an existing identity
            role: Profile userType ("admin" or "user")
            account_type: Profile accountType
            provenance: Profile creationEndpoint tag
            actor: Profile createdBy label
            allow_existing: When False an already registered email is a Conflict

        Returns:
            ProvisionResult with uid, email and the generated or rotated password

        Raises:
            InvalidInput: Malformed email, names or password
            Conflict: Email already registered and allow_existing is False
            FirebaseServiceError: Upstream failure (no rollback of earlier writes)
        """
        email = validate_email(email)
        first_name = validate_optional_name(first_name, "firstName")
        last_name = validate_optional_name(last_name, "lastName")
        temp_password = validate_temp_password(temp_password)
        if role not in ROLES:
            raise InvalidInput(f"role must be one of: {', '.join(ROLES)}")
        if account_type not in ACCOUNT_TYPES:
            raise InvalidInput(f"accountType must be one of: {', '.join(ACCOUNT_TYPES)}")
        if provenance not in PROVENANCE_TAGS:
            raise InvalidInput(f"Unknown provenance tag '{provenance}'")

        record = self.identity.find_user_by_email(email)
        created = False
        effective_password: Optional[str] = None

        if record is not None and not allow_existing:
            logger.info("Provisioning rejected: %s already registered (uid=%s)", email, record.uid)
            raise Conflict("User with this email already exists", extra={"uid": record.uid})

        if record is None:
            effective_password = temp_password or generate_temp_password()
            try:
                record = self.identity.create_user(email, effective_password)
                created = True
            except EmailAlreadyExistsError:
                # Registered by a concurrent request between lookup and create
                record = self.identity.find_user_by_email(email)
                if record is None or not allow_existing:
                    extra = {"uid": record.uid} if record is not None else None
                    raise Conflict("User with this email already exists", extra=extra)
                logger.info("Lost create race for %s; updating uid=%s", email, record.uid)
                effective_password = None

        if not created and temp_password:
            self.identity.update_user_password(record.uid, temp_password)
            effective_password = temp_password

        uid = record.uid
        self.identity.set_claims(uid, {MUST_CHANGE_PASSWORD_CLAIM: True})

        now = _utcnow()
        fields: dict[str, Any] = {
            "uid": uid,
            "email": email,
            "userType": role,
            "accountType": account_type,
            "creationEndpoint": provenance,
            "createdBy": actor,
            "accountStatus": STATUS_ACTIVE,
            "updatedAt": now,
        }
        if first_name:
            fields["firstName"] = first_name
        if last_name:
            fields["lastName"] = last_name
        display_name = compose_display_name(first_name, last_name, getattr(record, "display_name", None))
        if display_name:
            fields["displayName"] = display_name
        if effective_password:
            fields["tempPassword"] = effective_password
            fields["passwordGeneratedAt"] = now
        if created:
            fields["createdAt"] = SERVER_TIMESTAMP

        self.profiles.set(uid, fields, merge=True)

        logger.info(
            "Provisioned uid=%s role=%s endpoint=%s created=%s by=%s",
            uid, role, provenance, created, actor,
        )
        return ProvisionResult(uid=uid, email=email, temp_password=effective_password, created=created)

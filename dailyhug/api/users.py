"""User management endpoints for the admin dashboard and the client app.

Provisioning and status routes require a Firebase ID token of an admin
(@require_admin_token); the listing, hugger-flag and password-claim routes
are open, as the client app calls them directly.
"""

from __future__ import annotations
import datetime
import logging

from flask import Blueprint, jsonify, request

from dailyhug.api.decorators import get_actor, get_services, require_admin_token
from dailyhug.core.provisioning_service import (
    ACCOUNT_ADMIN_CREATED,
    PROVENANCE_CREATE_USER,
    PROVENANCE_GRANT_ADMIN,
    ROLE_ADMIN,
    ROLE_USER,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
)
from dailyhug.core.schemas import EmailRequest, ProvisionRequest, StatusRequest, UidRequest

bp = Blueprint("users", __name__, url_prefix="/api")

logger = logging.getLogger(__name__)

# Never returned by the listing endpoint
PRIVATE_PROFILE_FIELDS = ("tempPassword", "fcmToken")


def _json_body():
    return request.get_json(silent=True)


def _serialize_value(value):
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    return value


def serialize_profile(uid: str, data: dict) -> dict:
    """Profile document as returned by GET /api/users."""
    user = {
        key: _serialize_value(value)
        for key, value in data.items()
        if key not in PRIVATE_PROFILE_FIELDS
    }
    user["id"] = uid
    user["notificationsEnabled"] = bool(data.get("fcmToken"))
    return user


def provisioning_response(result, message: str):
    body = {"success": True, **result.to_dict(), "message": message}
    return jsonify(body), 200


def status_response(result: dict):
    status = result["accountStatus"]
    return jsonify({
        "success": True,
        **result,
        "message": f"User marked as {status.lower()}",
    }), 200


def hugger_response(result: dict):
    kind = "triple" if result["is_triple_hugger"] == "Yes" else "double"
    return jsonify({"success": True, **result, "message": f"User marked as {kind} hugger"}), 200


# ─────────────────────────────────────────────────────────────────────────────
# Open endpoints
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("/users", methods=["GET"])
def list_users():
    """List every user profile."""
    documents = get_services().profiles.list_all()
    users = [serialize_profile(doc.uid, doc.data) for doc in documents]
    return jsonify({"success": True, "users": users, "total": len(users)}), 200


@bp.route("/make-triple-hugger", methods=["POST"])
def make_triple_hugger():
    body = EmailRequest.from_json(_json_body())
    return hugger_response(get_services().lifecycle.set_triple_hugger(body.email, True))


@bp.route("/make-double-hugger", methods=["POST"])
def make_double_hugger():
    body = EmailRequest.from_json(_json_body())
    return hugger_response(get_services().lifecycle.set_triple_hugger(body.email, False))


@bp.route("/remove-password-change-requirement", methods=["POST"])
def remove_password_change_requirement():
    """Called by the client app once the user has chosen a new password."""
    body = UidRequest.from_json(_json_body())
    result = get_services().lifecycle.remove_password_change_requirement(body.uid)
    return jsonify({"success": True, **result, "message": "Password change requirement removed"}), 200


# ─────────────────────────────────────────────────────────────────────────────
# Admin endpoints (Bearer token + userType admin)
# ─────────────────────────────────────────────────────────────────────────────

@bp.route("/grant-admin", methods=["POST"])
@require_admin_token
def grant_admin():
    """Grant the admin role by email, creating the user if needed."""
    body = ProvisionRequest.from_json(_json_body())
    result = get_services().provisioning.provision(
        body.email,
        body.first_name,
        body.last_name,
        body.temp_password,
        role=ROLE_ADMIN,
        account_type=ACCOUNT_ADMIN_CREATED,
        provenance=PROVENANCE_GRANT_ADMIN,
        actor=get_actor(),
        allow_existing=True,
    )
    return provisioning_response(result, "Admin role granted with temporary password set")


@bp.route("/create-user", methods=["POST"])
@require_admin_token
def create_user():
    """Create (or update) a regular user from the admin dashboard."""
    body = ProvisionRequest.from_json(_json_body())
    result = get_services().provisioning.provision(
        body.email,
        body.first_name,
        body.last_name,
        body.temp_password,
        role=ROLE_USER,
        account_type=ACCOUNT_ADMIN_CREATED,
        provenance=PROVENANCE_CREATE_USER,
        actor=get_actor(),
        allow_existing=True,
    )
    return provisioning_response(result, "User created successfully")


@bp.route("/make-inactive", methods=["POST"])
@require_admin_token
def make_inactive():
    body = StatusRequest.from_json(_json_body())
    return status_response(get_services().lifecycle.set_status(body.uid, body.email, status=STATUS_INACTIVE))


@bp.route("/make-active", methods=["POST"])
@require_admin_token
def make_active():
    body = StatusRequest.from_json(_json_body())
    return status_response(get_services().lifecycle.set_status(body.uid, body.email, status=STATUS_ACTIVE))

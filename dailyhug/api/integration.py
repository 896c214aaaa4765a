"""GoHighLevel integration endpoints.

Same operations as the admin API, authenticated with the static integration
key instead of a user token. Creation here never touches an existing
account: a known email is answered with 409 and the existing uid.
"""

from __future__ import annotations

from flask import Blueprint

from dailyhug.api.decorators import get_actor, get_services, require_integration_key
from dailyhug.api.users import _json_body, hugger_response, provisioning_response, status_response
from dailyhug.core.provisioning_service import (
    ACCOUNT_PREMIUM,
    ACCOUNT_TRIAL,
    PROVENANCE_GHL_CREATE_TRIAL_USER,
    PROVENANCE_GHL_CREATE_USER,
    ROLE_USER,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
)
from dailyhug.core.schemas import EmailRequest, ProvisionRequest, StatusRequest

bp = Blueprint("integration", __name__, url_prefix="/api/ghl")


def _create(account_type: str, provenance: str, message: str):
    body = ProvisionRequest.from_json(_json_body())
    result = get_services().provisioning.provision(
        body.email,
        body.first_name,
        body.last_name,
        body.temp_password,
        role=ROLE_USER,
        account_type=account_type,
        provenance=provenance,
        actor=get_actor(),
        allow_existing=False,
    )
    return provisioning_response(result, message)


@bp.route("/create-user", methods=["POST"])
@require_integration_key
def create_user():
    """Create a Premium user from a GoHighLevel purchase."""
    return _create(ACCOUNT_PREMIUM, PROVENANCE_GHL_CREATE_USER, "Premium user created successfully")


@bp.route("/create-trial-user", methods=["POST"])
@require_integration_key
def create_trial_user():
    """Create a Trial user from a GoHighLevel opt-in."""
    return _create(ACCOUNT_TRIAL, PROVENANCE_GHL_CREATE_TRIAL_USER, "Trial user created successfully")


@bp.route("/make-inactive", methods=["POST"])
@require_integration_key
def make_inactive():
    body = StatusRequest.from_json(_json_body())
    return status_response(get_services().lifecycle.set_status(body.uid, body.email, status=STATUS_INACTIVE))


@bp.route("/make-active", methods=["POST"])
@require_integration_key
def make_active():
    body = StatusRequest.from_json(_json_body())
    return status_response(get_services().lifecycle.set_status(body.uid, body.email, status=STATUS_ACTIVE))


@bp.route("/make-triple-hugger", methods=["POST"])
@require_integration_key
def make_triple_hugger():
    body = EmailRequest.from_json(_json_body())
    return hugger_response(get_services().lifecycle.set_triple_hugger(body.email, True))


@bp.route("/make-double-hugger", methods=["POST"])
@require_integration_key
def make_double_hugger():
    body = EmailRequest.from_json(_json_body())
    return hugger_response(get_services().lifecycle.set_triple_hugger(body.email, False))

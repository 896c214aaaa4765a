"""
Flask decorators for authentication and authorization.

Two independent guards, chosen per route:

- require_admin_token: Firebase ID token in "Authorization: Bearer <token>",
  verified by Firebase Auth, and a caller profile with userType "admin".
- require_integration_key: shared secret in a dedicated header, used by the
  GoHighLevel integration.

Both are stateless: nothing is kept between requests.
"""

import hashlib
import hmac
import logging
from functools import wraps
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError
from flask import request, current_app, g

from dailyhug.core.errors import ConfigurationError, Forbidden, Unauthorized
from dailyhug.core.firebase import TokenValidationError

logger = logging.getLogger(__name__)

INTEGRATION_ACTOR = "GHL Integration"
FALLBACK_ADMIN_NAME = "Admin"


def get_services():
    """Services container built by create_app()."""
    return current_app.extensions["dailyhug"]


# ============================================================================
# Bearer Token + Admin Role
# ============================================================================

def extract_bearer_token() -> str:
    """
    Return the token from "Authorization: Bearer <token>".

    The token must at least be a structurally valid JWT; signature and expiry
    are checked by Firebase Auth afterwards.

    Raises:
        Unauthorized: Header missing, not Bearer, empty, or not a JWT
    """
    auth_header = request.headers.get("Authorization", "")

    if not auth_header:
        raise Unauthorized("Authorization header required. Use 'Authorization: Bearer <token>'")

    if not auth_header.startswith("Bearer "):
        logger.warning(f"Request with invalid Authorization format: {auth_header[:20]}")
        raise Unauthorized("Invalid Authorization header format. Expected 'Bearer <token>'")

    token = auth_header[7:].strip()
    if not token:
        raise Unauthorized("Bearer token is empty")

    try:
        jwt.get_unverified_header(token)
    except InvalidTokenError as e:
        raise Unauthorized(f"Malformed bearer token: {e}")

    return token


def resolve_admin_name(profile: dict, claims: dict) -> str:
    """
    Display name recorded as createdBy for admin-initiated provisioning.

    Order: profile displayName, profile first + last name, token name,
    token email, then "Admin".
    """
    display_name = (profile.get("displayName") or "").strip()
    if display_name:
        return display_name

    full_name = f"{profile.get('firstName') or ''} {profile.get('lastName') or ''}".strip()
    if full_name:
        return full_name

    return claims.get("name") or claims.get("email") or FALLBACK_ADMIN_NAME


def require_admin_token(fn):
    """
    Decorator to require a Firebase ID token belonging to an admin profile.

    Raises:
        401 Unauthorized: Missing, malformed, invalid or expired token
        403 Forbidden: No profile for the caller, or userType is not "admin"

    Example:
        @bp.route("/api/grant-admin", methods=["POST"])
        @require_admin_token
        def grant_admin():
            actor = get_actor()
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = extract_bearer_token()
        services = get_services()

        try:
            claims = services.identity.verify_token(token)
        except TokenValidationError as e:
            logger.warning(f"Bearer token rejected: {e}")
            raise Unauthorized(str(e))

        uid = claims.get("uid") or claims.get("sub")
        profile = services.profiles.get(uid) if uid else None
        if not profile:
            logger.warning(f"Admin route called by uid={uid} without a profile")
            raise Forbidden("User profile not found")

        if profile.get("userType") != "admin":
            logger.warning(f"Admin route called by non-admin uid={uid}")
            raise Forbidden("Admin access required")

        g.actor = resolve_admin_name(profile, claims)

        return fn(*args, **kwargs)

    return wrapper


# ============================================================================
# Static Integration Key
# ============================================================================

def _log_key_attempt(provided_key: str, success: bool) -> None:
    """Log an integration key check without leaking the key (SHA256 prefix only)."""
    key_hash = hashlib.sha256(provided_key.encode()).hexdigest()[:12]
    client_ip = request.headers.get("X-Forwarded-For", request.remote_addr)
    status = "✅ SUCCESS" if success else "❌ FAILED"
    logger.info(f"{status} integration key | key_hash={key_hash} | path={request.path} | client_ip={client_ip}")


def require_integration_key(fn):
    """
    Decorator to require the shared integration key.

    Raises:
        401 Unauthorized: Header missing
        500 ConfigurationError: Server-side key not configured
        403 Forbidden: Key does not match
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        cfg = current_app.config["APP_CONFIG"]
        provided_key = request.headers.get(cfg.integration_key_header, "").strip()

        if not provided_key:
            raise Unauthorized(f"{cfg.integration_key_header} header required")

        if not cfg.integration_key_configured:
            logger.error("Integration route called but GHL_API_KEY is not configured")
            raise ConfigurationError("Integration API key is not configured on the server")

        # Constant-time comparison (timing-attack safe)
        if not hmac.compare_digest(provided_key.encode(), cfg.integration_api_key.encode()):
            _log_key_attempt(provided_key, success=False)
            raise Forbidden("Invalid API key")

        _log_key_attempt(provided_key, success=True)
        g.actor = INTEGRATION_ACTOR

        return fn(*args, **kwargs)

    return wrapper


def get_actor() -> Optional[str]:
    """Actor label set by whichever guard protected the current request."""
    return getattr(g, "actor", None)

"""Error taxonomy shared by the services and the HTTP layer.

Every error raised by the core carries the HTTP status it maps to, so route
handlers never translate exceptions themselves:

    InvalidInput        400
    Unauthorized        401
    Forbidden           403
    NotFound            404
    Conflict            409
    ConfigurationError  500
"""
from __future__ import annotations
from typing import Any, Optional


class ApiError(Exception):
    """Request-level error with HTTP status and a machine-readable code."""

    status = 500
    code = "internal_error"

    def __init__(self, detail: str, *, extra: Optional[dict[str, Any]] = None):
        self.detail = detail
        self.extra = extra or {}
        super().__init__(detail)

    def to_dict(self) -> dict:
        """Convert to the JSON error body returned to clients."""
        body = {"success": False, "error": self.detail, "code": self.code}
        body.update(self.extra)
        return body


class InvalidInput(ApiError):
    status = 400
    code = "invalid_input"


class Unauthorized(ApiError):
    status = 401
    code = "unauthorized"


class Forbidden(ApiError):
    status = 403
    code = "forbidden"


class NotFound(ApiError):
    status = 404
    code = "not_found"


class Conflict(ApiError):
    status = 409
    code = "conflict"


class ConfigurationError(ApiError):
    status = 500
    code = "configuration_error"

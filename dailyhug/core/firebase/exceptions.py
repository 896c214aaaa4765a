"""Firebase-specific exceptions for error handling."""
from __future__ import annotations

from firebase_admin import auth
from firebase_admin.exceptions import FirebaseError
from google.api_core.exceptions import GoogleAPICallError

# Upstream codes that map onto a client-facing status; everything else is a 500.
_STATUS_BY_CODE = {
    "INVALID_ARGUMENT": 400,
    "NOT_FOUND": 404,
    "ALREADY_EXISTS": 409,
}
_PASSTHROUGH_HTTP_STATUSES = {400, 404, 409}


class FirebaseServiceError(Exception):
    """Error returned by Firebase Auth, Firestore or Cloud Messaging.

    Attributes:
        status_code: HTTP status the error maps to
        message: Error message from the upstream service
        operation: Gateway operation that failed
    """

    def __init__(self, status_code: int, message: str, operation: str):
        self.status_code = status_code
        self.message = message
        self.operation = operation
        super().__init__(f"[{status_code}] {operation}: {message}")


class UserNotFoundError(FirebaseServiceError):
    """Identity lookup by uid failed - no such user."""


class EmailAlreadyExistsError(FirebaseServiceError):
    """Identity creation failed - email already registered."""


class TokenValidationError(Exception):
    """Raised when a Firebase ID token fails verification."""


def translate_error(exc: Exception, operation: str) -> FirebaseServiceError:
    """Map an SDK exception onto FirebaseServiceError with the closest HTTP status."""
    message = str(exc) or exc.__class__.__name__

    if isinstance(exc, auth.UserNotFoundError):
        return UserNotFoundError(404, message, operation)
    if isinstance(exc, auth.EmailAlreadyExistsError):
        return EmailAlreadyExistsError(409, message, operation)
    if isinstance(exc, FirebaseError):
        return FirebaseServiceError(_STATUS_BY_CODE.get(exc.code, 500), message, operation)
    if isinstance(exc, GoogleAPICallError):
        status = exc.code if exc.code in _PASSTHROUGH_HTTP_STATUSES else 500
        return FirebaseServiceError(status, message, operation)
    return FirebaseServiceError(500, message, operation)

"""
Error taxonomy for the API.

Every failure the authorization layer or the services can raise is a
``NotesError``. The HTTP handler in ``main.py`` renders them as
``{"error": <message>, "code": <code>}`` with the class's status code, so
routes never build error responses by hand.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class RejectionReason(str, Enum):
    """Machine-readable reason codes returned to clients."""

    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    TENANT_MISMATCH = "TENANT_MISMATCH"
    INSUFFICIENT_ROLE = "INSUFFICIENT_ROLE"
    QUOTA_EXCEEDED = "NOTE_LIMIT_EXCEEDED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"


class NotesError(Exception):
    status_code: int = 500
    code: RejectionReason = RejectionReason.UPSTREAM_UNAVAILABLE
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, stage: Any = None):
        self.message = message or self.message
        # last pipeline stage reached before the rejection (None outside the pipeline)
        self.stage = stage
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code.value}


# -----------------------------
# 401: unauthenticated
# -----------------------------

class Unauthenticated(NotesError):
    """Base for failures that must look the same to the caller."""

    status_code = 401
    code = RejectionReason.UNAUTHORIZED
    message = "Invalid token"

    @property
    def headers(self) -> dict[str, str] | None:
        return {"WWW-Authenticate": "Bearer"}


class MissingCredential(Unauthenticated):
    message = "No token provided"


class InvalidCredential(Unauthenticated):
    pass


class UserNotFound(Unauthenticated):
    # same external message as InvalidCredential: "token ok, user gone" is not disclosed
    pass


class InvalidCredentials(NotesError):
    """Login failure. Unknown email and wrong password are indistinguishable."""

    status_code = 401
    code = RejectionReason.INVALID_CREDENTIALS
    message = "Invalid credentials"


# -----------------------------
# 403: authenticated but not allowed
# -----------------------------

class Forbidden(NotesError):
    status_code = 403


class TenantMismatch(Forbidden):
    code = RejectionReason.TENANT_MISMATCH
    message = "Access denied to this tenant"


class InsufficientRole(Forbidden):
    code = RejectionReason.INSUFFICIENT_ROLE
    message = "Insufficient permissions"


class QuotaExceeded(Forbidden):
    code = RejectionReason.QUOTA_EXCEEDED
    message = "Free plan allows maximum 3 notes. Upgrade to Pro for unlimited notes."


# -----------------------------
# resource / input errors
# -----------------------------

class NotFound(NotesError):
    status_code = 404
    code = RejectionReason.NOT_FOUND
    message = "Not found"


class ValidationError(NotesError):
    status_code = 400
    code = RejectionReason.VALIDATION_ERROR
    message = "Invalid input"


class InvalidTransition(NotesError):
    status_code = 409
    code = RejectionReason.INVALID_TRANSITION
    message = "Subscription plan cannot move to the requested state"


# -----------------------------
# 503: store failed, safe to retry
# -----------------------------

class UpstreamUnavailable(NotesError):
    status_code = 503
    code = RejectionReason.UPSTREAM_UNAVAILABLE
    message = "Database unavailable"

    @property
    def headers(self) -> dict[str, str] | None:
        return {"Retry-After": "1"}


REJECTIONS: dict[RejectionReason, type[NotesError]] = {
    RejectionReason.TENANT_MISMATCH: TenantMismatch,
    RejectionReason.INSUFFICIENT_ROLE: InsufficientRole,
    RejectionReason.QUOTA_EXCEEDED: QuotaExceeded,
}

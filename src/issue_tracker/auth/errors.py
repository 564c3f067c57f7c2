"""
issue_tracker.auth.errors

Failure conditions raised by the auth core.

Responsibilities:
- Define the distinguishable condition kinds a transport maps to user-facing errors.
- Carry a stable machine-readable `code` alongside the human message.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for identity, credential and authorization failures."""

    code = "AUTH_ERROR"
    default_message = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequired(AuthError):
    code = "AUTHENTICATION_REQUIRED"
    default_message = "Authentication required"


class InvalidToken(AuthError):
    code = "INVALID_TOKEN"
    default_message = "Invalid or expired token"


class UnknownOrInactiveSubject(AuthError):
    # Raised when a cryptographically valid token points at a deleted or deactivated user.
    code = "UNKNOWN_OR_INACTIVE_SUBJECT"
    default_message = "User not found or inactive"


class AccountInactive(AuthError):
    code = "ACCOUNT_INACTIVE"
    default_message = "Account is inactive"


class InvalidCredentials(AuthError):
    # Same message for unknown username and wrong password.
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class Forbidden(AuthError):
    code = "FORBIDDEN"
    default_message = "No permission for this action"


class SigningSecretMissing(RuntimeError):
    """
    Process-level misconfiguration: no token signing secret is configured.

    Deliberately not an `AuthError`; transports must not turn it into a 401.
    """

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message or "JWT signing secret is not configured (set TRACKER_JWT_SECRET)"
        )


# --- Module Notes -----------------------------------------------------------
# `api.errors` owns the mapping from these classes to HTTP status codes.

"""
auth/errors.py -- Typed outcomes for every authentication failure.

Every failure the core can report is a subclass of AuthGatewayError and
carries a stable machine-readable `code`. The API layer maps classes to
HTTP status codes in one place (api/main.py) and uses `code` in the error
envelope, so clients never have to parse messages.

Enumeration resistance: InvalidCredentials has a single fixed message. It
is raised for both "unknown identity" and "wrong password" and must never
be constructed with a cause-specific message.
"""

from __future__ import annotations


class AuthGatewayError(Exception):
    """Base class for all typed authentication outcomes."""

    code: str = "auth_error"
    message: str = "Authentication error."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class InvalidInput(AuthGatewayError):
    code = "invalid_input"
    message = "Invalid input."


class WeakPassword(InvalidInput):
    code = "weak_password"
    message = "Password is too short."


class PasswordTooLong(InvalidInput):
    code = "password_too_long"
    message = "Password exceeds 72 bytes."


class InvalidIdentity(InvalidInput):
    code = "invalid_identity"
    message = "Username must be between 1 and 255 characters."


# ---------------------------------------------------------------------------
# Conflict / authentication
# ---------------------------------------------------------------------------


class DuplicateIdentity(AuthGatewayError):
    code = "duplicate_identity"
    message = "An account with that username already exists."


class InvalidCredentials(AuthGatewayError):
    code = "invalid_credentials"
    message = "Invalid username or password."

    def __init__(self) -> None:
        super().__init__()


class AccountBlocked(AuthGatewayError):
    code = "account_blocked"
    message = "Account blocked."


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class SessionError(AuthGatewayError):
    code = "session_error"
    message = "Please log in again."


class MissingSession(SessionError):
    code = "session_missing"


class ExpiredSession(SessionError):
    code = "session_expired"


# ---------------------------------------------------------------------------
# Internal
# ---------------------------------------------------------------------------


class AccountNotFound(AuthGatewayError):
    code = "account_not_found"
    message = "Account not found."


class CorruptHash(AuthGatewayError):
    code = "corrupt_hash"
    message = "Stored password hash is malformed."

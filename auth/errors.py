"""
auth/errors.py -- Error taxonomy for the account service.

Every error carries the HTTP status it maps to. The exception handler in
api/main.py turns any DoormanError into a JSON body {"error": message}.

Layer rule: no imports from api/ or web/.
"""

from __future__ import annotations


class DoormanError(Exception):
    """Base class for errors that are reported to the client."""

    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DoormanError):
    """A required field is missing or a field is malformed."""

    status_code = 400
    default_message = "Invalid request"


class ConflictError(DoormanError):
    """An account with this email already exists."""

    status_code = 409
    default_message = "An account with this email already exists"


class AuthenticationError(DoormanError):
    """Bad credentials. Unknown email and wrong password share this error."""

    status_code = 401
    default_message = "Invalid email or password"


class AuthorizationError(DoormanError):
    """The session points at a user that no longer exists."""

    status_code = 401
    default_message = "User not found"


class RateLimitError(DoormanError):
    status_code = 429
    default_message = "Too many attempts, please try again later"

"""Exceptions for tokenauth.

Every error a handler can raise belongs to this small closed set. The error
handlers in main.py turn each kind into a response envelope, so nothing
outside this hierarchy ever reaches a client verbatim.
"""


class TokenAuthError(Exception):
    """Base exception for all application errors."""

    status_code = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(TokenAuthError):
    """Request data failed validation.

    ``details`` maps each field name to a list of messages.
    """

    status_code = 400


class AuthenticationError(TokenAuthError):
    """Credentials or bearer token were missing or not accepted."""

    status_code = 401


class DatabaseError(TokenAuthError):
    """The credential store could not be reached."""

    status_code = 500

"""Credential store service: password hashing, user creation and lookup.

Passwords are hashed with bcrypt using settings.bcrypt_work_factor. Only the
hash is stored; UserResponse never carries it.
"""

import logging
import sqlite3

import bcrypt

from ..config import settings
from ..db import Core
from ..exceptions import ValidationError
from .schemas import RegisterRequest, UserResponse

logger = logging.getLogger(__name__)

# bcrypt only uses the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72

_dummy_hash: str | None = None


# ============================================================================
# Password Hashing
# ============================================================================


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a plain text password with bcrypt.

    Returns:
        60 character bcrypt hash string
    """
    salt = bcrypt.gensalt(rounds=settings.bcrypt_work_factor)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain text password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False


def _get_dummy_hash() -> str:
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("dummy-password-for-timing")
    return _dummy_hash


# ============================================================================
# Users
# ============================================================================


def create_user(core: Core, data: RegisterRequest) -> UserResponse:
    """
    Create a user with a hashed password.

    Args:
        core: Database Core (use an atomic Core so the caller controls commit)
        data: Validated registration data

    Returns:
        The created user

    Raises:
        ValidationError: If the email was registered concurrently after
            validation passed
    """
    try:
        user_id = core.user.create(data.name, data.email, hash_password(data.password))
    except sqlite3.IntegrityError:
        logger.warning(f"Registration lost race on existing email: {data.email}")
        raise ValidationError(
            "validation error",
            {"email": ["The email has already been taken."]}
        )

    return UserResponse.from_row(core.user.get_by_id(user_id))


def get_user_by_id(core: Core, user_id: int) -> UserResponse | None:
    row = core.user.get_by_id(user_id)
    return UserResponse.from_row(row) if row else None


def verify_credentials(core: Core, email: str, password: str) -> UserResponse | None:
    """
    Match an email and password against the store.

    An unknown email still costs one bcrypt check so the response time does
    not reveal whether the account exists.

    Returns:
        The user on success, None on unknown email or wrong password
    """
    row = core.user.get_by_email(email)
    if row is None:
        verify_password(password, _get_dummy_hash())
        return None

    if not verify_password(password, row["password_hash"]):
        return None

    return UserResponse.from_row(row)

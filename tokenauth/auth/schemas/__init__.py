"""Authentication Pydantic schemas for API validation."""

from .auth import (
    CredentialsBase,
    Identity,
    LoginRequest,
    RegisterRequest,
    TokenPayload,
    UserResponse,
)

__all__ = [
    "CredentialsBase",
    "Identity",
    "LoginRequest",
    "RegisterRequest",
    "TokenPayload",
    "UserResponse",
]

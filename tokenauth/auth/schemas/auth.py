"""Pydantic schemas for authentication requests, users and tokens.

Request schemas carry the validation rules for each endpoint. Rule failures
use custom error types ("required", "unique", "utf8") which
api.validation.format_errors turns into per-field messages.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError


def _required(value: Any, strip: bool = True) -> Any:
    """Reject None and empty (or whitespace-only, when strip) strings."""
    if value is None:
        raise PydanticCustomError("required", "Field required")
    if isinstance(value, str) and not (value.strip() if strip else value):
        raise PydanticCustomError("required", "Field required")
    return value


def _encodable(value: Any) -> Any:
    """Reject strings that cannot be encoded as UTF-8 (lone surrogates)."""
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            raise PydanticCustomError("utf8", "String is not valid UTF-8")
    return value


# ============================================================================
# Request Schemas
# ============================================================================


class CredentialsBase(BaseModel):
    """Email and password, shared by login and registration."""

    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., description="Plain text password (no strength policy)")

    @field_validator("email", mode="before")
    @classmethod
    def email_required(cls, value: Any) -> Any:
        return _required(value)

    @field_validator("password", mode="before")
    @classmethod
    def password_required(cls, value: Any) -> Any:
        # Passwords are not trimmed: "   " is a valid password
        return _encodable(_required(value, strip=False))


class LoginRequest(CredentialsBase):
    """Schema for POST /login."""


class RegisterRequest(CredentialsBase):
    """Schema for POST /register.

    Pass a database Core as validation context to enable the email
    uniqueness rule:

        RegisterRequest.model_validate(data, context={"core": get_core()})
    """

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)] = Field(
        ..., description="Display name"
    )

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, value: Any) -> Any:
        return _encodable(_required(value))

    @field_validator("email")
    @classmethod
    def email_unique(cls, value: str, info: ValidationInfo) -> str:
        core = (info.context or {}).get("core")
        if core is not None and core.user.email_exists(value):
            raise PydanticCustomError("unique", "Email already registered")
        return value


# ============================================================================
# User Schemas
# ============================================================================


class UserResponse(BaseModel):
    """User as returned to clients. The password hash is never included."""

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_row(cls, row) -> "UserResponse":
        """Build from a sqlite3.Row of the users table."""
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


# ============================================================================
# Token Schemas
# ============================================================================


class TokenPayload(BaseModel):
    """Decoded claims of a bearer token."""

    sub: str = Field(..., description="User ID")
    jti: str = Field(..., description="Token ID, matches personal_access_tokens.jti")
    iat: int
    exp: int | None = Field(default=None, description="Absent for non-expiring tokens")
    abilities: list[str] = Field(default_factory=list)

    @property
    def user_id(self) -> int:
        return int(self.sub)


class Identity(BaseModel):
    """The authenticated caller of a guarded endpoint.

    Resolved once by @auth_required and passed to the handler.
    """

    user: UserResponse
    token_id: int
    abilities: list[str]

    def can(self, ability: str) -> bool:
        """Check whether the presenting token grants an ability."""
        return "*" in self.abilities or ability in self.abilities

"""Pydantic schemas for authentication and account operations."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class Role(str, Enum):
    """Account role. The first registered user is promoted to ADMIN."""

    ADMIN = "ADMIN"
    USER = "USER"


def normalize_email(value: str) -> str:
    """Trim and lower-case an email address for storage and lookup."""
    return value.strip().lower()


def _strip(value):
    return value.strip() if isinstance(value, str) else value


# ============================================================================
# User Schemas
# ============================================================================


class UserBase(BaseModel):
    """Fields shared by user requests and responses."""

    email: str = Field(..., max_length=254)
    name: str = Field(..., max_length=40)


class UserResponse(UserBase):
    """User as returned by the API. Never includes the credential hash."""

    id: str
    role: Role
    last_login: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(use_enum_values=True)


class RegisterRequest(BaseModel):
    """Self-service registration request."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=40)
    name: str = Field(..., min_length=3, max_length=40)

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return _strip(v)

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_email(v)


class RegistrationResponse(BaseModel):
    """Response body for a successful registration."""

    user: UserResponse


class LoginRequest(BaseModel):
    """Email/password login request."""

    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=1, max_length=40)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class UpdateRequest(BaseModel):
    """Profile update for the authenticated user.

    Empty strings count as "not supplied", so clients can send blank form
    fields. Password fields must be supplied all together or not at all;
    that rule is enforced by the account service.
    """

    email: EmailStr | None = None
    password: str | None = Field(None, max_length=40)
    new_password: str | None = Field(None, max_length=40)
    repeat_new_password: str | None = Field(None, max_length=40)
    name: str | None = Field(None, max_length=40)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_to_none(cls, v):
        v = _strip(v)
        return v or None

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str | None) -> str | None:
        return normalize_email(v) if v else None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


# ============================================================================
# Password Reset Schemas
# ============================================================================


class PasswordResetRequest(BaseModel):
    """Request a password reset link by email."""

    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return _strip(v)

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_email(v)


class PasswordResetConfirm(BaseModel):
    """Redeem a password reset link.

    Both password fields must match; the value becomes the new password.
    """

    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, max_length=40)
    new_password: str = Field(..., min_length=1, max_length=40)


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str


# ============================================================================
# Token Schemas
# ============================================================================


class TokenPayload(BaseModel):
    """Claims of a session access token."""

    sub: str  # User ID
    email: str
    role: Role
    exp: int  # Expiry timestamp
    iat: int  # Issued at timestamp

    model_config = ConfigDict(use_enum_values=True)


class TokenResponse(BaseModel):
    """Response body for a successful login."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ResetTokenClaims(BaseModel):
    """Verified claims of a password reset token."""

    id: str
    email: str
    exp: int
    iat: int

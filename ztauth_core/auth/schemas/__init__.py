"""Authentication Pydantic schemas for API validation."""

from .auth import (
    LoginRequest,
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRequest,
    RegistrationResponse,
    ResetTokenClaims,
    Role,
    TokenPayload,
    TokenResponse,
    UpdateRequest,
    UserBase,
    UserResponse,
    normalize_email,
)

__all__ = [
    "LoginRequest",
    "MessageResponse",
    "PasswordResetConfirm",
    "PasswordResetRequest",
    "RegisterRequest",
    "RegistrationResponse",
    "ResetTokenClaims",
    "Role",
    "TokenPayload",
    "TokenResponse",
    "UpdateRequest",
    "UserBase",
    "UserResponse",
    "normalize_email",
]

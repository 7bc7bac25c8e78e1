"""Pydantic schemas for ZTAuth Core.

Auth schemas are re-exported from the auth module for convenience.
"""

from ztauth_core.auth.schemas import (
    LoginRequest,
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRequest,
    RegistrationResponse,
    Role,
    TokenResponse,
    UpdateRequest,
    UserResponse,
)

from .options import GlobalOptions, SmtpSettings

__all__ = [
    "GlobalOptions",
    "SmtpSettings",
    # Auth schemas (re-exported from ztauth_core.auth.schemas)
    "LoginRequest",
    "MessageResponse",
    "PasswordResetConfirm",
    "PasswordResetRequest",
    "RegisterRequest",
    "RegistrationResponse",
    "Role",
    "TokenResponse",
    "UpdateRequest",
    "UserResponse",
]

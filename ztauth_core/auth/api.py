"""Authentication API endpoints for ZTAuth Core.

These endpoints expose the account operations as JSON:
- POST /auth/register                - Create account
- POST /auth/login                   - Authenticate and return JWT token
- GET  /auth/me                      - Get current user info
- PUT  /auth/me                      - Update current user
- POST /auth/password-reset          - Request a password reset link
- POST /auth/password-reset/confirm  - Redeem a password reset link

The endpoints only validate input and serialize output. Error classes are
mapped to status codes by the handlers in main.py.
"""

from contextlib import closing

from flask import Blueprint, g, jsonify

from ..accounts import service as accounts
from ..api.validation import validate_request
from ..db import get_core
from .decorators import auth_required
from .schemas import (
    LoginRequest,
    PasswordResetConfirm,
    PasswordResetRequest,
    RegisterRequest,
    RegistrationResponse,
    UpdateRequest,
)

# Create blueprint
auth_bp = Blueprint("auth", __name__)


# ============================================================================
# Registration and Login
# ============================================================================


@auth_bp.route("/auth/register", methods=["POST"])
@validate_request
def register(data: RegisterRequest):
    """
    Create an account.

    The first account ever created becomes ADMIN.

    Example request:
    ```json
    {
        "email": "ann@example.com",
        "password": "Abc123",
        "name": "Ann"
    }
    ```

    Example response (201):
    ```json
    {
        "user": {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "email": "ann@example.com",
            "name": "Ann",
            "role": "ADMIN",
            "last_login": "2026-01-01T10:30:00Z",
            "created_at": "2026-01-01T10:30:00Z"
        }
    }
    ```
    """
    with closing(get_core()) as core:
        user = accounts.register(core, data)

    return jsonify(RegistrationResponse(user=user).model_dump(mode="json")), 201


@auth_bp.route("/auth/login", methods=["POST"])
@validate_request
def login(data: LoginRequest):
    """
    Authenticate and return a JWT access token.

    Example response:
    ```json
    {
        "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
        "token_type": "bearer",
        "user": {"id": "...", "email": "ann@example.com", "role": "ADMIN", ...}
    }
    ```
    """
    with closing(get_core()) as core:
        result = accounts.login(core, data)

    return jsonify(result.model_dump(mode="json")), 200


# ============================================================================
# User Profile Endpoints
# ============================================================================


@auth_bp.route("/auth/me", methods=["GET"])
@auth_required
def get_current_user():
    """Get current user info. Requires Authorization: Bearer <token>."""
    with closing(get_core()) as core:
        user = accounts.me(core, g.user_id)

    return jsonify(user.model_dump(mode="json")), 200


@auth_bp.route("/auth/me", methods=["PUT"])
@auth_required
@validate_request
def update_current_user(data: UpdateRequest):
    """
    Update current user.

    All fields are optional. To change the password send password,
    new_password and repeat_new_password together.

    Example request:
    ```json
    {
        "name": "Ann Lee",
        "password": "Abc123",
        "new_password": "Xyz789",
        "repeat_new_password": "Xyz789"
    }
    ```
    """
    with closing(get_core()) as core:
        user = accounts.update(core, g.user_id, data)

    return jsonify(user.model_dump(mode="json")), 200


# ============================================================================
# Password Reset Endpoints
# ============================================================================


@auth_bp.route("/auth/password-reset", methods=["POST"])
@validate_request
def request_password_reset(data: PasswordResetRequest):
    """
    Email a password reset link.

    Responds the same way whether or not the email is registered.

    Example response:
    ```json
    {"message": "Mail sent if email exist!"}
    ```
    """
    with closing(get_core()) as core:
        result = accounts.request_password_reset(core, data)

    return jsonify(result.model_dump()), 200


@auth_bp.route("/auth/password-reset/confirm", methods=["POST"])
@validate_request
def confirm_password_reset(data: PasswordResetConfirm):
    """
    Set a new password from a reset link.

    Example request:
    ```json
    {
        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
        "password": "Xyz789",
        "new_password": "Xyz789"
    }
    ```
    """
    with closing(get_core()) as core:
        result = accounts.redeem_password_reset(core, data)

    return jsonify(result.model_dump()), 200

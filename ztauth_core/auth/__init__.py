"""Authentication module for ZTAuth Core.

This module provides the authentication building blocks:
- Password strength policy
- Password hashing and verification (bcrypt)
- Session access tokens (JWT)
- Password reset tokens bound to the current credential hash
- Authentication decorator for protected endpoints

Auth endpoints:
- POST /auth/register                - Create account (first account is ADMIN)
- POST /auth/login                   - Authenticate and return JWT token
- GET  /auth/me                      - Get current user info
- PUT  /auth/me                      - Update email, name and/or password
- POST /auth/password-reset          - Email a password reset link
- POST /auth/password-reset/confirm  - Set a new password from a reset link
"""

from . import password, reset_token, schemas, service, token

__all__ = ["password", "reset_token", "schemas", "service", "token"]

"""Authentication decorators for protected endpoints.

- @auth_required - Requires a valid JWT access token
- _authenticate_api_key() - Requires the shared X-ZT1-Auth key (api/v1)
"""

import hmac
import logging
from functools import wraps

import jwt
from flask import g, request

from ..config import settings
from ..exceptions import AuthenticationError
from . import token

API_KEY_HEADER = "X-ZT1-Auth"

logger = logging.getLogger(__name__)


def _authenticate_request():
    """
    Authenticate the request from its Authorization: Bearer <token> header.

    Stores authenticated user information in flask.g:
    - g.user_id: User ID (UUID)
    - g.email: Email at token issue time
    - g.role: "ADMIN" or "USER"

    Raises:
        AuthenticationError: If the token is missing, malformed or expired
    """
    auth_header = request.headers.get("Authorization", "")
    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        logger.warning("Unauthenticated request to protected endpoint")
        raise AuthenticationError(
            "Authentication required",
            {"code": "missing_auth", "expected": "Authorization: Bearer <token>"}
        )

    try:
        payload = token.validate_access_token(parts[1])
    except jwt.ExpiredSignatureError:
        logger.warning("JWT token expired")
        raise AuthenticationError("Token has expired", {"code": "token_expired"})
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid JWT token: {e}")
        raise AuthenticationError("Invalid token", {"code": "invalid_token"})

    g.user_id = payload.sub
    g.email = payload.email
    g.role = payload.role

    logger.debug(f"JWT authentication successful for user {g.user_id}")


def auth_required(f):
    """
    Decorator to require a valid access token for endpoint access.

    Example:
    ```python
    @auth_required
    def protected_endpoint():
        user_id = g.user_id
        ...
    ```
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        _authenticate_request()
        return f(*args, **kwargs)

    return wrapper


def _authenticate_api_key():
    """
    Authenticate a service request by its X-ZT1-Auth header.

    The header must equal settings.user_api_key. When no key is configured
    every request is rejected.

    Raises:
        AuthenticationError: If the key is missing, wrong, or not configured
    """
    api_key = request.headers.get(API_KEY_HEADER, "")
    expected = settings.user_api_key

    if not api_key or not expected or not hmac.compare_digest(
        api_key.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning("Invalid API key")
        raise AuthenticationError("Unauthorized", {"code": "invalid_api_key"})

    g.auth_method = "api_key"

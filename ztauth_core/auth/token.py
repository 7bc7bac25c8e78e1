"""Session access tokens.

Access tokens are HS256 JWTs signed with settings.jwt_secret_key. They carry
the user ID in "sub" plus email and role, and are what the HTTP layer uses
to identify the acting user for /auth/me.
"""

from datetime import timedelta

import jwt

from ..config import settings
from ..utils import isodatetime
from .schemas import TokenPayload, UserResponse

ALGORITHM = "HS256"


def generate_access_token(user: UserResponse) -> str:
    """Generate a signed access token for a user.

    Args:
        user: The authenticated user

    Returns:
        Encoded JWT string
    """
    now = isodatetime.now_unix()
    expiry = int(timedelta(days=settings.jwt_expiry_days).total_seconds())

    payload = {
        "sub": user.id,
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + expiry,
    }

    return jwt.encode(payload, settings.jwt_secret_key, algorithm=ALGORITHM)


def validate_access_token(token: str) -> TokenPayload:
    """Validate an access token and return its claims.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is malformed, forged or incomplete
    """
    payload = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[ALGORITHM],
        options={"require": ["sub", "exp", "iat"]},
    )

    try:
        return TokenPayload(**payload)
    except ValueError as e:
        raise jwt.InvalidTokenError(f"Token claims are invalid: {e}") from e


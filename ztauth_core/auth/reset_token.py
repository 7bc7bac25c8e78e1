"""Password reset tokens.

A reset token is an HS256 JWT carrying {id, email} and a fixed 15 minute
expiry. It is not stored anywhere. The signing key is derived from the
user's current credential hash:

    key = HMAC-SHA256(settings.jwt_secret_key, credential_hash)

Changing the password changes the hash, which changes the key, so every
reset link issued before the change stops verifying. That is the only
revocation mechanism and it needs no storage. Mixing in the application
secret means a leaked hash alone is not enough to mint a valid link.

decode_reset_token() reads the claims without checking anything. It exists
to find which user's hash to verify against and must never be trusted on
its own.
"""

import hashlib
import hmac
from datetime import timedelta

import jwt

from ..config import settings
from ..utils import isodatetime
from .schemas import ResetTokenClaims

ALGORITHM = "HS256"


def derive_signing_key(secret: str) -> bytes:
    """Derive the HMAC key for reset tokens from a credential hash."""
    return hmac.new(
        settings.jwt_secret_key.encode("utf-8"),
        secret.encode("utf-8"),
        hashlib.sha256,
    ).digest()


def issue_reset_token(user_id: str, email: str, secret: str) -> str:
    """Issue a signed reset token.

    Args:
        user_id: ID of the user requesting the reset
        email: The user's email
        secret: The user's current credential hash

    Returns:
        Encoded JWT string
    """
    now = isodatetime.now_unix()
    expiry = int(timedelta(minutes=settings.reset_token_expiry_minutes).total_seconds())

    payload = {
        "id": user_id,
        "email": email,
        "iat": now,
        "exp": now + expiry,
    }

    return jwt.encode(payload, derive_signing_key(secret), algorithm=ALGORITHM)


def verify_reset_token(token: str, secret: str) -> ResetTokenClaims:
    """Verify a reset token against the user's current credential hash.

    Raises:
        jwt.ExpiredSignatureError: If the 15 minute window has passed
        jwt.InvalidTokenError: If the token is malformed, tampered with,
            signed for a different hash, or missing claims
    """
    payload = jwt.decode(
        token,
        derive_signing_key(secret),
        algorithms=[ALGORITHM],
        options={"require": ["id", "email", "exp", "iat"]},
    )

    try:
        return ResetTokenClaims(**payload)
    except ValueError as e:
        raise jwt.InvalidTokenError(f"Reset token claims are invalid: {e}") from e


def decode_reset_token(token: str) -> dict:
    """Read reset token claims WITHOUT verifying signature or expiry.

    Only used to locate the candidate user before the secret is known.

    Raises:
        jwt.DecodeError: If the token is not a structurally valid JWT
    """
    return jwt.decode(token, options={"verify_signature": False, "verify_exp": False})

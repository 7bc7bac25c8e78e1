"""Credential hashing and verification.

Passwords are hashed with bcrypt using the configured work factor. The hash
string doubles as the secret from which password reset signing keys are
derived (see reset_token.py), so rotating it revokes outstanding reset links.
"""

import logging

import bcrypt

from ..config import settings

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """
    Hash a password with a fresh random salt.

    Args:
        password: Plain text password

    Returns:
        bcrypt hash string (60 characters, "$2b$" prefix)
    """
    salt = bcrypt.gensalt(rounds=settings.bcrypt_work_factor)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plain text password against a stored bcrypt hash.

    Returns False for a wrong password and for a hash that is not a valid
    bcrypt string.
    """
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored credential hash is not a valid bcrypt hash")
        return False

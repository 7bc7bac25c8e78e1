"""Password strength policy.

A password is accepted when it is 6 to 40 characters long and contains at
least two of the three character classes: lowercase letters, uppercase
letters, digits. The same rule applies to initial passwords, changed
passwords and reset passwords; only the error message differs per caller.
"""

import re
from typing import NamedTuple

from ..exceptions import PolicyViolation

MIN_LENGTH = 6
MAX_LENGTH = 40

_CHARACTER_CLASSES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"[0-9]"),
)


class PasswordCheck(NamedTuple):
    """Outcome of classifying a candidate password."""

    accepted: bool
    reason: str | None = None


def classify(candidate: str) -> PasswordCheck:
    """Classify a candidate password as accepted or rejected.

    Pure function. Rejection reasons are for logs and tests; callers show
    their own user-facing message.
    """
    if len(candidate) < MIN_LENGTH:
        return PasswordCheck(False, f"shorter than {MIN_LENGTH} characters")
    if len(candidate) > MAX_LENGTH:
        return PasswordCheck(False, f"longer than {MAX_LENGTH} characters")

    classes = sum(1 for pattern in _CHARACTER_CLASSES if pattern.search(candidate))
    if classes < 2:
        return PasswordCheck(
            False,
            "needs at least two of: lowercase letter, uppercase letter, digit"
        )

    return PasswordCheck(True)


def require_strong_password(
    candidate: str,
    message: str = "Password does not meet the requirements!"
) -> None:
    """Raise PolicyViolation with the given message if the password is rejected."""
    result = classify(candidate)
    if not result.accepted:
        raise PolicyViolation(message, {"reason": result.reason})

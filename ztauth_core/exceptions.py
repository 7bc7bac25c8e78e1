"""Custom exceptions for ZTAuth Core.

Every exception carries a user-facing message and an optional details dict.
The Flask error handlers in main.py map each class to an HTTP status code.
"""


class ZtAuthError(Exception):
    """Base exception for all ZTAuth errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(ZtAuthError):
    """Malformed or missing request field."""


class PolicyViolation(ValidationError):
    """Password does not satisfy the strength policy."""


class RegistrationDisabled(ZtAuthError):
    """Self-service registration is turned off in global options."""


class Conflict(ZtAuthError):
    """Resource already exists (e.g. email already registered)."""


class ResourceNotFound(ZtAuthError):
    """Requested resource does not exist."""


class AuthenticationError(ZtAuthError):
    """Credentials or token rejected."""


class TemplateError(ZtAuthError):
    """Email template is malformed. This is a configuration error."""


class DeliveryError(ZtAuthError):
    """Sending an email failed. Never escapes the notification dispatcher."""

"""Account lifecycle: registration, profile updates and password resets."""

from . import service

__all__ = ["service"]

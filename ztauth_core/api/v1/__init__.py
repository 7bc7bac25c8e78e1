"""API v1 endpoints for service-to-service calls.

The ApiV1 blueprint aggregates the v1 resources:
- Users

All API v1 endpoints require the shared key in the X-ZT1-Auth header.
"""

from flask import Blueprint

from ...auth.decorators import _authenticate_api_key
from . import users

# Create the ApiV1 blueprint
api_v1_bp = Blueprint("api_v1", __name__, url_prefix="/api/v1")


@api_v1_bp.before_request
def authenticate():
    """Require the API key for all API v1 endpoints."""
    _authenticate_api_key()


# users_bp has url_prefix="/users", so the full path is /api/v1/users
api_v1_bp.register_blueprint(users.users_bp)

__all__ = ["api_v1_bp"]

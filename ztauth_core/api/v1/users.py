"""User provisioning endpoint for trusted services.

- POST /api/v1/users - Create an account (same rules as /auth/register)

The caller is another service holding the shared API key, not the person
being registered. Errors use the same status mapping as the rest of the API.
"""

from contextlib import closing

from flask import Blueprint, jsonify

from ...accounts import service as accounts
from ...auth.schemas import RegisterRequest, RegistrationResponse
from ...db import get_core
from ..validation import validate_request

users_bp = Blueprint("users", __name__, url_prefix="/users")


@users_bp.route("", methods=["POST"])
@validate_request
def create_user(data: RegisterRequest):
    """
    Create an account on behalf of a trusted service.

    Example request (header X-ZT1-Auth: <key>):
    ```json
    {"email": "ann@example.com", "password": "Abc123", "name": "Ann"}
    ```
    """
    with closing(get_core()) as core:
        user = accounts.register(core, data)

    return jsonify(RegistrationResponse(user=user).model_dump(mode="json")), 201

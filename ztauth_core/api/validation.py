"""Request body validation for Flask endpoints.

@validate_request reads the JSON body (or form data), validates it against
the pydantic model named in the view's first parameter annotation and
passes the model instance to the view:

    @bp.post("/auth/register")
    @validate_request
    def register(data: RegisterRequest):
        ...
"""

import inspect
from functools import wraps
from typing import get_type_hints

from flask import request
from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..exceptions import ValidationError


def _request_payload() -> dict:
    if request.is_json:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        return payload
    return request.form.to_dict()


def validate_request(f):
    """Validate the request body against the view's annotated model.

    Raises:
        ValidationError: If the body is not an object or fails validation.
            details["errors"] holds the pydantic error list.
    """
    params = list(inspect.signature(f).parameters)
    if not params:
        raise TypeError(f"{f.__name__} must take the validated model as first parameter")

    model = get_type_hints(f).get(params[0])
    if not (inspect.isclass(model) and issubclass(model, BaseModel)):
        raise TypeError(f"{f.__name__}: first parameter must be annotated with a pydantic model")

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            data = model(**_request_payload())
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid request data",
                {"errors": e.errors(include_url=False, include_context=False, include_input=False)}
            )
        return f(data, *args, **kwargs)

    return wrapper

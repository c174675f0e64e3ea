"""Request validation for API endpoints.

@validate_request looks for a parameter annotated with a pydantic model,
validates the request body against it and passes the model instance in.
Other parameters (path parameters) are passed through untouched.

    @bp.post("/register")
    @validate_request
    def register(data: RegisterRequest):
        ...

Failures raise ValidationError whose details map each field to a list of
human readable messages:

    {"email": ["The email field must be a valid email address."]}
"""

import logging
from functools import wraps
from typing import Any, Callable, get_type_hints

from flask import request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

VALIDATION_ERROR_MESSAGE = "validation error"

# Messages by pydantic error type. {field} is the field name.
_MESSAGES = {
    "missing": "The {field} field is required.",
    "required": "The {field} field is required.",
    "string_too_short": "The {field} field is required.",
    "string_type": "The {field} field must be a string.",
    "unique": "The {field} has already been taken.",
    "utf8": "The {field} field must be a valid UTF-8 string.",
}
_EMAIL_MESSAGE = "The {field} field must be a valid email address."


def _message_for(error: dict, field: str) -> str:
    template = _MESSAGES.get(error["type"])
    if template is None and error["msg"].startswith("value is not a valid email address"):
        template = _EMAIL_MESSAGE
    if template is None:
        return error["msg"]
    return template.format(field=field.replace("_", " "))


def format_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    """
    Convert pydantic errors into per-field message lists.

    Errors without a field location are reported under "body".
    """
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        message = _message_for(error, field)
        messages = errors.setdefault(field, [])
        if message not in messages:
            messages.append(message)
    return errors


def _request_payload() -> dict:
    """Read the request body as a dict from JSON or, failing that, form data."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = request.form.to_dict()
    if not isinstance(payload, dict):
        raise ValidationError(
            VALIDATION_ERROR_MESSAGE,
            {"body": ["The request body must be a JSON object."]}
        )
    return payload


def _body_parameter(func: Callable) -> tuple[str, type[BaseModel]] | None:
    for name, hint in get_type_hints(func).items():
        if name == "return":
            continue
        if isinstance(hint, type) and issubclass(hint, BaseModel):
            return name, hint
    return None


def validate_request(
    f: Callable | None = None,
    *,
    context: Callable[[], dict[str, Any]] | None = None
):
    """
    Decorator validating the request body against the endpoint's model parameter.

    Usable bare (``@validate_request``) or with a validation context factory
    (``@validate_request(context=...)``) whose result is handed to the
    model's validators as ``info.context``.

    Raises:
        ValidationError: If the body is not an object or fails validation
    """
    def decorator(func: Callable) -> Callable:
        body = _body_parameter(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            if body is not None:
                name, model = body
                payload = _request_payload()
                try:
                    kwargs[name] = model.model_validate(
                        payload,
                        context=context() if context else None
                    )
                except PydanticValidationError as e:
                    errors = format_errors(e)
                    logger.info(f"Validation failed on {request.path}: {sorted(errors)}")
                    raise ValidationError(VALIDATION_ERROR_MESSAGE, errors)
            return func(*args, **kwargs)

        return wrapper

    if f is not None:
        return decorator(f)
    return decorator

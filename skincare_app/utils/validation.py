from functools import wraps

from flask import request
from pydantic import ValidationError

from .errors import BadRequest


def _request_payload():
    if request.is_json:
        data = request.get_json(silent=True)
        if data is None:
            raise BadRequest(
                "No valid JSON body found. Ensure Content-Type is application/json."
            )
        return data
    return request.form.to_dict()


def first_error_message(exc: ValidationError) -> str:
    """Surface only the first failing rule, named by its wire field."""
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err["loc"])

    if err["type"] == "value_error" and "error" in err.get("ctx", {}):
        return str(err["ctx"]["error"])
    if err["type"] == "missing":
        return f"{field} is required"
    if not field:
        return err["msg"]
    return f"{field}: {err['msg']}"


def _validated(schema, payload):
    if not isinstance(payload, dict):
        raise BadRequest("Request body must be an object")
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise BadRequest(first_error_message(e))


def validate_body(schema):
    """Parse the JSON or form body with a pydantic schema and pass it on as `body`."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            kwargs["body"] = _validated(schema, _request_payload())
            return fn(*args, **kwargs)

        return wrapper

    return decorator

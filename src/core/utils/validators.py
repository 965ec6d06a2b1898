"""Request validation utilities."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# pydantic error type -> message shown to API clients
_FRIENDLY_MESSAGES: dict[str, str] = {
    "missing": "This field is required",
    "bool_type": "Expected a boolean",
    "bool_parsing": "Expected a boolean",
    "int_type": "Expected an integer",
    "int_parsing": "Expected an integer",
    "int_from_float": "Expected an integer",
    "string_type": "Expected a string",
}


def _friendly_message(err: dict[str, Any]) -> str:
    known = _FRIENDLY_MESSAGES.get(err.get("type", ""))
    if known:
        return known

    msg = str(err.get("msg", "Invalid value")).replace("Value error,", "").strip()
    lowered = msg.lower()
    if "field required" in lowered:
        return _FRIENDLY_MESSAGES["missing"]
    if "valid boolean" in lowered:
        return _FRIENDLY_MESSAGES["bool_type"]
    if "valid integer" in lowered:
        return _FRIENDLY_MESSAGES["int_type"]
    return msg


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Reduce pydantic errors to ``{"field", "message"}`` pairs.

    ``input``, ``ctx`` and ``url`` are dropped so request data is never
    echoed back.
    """
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())) or "body",
            "message": _friendly_message(err),
        }
        for err in errors
    ]


def validate_request(
    model: type[ModelT],
    data: dict[str, Any],
) -> tuple[bool, ModelT | list[dict[str, str]]]:
    """Validate request data against a Pydantic model.

    Returns:
        (True, validated_model) on success
        (False, sanitized_errors) on validation failure
    """
    try:
        return True, model.model_validate(data)
    except ValidationError as exc:
        return False, sanitize_validation_errors(exc.errors())

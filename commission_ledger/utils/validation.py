"""
Schema validation helpers.

Translates pydantic errors into the engine's ValidationError so callers
only ever handle one error taxonomy.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from commission_ledger.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def to_validation_error(exc: PydanticValidationError, label: str = "Invalid input") -> ValidationError:
    """Engine ValidationError naming the first failing field."""
    errors = exc.errors(include_url=False, include_context=False)
    first = errors[0]
    location = ".".join(str(part) for part in first["loc"])
    message = f"{label}: {location} {first['msg']}" if location else f"{label}: {first['msg']}"
    return ValidationError(message, errors=errors)


def validate_input(model: type[M], label: str = "Invalid input", **data: Any) -> M:
    """
    Validate keyword data against a schema.

    Raises:
        ValidationError: with the first failing field in the message
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise to_validation_error(e, label) from e


def validate_list(item_type: Any, items: Any, label: str = "Invalid input") -> list:
    """Validate a list of items (dicts or model instances)."""
    try:
        return TypeAdapter(list[item_type]).validate_python(items)
    except PydanticValidationError as e:
        raise to_validation_error(e, label) from e

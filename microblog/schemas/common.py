"""Shared field rules."""

from typing import Any

from pydantic_core import PydanticCustomError

BLANK = "can't be blank"


def blank_error() -> PydanticCustomError:
    return PydanticCustomError("blank", BLANK)


def require_present(value: Any) -> Any:
    """Reject None and whitespace-only strings."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise blank_error()
    return value

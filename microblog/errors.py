"""Error definitions.

Ordinary validation failures are not errors: they are reported through
``ValidationErrors`` on the entity. The exceptions here signal misuse of the
persistence layer or an explicit request to fail loudly.
"""

from collections.abc import Iterable
from typing import Any


class MicroblogError(Exception):
    """Base class for application errors."""


class MassAssignmentSecurityError(MicroblogError):
    """Raised when a bulk assignment names an attribute the model protects."""

    def __init__(self, model_name: str, attributes: Iterable[str]) -> None:
        self.model_name = model_name
        self.attributes = sorted(attributes)
        super().__init__(
            f"Can't mass-assign protected attributes of {model_name}: "
            f"{', '.join(self.attributes)}"
        )


class RecordInvalid(MicroblogError):
    """Raised by strict save paths when validation or the store rejects a record."""

    def __init__(self, record: Any, errors: dict[str, list[str]]) -> None:
        self.record = record
        self.errors = errors
        messages = "; ".join(
            f"{field} {message}" for field, items in errors.items() for message in items
        )
        super().__init__(f"Validation failed for {type(record).__name__}: {messages}")


class RecordNotFound(MicroblogError):
    """Raised when a lookup by primary key matches no row."""

    def __init__(self, model_name: str, record_id: Any) -> None:
        self.model_name = model_name
        self.record_id = record_id
        super().__init__(f"Couldn't find {model_name} with id={record_id}")

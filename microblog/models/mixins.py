"""Mixins for SQLAlchemy models."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Column, DateTime, func

from microblog.errors import MassAssignmentSecurityError


def utcnow() -> datetime:
    return datetime.now(UTC)


class TimestampMixin:
    """Mixin to add created_at and updated_at timestamp columns."""

    # Python-side defaults keep sub-second ordering on backends whose now() is coarse
    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )


class MassAssignmentMixin:
    """Mixin restricting keyword construction and bulk updates to accessible attributes.

    Must be listed before ``Base`` so its ``__init__`` replaces the declarative
    constructor. Attributes outside ``__accessible_attributes__`` can still be
    set one at a time by code that is allowed to.
    """

    __accessible_attributes__ = frozenset()

    def __init__(self, **kwargs: Any) -> None:
        self.assign_attributes(kwargs)

    def assign_attributes(self, values: Mapping[str, Any]) -> None:
        """Assign ``values``, refusing the whole batch if any key is protected."""
        protected = set(values) - self.__accessible_attributes__
        if protected:
            raise MassAssignmentSecurityError(type(self).__name__, protected)
        for key, value in values.items():
            setattr(self, key, value)


class ValidatesMixin:
    """Mixin holding the field errors of the most recent validation run."""

    _errors = None

    @property
    def errors(self) -> dict[str, list[str]]:
        return self._errors if self._errors is not None else {}

    @errors.setter
    def errors(self, value: dict[str, list[str]]) -> None:
        self._errors = value


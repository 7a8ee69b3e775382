"""Pydantic schemas holding the field rules for models."""

from microblog.schemas.micropost import MicropostFields
from microblog.schemas.user import UserFields

__all__ = [
    "MicropostFields",
    "UserFields",
]

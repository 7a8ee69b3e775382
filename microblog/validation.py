"""Validation rules for models.

Validators are plain functions returning a ``ValidationErrors`` mapping of
field name to messages. An empty mapping means the record is valid. They never
raise for bad input: field rules live on the pydantic schemas in
``microblog.schemas`` and their errors are translated here.
"""

from typing import Any

from pydantic import BaseModel, ValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session

from microblog.models.micropost import Micropost
from microblog.models.relationship import Relationship
from microblog.models.user import User
from microblog.schemas import MicropostFields, UserFields
from microblog.schemas.common import BLANK

TAKEN = "has already been taken"


class ValidationErrors(dict[str, list[str]]):
    """Field name -> list of messages."""

    def add(self, field: str, message: str) -> None:
        self.setdefault(field, []).append(message)

    def full_messages(self) -> list[str]:
        """Human readable messages, e.g. ``"Email is invalid"``."""
        return [
            f"{field.replace('_', ' ').capitalize()} {message}"
            for field, messages in self.items()
            for message in messages
        ]


def _message(error: dict[str, Any]) -> str:
    ctx = error.get("ctx") or {}
    if "max_length" in ctx:
        return f"is too long (maximum is {ctx['max_length']} characters)"
    if "min_length" in ctx:
        return f"is too short (minimum is {ctx['min_length']} characters)"
    if error["type"] == "string_pattern_mismatch":
        return "is invalid"
    return error["msg"]


def check(schema: type[BaseModel], values: dict[str, Any]) -> ValidationErrors:
    """Validate ``values`` against ``schema`` and collect messages per field."""
    errors = ValidationErrors()
    try:
        schema.model_validate(values)
    except ValidationError as e:
        for error in e.errors():
            # Model-level errors carry their field in the context
            field = error["loc"][0] if error["loc"] else error["ctx"]["field"]
            errors.add(str(field), _message(error))
    return errors


def email_taken(db: Session, email: str, exclude_id: int | None = None) -> bool:
    """Check whether another user already has ``email``, ignoring case."""
    query = db.query(User.id).filter(func.lower(User.email) == email.lower())
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def validate_user(db: Session, user: User) -> ValidationErrors:
    """Validate name, email and password of ``user``, then email uniqueness."""
    errors = check(
        UserFields,
        {
            "has_digest": bool(user.password_digest),
            "password_changed": user.password_changed,
            "name": user.name,
            "email": user.email,
            "password": user.password,
            "password_confirmation": user.password_confirmation,
        },
    )
    if "email" not in errors and email_taken(db, user.email, exclude_id=user.id):
        errors.add("email", TAKEN)
    return errors


def validate_micropost(micropost: Micropost) -> ValidationErrors:
    """Validate content and owner of ``micropost``."""
    user_id = micropost.user_id
    if user_id is None and micropost.user is not None:
        user_id = micropost.user.id
    return check(MicropostFields, {"content": micropost.content, "user_id": user_id})


def validate_relationship(relationship: Relationship) -> ValidationErrors:
    """Validate that both ends of ``relationship`` reference saved users."""
    errors = ValidationErrors()

    if relationship.follower_id is None:
        errors.add("follower_id", BLANK)
    if relationship.followed_id is None:
        errors.add("followed_id", BLANK)

    return errors

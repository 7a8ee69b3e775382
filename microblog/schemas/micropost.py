"""Micropost field schema."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from microblog.models.micropost import CONTENT_MAX_LENGTH
from microblog.schemas.common import require_present


class MicropostFields(BaseModel):
    """Content and owner rules for a micropost."""

    content: str = Field(..., max_length=CONTENT_MAX_LENGTH)
    user_id: int | None

    @field_validator("content", "user_id", mode="before")
    @classmethod
    def present(cls, value: Any) -> Any:
        return require_present(value)

"""User field schema."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from pydantic_core import PydanticCustomError

from microblog.models.user import NAME_MAX_LENGTH
from microblog.schemas.common import blank_error, require_present

# ASCII-only: \w and [a-z] must not match Unicode look-alikes under IGNORECASE
EMAIL_PATTERN = r"(?ai)\A[\w+\-.]+@[a-z\d\-.]+\.[a-z]+\Z"
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 6


class UserFields(BaseModel):
    """Name, email and password rules for a user.

    ``password`` is None when the plaintext was never assigned; that is only
    acceptable for a user that already has a digest.
    """

    model_config = ConfigDict(regex_engine="python-re")

    has_digest: bool = False
    password_changed: bool = False
    name: str = Field(..., max_length=NAME_MAX_LENGTH)
    email: str = Field(..., max_length=EMAIL_MAX_LENGTH, pattern=EMAIL_PATTERN)
    password: Annotated[str, Field(min_length=PASSWORD_MIN_LENGTH)] | None = None
    password_confirmation: str | None = None

    @field_validator("name", "email", mode="before")
    @classmethod
    def present(cls, value: Any) -> Any:
        return require_present(value)

    @field_validator("password", mode="before")
    @classmethod
    def require_password(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.data.get("has_digest"):
            return None
        return require_present(value)

    @field_validator("password_confirmation", mode="before")
    @classmethod
    def require_confirmation(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None and info.data.get("password_changed"):
            raise blank_error()
        return value

    @model_validator(mode="after")
    def confirmation_matches(self) -> "UserFields":
        if self.password_confirmation is not None and self.password != self.password_confirmation:
            raise PydanticCustomError(
                "confirmation", "doesn't match confirmation", {"field": "password"}
            )
        return self

"""SQLAlchemy models."""

from microblog.models.micropost import Micropost
from microblog.models.relationship import Relationship
from microblog.models.user import User

__all__ = [
    "User",
    "Micropost",
    "Relationship",
]

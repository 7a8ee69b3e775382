"""User model."""

from typing import Literal

from sqlalchemy import Boolean, Column, Integer, String, false
from sqlalchemy.orm import relationship

from microblog.database import Base
from microblog.models.micropost import Micropost
from microblog.models.mixins import MassAssignmentMixin, TimestampMixin, ValidatesMixin
from microblog.models.relationship import Relationship
from microblog.security import get_password_hash, verify_password

NAME_MAX_LENGTH = 50


class User(MassAssignmentMixin, ValidatesMixin, TimestampMixin, Base):
    """User account: credentials, posts and follow graph."""

    __tablename__ = "users"
    __accessible_attributes__ = frozenset({"name", "email", "password", "password_confirmation"})

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_digest = Column(String(255), nullable=False)
    remember_token = Column(String(64), nullable=True, index=True)
    admin = Column(Boolean, nullable=False, default=False, server_default=false())

    # Transient credentials, never persisted
    _password = None
    password_confirmation = None

    # Relationships
    microposts = relationship(
        Micropost,
        back_populates="user",
        order_by=[Micropost.created_at.desc(), Micropost.id.desc()],
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    relationships = relationship(
        Relationship,
        foreign_keys=[Relationship.follower_id],
        back_populates="follower",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reverse_relationships = relationship(
        Relationship,
        foreign_keys=[Relationship.followed_id],
        back_populates="followed",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    # Read-only views over the relationships table; follow/unfollow go through Relationship rows
    followed_users = relationship(
        "User",
        secondary="relationships",
        primaryjoin="User.id == Relationship.follower_id",
        secondaryjoin="User.id == Relationship.followed_id",
        viewonly=True,
    )
    followers = relationship(
        "User",
        secondary="relationships",
        primaryjoin="User.id == Relationship.followed_id",
        secondaryjoin="User.id == Relationship.follower_id",
        viewonly=True,
    )

    @property
    def password(self) -> str | None:
        return self._password

    @password.setter
    def password(self, value: str | None) -> None:
        """Keep the plaintext for validation and derive the digest from it.

        A blank password leaves any existing digest alone; validation reports it.
        """
        self._password = value
        if value and value.strip():
            self.password_digest = get_password_hash(value)

    @property
    def is_admin(self) -> bool:
        return bool(self.admin)

    @property
    def password_changed(self) -> bool:
        return self._password is not None

    def authenticate(self, candidate: str) -> "User | Literal[False]":
        """Return this user if ``candidate`` matches the stored digest, else ``False``."""
        if not self.password_digest:
            return False
        if verify_password(candidate, self.password_digest):
            return self
        return False

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"

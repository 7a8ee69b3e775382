"""User service for validation, credentials, admin rights and the follow graph."""

import logging
from typing import Any

from sqlalchemy import func, inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from microblog.errors import RecordInvalid, RecordNotFound
from microblog.models.micropost import Micropost
from microblog.models.relationship import Relationship
from microblog.models.user import User
from microblog.security import generate_remember_token
from microblog.validation import TAKEN, ValidationErrors, validate_relationship, validate_user

logger = logging.getLogger(__name__)


def _is_email_conflict(error: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed: users.email"; PostgreSQL names the ix_users_email index
    message = str(error.orig).lower()
    return "email" in message and ("unique" in message or "duplicate" in message)


class UserService:
    """Service for user persistence and user-centric queries."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def is_valid(self, user: User) -> bool:
        """Run validation and record the outcome on ``user.errors``."""
        user.errors = validate_user(self.db, user)
        return not user.errors

    def save(self, user: User, validate: bool = True) -> bool:
        """Validate and persist ``user``.

        Returns False, leaving the reasons on ``user.errors``, when validation
        fails or the store rejects a duplicate email that slipped past the
        application-level check. A saved user that fails validation is reloaded
        from the database, so the rejected values are gone from the object.
        """
        if validate:
            if not self.is_valid(user):
                if inspect(user).persistent:
                    self._discard_changes(user)
                return False
        else:
            user.errors = ValidationErrors()

        if user.email:
            user.email = user.email.lower()
        if not user.remember_token:
            user.remember_token = generate_remember_token()
        email = user.email

        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not _is_email_conflict(e):
                raise
            logger.warning(f"Email uniqueness enforced by the database for {email!r}")
            user.errors = ValidationErrors()
            user.errors.add("email", TAKEN)
            return False

        self.db.refresh(user)
        return True

    def _discard_changes(self, user: User) -> None:
        # Reload the stored row so a later commit cannot write the rejected values.
        # errors is not a mapped attribute and survives the refresh.
        self.db.refresh(user)
        user._password = None
        user.password_confirmation = None

    def save_or_raise(self, user: User) -> User:
        """Persist ``user`` or raise RecordInvalid."""
        if not self.save(user):
            raise RecordInvalid(user, user.errors)
        return user

    def create(self, **attributes: Any) -> User:
        """Build a user from accessible attributes and try to save it.

        The returned user is unsaved when ``user.errors`` is non-empty.
        """
        user = User(**attributes)
        if self.save(user):
            logger.info(f"Created user {user.id} <{user.email}>")
        return user

    def update_attributes(self, user: User, **attributes: Any) -> bool:
        """Mass-assign accessible attributes and save."""
        user.assign_attributes(attributes)
        return self.save(user)

    def destroy(self, user: User) -> None:
        """Delete ``user``; the database cascades to posts and relationships."""
        user_id = user.id
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Destroyed user {user_id}")

    # ------------------------------------------------------------------
    # Privileged attributes
    # ------------------------------------------------------------------

    def grant_admin(self, user: User, admin: bool = True) -> User:
        """Set the admin flag. Skips validation, like any single-column update.

        Raises RecordInvalid if the store rejects the row.
        """
        user.admin = admin
        if not self.save(user, validate=False):
            raise RecordInvalid(user, user.errors)
        logger.info(f"Set admin={admin} for user {user.id}")
        return user

    def toggle_admin(self, user: User) -> User:
        """Flip the admin flag."""
        return self.grant_admin(user, not user.is_admin)

    def reset_remember_token(self, user: User) -> str:
        """Issue a fresh remember token, invalidating the previous one."""
        user.remember_token = generate_remember_token()
        if not self.save(user, validate=False):
            raise RecordInvalid(user, user.errors)
        return user.remember_token

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find(self, user_id: int) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise RecordNotFound("User", user_id)
        return user

    def find_by_email(self, email: str) -> User | None:
        """Get a user by email, ignoring case."""
        return self.db.query(User).filter(func.lower(User.email) == email.lower()).first()

    def find_by_remember_token(self, token: str) -> User | None:
        return self.db.query(User).filter(User.remember_token == token).first()

    def authenticate(self, email: str, password: str) -> User | None:
        """Authenticate a user by email and password."""
        user = self.find_by_email(email)
        if not user:
            return None
        return user.authenticate(password) or None

    # ------------------------------------------------------------------
    # Follow graph
    # ------------------------------------------------------------------

    def _find_relationship(self, user: User, other: User) -> Relationship | None:
        return (
            self.db.query(Relationship)
            .filter(
                Relationship.follower_id == user.id,
                Relationship.followed_id == other.id,
            )
            .first()
        )

    def is_following(self, user: User, other: User) -> bool:
        """Check whether ``user`` follows ``other``."""
        return self._find_relationship(user, other) is not None

    def follow(self, user: User, other: User) -> Relationship:
        """Make ``user`` follow ``other``.

        Following someone already followed returns the existing row.
        """
        existing = self._find_relationship(user, other)
        if existing is not None:
            return existing

        relationship = Relationship(follower_id=user.id, followed_id=other.id)
        errors = validate_relationship(relationship)
        if errors:
            raise RecordInvalid(relationship, errors)

        self.db.add(relationship)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against an identical follow; the unique constraint kept one row
            self.db.rollback()
            logger.warning(f"Concurrent follow {user.id} -> {other.id}, using existing row")
            existing = self._find_relationship(user, other)
            if existing is None:
                raise
            return existing

        logger.info(f"User {user.id} followed user {other.id}")
        return relationship

    def unfollow(self, user: User, other: User) -> None:
        """Make ``user`` stop following ``other``. No-op if not following."""
        relationship = self._find_relationship(user, other)
        if relationship is None:
            return

        self.db.delete(relationship)
        self.db.commit()
        logger.info(f"User {user.id} unfollowed user {other.id}")

    def feed(self, user: User) -> list[Micropost]:
        """Posts by ``user`` and by everyone ``user`` follows, newest first."""
        return (
            self.db.query(Micropost)
            .filter(Micropost.from_users_followed_by(user))
            .order_by(Micropost.created_at.desc(), Micropost.id.desc())
            .all()
        )

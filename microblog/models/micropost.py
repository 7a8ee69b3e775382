"""Micropost model."""

from sqlalchemy import Column, ForeignKey, Index, Integer, String, or_, select
from sqlalchemy.orm import relationship

from microblog.database import Base
from microblog.models.mixins import MassAssignmentMixin, TimestampMixin, ValidatesMixin
from microblog.models.relationship import Relationship

CONTENT_MAX_LENGTH = 140


class Micropost(MassAssignmentMixin, ValidatesMixin, TimestampMixin, Base):
    """Short post owned by a single user."""

    __tablename__ = "microposts"
    __table_args__ = (Index("ix_microposts_user_id_created_at", "user_id", "created_at"),)
    __accessible_attributes__ = frozenset({"content"})

    id = Column(Integer, primary_key=True, index=True)
    content = Column(String(CONTENT_MAX_LENGTH), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="microposts")

    @classmethod
    def from_users_followed_by(cls, user):
        """Filter criterion for the posts of ``user`` and of everyone ``user`` follows.

        The followed ids are a subquery so the whole feed is one statement.
        """
        followed_user_ids = select(Relationship.followed_id).where(
            Relationship.follower_id == user.id
        )
        return or_(cls.user_id.in_(followed_user_ids), cls.user_id == user.id)

    def __repr__(self) -> str:
        return f"<Micropost id={self.id} user_id={self.user_id}>"

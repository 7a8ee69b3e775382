"""Micropost service."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from microblog.errors import RecordNotFound
from microblog.models.micropost import Micropost
from microblog.models.user import User
from microblog.validation import validate_micropost

logger = logging.getLogger(__name__)


class MicropostService:
    """Service for creating and removing microposts."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user: User, content: str, created_at: datetime | None = None) -> Micropost:
        """Create a post owned by ``user``.

        An invalid post is returned unsaved with ``errors`` set.
        """
        micropost = Micropost(content=content)
        # Owner and timestamp are not mass-assignable
        micropost.user_id = user.id
        if created_at is not None:
            micropost.created_at = created_at

        micropost.errors = validate_micropost(micropost)
        if micropost.errors:
            return micropost

        self.db.add(micropost)
        self.db.commit()
        self.db.refresh(micropost)
        logger.info(f"User {user.id} posted micropost {micropost.id}")
        return micropost

    def find(self, micropost_id: int) -> Micropost:
        micropost = self.db.query(Micropost).filter(Micropost.id == micropost_id).first()
        if micropost is None:
            raise RecordNotFound("Micropost", micropost_id)
        return micropost

    def destroy(self, micropost: Micropost) -> None:
        micropost_id = micropost.id
        self.db.delete(micropost)
        self.db.commit()
        logger.info(f"Destroyed micropost {micropost_id}")

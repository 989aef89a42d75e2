"""ORM model for one direction of a mutual friendship."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer

from moodwave.database import Base
from .base import utcnow


class Friendship(Base):
    """Directed row; every (user, friend) row has a (friend, user) twin."""

    __tablename__ = "friendships"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    friend_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


__all__ = ["Friendship"]

"""SQLAlchemy ORM model for mood posts."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from moodwave.database import Base
from .base import utcnow


class MoodPost(Base):
    __tablename__ = "mood_posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    track_id = Column(String(255), nullable=False)
    track_name = Column(String(500), nullable=False)
    artist_name = Column(String(500), nullable=False)
    album_cover = Column(String(1024), nullable=True)
    note = Column(Text, nullable=True)
    start_time_ms = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    author = relationship("User", back_populates="mood_posts")


__all__ = ["MoodPost"]

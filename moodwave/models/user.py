"""SQLAlchemy ORM model for registered identities."""
from __future__ import annotations

from sqlalchemy import BigInteger, Column, Integer, String, Text
from sqlalchemy.orm import relationship

from moodwave.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_id = Column(String(255), unique=True, nullable=False, index=True)
    public_id = Column(String(8), unique=True, nullable=False, index=True)
    display_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    profile_image = Column(String(1024), nullable=True)
    followers = Column(Integer, nullable=False, default=0)
    bio = Column(Text, nullable=False, default="")

    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=False)
    # Epoch seconds
    token_expiry = Column(BigInteger, nullable=False)

    mood_posts = relationship("MoodPost", back_populates="author", cascade="all, delete-orphan")
    sessions = relationship("AuthSession", back_populates="user", cascade="all, delete-orphan")

    # Internal ids are never reused, even after deletes.
    __table_args__ = {"sqlite_autoincrement": True}


__all__ = ["User"]

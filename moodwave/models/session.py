"""ORM model for server-side login sessions."""
from __future__ import annotations

import secrets

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from moodwave.database import Base
from .base import utcnow


def _generate_session_id() -> str:
    return secrets.token_urlsafe(32)


def _generate_state() -> str:
    return secrets.token_hex(16)


class AuthSession(Base):
    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True, default=_generate_session_id)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    authenticated = Column(Boolean, nullable=False, default=False)
    oauth_state = Column(String(64), nullable=False, default=_generate_state)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    user = relationship("User", back_populates="sessions")


__all__ = ["AuthSession"]

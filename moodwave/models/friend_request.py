"""ORM model representing friend invitations between users."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, text
from sqlalchemy.orm import relationship

from moodwave.database import Base
from .base import utcnow

REQUEST_STATUSES = ("pending", "accepted", "rejected")


class FriendRequest(Base):
    __tablename__ = "friend_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Unordered pair, smaller id first
    pair_low_id = Column(Integer, nullable=False)
    pair_high_id = Column(Integer, nullable=False)
    status = Column(Enum(*REQUEST_STATUSES, name="friend_request_status"), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])

    __table_args__ = (
        # At most one pending request per unordered pair.
        Index(
            "uq_friend_request_pending_pair",
            "pair_low_id",
            "pair_high_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )


__all__ = ["FriendRequest", "REQUEST_STATUSES"]

"""Friendship graph stored as paired directed rows."""
from __future__ import annotations

from fastapi import HTTPException, status
from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import ConflictError
from ..models import Friendship, User


def _pair_clause(user_id: int, friend_id: int):
    return or_(
        and_(Friendship.user_id == user_id, Friendship.friend_id == friend_id),
        and_(Friendship.user_id == friend_id, Friendship.friend_id == user_id),
    )


def stage_link(db: Session, user_id: int, friend_id: int) -> None:
    """Add both directions to the session without committing.

    This is the only place friendship rows are created; callers commit it
    together with whatever else belongs to the same transaction.
    """

    if user_id == friend_id:
        raise ConflictError("Cannot befriend yourself")
    for owner, other in ((user_id, friend_id), (friend_id, user_id)):
        if db.get(Friendship, (owner, other)) is None:
            db.add(Friendship(user_id=owner, friend_id=other))


def link(db: Session, user_id: int, friend_id: int) -> None:
    """Idempotently store the friendship in both directions."""

    stage_link(db, user_id, friend_id)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create friendship") from exc


def unlink(db: Session, user_id: int, friend_id: int) -> bool:
    """Remove both directions in one statement; ``True`` if anything was removed."""

    try:
        result = db.execute(delete(Friendship).where(_pair_clause(user_id, friend_id)))
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to remove friend") from exc
    return (result.rowcount or 0) > 0


def are_friends(db: Session, user_id: int, friend_id: int) -> bool:
    return db.get(Friendship, (user_id, friend_id)) is not None


def list_friend_ids(db: Session, user_id: int) -> list[int]:
    stmt = select(Friendship.friend_id).where(Friendship.user_id == user_id)
    return list(db.scalars(stmt))


def list_friends(db: Session, user_id: int) -> list[User]:
    """Users reachable from ``user_id``; links to missing users are skipped."""

    stmt = (
        select(User)
        .join(Friendship, Friendship.friend_id == User.id)
        .where(Friendship.user_id == user_id)
        .order_by(Friendship.created_at.asc(), User.id.asc())
    )
    return list(db.scalars(stmt))


__all__ = [
    "stage_link",
    "link",
    "unlink",
    "are_friends",
    "list_friend_ids",
    "list_friends",
]

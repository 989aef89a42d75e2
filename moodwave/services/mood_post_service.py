"""Business logic for mood posts."""
from __future__ import annotations

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import ForbiddenError, NotFoundError, ValidationFailureError
from ..models import MoodPost, User
from ..models.base import utcnow
from ..schemas import MoodPostCreate

_REQUIRED_FIELDS = ("track_id", "track_name", "artist_name")


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def create_mood_post(db: Session, *, author: User, payload: MoodPostCreate) -> MoodPost:
    """Persist a post for ``author``; id and timestamp are assigned here."""

    required = {}
    for field in _REQUIRED_FIELDS:
        value = getattr(payload, field).strip()
        if not value:
            raise ValidationFailureError({"field": field, "reason": "must not be blank"})
        required[field] = value

    post = MoodPost(
        user_id=author.id,
        album_cover=_optional_text(payload.album_cover),
        note=_optional_text(payload.note),
        start_time_ms=payload.start_time_ms or 0,
        created_at=utcnow(),
        **required,
    )
    try:
        db.add(post)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create post") from exc
    db.refresh(post)
    return post


def get_mood_post(db: Session, post_id: int) -> MoodPost | None:
    return db.get(MoodPost, post_id)


def newest_first(stmt):
    # Identical timestamps fall back to id, giving a total order.
    return stmt.order_by(MoodPost.created_at.desc(), MoodPost.id.desc())


def list_posts_by_author(db: Session, author_id: int) -> list[MoodPost]:
    stmt = newest_first(select(MoodPost).where(MoodPost.user_id == author_id))
    return list(db.scalars(stmt))


def delete_mood_post(db: Session, *, post_id: int, caller: User) -> MoodPost:
    post = db.get(MoodPost, post_id)
    if post is None:
        raise NotFoundError("Mood post not found")
    if int(post.user_id) != int(caller.id):
        raise ForbiddenError("Not authorized to delete this post")

    try:
        db.delete(post)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete post") from exc
    return post


__all__ = [
    "create_mood_post",
    "get_mood_post",
    "newest_first",
    "list_posts_by_author",
    "delete_mood_post",
]

from __future__ import annotations

from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models import User
from .friend_request_service import pair_requests
from .friendship_service import are_friends
from .identity_service import get_user_by_public_id, update_bio


def friendship_status(db: Session, *, viewer_id: int, other_id: int) -> str:
    """One of ``none``, ``pending``, ``accepted`` or ``friends`` as seen by ``viewer_id``."""

    if are_friends(db, viewer_id, other_id):
        return "friends"
    for request in pair_requests(db, viewer_id, other_id):
        if request.status in ("pending", "accepted"):
            return str(request.status)
    return "none"


def get_profile(db: Session, *, viewer: User, public_id: str) -> tuple[User, str]:
    user = get_user_by_public_id(db, public_id)
    if user is None:
        raise NotFoundError("User not found")
    return user, friendship_status(db, viewer_id=int(viewer.id), other_id=int(user.id))


def update_own_bio(db: Session, *, user: User, bio: str) -> User:
    updated = update_bio(db, int(user.id), bio)
    if updated is None:
        raise NotFoundError("User not found")
    return updated


__all__ = ["friendship_status", "get_profile", "update_own_bio"]

"""Friends-only mood feed."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import MoodPost, User
from .friendship_service import list_friends
from .mood_post_service import newest_first


@dataclass(slots=True)
class FeedEntry:
    post: MoodPost
    author: User


def friends_feed(db: Session, *, user_id: int) -> list[FeedEntry]:
    """Posts by the user's current friends, newest first.

    Authors are read alongside the posts so profile edits show up on old posts.
    """

    friends = {int(friend.id): friend for friend in list_friends(db, user_id)}
    if not friends:
        return []

    stmt = newest_first(select(MoodPost).where(MoodPost.user_id.in_(list(friends))))
    return [FeedEntry(post=post, author=friends[int(post.user_id)]) for post in db.scalars(stmt)]


__all__ = ["FeedEntry", "friends_feed"]

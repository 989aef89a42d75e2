"""Convenience exports for ORM models."""
from .friend_request import REQUEST_STATUSES, FriendRequest
from .friendship import Friendship
from .mood_post import MoodPost
from .session import AuthSession
from .user import User

__all__ = [
    "AuthSession",
    "FriendRequest",
    "Friendship",
    "MoodPost",
    "REQUEST_STATUSES",
    "User",
]

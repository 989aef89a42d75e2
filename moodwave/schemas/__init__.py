"""Convenience exports for schema layer."""
from .auth import LoginUrlResponse, LogoutResponse, ProviderIdentity, SessionStatusResponse
from .friends import (
    ActionResponse,
    FriendRequestDecision,
    FriendRequestListItem,
    FriendRequestPayload,
    FriendRequestResponse,
    RequestStatus,
)
from .mood_posts import FeedItemResponse, MoodPostCreate, MoodPostResponse
from .users import (
    AccountResponse,
    BioUpdateRequest,
    FriendshipStatus,
    ProfileWithStatusResponse,
    UserProfileResponse,
    UserSummary,
)

__all__ = [
    "AccountResponse",
    "BioUpdateRequest",
    "FeedItemResponse",
    "ActionResponse",
    "FriendRequestDecision",
    "FriendRequestListItem",
    "FriendRequestPayload",
    "FriendRequestResponse",
    "FriendshipStatus",
    "LoginUrlResponse",
    "LogoutResponse",
    "MoodPostCreate",
    "MoodPostResponse",
    "ProfileWithStatusResponse",
    "ProviderIdentity",
    "RequestStatus",
    "SessionStatusResponse",
    "UserProfileResponse",
    "UserSummary",
]

"""Schemas for identity summaries and profile endpoints."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

FriendshipStatus = Literal["none", "pending", "accepted", "friends"]


class UserSummary(BaseModel):
    """Public-facing identity card attached to requests, friends and posts."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    public_id: str
    display_name: str
    profile_image: str | None = None


class UserProfileResponse(UserSummary):
    bio: str = ""


class ProfileWithStatusResponse(UserProfileResponse):
    friendship_status: FriendshipStatus


class AccountResponse(UserProfileResponse):
    """The caller's own record, without credentials."""

    external_id: str
    email: str | None = None
    followers: int = 0


class BioUpdateRequest(BaseModel):
    bio: str


__all__ = [
    "FriendshipStatus",
    "UserSummary",
    "UserProfileResponse",
    "ProfileWithStatusResponse",
    "AccountResponse",
    "BioUpdateRequest",
]

"""Schemas for friend requests and friend listings."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .users import UserSummary

RequestStatus = Literal["pending", "accepted", "rejected"]


class FriendRequestPayload(BaseModel):
    receiver_public_id: str = Field(..., min_length=1, max_length=32)


class FriendRequestDecision(BaseModel):
    status: Literal["accepted", "rejected"]


class FriendRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sender_id: int
    receiver_id: int
    status: RequestStatus
    created_at: datetime
    updated_at: datetime


class FriendRequestListItem(BaseModel):
    """A request seen from the caller's side; ``user`` is the other party."""

    id: int
    status: RequestStatus
    created_at: datetime
    updated_at: datetime
    is_sender: bool
    user: UserSummary | None = None


class ActionResponse(BaseModel):
    success: bool
    message: str | None = None


__all__ = [
    "RequestStatus",
    "FriendRequestPayload",
    "FriendRequestDecision",
    "FriendRequestResponse",
    "FriendRequestListItem",
    "ActionResponse",
]

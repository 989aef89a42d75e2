"""Pydantic schemas for mood post resources."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .users import UserSummary


class MoodPostCreate(BaseModel):
    """Payload used by API clients when sharing a track.

    Ids and timestamps are assigned server-side; unknown keys are dropped.
    """

    track_id: str = Field(..., min_length=1, max_length=255)
    track_name: str = Field(..., min_length=1, max_length=500)
    artist_name: str = Field(..., min_length=1, max_length=500)
    album_cover: str | None = Field(default=None, max_length=1024)
    note: str | None = Field(default=None, max_length=1000)
    start_time_ms: int = Field(default=0, ge=0)


class MoodPostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    track_id: str
    track_name: str
    artist_name: str
    album_cover: str | None = None
    note: str | None = None
    start_time_ms: int = 0
    created_at: datetime


class FeedItemResponse(MoodPostResponse):
    """Post plus its author's current summary."""

    user: UserSummary | None = None


__all__ = ["MoodPostCreate", "MoodPostResponse", "FeedItemResponse"]

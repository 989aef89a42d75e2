"""Mood post creation and deletion."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..schemas import ActionResponse, MoodPostCreate, MoodPostResponse, UserSummary
from ..services import (
    CallerContext,
    NotificationHub,
    build_event,
    create_mood_post,
    delete_mood_post,
    get_caller,
    get_notification_hub,
    list_friend_ids,
)

router = APIRouter(prefix="/api/mood-posts", tags=["mood-posts"])


@router.post("", response_model=MoodPostResponse, status_code=status.HTTP_201_CREATED)
async def share_mood(
    payload: MoodPostCreate,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
    hub: NotificationHub = Depends(get_notification_hub),
) -> MoodPostResponse:
    post = create_mood_post(db, author=caller.user, payload=payload)
    response = MoodPostResponse.model_validate(post)
    await hub.push(
        list_friend_ids(db, caller.user_id),
        build_event(
            "mood_post.created",
            post=response.model_dump(mode="json"),
            user=UserSummary.model_validate(caller.user).model_dump(),
        ),
    )
    return response


@router.delete("/{post_id}", response_model=ActionResponse)
async def remove_mood_post(
    post_id: int,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
    hub: NotificationHub = Depends(get_notification_hub),
) -> ActionResponse:
    delete_mood_post(db, post_id=post_id, caller=caller.user)
    await hub.push(list_friend_ids(db, caller.user_id), build_event("mood_post.deleted", post_id=post_id))
    return ActionResponse(success=True, message="Mood post deleted")


__all__ = ["router"]

"""Friend request, friend list and friends feed routes."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..errors import NotFoundError
from ..schemas import (
    ActionResponse,
    FeedItemResponse,
    FriendRequestDecision,
    FriendRequestListItem,
    FriendRequestPayload,
    FriendRequestResponse,
    MoodPostResponse,
    RequestStatus,
    UserSummary,
)
from ..services import (
    CallerContext,
    NotificationHub,
    build_event,
    friends_feed,
    get_caller,
    get_notification_hub,
    list_friends,
    list_requests_for_user,
    respond_to_request,
    send_friend_request,
    unlink,
)

router = APIRouter(prefix="/api/friends", tags=["friends"])
logger = logging.getLogger(__name__)


@router.post("/requests", response_model=FriendRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_friend_request(
    payload: FriendRequestPayload,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
    hub: NotificationHub = Depends(get_notification_hub),
) -> FriendRequestResponse:
    request = send_friend_request(db, sender=caller.user, receiver_public_id=payload.receiver_public_id)
    response = FriendRequestResponse.model_validate(request)
    await hub.push(
        int(request.receiver_id),
        build_event(
            "friend_request.created",
            request=response.model_dump(mode="json"),
            sender=UserSummary.model_validate(caller.user).model_dump(),
        ),
    )
    return response


@router.get("/requests", response_model=list[FriendRequestListItem])
async def list_friend_requests(
    status_filter: RequestStatus | None = Query(None, alias="status"),
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
) -> list[FriendRequestListItem]:
    views = list_requests_for_user(db, user_id=caller.user_id, status_filter=status_filter)
    return [
        FriendRequestListItem(
            id=view.request.id,
            status=view.request.status,
            created_at=view.request.created_at,
            updated_at=view.request.updated_at,
            is_sender=view.is_sender,
            user=UserSummary.model_validate(view.other_user) if view.other_user is not None else None,
        )
        for view in views
    ]


@router.patch("/requests/{request_id}", response_model=FriendRequestResponse)
async def decide_friend_request(
    request_id: int,
    payload: FriendRequestDecision,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
    hub: NotificationHub = Depends(get_notification_hub),
) -> FriendRequestResponse:
    request = respond_to_request(db, request_id=request_id, responder=caller.user, decision=payload.status)
    response = FriendRequestResponse.model_validate(request)
    await hub.push(
        int(request.sender_id),
        build_event("friend_request.updated", request=response.model_dump(mode="json")),
    )
    return response


@router.get("", response_model=list[UserSummary])
async def friends_list(
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
) -> list[UserSummary]:
    return [UserSummary.model_validate(friend) for friend in list_friends(db, caller.user_id)]


@router.get("/mood-posts", response_model=list[FeedItemResponse])
async def friends_mood_feed(
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
) -> list[FeedItemResponse]:
    return [
        FeedItemResponse(
            **MoodPostResponse.model_validate(entry.post).model_dump(),
            user=UserSummary.model_validate(entry.author),
        )
        for entry in friends_feed(db, user_id=caller.user_id)
    ]


@router.delete("/{friend_id}", response_model=ActionResponse)
async def remove_friend(
    friend_id: int,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
    hub: NotificationHub = Depends(get_notification_hub),
) -> ActionResponse:
    if not unlink(db, caller.user_id, friend_id):
        raise NotFoundError("Friendship not found")
    logger.info("User %s removed friend %s", caller.user_id, friend_id)
    await hub.push(friend_id, build_event("friendship.removed", user_id=caller.user_id))
    return ActionResponse(success=True, message="Friend removed")


__all__ = ["router"]

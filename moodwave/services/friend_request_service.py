"""Friend request lifecycle: pending -> accepted | rejected."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import ConflictError, ForbiddenError, NotFoundError, ValidationFailureError
from ..models import REQUEST_STATUSES, FriendRequest, User
from ..models.base import utcnow
from .friendship_service import are_friends, stage_link
from .identity_service import get_user_by_public_id

logger = logging.getLogger(__name__)

DECISIONS = ("accepted", "rejected")


@dataclass(slots=True)
class FriendRequestView:
    request: FriendRequest
    other_user: User | None
    is_sender: bool


def _ordered_pair(a: int, b: int) -> tuple[int, int]:
    return (a, b) if a < b else (b, a)


def pair_requests(db: Session, user_id: int, other_id: int) -> list[FriendRequest]:
    """All requests between the unordered pair, newest first."""

    low, high = _ordered_pair(user_id, other_id)
    stmt = (
        select(FriendRequest)
        .where(FriendRequest.pair_low_id == low, FriendRequest.pair_high_id == high)
        .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
    )
    return list(db.scalars(stmt))


def send_friend_request(db: Session, *, sender: User, receiver_public_id: str) -> FriendRequest:
    receiver = get_user_by_public_id(db, receiver_public_id)
    if receiver is None:
        raise NotFoundError("User not found")

    sender_id = int(sender.id)
    receiver_id = int(receiver.id)
    if receiver_id == sender_id:
        raise ConflictError("Cannot send a friend request to yourself")

    if are_friends(db, sender_id, receiver_id):
        raise ConflictError("Already friends with this user")

    # At most one pending or accepted record per pair. An accepted one
    # outlives an unlink and keeps blocking new requests. No await sits
    # between this check and the insert; the partial unique index on the
    # pair backs it up for stores with real concurrency.
    for existing in pair_requests(db, sender_id, receiver_id):
        if existing.status == "pending":
            raise ConflictError("Friend request already pending")
        if existing.status == "accepted":
            raise ConflictError("Already friends with this user")

    low, high = _ordered_pair(sender_id, receiver_id)
    now = utcnow()
    request = FriendRequest(
        sender_id=sender_id,
        receiver_id=receiver_id,
        pair_low_id=low,
        pair_high_id=high,
        status="pending",
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(request)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("Friend request already pending") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to send request") from exc

    db.refresh(request)
    logger.info("Friend request %s: %s -> %s", request.id, sender_id, receiver_id)
    return request


def respond_to_request(db: Session, *, request_id: int, responder: User, decision: str) -> FriendRequest:
    """Apply the receiver's decision; acceptance links both users in the same commit."""

    if decision not in DECISIONS:
        raise ValidationFailureError("Invalid status")

    request = db.get(FriendRequest, request_id)
    if request is None:
        raise NotFoundError("Friend request not found")
    if int(request.receiver_id) != int(responder.id):
        raise ForbiddenError("Not authorized to respond to this request")
    if request.status != "pending":
        raise ConflictError(f"Friend request already {request.status}")

    request.status = decision
    request.updated_at = utcnow()
    if decision == "accepted":
        stage_link(db, int(request.receiver_id), int(request.sender_id))

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to apply decision on friend request %s", request_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update request") from exc

    db.refresh(request)
    return request


def list_requests_for_user(db: Session, *, user_id: int, status_filter: str | None = None) -> list[FriendRequestView]:
    if status_filter is not None and status_filter not in REQUEST_STATUSES:
        raise ValidationFailureError("Invalid status filter")

    stmt = select(FriendRequest).where(
        or_(FriendRequest.sender_id == user_id, FriendRequest.receiver_id == user_id)
    )
    if status_filter is not None:
        stmt = stmt.where(FriendRequest.status == status_filter)
    stmt = stmt.order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())

    views: list[FriendRequestView] = []
    for request in db.scalars(stmt):
        is_sender = int(request.sender_id) == user_id
        other_id = request.receiver_id if is_sender else request.sender_id
        views.append(FriendRequestView(request=request, other_user=db.get(User, other_id), is_sender=is_sender))
    return views


__all__ = [
    "DECISIONS",
    "FriendRequestView",
    "pair_requests",
    "send_friend_request",
    "respond_to_request",
    "list_requests_for_user",
]

"""Friend request lifecycle against a fresh store."""
from __future__ import annotations

import pytest
from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from moodwave.errors import ConflictError, ForbiddenError, NotFoundError, ValidationFailureError
from moodwave.models import FriendRequest, Friendship
from moodwave.services import (
    are_friends,
    friends_feed,
    create_mood_post,
    list_friends,
    list_requests_for_user,
    respond_to_request,
    send_friend_request,
    unlink,
)
from moodwave.schemas import MoodPostCreate


def _pending_count(db, a, b) -> int:
    low, high = sorted((a.id, b.id))
    stmt = select(func.count()).select_from(FriendRequest).where(
        FriendRequest.pair_low_id == low,
        FriendRequest.pair_high_id == high,
        FriendRequest.status == "pending",
    )
    return db.scalar(stmt)


def test_example_scenario(user_factory, db):
    alice = user_factory("Alice")
    bob = user_factory("Bob")

    request = send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)
    assert request.status == "pending"

    pending_for_bob = list_requests_for_user(db, user_id=bob.id, status_filter="pending")
    assert len(pending_for_bob) == 1
    assert pending_for_bob[0].is_sender is False
    assert pending_for_bob[0].other_user.id == alice.id

    respond_to_request(db, request_id=request.id, responder=bob, decision="accepted")
    assert [user.id for user in list_friends(db, alice.id)] == [bob.id]
    assert [user.id for user in list_friends(db, bob.id)] == [alice.id]

    create_mood_post(db, author=bob, payload=MoodPostCreate(track_id="t1", track_name="Track One", artist_name="Band"))
    feed = friends_feed(db, user_id=alice.id)
    assert [(entry.post.track_id, entry.author.id) for entry in feed] == [("t1", bob.id)]

    assert unlink(db, alice.id, bob.id) is True
    assert friends_feed(db, user_id=alice.id) == []


def test_receiver_public_id_is_normalised(user_factory, db):
    alice = user_factory()
    bob = user_factory()

    request = send_friend_request(db, sender=alice, receiver_public_id=f"  {bob.public_id.lower()} ")

    assert request.receiver_id == bob.id


def test_unknown_receiver_is_not_found(user_factory, db):
    alice = user_factory()

    with pytest.raises(NotFoundError) as exc_info:
        send_friend_request(db, sender=alice, receiver_public_id="NOPE0000")
    assert exc_info.value.status_code == 404


def test_self_request_is_rejected_without_creating_anything(user_factory, db):
    alice = user_factory()

    with pytest.raises(ConflictError):
        send_friend_request(db, sender=alice, receiver_public_id=alice.public_id)

    assert db.scalar(select(func.count()).select_from(FriendRequest)) == 0


@pytest.mark.parametrize("second_sender", ["same", "reverse"])
def test_duplicate_pending_is_rejected_in_either_direction(user_factory, db, second_sender):
    alice = user_factory()
    bob = user_factory()
    send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)

    sender, receiver = (alice, bob) if second_sender == "same" else (bob, alice)
    with pytest.raises(ConflictError) as exc_info:
        send_friend_request(db, sender=sender, receiver_public_id=receiver.public_id)

    assert "pending" in exc_info.value.detail
    assert _pending_count(db, alice, bob) == 1


def test_already_friends_is_rejected(user_factory, db):
    alice = user_factory()
    bob = user_factory()
    request = send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)
    respond_to_request(db, request_id=request.id, responder=bob, decision="accepted")

    with pytest.raises(ConflictError) as exc_info:
        send_friend_request(db, sender=bob, receiver_public_id=alice.public_id)
    assert exc_info.value.detail == "Already friends with this user"


def test_only_receiver_may_respond(user_factory, db):
    alice = user_factory()
    bob = user_factory()
    carol = user_factory()
    request = send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)

    for outsider in (alice, carol):
        with pytest.raises(ForbiddenError):
            respond_to_request(db, request_id=request.id, responder=outsider, decision="accepted")

    db.refresh(request)
    assert request.status == "pending"
    assert not are_friends(db, alice.id, bob.id)


def test_respond_to_missing_request(user_factory, db):
    bob = user_factory()
    with pytest.raises(NotFoundError):
        respond_to_request(db, request_id=321, responder=bob, decision="accepted")


def test_invalid_decision_is_a_validation_failure(user_factory, db):
    alice = user_factory()
    bob = user_factory()
    request = send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)

    with pytest.raises(ValidationFailureError):
        respond_to_request(db, request_id=request.id, responder=bob, decision="pending")


def test_terminal_states_do_not_transition(user_factory, db):
    alice = user_factory()
    bob = user_factory()
    request = send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)
    respond_to_request(db, request_id=request.id, responder=bob, decision="rejected")

    with pytest.raises(ConflictError):
        respond_to_request(db, request_id=request.id, responder=bob, decision="accepted")
    assert not are_friends(db, alice.id, bob.id)


def test_acceptance_creates_both_directions(user_factory, db):
    alice = user_factory()
    bob = user_factory()
    request = send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)

    accepted = respond_to_request(db, request_id=request.id, responder=bob, decision="accepted")

    assert accepted.status == "accepted"
    assert accepted.updated_at >= accepted.created_at
    assert are_friends(db, alice.id, bob.id)
    assert are_friends(db, bob.id, alice.id)


def test_rejection_does_not_block_a_new_request(user_factory, db):
    alice = user_factory()
    bob = user_factory()
    first = send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)
    respond_to_request(db, request_id=first.id, responder=bob, decision="rejected")

    second = send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)

    assert second.id != first.id
    assert second.status == "pending"


def test_unfriended_pair_keeps_a_single_active_record(user_factory, db):
    alice = user_factory()
    bob = user_factory()
    request = send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)
    respond_to_request(db, request_id=request.id, responder=bob, decision="accepted")
    unlink(db, alice.id, bob.id)

    with pytest.raises(ConflictError) as exc_info:
        send_friend_request(db, sender=bob, receiver_public_id=alice.public_id)

    assert exc_info.value.detail == "Already friends with this user"
    low, high = sorted((alice.id, bob.id))
    active = db.scalars(
        select(FriendRequest).where(
            FriendRequest.pair_low_id == low,
            FriendRequest.pair_high_id == high,
            FriendRequest.status.in_(("pending", "accepted")),
        )
    ).all()
    assert [record.id for record in active] == [request.id]


def test_store_rejects_second_pending_row_for_pair(user_factory, db):
    alice = user_factory()
    bob = user_factory()
    send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)
    low, high = sorted((alice.id, bob.id))

    db.add(FriendRequest(sender_id=bob.id, receiver_id=alice.id, pair_low_id=low, pair_high_id=high, status="pending"))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_failed_commit_applies_neither_status_nor_friendship(user_factory, db, monkeypatch):
    alice = user_factory()
    bob = user_factory()
    request = send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)

    def _fail() -> None:
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", _fail)
    with pytest.raises(HTTPException) as exc_info:
        respond_to_request(db, request_id=request.id, responder=bob, decision="accepted")
    monkeypatch.undo()

    assert exc_info.value.status_code == 500
    assert db.get(FriendRequest, request.id).status == "pending"
    assert db.scalar(select(func.count()).select_from(Friendship)) == 0


def test_list_requests_for_user(user_factory, db):
    alice = user_factory("Alice")
    bob = user_factory("Bob")
    carol = user_factory("Carol")
    to_bob = send_friend_request(db, sender=alice, receiver_public_id=bob.public_id)
    from_carol = send_friend_request(db, sender=carol, receiver_public_id=alice.public_id)
    respond_to_request(db, request_id=from_carol.id, responder=alice, decision="rejected")

    everything = list_requests_for_user(db, user_id=alice.id)
    pending = list_requests_for_user(db, user_id=alice.id, status_filter="pending")

    assert [(view.request.id, view.is_sender, view.other_user.display_name) for view in everything] == [
        (from_carol.id, False, "Carol"),
        (to_bob.id, True, "Bob"),
    ]
    assert [view.request.id for view in pending] == [to_bob.id]
    assert list_requests_for_user(db, user_id=bob.id, status_filter="rejected") == []


def test_list_requests_rejects_unknown_filter(user_factory, db):
    alice = user_factory()
    with pytest.raises(ValidationFailureError):
        list_requests_for_user(db, user_id=alice.id, status_filter="maybe")

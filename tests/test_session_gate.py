"""Session resolution: every failure is the same 401."""
from __future__ import annotations

import time

import pytest
from sqlalchemy import delete

from moodwave.errors import UnauthenticatedError
from moodwave.models import User
from moodwave.security.secrets import MissingSecretError, require_secret
from moodwave.services import (
    authenticate_session,
    create_session,
    decode_session_token,
    destroy_session,
    issue_session_token,
    resolve_session,
    update_tokens,
)


@pytest.fixture
def signed_in(user_factory, db):
    user = user_factory()
    record = create_session(db)
    authenticate_session(db, record.id, user.id)
    return user, record, issue_session_token(record.id, max_age_seconds=600)


def _assert_rejected(db, token) -> None:
    with pytest.raises(UnauthenticatedError) as exc_info:
        resolve_session(db, token)
    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Not authenticated"


def test_valid_session_resolves_to_caller(signed_in, db):
    user, record, token = signed_in

    caller = resolve_session(db, token)

    assert caller.user.id == user.id
    assert caller.user_id == user.id
    assert caller.session_id == record.id


def test_new_session_starts_unauthenticated_with_state(db):
    record = create_session(db)

    assert record.authenticated is False
    assert record.user_id is None
    assert len(record.oauth_state) == 32
    _assert_rejected(db, issue_session_token(record.id, max_age_seconds=600))


@pytest.mark.parametrize("token", [None, "", "not-a-token"])
def test_missing_or_malformed_token(db, token):
    _assert_rejected(db, token)


def test_expired_token(signed_in, db):
    _, record, _ = signed_in
    expired = issue_session_token(record.id, max_age_seconds=-30)

    assert decode_session_token(expired) is None
    _assert_rejected(db, expired)


def test_destroyed_session(signed_in, db):
    _, record, token = signed_in

    assert destroy_session(db, record.id) is True
    assert destroy_session(db, record.id) is False
    _assert_rejected(db, token)


def test_session_for_deleted_identity(signed_in, db):
    user, _, token = signed_in
    db.execute(delete(User).where(User.id == user.id))
    db.commit()
    db.expunge_all()

    _assert_rejected(db, token)


def test_expired_upstream_credentials_invalidate_session(signed_in, db):
    user, _, token = signed_in
    update_tokens(db, user.id, access_token="a", refresh_token="r", token_expiry=int(time.time()) - 1)

    _assert_rejected(db, token)


def test_require_secret_refuses_placeholders(monkeypatch):
    monkeypatch.setenv("MOODWAVE_TEST_SECRET", "changeme")
    with pytest.raises(MissingSecretError):
        require_secret("MOODWAVE_TEST_SECRET")

    monkeypatch.setenv("MOODWAVE_TEST_SECRET", "short")
    with pytest.raises(MissingSecretError):
        require_secret("MOODWAVE_TEST_SECRET")

    monkeypatch.setenv("MOODWAVE_TEST_SECRET", "  a-long-enough-signing-secret  ")
    assert require_secret("MOODWAVE_TEST_SECRET") == "a-long-enough-signing-secret"


@pytest.mark.parametrize("token", [123, ["a"], {"sid": "x"}])
def test_non_string_token_is_rejected(db, token):
    assert decode_session_token(token) is None
    _assert_rejected(db, token)

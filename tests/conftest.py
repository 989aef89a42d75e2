"""Shared fixtures: a fresh in-memory store and app per test."""
from __future__ import annotations

import itertools
import os
from typing import Any, Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

os.environ.setdefault("SESSION_SECRET", "moodwave-test-session-secret")

from moodwave.clients import SpotifyClientError  # noqa: E402
from moodwave.config import IN_MEMORY_DATABASE_URL, Settings  # noqa: E402
from moodwave.database import Database  # noqa: E402
from moodwave.main import create_app  # noqa: E402
from moodwave.models import User  # noqa: E402
from moodwave.schemas import ProviderIdentity  # noqa: E402
from moodwave.services import (  # noqa: E402
    authenticate_session,
    create_session,
    create_user,
    issue_session_token,
)

# 2100-01-01T00:00:00Z
FAR_FUTURE_EXPIRY = 4_102_444_800


def make_identity(external_id: str, display_name: str, **overrides: Any) -> ProviderIdentity:
    fields: dict[str, Any] = {
        "external_id": external_id,
        "display_name": display_name,
        "access_token": f"access-{external_id}",
        "refresh_token": f"refresh-{external_id}",
        "token_expiry": FAR_FUTURE_EXPIRY,
    }
    fields.update(overrides)
    return ProviderIdentity(**fields)


class FakeSpotify:
    """In-process stand-in for the upstream login and catalog service."""

    def __init__(self) -> None:
        self.identities: dict[str, ProviderIdentity] = {}
        self.catalog: dict[str, Any] = {}
        self.calls: list[tuple[str, str, dict[str, Any] | None]] = []
        self.fail_catalog = False

    def authorize_url(self, state: str) -> str:
        return f"https://accounts.example.test/authorize?state={state}"

    async def complete_login(self, code: str) -> ProviderIdentity:
        try:
            return self.identities[code]
        except KeyError as exc:
            raise SpotifyClientError("unknown code") from exc

    async def get_catalog(self, path: str, access_token: str, params: dict[str, Any] | None = None) -> Any | None:
        self.calls.append((path, access_token, params))
        if self.fail_catalog:
            raise SpotifyClientError(f"Request to {path} returned 503")
        return self.catalog.get(path)


@pytest.fixture
def db() -> Iterator[Session]:
    database = Database(IN_MEMORY_DATABASE_URL)
    database.init_schema()
    session = database.create_session()
    try:
        yield session
    finally:
        session.close()
        database.dispose()


@pytest.fixture
def user_factory(db: Session) -> Callable[..., User]:
    counter = itertools.count(1)

    def _factory(display_name: str | None = None, **overrides: Any) -> User:
        number = next(counter)
        return create_user(db, make_identity(f"ext-{number}", display_name or f"listener{number}", **overrides))

    return _factory


@pytest.fixture
def fake_spotify() -> FakeSpotify:
    return FakeSpotify()


@pytest.fixture
def app(fake_spotify: FakeSpotify):
    settings = Settings(database_url=IN_MEMORY_DATABASE_URL, log_level="WARNING")
    return create_app(settings, spotify_client=fake_spotify)


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sign_in(app) -> Callable[..., tuple[User, dict[str, str]]]:
    """Register a user in the app's store and return it with bearer headers."""

    counter = itertools.count(1)

    def _sign_in(display_name: str | None = None, **overrides: Any) -> tuple[User, dict[str, str]]:
        number = next(counter)
        session = app.state.database.create_session()
        try:
            user = create_user(session, make_identity(f"api-{number}", display_name or f"member{number}", **overrides))
            record = create_session(session)
            authenticate_session(session, record.id, int(user.id))
            token = issue_session_token(record.id, max_age_seconds=3600)
        finally:
            session.close()
        return user, {"Authorization": f"Bearer {token}"}

    return _sign_in

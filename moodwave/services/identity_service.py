"""Identity store: lookups and mutations for registered users."""
from __future__ import annotations

import logging
import secrets

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import PUBLIC_ID_ALPHABET, PUBLIC_ID_LENGTH
from ..models import User
from ..schemas import ProviderIdentity

logger = logging.getLogger(__name__)


def generate_public_id() -> str:
    return "".join(secrets.choice(PUBLIC_ID_ALPHABET) for _ in range(PUBLIC_ID_LENGTH))


def _unused_public_id(db: Session) -> str:
    while True:
        candidate = generate_public_id()
        if get_user_by_public_id(db, candidate) is None:
            return candidate
        logger.warning("Public id collision on %s; regenerating", candidate)


def _commit(db: Session, failure_detail: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(failure_detail)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure_detail) from exc


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def get_user_by_external_id(db: Session, external_id: str) -> User | None:
    return db.scalar(select(User).where(User.external_id == external_id))


def normalize_public_id(public_id: str) -> str:
    return public_id.strip().upper()


def get_user_by_public_id(db: Session, public_id: str) -> User | None:
    """Look up by public id; surrounding whitespace and letter case are ignored."""

    candidate = normalize_public_id(public_id)
    if not candidate:
        return None
    return db.scalar(select(User).where(User.public_id == candidate))


def create_user(db: Session, profile: ProviderIdentity) -> User:
    """Register a new identity with a freshly generated public id."""

    user = User(
        external_id=profile.external_id,
        public_id=_unused_public_id(db),
        display_name=profile.display_name,
        email=profile.email or None,
        profile_image=profile.profile_image or None,
        followers=profile.followers or 0,
        bio="",
        access_token=profile.access_token,
        refresh_token=profile.refresh_token,
        token_expiry=profile.token_expiry,
    )
    db.add(user)
    _commit(db, "Unable to register user")
    db.refresh(user)
    logger.info("Registered user %s (public id %s)", user.id, user.public_id)
    return user


def update_tokens(
    db: Session,
    user_id: int,
    *,
    access_token: str,
    refresh_token: str,
    token_expiry: int,
) -> User | None:
    """Overwrite the stored upstream credentials; ``None`` when the user is gone."""

    user = db.get(User, user_id)
    if user is None:
        return None
    user.access_token = access_token
    user.refresh_token = refresh_token
    user.token_expiry = token_expiry
    _commit(db, "Unable to store credentials")
    db.refresh(user)
    return user


def upsert_from_provider(db: Session, profile: ProviderIdentity) -> User:
    """Refresh credentials of a known identity, or register a new one."""

    existing = get_user_by_external_id(db, profile.external_id)
    if existing is None:
        return create_user(db, profile)
    updated = update_tokens(
        db,
        int(existing.id),
        access_token=profile.access_token,
        refresh_token=profile.refresh_token,
        token_expiry=profile.token_expiry,
    )
    return updated if updated is not None else create_user(db, profile)


def update_bio(db: Session, user_id: int, bio: str) -> User | None:
    user = db.get(User, user_id)
    if user is None:
        return None
    user.bio = bio
    _commit(db, "Failed to update profile")
    db.refresh(user)
    return user


def search_users(db: Session, query: str) -> list[User]:
    """Case-insensitive substring match on display name or public id.

    Returns every match. Callers exclude themselves and paginate.
    """

    stmt = (
        select(User)
        .where(
            or_(
                User.display_name.icontains(query, autoescape=True),
                User.public_id.icontains(query, autoescape=True),
            )
        )
        .order_by(User.id.asc())
    )
    return list(db.scalars(stmt))


__all__ = [
    "generate_public_id",
    "normalize_public_id",
    "get_user",
    "get_user_by_external_id",
    "get_user_by_public_id",
    "create_user",
    "update_tokens",
    "upsert_from_provider",
    "update_bio",
    "search_users",
]

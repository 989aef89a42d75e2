"""Session/access gate: server-side sessions addressed by a signed token."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import SESSION_COOKIE_NAME
from ..database import get_session
from ..errors import UnauthenticatedError
from ..models import AuthSession, User
from ..security.secrets import MissingSecretError, require_secret

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

ALGORITHM = "HS256"


@dataclass(slots=True)
class CallerContext:
    """The resolved caller, handed explicitly to every gated operation."""

    user: User
    session_id: str

    @property
    def user_id(self) -> int:
        return int(self.user.id)


@lru_cache(maxsize=1)
def _get_session_secret() -> str:
    try:
        return require_secret("SESSION_SECRET", fallback=get_settings().session_secret)
    except MissingSecretError as exc:
        raise RuntimeError(str(exc)) from exc


def _commit(db: Session, failure_detail: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(failure_detail)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure_detail) from exc


def create_session(db: Session) -> AuthSession:
    """Open an unauthenticated session carrying a fresh OAuth state nonce."""

    record = AuthSession(authenticated=False)
    db.add(record)
    _commit(db, "Unable to create session")
    db.refresh(record)
    logger.info("Session %s... created", record.id[:8])
    return record


def load_session(db: Session, session_id: str) -> AuthSession | None:
    return db.get(AuthSession, session_id)


def authenticate_session(db: Session, session_id: str, user_id: int) -> AuthSession | None:
    record = db.get(AuthSession, session_id)
    if record is None:
        return None
    record.user_id = user_id
    record.authenticated = True
    _commit(db, "Unable to update session")
    db.refresh(record)
    logger.info("Session %s... bound to user %s", session_id[:8], user_id)
    return record


def destroy_session(db: Session, session_id: str) -> bool:
    record = db.get(AuthSession, session_id)
    if record is None:
        return False
    db.delete(record)
    _commit(db, "Unable to end session")
    logger.info("Session %s... destroyed", session_id[:8])
    return True


def issue_session_token(session_id: str, *, max_age_seconds: int) -> str:
    now = datetime.now(timezone.utc)
    payload = {"sid": session_id, "iat": now, "exp": now + timedelta(seconds=max_age_seconds)}
    return jwt.encode(payload, _get_session_secret(), algorithm=ALGORITHM)


def decode_session_token(token: str | None) -> str | None:
    """Return the session id held in ``token``; ``None`` if it is missing, forged or expired."""

    if not isinstance(token, str) or not token:
        return None
    try:
        payload = jwt.decode(token, _get_session_secret(), algorithms=[ALGORITHM])
    except JWTError:
        return None
    session_id = payload.get("sid")
    return session_id if isinstance(session_id, str) and session_id else None


def credentials_expired(user: User, *, now: int | None = None) -> bool:
    # token_expiry is stored in epoch seconds; compare in the same unit.
    current = int(time.time()) if now is None else now
    return int(user.token_expiry) <= current


def resolve_session(db: Session, token: str | None) -> CallerContext:
    """Map a session token to its caller or raise :class:`UnauthenticatedError`.

    Every failure looks the same to the client whatever the cause.
    """

    session_id = decode_session_token(token)
    if session_id is None:
        raise UnauthenticatedError()

    record = db.get(AuthSession, session_id)
    if record is None or not record.authenticated or record.user_id is None:
        raise UnauthenticatedError()

    user = db.get(User, record.user_id)
    if user is None:
        logger.info("Session %s... refers to a missing user", session_id[:8])
        raise UnauthenticatedError()
    if credentials_expired(user):
        logger.info("Upstream credentials for user %s expired; session rejected", user.id)
        raise UnauthenticatedError()

    return CallerContext(user=user, session_id=session_id)


def extract_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    """Bearer header first, then the session cookie."""

    if credentials and credentials.scheme.lower() == "bearer":
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE_NAME)


async def get_caller(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_session),
) -> CallerContext:
    """FastAPI dependency gating every core route."""

    return resolve_session(db, extract_token(request, credentials))


__all__ = [
    "ALGORITHM",
    "bearer_scheme",
    "CallerContext",
    "create_session",
    "load_session",
    "authenticate_session",
    "destroy_session",
    "issue_session_token",
    "decode_session_token",
    "credentials_expired",
    "resolve_session",
    "extract_token",
    "get_caller",
]

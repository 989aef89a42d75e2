"""External login flow backed by the auth provider."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..clients import AuthProvider, SpotifyClientError, get_spotify_client
from ..config import Settings
from ..constants import SESSION_COOKIE_NAME
from ..database import get_session
from ..errors import UnauthenticatedError
from ..schemas import AccountResponse, LoginUrlResponse, LogoutResponse, SessionStatusResponse
from ..services import (
    authenticate_session,
    create_session,
    decode_session_token,
    destroy_session,
    issue_session_token,
    load_session,
    resolve_session,
    upsert_from_provider,
)
from ..services.session_service import bearer_scheme, extract_token

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)

FAILURE_REDIRECT = "/?error=auth_failure"


def _settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/login", response_model=LoginUrlResponse)
async def login(
    request: Request,
    response: Response,
    db: Session = Depends(get_session),
    provider: AuthProvider = Depends(get_spotify_client),
) -> LoginUrlResponse:
    settings = _settings(request)
    record = create_session(db)
    try:
        url = provider.authorize_url(record.oauth_state)
    except SpotifyClientError as exc:
        logger.error("Cannot start login: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Login is not configured") from exc

    token = issue_session_token(record.id, max_age_seconds=settings.session_max_age_seconds)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return LoginUrlResponse(url=url)


@router.get("/callback")
async def callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    db: Session = Depends(get_session),
    provider: AuthProvider = Depends(get_spotify_client),
) -> RedirectResponse:
    """Complete the login started by ``/login`` and bind the session to the identity."""

    failure = RedirectResponse(FAILURE_REDIRECT, status_code=status.HTTP_302_FOUND)
    if error or not code:
        logger.warning("Login callback without code (error=%s)", error)
        return failure

    session_id = decode_session_token(request.cookies.get(SESSION_COOKIE_NAME))
    record = load_session(db, session_id) if session_id else None
    if record is None or not state or state != record.oauth_state:
        logger.warning("Login callback with unknown session or mismatched state")
        return failure

    try:
        identity = await provider.complete_login(code)
    except SpotifyClientError:
        logger.exception("Login exchange with the auth provider failed")
        return failure

    user = upsert_from_provider(db, identity)
    authenticate_session(db, record.id, int(user.id))
    return RedirectResponse("/", status_code=status.HTTP_302_FOUND)


@router.get("/logout", response_model=LogoutResponse)
async def logout(
    request: Request,
    response: Response,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_session),
) -> LogoutResponse:
    session_id = decode_session_token(extract_token(request, credentials))
    if session_id:
        destroy_session(db, session_id)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return LogoutResponse(message="Logged out")


@router.get("/me", response_model=SessionStatusResponse)
async def session_status(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_session),
):
    try:
        caller = resolve_session(db, extract_token(request, credentials))
    except UnauthenticatedError:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"authenticated": False})
    return SessionStatusResponse(authenticated=True, user=AccountResponse.model_validate(caller.user))


__all__ = ["router"]

"""Pydantic schemas for the external login flow and session checks."""
from __future__ import annotations

from pydantic import BaseModel, Field

from .users import AccountResponse


class ProviderIdentity(BaseModel):
    """Identity and credentials yielded by the auth provider for one login."""

    external_id: str = Field(..., min_length=1)
    display_name: str
    email: str | None = None
    profile_image: str | None = None
    followers: int = 0
    access_token: str
    refresh_token: str
    # Epoch seconds
    token_expiry: int


class LoginUrlResponse(BaseModel):
    url: str


class SessionStatusResponse(BaseModel):
    authenticated: bool
    user: AccountResponse | None = None


class LogoutResponse(BaseModel):
    success: bool = True
    message: str


__all__ = ["ProviderIdentity", "LoginUrlResponse", "SessionStatusResponse", "LogoutResponse"]

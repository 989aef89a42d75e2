from __future__ import annotations

import logging
import time
from typing import Any, Protocol
from urllib.parse import urlencode

import httpx
from fastapi import Request

from ..config import Settings
from ..constants import CATALOG_SCOPES
from ..schemas import ProviderIdentity

logger = logging.getLogger(__name__)


class SpotifyClientError(RuntimeError):
    """Raised when the accounts service or the catalog API fails."""


class AuthProvider(Protocol):
    """What the login flow and the catalog routes need from the upstream service."""

    def authorize_url(self, state: str) -> str: ...

    async def complete_login(self, code: str) -> ProviderIdentity: ...

    async def get_catalog(
        self, path: str, access_token: str, params: dict[str, Any] | None = None
    ) -> Any | None: ...


class SpotifyClient:
    """Thin httpx wrapper around the Spotify accounts and Web API endpoints."""

    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._settings = settings
        self._transport = transport
        self._timeout = float(settings.upstream_timeout_seconds or 10.0)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    def authorize_url(self, state: str) -> str:
        client_id = self._settings.spotify_client_id
        if not client_id:
            raise SpotifyClientError("SPOTIFY_CLIENT_ID is not configured")
        query = urlencode(
            {
                "response_type": "code",
                "client_id": client_id,
                "scope": CATALOG_SCOPES,
                "redirect_uri": self._settings.spotify_redirect_uri,
                "state": state,
                "show_dialog": "true",
            }
        )
        return f"{self._settings.spotify_accounts_url.rstrip('/')}/authorize?{query}"

    async def complete_login(self, code: str) -> ProviderIdentity:
        """Exchange an authorization code and read the profile it grants access to."""

        client_id = self._settings.spotify_client_id
        client_secret = self._settings.spotify_client_secret
        if not client_id or not client_secret:
            raise SpotifyClientError("Spotify client credentials are not configured")

        token_url = f"{self._settings.spotify_accounts_url.rstrip('/')}/api/token"
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self._settings.spotify_redirect_uri,
        }
        try:
            async with self._client() as client:
                token_response = await client.post(token_url, data=form, auth=(client_id, client_secret))
                token_response.raise_for_status()
                tokens = token_response.json()

                access_token = tokens["access_token"]
                profile_response = await client.get(
                    f"{self._settings.spotify_api_base.rstrip('/')}/me",
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                profile_response.raise_for_status()
                profile = profile_response.json()
        except httpx.HTTPError as exc:
            logger.warning("Spotify login exchange failed: %s", exc)
            raise SpotifyClientError("Login exchange failed") from exc
        except (KeyError, ValueError) as exc:
            raise SpotifyClientError("Malformed token response") from exc

        images = profile.get("images") or []
        followers = profile.get("followers") or {}
        try:
            return ProviderIdentity(
                external_id=profile["id"],
                display_name=profile.get("display_name") or profile["id"],
                email=profile.get("email"),
                profile_image=images[0].get("url") if images else None,
                followers=int(followers.get("total") or 0),
                access_token=access_token,
                refresh_token=tokens.get("refresh_token") or "",
                token_expiry=int(time.time()) + int(tokens.get("expires_in") or 3600),
            )
        except (KeyError, ValueError, TypeError) as exc:
            raise SpotifyClientError("Malformed profile response") from exc

    async def get_catalog(self, path: str, access_token: str, params: dict[str, Any] | None = None) -> Any | None:
        """GET ``path`` with the caller's bearer credential and relay the JSON body.

        A 204 (nothing playing) comes back as ``None``.
        """

        url = f"{self._settings.spotify_api_base.rstrip('/')}/{path.lstrip('/')}"
        try:
            async with self._client() as client:
                response = await client.get(
                    url,
                    params=params,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.HTTPError as exc:
            logger.warning("Spotify request to %s failed: %s", path, exc)
            raise SpotifyClientError(f"Request to {path} failed") from exc

        if response.status_code == 204:
            return None
        if response.is_error:
            logger.warning("Spotify request to %s returned %s", path, response.status_code)
            raise SpotifyClientError(f"Request to {path} returned {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise SpotifyClientError(f"Invalid JSON from {path}") from exc


def get_spotify_client(request: Request) -> AuthProvider:
    return request.app.state.spotify_client


__all__ = ["AuthProvider", "SpotifyClient", "SpotifyClientError", "get_spotify_client"]

"""Pass-through routes to the music catalog, authorized with the caller's credential."""
from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Depends, Query

from ..clients import AuthProvider, SpotifyClientError, get_spotify_client
from ..errors import UpstreamFailureError
from ..services import CallerContext, get_caller

router = APIRouter(prefix="/api/me", tags=["catalog"])

TimeRange = Literal["short_term", "medium_term", "long_term"]


async def _relay(provider: AuthProvider, caller: CallerContext, path: str, params: dict[str, Any]) -> Any:
    try:
        return await provider.get_catalog(path, str(caller.user.access_token), params)
    except SpotifyClientError as exc:
        raise UpstreamFailureError() from exc


@router.get("/top/artists")
async def top_artists(
    time_range: TimeRange = Query("medium_term"),
    limit: int = Query(20, ge=1, le=50),
    caller: CallerContext = Depends(get_caller),
    provider: AuthProvider = Depends(get_spotify_client),
) -> Any:
    return await _relay(provider, caller, "me/top/artists", {"time_range": time_range, "limit": limit})


@router.get("/top/tracks")
async def top_tracks(
    time_range: TimeRange = Query("medium_term"),
    limit: int = Query(20, ge=1, le=50),
    caller: CallerContext = Depends(get_caller),
    provider: AuthProvider = Depends(get_spotify_client),
) -> Any:
    return await _relay(provider, caller, "me/top/tracks", {"time_range": time_range, "limit": limit})


@router.get("/player/recently-played")
async def recently_played(
    limit: int = Query(20, ge=1, le=50),
    caller: CallerContext = Depends(get_caller),
    provider: AuthProvider = Depends(get_spotify_client),
) -> Any:
    return await _relay(provider, caller, "me/player/recently-played", {"limit": limit})


@router.get("/player/currently-playing")
async def currently_playing(
    caller: CallerContext = Depends(get_caller),
    provider: AuthProvider = Depends(get_spotify_client),
) -> Any:
    # JSON null when nothing is playing.
    return await _relay(provider, caller, "me/player/currently-playing", {})


__all__ = ["router"]

"""Upstream HTTP clients."""
from .spotify import AuthProvider, SpotifyClient, SpotifyClientError, get_spotify_client

__all__ = ["AuthProvider", "SpotifyClient", "SpotifyClientError", "get_spotify_client"]

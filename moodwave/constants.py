"""Project-wide constant values."""
from __future__ import annotations

PUBLIC_ID_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
PUBLIC_ID_LENGTH = 8

SESSION_COOKIE_NAME = "session"

CATALOG_SCOPES = "user-read-private user-read-email user-top-read"

__all__ = ["PUBLIC_ID_ALPHABET", "PUBLIC_ID_LENGTH", "SESSION_COOKIE_NAME", "CATALOG_SCOPES"]

"""Load signing secrets from the environment without echoing their values."""
from __future__ import annotations

import os
from typing import Final

__all__ = ["MissingSecretError", "require_secret", "is_placeholder"]


class MissingSecretError(RuntimeError):
    """Raised when a required secret is unset or still a placeholder."""


_PLACEHOLDER_VALUES: Final[set[str]] = {
    "changeme",
    "change-me",
    "placeholder",
    "secret",
    "your-session-secret",
}

MIN_SECRET_LENGTH: Final[int] = 16


def is_placeholder(value: str | None) -> bool:
    if not value:
        return True
    normalized = value.strip().lower()
    return not normalized or normalized in _PLACEHOLDER_VALUES


def require_secret(name: str, *, fallback: str | None = None) -> str:
    """Return the trimmed secret held in ``name``, else ``fallback``.

    Placeholders and values shorter than ``MIN_SECRET_LENGTH`` are refused so a
    copied sample ``.env`` never signs real sessions.
    """

    value = os.getenv(name) or fallback
    if is_placeholder(value):
        raise MissingSecretError(f"Environment variable {name} is required and must not use placeholder defaults")
    value = value.strip()
    if len(value) < MIN_SECRET_LENGTH:
        raise MissingSecretError(f"Environment variable {name} must be at least {MIN_SECRET_LENGTH} characters")
    return value

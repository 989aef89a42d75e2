"""Utility helpers shared across ORM models."""
from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware now with microsecond precision.

    Assigned client-side so ordering does not depend on the database's
    CURRENT_TIMESTAMP resolution.
    """

    return datetime.now(timezone.utc)


__all__ = ["utcnow"]

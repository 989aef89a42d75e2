"""HTTP-aware domain errors raised by the service layer."""
from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """A referenced identity, request, friendship or post does not exist."""

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    """The operation would break a relationship invariant."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """The resource exists but the caller may not act on it."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthenticatedError(HTTPException):
    """Missing, stale or orphaned session.

    The detail never says which, so callers cannot probe session state.
    """

    def __init__(self) -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")


class UpstreamFailureError(HTTPException):
    """The music catalog or auth provider failed or timed out."""

    def __init__(self, detail: str = "Upstream service unavailable") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class ValidationFailureError(HTTPException):
    def __init__(self, detail: Any) -> None:
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


__all__ = [
    "NotFoundError",
    "ConflictError",
    "ForbiddenError",
    "UnauthenticatedError",
    "UpstreamFailureError",
    "ValidationFailureError",
]

"""User lookup, profile and bio routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_session
from ..errors import NotFoundError, ValidationFailureError
from ..schemas import (
    BioUpdateRequest,
    MoodPostResponse,
    ProfileWithStatusResponse,
    UserProfileResponse,
    UserSummary,
)
from ..services import (
    CallerContext,
    get_caller,
    get_profile,
    get_user_by_public_id,
    list_posts_by_author,
    search_users,
    update_own_bio,
)

router = APIRouter(prefix="/api", tags=["profiles"])

MIN_SEARCH_LENGTH = 2


@router.get("/users/search", response_model=list[UserSummary])
async def search(
    q: str = Query(""),
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
) -> list[UserSummary]:
    query = q.strip()
    if len(query) < MIN_SEARCH_LENGTH:
        raise ValidationFailureError({"field": "q", "reason": "Search query too short"})
    return [
        UserSummary.model_validate(user)
        for user in search_users(db, query)
        if int(user.id) != caller.user_id
    ]


@router.get("/users/{public_id}", response_model=ProfileWithStatusResponse)
async def read_profile(
    public_id: str,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
) -> ProfileWithStatusResponse:
    user, relation = get_profile(db, viewer=caller.user, public_id=public_id)
    return ProfileWithStatusResponse(
        **UserProfileResponse.model_validate(user).model_dump(),
        friendship_status=relation,
    )


@router.get("/users/{public_id}/mood-posts", response_model=list[MoodPostResponse])
async def author_mood_posts(
    public_id: str,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
) -> list[MoodPostResponse]:
    author = get_user_by_public_id(db, public_id)
    if author is None:
        raise NotFoundError("User not found")
    return [MoodPostResponse.model_validate(post) for post in list_posts_by_author(db, int(author.id))]


@router.patch("/me/profile", response_model=UserProfileResponse)
async def update_profile(
    payload: BioUpdateRequest,
    caller: CallerContext = Depends(get_caller),
    db: Session = Depends(get_session),
) -> UserProfileResponse:
    user = update_own_bio(db, user=caller.user, bio=payload.bio)
    return UserProfileResponse.model_validate(user)


__all__ = ["router"]

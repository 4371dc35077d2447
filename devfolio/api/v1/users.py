"""
User API routes.
Provides public profiles and follow/block management.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.core.database import get_db
from devfolio.dependencies import get_current_user, get_current_user_optional
from devfolio.models.user import User
from devfolio.schemas.common import DataResponse
from devfolio.schemas.user import FollowStatus, UserPublicProfile, UserSummary
from devfolio.services.user_service import UserService

router = APIRouter()


@router.get(
    "/blocked",
    response_model=DataResponse[List[UserSummary]],
    summary="List users I have blocked"
)
async def list_blocked_users(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return DataResponse(data=await UserService(db).list_blocked(current_user))


@router.get(
    "/{user_id}",
    response_model=DataResponse[UserPublicProfile],
    summary="Get a user's public profile"
)
async def get_user_profile(
    user_id: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db)
):
    """
    Get a public profile with follower counts.

    Authenticated viewers also get ``is_following``, ``is_blocked`` and
    ``can_message``. Returns 403 if the user has blocked the viewer.
    """
    profile = await UserService(db).get_profile(user_id, viewer=current_user)
    return DataResponse(data=profile)


@router.get(
    "/{user_id}/followers",
    response_model=DataResponse[List[UserSummary]],
    summary="List a user's followers"
)
async def list_followers(user_id: str, db: AsyncSession = Depends(get_db)):
    return DataResponse(data=await UserService(db).list_followers(user_id))


@router.get(
    "/{user_id}/following",
    response_model=DataResponse[List[UserSummary]],
    summary="List users a user follows"
)
async def list_following(user_id: str, db: AsyncSession = Depends(get_db)):
    return DataResponse(data=await UserService(db).list_following(user_id))


@router.post(
    "/{user_id}/follow",
    response_model=DataResponse[FollowStatus],
    summary="Follow a user"
)
async def follow_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return DataResponse(data=await UserService(db).follow(current_user, user_id))


@router.delete(
    "/{user_id}/follow",
    response_model=DataResponse[FollowStatus],
    summary="Unfollow a user"
)
async def unfollow_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return DataResponse(data=await UserService(db).unfollow(current_user, user_id))


@router.post(
    "/{user_id}/block",
    response_model=DataResponse[FollowStatus],
    summary="Block a user"
)
async def block_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Block a user. Follow edges in both directions are removed."""
    return DataResponse(data=await UserService(db).block(current_user, user_id))


@router.delete(
    "/{user_id}/block",
    response_model=DataResponse[FollowStatus],
    summary="Unblock a user"
)
async def unblock_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return DataResponse(data=await UserService(db).unblock(current_user, user_id))

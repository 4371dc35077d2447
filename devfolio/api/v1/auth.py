"""
Authentication API endpoints.
Provides registration, login and self-service account management.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.config import settings
from devfolio.core.database import get_db
from devfolio.core.rate_limit import limiter
from devfolio.dependencies import get_current_user
from devfolio.models.user import User
from devfolio.schemas.common import DataResponse, StatusResponse
from devfolio.schemas.user import (
    AuthResponse,
    LoginRequest,
    PasswordChange,
    PrivacyUpdate,
    ProfileUpdate,
    RegisterRequest,
    UserPrivateProfile,
)
from devfolio.services.user_service import UserService

router = APIRouter()


@router.post(
    "/register",
    response_model=DataResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create an account"
)
@limiter.limit(settings.rate_limit_auth)
async def register(
    request: Request,
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new user and return a bearer token.

    - **username**: 3-30 characters, unique
    - **email**: unique email address
    - **password**: at least 6 characters
    """
    result = await UserService(db).register(data)
    return DataResponse(data=result)


@router.post(
    "/login",
    response_model=DataResponse[AuthResponse],
    summary="Log in with email or username"
)
@limiter.limit(settings.rate_limit_auth)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Exchange credentials for a bearer token. The ``email`` field also accepts a username."""
    result = await UserService(db).login(credentials.email, credentials.password)
    return DataResponse(data=result)


@router.get(
    "/me",
    response_model=DataResponse[UserPrivateProfile],
    summary="Get own profile"
)
async def get_me(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return DataResponse(data=await UserService(db).get_me(current_user))


@router.put(
    "/profile",
    response_model=DataResponse[UserPrivateProfile],
    summary="Update own profile"
)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update profile fields. Omitted fields are left unchanged."""
    profile = await UserService(db).update_profile(current_user, data)
    return DataResponse(data=profile)


@router.put(
    "/password",
    response_model=StatusResponse,
    summary="Change password"
)
async def change_password(
    data: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await UserService(db).change_password(current_user, data)
    return StatusResponse(message="Password updated successfully")


@router.put(
    "/privacy",
    response_model=DataResponse[UserPrivateProfile],
    summary="Update privacy and messaging settings"
)
async def update_privacy(
    data: PrivacyUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update who can see the profile and who can start conversations.

    - **message_permission**: everyone, followers, existing or none
    - **allow_messages**: master switch for first-contact messages
    """
    profile = await UserService(db).update_privacy(current_user, data)
    return DataResponse(data=profile)

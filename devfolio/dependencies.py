"""
Dependency injection for FastAPI routes.
Provides reusable dependencies for authentication and pagination.
"""
import logging
from typing import Optional

from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.config import settings
from devfolio.core.database import get_db
from devfolio.core.exceptions import AuthenticationError
from devfolio.core.security import decode_token, extract_token_from_header
from devfolio.models.user import User
from devfolio.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

# Keeps (page - 1) * limit inside a 64-bit OFFSET
MAX_PAGE = 1_000_000


async def get_current_user(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user.

    Flow:
    1. Extract the bearer token from the Authorization header
    2. Verify its signature and expiry locally
    3. Load the user named by the ``sub`` claim

    Args:
        authorization: Authorization header containing Bearer token
        db: Database session

    Returns:
        The authenticated User

    Raises:
        AuthenticationError: 401 if the token is missing or invalid, or
            the user no longer exists

    Example:
        ```python
        @router.get("/protected")
        async def protected_route(current_user: User = Depends(get_current_user)):
            return {"user": current_user.username}
        ```
    """
    token = extract_token_from_header(authorization)
    payload = decode_token(token)

    user = await UserRepository(db).get(payload["sub"])
    if not user:
        logger.info("Token subject %s no longer exists", payload["sub"])
        raise AuthenticationError("Not authorized, user not found")

    return user


async def get_current_user_optional(
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """
    Dependency to optionally get the current authenticated user.

    Similar to get_current_user but returns None instead of raising
    if no valid token is provided.

    Example:
        ```python
        @router.get("/public-or-private")
        async def flexible_route(user: Optional[User] = Depends(get_current_user_optional)):
            ...
        ```
    """
    if not authorization:
        return None

    try:
        return await get_current_user(authorization, db)
    except AuthenticationError:
        return None


def get_pagination_params(
    page: int = Query(1, ge=1, le=MAX_PAGE, description="1-based page number"),
    limit: int = Query(settings.messages_page_size, ge=1, description="Items per page (max 100)")
) -> dict:
    """
    Dependency for offset pagination parameters.

    Returns:
        Dictionary with ``page`` and ``limit``, limit capped at 100
    """
    return {
        "page": page,
        "limit": min(limit, 100),
    }

"""
Thread API routes.
Provides community discussion threads, their comments, votes and likes.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.config import settings
from devfolio.core.database import get_db
from devfolio.dependencies import MAX_PAGE, get_current_user, get_current_user_optional
from devfolio.models.user import User
from devfolio.schemas.common import DataResponse, PaginatedResponse, StatusResponse
from devfolio.schemas.project import LikeToggleResult
from devfolio.schemas.thread import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    ThreadCreate,
    ThreadResponse,
    ThreadSort,
    ThreadUpdate,
    VoteRequest,
    VoteResult,
)
from devfolio.services.comment_service import CommentService
from devfolio.services.thread_service import ThreadService

router = APIRouter()


def _viewer_id(user: Optional[User]) -> Optional[str]:
    return user.id if user else None


# ============================================================================
# Comments
# ============================================================================

@router.put(
    "/comments/{comment_id}",
    response_model=DataResponse[CommentResponse],
    summary="Edit a comment"
)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    comment = await CommentService(db).update_comment(comment_id, current_user, data)
    return DataResponse(data=comment)


@router.delete(
    "/comments/{comment_id}",
    response_model=StatusResponse,
    summary="Delete a comment"
)
async def delete_comment(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a comment together with its replies. Only the author may delete."""
    await CommentService(db).delete_comment(comment_id, current_user)
    return StatusResponse(message="Comment deleted successfully")


@router.put(
    "/comments/{comment_id}/like",
    response_model=DataResponse[LikeToggleResult],
    summary="Toggle like on a comment"
)
async def toggle_comment_like(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await CommentService(db).toggle_like(comment_id, current_user)
    return DataResponse(data=result)


@router.put(
    "/comments/{comment_id}/vote",
    response_model=DataResponse[VoteResult],
    summary="Vote on a comment"
)
async def vote_comment(
    comment_id: str,
    data: VoteRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await CommentService(db).vote(comment_id, current_user, data.vote_type)
    return DataResponse(data=result)


# ============================================================================
# Threads
# ============================================================================

@router.get(
    "",
    response_model=PaginatedResponse[ThreadResponse],
    summary="Search threads"
)
async def list_threads(
    search: Optional[str] = Query(None, description="Words that must all appear in title, content or tags"),
    category: Optional[str] = Query(None, description="Category name, or 'All'"),
    sort: ThreadSort = Query(ThreadSort.NEWEST),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(settings.threads_page_size, ge=1, le=100),
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db)
):
    threads, pagination = await ThreadService(db).list_threads(
        search=search,
        category=category,
        sort=sort,
        page=page,
        limit=limit,
        viewer_id=_viewer_id(current_user),
    )
    return PaginatedResponse(data=threads, pagination=pagination)


@router.post(
    "",
    response_model=DataResponse[ThreadResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Start a thread"
)
async def create_thread(
    data: ThreadCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    thread = await ThreadService(db).create_thread(current_user, data)
    return DataResponse(data=thread)


@router.get(
    "/user/{user_id}",
    response_model=PaginatedResponse[ThreadResponse],
    summary="List a user's threads"
)
async def list_user_threads(
    user_id: str,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(settings.threads_page_size, ge=1, le=100),
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db)
):
    """Threads started by ``user_id``, newest first."""
    threads, pagination = await ThreadService(db).list_threads(
        author_id=user_id,
        page=page,
        limit=limit,
        viewer_id=_viewer_id(current_user),
    )
    return PaginatedResponse(data=threads, pagination=pagination)


@router.get(
    "/{thread_id}",
    response_model=DataResponse[ThreadResponse],
    summary="Get a thread"
)
async def get_thread(
    thread_id: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db)
):
    """
    Get a thread and count the view.

    Signed-in viewers are counted once per thread; anonymous views always count.
    """
    thread = await ThreadService(db).get_thread(thread_id, viewer=current_user)
    return DataResponse(data=thread)


@router.put(
    "/{thread_id}",
    response_model=DataResponse[ThreadResponse],
    summary="Update a thread"
)
async def update_thread(
    thread_id: str,
    data: ThreadUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    thread = await ThreadService(db).update_thread(thread_id, current_user, data)
    return DataResponse(data=thread)


@router.delete(
    "/{thread_id}",
    response_model=StatusResponse,
    summary="Delete a thread"
)
async def delete_thread(
    thread_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a thread and all of its comments. Only the author may delete."""
    await ThreadService(db).delete_thread(thread_id, current_user)
    return StatusResponse(message="Thread deleted successfully")


@router.put(
    "/{thread_id}/vote",
    response_model=DataResponse[VoteResult],
    summary="Vote on a thread"
)
async def vote_thread(
    thread_id: str,
    data: VoteRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Upvote or downvote; repeating the same vote withdraws it."""
    result = await ThreadService(db).vote(thread_id, current_user, data.vote_type)
    return DataResponse(data=result)


@router.put(
    "/{thread_id}/like",
    response_model=DataResponse[LikeToggleResult],
    summary="Toggle like on a thread"
)
async def toggle_thread_like(
    thread_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await ThreadService(db).toggle_like(thread_id, current_user)
    return DataResponse(data=result)


@router.post(
    "/{thread_id}/comments",
    response_model=DataResponse[CommentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a thread"
)
async def add_comment(
    thread_id: str,
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    comment = await CommentService(db).add_comment(thread_id, current_user, data)
    return DataResponse(data=comment)


@router.get(
    "/{thread_id}/comments",
    response_model=PaginatedResponse[CommentResponse],
    summary="List a thread's comments"
)
async def list_comments(
    thread_id: str,
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(settings.comments_page_size, ge=1, le=100),
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db)
):
    """Top-level comments newest first, each with its replies oldest first."""
    comments, pagination = await CommentService(db).list_comments(
        thread_id,
        page=page,
        limit=limit,
        viewer_id=_viewer_id(current_user),
    )
    return PaginatedResponse(data=comments, pagination=pagination)

"""
Thread service containing business logic for community discussions.
Handles search, author-only edits, votes, likes and view counting.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.core.exceptions import NotFoundError, PermissionDeniedError
from devfolio.models.thread import Thread, VoteType, user_vote, vote_tally
from devfolio.models.user import User
from devfolio.repositories.reactions import ReactionRepository
from devfolio.repositories.thread_repo import ThreadRepository
from devfolio.schemas.common import PaginationMeta
from devfolio.schemas.project import LikeToggleResult
from devfolio.schemas.thread import (
    ThreadCreate,
    ThreadResponse,
    ThreadSort,
    ThreadUpdate,
    VoteResult,
)
from devfolio.schemas.user import UserSummary

logger = logging.getLogger(__name__)


async def toggle_vote(
    repo: ReactionRepository,
    target_id: str,
    user_id: str,
    vote_type: VoteType
) -> VoteResult:
    """
    Apply a vote toggle and return the new tally.

    Repeating the current vote withdraws it; the opposite vote replaces it.
    """
    current = await repo.get_vote(target_id, user_id)
    if current == vote_type:
        await repo.clear_vote(target_id, user_id)
        current = None
    else:
        await repo.set_vote(target_id, user_id, vote_type)
        current = vote_type

    counts = await repo.vote_counts(target_id)
    return VoteResult(
        vote_score=counts["upvotes"] - counts["downvotes"],
        upvotes=counts["upvotes"],
        downvotes=counts["downvotes"],
        user_vote=current,
    )


async def toggle_like(repo: ReactionRepository, target_id: str, user_id: str) -> LikeToggleResult:
    """Like the target, or unlike it if already liked."""
    if await repo.has_liked(target_id, user_id):
        await repo.remove_like(target_id, user_id)
        is_liked = False
    else:
        await repo.add_like(target_id, user_id)
        is_liked = True

    return LikeToggleResult(likes=await repo.count_likes(target_id), is_liked=is_liked)


class ThreadService:
    """Service for thread operations with business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.thread_repo = ThreadRepository(db)

    @staticmethod
    def _to_response(
        thread: Thread,
        viewer_id: Optional[str] = None,
        comment_count: int = 0
    ) -> ThreadResponse:
        like_ids = thread.like_user_ids
        return ThreadResponse(
            id=thread.id,
            title=thread.title,
            content=thread.content,
            category=thread.category,
            tags=list(thread.tags or []),
            author=UserSummary.model_validate(thread.author),
            views=thread.views,
            likes=len(like_ids),
            is_liked=viewer_id in like_ids if viewer_id else False,
            user_vote=user_vote(thread.votes, viewer_id),
            comment_count=comment_count,
            created_at=thread.created_at,
            updated_at=thread.updated_at,
            **vote_tally(thread.votes),
        )

    async def _get_or_404(self, thread_id: str) -> Thread:
        thread = await self.thread_repo.get_fresh(thread_id)
        if not thread:
            raise NotFoundError("Thread not found")
        return thread

    async def _get_owned(self, thread_id: str, user: User, action: str) -> Thread:
        thread = await self._get_or_404(thread_id)
        if thread.author_id != user.id:
            raise PermissionDeniedError(f"Not authorized to {action} this thread")
        return thread

    async def _single(self, thread_id: str, viewer_id: Optional[str]) -> ThreadResponse:
        thread = await self.thread_repo.get_fresh(thread_id)
        counts = await self.thread_repo.comment_counts([thread.id])
        return self._to_response(thread, viewer_id, counts.get(thread.id, 0))

    async def list_threads(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        author_id: Optional[str] = None,
        sort: ThreadSort = ThreadSort.NEWEST,
        page: int = 1,
        limit: int = 10,
        viewer_id: Optional[str] = None
    ) -> Tuple[List[ThreadResponse], PaginationMeta]:
        """Search threads one page at a time, each with its comment count."""
        threads, total = await self.thread_repo.search(
            search=search,
            category=category,
            author_id=author_id,
            sort=sort.value,
            limit=limit,
            offset=(page - 1) * limit,
        )
        counts = await self.thread_repo.comment_counts([t.id for t in threads])
        return (
            [self._to_response(t, viewer_id, counts.get(t.id, 0)) for t in threads],
            PaginationMeta.build(page=page, limit=limit, total=total),
        )

    async def get_thread(self, thread_id: str, viewer: Optional[User] = None) -> ThreadResponse:
        """
        Get a thread and count the view.

        An authenticated viewer is counted once per thread; anonymous
        requests always count.

        Raises:
            NotFoundError: If the thread does not exist
        """
        await self._get_or_404(thread_id)

        viewer_id = viewer.id if viewer else None
        await self.thread_repo.record_view(thread_id, viewer_id)
        return await self._single(thread_id, viewer_id)

    async def create_thread(self, user: User, data: ThreadCreate) -> ThreadResponse:
        """Start a thread owned by ``user``."""
        thread = await self.thread_repo.create(author_id=user.id, **data.model_dump())
        logger.info("User %s started thread %s", user.id, thread.id)
        return await self._single(thread.id, user.id)

    async def update_thread(self, thread_id: str, user: User, data: ThreadUpdate) -> ThreadResponse:
        """
        Edit a thread. Only the author may edit.

        Raises:
            NotFoundError: If the thread does not exist
            PermissionDeniedError: If the caller is not the author
        """
        await self._get_owned(thread_id, user, "update")

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if changes:
            await self.thread_repo.update(thread_id, **changes)

        return await self._single(thread_id, user.id)

    async def delete_thread(self, thread_id: str, user: User) -> None:
        """
        Delete a thread with all of its comments. Only the author may delete.

        Raises:
            NotFoundError: If the thread does not exist
            PermissionDeniedError: If the caller is not the author
        """
        await self._get_owned(thread_id, user, "delete")
        removed = await self.thread_repo.delete_cascade(thread_id)
        logger.info("User %s deleted thread %s with %d comments", user.id, thread_id, removed)

    async def vote(self, thread_id: str, user: User, vote_type: VoteType) -> VoteResult:
        """Upvote or downvote a thread; repeating a vote withdraws it."""
        await self._get_or_404(thread_id)
        return await toggle_vote(self.thread_repo, thread_id, user.id, vote_type)

    async def toggle_like(self, thread_id: str, user: User) -> LikeToggleResult:
        await self._get_or_404(thread_id)
        return await toggle_like(self.thread_repo, thread_id, user.id)

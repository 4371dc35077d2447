"""
Comment service containing business logic for thread comments.
Top-level comments are paged newest first; replies are one level deep.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from devfolio.models.comment import Comment
from devfolio.models.thread import VoteType, user_vote, vote_tally
from devfolio.models.user import User
from devfolio.repositories.comment_repo import CommentRepository
from devfolio.repositories.thread_repo import ThreadRepository
from devfolio.schemas.common import PaginationMeta
from devfolio.schemas.project import LikeToggleResult
from devfolio.schemas.thread import CommentCreate, CommentResponse, CommentUpdate, VoteResult
from devfolio.schemas.user import UserSummary
from devfolio.services.thread_service import toggle_like, toggle_vote

logger = logging.getLogger(__name__)


class CommentService:
    """Service for comment operations with business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.comment_repo = CommentRepository(db)
        self.thread_repo = ThreadRepository(db)

    @staticmethod
    def _to_response(
        comment: Comment,
        viewer_id: Optional[str] = None,
        replies: Iterable[CommentResponse] = ()
    ) -> CommentResponse:
        like_ids = comment.like_user_ids
        return CommentResponse(
            id=comment.id,
            thread_id=comment.thread_id,
            parent_id=comment.parent_id,
            content=comment.content,
            author=UserSummary.model_validate(comment.author),
            likes=len(like_ids),
            is_liked=viewer_id in like_ids if viewer_id else False,
            user_vote=user_vote(comment.votes, viewer_id),
            is_edited=comment.is_edited,
            replies=list(replies),
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            **vote_tally(comment.votes),
        )

    async def _ensure_thread(self, thread_id: str) -> None:
        if not await self.thread_repo.exists(thread_id):
            raise NotFoundError("Thread not found")

    async def _get_or_404(self, comment_id: str) -> Comment:
        comment = await self.comment_repo.get_fresh(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        return comment

    async def _get_owned(self, comment_id: str, user: User, action: str) -> Comment:
        comment = await self._get_or_404(comment_id)
        if comment.author_id != user.id:
            raise PermissionDeniedError(f"Not authorized to {action} this comment")
        return comment

    async def add_comment(self, thread_id: str, user: User, data: CommentCreate) -> CommentResponse:
        """
        Comment on a thread, or reply to one of its top-level comments.

        Raises:
            NotFoundError: If the thread, or the parent comment within it, does not exist
            ValidationError: If the parent is itself a reply
        """
        await self._ensure_thread(thread_id)

        if data.parent_comment:
            parent = await self.comment_repo.get(data.parent_comment)
            if not parent or parent.thread_id != thread_id:
                raise NotFoundError("Parent comment not found")
            if parent.parent_id is not None:
                raise ValidationError("Replies can only be added to top-level comments")

        comment = await self.comment_repo.create(
            thread_id=thread_id,
            author_id=user.id,
            parent_id=data.parent_comment or None,
            content=data.content,
        )
        logger.info("User %s commented on thread %s", user.id, thread_id)

        comment = await self.comment_repo.get_fresh(comment.id)
        return self._to_response(comment, user.id)

    async def list_comments(
        self,
        thread_id: str,
        page: int = 1,
        limit: int = 20,
        viewer_id: Optional[str] = None
    ) -> Tuple[List[CommentResponse], PaginationMeta]:
        """
        Get one page of top-level comments with their replies.

        Raises:
            NotFoundError: If the thread does not exist
        """
        await self._ensure_thread(thread_id)

        comments, total = await self.comment_repo.list_top_level(
            thread_id, limit=limit, offset=(page - 1) * limit
        )
        replies = await self.comment_repo.list_replies([c.id for c in comments])

        by_parent = {}
        for reply in replies:
            by_parent.setdefault(reply.parent_id, []).append(self._to_response(reply, viewer_id))

        return (
            [self._to_response(c, viewer_id, by_parent.get(c.id, [])) for c in comments],
            PaginationMeta.build(page=page, limit=limit, total=total),
        )

    async def update_comment(self, comment_id: str, user: User, data: CommentUpdate) -> CommentResponse:
        """
        Edit a comment's content and mark it edited. Only the author may edit.

        Raises:
            NotFoundError: If the comment does not exist
            PermissionDeniedError: If the caller is not the author
        """
        await self._get_owned(comment_id, user, "update")
        await self.comment_repo.update(comment_id, content=data.content, is_edited=True)

        comment = await self.comment_repo.get_fresh(comment_id)
        return self._to_response(comment, user.id)

    async def delete_comment(self, comment_id: str, user: User) -> int:
        """
        Delete a comment and its replies. Only the author may delete.

        Returns:
            Number of comments removed

        Raises:
            NotFoundError: If the comment does not exist
            PermissionDeniedError: If the caller is not the author
        """
        await self._get_owned(comment_id, user, "delete")
        removed = await self.comment_repo.delete_with_replies(comment_id)
        logger.info("User %s deleted comment %s (%d removed)", user.id, comment_id, removed)
        return removed

    async def vote(self, comment_id: str, user: User, vote_type: VoteType) -> VoteResult:
        """Upvote or downvote a comment; repeating a vote withdraws it."""
        await self._get_or_404(comment_id)
        return await toggle_vote(self.comment_repo, comment_id, user.id, vote_type)

    async def toggle_like(self, comment_id: str, user: User) -> LikeToggleResult:
        await self._get_or_404(comment_id)
        return await toggle_like(self.comment_repo, comment_id, user.id)

"""
Comment repository for database operations.
"""
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select, and_, or_, func, desc, asc, delete
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.models.comment import Comment, CommentLike, CommentVote
from devfolio.repositories.reactions import ReactionRepository


class CommentRepository(ReactionRepository[Comment]):
    """Repository for comment database operations."""

    like_model = CommentLike
    vote_model = CommentVote
    target_key = "comment_id"

    def __init__(self, db: AsyncSession):
        super().__init__(Comment, db)

    async def get_fresh(self, comment_id: str) -> Optional[Comment]:
        result = await self.db.execute(
            select(Comment)
            .where(Comment.id == comment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_top_level(
        self,
        thread_id: str,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Comment], int]:
        """
        Get one page of a thread's top-level comments, newest first.

        Returns:
            Tuple of (comments, total top-level comments)
        """
        condition = and_(Comment.thread_id == thread_id, Comment.parent_id.is_(None))

        result = await self.db.execute(
            select(Comment)
            .where(condition)
            .order_by(desc(Comment.created_at))
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        total = await self.db.execute(select(func.count()).select_from(Comment).where(condition))
        return list(result.scalars().all()), total.scalar()

    async def list_replies(self, parent_ids: Sequence[str]) -> List[Comment]:
        """Get the replies to the given comments, oldest first."""
        if not parent_ids:
            return []
        result = await self.db.execute(
            select(Comment)
            .where(Comment.parent_id.in_(parent_ids))
            .order_by(asc(Comment.created_at))
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def delete_with_replies(self, comment_id: str) -> int:
        """
        Delete a comment, its replies and their likes and votes.

        Returns:
            Number of comments removed
        """
        comments = Comment.__table__
        doomed = select(comments.c.id).where(
            or_(comments.c.id == comment_id, comments.c.parent_id == comment_id)
        )

        await self.db.execute(delete(CommentLike.__table__).where(CommentLike.__table__.c.comment_id.in_(doomed)))
        await self.db.execute(delete(CommentVote.__table__).where(CommentVote.__table__.c.comment_id.in_(doomed)))
        replies = await self.db.execute(delete(comments).where(comments.c.parent_id == comment_id))
        await self.db.execute(delete(comments).where(comments.c.id == comment_id))
        await self.db.flush()
        return replies.rowcount + 1

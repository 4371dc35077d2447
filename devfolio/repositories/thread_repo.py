"""
Thread repository for database operations.
Handles thread search, comment counts, view tracking and cascade deletes.
"""
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select, and_, or_, func, desc, asc, delete, update, case, cast, String
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.models.comment import Comment, CommentLike, CommentVote
from devfolio.models.thread import Thread, ThreadLike, ThreadView, ThreadVote, VoteType
from devfolio.repositories.reactions import ReactionRepository
from devfolio.utils.datetime_utils import utc_now


def _vote_score():
    return (
        select(
            func.coalesce(
                func.sum(case((ThreadVote.vote_type == VoteType.UPVOTE, 1), else_=-1)),
                0
            )
        )
        .where(ThreadVote.thread_id == Thread.id)
        .correlate(Thread)
        .scalar_subquery()
    )


# Sort keys accepted by search(), each a list of ORDER BY clauses
_ORDERINGS = {
    "newest": lambda: [desc(Thread.created_at)],
    "oldest": lambda: [asc(Thread.created_at)],
    "views": lambda: [desc(Thread.views), desc(Thread.created_at)],
    "top": lambda: [desc(_vote_score()), desc(Thread.created_at)],
}


class ThreadRepository(ReactionRepository[Thread]):
    """Repository for thread database operations."""

    like_model = ThreadLike
    vote_model = ThreadVote
    target_key = "thread_id"

    def __init__(self, db: AsyncSession):
        super().__init__(Thread, db)

    async def get_fresh(self, thread_id: str) -> Optional[Thread]:
        """Get a thread, re-reading counters, likes and votes from the database."""
        result = await self.db.execute(
            select(Thread)
            .where(Thread.id == thread_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def search(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        author_id: Optional[str] = None,
        sort: str = "newest",
        limit: int = 10,
        offset: int = 0
    ) -> Tuple[List[Thread], int]:
        """
        Search threads.

        Args:
            search: Whitespace-separated words; every word must appear
                (case-insensitively) in the title, content or tags
            category: Exact category (case-insensitive); "All" disables the filter
            author_id: Restrict to one author
            sort: One of "newest", "oldest", "views" or "top" (vote score)
            limit: Page size
            offset: Rows to skip

        Returns:
            Tuple of (threads, total matching)
        """
        conditions = []

        for word in (search or "").split():
            pattern = f"%{word.lower()}%"
            conditions.append(
                or_(
                    func.lower(Thread.title).like(pattern),
                    func.lower(Thread.content).like(pattern),
                    func.lower(cast(Thread.tags, String)).like(pattern),
                )
            )

        if category and category != "All":
            conditions.append(func.lower(cast(Thread.category, String)) == category.lower())

        if author_id:
            conditions.append(Thread.author_id == author_id)

        query = select(Thread)
        count_query = select(func.count()).select_from(Thread)
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        ordering = _ORDERINGS.get(sort, _ORDERINGS["newest"])()
        result = await self.db.execute(
            query.order_by(*ordering)
            .limit(limit)
            .offset(offset)
            .execution_options(populate_existing=True)
        )
        total = (await self.db.execute(count_query)).scalar()
        return list(result.scalars().all()), total

    async def comment_counts(self, thread_ids: Sequence[str]) -> Dict[str, int]:
        """Count all comments, replies included, per thread."""
        if not thread_ids:
            return {}
        result = await self.db.execute(
            select(Comment.thread_id, func.count())
            .where(Comment.thread_id.in_(thread_ids))
            .group_by(Comment.thread_id)
        )
        return dict(result.all())

    async def record_view(self, thread_id: str, user_id: Optional[str] = None) -> bool:
        """
        Count a view of a thread.

        Authenticated viewers are counted once; anonymous views always count.

        Returns:
            True if the view counter was incremented
        """
        if user_id is not None:
            views = ThreadView.__table__
            inserted = await self.db.execute(
                self.conflict_insert()(views)
                .values(thread_id=thread_id, user_id=user_id, viewed_at=utc_now())
                .on_conflict_do_nothing(index_elements=["thread_id", "user_id"])
                .returning(views.c.user_id)
            )
            if inserted.scalar_one_or_none() is None:
                return False

        table = Thread.__table__
        await self.db.execute(
            update(table)
            .where(table.c.id == thread_id)
            .values(views=table.c.views + 1)
        )
        await self.db.flush()
        return True

    async def delete_cascade(self, thread_id: str) -> int:
        """
        Delete a thread with its comments and every like, vote and view.

        Returns:
            Number of comments removed
        """
        comments = Comment.__table__
        comment_ids = select(comments.c.id).where(comments.c.thread_id == thread_id)

        await self.db.execute(delete(CommentLike.__table__).where(CommentLike.__table__.c.comment_id.in_(comment_ids)))
        await self.db.execute(delete(CommentVote.__table__).where(CommentVote.__table__.c.comment_id.in_(comment_ids)))
        # Replies first; they reference top-level comments
        replies = await self.db.execute(
            delete(comments).where(and_(comments.c.thread_id == thread_id, comments.c.parent_id.is_not(None)))
        )
        top_level = await self.db.execute(delete(comments).where(comments.c.thread_id == thread_id))

        await self.db.execute(delete(ThreadLike.__table__).where(ThreadLike.__table__.c.thread_id == thread_id))
        await self.db.execute(delete(ThreadVote.__table__).where(ThreadVote.__table__.c.thread_id == thread_id))
        await self.db.execute(delete(ThreadView.__table__).where(ThreadView.__table__.c.thread_id == thread_id))
        await self.db.execute(delete(Thread.__table__).where(Thread.__table__.c.id == thread_id))
        await self.db.flush()
        return replies.rowcount + top_level.rowcount

"""
Likes and up/down votes keyed by (target, user).

Shared by threads and comments; each subclass names its like and vote
models and the column that points at the target row.
"""
from typing import Dict, Optional, Type

from sqlalchemy import select, and_, func, delete

from devfolio.models.base import Base
from devfolio.models.thread import VoteType
from devfolio.repositories.base import BaseRepository, ModelType
from devfolio.utils.datetime_utils import utc_now


class ReactionRepository(BaseRepository[ModelType]):
    """Base repository for rows that can be liked and voted on."""

    like_model: Type[Base]
    vote_model: Type[Base]
    target_key: str

    def _match(self, model: Type[Base], target_id: str, user_id: str):
        table = model.__table__
        return and_(table.c[self.target_key] == target_id, table.c.user_id == user_id)

    # ------------------------------------------------------------------
    # Likes
    # ------------------------------------------------------------------

    async def has_liked(self, target_id: str, user_id: str) -> bool:
        result = await self.db.execute(
            select(func.count())
            .select_from(self.like_model.__table__)
            .where(self._match(self.like_model, target_id, user_id))
        )
        return result.scalar() > 0

    async def add_like(self, target_id: str, user_id: str) -> bool:
        """
        Record a like unless one exists.

        Returns:
            True if a like row was inserted
        """
        table = self.like_model.__table__
        result = await self.db.execute(
            self.conflict_insert()(table)
            .values({self.target_key: target_id, "user_id": user_id, "created_at": utc_now()})
            .on_conflict_do_nothing(index_elements=[self.target_key, "user_id"])
            .returning(table.c.user_id)
        )
        await self.db.flush()
        return result.scalar_one_or_none() is not None

    async def remove_like(self, target_id: str, user_id: str) -> None:
        await self.db.execute(
            delete(self.like_model.__table__).where(self._match(self.like_model, target_id, user_id))
        )
        await self.db.flush()

    async def count_likes(self, target_id: str) -> int:
        table = self.like_model.__table__
        result = await self.db.execute(
            select(func.count()).select_from(table).where(table.c[self.target_key] == target_id)
        )
        return result.scalar()

    # ------------------------------------------------------------------
    # Votes
    # ------------------------------------------------------------------

    async def get_vote(self, target_id: str, user_id: str) -> Optional[VoteType]:
        table = self.vote_model.__table__
        result = await self.db.execute(
            select(table.c.vote_type).where(self._match(self.vote_model, target_id, user_id))
        )
        return result.scalar_one_or_none()

    async def set_vote(self, target_id: str, user_id: str, vote_type: VoteType) -> None:
        """
        Cast or switch a user's vote.

        One row per (target, user), so switching from up to down replaces
        the previous vote.
        """
        table = self.vote_model.__table__
        stmt = self.conflict_insert()(table).values({
            self.target_key: target_id,
            "user_id": user_id,
            "vote_type": vote_type,
            "created_at": utc_now(),
        })
        await self.db.execute(
            stmt.on_conflict_do_update(
                index_elements=[self.target_key, "user_id"],
                set_={"vote_type": stmt.excluded.vote_type}
            )
        )
        await self.db.flush()

    async def clear_vote(self, target_id: str, user_id: str) -> None:
        await self.db.execute(
            delete(self.vote_model.__table__).where(self._match(self.vote_model, target_id, user_id))
        )
        await self.db.flush()

    async def vote_counts(self, target_id: str) -> Dict[str, int]:
        """
        Count upvotes and downvotes for one target.

        Returns:
            {"upvotes": int, "downvotes": int}
        """
        table = self.vote_model.__table__
        result = await self.db.execute(
            select(table.c.vote_type, func.count())
            .where(table.c[self.target_key] == target_id)
            .group_by(table.c.vote_type)
        )
        counts = {vote_type: count for vote_type, count in result.all()}
        return {
            "upvotes": counts.get(VoteType.UPVOTE, 0),
            "downvotes": counts.get(VoteType.DOWNVOTE, 0),
        }

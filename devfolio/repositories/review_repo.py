"""
Review repository for database operations.
"""
from typing import Optional, List, Dict

from sqlalchemy import select, and_, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.models.base import generate_uuid
from devfolio.models.review import Review, ReviewRating
from devfolio.repositories.base import BaseRepository
from devfolio.utils.datetime_utils import utc_now


class ReviewRepository(BaseRepository[Review]):
    """Repository for review database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Review, db)

    async def get_for_user(self, project_id: str, user_id: str) -> Optional[Review]:
        """Get a user's review of a project."""
        result = await self.db.execute(
            select(Review).where(
                and_(Review.project_id == project_id, Review.user_id == user_id)
            )
        )
        return result.scalar_one_or_none()

    async def get_fresh(self, review_id: str) -> Optional[Review]:
        result = await self.db.execute(
            select(Review)
            .where(Review.id == review_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def insert_if_absent(
        self,
        project_id: str,
        user_id: str,
        rating: ReviewRating,
        comment: Optional[str]
    ) -> Optional[str]:
        """
        Insert a review unless the user already reviewed the project.

        Uses ``INSERT ... ON CONFLICT DO NOTHING`` on the (project, user)
        constraint, so a concurrent first review turns into an update
        instead of an integrity error.

        Returns:
            The new review ID, or None if a review already exists
        """
        insert = self.conflict_insert()
        table = Review.__table__
        now = utc_now()
        result = await self.db.execute(
            insert(table)
            .values(
                id=generate_uuid(),
                project_id=project_id,
                user_id=user_id,
                rating=rating,
                comment=comment,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["project_id", "user_id"])
            .returning(table.c.id)
        )
        await self.db.flush()
        return result.scalar_one_or_none()

    async def list_for_project(self, project_id: str) -> List[Review]:
        """Get all reviews of a project, newest first."""
        result = await self.db.execute(
            select(Review)
            .where(Review.project_id == project_id)
            .order_by(desc(Review.created_at))
        )
        return list(result.scalars().all())

    async def rating_summary(self, project_id: str) -> Dict[str, int]:
        """
        Count likes and dislikes for a project.

        Returns:
            {"likes": int, "dislikes": int}
        """
        result = await self.db.execute(
            select(Review.rating, func.count())
            .where(Review.project_id == project_id)
            .group_by(Review.rating)
        )
        counts = {rating: count for rating, count in result.all()}
        return {
            "likes": counts.get(ReviewRating.LIKE, 0),
            "dislikes": counts.get(ReviewRating.DISLIKE, 0),
        }

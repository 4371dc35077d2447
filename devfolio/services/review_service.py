"""
Review service containing business logic for project reviews.
One review per user per project; submitting again replaces it.
"""
import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.core.exceptions import NotFoundError
from devfolio.models.user import User
from devfolio.repositories.project_repo import ProjectRepository
from devfolio.repositories.review_repo import ReviewRepository
from devfolio.schemas.review import (
    ProjectReviews,
    ReviewCreate,
    ReviewResponse,
    ReviewSummary,
)

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for review operations with business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.review_repo = ReviewRepository(db)
        self.project_repo = ProjectRepository(db)

    async def _ensure_project(self, project_id: str) -> None:
        if not await self.project_repo.exists(project_id):
            raise NotFoundError("Project not found")

    async def list_reviews(self, project_id: str) -> ProjectReviews:
        """
        Get a project's reviews, newest first, with the like/dislike tally.

        Raises:
            NotFoundError: If the project does not exist
        """
        await self._ensure_project(project_id)

        reviews = await self.review_repo.list_for_project(project_id)
        summary = await self.review_repo.rating_summary(project_id)

        return ProjectReviews(
            reviews=[ReviewResponse.model_validate(r) for r in reviews],
            summary=ReviewSummary(**summary),
        )

    async def upsert_review(
        self,
        project_id: str,
        user: User,
        data: ReviewCreate
    ) -> Tuple[ReviewResponse, bool]:
        """
        Create or replace the caller's review of a project.

        Returns:
            Tuple of (review, created) where ``created`` is False on update

        Raises:
            NotFoundError: If the project does not exist
        """
        await self._ensure_project(project_id)

        review_id = await self.review_repo.insert_if_absent(
            project_id, user.id, data.rating, data.comment
        )
        if review_id is not None:
            logger.info("User %s reviewed project %s (%s)", user.id, project_id, data.rating.value)
            review = await self.review_repo.get_fresh(review_id)
            return ReviewResponse.model_validate(review), True

        existing = await self.review_repo.get_for_user(project_id, user.id)
        review = await self.review_repo.update(
            existing.id,
            rating=data.rating,
            comment=data.comment,
        )
        return ReviewResponse.model_validate(review), False

    async def delete_review(self, project_id: str, user: User) -> None:
        """
        Remove the caller's review of a project.

        Raises:
            NotFoundError: If the project or the review does not exist
        """
        await self._ensure_project(project_id)

        review = await self.review_repo.get_for_user(project_id, user.id)
        if not review:
            raise NotFoundError("Review not found")

        await self.review_repo.delete(review.id)

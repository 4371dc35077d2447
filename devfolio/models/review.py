"""
Review model - one like/dislike rating per (project, user).
"""
import enum
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devfolio.models.base import Base, UUIDMixin, TimestampMixin
from devfolio.models.user import enum_values

if TYPE_CHECKING:
    from devfolio.models.user import User


class ReviewRating(str, enum.Enum):
    """Enum for review ratings."""
    LIKE = "like"
    DISLIKE = "dislike"


class Review(Base, UUIDMixin, TimestampMixin):
    """Review model. A second submission by the same user updates the first."""

    __tablename__ = "reviews"

    project_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    rating: Mapped[ReviewRating] = mapped_column(
        SQLEnum(ReviewRating, name="review_rating", native_enum=False, values_callable=enum_values),
        nullable=False
    )

    comment: Mapped[str | None] = mapped_column(String(500), nullable=True)

    user: Mapped["User"] = relationship(lazy="selectin")

    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_reviews_project_user"),
    )

    def __repr__(self) -> str:
        return f"<Review(project_id={self.project_id}, user_id={self.user_id}, rating={self.rating})>"

"""
Review schemas for API request/response validation.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from devfolio.models.review import ReviewRating
from devfolio.schemas.common import UTCDateTime
from devfolio.schemas.user import UserSummary


class ReviewCreate(BaseModel):
    """Schema for reviewing a project. Submitting again replaces the review."""

    rating: ReviewRating
    comment: Optional[str] = Field(None, max_length=500)

    @field_validator("comment", mode="before")
    @classmethod
    def strip_comment(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class ReviewResponse(BaseModel):
    """A review with its author card."""

    id: str
    project_id: str
    user: UserSummary
    rating: ReviewRating
    comment: Optional[str] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True)


class ReviewSummary(BaseModel):
    likes: int = 0
    dislikes: int = 0


class ProjectReviews(BaseModel):
    """All reviews of a project plus the rating tally."""

    reviews: List[ReviewResponse]
    summary: ReviewSummary

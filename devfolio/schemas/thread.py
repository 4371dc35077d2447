"""
Thread and comment schemas for API request/response validation.
"""
import enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from devfolio.models.thread import ThreadCategory, VoteType
from devfolio.schemas.common import UTCDateTime
from devfolio.schemas.user import UserSummary


class ThreadSort(str, enum.Enum):
    """Orderings for thread listings."""
    NEWEST = "newest"
    OLDEST = "oldest"
    VIEWS = "views"
    TOP = "top"


def _clean_tags(values: List[str]) -> List[str]:
    tags = []
    for value in values:
        value = value.strip() if value else ""
        if value and value not in tags:
            tags.append(value)
    return tags


class ThreadCreate(BaseModel):
    """Schema for starting a discussion thread."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=10000)
    category: ThreadCategory
    tags: List[str] = Field(default_factory=list, max_length=10)

    @field_validator("title", "content", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: List[str]) -> List[str]:
        return _clean_tags(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "How do you deploy side projects cheaply?",
                "content": "Looking for hosting that stays free until there is real traffic.",
                "category": "Questions",
                "tags": ["hosting", "deployment"]
            }
        }
    )


class ThreadUpdate(BaseModel):
    """Schema for editing a thread. Omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1, max_length=10000)
    category: Optional[ThreadCategory] = None
    tags: Optional[List[str]] = Field(None, max_length=10)

    @field_validator("title", "content", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v) if v is not None else v


class ThreadResponse(BaseModel):
    """A thread with its author card, engagement counters and the viewer's vote."""

    id: str
    title: str
    content: str
    category: ThreadCategory
    tags: List[str] = Field(default_factory=list)
    author: UserSummary
    views: int = 0
    likes: int = 0
    is_liked: bool = False
    upvotes: int = 0
    downvotes: int = 0
    vote_score: int = 0
    user_vote: Optional[VoteType] = None
    comment_count: int = 0
    created_at: UTCDateTime
    updated_at: UTCDateTime


class VoteRequest(BaseModel):
    vote_type: VoteType


class VoteResult(BaseModel):
    """Vote tally after a vote toggle, plus the caller's current vote."""

    vote_score: int
    upvotes: int
    downvotes: int
    user_vote: Optional[VoteType] = None


class CommentCreate(BaseModel):
    """Schema for commenting on a thread, or replying to a top-level comment."""

    content: str = Field(..., min_length=1, max_length=5000)
    parent_comment: Optional[str] = Field(None, description="ID of the top-level comment to reply to")

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v):
        return v.strip() if isinstance(v, str) else v


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v):
        return v.strip() if isinstance(v, str) else v


class CommentResponse(BaseModel):
    """A comment with its author card, counters and, for top-level comments, replies."""

    id: str
    thread_id: str
    parent_id: Optional[str] = None
    content: str
    author: UserSummary
    likes: int = 0
    is_liked: bool = False
    upvotes: int = 0
    downvotes: int = 0
    vote_score: int = 0
    user_vote: Optional[VoteType] = None
    is_edited: bool = False
    replies: List["CommentResponse"] = Field(default_factory=list)
    created_at: UTCDateTime
    updated_at: UTCDateTime

"""
Thread, ThreadVote, ThreadLike and ThreadView models.

Threads are community discussion posts. Each user holds at most one vote
per thread (up or down), may like it once, and is counted once as a viewer.
"""
import enum
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devfolio.models.base import Base, UUIDMixin, TimestampMixin
from devfolio.models.user import enum_values
from devfolio.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from devfolio.models.user import User


class ThreadCategory(str, enum.Enum):
    """Enum for discussion categories."""
    GENERAL = "General"
    QUESTIONS = "Questions"
    SHOWCASE = "Showcase"
    RESOURCES = "Resources"
    COLLABORATION = "Collaboration"
    FEEDBACK = "Feedback"
    OTHER = "Other"


class VoteType(str, enum.Enum):
    """Enum for up/down votes on threads and comments."""
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


def vote_tally(votes) -> dict:
    """Count upvotes and downvotes over vote rows."""
    upvotes = sum(1 for vote in votes if vote.vote_type == VoteType.UPVOTE)
    downvotes = len(votes) - upvotes
    return {"upvotes": upvotes, "downvotes": downvotes, "vote_score": upvotes - downvotes}


def user_vote(votes, user_id: Optional[str]) -> Optional[VoteType]:
    """The vote ``user_id`` cast among ``votes``, if any."""
    if user_id is None:
        return None
    for vote in votes:
        if vote.user_id == user_id:
            return vote.vote_type
    return None


class Thread(Base, UUIDMixin, TimestampMixin):
    """Thread model - a discussion post owned by one user."""

    __tablename__ = "threads"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    category: Mapped[ThreadCategory] = mapped_column(
        SQLEnum(ThreadCategory, name="thread_category", native_enum=False, values_callable=enum_values),
        nullable=False
    )

    tags: Mapped[list] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        doc="Free-form tag strings"
    )

    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    author: Mapped["User"] = relationship(lazy="selectin")

    votes: Mapped[List["ThreadVote"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    likes: Mapped[List["ThreadLike"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    @property
    def like_user_ids(self) -> List[str]:
        return [like.user_id for like in self.likes]

    def __repr__(self) -> str:
        return f"<Thread(id={self.id}, title={self.title})>"


class ThreadVote(Base):
    """ThreadVote model - one user's up or down vote on a thread."""

    __tablename__ = "thread_votes"

    thread_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("threads.id", ondelete="CASCADE"),
        primary_key=True
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True
    )

    vote_type: Mapped[VoteType] = mapped_column(
        SQLEnum(VoteType, name="vote_type", native_enum=False, values_callable=enum_values),
        nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False
    )


class ThreadLike(Base):
    """ThreadLike model - a user liking a thread."""

    __tablename__ = "thread_likes"

    thread_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("threads.id", ondelete="CASCADE"),
        primary_key=True
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False
    )


class ThreadView(Base):
    """ThreadView model - dedup record of an authenticated user's view."""

    __tablename__ = "thread_views"

    thread_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("threads.id", ondelete="CASCADE"),
        primary_key=True
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True
    )

    viewed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False
    )


# Indexes for performance
Index("idx_threads_created_at", Thread.created_at.desc())
Index("idx_threads_category_created", Thread.category, Thread.created_at.desc())

"""
Comment, CommentVote and CommentLike models.

Comments belong to a thread; a reply points at a top-level comment of the
same thread through ``parent_id``.
"""
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from devfolio.models.base import Base, UUIDMixin, TimestampMixin
from devfolio.models.thread import VoteType
from devfolio.models.user import enum_values
from devfolio.utils.datetime_utils import utc_now

if TYPE_CHECKING:
    from devfolio.models.user import User


class Comment(Base, UUIDMixin, TimestampMixin):
    """Comment model - a top-level comment or a reply on a thread."""

    __tablename__ = "comments"

    content: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    thread_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("threads.id", ondelete="CASCADE"),
        nullable=False
    )

    parent_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        doc="Top-level comment this replies to; NULL for top-level comments"
    )

    is_edited: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    author: Mapped["User"] = relationship(lazy="selectin")

    votes: Mapped[List["CommentVote"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    likes: Mapped[List["CommentLike"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    @property
    def like_user_ids(self) -> List[str]:
        return [like.user_id for like in self.likes]

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, thread_id={self.thread_id})>"


class CommentVote(Base):
    """CommentVote model - one user's up or down vote on a comment."""

    __tablename__ = "comment_votes"

    comment_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("comments.id", ondelete="CASCADE"),
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


class CommentLike(Base):
    """CommentLike model - a user liking a comment."""

    __tablename__ = "comment_likes"

    comment_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("comments.id", ondelete="CASCADE"),
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


# Indexes for performance
Index("idx_comments_thread_created", Comment.thread_id, Comment.created_at)

"""
Project, ProjectLike and ProjectView models.

Projects are published portfolio entries. Likes are a toggled set of users;
views are a counter plus a dedup set of authenticated viewers.
"""
import enum
from datetime import datetime
from typing import TYPE_CHECKING, List

from sqlalchemy import (
    Boolean,
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


class ProjectCategory(str, enum.Enum):
    """Enum for project categories."""
    WEB_APP = "Web App"
    MOBILE_APP = "Mobile App"
    DESKTOP_APP = "Desktop App"
    GAME = "Game"
    AI_ML = "AI/ML"
    DEVTOOLS = "DevTools"
    OTHER = "Other"


class ProjectStatus(str, enum.Enum):
    """Enum for project development status."""
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    MAINTAINED = "Maintained"


class Project(Base, UUIDMixin, TimestampMixin):
    """Project model - a published portfolio entry owned by one user."""

    __tablename__ = "projects"

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    thumbnail: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        doc="Thumbnail image URL"
    )
    images: Mapped[list] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        doc="Additional image URLs"
    )

    demo_url: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    github_url: Mapped[str] = mapped_column(String(500), default="", nullable=False)

    technologies: Mapped[list] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        doc="Technology names used by the project"
    )

    category: Mapped[ProjectCategory] = mapped_column(
        SQLEnum(ProjectCategory, name="project_category", native_enum=False, values_callable=enum_values),
        default=ProjectCategory.OTHER,
        nullable=False
    )

    status: Mapped[ProjectStatus] = mapped_column(
        SQLEnum(ProjectStatus, name="project_status", native_enum=False, values_callable=enum_values),
        default=ProjectStatus.COMPLETED,
        nullable=False
    )

    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Owner of the project"
    )

    views: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        doc="Monotonically increasing view counter"
    )

    featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    author: Mapped["User"] = relationship(lazy="selectin")

    likes: Mapped[List["ProjectLike"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    @property
    def like_user_ids(self) -> List[str]:
        return [like.user_id for like in self.likes]

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title={self.title})>"


class ProjectLike(Base):
    """ProjectLike model - a user liking a project."""

    __tablename__ = "project_likes"

    project_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
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


class ProjectView(Base):
    """ProjectView model - dedup record of an authenticated user's view."""

    __tablename__ = "project_views"

    project_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
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
Index("idx_projects_created_at", Project.created_at.desc())
Index("idx_project_likes_user", ProjectLike.user_id)

"""
Project schemas for API request/response validation.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from devfolio.models.project import ProjectCategory, ProjectStatus
from devfolio.schemas.common import UTCDateTime
from devfolio.schemas.user import UserSummary


def _clean_url_list(values: List[str]) -> List[str]:
    return [value.strip() for value in values if value and value.strip()]


class ProjectCreate(BaseModel):
    """Schema for publishing a project. Images are referenced by URL."""

    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10, max_length=2000)
    thumbnail: str = Field(..., min_length=1, max_length=500, description="Thumbnail image URL")
    images: List[str] = Field(default_factory=list, max_length=5)
    demo_url: str = Field("", max_length=500)
    github_url: str = Field("", max_length=500)
    technologies: List[str] = Field(default_factory=list)
    category: ProjectCategory = ProjectCategory.OTHER
    status: ProjectStatus = ProjectStatus.COMPLETED

    @field_validator("title", "description", "thumbnail", "demo_url", "github_url", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("thumbnail")
    @classmethod
    def validate_thumbnail(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Thumbnail must be an http(s) URL")
        return v

    @field_validator("images", "technologies")
    @classmethod
    def clean_lists(cls, v: List[str]) -> List[str]:
        return _clean_url_list(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Pixel Garden",
                "description": "A cozy browser game about growing pixel plants.",
                "thumbnail": "https://example.com/pixel-garden.png",
                "technologies": ["React", "Phaser"],
                "category": "Game",
                "status": "In Progress"
            }
        }
    )


class ProjectUpdate(BaseModel):
    """Schema for editing a project. Omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=2000)
    thumbnail: Optional[str] = Field(None, min_length=1, max_length=500)
    demo_url: Optional[str] = Field(None, max_length=500)
    github_url: Optional[str] = Field(None, max_length=500)
    technologies: Optional[List[str]] = None
    category: Optional[ProjectCategory] = None
    status: Optional[ProjectStatus] = None
    new_images: List[str] = Field(default_factory=list, description="Image URLs to append")
    removed_images: List[str] = Field(default_factory=list, description="Image URLs to drop")

    @field_validator("title", "description", "thumbnail", "demo_url", "github_url", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("technologies")
    @classmethod
    def clean_technologies(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_url_list(v) if v is not None else v


class ProjectResponse(BaseModel):
    """A project with its author card and engagement counters."""

    id: str
    title: str
    description: str
    thumbnail: str
    images: List[str] = Field(default_factory=list)
    demo_url: str = ""
    github_url: str = ""
    technologies: List[str] = Field(default_factory=list)
    category: ProjectCategory
    status: ProjectStatus
    author: UserSummary
    likes: int = 0
    is_liked: bool = False
    views: int = 0
    featured: bool = False
    created_at: UTCDateTime
    updated_at: UTCDateTime


class LikeToggleResult(BaseModel):
    """Outcome of toggling a like."""

    likes: int
    is_liked: bool

"""
Project API routes.
Provides project search, publishing, likes and reviews.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.config import settings
from devfolio.core.database import get_db
from devfolio.dependencies import MAX_PAGE, get_current_user, get_current_user_optional
from devfolio.models.user import User
from devfolio.schemas.common import DataResponse, PaginatedResponse, StatusResponse
from devfolio.schemas.project import (
    LikeToggleResult,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)
from devfolio.schemas.review import ProjectReviews, ReviewCreate, ReviewResponse
from devfolio.services.project_service import ProjectService
from devfolio.services.review_service import ReviewService

router = APIRouter()


@router.get(
    "",
    response_model=PaginatedResponse[ProjectResponse],
    summary="Search projects"
)
async def list_projects(
    search: Optional[str] = Query(None, description="Substring of title, description or technologies"),
    category: Optional[str] = Query(None, description="Category name, or 'All'"),
    technology: Optional[str] = Query(None, description="Technology name"),
    author: Optional[str] = Query(None, description="Author user ID"),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(settings.projects_page_size, ge=1, le=100),
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db)
):
    """List projects newest first."""
    projects, pagination = await ProjectService(db).list_projects(
        search=search,
        category=category,
        technology=technology,
        author_id=author,
        page=page,
        limit=limit,
        viewer_id=current_user.id if current_user else None,
    )
    return PaginatedResponse(data=projects, pagination=pagination)


@router.post(
    "",
    response_model=DataResponse[ProjectResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Publish a project"
)
async def create_project(
    data: ProjectCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    project = await ProjectService(db).create_project(current_user, data)
    return DataResponse(data=project)


@router.get(
    "/{project_id}",
    response_model=DataResponse[ProjectResponse],
    summary="Get a project"
)
async def get_project(
    project_id: str,
    current_user: Optional[User] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db)
):
    """
    Get a project and count the view.

    Signed-in viewers are counted once per project; anonymous views always count.
    """
    project = await ProjectService(db).get_project(project_id, viewer=current_user)
    return DataResponse(data=project)


@router.put(
    "/{project_id}",
    response_model=DataResponse[ProjectResponse],
    summary="Update a project"
)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Edit a project. Only the author may edit; ``removed_images`` drops image URLs."""
    project = await ProjectService(db).update_project(project_id, current_user, data)
    return DataResponse(data=project)


@router.delete(
    "/{project_id}",
    response_model=StatusResponse,
    summary="Delete a project"
)
async def delete_project(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await ProjectService(db).delete_project(project_id, current_user)
    return StatusResponse(message="Project deleted successfully")


@router.put(
    "/{project_id}/like",
    response_model=DataResponse[LikeToggleResult],
    summary="Toggle like on a project"
)
async def toggle_like(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await ProjectService(db).toggle_like(project_id, current_user)
    return DataResponse(data=result)


# ============================================================================
# Reviews
# ============================================================================

@router.get(
    "/{project_id}/reviews",
    response_model=DataResponse[ProjectReviews],
    summary="List a project's reviews"
)
async def list_reviews(project_id: str, db: AsyncSession = Depends(get_db)):
    return DataResponse(data=await ReviewService(db).list_reviews(project_id))


@router.post(
    "/{project_id}/reviews",
    response_model=DataResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Review a project"
)
async def upsert_review(
    project_id: str,
    data: ReviewCreate,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create the caller's review (201) or replace an existing one (200)."""
    review, created = await ReviewService(db).upsert_review(project_id, current_user, data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return DataResponse(data=review)


@router.delete(
    "/{project_id}/reviews",
    response_model=StatusResponse,
    summary="Delete own review"
)
async def delete_review(
    project_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await ReviewService(db).delete_review(project_id, current_user)
    return StatusResponse(message="Review deleted successfully")

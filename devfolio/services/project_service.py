"""
Project service containing business logic for portfolio projects.
Handles search, publishing, author-only edits, likes and view counting.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.core.exceptions import NotFoundError, PermissionDeniedError
from devfolio.models.project import Project
from devfolio.models.user import User
from devfolio.repositories.project_repo import ProjectRepository
from devfolio.schemas.common import PaginationMeta
from devfolio.schemas.project import (
    LikeToggleResult,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)
from devfolio.schemas.user import UserSummary

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for project operations with business logic."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.project_repo = ProjectRepository(db)

    @staticmethod
    def _to_response(project: Project, viewer_id: Optional[str] = None) -> ProjectResponse:
        like_ids = project.like_user_ids
        return ProjectResponse(
            id=project.id,
            title=project.title,
            description=project.description,
            thumbnail=project.thumbnail,
            images=list(project.images or []),
            demo_url=project.demo_url,
            github_url=project.github_url,
            technologies=list(project.technologies or []),
            category=project.category,
            status=project.status,
            author=UserSummary.model_validate(project.author),
            likes=len(like_ids),
            is_liked=viewer_id in like_ids if viewer_id else False,
            views=project.views,
            featured=project.featured,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )

    async def _get_or_404(self, project_id: str) -> Project:
        project = await self.project_repo.get_fresh(project_id)
        if not project:
            raise NotFoundError("Project not found")
        return project

    async def _get_owned(self, project_id: str, user: User, action: str) -> Project:
        project = await self._get_or_404(project_id)
        if project.author_id != user.id:
            raise PermissionDeniedError(f"Not authorized to {action} this project")
        return project

    async def list_projects(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        technology: Optional[str] = None,
        author_id: Optional[str] = None,
        page: int = 1,
        limit: int = 12,
        viewer_id: Optional[str] = None
    ) -> Tuple[List[ProjectResponse], PaginationMeta]:
        """Search projects, newest first, one page at a time."""
        projects, total = await self.project_repo.search(
            search=search.strip() if search else None,
            category=category,
            technology=technology.strip() if technology else None,
            author_id=author_id,
            limit=limit,
            offset=(page - 1) * limit,
        )
        return (
            [self._to_response(p, viewer_id) for p in projects],
            PaginationMeta.build(page=page, limit=limit, total=total),
        )

    async def get_project(self, project_id: str, viewer: Optional[User] = None) -> ProjectResponse:
        """
        Get a project and count the view.

        An authenticated viewer is counted once per project; anonymous
        requests always count.

        Raises:
            NotFoundError: If the project does not exist
        """
        await self._get_or_404(project_id)

        viewer_id = viewer.id if viewer else None
        await self.project_repo.record_view(project_id, viewer_id)

        project = await self.project_repo.get_fresh(project_id)
        return self._to_response(project, viewer_id)

    async def create_project(self, user: User, data: ProjectCreate) -> ProjectResponse:
        """Publish a project owned by ``user``."""
        project = await self.project_repo.create(
            author_id=user.id,
            **data.model_dump(),
        )
        logger.info("User %s published project %s", user.id, project.id)

        project = await self.project_repo.get_fresh(project.id)
        return self._to_response(project, user.id)

    async def update_project(
        self,
        project_id: str,
        user: User,
        data: ProjectUpdate
    ) -> ProjectResponse:
        """
        Edit a project. Only the author may edit.

        ``removed_images`` are dropped from the image list before
        ``new_images`` are appended.

        Raises:
            NotFoundError: If the project does not exist
            PermissionDeniedError: If the caller is not the author
        """
        project = await self._get_owned(project_id, user, "update")

        changes = data.model_dump(
            exclude_unset=True,
            exclude_none=True,
            exclude={"new_images", "removed_images"},
        )

        if data.removed_images or data.new_images:
            removed = set(data.removed_images)
            images = [url for url in project.images if url not in removed]
            images.extend(url for url in data.new_images if url not in images)
            changes["images"] = images

        if changes:
            await self.project_repo.update(project_id, **changes)

        project = await self.project_repo.get_fresh(project_id)
        return self._to_response(project, user.id)

    async def delete_project(self, project_id: str, user: User) -> None:
        """
        Delete a project with its likes, views and reviews. Only the author may delete.

        Raises:
            NotFoundError: If the project does not exist
            PermissionDeniedError: If the caller is not the author
        """
        await self._get_owned(project_id, user, "delete")
        await self.project_repo.delete_cascade(project_id)
        logger.info("User %s deleted project %s", user.id, project_id)

    async def toggle_like(self, project_id: str, user: User) -> LikeToggleResult:
        """Like the project, or unlike it if already liked."""
        await self._get_or_404(project_id)

        if await self.project_repo.has_liked(project_id, user.id):
            await self.project_repo.remove_like(project_id, user.id)
            is_liked = False
        else:
            await self.project_repo.add_like(project_id, user.id)
            is_liked = True

        return LikeToggleResult(
            likes=await self.project_repo.count_likes(project_id),
            is_liked=is_liked
        )

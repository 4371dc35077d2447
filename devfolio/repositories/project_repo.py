"""
Project repository for database operations.
Handles project search, likes and view tracking.
"""
from typing import Optional, List, Tuple

from sqlalchemy import select, and_, or_, func, desc, delete, update, cast, String
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.models.project import Project, ProjectLike, ProjectView
from devfolio.models.review import Review
from devfolio.repositories.base import BaseRepository
from devfolio.utils.datetime_utils import utc_now


class ProjectRepository(BaseRepository[Project]):
    """Repository for project database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Project, db)

    async def get_fresh(self, project_id: str) -> Optional[Project]:
        """Get a project, re-reading counters and likes from the database."""
        result = await self.db.execute(
            select(Project)
            .where(Project.id == project_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def search(
        self,
        search: Optional[str] = None,
        category: Optional[str] = None,
        technology: Optional[str] = None,
        author_id: Optional[str] = None,
        limit: int = 12,
        offset: int = 0
    ) -> Tuple[List[Project], int]:
        """
        Search projects, newest first.

        Args:
            search: Case-insensitive substring over title, description and technologies
            category: Exact category (case-insensitive); "All" disables the filter
            technology: Technology name (case-insensitive)
            author_id: Restrict to one author
            limit: Page size
            offset: Rows to skip

        Returns:
            Tuple of (projects, total matching)
        """
        conditions = []

        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(Project.title).like(pattern),
                    func.lower(Project.description).like(pattern),
                    func.lower(cast(Project.technologies, String)).like(pattern),
                )
            )

        if category and category != "All":
            conditions.append(func.lower(cast(Project.category, String)) == category.lower())

        if technology:
            # JSON array text contains the quoted technology name
            conditions.append(
                func.lower(cast(Project.technologies, String)).like(f'%"{technology.lower()}"%')
            )

        if author_id:
            conditions.append(Project.author_id == author_id)

        query = select(Project)
        count_query = select(func.count()).select_from(Project)
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        result = await self.db.execute(
            query.order_by(desc(Project.created_at)).limit(limit).offset(offset)
        )
        total = (await self.db.execute(count_query)).scalar()
        return list(result.scalars().all()), total

    async def has_liked(self, project_id: str, user_id: str) -> bool:
        result = await self.db.execute(
            select(func.count()).select_from(ProjectLike).where(
                and_(ProjectLike.project_id == project_id, ProjectLike.user_id == user_id)
            )
        )
        return result.scalar() > 0

    async def add_like(self, project_id: str, user_id: str) -> bool:
        """
        Record a like unless the user already likes the project.

        Returns:
            True if a like row was inserted
        """
        insert = self.conflict_insert()
        table = ProjectLike.__table__
        result = await self.db.execute(
            insert(table)
            .values(project_id=project_id, user_id=user_id, created_at=utc_now())
            .on_conflict_do_nothing(index_elements=["project_id", "user_id"])
            .returning(table.c.user_id)
        )
        await self.db.flush()
        return result.scalar_one_or_none() is not None

    async def remove_like(self, project_id: str, user_id: str) -> None:
        await self.db.execute(
            delete(ProjectLike).where(
                and_(ProjectLike.project_id == project_id, ProjectLike.user_id == user_id)
            )
        )
        await self.db.flush()

    async def count_likes(self, project_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(ProjectLike).where(ProjectLike.project_id == project_id)
        )
        return result.scalar()

    async def record_view(self, project_id: str, user_id: Optional[str] = None) -> bool:
        """
        Count a view of a project.

        Authenticated viewers are counted once; anonymous views always count.

        Args:
            project_id: Project ID
            user_id: Viewer ID, or None for anonymous

        Returns:
            True if the view counter was incremented
        """
        if user_id is not None:
            views = ProjectView.__table__
            inserted = await self.db.execute(
                self.conflict_insert()(views)
                .values(project_id=project_id, user_id=user_id, viewed_at=utc_now())
                .on_conflict_do_nothing(index_elements=["project_id", "user_id"])
                .returning(views.c.user_id)
            )
            if inserted.scalar_one_or_none() is None:
                return False

        table = Project.__table__
        await self.db.execute(
            update(table)
            .where(table.c.id == project_id)
            .values(views=table.c.views + 1)
        )
        await self.db.flush()
        return True

    async def delete_cascade(self, project_id: str) -> None:
        """Delete a project with its likes, views and reviews."""
        await self.db.execute(delete(ProjectLike.__table__).where(ProjectLike.__table__.c.project_id == project_id))
        await self.db.execute(delete(ProjectView.__table__).where(ProjectView.__table__.c.project_id == project_id))
        await self.db.execute(delete(Review.__table__).where(Review.__table__.c.project_id == project_id))
        await self.db.execute(delete(Project.__table__).where(Project.__table__.c.id == project_id))
        await self.db.flush()

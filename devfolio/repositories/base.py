"""
Base repository with common CRUD operations.
All repositories extend this class for database access.
"""
from typing import Generic, TypeVar, Type, Optional

from sqlalchemy import select, update, delete, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.core.exceptions import InternalError
from devfolio.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)

# Dialects whose insert() supports ON CONFLICT clauses
_CONFLICT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Repositories only flush; committing is left to the request-scoped
    session so that a service call is one unit of work.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Async database session
        """
        self.model = model
        self.db = db

    def conflict_insert(self):
        """
        Return the dialect ``insert`` construct for the bound engine.

        Unique-constrained writes go through ``on_conflict_do_nothing`` or
        ``on_conflict_do_update`` so concurrent first writes cannot fail
        with an integrity error.

        Raises:
            InternalError: If the dialect has no ON CONFLICT support here
        """
        dialect = self.db.get_bind().dialect.name
        insert = _CONFLICT_INSERTS.get(dialect)
        if insert is None:
            raise InternalError(f"Conditional insert is not supported on {dialect}")
        return insert

    async def create(self, **kwargs) -> ModelType:
        """
        Create a new record.

        Args:
            **kwargs: Model field values

        Returns:
            Created model instance

        Example:
            ```python
            user = await user_repo.create(username="ada", email="ada@example.com", password_hash=h)
            ```
        """
        instance = self.model(**kwargs)
        self.db.add(instance)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def get(self, id: str) -> Optional[ModelType]:
        """
        Get a record by ID.

        Args:
            id: Record ID

        Returns:
            Model instance or None if not found
        """
        result = await self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def update(self, id: str, **kwargs) -> Optional[ModelType]:
        """
        Update a record by ID.

        Args:
            id: Record ID
            **kwargs: Fields to update

        Returns:
            Updated model instance or None if not found
        """
        await self.db.execute(
            update(self.model)
            .where(self.model.id == id)
            .values(**kwargs)
            .execution_options(synchronize_session="fetch")
        )
        await self.db.flush()
        instance = await self.get(id)
        if instance is not None:
            await self.db.refresh(instance)
        return instance

    async def delete(self, id: str) -> bool:
        """
        Delete a record by ID (hard delete).

        Args:
            id: Record ID

        Returns:
            True if deleted, False if not found
        """
        result = await self.db.execute(
            delete(self.model).where(self.model.id == id)
        )
        await self.db.flush()
        return result.rowcount > 0

    async def exists(self, id: str) -> bool:
        """Check if a record exists."""
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(self.model.id == id)
        )
        return result.scalar() > 0

    async def count(self, **filters) -> int:
        """
        Count records matching equality filters.

        Example:
            ```python
            count = await message_repo.count(conversation_id=conv_id, deleted=False)
            ```
        """
        query = select(func.count()).select_from(self.model)

        for key, value in filters.items():
            if hasattr(self.model, key):
                query = query.where(getattr(self.model, key) == value)

        result = await self.db.execute(query)
        return result.scalar()

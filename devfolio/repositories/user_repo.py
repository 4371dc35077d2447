"""
User repository for database operations.
Handles user lookup, profile updates, and follow/block edges.
"""
from typing import Optional, List, Set

from sqlalchemy import select, or_, and_, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.models.user import User
from devfolio.models.user_block import UserFollow, UserBlock
from devfolio.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user database operations."""

    def __init__(self, db: AsyncSession):
        """Initialize user repository."""
        super().__init__(User, db)

    async def get_by_login(self, identifier: str) -> Optional[User]:
        """
        Get user by email or username.

        Args:
            identifier: Email address or username

        Returns:
            User instance or None
        """
        result = await self.db.execute(
            select(User).where(
                or_(User.email == identifier.lower(), User.username == identifier)
            )
        )
        return result.scalars().first()

    async def find_conflicting(
        self,
        email: Optional[str] = None,
        username: Optional[str] = None,
        exclude_id: Optional[str] = None
    ) -> Optional[User]:
        """
        Find another user already holding an email or username.

        Args:
            email: Email to check
            username: Username to check
            exclude_id: User ID to ignore (the user being updated)

        Returns:
            Conflicting user or None
        """
        conditions = []
        if email:
            conditions.append(User.email == email.lower())
        if username:
            conditions.append(User.username == username)
        if not conditions:
            return None

        query = select(User).where(or_(*conditions))
        if exclude_id:
            query = query.where(User.id != exclude_id)

        result = await self.db.execute(query)
        return result.scalars().first()

    # ------------------------------------------------------------------
    # Follow edges
    # ------------------------------------------------------------------

    async def get_follower_ids(self, user_id: str) -> Set[str]:
        """IDs of users following ``user_id``."""
        result = await self.db.execute(
            select(UserFollow.follower_id).where(UserFollow.followed_id == user_id)
        )
        return set(result.scalars().all())

    async def get_following_ids(self, user_id: str) -> Set[str]:
        """IDs of users ``user_id`` follows."""
        result = await self.db.execute(
            select(UserFollow.followed_id).where(UserFollow.follower_id == user_id)
        )
        return set(result.scalars().all())

    async def is_following(self, follower_id: str, followed_id: str) -> bool:
        result = await self.db.execute(
            select(func.count()).select_from(UserFollow).where(
                and_(
                    UserFollow.follower_id == follower_id,
                    UserFollow.followed_id == followed_id
                )
            )
        )
        return result.scalar() > 0

    async def add_follow(self, follower_id: str, followed_id: str) -> bool:
        """
        Create a follow edge.

        Returns:
            True if a new edge was created, False if it already existed
        """
        if await self.is_following(follower_id, followed_id):
            return False

        self.db.add(UserFollow(follower_id=follower_id, followed_id=followed_id))
        await self.db.flush()
        return True

    async def remove_follow(self, follower_id: str, followed_id: str) -> bool:
        """
        Delete a follow edge.

        Returns:
            True if an edge was removed
        """
        result = await self.db.execute(
            delete(UserFollow).where(
                and_(
                    UserFollow.follower_id == follower_id,
                    UserFollow.followed_id == followed_id
                )
            )
        )
        await self.db.flush()
        return result.rowcount > 0

    async def count_followers(self, user_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(UserFollow).where(UserFollow.followed_id == user_id)
        )
        return result.scalar()

    async def count_following(self, user_id: str) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(UserFollow).where(UserFollow.follower_id == user_id)
        )
        return result.scalar()

    async def list_followers(self, user_id: str) -> List[User]:
        """Users following ``user_id``, most recent first."""
        result = await self.db.execute(
            select(User)
            .join(UserFollow, UserFollow.follower_id == User.id)
            .where(UserFollow.followed_id == user_id)
            .order_by(UserFollow.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_following(self, user_id: str) -> List[User]:
        """Users ``user_id`` follows, most recent first."""
        result = await self.db.execute(
            select(User)
            .join(UserFollow, UserFollow.followed_id == User.id)
            .where(UserFollow.follower_id == user_id)
            .order_by(UserFollow.created_at.desc())
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Block edges
    # ------------------------------------------------------------------

    async def get_blocked_ids(self, user_id: str) -> Set[str]:
        """IDs of users ``user_id`` has blocked."""
        result = await self.db.execute(
            select(UserBlock.blocked_id).where(UserBlock.blocker_id == user_id)
        )
        return set(result.scalars().all())

    async def has_blocked(self, blocker_id: str, blocked_id: str) -> bool:
        result = await self.db.execute(
            select(func.count()).select_from(UserBlock).where(
                and_(
                    UserBlock.blocker_id == blocker_id,
                    UserBlock.blocked_id == blocked_id
                )
            )
        )
        return result.scalar() > 0

    async def add_block(self, blocker_id: str, blocked_id: str) -> bool:
        """
        Create a block edge.

        Returns:
            True if a new edge was created, False if it already existed
        """
        if await self.has_blocked(blocker_id, blocked_id):
            return False

        self.db.add(UserBlock(blocker_id=blocker_id, blocked_id=blocked_id))
        await self.db.flush()
        return True

    async def remove_block(self, blocker_id: str, blocked_id: str) -> bool:
        result = await self.db.execute(
            delete(UserBlock).where(
                and_(
                    UserBlock.blocker_id == blocker_id,
                    UserBlock.blocked_id == blocked_id
                )
            )
        )
        await self.db.flush()
        return result.rowcount > 0

    async def list_blocked(self, user_id: str) -> List[User]:
        """Users blocked by ``user_id``, most recent first."""
        result = await self.db.execute(
            select(User)
            .join(UserBlock, UserBlock.blocked_id == User.id)
            .where(UserBlock.blocker_id == user_id)
            .order_by(UserBlock.created_at.desc())
        )
        return list(result.scalars().all())

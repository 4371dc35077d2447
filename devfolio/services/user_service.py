"""
User service containing business logic for accounts and the social graph.
Handles registration, login, profile and privacy updates, follows and blocks.
"""
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from devfolio.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from devfolio.core.security import create_access_token, hash_password, verify_password
from devfolio.models.user import DEFAULT_AVATAR, User
from devfolio.repositories.conversation_repo import ConversationRepository
from devfolio.repositories.user_repo import UserRepository
from devfolio.schemas.user import (
    AuthResponse,
    FollowStatus,
    PasswordChange,
    PrivacyUpdate,
    ProfileUpdate,
    RegisterRequest,
    UserPrivateProfile,
    UserPublicProfile,
    UserSummary,
)
from devfolio.services.permissions import SocialSnapshot, can_message

logger = logging.getLogger(__name__)


class UserService:
    """Service for user and social-graph operations with business logic."""

    def __init__(self, db: AsyncSession):
        """
        Initialize user service.

        Args:
            db: Database session
        """
        self.db = db
        self.user_repo = UserRepository(db)

    async def get_user_or_404(self, user_id: str) -> User:
        user = await self.user_repo.get(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def get_social_snapshot(self, user_id: str, user: Optional[User] = None) -> SocialSnapshot:
        """
        Capture a user's messaging settings and follow/block edges.

        Args:
            user_id: User ID
            user: Already-loaded user, saves one query

        Returns:
            Immutable snapshot for the permission evaluator

        Raises:
            NotFoundError: If the user does not exist
        """
        if user is None:
            user = await self.get_user_or_404(user_id)

        return SocialSnapshot(
            user_id=user.id,
            message_permission=user.message_permission,
            allow_messages=user.allow_messages,
            followers=frozenset(await self.user_repo.get_follower_ids(user.id)),
            following=frozenset(await self.user_repo.get_following_ids(user.id)),
            blocked=frozenset(await self.user_repo.get_blocked_ids(user.id)),
        )

    async def _private_profile(self, user: User) -> UserPrivateProfile:
        profile = UserPrivateProfile.model_validate(user, from_attributes=True)
        profile.followers_count = await self.user_repo.count_followers(user.id)
        profile.following_count = await self.user_repo.count_following(user.id)
        return profile

    async def _ensure_unique(
        self,
        email: Optional[str],
        username: Optional[str],
        exclude_id: Optional[str] = None
    ) -> None:
        conflict = await self.user_repo.find_conflicting(
            email=email,
            username=username,
            exclude_id=exclude_id
        )
        if conflict is None:
            return
        if email and conflict.email == email.lower():
            raise ValidationError("Email already registered")
        raise ValidationError("Username already taken")

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def register(self, data: RegisterRequest) -> AuthResponse:
        """
        Create an account and issue a token.

        Raises:
            ValidationError: If the email or username is taken
        """
        await self._ensure_unique(data.email, data.username)

        user = await self.user_repo.create(
            username=data.username,
            email=data.email.lower(),
            password_hash=hash_password(data.password),
            avatar=f"{DEFAULT_AVATAR}{data.username}",
        )
        logger.info("Registered user %s (%s)", user.id, user.username)

        return AuthResponse(
            user=await self._private_profile(user),
            token=create_access_token(user.id)
        )

    async def login(self, identifier: str, password: str) -> AuthResponse:
        """
        Authenticate by email or username.

        Raises:
            AuthenticationError: On unknown user or wrong password
        """
        user = await self.user_repo.get_by_login(identifier.strip())
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for %r", identifier)
            raise AuthenticationError("Invalid credentials")

        return AuthResponse(
            user=await self._private_profile(user),
            token=create_access_token(user.id)
        )

    async def get_me(self, user: User) -> UserPrivateProfile:
        return await self._private_profile(user)

    async def update_profile(self, user: User, data: ProfileUpdate) -> UserPrivateProfile:
        """
        Update the caller's profile fields.

        Raises:
            ValidationError: If the new email or username belongs to someone else
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in changes or "username" in changes:
            await self._ensure_unique(
                changes.get("email"),
                changes.get("username"),
                exclude_id=user.id
            )

        if changes:
            user = await self.user_repo.update(user.id, **changes)

        return await self._private_profile(user)

    async def change_password(self, user: User, data: PasswordChange) -> None:
        """
        Replace the caller's password.

        Raises:
            AuthenticationError: If the current password is wrong
        """
        if not verify_password(data.current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        await self.user_repo.update(user.id, password_hash=hash_password(data.new_password))
        logger.info("Password changed for user %s", user.id)

    async def update_privacy(self, user: User, data: PrivacyUpdate) -> UserPrivateProfile:
        """Update profile visibility and messaging settings."""
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if changes:
            user = await self.user_repo.update(user.id, **changes)
            logger.info("Privacy settings updated for user %s: %s", user.id, sorted(changes))
        return await self._private_profile(user)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def get_profile(self, user_id: str, viewer: Optional[User] = None) -> UserPublicProfile:
        """
        Get a user's public profile.

        Viewer-relative flags are filled in for authenticated viewers.

        Raises:
            NotFoundError: If the user does not exist
            PermissionDeniedError: If the user has blocked the viewer
        """
        user = await self.get_user_or_404(user_id)

        profile = UserPublicProfile.model_validate(user, from_attributes=True)
        profile.email = user.email if user.show_email else None
        profile.followers_count = await self.user_repo.count_followers(user.id)
        profile.following_count = await self.user_repo.count_following(user.id)

        if viewer is None or viewer.id == user.id:
            return profile

        target = await self.get_social_snapshot(user.id, user)
        if viewer.id in target.blocked:
            raise PermissionDeniedError("You are blocked by this user")

        sender = await self.get_social_snapshot(viewer.id, viewer)
        profile.is_following = viewer.id in target.followers
        profile.is_blocked = user.id in sender.blocked
        conversation = await ConversationRepository(self.db).find_by_pair(viewer.id, user.id)
        profile.can_message = can_message(
            sender, target, conversation_exists=conversation is not None
        )
        return profile

    # ------------------------------------------------------------------
    # Follow edges
    # ------------------------------------------------------------------

    async def _follow_status(self, viewer_id: str, target_id: str) -> FollowStatus:
        return FollowStatus(
            user_id=target_id,
            is_following=await self.user_repo.is_following(viewer_id, target_id),
            is_blocked=await self.user_repo.has_blocked(viewer_id, target_id),
            followers_count=await self.user_repo.count_followers(target_id),
        )

    async def follow(self, viewer: User, target_id: str) -> FollowStatus:
        """
        Follow a user. Following twice is a no-op.

        Raises:
            ValidationError: If following oneself
            NotFoundError: If the target does not exist
            PermissionDeniedError: If either user has blocked the other
        """
        if viewer.id == target_id:
            raise ValidationError("You cannot follow yourself")
        await self.get_user_or_404(target_id)

        if await self.user_repo.has_blocked(target_id, viewer.id):
            raise PermissionDeniedError("You are blocked by this user")
        if await self.user_repo.has_blocked(viewer.id, target_id):
            raise PermissionDeniedError("You have blocked this user")

        await self.user_repo.add_follow(viewer.id, target_id)
        return await self._follow_status(viewer.id, target_id)

    async def unfollow(self, viewer: User, target_id: str) -> FollowStatus:
        if viewer.id == target_id:
            raise ValidationError("You cannot unfollow yourself")
        await self.get_user_or_404(target_id)

        await self.user_repo.remove_follow(viewer.id, target_id)
        return await self._follow_status(viewer.id, target_id)

    async def list_followers(self, user_id: str) -> List[UserSummary]:
        await self.get_user_or_404(user_id)
        users = await self.user_repo.list_followers(user_id)
        return [UserSummary.model_validate(u) for u in users]

    async def list_following(self, user_id: str) -> List[UserSummary]:
        await self.get_user_or_404(user_id)
        users = await self.user_repo.list_following(user_id)
        return [UserSummary.model_validate(u) for u in users]

    # ------------------------------------------------------------------
    # Block edges
    # ------------------------------------------------------------------

    async def block(self, viewer: User, target_id: str) -> FollowStatus:
        """
        Block a user and drop follow edges in both directions.

        Blocking twice is a no-op.

        Raises:
            ValidationError: If blocking oneself
            NotFoundError: If the target does not exist
        """
        if viewer.id == target_id:
            raise ValidationError("You cannot block yourself")
        await self.get_user_or_404(target_id)

        created = await self.user_repo.add_block(viewer.id, target_id)
        await self.user_repo.remove_follow(viewer.id, target_id)
        await self.user_repo.remove_follow(target_id, viewer.id)

        if created:
            logger.info("User %s blocked user %s", viewer.id, target_id)
        return await self._follow_status(viewer.id, target_id)

    async def unblock(self, viewer: User, target_id: str) -> FollowStatus:
        if viewer.id == target_id:
            raise ValidationError("You cannot unblock yourself")
        await self.get_user_or_404(target_id)

        if await self.user_repo.remove_block(viewer.id, target_id):
            logger.info("User %s unblocked user %s", viewer.id, target_id)
        return await self._follow_status(viewer.id, target_id)

    async def list_blocked(self, viewer: User) -> List[UserSummary]:
        users = await self.user_repo.list_blocked(viewer.id)
        return [UserSummary.model_validate(u) for u in users]

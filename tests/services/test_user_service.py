"""
Unit tests for UserService.
Tests accounts, profiles and the follow/block graph.
"""
import pytest

from devfolio.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from devfolio.core.security import decode_token
from devfolio.models import MessagePermission, ProfileVisibility
from devfolio.repositories.user_repo import UserRepository
from devfolio.schemas.user import (
    PasswordChange,
    PrivacyUpdate,
    ProfileUpdate,
    RegisterRequest,
)
from devfolio.services.user_service import UserService


class TestAccounts:
    """Test registration, login and self-service updates."""

    async def test_register_returns_token_for_new_user(self, db_session):
        service = UserService(db_session)

        result = await service.register(
            RegisterRequest(username="  ada ", email="Ada@Example.com", password="analytical")
        )

        assert result.user.username == "ada"
        assert result.user.email == "ada@example.com"
        assert result.user.message_permission == MessagePermission.EVERYONE
        assert decode_token(result.token)["sub"] == result.user.id

    async def test_register_duplicate_email_is_rejected(self, db_session, test_user):
        service = UserService(db_session)

        with pytest.raises(ValidationError, match="Email already registered"):
            await service.register(
                RegisterRequest(username="someone", email="ALICE@example.com", password="password")
            )

    async def test_register_duplicate_username_is_rejected(self, db_session, test_user):
        service = UserService(db_session)

        with pytest.raises(ValidationError, match="Username already taken"):
            await service.register(
                RegisterRequest(username="alice", email="other@example.com", password="password")
            )

    @pytest.mark.parametrize("identifier", ["alice@example.com", "alice"])
    async def test_login_by_email_or_username(self, db_session, test_user, test_password, identifier):
        service = UserService(db_session)

        result = await service.login(identifier, test_password)

        assert result.user.id == test_user.id

    async def test_login_wrong_password(self, db_session, test_user):
        service = UserService(db_session)

        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await service.login("alice", "wrong-password")

    async def test_login_unknown_user(self, db_session, test_password):
        service = UserService(db_session)

        with pytest.raises(AuthenticationError):
            await service.login("ghost", test_password)

    async def test_update_profile(self, db_session, test_user, test_user_2):
        service = UserService(db_session)

        profile = await service.update_profile(
            test_user, ProfileUpdate(bio="Builds things", location="Lisbon")
        )
        assert profile.bio == "Builds things"
        assert profile.location == "Lisbon"

        with pytest.raises(ValidationError):
            await service.update_profile(test_user, ProfileUpdate(username="bob"))

    async def test_change_password(self, db_session, test_user, test_password):
        service = UserService(db_session)

        with pytest.raises(AuthenticationError):
            await service.change_password(
                test_user, PasswordChange(current_password="nope", new_password="new-password")
            )

        await service.change_password(
            test_user, PasswordChange(current_password=test_password, new_password="new-password")
        )
        result = await service.login("alice", "new-password")
        assert result.user.id == test_user.id

    async def test_update_privacy(self, db_session, test_user):
        service = UserService(db_session)

        profile = await service.update_privacy(
            test_user,
            PrivacyUpdate(
                message_permission=MessagePermission.FOLLOWERS,
                profile_visibility=ProfileVisibility.PRIVATE,
            )
        )

        assert profile.message_permission == MessagePermission.FOLLOWERS
        assert profile.profile_visibility == ProfileVisibility.PRIVATE
        assert profile.allow_messages is True


class TestSocialGraph:
    """Test follow and block edges."""

    async def test_follow_and_unfollow(self, db_session, test_user, test_user_2):
        service = UserService(db_session)

        status = await service.follow(test_user, test_user_2.id)
        assert status.is_following is True
        assert status.followers_count == 1

        again = await service.follow(test_user, test_user_2.id)
        assert again.followers_count == 1

        followers = await service.list_followers(test_user_2.id)
        assert [u.id for u in followers] == [test_user.id]

        status = await service.unfollow(test_user, test_user_2.id)
        assert status.is_following is False
        assert status.followers_count == 0

    async def test_follow_self_is_rejected(self, db_session, test_user):
        service = UserService(db_session)

        with pytest.raises(ValidationError):
            await service.follow(test_user, test_user.id)

    async def test_follow_unknown_user(self, db_session, test_user):
        service = UserService(db_session)

        with pytest.raises(NotFoundError):
            await service.follow(test_user, "missing")

    async def test_follow_blocked_pair_is_forbidden(self, db_session, test_user, test_user_2):
        service = UserService(db_session)
        await service.block(test_user_2, test_user.id)

        with pytest.raises(PermissionDeniedError):
            await service.follow(test_user, test_user_2.id)
        with pytest.raises(PermissionDeniedError):
            await service.follow(test_user_2, test_user.id)

    async def test_block_removes_follow_edges_both_ways(self, db_session, test_user, test_user_2):
        service = UserService(db_session)
        await service.follow(test_user, test_user_2.id)
        await service.follow(test_user_2, test_user.id)

        status = await service.block(test_user, test_user_2.id)

        assert status.is_blocked is True
        assert status.is_following is False
        assert await service.list_followers(test_user.id) == []
        assert await service.list_following(test_user.id) == []
        assert [u.id for u in await service.list_blocked(test_user)] == [test_user_2.id]

    async def test_block_is_idempotent_and_reversible(self, db_session, test_user, test_user_2):
        service = UserService(db_session)

        await service.block(test_user, test_user_2.id)
        await service.block(test_user, test_user_2.id)
        assert len(await service.list_blocked(test_user)) == 1

        status = await service.unblock(test_user, test_user_2.id)
        assert status.is_blocked is False
        assert await service.list_blocked(test_user) == []

    async def test_block_self_is_rejected(self, db_session, test_user):
        service = UserService(db_session)

        with pytest.raises(ValidationError):
            await service.block(test_user, test_user.id)

    async def test_social_snapshot(self, db_session, test_user, test_user_2, test_user_3):
        service = UserService(db_session)
        await service.follow(test_user_2, test_user.id)
        await service.follow(test_user, test_user_3.id)
        await service.block(test_user, test_user_2.id)

        snapshot = await service.get_social_snapshot(test_user.id)

        # The block dropped test_user_2's follow
        assert snapshot.followers == frozenset()
        assert snapshot.following == frozenset({test_user_3.id})
        assert snapshot.blocked == frozenset({test_user_2.id})
        assert snapshot.effective_permission == MessagePermission.EVERYONE


class TestProfiles:
    """Test public profile views."""

    async def test_anonymous_view_hides_email(self, db_session, test_user):
        service = UserService(db_session)

        profile = await service.get_profile(test_user.id)

        assert profile.username == "alice"
        assert profile.email is None
        assert profile.is_following is False

    async def test_show_email(self, db_session, make_user):
        service = UserService(db_session)
        open_user = await make_user("ivan", show_email=True)

        profile = await service.get_profile(open_user.id)
        assert profile.email == "ivan@example.com"

    async def test_viewer_flags(self, db_session, test_user, test_user_2):
        service = UserService(db_session)
        await service.follow(test_user, test_user_2.id)

        profile = await service.get_profile(test_user_2.id, viewer=test_user)

        assert profile.is_following is True
        assert profile.is_blocked is False
        assert profile.can_message is True
        assert profile.followers_count == 1

    async def test_can_message_reflects_permission(self, db_session, test_user, make_user):
        service = UserService(db_session)
        closed = await make_user("judy", message_permission=MessagePermission.NONE)

        profile = await service.get_profile(closed.id, viewer=test_user)
        assert profile.can_message is False

    async def test_can_message_with_existing_conversation(
        self, db_session, test_user, test_user_2, test_conversation
    ):
        """Test 'existing' still allows messaging when the pair already has a conversation."""
        service = UserService(db_session)
        await UserRepository(db_session).update(
            test_user_2.id, message_permission=MessagePermission.EXISTING
        )

        profile = await service.get_profile(test_user_2.id, viewer=test_user)
        assert profile.can_message is True

    async def test_can_message_without_conversation_at_existing_level(
        self, db_session, test_user, make_user
    ):
        service = UserService(db_session)
        picky = await make_user("kim", message_permission=MessagePermission.EXISTING)

        profile = await service.get_profile(picky.id, viewer=test_user)
        assert profile.can_message is False

    async def test_blocked_viewer_is_forbidden(self, db_session, test_user, test_user_2):
        service = UserService(db_session)
        await service.block(test_user_2, test_user.id)

        with pytest.raises(PermissionDeniedError):
            await service.get_profile(test_user_2.id, viewer=test_user)

    async def test_unknown_profile(self, db_session):
        service = UserService(db_session)

        with pytest.raises(NotFoundError):
            await service.get_profile("missing")

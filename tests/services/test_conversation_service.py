"""
Unit tests for ConversationService.
Tests business logic for conversation operations.
"""
import pytest
from sqlalchemy import select, func

from devfolio.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from devfolio.models import Conversation, Message, MessageReceipt, MessagePermission
from devfolio.repositories.user_repo import UserRepository
from devfolio.services.conversation_service import ConversationService
from devfolio.services.message_service import MessageService


async def count_rows(db_session, model) -> int:
    result = await db_session.execute(select(func.count()).select_from(model))
    return result.scalar()


class TestGetOrCreate:
    """Test lazy conversation creation."""

    async def test_creates_conversation_on_first_contact(self, db_session, test_user, test_user_2):
        """Test first contact creates a conversation with zeroed counters."""
        service = ConversationService(db_session)

        conversation = await service.get_or_create(test_user.id, test_user_2.id)

        assert conversation.participant.id == test_user_2.id
        assert conversation.participant.username == "bob"
        assert conversation.unread_count == 0
        assert conversation.last_message is None
        assert await count_rows(db_session, Conversation) == 1

    async def test_same_pair_returns_same_conversation(self, db_session, test_user, test_user_2):
        """Test calling twice, in either order, yields one conversation."""
        service = ConversationService(db_session)

        first = await service.get_or_create(test_user.id, test_user_2.id)
        second = await service.get_or_create(test_user.id, test_user_2.id)
        reverse = await service.get_or_create(test_user_2.id, test_user.id)

        assert first.id == second.id == reverse.id
        assert reverse.participant.id == test_user.id
        assert await count_rows(db_session, Conversation) == 1

    async def test_with_self_is_rejected(self, db_session, test_user):
        """Test a user cannot open a conversation with themselves."""
        service = ConversationService(db_session)

        with pytest.raises(ValidationError, match="Cannot create conversation with yourself"):
            await service.get_or_create(test_user.id, test_user.id)

    async def test_unknown_user_is_not_found(self, db_session, test_user):
        service = ConversationService(db_session)

        with pytest.raises(NotFoundError):
            await service.get_or_create(test_user.id, "00000000-0000-0000-0000-000000000000")

    async def test_recipient_with_none_permission_is_denied(self, db_session, test_user, make_user):
        service = ConversationService(db_session)
        closed = await make_user("dave", message_permission=MessagePermission.NONE)

        with pytest.raises(PermissionDeniedError, match="disabled messages"):
            await service.get_or_create(test_user.id, closed.id)

        assert await count_rows(db_session, Conversation) == 0

    async def test_recipient_with_messages_switched_off_is_denied(self, db_session, test_user, make_user):
        service = ConversationService(db_session)
        closed = await make_user("erin", allow_messages=False)

        with pytest.raises(PermissionDeniedError):
            await service.get_or_create(test_user.id, closed.id)

    async def test_existing_permission_denies_new_but_returns_seeded(
        self, db_session, test_user, test_user_2, test_conversation
    ):
        """Test 'existing' blocks first contact but returns an existing conversation."""
        service = ConversationService(db_session)
        await UserRepository(db_session).update(
            test_user_2.id, message_permission=MessagePermission.EXISTING
        )

        conversation = await service.get_or_create(test_user.id, test_user_2.id)
        assert conversation.id == test_conversation.id

    async def test_existing_permission_denies_first_contact(self, db_session, test_user, make_user):
        service = ConversationService(db_session)
        picky = await make_user("frank", message_permission=MessagePermission.EXISTING)

        with pytest.raises(PermissionDeniedError):
            await service.get_or_create(test_user.id, picky.id)

    async def test_followers_permission_requires_follow_edge(self, db_session, test_user, make_user):
        """Test 'followers' allows contact only with a follow edge in either direction."""
        service = ConversationService(db_session)
        user_repo = UserRepository(db_session)
        gated = await make_user("grace", message_permission=MessagePermission.FOLLOWERS)

        with pytest.raises(PermissionDeniedError):
            await service.get_or_create(test_user.id, gated.id)

        # gated follows the sender
        await user_repo.add_follow(gated.id, test_user.id)
        conversation = await service.get_or_create(test_user.id, gated.id)
        assert conversation.participant.id == gated.id

    async def test_followers_permission_allows_when_sender_follows(
        self, db_session, test_user, make_user
    ):
        service = ConversationService(db_session)
        gated = await make_user("heidi", message_permission=MessagePermission.FOLLOWERS)
        await UserRepository(db_session).add_follow(test_user.id, gated.id)

        conversation = await service.get_or_create(test_user.id, gated.id)
        assert conversation.participant.id == gated.id

    async def test_block_denies_even_with_existing_conversation(
        self, db_session, test_user, test_user_2, test_conversation
    ):
        """Test A blocks B; B cannot get the conversation with A."""
        service = ConversationService(db_session)
        await UserRepository(db_session).add_block(test_user.id, test_user_2.id)

        with pytest.raises(PermissionDeniedError, match="You are blocked by this user"):
            await service.get_or_create(test_user_2.id, test_user.id)

        with pytest.raises(PermissionDeniedError, match="You have blocked this user"):
            await service.get_or_create(test_user.id, test_user_2.id)

    async def test_block_denies_first_contact(self, db_session, test_user, test_user_2):
        service = ConversationService(db_session)
        await UserRepository(db_session).add_block(test_user_2.id, test_user.id)

        with pytest.raises(PermissionDeniedError):
            await service.get_or_create(test_user.id, test_user_2.id)

        assert await count_rows(db_session, Conversation) == 0


class TestConcurrentCreate:
    """Test first-contact races collapse onto one conversation."""

    async def test_conditional_insert_rejects_second_row(self, db_session, test_user, test_user_2):
        service = ConversationService(db_session)
        await service.conversation_repo.insert_if_absent(test_user.id, test_user_2.id)

        with pytest.raises(ConflictError):
            await service.conversation_repo.insert_if_absent(test_user_2.id, test_user.id)

        assert await count_rows(db_session, Conversation) == 1

    async def test_lost_race_returns_winning_conversation(
        self, db_session, test_user, test_user_2, mocker
    ):
        """Test a request that misses the lookup but loses the insert re-reads the winner."""
        service = ConversationService(db_session)
        repo = service.conversation_repo

        # The concurrent request commits first
        winner = await repo.insert_if_absent(test_user.id, test_user_2.id)

        real_find = repo.find_by_pair
        lookups = []

        async def stale_then_real(user_a_id, user_b_id):
            lookups.append((user_a_id, user_b_id))
            if len(lookups) == 1:
                return None
            return await real_find(user_a_id, user_b_id)

        mocker.patch.object(repo, "find_by_pair", side_effect=stale_then_real)

        conversation = await service.get_or_create(test_user.id, test_user_2.id)

        assert conversation.id == winner.id
        assert len(lookups) == 2
        assert await count_rows(db_session, Conversation) == 1


class TestListConversations:
    """Test conversation listing."""

    async def test_lists_only_own_conversations(
        self, db_session, test_user, test_user_2, test_user_3
    ):
        service = ConversationService(db_session)
        await service.get_or_create(test_user.id, test_user_2.id)
        await service.get_or_create(test_user_2.id, test_user_3.id)

        mine = await service.list_conversations(test_user.id)
        bobs = await service.list_conversations(test_user_2.id)

        assert [c.participant.id for c in mine] == [test_user_2.id]
        assert len(bobs) == 2

    async def test_orders_by_latest_message_with_own_unread(
        self, db_session, test_user, test_user_2, test_user_3
    ):
        """Test most recent activity comes first and unread counts are per caller."""
        service = ConversationService(db_session)
        messages = MessageService(db_session)

        with_bob = await service.get_or_create(test_user.id, test_user_2.id)
        with_carol = await service.get_or_create(test_user.id, test_user_3.id)

        await messages.send_message(with_carol.id, test_user_3.id, "hi from carol")
        await messages.send_message(with_bob.id, test_user_2.id, "hi from bob")
        await messages.send_message(with_bob.id, test_user_2.id, "still there?")

        listed = await service.list_conversations(test_user.id)

        assert [c.id for c in listed] == [with_bob.id, with_carol.id]
        assert listed[0].unread_count == 2
        assert listed[0].last_message.content == "still there?"
        assert listed[1].unread_count == 1

        bob_view = await service.list_conversations(test_user_2.id)
        assert bob_view[0].unread_count == 0

    async def test_empty_list(self, db_session, test_user):
        service = ConversationService(db_session)
        assert await service.list_conversations(test_user.id) == []


class TestDeleteConversation:
    """Test conversation deletion."""

    async def test_participant_deletes_with_messages(
        self, db_session, test_user, test_user_2, test_conversation
    ):
        service = ConversationService(db_session)
        messages = MessageService(db_session)
        await messages.send_message(test_conversation.id, test_user.id, "one")
        await messages.send_message(test_conversation.id, test_user_2.id, "two")

        result = await service.delete_conversation(test_conversation.id, test_user_2.id)

        assert result.messages_deleted == 2
        assert await count_rows(db_session, Conversation) == 0
        assert await count_rows(db_session, Message) == 0
        assert await count_rows(db_session, MessageReceipt) == 0

    async def test_non_participant_is_forbidden(
        self, db_session, test_user, test_user_3, test_conversation
    ):
        """Test an outsider cannot delete, and nothing is removed."""
        service = ConversationService(db_session)
        await MessageService(db_session).send_message(test_conversation.id, test_user.id, "keep me")

        with pytest.raises(PermissionDeniedError):
            await service.delete_conversation(test_conversation.id, test_user_3.id)

        assert await count_rows(db_session, Conversation) == 1
        assert await count_rows(db_session, Message) == 1

    async def test_missing_conversation_is_not_found(self, db_session, test_user):
        service = ConversationService(db_session)

        with pytest.raises(NotFoundError):
            await service.delete_conversation("missing", test_user.id)

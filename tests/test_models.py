"""
Tests for model-level helpers and constraints.
"""
import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from devfolio.models import Conversation, Message, UnreadCounts
from devfolio.models.conversation import participant_pair
from devfolio.models.thread import ThreadVote, VoteType, user_vote, vote_tally


class TestParticipantPair:
    """Tests for participant_pair()."""

    def test_sorts_ids(self):
        assert participant_pair("b", "a") == ("a", "b")
        assert participant_pair("a", "b") == ("a", "b")

    def test_rejects_same_id(self):
        with pytest.raises(ValueError):
            participant_pair("a", "a")


class TestUnreadCounts:
    """Tests for the UnreadCounts mapping."""

    def test_missing_user_reads_zero(self):
        counts = UnreadCounts({"alice": 3})
        assert counts["alice"] == 3
        assert counts["nobody"] == 0

    def test_membership_and_iteration(self):
        counts = UnreadCounts({"alice": 3, "bob": 0})
        assert "alice" in counts
        assert "nobody" not in counts
        assert sorted(counts) == ["alice", "bob"]
        assert len(counts) == 2

    def test_total(self):
        assert UnreadCounts({"alice": 3, "bob": 2}).total() == 5
        assert UnreadCounts().total() == 0

    def test_is_read_only(self):
        counts = UnreadCounts({"alice": 1})
        with pytest.raises(TypeError):
            counts["alice"] = 5


class TestConversationModel:
    """Tests for Conversation persistence rules."""

    async def test_participant_helpers(self, test_conversation, test_user, test_user_2):
        assert test_conversation.has_participant(test_user.id)
        assert test_conversation.get_other_participant_id(test_user.id) == test_user_2.id
        assert test_conversation.get_other_participant_id(test_user_2.id) == test_user.id
        assert test_conversation.unread_counts[test_user.id] == 0

    async def test_get_other_participant_rejects_outsider(self, test_conversation, test_user_3):
        with pytest.raises(ValueError):
            test_conversation.get_other_participant_id(test_user_3.id)

    async def test_pair_is_unique(self, db_session, test_conversation, test_user, test_user_2):
        low, high = participant_pair(test_user.id, test_user_2.id)
        db_session.add(Conversation(participant_low_id=low, participant_high_id=high))

        with pytest.raises(IntegrityError):
            await db_session.flush()
        await db_session.rollback()

        count = await db_session.execute(select(func.count()).select_from(Conversation))
        assert count.scalar() == 1

    async def test_sequence_is_unique_per_conversation(
        self, db_session, test_conversation, test_user
    ):
        db_session.add_all([
            Message(conversation_id=test_conversation.id, sender_id=test_user.id,
                    content="one", sequence_number=1),
            Message(conversation_id=test_conversation.id, sender_id=test_user.id,
                    content="two", sequence_number=1),
        ])

        with pytest.raises(IntegrityError):
            await db_session.flush()
        await db_session.rollback()


class TestVoteHelpers:
    """Test vote tallies computed from vote rows."""

    def votes(self):
        return [
            ThreadVote(user_id="a", vote_type=VoteType.UPVOTE),
            ThreadVote(user_id="b", vote_type=VoteType.UPVOTE),
            ThreadVote(user_id="c", vote_type=VoteType.DOWNVOTE),
        ]

    def test_tally(self):
        assert vote_tally(self.votes()) == {"upvotes": 2, "downvotes": 1, "vote_score": 1}
        assert vote_tally([]) == {"upvotes": 0, "downvotes": 0, "vote_score": 0}

    def test_user_vote(self):
        votes = self.votes()

        assert user_vote(votes, "c") == VoteType.DOWNVOTE
        assert user_vote(votes, "z") is None
        assert user_vote(votes, None) is None

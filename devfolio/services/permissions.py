"""
Messaging permission evaluator.

Pure decision logic: given immutable snapshots of two users' social state,
decide whether the sender may open a conversation with, or send a message
to, the recipient. Nothing here touches the database; callers build the
snapshots with UserService.get_social_snapshot().
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from devfolio.core.exceptions import PermissionDeniedError
from devfolio.models.user import MessagePermission


@dataclass(frozen=True)
class SocialSnapshot:
    """A user's messaging settings and social-graph edges at one point in time."""

    user_id: str
    message_permission: Optional[MessagePermission] = MessagePermission.EVERYONE
    allow_messages: bool = True
    followers: FrozenSet[str] = field(default_factory=frozenset)
    following: FrozenSet[str] = field(default_factory=frozenset)
    blocked: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def effective_permission(self) -> MessagePermission:
        """Unset permission behaves like ``everyone``."""
        return self.message_permission or MessagePermission.EVERYONE

    def has_follow_edge_with(self, user_id: str) -> bool:
        """True if ``user_id`` follows this user or this user follows them."""
        return user_id in self.followers or user_id in self.following


def check_not_blocked(sender: SocialSnapshot, recipient: SocialSnapshot) -> None:
    """
    Reject the pair if either user has blocked the other.

    Raises:
        PermissionDeniedError: If a block edge exists in either direction
    """
    if sender.user_id in recipient.blocked:
        raise PermissionDeniedError("You are blocked by this user")
    if recipient.user_id in sender.blocked:
        raise PermissionDeniedError("You have blocked this user")


def check_new_conversation(
    sender: SocialSnapshot,
    recipient: SocialSnapshot,
    conversation_exists: bool
) -> None:
    """
    Decide whether ``sender`` may open a conversation with ``recipient``.

    Block edges are always checked. When a conversation already exists the
    recipient's permission level is not consulted; otherwise:

    - ``none`` or ``allow_messages = False``: denied
    - ``existing``: denied, a first contact is never an existing conversation
    - ``followers``: allowed only with a follow edge in either direction
    - ``everyone``: allowed

    Raises:
        PermissionDeniedError: If the conversation may not be opened
    """
    if sender.user_id == recipient.user_id:
        raise PermissionDeniedError("Cannot create conversation with yourself")

    check_not_blocked(sender, recipient)

    if conversation_exists:
        return

    permission = recipient.effective_permission

    if permission == MessagePermission.NONE or not recipient.allow_messages:
        raise PermissionDeniedError("This user has disabled messages")

    if permission == MessagePermission.EXISTING:
        raise PermissionDeniedError("This user only accepts messages from existing conversations")

    if permission == MessagePermission.FOLLOWERS and not recipient.has_follow_edge_with(sender.user_id):
        raise PermissionDeniedError(
            "This user only accepts messages from people they follow or who follow them"
        )


def check_send(sender: SocialSnapshot, recipient: SocialSnapshot) -> None:
    """
    Decide whether ``sender`` may send into an existing conversation with ``recipient``.

    Re-evaluated on every send. Only block edges and the ``none`` level
    deny; every other level allows continued messaging.

    Raises:
        PermissionDeniedError: If the message may not be sent
    """
    check_not_blocked(sender, recipient)

    if recipient.effective_permission == MessagePermission.NONE:
        raise PermissionDeniedError("The recipient has disabled messages")


def can_message(
    sender: SocialSnapshot,
    recipient: SocialSnapshot,
    conversation_exists: bool = False
) -> bool:
    """
    Whether ``sender`` could message ``recipient`` right now, for profile UI hints.

    With an existing conversation this is the per-send check; otherwise it
    is the first-contact check.
    """
    try:
        if conversation_exists:
            check_send(sender, recipient)
        else:
            check_new_conversation(sender, recipient, conversation_exists=False)
    except PermissionDeniedError:
        return False
    return True

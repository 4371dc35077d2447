"""initial_schema

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-01-05 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f7b9d2'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """
    Create users, social graph, projects, reviews and direct-message tables.

    conversations.last_message_id references messages, which reference
    conversations, so that foreign key is added after both tables exist.
    """
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('username', sa.String(30), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('avatar', sa.String(500), nullable=False),
        sa.Column('bio', sa.String(500), nullable=False),
        sa.Column('location', sa.String(100), nullable=False),
        sa.Column('website', sa.String(200), nullable=False),
        sa.Column('github', sa.String(100), nullable=False),
        sa.Column('twitter', sa.String(100), nullable=False),
        sa.Column('linkedin', sa.String(100), nullable=False),
        sa.Column('reputation', sa.Integer(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('role', sa.String(5), nullable=False),
        sa.Column('profile_visibility', sa.String(9), nullable=False),
        sa.Column('show_email', sa.Boolean(), nullable=False),
        sa.Column('message_permission', sa.String(9), nullable=False),
        sa.Column('allow_messages', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'user_follows',
        sa.Column('follower_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('followed_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('follower_id <> followed_id', name='ck_user_follows_not_self'),
    )
    op.create_index('idx_user_follows_followed', 'user_follows', ['followed_id'])

    op.create_table(
        'user_blocks',
        sa.Column('blocker_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('blocked_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('blocker_id <> blocked_id', name='ck_user_blocks_not_self'),
    )
    op.create_index('idx_user_blocks_blocked', 'user_blocks', ['blocked_id'])

    op.create_table(
        'projects',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('thumbnail', sa.String(500), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('demo_url', sa.String(500), nullable=False),
        sa.Column('github_url', sa.String(500), nullable=False),
        sa.Column('technologies', sa.JSON(), nullable=False),
        sa.Column('category', sa.String(11), nullable=False),
        sa.Column('status', sa.String(11), nullable=False),
        sa.Column('author_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_projects_author_id', 'projects', ['author_id'])
    op.create_index('idx_projects_created_at', 'projects', [sa.text('created_at DESC')])

    op.create_table(
        'project_likes',
        sa.Column('project_id', sa.String(36), sa.ForeignKey('projects.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_project_likes_user', 'project_likes', ['user_id'])

    op.create_table(
        'project_views',
        sa.Column('project_id', sa.String(36), sa.ForeignKey('projects.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('viewed_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'reviews',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('project_id', sa.String(36), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rating', sa.String(7), nullable=False),
        sa.Column('comment', sa.String(500), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('project_id', 'user_id', name='uq_reviews_project_user'),
    )
    op.create_index('ix_reviews_project_id', 'reviews', ['project_id'])
    op.create_index('ix_reviews_user_id', 'reviews', ['user_id'])

    op.create_table(
        'conversations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('participant_low_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('participant_high_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('last_message_id', sa.String(36), nullable=True),
        sa.Column('last_message_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_sequence', sa.BigInteger(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('participant_low_id', 'participant_high_id', name='uq_conversations_pair'),
        sa.CheckConstraint('participant_low_id < participant_high_id', name='ck_conversations_pair_order'),
    )

    op.create_table(
        'conversation_participants',
        sa.Column('conversation_id', sa.String(36), sa.ForeignKey('conversations.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('unread_count', sa.Integer(), nullable=False),
    )

    op.create_table(
        'messages',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('conversation_id', sa.String(36), sa.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sender_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('sequence_number', sa.BigInteger(), nullable=False),
        sa.Column('deleted', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('conversation_id', 'sequence_number', name='uq_conversation_sequence'),
    )
    op.create_index('ix_messages_conversation_id', 'messages', ['conversation_id'])
    op.create_index('ix_messages_sender_id', 'messages', ['sender_id'])
    op.create_index('ix_messages_created_at', 'messages', ['created_at'])
    op.create_index(
        'idx_messages_conversation_seq',
        'messages',
        ['conversation_id', sa.text('sequence_number DESC')]
    )

    op.create_table(
        'message_receipts',
        sa.Column('message_id', sa.String(36), sa.ForeignKey('messages.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_message_receipts_user', 'message_receipts', ['user_id'])

    # SQLite cannot add constraints after the fact; batch mode rebuilds the table
    with op.batch_alter_table('conversations') as batch_op:
        batch_op.create_foreign_key(
            'fk_conversations_last_message',
            'messages',
            ['last_message_id'],
            ['id'],
            ondelete='SET NULL'
        )


def downgrade() -> None:
    with op.batch_alter_table('conversations') as batch_op:
        batch_op.drop_constraint('fk_conversations_last_message', type_='foreignkey')

    op.drop_table('message_receipts')
    op.drop_table('messages')
    op.drop_table('conversation_participants')
    op.drop_table('conversations')
    op.drop_table('reviews')
    op.drop_table('project_views')
    op.drop_table('project_likes')
    op.drop_table('projects')
    op.drop_table('user_blocks')
    op.drop_table('user_follows')
    op.drop_table('users')

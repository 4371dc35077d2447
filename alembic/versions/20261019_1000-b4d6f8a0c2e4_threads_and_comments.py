"""threads_and_comments

Revision ID: b4d6f8a0c2e4
Revises: a1c3e5f7b9d2
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b4d6f8a0c2e4'
down_revision: Union[str, None] = 'a1c3e5f7b9d2'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _reaction_table(name: str, target_column: str, target_table: str, with_vote: bool):
    columns = [
        sa.Column(target_column, sa.String(36), sa.ForeignKey(f'{target_table}.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    ]
    if with_vote:
        columns.append(sa.Column('vote_type', sa.String(8), nullable=False))
    columns.append(sa.Column('created_at', sa.DateTime(timezone=True), nullable=False))
    op.create_table(name, *columns)


def upgrade() -> None:
    """Create discussion threads, comments and their likes, votes and views."""
    op.create_table(
        'threads',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('category', sa.String(13), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('author_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('views', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_threads_author_id', 'threads', ['author_id'])
    op.create_index('idx_threads_created_at', 'threads', [sa.text('created_at DESC')])
    op.create_index('idx_threads_category_created', 'threads', ['category', sa.text('created_at DESC')])

    _reaction_table('thread_votes', 'thread_id', 'threads', with_vote=True)
    _reaction_table('thread_likes', 'thread_id', 'threads', with_vote=False)

    op.create_table(
        'thread_views',
        sa.Column('thread_id', sa.String(36), sa.ForeignKey('threads.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('viewed_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'comments',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('author_id', sa.String(36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('thread_id', sa.String(36), sa.ForeignKey('threads.id', ondelete='CASCADE'), nullable=False),
        sa.Column('parent_id', sa.String(36), sa.ForeignKey('comments.id', ondelete='CASCADE'), nullable=True),
        sa.Column('is_edited', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_comments_author_id', 'comments', ['author_id'])
    op.create_index('ix_comments_parent_id', 'comments', ['parent_id'])
    op.create_index('idx_comments_thread_created', 'comments', ['thread_id', 'created_at'])

    _reaction_table('comment_votes', 'comment_id', 'comments', with_vote=True)
    _reaction_table('comment_likes', 'comment_id', 'comments', with_vote=False)


def downgrade() -> None:
    op.drop_table('comment_likes')
    op.drop_table('comment_votes')
    op.drop_table('comments')
    op.drop_table('thread_views')
    op.drop_table('thread_likes')
    op.drop_table('thread_votes')
    op.drop_table('threads')

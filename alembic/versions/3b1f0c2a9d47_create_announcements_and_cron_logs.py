"""Create announcements and cron_logs tables

Revision ID: 3b1f0c2a9d47
Revises: 
Create Date: 2026-10-19 09:12:40.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1f0c2a9d47'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the announcement and cron log tables."""
    op.create_table(
        'announcements',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=True),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('bar_name', sa.String(), nullable=True),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('content', sa.JSON(), nullable=True),
        sa.Column('background', sa.String(), nullable=False),
        sa.Column('text_color', sa.String(), nullable=False),
        sa.Column('is_sticky', sa.Boolean(), nullable=False),
        sa.Column('is_closable', sa.Boolean(), nullable=False),
        sa.Column('visibility', sa.Boolean(), nullable=False),
        sa.Column('scheduledStart', sa.DateTime(timezone=True), nullable=True),
        sa.Column('scheduledEnd', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )
    op.create_index(op.f('ix_announcements_user_id'), 'announcements', ['user_id'], unique=False)
    op.create_index(op.f('ix_announcements_visibility'), 'announcements', ['visibility'], unique=False)

    op.create_table(
        'cron_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('level', sa.String(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('meta', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_cron_logs_id'), 'cron_logs', ['id'], unique=False)
    op.create_index(op.f('ix_cron_logs_level'), 'cron_logs', ['level'], unique=False)
    op.create_index(op.f('ix_cron_logs_created_at'), 'cron_logs', ['created_at'], unique=False)


def downgrade() -> None:
    """Drop the announcement and cron log tables."""
    op.drop_index(op.f('ix_cron_logs_created_at'), table_name='cron_logs')
    op.drop_index(op.f('ix_cron_logs_level'), table_name='cron_logs')
    op.drop_index(op.f('ix_cron_logs_id'), table_name='cron_logs')
    op.drop_table('cron_logs')
    op.drop_index(op.f('ix_announcements_visibility'), table_name='announcements')
    op.drop_index(op.f('ix_announcements_user_id'), table_name='announcements')
    op.drop_table('announcements')

"""initial: users, events, event_attendees

Learn: event_attendees has a composite primary key and CASCADE on both
foreign keys — deleting a user or an event takes its attendance rows
with it. events.creator_id cascades from users the same way.

Revision ID: 4c1f0a9d2b7e
Revises:
Create Date: 2026-10-19 10:12:40.118204
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1f0a9d2b7e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('username', sa.String(255), nullable=False, unique=True),
        sa.Column('password', sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('date', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column(
            'creator_id',
            sa.Integer(),
            sa.ForeignKey('users.id', ondelete='CASCADE', onupdate='CASCADE'),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index('ix_events_creator_id', 'events', ['creator_id'])

    # ─── Attendance join table ───────────────────────────
    op.create_table(
        'event_attendees',
        sa.Column(
            'user_id',
            sa.Integer(),
            sa.ForeignKey('users.id', ondelete='CASCADE', onupdate='CASCADE'),
            primary_key=True,
        ),
        sa.Column(
            'event_id',
            sa.Integer(),
            sa.ForeignKey('events.id', ondelete='CASCADE', onupdate='CASCADE'),
            primary_key=True,
        ),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table('event_attendees')
    op.drop_index('ix_events_creator_id', table_name='events')
    op.drop_table('events')
    op.drop_table('users')

"""001_initial_schema

Revision ID: 001
Revises:
Create Date: 2026-10-16 09:00:00.000000

Initial database schema: users, venues, sessions and session_participants.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables from scratch."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('google_id', sa.String(), nullable=True),
        sa.Column('avatar', sa.String(), nullable=True),
        sa.Column('profile_picture', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('google_id'),
    )
    op.create_index('idx_users_email', 'users', ['email'])
    op.create_index('idx_users_google_id', 'users', ['google_id'])

    op.create_table(
        'venues',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('sport', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', 'sport', name='uq_venues_name_sport'),
    )
    op.create_index('idx_venues_sport', 'venues', ['sport'])

    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('sport', sa.String(), nullable=False),
        sa.Column('venue', sa.String(), nullable=False),
        sa.Column('court_number', sa.String(), nullable=True),
        sa.Column('start_date', sa.String(), nullable=True),
        sa.Column('start_time', sa.String(), nullable=True),
        sa.Column('end_date', sa.String(), nullable=True),
        sa.Column('end_time', sa.String(), nullable=True),
        sa.Column('skill_level_start', sa.String(), nullable=False),
        sa.Column('skill_level_end', sa.String(), nullable=False),
        sa.Column('max_players', sa.Integer(), nullable=False),
        sa.Column('fee', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('count_host_in', sa.Boolean(), nullable=False),
        sa.Column('host_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint('max_players >= 2', name='ck_sessions_max_players'),
        sa.CheckConstraint('fee >= 0', name='ck_sessions_fee'),
        sa.ForeignKeyConstraint(['host_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_sessions_host', 'sessions', ['host_id'])
    op.create_index('idx_sessions_start', 'sessions', ['start_date', 'start_time'])
    op.create_index('idx_sessions_sport', 'sessions', ['sport'])

    op.create_table(
        'session_participants',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['sessions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'user_id', name='uq_session_participants_session_user'),
    )
    op.create_index('idx_session_participants_session_id', 'session_participants', ['session_id'])
    op.create_index('idx_session_participants_user_id', 'session_participants', ['user_id'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('idx_session_participants_user_id', table_name='session_participants')
    op.drop_index('idx_session_participants_session_id', table_name='session_participants')
    op.drop_table('session_participants')
    op.drop_index('idx_sessions_sport', table_name='sessions')
    op.drop_index('idx_sessions_start', table_name='sessions')
    op.drop_index('idx_sessions_host', table_name='sessions')
    op.drop_table('sessions')
    op.drop_index('idx_venues_sport', table_name='venues')
    op.drop_table('venues')
    op.drop_index('idx_users_google_id', table_name='users')
    op.drop_index('idx_users_email', table_name='users')
    op.drop_table('users')

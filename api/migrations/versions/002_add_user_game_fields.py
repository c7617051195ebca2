"""Add game statistics to users table

Revision ID: 002_add_user_game_fields
Revises: 001
Create Date: 2026-10-14

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '002_add_user_game_fields'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column('users', sa.Column('games_played', sa.Integer(), nullable=False, server_default='0'))
    op.add_column('users', sa.Column('current_game_id', sa.Uuid(), nullable=True))


def downgrade() -> None:
    op.drop_column('users', 'current_game_id')
    op.drop_column('users', 'games_played')

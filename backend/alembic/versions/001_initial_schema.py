"""Initial schema

Revision ID: 001
Revises:
Create Date: 2025-11-13 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Finished sets reported by the counting device
    op.create_table(
        'workout_sets',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('rep_count', sa.Integer(), nullable=False),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_workout_sets_completed_at', 'workout_sets', ['completed_at'])

    # Single-row preferences pushed to the device
    op.create_table(
        'counter_preferences',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('target_reps', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('haptics_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    op.drop_table('counter_preferences')
    op.drop_index('ix_workout_sets_completed_at', table_name='workout_sets')
    op.drop_table('workout_sets')

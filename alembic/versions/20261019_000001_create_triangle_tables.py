"""Create triangle engine tables.

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, plans, triangles, triangle_positions, transactions."""

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('username', sa.String(255), nullable=True),
        sa.Column('referral_code', sa.String(20), nullable=True),
        sa.Column('plan', sa.String(50), nullable=False),
        sa.Column('upline_id', sa.Integer(), nullable=True),
        sa.Column('balance', sa.DECIMAL(18, 8), nullable=False, server_default='0'),
        sa.Column('total_earned', sa.DECIMAL(18, 8), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint('balance >= 0', name='check_user_balance_non_negative'),
        sa.CheckConstraint('total_earned >= 0', name='check_user_total_earned_non_negative'),
        sa.ForeignKeyConstraint(['upline_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_referral_code', 'users', ['referral_code'], unique=True)
    op.create_index('ix_users_plan', 'users', ['plan'])
    op.create_index('ix_users_upline_id', 'users', ['upline_id'])

    op.create_table(
        'plans',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('payout', sa.DECIMAL(18, 8), nullable=False),
        sa.CheckConstraint('payout > 0', name='check_plan_payout_positive'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_plans_name', 'plans', ['name'], unique=True)

    op.create_table(
        'triangles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('plan_type', sa.String(50), nullable=False),
        sa.Column('is_complete', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('payout_processed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_triangles_plan_open', 'triangles', ['plan_type', 'is_complete'])

    op.create_table(
        'triangle_positions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('triangle_id', sa.Integer(), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('index', sa.Integer(), nullable=False),
        sa.Column('position_key', sa.String(8), nullable=False),
        sa.Column('occupant_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint('level >= 1 AND level <= 4', name='check_triangle_position_level_range'),
        sa.ForeignKeyConstraint(['triangle_id'], ['triangles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['occupant_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('triangle_id', 'level', 'index', name='uq_triangle_positions_slot'),
        sa.UniqueConstraint('triangle_id', 'position_key', name='uq_triangle_positions_key'),
    )
    op.create_index('ix_triangle_positions_triangle_id', 'triangle_positions', ['triangle_id'])
    op.create_index('idx_triangle_positions_occupant', 'triangle_positions', ['occupant_id'])

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('amount', sa.DECIMAL(18, 8), nullable=False),
        sa.Column('transaction_id', sa.String(64), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint('amount > 0', name='check_transaction_amount_positive'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('transaction_id'),
    )
    op.create_index('ix_transactions_user_id', 'transactions', ['user_id'])
    op.create_index('ix_transactions_status', 'transactions', ['status'])
    op.create_index('idx_transactions_user_type', 'transactions', ['user_id', 'type'])


def downgrade() -> None:
    """Drop triangle engine tables."""
    op.drop_table('transactions')
    op.drop_table('triangle_positions')
    op.drop_table('triangles')
    op.drop_table('plans')
    op.drop_table('users')

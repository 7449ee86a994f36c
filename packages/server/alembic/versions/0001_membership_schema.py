"""Resources and membership requests

Revision ID: 0001_membership_schema
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001_membership_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('resources',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('capacity', sa.Integer(), server_default='0', nullable=False),
        sa.Column('approved_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('capacity >= 0', name='ck_resources_capacity_non_negative'),
        sa.CheckConstraint('approved_count >= 0', name='ck_resources_approved_count_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_resources_id'), 'resources', ['id'], unique=False)
    op.create_index(op.f('ix_resources_type'), 'resources', ['type'], unique=False)
    op.create_index(op.f('ix_resources_owner_id'), 'resources', ['owner_id'], unique=False)

    op.create_table('membership_requests',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('resource_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('resource_type', sa.String(), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('status', sa.String(), server_default='pending', nullable=False),
        sa.Column('role', sa.String(), nullable=True),
        sa.Column('message', sa.String(), nullable=True),
        sa.Column('requested_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('decided_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('withdrawn_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('withdrawn_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.ForeignKeyConstraint(['resource_id'], ['resources.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_membership_requests_id'), 'membership_requests', ['id'], unique=False)
    op.create_index(op.f('ix_membership_requests_resource_id'), 'membership_requests', ['resource_id'], unique=False)
    op.create_index(op.f('ix_membership_requests_user_id'), 'membership_requests', ['user_id'], unique=False)
    op.create_index(op.f('ix_membership_requests_status'), 'membership_requests', ['status'], unique=False)

    # One live (non-withdrawn) row per resource/user pair
    op.create_index(
        'uq_membership_requests_live_pair',
        'membership_requests',
        ['resource_id', 'user_id'],
        unique=True,
        postgresql_where=sa.text("status <> 'withdrawn'"),
    )


def downgrade() -> None:
    op.drop_index('uq_membership_requests_live_pair', table_name='membership_requests')
    op.drop_index(op.f('ix_membership_requests_status'), table_name='membership_requests')
    op.drop_index(op.f('ix_membership_requests_user_id'), table_name='membership_requests')
    op.drop_index(op.f('ix_membership_requests_resource_id'), table_name='membership_requests')
    op.drop_index(op.f('ix_membership_requests_id'), table_name='membership_requests')
    op.drop_table('membership_requests')
    op.drop_index(op.f('ix_resources_owner_id'), table_name='resources')
    op.drop_index(op.f('ix_resources_type'), table_name='resources')
    op.drop_index(op.f('ix_resources_id'), table_name='resources')
    op.drop_table('resources')

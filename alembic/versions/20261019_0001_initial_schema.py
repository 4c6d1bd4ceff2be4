"""Initial schema - users, country data, startups

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='viewer'),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('organization', sa.String(255), nullable=True),
        sa.Column('job_title', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Country metrics, one row per country and year
    op.create_table(
        'country_data',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('country_id', sa.String(16), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False, index=True),
        sa.Column('year', sa.Integer(), nullable=False, index=True),
        sa.Column('final_score', sa.Float(), nullable=False),
        sa.Column('literacy_rate', sa.Float(), nullable=False),
        sa.Column('digital_infrastructure', sa.Float(), nullable=False),
        sa.Column('investment', sa.Float(), nullable=False),
        sa.Column('population', sa.Float(), nullable=True),
        sa.Column('gdp', sa.Float(), nullable=True),
        sa.Column('created_by', sa.String(255), nullable=False, server_default='admin'),
        sa.Column('updated_by', sa.String(255), nullable=False, server_default='admin'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('country_id', 'year', name='uq_country_data_country_year'),
    )

    # Startup directory
    op.create_table(
        'startups',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, index=True),
        sa.Column('country', sa.String(100), nullable=False, index=True),
        sa.Column('sector', sa.String(500), nullable=False),
        sa.Column('founded_year', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('website', sa.String(500), nullable=True),
        sa.Column('added_by', sa.String(255), nullable=False, server_default='public'),
        sa.Column('added_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('verification_status', sa.String(20), nullable=False, server_default='pending', index=True),
        sa.Column('verified_by', sa.String(255), nullable=True),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('startups')
    op.drop_table('country_data')
    op.drop_table('users')

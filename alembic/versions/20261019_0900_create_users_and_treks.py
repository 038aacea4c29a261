"""create users and treks tables

Revision ID: 20261019_0900_create_users_and_treks
Revises:
Create Date: 2026-10-19 09:00:00
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = '20261019_0900_create_users_and_treks'
down_revision = None
branch_labels = None
depends_on = None

DIFFICULTIES = ('Easy', 'Medium', 'Hard')

def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'treks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('location', sa.String(255), nullable=False),
        sa.Column('difficulty', sa.Enum(*DIFFICULTIES, name='trek_difficulty'), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('images', sa.JSON().with_variant(JSONB, 'postgresql'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('price >= 0', name='ck_treks_price_non_negative'),
    )
    op.create_index('ix_treks_id', 'treks', ['id'])
    op.create_index('ix_treks_owner_id', 'treks', ['owner_id'])
    op.create_index('ix_treks_created_at', 'treks', ['created_at'])

def downgrade() -> None:
    op.drop_index('ix_treks_created_at', table_name='treks')
    op.drop_index('ix_treks_owner_id', table_name='treks')
    op.drop_index('ix_treks_id', table_name='treks')
    op.drop_table('treks')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
    sa.Enum(name='trek_difficulty').drop(op.get_bind(), checkfirst=True)

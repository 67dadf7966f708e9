"""create_users

Revision ID: 5b1e2c9d4a70
Revises:
Create Date: 2026-10-19 10:02:41.118530

"""
from alembic import op
import sqlalchemy as sa


revision = '5b1e2c9d4a70'
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum('ADMIN', 'TRADER', 'INVESTOR', name='userrole')
user_status = sa.Enum('ACTIVE', 'INACTIVE', 'SUSPENDED', name='userstatus')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('status', user_status, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)


def downgrade() -> None:
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
    user_status.drop(op.get_bind(), checkfirst=True)
    user_role.drop(op.get_bind(), checkfirst=True)

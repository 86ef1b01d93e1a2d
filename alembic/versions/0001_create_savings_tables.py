"""create accounts, customers, milestones and savings tables

Revision ID: 0001_create_savings_tables
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_create_savings_tables'
down_revision = None
branch_labels = None
depends_on = None

account_role = sa.Enum('CHILD', 'PARENT', 'ADMIN', name='account_role')
milestone_status = sa.Enum('active', 'completed', name='milestone_status')

def upgrade():
    op.create_table(
        'accounts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String, nullable=False),
        sa.Column('role', account_role, nullable=False),
        sa.Column('child_id', sa.Uuid(), nullable=True),
        sa.Column('dob', sa.Date, nullable=False),
        sa.Column('created_at', sa.Date, nullable=False),
    )
    op.create_index('ix_accounts_email', 'accounts', ['email'], unique=True)

    op.create_table(
        'customers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('parent_id', sa.Uuid(), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('child_id', sa.Uuid(), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False),
    )

    op.create_table(
        'milestones',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('target_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('saved_amount', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('completion_date', sa.Date, nullable=True),
        sa.Column('status', milestone_status, nullable=False),
        sa.Column('version', sa.Integer, nullable=False),
    )
    op.create_index('ix_milestones_user_id', 'milestones', ['user_id'])
    op.create_index('ix_milestones_name', 'milestones', ['name'])
    op.create_index('ix_milestones_start_date', 'milestones', ['start_date'])
    op.create_index('ix_milestones_completion_date', 'milestones', ['completion_date'])
    op.create_index('ix_milestones_status', 'milestones', ['status'])

    op.create_table(
        'savings',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('milestone_id', sa.Uuid(), nullable=False),
    )
    op.create_index('ix_savings_user_id', 'savings', ['user_id'])
    op.create_index('ix_savings_date', 'savings', ['date'])
    op.create_index('ix_savings_milestone_id', 'savings', ['milestone_id'])

def downgrade():
    op.drop_table('savings')
    op.drop_table('milestones')
    op.drop_table('customers')
    op.drop_index('ix_accounts_email', table_name='accounts')
    op.drop_table('accounts')
    milestone_status.drop(op.get_bind(), checkfirst=True)
    account_role.drop(op.get_bind(), checkfirst=True)

"""create_autotrack_tables

Revision ID: 3a7c2e91d4b0
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3a7c2e91d4b0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column('role', sa.String(50), nullable=False, server_default='employee'),
        sa.Column('subrole', sa.String(20), nullable=True),
        sa.Column('department', sa.String(100), nullable=False, server_default='Unassigned'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_department', 'users', ['department'])

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tool_name', sa.String(255), nullable=False),
        sa.Column('vendor_name', sa.String(255), nullable=True),
        sa.Column('department', sa.String(100), nullable=False),
        sa.Column('purpose', sa.Text(), nullable=False),
        sa.Column('cost', sa.Numeric(12, 2), nullable=False),
        sa.Column('duration_months', sa.Integer(), nullable=False),
        sa.Column('alert_days', sa.Integer(), nullable=True),
        sa.Column('invoice_url', sa.String(500), nullable=True),
        sa.Column('status', sa.String(50), nullable=False, server_default='Pending'),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('request_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('approval_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('apa_approval_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('payment_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('expiry_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('payment_mode', sa.String(50), nullable=True),
        sa.Column('transaction_id', sa.String(255), nullable=True),
        sa.Column('requested_by', sa.Integer(), nullable=False),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.Column('apa_approved_by', sa.Integer(), nullable=True),
        sa.Column('paid_by', sa.Integer(), nullable=True),
        sa.Column('renewal_of_id', sa.Integer(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['requested_by'], ['users.id'], name='fk_subscriptions_requested_by'),
        sa.ForeignKeyConstraint(['approved_by'], ['users.id'], name='fk_subscriptions_approved_by'),
        sa.ForeignKeyConstraint(['apa_approved_by'], ['users.id'], name='fk_subscriptions_apa_approved_by'),
        sa.ForeignKeyConstraint(['paid_by'], ['users.id'], name='fk_subscriptions_paid_by'),
        sa.ForeignKeyConstraint(['renewal_of_id'], ['subscriptions.id'], name='fk_subscriptions_renewal_of_id'),
    )
    op.create_index('ix_subscriptions_id', 'subscriptions', ['id'])
    op.create_index('ix_subscriptions_department', 'subscriptions', ['department'])
    op.create_index('ix_subscriptions_status', 'subscriptions', ['status'])
    op.create_index('ix_subscriptions_expiry_date', 'subscriptions', ['expiry_date'])
    op.create_index('ix_subscriptions_requested_by', 'subscriptions', ['requested_by'])
    op.create_index('ix_subscriptions_renewal_of_id', 'subscriptions', ['renewal_of_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('kind', sa.String(50), nullable=False, server_default='info'),
        sa.Column('subscription_id', sa.Integer(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_notifications_user_id'),
        sa.ForeignKeyConstraint(['subscription_id'], ['subscriptions.id'], name='fk_notifications_subscription_id'),
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'])
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_subscription_id', 'notifications', ['subscription_id'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('action_type', sa.String(50), nullable=False),
        sa.Column('actor_user_id', sa.Integer(), nullable=False),
        sa.Column('subscription_id', sa.Integer(), nullable=False),
        sa.Column('from_status', sa.String(50), nullable=True),
        sa.Column('to_status', sa.String(50), nullable=False),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['actor_user_id'], ['users.id'], name='fk_audit_logs_actor_user_id'),
        sa.ForeignKeyConstraint(['subscription_id'], ['subscriptions.id'], name='fk_audit_logs_subscription_id'),
    )
    op.create_index('ix_audit_logs_id', 'audit_logs', ['id'])
    op.create_index('ix_audit_logs_action_type', 'audit_logs', ['action_type'])
    op.create_index('ix_audit_logs_actor_user_id', 'audit_logs', ['actor_user_id'])
    op.create_index('ix_audit_logs_subscription_id', 'audit_logs', ['subscription_id'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_table('notifications')
    op.drop_table('subscriptions')
    op.drop_table('users')

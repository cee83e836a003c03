"""entitlement tables: users, subscriptions, daily_usage, monthly_usage

Revision ID: 3f1c9a2d7b64
Revises:
Create Date: 2026-10-18 09:12:44.120318
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c9a2d7b64'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('display_name', sa.String(length=50), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('users', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_users_user_id'), ['user_id'], unique=True)
        batch_op.create_index(batch_op.f('ix_users_email'), ['email'], unique=True)

    op.create_table(
        'subscriptions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('tier', sa.String(length=32), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('billing_period', sa.String(length=16), nullable=False),
        sa.Column('stripe_customer_id', sa.String(length=64), nullable=True),
        sa.Column('stripe_subscription_id', sa.String(length=64), nullable=True),
        sa.Column('current_period_start', sa.DateTime(), nullable=True),
        sa.Column('current_period_end', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    with op.batch_alter_table('subscriptions', schema=None) as batch_op:
        # 사용자당 구독 row 1개
        batch_op.create_index(batch_op.f('ix_subscriptions_user_id'), ['user_id'], unique=True)
        batch_op.create_index(batch_op.f('ix_subscriptions_tier'), ['tier'], unique=False)
        batch_op.create_index(batch_op.f('ix_subscriptions_status'), ['status'], unique=False)
        batch_op.create_index(batch_op.f('ix_subscriptions_stripe_customer_id'), ['stripe_customer_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_subscriptions_stripe_subscription_id'), ['stripe_subscription_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_subscriptions_current_period_end'), ['current_period_end'], unique=False)
        batch_op.create_index(batch_op.f('ix_subscriptions_created_at'), ['created_at'], unique=False)
        batch_op.create_index('idx_sub_user_status', ['user_id', 'status'], unique=False)

    # --- 일간 (free) ---
    op.create_table(
        'daily_usage',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('search_count', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'date', name='uq_daily_usage_user_date'),
    )
    with op.batch_alter_table('daily_usage', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_daily_usage_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_daily_usage_date'), ['date'], unique=False)

    # --- 월간 (lite) ---
    op.create_table(
        'monthly_usage',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('month', sa.Date(), nullable=False),
        sa.Column('search_count', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'month', name='uq_monthly_usage_user_month'),
    )
    with op.batch_alter_table('monthly_usage', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_monthly_usage_user_id'), ['user_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_monthly_usage_month'), ['month'], unique=False)


def downgrade():
    with op.batch_alter_table('monthly_usage', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_monthly_usage_month'))
        batch_op.drop_index(batch_op.f('ix_monthly_usage_user_id'))
    op.drop_table('monthly_usage')

    with op.batch_alter_table('daily_usage', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_daily_usage_date'))
        batch_op.drop_index(batch_op.f('ix_daily_usage_user_id'))
    op.drop_table('daily_usage')

    op.drop_table('subscriptions')
    op.drop_table('users')

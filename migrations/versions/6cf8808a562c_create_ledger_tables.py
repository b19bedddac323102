"""Create ledger tables

Revision ID: 6cf8808a562c
Revises:
Create Date: 2026-10-12 11:05:13.402117

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '6cf8808a562c'
down_revision = None
branch_labels = None
depends_on = None

account_role = sa.Enum('USER', 'ADMIN', name='accountrole')
ad_type = sa.Enum('VIDEO', 'BANNER', 'INTERACTIVE', name='adtype')
payment_method = sa.Enum('UPI', 'BANK', 'PAYTM', 'PAYPAL', name='paymentmethod')
withdrawal_status = sa.Enum('PENDING', 'PROCESSING', 'COMPLETED', 'FAILED', name='withdrawalstatus')


def upgrade():
    op.create_table(
        'accounts',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('total_earnings', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('available_balance', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('ads_watched_today', sa.Integer(), nullable=False),
        sa.Column('current_streak', sa.Integer(), nullable=False),
        sa.Column('last_earned_on', sa.Date(), nullable=True),
        sa.Column('role', account_role, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('total_earnings >= 0', name='ck_accounts_total_earnings_non_negative'),
        sa.CheckConstraint('available_balance >= 0', name='ck_accounts_available_balance_non_negative'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('username'),
        sa.UniqueConstraint('email')
    )
    op.create_table(
        'ads',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('type', ad_type, nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('reward', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('network_code', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.CheckConstraint('duration > 0', name='ck_ads_duration_positive'),
        sa.CheckConstraint('reward > 0', name='ck_ads_reward_positive'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table(
        'ad_views',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('account_id', sa.String(length=36), nullable=False),
        sa.Column('ad_id', sa.String(length=36), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('reward', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('required_seconds', sa.Integer(), nullable=False),
        sa.Column('viewed_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id']),
        sa.ForeignKeyConstraint(['ad_id'], ['ads.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_ad_views_account_id', 'ad_views', ['account_id'])
    op.create_index('ix_ad_views_viewed_at', 'ad_views', ['viewed_at'])
    op.create_table(
        'withdrawals',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('account_id', sa.String(length=36), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('payment_method', payment_method, nullable=False),
        sa.Column('payment_details', sa.Text(), nullable=False),
        sa.Column('status', withdrawal_status, nullable=False),
        sa.Column('requested_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('amount > 0', name='ck_withdrawals_amount_positive'),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_withdrawals_account_id', 'withdrawals', ['account_id'])
    op.create_index('ix_withdrawals_status', 'withdrawals', ['status'])


def downgrade():
    op.drop_index('ix_withdrawals_status', table_name='withdrawals')
    op.drop_index('ix_withdrawals_account_id', table_name='withdrawals')
    op.drop_table('withdrawals')
    op.drop_index('ix_ad_views_viewed_at', table_name='ad_views')
    op.drop_index('ix_ad_views_account_id', table_name='ad_views')
    op.drop_table('ad_views')
    op.drop_table('ads')
    op.drop_table('accounts')
    bind = op.get_bind()
    for enum in (withdrawal_status, payment_method, ad_type, account_role):
        enum.drop(bind, checkfirst=True)

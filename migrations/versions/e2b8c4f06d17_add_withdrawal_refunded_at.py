"""Add refunded_at to withdrawals

Revision ID: e2b8c4f06d17
Revises: a7d3e91f4b20
Create Date: 2026-10-19 10:31:44.208315

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'e2b8c4f06d17'
down_revision = 'a7d3e91f4b20'
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('withdrawals', schema=None) as batch_op:
        batch_op.add_column(sa.Column('refunded_at', sa.DateTime(), nullable=True))


def downgrade():
    with op.batch_alter_table('withdrawals', schema=None) as batch_op:
        batch_op.drop_column('refunded_at')

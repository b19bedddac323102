"""Create admin account and sample ads

Revision ID: a7d3e91f4b20
Revises: 6cf8808a562c
Create Date: 2026-10-12 14:18:07.530912

"""
from alembic import op
import sqlalchemy as sa
import bcrypt
import os
import uuid
from datetime import datetime, timezone


# revision identifiers, used by Alembic.
revision = 'a7d3e91f4b20'
down_revision = '6cf8808a562c'
branch_labels = None
depends_on = None

SAMPLE_ADS = [
    ('Video Ad - 30 seconds', 'VIDEO', 'Entertainment', 30, '4.00', 'adsterra_video_001'),
    ('Banner Ad - 15 seconds', 'BANNER', 'Shopping', 15, '2.50', 'adsterra_banner_001'),
    ('Interactive Ad - 45 seconds', 'INTERACTIVE', 'Gaming', 45, '6.00', 'adsterra_interactive_001'),
]


def upgrade():
    """Create admin account with configurable credentials and seed the ad catalog"""
    # Get connection
    connection = op.get_bind()

    # Get admin credentials from environment variables or use defaults
    admin_username = os.getenv('ADMIN_USERNAME', 'admin')
    admin_email = os.getenv('ADMIN_EMAIL', 'admin@earnrupee.com')
    admin_password = os.getenv('ADMIN_PASSWORD', 'Admin@123')

    # Hash the admin password
    password_hash = bcrypt.hashpw(admin_password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    existing_account = connection.execute(sa.text("""
        SELECT id FROM accounts WHERE username = :username
    """), {'username': admin_username}).fetchone()

    if existing_account:
        print(f"Admin account '{admin_username}' already exists, skipping...")
    else:
        connection.execute(sa.text("""
            INSERT INTO accounts (id, username, email, password_hash, total_earnings, available_balance,
                                  ads_watched_today, current_streak, role, is_active, created_at)
            VALUES (:id, :username, :email, :password_hash, 0, 0, 0, 0, :role, :is_active, :created_at)
        """), {
            'id': str(uuid.uuid4()),
            'username': admin_username,
            'email': admin_email,
            'password_hash': password_hash,
            'role': 'ADMIN',
            'is_active': True,
            'created_at': datetime.now(timezone.utc).replace(tzinfo=None),
        })
        print(f"Admin account '{admin_username}' created successfully!")

    existing_ads = connection.execute(sa.text("SELECT COUNT(*) FROM ads")).scalar()
    if existing_ads:
        return

    for title, ad_type, category, duration, reward, network_code in SAMPLE_ADS:
        connection.execute(sa.text("""
            INSERT INTO ads (id, title, type, category, duration, reward, network_code, is_active)
            VALUES (:id, :title, :type, :category, :duration, :reward, :network_code, :is_active)
        """), {
            'id': str(uuid.uuid4()),
            'title': title,
            'type': ad_type,
            'category': category,
            'duration': duration,
            'reward': reward,
            'network_code': network_code,
            'is_active': True,
        })
    print("Sample ads created")


def downgrade():
    """Remove admin account and sample ads"""
    connection = op.get_bind()

    admin_username = os.getenv('ADMIN_USERNAME', 'admin')

    connection.execute(sa.text("""
        DELETE FROM accounts WHERE username = :username
    """), {'username': admin_username})
    connection.execute(sa.text("""
        DELETE FROM ads WHERE network_code IN :codes
    """).bindparams(sa.bindparam('codes', expanding=True)), {'codes': [ad[5] for ad in SAMPLE_ADS]})

    print(f"Admin account '{admin_username}' removed successfully!")

from decimal import Decimal

import click
from flask import current_app
from flask.cli import with_appcontext

from earnrupee import db
from earnrupee.models import Account, AccountRole, Ad, AdType

SAMPLE_ADS = [
    {
        'title': 'Video Ad - 30 seconds',
        'type': AdType.VIDEO,
        'category': 'Entertainment',
        'duration': 30,
        'reward': Decimal('4.00'),
        'network_code': 'adsterra_video_001',
    },
    {
        'title': 'Banner Ad - 15 seconds',
        'type': AdType.BANNER,
        'category': 'Shopping',
        'duration': 15,
        'reward': Decimal('2.50'),
        'network_code': 'adsterra_banner_001',
    },
    {
        'title': 'Interactive Ad - 45 seconds',
        'type': AdType.INTERACTIVE,
        'category': 'Gaming',
        'duration': 45,
        'reward': Decimal('6.00'),
        'network_code': 'adsterra_interactive_001',
    },
]


def seed_data():
    """Create the admin account and sample ads when they are missing"""
    created = []
    username = current_app.config['ADMIN_USERNAME']
    if not Account.query.filter_by(username=username).first():
        admin = Account(
            username=username,
            email=current_app.config['ADMIN_EMAIL'],
            password=current_app.config['ADMIN_PASSWORD'],
            role=AccountRole.ADMIN
        )
        db.session.add(admin)
        created.append(f"admin account '{username}'")

    if Ad.query.count() == 0:
        for data in SAMPLE_ADS:
            db.session.add(Ad(is_active=True, **data))
        created.append(f'{len(SAMPLE_ADS)} sample ads')

    db.session.commit()
    return created


@click.command('seed')
@with_appcontext
def seed_command():
    """Seed the admin account and sample ads."""
    created = seed_data()
    if created:
        click.echo('Created ' + ' and '.join(created))
    else:
        click.echo('Nothing to seed')

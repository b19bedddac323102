from decimal import Decimal

import pytest
from flask_jwt_extended import create_access_token

from earnrupee import create_app, db
from earnrupee.models import Account, AccountRole, Ad, AdType


@pytest.fixture
def app(tmp_path):
    app = create_app('testing', {
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'ledger.db'}",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_account(app):
    counter = {'n': 0}

    def _make_account(balance=None, total=None, role=AccountRole.USER, is_active=True, username=None):
        counter['n'] += 1
        username = username or f"user{counter['n']}"
        account = Account(username=username, email=f'{username}@mail.com', password='secret123', role=role)
        if balance is not None:
            account.available_balance = Decimal(str(balance))
            account.total_earnings = Decimal(str(total if total is not None else balance))
        account.is_active = is_active
        db.session.add(account)
        db.session.commit()
        return account

    return _make_account


@pytest.fixture
def account(make_account):
    return make_account(username='alice')


@pytest.fixture
def admin(make_account):
    return make_account(username='operator', role=AccountRole.ADMIN)


@pytest.fixture
def make_ad(app):
    def _make_ad(reward='4.00', duration=30, is_active=True, title='Video Ad - 30 seconds'):
        ad = Ad(
            title=title,
            type=AdType.VIDEO,
            category='Entertainment',
            duration=duration,
            reward=Decimal(reward),
            network_code='adsterra_video_001',
            is_active=is_active
        )
        db.session.add(ad)
        db.session.commit()
        return ad

    return _make_ad


@pytest.fixture
def ad(make_ad):
    return make_ad()


def auth_headers(account):
    return {'Authorization': f'Bearer {create_access_token(identity=account.id)}'}


def reload(instance):
    db.session.refresh(instance)
    return instance

import logging

from sqlalchemy.exc import IntegrityError

from earnrupee import db
from earnrupee.errors import NotFound, Unauthorized, InvalidAccountUpdate
from earnrupee.models import Account, AccountRole
from earnrupee.utils.money import to_money

logger = logging.getLogger(__name__)


def get_account(account_id):
    account = db.session.get(Account, account_id) if account_id else None
    if account is None:
        raise NotFound('Account not found')
    return account


def _check_available(username, email):
    if Account.query.filter_by(username=username).first():
        raise InvalidAccountUpdate('Username already exists')
    if Account.query.filter_by(email=email).first():
        raise InvalidAccountUpdate('Email already exists')


def _commit_unique():
    """Commit, turning a unique-constraint race into ``InvalidAccountUpdate``"""
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.warning("Account write lost a uniqueness race")
        raise InvalidAccountUpdate('Username or email already exists')


def register_account(data, role=AccountRole.USER):
    """Create an account with zero balances from a ``RegisterRequest``"""
    _check_available(data.username, data.email)

    account = Account(username=data.username, email=data.email, password=data.password, role=role)
    db.session.add(account)
    _commit_unique()
    logger.info("Account %s registered as %s", account.id, role.value)
    return account


def authenticate(username, password):
    account = Account.query.filter_by(username=username).first()
    if not account or not account.check_password(password):
        raise Unauthorized('Invalid credentials')
    if not account.is_active:
        raise Unauthorized('Account is disabled')
    return account


def _check_unique(account, field, value):
    clash = Account.query.filter(getattr(Account, field) == value, Account.id != account.id).first()
    if clash:
        raise InvalidAccountUpdate(f'{field.capitalize()} already exists')


def update_profile(account_id, data):
    account = get_account(account_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if 'username' in changes:
        _check_unique(account, 'username', changes['username'])
    for field, value in changes.items():
        setattr(account, field, value)
    _commit_unique()
    return account


def update_account(account_id, data):
    """
    Operator edit of an account.

    Balance edits are an administrative override and must still leave
    ``0 <= available_balance <= total_earnings``.
    """
    account = get_account(account_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    for field in ('username', 'email'):
        if field in changes:
            _check_unique(account, field, changes[field])

    total = to_money(changes.get('total_earnings', account.total_earnings))
    available = to_money(changes.get('available_balance', account.available_balance))
    if available > total:
        raise InvalidAccountUpdate('Available balance cannot exceed total earnings')

    for field, value in changes.items():
        setattr(account, field, value)
    _commit_unique()
    logger.info("Operator updated account %s: %s", account.id, ', '.join(sorted(changes)))
    return account

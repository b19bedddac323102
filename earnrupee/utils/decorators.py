from functools import wraps
from flask import g
from flask_jwt_extended import get_jwt_identity

from earnrupee import db
from earnrupee.errors import Unauthorized, Forbidden
from earnrupee.models import Account


def resolve_account(identity):
    """Map a token identity to an active account, or None"""
    if not identity:
        return None
    account = db.session.get(Account, identity)
    if account is None or not account.is_active:
        return None
    return account


def account_required(fn):
    """
    Decorator resolving the bearer token to an active account, exposed as ``g.account``.
    This decorator should be used after @jwt_required() decorator.

    Usage:
        @bp.route('/me')
        @jwt_required()
        @account_required
        def me():
            return jsonify(g.account.to_dict())
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        account = resolve_account(get_jwt_identity())
        if account is None:
            raise Unauthorized()
        g.account = account
        return fn(*args, **kwargs)

    return wrapper


def admin_required(fn):
    """
    Decorator to require the operator role for accessing protected endpoints.
    This decorator should be used after @jwt_required() decorator.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        account = resolve_account(get_jwt_identity())
        if account is None:
            raise Unauthorized()
        if not account.is_admin:
            raise Forbidden('Admin access required')
        g.account = account
        return fn(*args, **kwargs)

    return wrapper

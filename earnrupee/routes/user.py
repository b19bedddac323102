from flask import Blueprint, jsonify, request, current_app, g
from flask_jwt_extended import jwt_required

from earnrupee.services import get_todays_stats, get_recent_earnings, get_transaction_history
from earnrupee.utils.decorators import account_required

user_bp = Blueprint('user', __name__)

MAX_EARNINGS_LIMIT = 100


@user_bp.route('/stats', methods=['GET'])
@jwt_required()
@account_required
def get_stats():
    """Balances and today's earnings for the dashboard"""
    return jsonify(get_todays_stats(g.account.id))


@user_bp.route('/earnings', methods=['GET'])
@jwt_required()
@account_required
def get_earnings():
    """Most recent completed ad views"""
    default_limit = current_app.config.get('RECENT_EARNINGS_LIMIT', 10)
    limit = request.args.get('limit', default_limit, type=int)
    if limit is None or limit < 1:
        limit = default_limit
    limit = min(limit, MAX_EARNINGS_LIMIT)
    return jsonify(get_recent_earnings(g.account.id, limit))


@user_bp.route('/transactions', methods=['GET'])
@jwt_required()
@account_required
def get_transactions():
    return jsonify(get_transaction_history(g.account.id))

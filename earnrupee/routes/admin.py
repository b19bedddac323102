from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from earnrupee.models import Account, Ad, AdView, Withdrawal
from earnrupee.schemas import AdCreate, AdUpdate, AccountCreate, AccountUpdate, WithdrawalStatusUpdate
from earnrupee.services import WithdrawalService, get_platform_stats
from earnrupee.services.accounts import register_account, update_account
from earnrupee.services.catalog import create_ad, update_ad
from earnrupee.utils.decorators import admin_required

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/stats', methods=['GET'])
@jwt_required()
@admin_required
def get_stats():
    return jsonify(get_platform_stats())


@admin_bp.route('/users', methods=['GET'])
@jwt_required()
@admin_required
def get_users():
    accounts = Account.query.order_by(Account.created_at.desc()).all()
    return jsonify([account.to_dict() for account in accounts])


@admin_bp.route('/users', methods=['POST'])
@jwt_required()
@admin_required
def post_user():
    data = AccountCreate.model_validate(request.get_json(silent=True) or {})
    account = register_account(data, role=data.role)
    return jsonify(account.to_dict()), 201


@admin_bp.route('/users/<account_id>', methods=['PATCH'])
@jwt_required()
@admin_required
def patch_user(account_id):
    data = AccountUpdate.model_validate(request.get_json(silent=True) or {})
    account = update_account(account_id, data)
    return jsonify(account.to_dict())


@admin_bp.route('/ads', methods=['GET'])
@jwt_required()
@admin_required
def get_ads():
    """Every ad, including inactive ones"""
    return jsonify([ad.to_dict() for ad in Ad.query.order_by(Ad.title).all()])


@admin_bp.route('/ads', methods=['POST'])
@jwt_required()
@admin_required
def post_ad():
    data = AdCreate.model_validate(request.get_json(silent=True) or {})
    return jsonify(create_ad(data).to_dict()), 201


@admin_bp.route('/ads/<ad_id>', methods=['PATCH'])
@jwt_required()
@admin_required
def patch_ad(ad_id):
    data = AdUpdate.model_validate(request.get_json(silent=True) or {})
    return jsonify(update_ad(ad_id, data).to_dict())


@admin_bp.route('/withdrawals', methods=['GET'])
@jwt_required()
@admin_required
def get_withdrawals():
    withdrawals = Withdrawal.query.order_by(Withdrawal.requested_at.desc()).all()
    return jsonify([w.to_dict(include_account=True) for w in withdrawals])


@admin_bp.route('/withdrawals/<withdrawal_id>', methods=['PATCH'])
@jwt_required()
@admin_required
def patch_withdrawal(withdrawal_id):
    data = WithdrawalStatusUpdate.model_validate(request.get_json(silent=True) or {})
    withdrawal = WithdrawalService().update_withdrawal_status(withdrawal_id, data.status)
    return jsonify(withdrawal.to_dict(include_account=True))


@admin_bp.route('/ad-views', methods=['GET'])
@jwt_required()
@admin_required
def get_ad_views():
    """All ad views with the viewer and ad they belong to"""
    views = AdView.query.order_by(AdView.viewed_at.desc()).all()
    items = []
    for view in views:
        item = view.to_dict()
        item['account'] = {'username': view.account.username, 'email': view.account.email} if view.account else None
        item['ad'] = {'title': view.ad.title, 'type': view.ad.type.value, 'category': view.ad.category} if view.ad else None
        items.append(item)
    return jsonify(items)

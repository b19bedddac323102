from flask import Blueprint, jsonify, request, g
from flask_jwt_extended import jwt_required

from earnrupee.models import Withdrawal
from earnrupee.schemas import WithdrawalCreate
from earnrupee.services import WithdrawalService
from earnrupee.utils.decorators import account_required

withdrawals_bp = Blueprint('withdrawals', __name__)


@withdrawals_bp.route('', methods=['POST'])
@jwt_required()
@account_required
def request_withdrawal():
    """Request a withdrawal; the amount is reserved from the available balance immediately"""
    data = WithdrawalCreate.model_validate(request.get_json(silent=True) or {})
    withdrawal = WithdrawalService().request_withdrawal(
        g.account.id,
        data.amount,
        data.payment_method,
        data.payment_details
    )
    return jsonify(withdrawal.to_dict()), 201


@withdrawals_bp.route('', methods=['GET'])
@jwt_required()
@account_required
def get_withdrawal_history():
    withdrawals = Withdrawal.query.filter_by(account_id=g.account.id)\
        .order_by(Withdrawal.requested_at.desc())
    return jsonify([w.to_dict() for w in withdrawals])

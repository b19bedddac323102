from flask import Blueprint, jsonify, g
from flask_jwt_extended import jwt_required

from earnrupee.services import EarningService
from earnrupee.services.catalog import get_active_ads
from earnrupee.utils.decorators import account_required

ads_bp = Blueprint('ads', __name__)


@ads_bp.route('', methods=['GET'])
@jwt_required()
@account_required
def list_ads():
    """Active ads available to watch"""
    return jsonify(get_active_ads())


@ads_bp.route('/<ad_id>/start', methods=['POST'])
@jwt_required()
@account_required
def start_view(ad_id):
    view = EarningService().start_view(g.account.id, ad_id)
    return jsonify(view.to_dict()), 201


@ads_bp.route('/views/<view_id>/complete', methods=['POST'])
@jwt_required()
@account_required
def complete_view(view_id):
    view = EarningService().complete_view(view_id, g.account.id)
    return jsonify(view.to_dict())

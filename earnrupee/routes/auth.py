from flask import Blueprint, request, jsonify, g
from flask_jwt_extended import create_access_token, jwt_required, get_jwt

from earnrupee.schemas import RegisterRequest, LoginRequest, ProfileUpdate
from earnrupee.services.accounts import register_account, authenticate, update_profile
from earnrupee.services.tokens import revoke_token
from earnrupee.utils.decorators import account_required

auth_bp = Blueprint('auth', __name__)


def _token_response(account, status=200):
    return jsonify({
        'account': account.to_dict(),
        'access_token': create_access_token(identity=account.id)
    }), status


@auth_bp.route('/register', methods=['POST'])
def register():
    """Account registration endpoint"""
    data = RegisterRequest.model_validate(request.get_json(silent=True) or {})
    account = register_account(data)
    return _token_response(account, 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    data = LoginRequest.model_validate(request.get_json(silent=True) or {})
    account = authenticate(data.username, data.password)
    return _token_response(account)


@auth_bp.route('/profile', methods=['GET'])
@jwt_required()
@account_required
def get_profile():
    return jsonify(g.account.to_dict())


@auth_bp.route('/profile', methods=['PATCH'])
@jwt_required()
@account_required
def patch_profile():
    data = ProfileUpdate.model_validate(request.get_json(silent=True) or {})
    account = update_profile(g.account.id, data)
    return jsonify(account.to_dict())


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
@account_required
def logout():
    """Revoke the presented access token"""
    revoke_token(get_jwt())
    return jsonify({'message': 'Logged out successfully'})

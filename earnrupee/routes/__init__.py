# Routes package
from .admin import admin_bp
from .ads import ads_bp
from .auth import auth_bp
from .user import user_bp
from .withdrawals import withdrawals_bp

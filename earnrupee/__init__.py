import logging

from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
from flask_caching import Cache
from flask_jwt_extended import JWTManager
from pydantic import ValidationError

from config import config

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
cache = Cache()


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    logging.getLogger('earnrupee').setLevel(level)


def register_error_handlers(app):
    from earnrupee.errors import LedgerError

    @app.errorhandler(LedgerError)
    def handle_ledger_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return jsonify({
            'error': 'Invalid input',
            'code': 'invalid_input',
            'errors': error.errors(include_url=False, include_context=False, include_input=False),
        }), 400

    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'error': reason, 'code': 'unauthorized'}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'error': reason, 'code': 'unauthorized'}), 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({'error': 'Token has expired', 'code': 'unauthorized'}), 401

    @jwt.token_in_blocklist_loader
    def token_revoked(jwt_header, jwt_payload):
        from earnrupee.services.tokens import is_token_revoked
        return is_token_revoked(jwt_payload['jti'])

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return jsonify({'error': 'Token has been revoked', 'code': 'unauthorized'}), 401


def create_app(config_name='default', overrides=None):
    """Application factory function"""
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])
    if overrides:
        app.config.update(overrides)

    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    cache.init_app(app)
    CORS(app)

    register_error_handlers(app)

    # Register blueprints
    from earnrupee.routes import auth_bp, ads_bp, user_bp, withdrawals_bp, admin_bp
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(ads_bp, url_prefix='/api/ads')
    app.register_blueprint(user_bp, url_prefix='/api/user')
    app.register_blueprint(withdrawals_bp, url_prefix='/api/withdrawals')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    from earnrupee.cli import seed_command
    app.cli.add_command(seed_command)

    if app.config.get('SCHEDULER_ENABLED'):
        from earnrupee.services import init_scheduler
        init_scheduler(app)
    return app

'''Flask app factory: builds and configures the app, registers blueprints and
error handlers. Does not start a server; run.py, a WSGI server or the tests do.'''
# nameplate_dashboard/app_factory.py
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
import os
from dotenv import load_dotenv

from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.services.storage_service import build_object_storage

# load environment variables
load_dotenv()

# project root (absolute)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

logger = get_logger(__name__)


def default_database_url():
    db_name = os.getenv('DATABASE_NAME', 'nameplates')
    return f"sqlite:///{os.path.join(BASE_DIR, db_name)}.db"


def create_app(config_name='development', overrides=None):
    """Application factory"""
    static_dir = os.path.join(BASE_DIR, 'static')

    app = Flask(__name__,
                static_folder=static_dir if os.path.exists(static_dir) else None)

    # signing keys; SECRET_KEY must be str, not bytes
    secret_key = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    if isinstance(secret_key, bytes):
        secret_key = secret_key.decode('utf-8')
    app.config['SECRET_KEY'] = secret_key
    app.config['JWT_SECRET'] = os.getenv('JWT_SECRET', secret_key)
    app.config['JWT_TTL_HOURS'] = int(os.getenv('JWT_TTL_HOURS', 24))
    app.config['SESSION_COOKIE_SECURE'] = config_name == 'production'

    # database; get_engine() reads DATABASE_URL from the environment
    if not os.getenv('DATABASE_URL'):
        os.environ['DATABASE_URL'] = default_database_url()
    app.config['DATABASE_URL'] = os.environ['DATABASE_URL']

    # object storage
    app.config['STORAGE_ENDPOINT_URL'] = os.getenv('STORAGE_ENDPOINT_URL')
    app.config['STORAGE_ACCESS_KEY'] = os.getenv('STORAGE_ACCESS_KEY')
    app.config['STORAGE_SECRET_KEY'] = os.getenv('STORAGE_SECRET_KEY')
    app.config['STORAGE_BUCKET'] = os.getenv('STORAGE_BUCKET', 'nameplates')
    app.config['STORAGE_REGION'] = os.getenv('STORAGE_REGION')
    app.config['STORAGE_PUBLIC_URL'] = os.getenv('STORAGE_PUBLIC_URL')

    # upload limit
    app.config['MAX_CONTENT_LENGTH'] = int(os.getenv('MAX_UPLOAD_SIZE', 10485760))  # 10MB

    if config_name == 'testing':
        app.config['TESTING'] = True
    if overrides:
        app.config.update(overrides)

    app.extensions['object_storage'] = build_object_storage(app.config)

    # blueprints
    from nameplate_dashboard.routes.auth import auth_bp
    from nameplate_dashboard.routes.dashboard import dashboard_bp
    from nameplate_dashboard.routes.rmo import rmo_bp
    from nameplate_dashboard.routes.admin import admin_bp
    from nameplate_dashboard.routes.upload import upload_bp
    from nameplate_dashboard.routes.user import user_bp
    from nameplate_dashboard.routes.nameplate import nameplate_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(rmo_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(upload_bp)
    app.register_blueprint(user_bp)
    # last: its /api/<officer>/... rules are the most generic
    app.register_blueprint(nameplate_bp)

    register_error_handlers(app)

    logger.info(f"app created config={config_name} storage={'on' if app.extensions['object_storage'] else 'off'}")
    return app


def register_error_handlers(app):
    """JSON error envelope for everything the blueprints do not handle"""
    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'success': False, 'error': error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        logger.exception('unhandled exception')
        return jsonify({'success': False, 'error': 'Internal server error'}), 500

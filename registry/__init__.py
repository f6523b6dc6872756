from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException
from .extensions import db, migrate, bcrypt, guard, celery
from .exceptions import RegistryError
from .sessions import SessionStore, StoreSessionInterface
import logging
import os

# Setup basic logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)


def create_app(config_name=None, session_store=None, user_loader=None):
    """
    Create Flask application factory

    Args:
        config_name: 'development', 'production' or 'testing' (defaults to FLASK_ENV)
        session_store: SessionStore to keep sessions in (a fresh one by default)
        user_loader: user lookup used by the session guard (primary key lookup by default)
    """
    app = Flask(__name__)

    # Load configuration
    from .config import config, get_config, INSECURE_DEFAULT_SECRET_KEY
    config_obj = config.get(config_name, config['default']) if config_name else get_config()
    if hasattr(config_obj, 'validate'):
        config_obj.validate()
    app.config.from_object(config_obj)

    if app.config.get('SECRET_KEY') == INSECURE_DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is not set; using the insecure development default. Do not use this in production.")

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)

    # Server-side sessions
    if session_store is None:
        session_store = SessionStore(
            ttl=app.config['PERMANENT_SESSION_LIFETIME'],
            check_period=app.config['SESSION_CHECK_PERIOD'],
        )
    app.session_interface = StoreSessionInterface(session_store)
    app.extensions['session_store'] = session_store
    guard.init_app(app, user_loader=user_loader)

    # Initialize CORS
    from .utils.cors import init_cors
    init_cors(app)

    # Initialize Celery
    celery.conf.update(
        broker_url=app.config['CELERY_BROKER_URL'],
        result_backend=app.config['CELERY_RESULT_BACKEND'],
        task_serializer=app.config['CELERY_TASK_SERIALIZER'],
        accept_content=app.config['CELERY_ACCEPT_CONTENT'],
        result_serializer=app.config['CELERY_RESULT_SERIALIZER'],
        timezone=app.config['CELERY_TIMEZONE'],
        enable_utc=app.config['CELERY_ENABLE_UTC'],
    )

    # Make celery tasks work with Flask app context
    class FlaskAppContextTask(celery.Task):
        """Make celery tasks work with Flask app context."""
        def __call__(self, *args, **kwargs):
            with app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = FlaskAppContextTask

    # Error handlers
    @app.errorhandler(RegistryError)
    def handle_registry_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'success': False,
            'error': 'Endpoint not found'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'success': False,
            'error': 'Method not allowed'
        }), 405

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return jsonify({'success': False, 'error': e.description}), e.code
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        db.session.rollback()
        return jsonify({
            'success': False,
            'error': 'Internal server error. Check server logs for details.'
        }), 500

    # Setup logging
    if not app.debug and not app.testing:
        from logging.handlers import RotatingFileHandler

        log_file = app.config['LOG_FILE']
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10240000,
            backupCount=10
        )
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(app.config['LOG_LEVEL'])
        app.logger.addHandler(file_handler)
        app.logger.setLevel(app.config['LOG_LEVEL'])
        app.logger.info('Application startup')

    # Security headers middleware
    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        if not app.debug:
            response.headers['X-Content-Type-Options'] = 'nosniff'
            response.headers['X-Frame-Options'] = 'DENY'
            response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
            # Only add HSTS if using HTTPS
            if request.is_secure:
                response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

    # Import models to register them with SQLAlchemy
    with app.app_context():
        from . import models  # noqa: F401

        # Register blueprints
        from .routes import (
            health_bp, auth_bp, user_bp, patient_bp, vaccine_bp,
            vaccination_bp, appointment_bp, dashboard_bp,
        )
        app.register_blueprint(health_bp)  # Register health check first
        app.register_blueprint(auth_bp)
        app.register_blueprint(user_bp)
        app.register_blueprint(patient_bp)
        app.register_blueprint(vaccine_bp)
        app.register_blueprint(vaccination_bp)
        app.register_blueprint(appointment_bp)
        app.register_blueprint(dashboard_bp)

        if app.config.get('SEED_VACCINES'):
            from .seeds import seed_vaccines
            try:
                db.create_all()
                seed_vaccines()
            except Exception as e:
                logger.error("Failed to seed vaccine catalog: %s", e, exc_info=True)

    return app

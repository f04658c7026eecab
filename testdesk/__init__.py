"""
Application Factory
Creates and configures the Flask application
"""
import logging

from flask import Flask, jsonify

from testdesk.config import get_config
from testdesk.extensions import db, socketio

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """Translate domain errors into JSON responses"""
    from testdesk.engine import QuestionLoadError, SessionError
    from testdesk.services import ServiceError

    @app.errorhandler(ServiceError)
    def handle_service_error(exc):
        logger.info("Request rejected: %s", exc)
        return jsonify({'success': False, 'error': str(exc)}), exc.status_code

    @app.errorhandler(SessionError)
    def handle_session_error(exc):
        logger.info("Session request rejected: %s", exc)
        payload = {'success': False, 'error': str(exc)}
        if isinstance(exc, QuestionLoadError):
            payload['action'] = 'back'
        return jsonify(payload), exc.status_code


def create_app(config_name=None):
    """
    Application factory pattern
    Creates and configures Flask app
    """
    app = Flask(__name__)

    # Load configuration
    if config_name:
        from testdesk.config import config
        app.config.from_object(config[config_name])
    else:
        app.config.from_object(get_config())

    from testdesk.utils import configure_logging
    configure_logging(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    socketio.init_app(
        app,
        cors_allowed_origins=app.config['SOCKETIO_CORS_ALLOWED_ORIGINS'],
        async_mode=app.config['SOCKETIO_ASYNC_MODE']
    )

    # Register blueprints
    from testdesk.routes import auth_bp, admin_bp, teacher_bp, student_bp

    # Auth routes (no prefix)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(teacher_bp, url_prefix='/teacher')
    app.register_blueprint(student_bp, url_prefix='/student')

    register_error_handlers(app)

    # Register Socket.IO events
    from testdesk.sockets import register_socket_events
    with app.app_context():
        register_socket_events()

    # Create database tables
    with app.app_context():
        db.create_all()
        logger.info("Database tables created/verified")

    return app

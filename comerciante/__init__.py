"""Flask application factory."""
import logging

from flask import Flask, jsonify, request
from flask.logging import default_handler
from werkzeug.exceptions import HTTPException

from comerciante.database import init_db


def _configure_logging(app):
    """Route the package loggers through Flask's handler at the configured level."""
    level = app.config.get('LOG_LEVEL', 'INFO')
    package_logger = logging.getLogger('comerciante')
    package_logger.setLevel(level)
    if default_handler not in package_logger.handlers:
        package_logger.addHandler(default_handler)
    app.logger.setLevel(level)


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    _configure_logging(app)

    # Initialize database (creates tables if absent; SchemaError aborts start-up)
    init_db(app)

    # Login gate context
    from comerciante.middleware import load_operator

    @app.before_request
    def before_request_handler():
        load_operator()

    # Error Handlers
    from comerciante.exceptions import ComercianteError

    @app.errorhandler(ComercianteError)
    def handle_comerciante_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"{type(error).__name__} [{error.status_code}]: {error.message}")
        else:
            app.logger.warning(f"{type(error).__name__} [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'status': 'error', 'message': 'Method Not Allowed'}), 405

    @app.errorhandler(500)
    @app.errorhandler(Exception)
    def internal_error(error):
        if isinstance(error, HTTPException):
            return jsonify({'status': 'error', 'message': error.description}), error.code
        app.logger.exception(f"Unhandled Exception on {request.method} {request.path}: {error}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from comerciante.blueprints.main import main_bp
    from comerciante.blueprints.auth import auth_bp
    from comerciante.blueprints.catalog import catalog_bp
    from comerciante.blueprints.sales import sales_bp
    from comerciante.blueprints.settings import settings_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(settings_bp)

    # CLI commands
    from comerciante.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app

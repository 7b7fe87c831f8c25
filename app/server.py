"""Main Flask application server."""

import logging
from flask import Flask
from flask_cors import CORS
from datetime import timedelta

from app.auth import init_auth
from app.config import load_config
from app.routes.auth_routes import auth_bp
from app.routes.home_routes import home_bp

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(overrides=None):
    """Create and configure Flask application."""
    # Load configuration
    config = load_config()
    config.update(overrides or {})

    # Create Flask app
    app = Flask(__name__,
                template_folder='../web/templates',
                static_folder='../web/static')

    # Apply configuration
    app.config['SECRET_KEY'] = config['SECRET_KEY']
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(hours=24)
    app.config['AUTH_COOKIE_SECURE'] = config['AUTH_COOKIE_SECURE']
    app.config['TESTING'] = config.get('TESTING', False)

    # Setup CORS
    CORS(app, supports_credentials=True, origins=config.get('cors_origins', []))

    init_auth(app, config)
    app.register_blueprint(auth_bp)
    app.register_blueprint(home_bp)
    logger.info("Auth and home routes registered")

    return app


if __name__ == '__main__':
    config = load_config()
    app = create_app()
    port = int(config.get('port', 8000))
    host = config.get('host', '0.0.0.0')
    debug = config.get('DEBUG', False)

    logger.info(f"Starting server on {host}:{port}")
    app.run(host=host, port=port, debug=debug)

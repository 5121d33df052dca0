"""
ReviewHub Application Package

FLOW OVERVIEW
- create_app(test_config=None)
  • Build Flask app, apply config (test or env-based), configure logging, init DB.
  • Register blueprints: auth (/api/auth), main (/), api (/api), admin (/api/admin).
  • Record per-request Prometheus metrics.
  • Register global JSON error handlers.
"""

import time

from flask import Flask, request, g
from .models import db
from .routes import auth_bp, main_bp, api_bp, admin_bp
from .config import Config
from .utils.logging_config import configure_logging
from .utils.prom_metrics import observe_request

__version__ = '1.0.0'


def create_app(test_config=None):
    """Application factory pattern for production deployment"""
    app = Flask(__name__)

    # Configuration
    if test_config:
        # Use test configuration if provided
        app.config.from_object(Config())
        app.config.update(test_config)
    else:
        # Use environment-based configuration
        app.config.from_object(Config())
    app.config.setdefault('VERSION', __version__)

    configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    @app.before_request
    def start_timer():
        g.request_started_at = time.time()

    @app.after_request
    def record_request_metrics(response):
        started = getattr(g, 'request_started_at', None)
        if started is not None:
            endpoint = request.url_rule.rule if request.url_rule else 'unmatched'
            observe_request(endpoint, response.status_code, time.time() - started)
        return response

    # Register error handlers
    from .utils.error_handlers import register_error_handlers
    register_error_handlers(app)

    return app

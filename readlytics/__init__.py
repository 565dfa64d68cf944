"""
Flask application factory for Readlytics, the reading activity analytics service.
"""

import logging

from flask import Flask, jsonify

from config import Config

logger = logging.getLogger(__name__)


def _configure_logging(app: Flask) -> None:
    """Configure Python logging level from LOG_LEVEL (default ERROR)."""
    log_level_name = str(app.config.get('LOG_LEVEL', 'ERROR')).upper()
    log_level = getattr(logging, log_level_name, logging.ERROR)
    if not logging.getLogger().handlers:
        logging.basicConfig(format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
    logging.getLogger().setLevel(log_level)
    # Also set Flask app logger level
    app.logger.setLevel(log_level)


def create_app(config_object=Config) -> Flask:
    app = Flask(__name__, static_folder=None, static_url_path=None)
    app.config.from_object(config_object)

    _configure_logging(app)

    # Drop any client built from a previous app's config
    from .services import reset_activity_client
    reset_activity_client()

    from .api.analytics import analytics_api
    app.register_blueprint(analytics_api)

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok', 'service': app.config.get('SITE_NAME', 'Readlytics')}), 200

    logger.info(f"Readlytics started (reference offset {app.config.get('ANALYTICS_REFERENCE_OFFSET_MINUTES')} minutes)")
    return app

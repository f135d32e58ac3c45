"""
EPUB Intake Service
Accepts single EPUB uploads over HTTP and stores them under a timestamped name
"""
import os
import sys
import logging
from datetime import datetime

from flask import Flask

from shared.utils import mask_secret
from epub_intake.config import ConfigError, IntakeSettings
from epub_intake.decoder import IntakeRequest
from epub_intake.metrics import start_metrics_server
from epub_intake.routes import init_routes

logger = logging.getLogger(__name__)


def configure_logging(level='INFO', log_file=None):
    """Configure root logging once for the process"""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        handlers=handlers
    )


def create_app(settings, clock=datetime.now):
    """Build the Flask app around an immutable IntakeSettings"""
    app = Flask(__name__)
    app.request_class = IntakeRequest
    app.config['MAX_CONTENT_LENGTH'] = settings.max_upload_size
    init_routes(app, settings, clock)
    return app


def main():
    try:
        settings = IntakeSettings.from_env()
    except ConfigError as e:
        configure_logging()
        logger.critical(str(e))
        sys.exit(1)

    configure_logging(settings.log_level, settings.log_file)

    try:
        os.makedirs(settings.upload_dir, exist_ok=True)
    except OSError as e:
        logger.critical(f"Failed to create upload directory: {e}")
        sys.exit(1)

    if settings.metrics_enabled:
        start_metrics_server(settings.metrics_port)

    app = create_app(settings)

    logger.info(f"Server starting on port {settings.port}")
    logger.info(f"Upload directory: {settings.upload_dir}")
    logger.info(f"API key configured: {mask_secret(settings.api_key)}")
    app.run(host='0.0.0.0', port=settings.port, threaded=True)


if __name__ == '__main__':
    main()

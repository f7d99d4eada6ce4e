"""Flask application factory for the pediatric reference API.

Usage:
    flask --app dashboard.app run
"""

import logging

from flask import Flask

from common.pediatric_reference.config import config
from dashboard.routes import pediatric_reference_bp

logger = logging.getLogger(__name__)


def create_app(test_config: dict | None = None) -> Flask:
    """Create and configure the Flask app."""
    app = Flask(__name__)
    app.config.from_mapping(
        PEDS_REFERENCE_DB_PATH=config.DB_PATH,
        DOSAGE_RULE_SELECTION=config.DOSAGE_RULE_SELECTION,
    )
    if test_config:
        app.config.update(test_config)

    app.register_blueprint(pediatric_reference_bp)

    logger.info(f"Pediatric reference API using {app.config['PEDS_REFERENCE_DB_PATH']}")
    return app

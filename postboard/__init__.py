"""Flask application factory."""
import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Any, Optional
from flask import Flask
from postboard.config import config
from postboard.extensions import db, migrate, login_manager, cors


def create_app(config_name: str | None = None, asset_store: Optional[Any] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        config_name: Configuration name (development, production, testing)
        asset_store: Asset store gateway replacing the S3 one

    Returns:
        Configured Flask application instance
    """
    # Create Flask app instance
    app = Flask(__name__)

    # Load configuration
    config_name = config_name or os.getenv("FLASK_ENV", "default")
    app.config.from_object(config[config_name])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    # Registers the Flask-Login request loader
    from postboard import auth  # noqa: F401

    # Configure logging
    if not app.debug and not app.testing:
        log_dir = os.path.dirname(app.config["LOG_FILE"])
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = RotatingFileHandler(
            app.config["LOG_FILE"],
            maxBytes=10240000,  # 10MB
            backupCount=10
        )
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]"
        ))
        file_handler.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
        app.logger.addHandler(file_handler)
        app.logger.setLevel(getattr(logging, app.config["LOG_LEVEL"]))
        logging.getLogger("postboard").addHandler(file_handler)
        logging.getLogger("postboard").setLevel(getattr(logging, app.config["LOG_LEVEL"]))
        app.logger.info("Postboard application startup")

    # Build services once per application
    from postboard.services import build_services
    build_services(app, asset_store=asset_store)

    # Register blueprints
    from postboard.routes.api.common import IdConverter
    from postboard.routes.main import main_bp
    from postboard.routes.api import api_bp

    app.url_map.converters["id"] = IdConverter

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix="/api")

    # Register CLI commands
    from postboard.cli import db as db_cli
    app.register_blueprint(db_cli.bp)

    return app

"""Service-level routes."""
from flask import Blueprint, current_app

main_bp = Blueprint("main", __name__)


@main_bp.route("/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": current_app.config["APP_NAME"],
        "version": current_app.config["APP_VERSION"],
    }

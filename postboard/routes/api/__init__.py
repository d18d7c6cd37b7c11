"""API routes package."""
import logging

from flask import Blueprint, jsonify
from werkzeug.exceptions import HTTPException

from postboard.errors import ServiceError

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)

# Import API v1 routes
from . import v1

# Import API sub-modules
from .categories import categories_api_bp
from .comments import comments_api_bp
from .posts import posts_api_bp

# Register sub-blueprints
api_bp.register_blueprint(categories_api_bp, url_prefix="/categories")
api_bp.register_blueprint(comments_api_bp, url_prefix="/comments")
api_bp.register_blueprint(posts_api_bp, url_prefix="/posts")


# Error handlers for the whole application: every error body is {"message": ...}
@api_bp.app_errorhandler(ServiceError)
def handle_service_error(error: ServiceError):
    """Translate service errors into their HTTP status."""
    if error.status_code >= 500:
        logger.error(f"{error.__class__.__name__}: {error.message}")
    else:
        logger.info(f"{error.__class__.__name__} ({error.status_code}): {error.message}")
    return jsonify(error.to_dict()), error.status_code


@api_bp.app_errorhandler(HTTPException)
def handle_http_exception(error: HTTPException):
    """Handle werkzeug errors (404 routes, 405, 413 ...)."""
    if error.code == 413:
        return jsonify({"message": "Request too large. Check the image size."}), 413
    return jsonify({"message": error.description or error.name}), error.code


@api_bp.app_errorhandler(Exception)
def handle_unexpected_error(error: Exception):
    """Log the failure and return a generic 500."""
    logger.exception(f"Unhandled error: {error}")
    return jsonify({"message": "Internal server error"}), 500

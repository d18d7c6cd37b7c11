"""Versioned API metadata."""
from flask import current_app, jsonify
from .. import api_bp

RESOURCES = ("categories", "comments", "posts")


@api_bp.route("/v1/health")
def api_health():
    """Liveness of the API with the resources it serves."""
    return jsonify({
        "status": "healthy",
        "version": "v1",
        "resources": [f"/api/{name}" for name in RESOURCES],
        "message": f"{current_app.config['APP_NAME']} API v1 is running",
    })

"""API endpoints for categories."""
from flask import Blueprint, jsonify

from postboard.auth import admin_required, current_identity
from postboard.routes.api.common import json_body
from postboard.services import get_services

categories_api_bp = Blueprint("categories_api", __name__)


@categories_api_bp.route("", methods=["POST"])
@admin_required
def create_category():
    body = json_body()
    category = get_services().categories.create(body.get("title"), current_identity().id)
    return jsonify(category.to_dict()), 201


@categories_api_bp.route("", methods=["GET"])
def list_categories():
    return jsonify([c.to_dict() for c in get_services().categories.list_all()])


@categories_api_bp.route("/<id:category_id>", methods=["DELETE"])
@admin_required
def delete_category(category_id: int):
    deleted_id = get_services().categories.delete_by_id(category_id)
    return jsonify({
        "message": "Category has been deleted",
        "categoryId": deleted_id,
    })

"""API endpoints for comments."""
from flask import Blueprint, jsonify
from flask_login import login_required

from postboard.auth import admin_required, current_identity
from postboard.forms.comments import validate_create_comment, validate_update_comment
from postboard.routes.api.common import json_body
from postboard.services import get_services

comments_api_bp = Blueprint("comments_api", __name__)


@comments_api_bp.route("", methods=["POST"])
@login_required
def create_comment():
    """
    Comment on a post.

    JSON body:
        - postId: Existing post id
        - text: Comment text
    """
    services = get_services()
    data = validate_create_comment(json_body())
    # Comments may only reference live posts
    services.posts.get_by_id(data.post_id)

    identity = current_identity()
    comment = services.comments.create(
        post_id=data.post_id,
        text=data.text,
        user_id=identity.id,
        username=services.users.get_username(identity.id),
    )
    return jsonify(comment.to_dict()), 201


@comments_api_bp.route("", methods=["GET"])
@admin_required
def list_comments():
    return jsonify([c.to_dict() for c in get_services().comments.list_all()])


@comments_api_bp.route("/<id:comment_id>", methods=["DELETE"])
@login_required
def delete_comment(comment_id: int):
    deleted_id = get_services().comments.delete_by_id(comment_id, current_identity())
    return jsonify({
        "message": "comment has been deleted",
        "commentId": deleted_id,
    })


@comments_api_bp.route("/<id:comment_id>", methods=["PUT"])
@login_required
def update_comment(comment_id: int):
    data = validate_update_comment(json_body())
    comment = get_services().comments.update_by_id(
        comment_id, data.text, current_identity()
    )
    return jsonify(comment.to_dict())

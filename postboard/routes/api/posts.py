"""API endpoints for posts."""
from flask import Blueprint, jsonify, request
from flask_login import login_required

from postboard.auth import current_identity
from postboard.routes.api.common import json_body, save_image_upload
from postboard.services import get_services

posts_api_bp = Blueprint("posts_api", __name__)


@posts_api_bp.route("", methods=["POST"])
@login_required
def create_post():
    """
    Create a post.

    Multipart form data:
        - image: Image file (required)
        - title, description, category
    """
    image_path = save_image_upload()
    post = get_services().posts.create(
        title=request.form.get("title"),
        description=request.form.get("description"),
        category=request.form.get("category"),
        owner_id=current_identity().id,
        image_path=image_path,
    )
    return jsonify(post.to_dict()), 201


@posts_api_bp.route("", methods=["GET"])
def list_posts():
    """List posts: ``?pageNumber=`` paginates, ``?category=`` filters."""
    posts = get_services().posts.list(
        page_number=request.args.get("pageNumber"),
        category=request.args.get("category"),
    )
    return jsonify(posts)


@posts_api_bp.route("/count", methods=["GET"])
def count_posts():
    return jsonify(get_services().posts.count())


@posts_api_bp.route("/<id:post_id>", methods=["GET"])
def get_post(post_id: int):
    """Single post with its owner's profile and its comments."""
    services = get_services()
    post = services.posts.get_by_id(post_id)
    data = services.posts.serialize(post)
    data["comments"] = [c.to_dict() for c in services.comments.list_by_post_id(post_id)]
    return jsonify(data)


@posts_api_bp.route("/<id:post_id>", methods=["DELETE"])
@login_required
def delete_post(post_id: int):
    deleted_id = get_services().posts.delete_by_id(post_id, current_identity())
    return jsonify({
        "message": "post has been deleted successfully",
        "postId": deleted_id,
    })


@posts_api_bp.route("/<id:post_id>", methods=["PUT"])
@login_required
def update_post(post_id: int):
    services = get_services()
    post = services.posts.update_by_id(
        post_id, json_body(), current_identity()
    )
    return jsonify(services.posts.serialize(post))


@posts_api_bp.route("/update-image/<id:post_id>", methods=["PUT"])
@login_required
def update_post_image(post_id: int):
    image_path = save_image_upload()
    post = get_services().posts.update_image(post_id, image_path, current_identity())
    return jsonify(post.to_dict())


@posts_api_bp.route("/like/<id:post_id>", methods=["PUT"])
@login_required
def toggle_like(post_id: int):
    post = get_services().posts.toggle_like(post_id, current_identity().id)
    return jsonify(post.to_dict())

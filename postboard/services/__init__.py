"""Service layer.

Services are built once per application by ``build_services`` and kept on
``app.extensions``; views reach them through ``get_services``.
"""
from dataclasses import dataclass
from typing import Any, Optional

from flask import Flask, current_app

from postboard.services.asset_store import S3AssetStore
from postboard.services.category_service import CategoryService
from postboard.services.comment_service import CommentService
from postboard.services.post_service import PostService
from postboard.services.user_directory import UserDirectory

EXTENSION_KEY = "postboard"


@dataclass
class Services:
    """Service instances shared by every request of one application."""
    assets: Any
    users: UserDirectory
    categories: CategoryService
    comments: CommentService
    posts: PostService


def build_services(app: Flask, asset_store: Optional[Any] = None) -> Services:
    """
    Construct the services for an application and register them on it.

    Args:
        app: Application whose configuration drives the services
        asset_store: Gateway to use instead of S3 (e.g. in tests)
    """
    assets = asset_store if asset_store is not None else S3AssetStore.from_config(app.config)
    users = UserDirectory()
    comments = CommentService()
    posts = PostService(
        asset_store=assets,
        comments=comments,
        users=users,
        per_page=app.config.get("POSTS_PER_PAGE", 3),
        allowed_extensions=app.config.get("ALLOWED_IMAGE_EXTENSIONS"),
        max_image_bytes=app.config.get("MAX_IMAGE_SIZE_MB", 10) * 1024 * 1024,
    )
    services = Services(
        assets=assets,
        users=users,
        categories=CategoryService(),
        comments=comments,
        posts=posts,
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    """Services of the current application."""
    return current_app.extensions[EXTENSION_KEY]

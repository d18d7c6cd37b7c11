"""Database models package."""

# Import all models to ensure they're registered with SQLAlchemy
from postboard.models.base import BaseModel
from postboard.models.user import User
from postboard.models.category import Category
from postboard.models.post import Post, PostLike
from postboard.models.comment import Comment

__all__ = [
    'BaseModel',
    'User',
    'Category',
    'Post',
    'PostLike',
    'Comment',
]

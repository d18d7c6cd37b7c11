"""Typed request inputs and the pure functions that validate them."""
from postboard.forms.categories import CategoryInput, validate_create_category
from postboard.forms.comments import (
    CommentInput, CommentUpdateInput, validate_create_comment, validate_update_comment
)
from postboard.forms.posts import (
    PostInput, PostUpdateInput, validate_create_post, validate_update_post,
    validate_image_file
)

__all__ = [
    'CategoryInput',
    'CommentInput',
    'CommentUpdateInput',
    'PostInput',
    'PostUpdateInput',
    'validate_create_category',
    'validate_create_comment',
    'validate_update_comment',
    'validate_create_post',
    'validate_update_post',
    'validate_image_file',
]

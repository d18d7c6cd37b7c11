"""Post input structs and their validators."""
import os
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from PIL import Image

from postboard.forms.validators import reject_unknown, string_field
from postboard.models.post import Post
from postboard.errors import ValidationError

POST_FIELDS = ("title", "description", "category")


@dataclass
class PostInput:
    """Validated fields for a new post."""
    title: str
    description: str
    category: str


@dataclass
class PostUpdateInput:
    """Validated partial update; None means "leave unchanged"."""
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None

    def changes(self) -> dict[str, str]:
        """Fields that were supplied."""
        return {
            name: getattr(self, name)
            for name in POST_FIELDS
            if getattr(self, name) is not None
        }


def _post_fields(data: Mapping[str, Any], required: bool) -> dict[str, Optional[str]]:
    reject_unknown(data, POST_FIELDS)
    return {
        "title": string_field(
            data, "title", required=required,
            min_length=Post.TITLE_MIN_LENGTH, max_length=Post.TITLE_MAX_LENGTH,
        ),
        "description": string_field(
            data, "description", required=required,
            min_length=Post.DESCRIPTION_MIN_LENGTH,
        ),
        "category": string_field(
            data, "category", required=required, max_length=Post.CATEGORY_MAX_LENGTH,
        ),
    }


def validate_create_post(data: Mapping[str, Any]) -> PostInput:
    """Validate the fields of a new post.

    Raises:
        ValidationError: With the message of the first failing rule
    """
    return PostInput(**_post_fields(data, required=True))


def validate_update_post(data: Mapping[str, Any]) -> PostUpdateInput:
    """Validate an update; every field is optional."""
    return PostUpdateInput(**_post_fields(data, required=False))


def validate_image_file(path: Optional[str], allowed_extensions: Iterable[str],
                        max_size_bytes: int) -> str:
    """
    Check that a local upload is an acceptable image.

    Args:
        path: Temporary file written from the multipart request
        allowed_extensions: Extensions without the dot, lowercase
        max_size_bytes: Size limit for a single image

    Returns:
        The path, unchanged

    Raises:
        ValidationError: If no file was provided or it is not a usable image
    """
    if not path:
        raise ValidationError("no image provided", "image")

    _, ext = os.path.splitext(path.lower())
    allowed = {e.strip().lower().lstrip(".") for e in allowed_extensions}
    if ext.lstrip(".") not in allowed:
        raise ValidationError(
            f"Unsupported file format. Supported: {', '.join(sorted(allowed))}", "image"
        )

    try:
        file_size = os.path.getsize(path)
    except OSError:
        raise ValidationError("no image provided", "image")

    if file_size == 0:
        raise ValidationError("Empty file provided", "image")
    if file_size > max_size_bytes:
        max_mb = max_size_bytes / (1024 * 1024)
        current_mb = file_size / (1024 * 1024)
        raise ValidationError(
            f"File too large: {current_mb:.1f}MB. Maximum: {max_mb:.1f}MB", "image"
        )

    # Validate image integrity by trying to open it
    try:
        with Image.open(path) as img:
            img.verify()
    except Exception as e:
        raise ValidationError(f"Invalid image file: {e}", "image")

    return path

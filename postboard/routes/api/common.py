"""Request helpers shared by the API blueprints."""
import os
import uuid
from typing import Any, Dict, Optional

from flask import current_app, request
from werkzeug.routing import IntegerConverter
from werkzeug.utils import secure_filename

from postboard.errors import ValidationError
from postboard.forms.validators import MAX_ID


class IdConverter(IntegerConverter):
    """URL rule for record ids; values an INTEGER column cannot hold do not match."""

    def __init__(self, map, **kwargs):
        super().__init__(map, min=1, max=MAX_ID)


def json_body() -> Dict[str, Any]:
    """JSON object sent with the request; empty when there is no body."""
    if not request.get_data(cache=True):
        return {}
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("request body must be valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object")
    return payload


def save_image_upload(field: str = "image") -> Optional[str]:
    """
    Write the uploaded image to the upload folder.

    Returns:
        Path of the temporary file, or None when no file was sent
    """
    file = request.files.get(field)
    if not file or not file.filename:
        return None

    upload_folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(upload_folder, exist_ok=True)
    filename = f"{uuid.uuid4().hex}_{secure_filename(file.filename) or 'upload'}"
    path = os.path.join(upload_folder, filename)
    file.save(path)
    return path

"""Comment input structs and their validators."""
from dataclasses import dataclass
from typing import Any, Mapping

from postboard.forms.validators import id_field, reject_unknown, string_field


@dataclass
class CommentInput:
    post_id: int
    text: str


@dataclass
class CommentUpdateInput:
    text: str


def validate_create_comment(data: Mapping[str, Any]) -> CommentInput:
    reject_unknown(data, ("postId", "text"))
    post_id = id_field(data, "postId")
    text = string_field(data, "text")
    return CommentInput(post_id=post_id, text=text)


def validate_update_comment(data: Mapping[str, Any]) -> CommentUpdateInput:
    reject_unknown(data, ("text",))
    return CommentUpdateInput(text=string_field(data, "text"))

"""Category input struct and validator."""
from dataclasses import dataclass
from typing import Any, Mapping

from postboard.forms.validators import reject_unknown, string_field


@dataclass
class CategoryInput:
    title: str


def validate_create_category(data: Mapping[str, Any]) -> CategoryInput:
    reject_unknown(data, ("title",))
    return CategoryInput(title=string_field(data, "title", max_length=100))

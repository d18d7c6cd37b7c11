"""Field rules shared by the input validators.

Each rule either returns the cleaned value or raises ``ValidationError``
with a message naming the offending field. Validators stop at the first
failure, so callers always report a single message.
"""
from typing import Any, Iterable, Mapping, Optional

from postboard.errors import ValidationError

MISSING = object()

# Largest value an INTEGER primary key column holds
MAX_ID = 2**31 - 1


def reject_unknown(data: Mapping[str, Any], allowed: Iterable[str]) -> None:
    """Fail on the first key that is not part of the input struct."""
    allowed = set(allowed)
    for key in data:
        if key not in allowed:
            raise ValidationError(f'"{key}" is not allowed', key)


def string_field(data: Mapping[str, Any], name: str, required: bool = True,
                 min_length: Optional[int] = None,
                 max_length: Optional[int] = None) -> Optional[str]:
    """Trimmed string field with optional length bounds.

    Returns None when the field is absent and not required.
    """
    value = data.get(name, MISSING)
    if value is MISSING or value is None:
        if required:
            raise ValidationError(f'"{name}" is required', name)
        return None

    if not isinstance(value, str):
        raise ValidationError(f'"{name}" must be a string', name)

    value = value.strip()
    if not value:
        raise ValidationError(f'"{name}" is not allowed to be empty', name)
    if min_length is not None and len(value) < min_length:
        raise ValidationError(
            f'"{name}" length must be at least {min_length} characters long', name
        )
    if max_length is not None and len(value) > max_length:
        raise ValidationError(
            f'"{name}" length must be less than or equal to {max_length} characters long', name
        )
    return value


def id_field(data: Mapping[str, Any], name: str) -> int:
    """Required positive integer id, accepting its string form."""
    value = data.get(name, MISSING)
    if value is MISSING or value is None or value == "":
        raise ValidationError(f'"{name}" is required', name)
    if isinstance(value, bool):
        raise ValidationError(f'"{name}" must be a valid id', name)
    try:
        record_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'"{name}" must be a valid id', name)
    if not 1 <= record_id <= MAX_ID:
        raise ValidationError(f'"{name}" must be a valid id', name)
    return record_id

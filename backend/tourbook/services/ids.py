from tourbook.core.errors import ValidationError
from tourbook.storage.repository import is_valid_id


def require_id(value, label: str) -> str:
    if not value or not is_valid_id(value):
        raise ValidationError(f"Invalid {label} ID")
    return value

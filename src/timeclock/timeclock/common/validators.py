from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def require_min_length(value: Optional[str], message: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(message)
    return value


def require_int(value: Any, message: str) -> int:
    if value is None or value == "" or isinstance(value, bool):
        raise ValidationError(message)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(message)


def require_bool(value: Any, message: str) -> bool:
    # JSON true/false only; "false" as a string is rejected, not truthy
    if not isinstance(value, bool):
        raise ValidationError(message)
    return value


def optional_text(value: Any, message: str) -> Optional[str]:
    """Trimmed string, or None for null/blank input."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(message)
    return value.strip() or None


def parse_bool_flag(value: Optional[str]) -> bool:
    """Query-string flags are only true when spelled ``true``."""
    return (value or "").strip().lower() == "true"

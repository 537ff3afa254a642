from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError
from .numbers import round_half_up


def require_non_empty(value: Optional[str], message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def require_int_range(value: Any, message: str, *, low: int, high: int) -> int:
    """Whole number in [low, high]; fractional input is rounded half up."""
    if isinstance(value, bool):
        raise ValidationError(message)
    try:
        number = round_half_up(float(value))
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(message)
    if number < low or number > high:
        raise ValidationError(message)
    return number


def optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None

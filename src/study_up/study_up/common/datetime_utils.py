from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str], message: str) -> Optional[date]:
    """Empty strings and None become None; anything else must be YYYY-MM-DD."""
    if value is None:
        return None
    v = str(value).strip()
    if not v:
        return None
    try:
        return parse_iso_date(v[:10])
    except ValueError:
        raise ValidationError(message)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()

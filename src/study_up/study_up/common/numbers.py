from __future__ import annotations

import math
from typing import Iterable


def round_half_up(value: float) -> int:
    """0.5 goes up (round() would give banker's rounding)."""
    return int(math.floor(value + 0.5))


def percent(part: int, whole: int) -> int:
    return round_half_up(part * 100 / whole) if whole else 0


def mean_rounded(values: Iterable[float]) -> int:
    items = list(values)
    return round_half_up(sum(items) / len(items)) if items else 0

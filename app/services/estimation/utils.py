# design_poker/app/services/estimation/utils.py

from __future__ import annotations

import math
from typing import Optional


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties going up (2.5 -> 3, -2.5 -> -2).

    Python's built-in round() is banker's rounding, which would make totals
    disagree with what the product has always displayed.
    """
    return int(math.floor(value + 0.5))


def clamp(value: Optional[float], min_value: float, max_value: float) -> float:
    """Clamp a possibly None float into [min_value, max_value]. None -> min_value."""
    if value is None:
        return min_value
    return max(min_value, min(max_value, value))


def is_finite_number(value: object) -> bool:
    """True for int/float values that are not NaN or infinite (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


__all__ = ["round_half_up", "clamp", "is_finite_number"]

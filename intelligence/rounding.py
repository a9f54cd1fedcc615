"""
intelligence/rounding.py

Half-up rounding and clamping shared by the scoring stages.
Python's built-in round() rounds half to even, which would move scores
sitting exactly on .5 in the wrong direction.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 0) -> float:
    if not math.isfinite(value):
        return 0.0
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    return int(round_half_up(value))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def clamp_score(value: float) -> int:
    """Round half up and clamp into 0..100."""
    return int(clamp(round_half_up(value)))

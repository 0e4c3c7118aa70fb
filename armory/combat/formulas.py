"""Progression math helpers decoupled from the runtime state."""
from __future__ import annotations

import math
from typing import Optional


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, like ``Math.round``."""

    return int(math.floor(value + 0.5))


def apply_multiplier(value: float, multiplier: Optional[float], steps: int) -> float:
    if multiplier is None or steps <= 0:
        return value
    for _ in range(steps):
        value *= multiplier
    return value


def geometric_cost(base_cost: float, multiplier: Optional[float], level: int) -> int:
    """Cost of leaving ``level``: ``base * multiplier ** level``, rounded."""

    factor = 1.0 if multiplier is None else multiplier
    return round_half_up(base_cost * factor ** max(0, level))


def clamp_fraction(value: float) -> float:
    return max(0.0, min(1.0, value))


__all__ = ["apply_multiplier", "clamp_fraction", "geometric_cost", "round_half_up"]

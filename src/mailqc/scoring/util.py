"""Numeric helpers shared by the heuristics."""

from __future__ import annotations

import math

MIN_SCORE = 0
MAX_SCORE = 10


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive scores (2.5 -> 3, 6.5 -> 7)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> float:
    return max(MIN_SCORE, min(MAX_SCORE, value))

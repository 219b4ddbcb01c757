"""Numeric safety bounds - single source of truth.

All plan rules must import their limits from here.
"""

import math

MAX_SET_JUMP_PCT = 0.2  # <= 20% set increase on a main lift per patch
MAX_SET_JUMP_ABS = 1  # never more than one extra set per patch
MAX_LOAD_JUMP_PCT = 0.075  # <= 7.5% load increase via RPE/reps (heuristic)

DELOAD_SET_REDUCTION_PCT = 0.3
MIN_DELOAD_RPE = 5
DEFAULT_RPE = 7

MIN_KCAL = 1200
MAX_KCAL = 5000


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 rounding up.

    Python's built-in round() uses banker's rounding, which would make
    e.g. 2.5 -> 2. Plan numbers must round the same way everywhere.
    """
    return math.floor(value + 0.5)


def clamp_kcal(kcal: float) -> int:
    """Round kcal and clamp it to [MIN_KCAL, MAX_KCAL]."""
    return max(MIN_KCAL, min(MAX_KCAL, round_half_up(kcal)))

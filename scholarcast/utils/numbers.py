"""
Number helpers.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties rounding up.

    Python's round() uses banker's rounding (round(72.5) == 72); scores need
    the schoolbook behavior (72.5 -> 73).
    """
    return int(math.floor(value + 0.5))

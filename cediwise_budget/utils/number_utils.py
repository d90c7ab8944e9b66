"""Numeric helpers for money and percentage display"""

import math


def round_half_up(value: float, digits: int = 2) -> float:
    """Round with ties going up (towards +infinity), so 0.125 -> 0.13 and 12.5 -> 13"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def whole_percent(share: float) -> int:
    """Share as a whole percentage, e.g. 0.125 -> 13"""
    return int(round_half_up(share * 100, 0))

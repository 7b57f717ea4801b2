"""Small numeric helpers shared by the metric modules."""

import math


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    """Limit value to the closed range [lower, upper]."""
    return min(upper, max(lower, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up (not to even)."""
    return int(math.floor(value + 0.5))


def round_half_up_to(value: float, ndigits: int = 1) -> float:
    """Round to ndigits decimal places, with halves going up."""
    scale = 10 ** ndigits
    return math.floor(value * scale + 0.5) / scale

"""Small numeric helpers shared by the calculators."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3, -2.5 -> -2).

    Python's built-in round() uses banker's rounding, which would turn a
    displayed 50.5 percentile into 50.
    """
    return math.floor(value + 0.5)


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator

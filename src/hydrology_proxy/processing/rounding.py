"""
Decimal rounding helpers.

Rounds half-way cases towards positive infinity so synthesized and parsed
values match the figures the dashboard has always shown.
"""

import math


def round_half_up(value: float, places: int) -> float:
    """
    Round value to a fixed number of decimal places, ties towards +inf.

    Args:
        value: Finite float
        places: Number of decimal places (>= 0)

    Returns:
        Rounded float
    """
    factor = 10 ** places
    scaled = value * factor + 0.5
    # Magnitudes this large carry no fractional digits anyway
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled) / factor

"""Numeric safety helpers.

Every ratio in the reports (percentages, averages, trend change) goes
through this module so a zero denominator never yields ZeroDivisionError,
NaN or infinity.

Rounding is half-up (``floor(x + 0.5)``): 12.5 -> 13 and -12.5 -> -12.
Python's built-in ``round`` uses banker's rounding and is not used here.
"""

from __future__ import annotations

import math
from typing import Optional


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def safe_ratio(part: float, total: float) -> Optional[float]:
    """Return ``part / total`` or None when total is zero."""
    if not total:
        return None
    return part / total


def pct_value(part: float, total: float) -> int:
    ratio = safe_ratio(part, total)
    if ratio is None:
        return 0
    return round_half_up(100 * ratio)


def pct(part: float, total: float) -> str:
    """Format ``part`` as a whole-number percentage of ``total``.

    >>> pct(1, 4)
    '25%'
    >>> pct(3, 0)
    '0%'
    """
    return f"{pct_value(part, total)}%"


def safe_average(total: float, count: int) -> int:
    ratio = safe_ratio(total, count)
    if ratio is None:
        return 0
    return round_half_up(ratio)


def percentage_change(current: float, previous: float) -> Optional[int]:
    """Change from ``previous`` to ``current`` in percent; None if previous is 0."""
    ratio = safe_ratio(current - previous, previous)
    if ratio is None:
        return None
    return round_half_up(100 * ratio)

"""Rounding and share helpers shared by every reducer.

Dashboards have always shown numbers rounded half-up (2.5 -> 3), so every
rounded value in a report goes through round_half_up rather than the
built-in round(), which rounds half to even.
"""

import math
from collections import Counter
from typing import Iterable, Optional


def round_half_up(value: float, digits: int = 0) -> float:
    """Round value to ``digits`` decimals, with halves rounding up.

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        int when digits is 0, float otherwise

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-2.5)
        -2
        >>> round_half_up(12.345, 1)
        12.3
    """
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5)
    if digits == 0:
        return int(rounded)
    return rounded / factor


def percentage(count: float, total: float) -> int:
    """Return count as a rounded percentage of total, or 0 if total is 0."""
    if total <= 0:
        return 0
    return round_half_up(count / total * 100)


def growth_percentage(current: float, previous: float) -> float:
    """Return the unrounded percentage change from previous to current.

    A zero (or negative) previous value has no defined growth, so 0 is
    returned instead of dividing by it.
    """
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def tally(values: Iterable[Optional[str]]) -> Counter:
    """Count labels in first-seen order, ignoring None."""
    counts: Counter = Counter()
    for value in values:
        if value is not None:
            counts[value] += 1
    return counts


def ranked(counts: Counter, limit: Optional[int] = None) -> list[tuple[str, int]]:
    """Return (label, count) pairs sorted by count, descending.

    Ties keep first-seen order. ``limit`` truncates to the top N.
    """
    return counts.most_common(limit)

"""
Unit partitioning for bulk items.

The unit count of a run is the largest prime factor of the item's total
quantity, which always divides the total evenly. A prime total therefore
yields one-item units, and a total of 1 yields a single unit.
"""

from __future__ import annotations

import math

from within.core.domain.errors import InvalidArgument
from within.core.planning.models import UnitPlan

UNITS_TOTAL_MIN: int = 1
UNITS_TOTAL_MAX: int = 24


def _require_positive_int(name: str, value: object) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise InvalidArgument(f"{name} must be a positive integer, got {value!r}")
    return value


def largest_prime_factor(n: int) -> int:
    """Return the largest prime dividing ``n``, or 1 when ``n == 1``."""
    x = _require_positive_int("n", n)
    lpf = 1

    while x % 2 == 0:
        lpf = 2
        x //= 2

    f = 3
    while f * f <= x:
        while x % f == 0:
            lpf = f
            x //= f
        f += 2

    if x > 1:
        lpf = x
    return lpf


def plan_units(total_quantity: int) -> UnitPlan:
    """Split ``total_quantity`` into ``largest_prime_factor(total_quantity)`` units."""
    total = _require_positive_int("total_quantity", total_quantity)
    unit_count = largest_prime_factor(total)
    return UnitPlan(unit_count=unit_count, unit_size=total // unit_count)


def clamp_units_total(
    unit_count: object,
    lower: int = UNITS_TOTAL_MIN,
    upper: int = UNITS_TOTAL_MAX,
) -> int:
    """Clamp a unit count into ``[lower, upper]`` before it is persisted as units_total.

    Missing, zero, NaN or non-numeric counts fall back to ``lower``. Positive
    infinity clamps to ``upper``. Fractional counts are truncated toward zero,
    since units_total is stored as an integer.
    """
    if lower > upper:
        raise InvalidArgument(f"lower must be <= upper, got {lower} > {upper}")

    try:
        value = float(unit_count)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return lower
    except OverflowError:
        # integers too large for a float
        return upper if unit_count > 0 else lower  # type: ignore[operator]

    if math.isnan(value) or value == 0:
        return lower
    if math.isinf(value):
        return upper if value > 0 else lower

    return max(lower, min(upper, int(value)))

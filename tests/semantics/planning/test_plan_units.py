"""
Semantic test: unit partitioning by largest prime factor.

Invariant:
For every n >= 1, plan_units(n).unit_count divides n exactly,
unit_count * unit_size == n, and unit_count <= n.
"""

from __future__ import annotations

import pytest

from within.core.domain.errors import InvalidArgument
from within.core.planning.models import UnitPlan
from within.core.planning.units import largest_prime_factor, plan_units

PRIMES = [2, 3, 5, 7, 11, 13, 97, 7919]


def test_unit_count_divides_total_for_small_totals() -> None:
    for n in range(1, 500):
        plan = plan_units(n)
        assert n % plan.unit_count == 0
        assert plan.unit_count * plan.unit_size == n
        assert 1 <= plan.unit_count <= n


@pytest.mark.parametrize("p", PRIMES)
def test_prime_total_yields_single_item_units(p: int) -> None:
    assert plan_units(p) == UnitPlan(unit_count=p, unit_size=1)


def test_total_of_one_is_a_single_unit() -> None:
    assert largest_prime_factor(1) == 1
    assert plan_units(1) == UnitPlan(unit_count=1, unit_size=1)


def test_catalog_totals() -> None:
    # 30 = 2 x 3 x 5 and 12 = 2^2 x 3
    assert plan_units(30) == UnitPlan(unit_count=5, unit_size=6)
    assert plan_units(12) == UnitPlan(unit_count=3, unit_size=4)


@pytest.mark.parametrize(
    ("n", "expected"),
    [(2, 2), (4, 2), (8, 2), (1024, 2), (9, 3), (49, 7), (60, 5), (84, 7), (221, 17), (600851475143, 6857)],
)
def test_largest_prime_factor_values(n: int, expected: int) -> None:
    assert largest_prime_factor(n) == expected


@pytest.mark.parametrize("bad", [0, -1, -30, 2.5, "12", None, True])
def test_non_positive_or_non_integer_total_is_rejected(bad: object) -> None:
    with pytest.raises(InvalidArgument):
        plan_units(bad)  # type: ignore[arg-type]


def test_invalid_argument_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        plan_units(0)

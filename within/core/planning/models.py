"""
Planning model definitions.

This module contains immutable planning structures produced by the
time window planner and the unit partitioner.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class RunWindow:
    """
    Start, end and expiry instants of a shared run.

    Invariant: start <= end < expires_at.
    """

    start: datetime
    end: datetime
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class UnitPlan:
    """
    Split of a bulk item into equally sized claimable units.

    Invariant: unit_count * unit_size == total quantity.
    """

    unit_count: int
    unit_size: int

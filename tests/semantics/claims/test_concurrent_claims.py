"""
Semantic test: concurrent claims never over-allocate.

Invariant:
However many requesters claim at once, units_claimed never exceeds
units_total, and exactly units_total claims succeed.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from within.adapters.memory_store import InMemorySignalStore
from within.app.run_service import RunService
from within.core.domain.reject_reasons import ClaimRejectReason
from within.core.domain.types import Signal


def test_parallel_claims_stop_at_units_total(
    service: RunService,
    store: InMemorySignalStore,
    posted: Signal,
    now: datetime,
) -> None:
    assert posted.units_total == 3

    with ThreadPoolExecutor(max_workers=16) as pool:
        decisions = list(pool.map(lambda _: service.claim_one(posted.id, now), range(40)))

    accepted = [d for d in decisions if d.accepted]
    rejected = [d for d in decisions if not d.accepted]

    assert len(accepted) == 3
    assert all(d.reason == ClaimRejectReason.FULL for d in rejected)

    row = store.get_signal(posted.id)
    assert row is not None
    assert row.units_claimed == 3
    assert len(store.claims_for(posted.id)) == 3


def test_conditional_increment_refuses_overflow(store: InMemorySignalStore, posted: Signal) -> None:
    assert store.increment_claimed(posted.id, 2)
    assert not store.increment_claimed(posted.id, 2)
    assert store.increment_claimed(posted.id, 1)
    assert not store.increment_claimed(posted.id, 1)

    row = store.get_signal(posted.id)
    assert row is not None
    assert row.units_claimed == row.units_total

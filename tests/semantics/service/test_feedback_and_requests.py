"""
Semantic test: feedback and open requests.

Invariant:
Feedback is attached to its run with blank notes stored as null; requests
are listed newest first.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from within.adapters.memory_store import InMemorySignalStore
from within.app.run_service import RunService
from within.core.domain.errors import StoreError
from within.core.domain.types import Signal
from within.core.events.event_bus import EventBus
from within.core.events.events import FeedbackRecordedEvent, RequestPostedEvent


def test_feedback_is_recorded_on_run(
    service: RunService,
    store: InMemorySignalStore,
    sink,
    posted: Signal,
) -> None:
    payload = service.submit_feedback(posted.id, "ok", "   ")

    assert payload.notes is None
    row = store.get_signal(posted.id)
    assert row is not None
    assert row.feedback == "ok"
    assert row.feedback_notes is None

    events = sink.of_type(FeedbackRecordedEvent)
    assert len(events) == 1
    assert events[0].feedback == "ok"
    assert not events[0].has_notes


def test_feedback_with_notes(service: RunService, store: InMemorySignalStore, posted: Signal) -> None:
    service.submit_feedback(posted.id, "not_ok", "Arrived late")

    row = store.get_signal(posted.id)
    assert row is not None
    assert row.feedback == "not_ok"
    assert row.feedback_notes == "Arrived late"


def test_invalid_feedback_value_is_rejected(service: RunService, posted: Signal) -> None:
    with pytest.raises(ValidationError):
        service.submit_feedback(posted.id, "meh")  # type: ignore[arg-type]


def test_feedback_for_unknown_run_raises(service: RunService) -> None:
    with pytest.raises(StoreError):
        service.submit_feedback("signal-404", "ok")


def test_claim_feedback_update(service: RunService, store: InMemorySignalStore, posted: Signal, now: datetime) -> None:
    decision = service.claim_one(posted.id, now)
    assert decision.claim_id is not None

    service.update_claim_feedback(decision.claim_id, "ok", "Thanks!")

    claim = store.claims_for(posted.id)[0]
    assert claim["feedback"] == "ok"
    assert claim["feedback_notes"] == "Thanks!"


def test_requests_are_listed_newest_first(sink) -> None:
    stamps = iter(
        datetime(2026, 3, 14, 9, 0, tzinfo=timezone.utc) + timedelta(minutes=i) for i in range(10)
    )
    service = RunService(InMemorySignalStore(clock=lambda: next(stamps)), event_bus=EventBus([sink]))

    first = service.post_request("toilet paper", direction="west", payment_method="Venmo")
    second = service.post_request("paper towels", payment_method="")

    assert second.payment_method is None
    assert [r.id for r in service.recent_requests()] == [second.id, first.id]
    assert [r.id for r in service.recent_requests(limit=1)] == [second.id]
    assert len(sink.of_type(RequestPostedEvent)) == 2

"""
Semantic test: posting a run.

Invariant:
A posted run carries the bucketed window, expiry two hours after the window
end, the catalog purpose text and the clamped largest-prime-factor unit count.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from within.adapters.memory_store import InMemorySignalStore
from within.app.run_service import RunService
from within.config.run_config import RunConfig
from within.core.domain.catalog import CatalogItem, Store
from within.core.domain.errors import InvalidArgument, StoreError
from within.core.domain.types import RunForm, SignalInsert
from within.core.events.events import SignalPostedEvent


def test_post_toilet_paper_run(service: RunService, store: InMemorySignalStore, sink, now: datetime) -> None:
    row = service.post_run(RunForm(direction="north", item_key="tp30", leave_in_min=15, window_hours=1), now)

    start = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
    assert row.window_start == start
    assert row.window_end == start + timedelta(hours=1)
    assert row.expires_at == start + timedelta(hours=3)
    assert row.units_total == 5
    assert row.units_claimed == 0
    assert row.purpose == "Costco • Toilet paper"
    assert row.direction == "north"

    assert store.list_signals() == [row]

    events = sink.of_type(SignalPostedEvent)
    assert len(events) == 1
    assert events[0].signal_id == row.id
    assert events[0].units_total == 5


def test_preview_does_not_touch_store(service: RunService, store: InMemorySignalStore, now: datetime) -> None:
    draft = service.preview(RunForm(item_key="pt12"), now)

    assert draft.units.unit_count == 3
    assert draft.units.unit_size == 4
    assert draft.summary() == "12 total → 3 units • 4 each"
    assert store.list_signals() == []


def test_units_total_is_clamped(store: InMemorySignalStore, now: datetime) -> None:
    catalog = {
        "bulk": Store(
            key="bulk",
            label="Bulk Barn",
            items=(CatalogItem(key="rice97", label="Rice bags (97)", total=97),),
        )
    }
    service = RunService(store, catalog=catalog)

    row = service.post_run(RunForm(store_key="bulk", item_key="rice97"), now)

    assert row.units_total == 24
    assert row.purpose == "Bulk Barn • Rice bags"


def test_config_drives_bucket_and_grace(store: InMemorySignalStore) -> None:
    cfg = RunConfig(bucket_minutes=60, expiry_grace_hours=1, window_hours_options=[3])
    service = RunService(store, config=cfg)

    now = datetime(2026, 3, 14, 9, 1, tzinfo=timezone.utc)
    row = service.post_run(RunForm(window_hours=3), now)

    assert row.window_start == datetime(2026, 3, 14, 10, 0, tzinfo=timezone.utc)
    assert row.window_end == datetime(2026, 3, 14, 13, 0, tzinfo=timezone.utc)
    assert row.expires_at == datetime(2026, 3, 14, 14, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "form",
    [
        RunForm(leave_in_min=20),
        RunForm(window_hours=3),
        RunForm(store_key="walmart"),
        RunForm(item_key="eggs60"),
        RunForm(payments=["Bitcoin"]),
    ],
)
def test_invalid_form_is_rejected(service: RunService, store: InMemorySignalStore, form: RunForm, now: datetime) -> None:
    with pytest.raises(InvalidArgument):
        service.post_run(form, now)
    assert store.list_signals() == []


def test_store_failure_is_logged_and_raised(now: datetime, caplog: pytest.LogCaptureFixture) -> None:
    class FailingStore(InMemorySignalStore):
        def insert_signal(self, payload: SignalInsert):
            raise StoreError("backend unavailable")

    service = RunService(FailingStore())

    with caplog.at_level("ERROR", logger="within.app.run_service"):
        with pytest.raises(StoreError):
            service.post_run(RunForm(), now)

    assert "Insert failed" in caplog.text


def test_toggle_payment_adds_and_removes() -> None:
    form = RunForm().toggle_payment("Venmo").toggle_payment("Zelle")
    assert form.payments == ["Venmo", "Zelle"]
    assert form.toggle_payment("Venmo").payments == ["Zelle"]


def test_grace_too_short_to_represent_is_an_invalid_argument(store: InMemorySignalStore, now: datetime) -> None:
    service = RunService(store, config=RunConfig(expiry_grace_hours=1e-12))

    with pytest.raises(InvalidArgument):
        service.post_run(RunForm(), now)
    assert store.list_signals() == []

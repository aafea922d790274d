from __future__ import annotations

from datetime import datetime, timezone

import pytest

from within.adapters.memory_store import InMemorySignalStore
from within.app.run_service import RunService
from within.core.domain.types import RunForm, Signal
from within.core.events.event_bus import EventBus

NOW = datetime(2026, 3, 14, 9, 7, tzinfo=timezone.utc)


class RecordingSink:
    """Event sink that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: list[object] = []

    def on_event(self, event: object) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> list[object]:
        return [e for e in self.events if isinstance(e, event_type)]


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def store() -> InMemorySignalStore:
    return InMemorySignalStore(clock=lambda: NOW)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def service(store: InMemorySignalStore, sink: RecordingSink) -> RunService:
    return RunService(store, event_bus=EventBus([sink]))


@pytest.fixture
def posted(service: RunService, now: datetime) -> Signal:
    """A paper towel run (12 -> 3 units) posted at NOW."""
    return service.post_run(RunForm(direction="east", item_key="pt12"), now)

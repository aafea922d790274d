from __future__ import annotations

from typing import Any

from within.core.events.event_bus import EventBus


class _DiscardSink:
    def on_event(self, event: Any) -> None:
        return


class NullEventBus(EventBus):
    """Bus a RunService gets when no event_bus is passed; events are dropped."""

    def __init__(self) -> None:
        super().__init__(sinks=[_DiscardSink()])

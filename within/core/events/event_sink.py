"""
Event sink interface.

A sink receives the frozen event dataclasses from within.core.events.events
(SignalPostedEvent, UnitClaimedEvent, ClaimRejectedEvent, ...). Sinks may
also define close(); EventBus.close() calls it when present.
"""
from __future__ import annotations

from typing import Any, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Handle one run, claim, feedback or request event."""

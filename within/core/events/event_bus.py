"""
Synchronous event bus for run, claim, feedback and request events.

Events are delivered in emit order to every sink on the caller's thread.
Sinks that hold resources (the JSON-lines recorder's file handle, the
Prometheus sink's Pushgateway push) release them in close().
"""
from __future__ import annotations

from typing import Any, Iterable

from within.core.events.event_sink import EventSink


class EventBus:
    """Fans RunService events out to the logging, file and Prometheus sinks."""

    def __init__(self, sinks: Iterable[EventSink] | None = None) -> None:
        self._sinks: list[EventSink] = list(sinks) if sinks is not None else []
        self._closed = False

    def register(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    def emit(self, event: Any) -> None:
        """Deliver ``event`` to each sink in registration order."""
        for sink in self._sinks:
            sink.on_event(event)

    def close(self) -> None:
        """
        Close every sink that has a close() method, once.

        The file recorder flushes and closes its handle; the Prometheus sink
        pushes its counters when a Pushgateway is configured. Calling close()
        again is a no-op.
        """
        if self._closed:
            return

        for sink in self._sinks:
            close_fn = getattr(sink, "close", None)
            if callable(close_fn):
                close_fn()

        self._closed = True

"""
Logging event sink.
"""
from __future__ import annotations

import logging
from typing import Any


class LoggingEventSink:
    """Logs domain events using the standard logging module."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger if logger is not None else logging.getLogger("within.events")

    def on_event(self, event: Any) -> None:
        self._logger.info("%s", type(event).__name__, extra={"event": event})

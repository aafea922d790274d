"""Human-facing rendering of run instants."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from within.core.domain.types import Signal


def _localize(instant: datetime, tz: tzinfo | None) -> datetime:
    # astimezone(None) converts to the process's local zone.
    return instant.astimezone(tz)


def to_local_input(instant: datetime, tz: tzinfo | None = None) -> str:
    """Render ``instant`` as ``YYYY-MM-DDTHH:MM`` in ``tz`` (local zone by default)."""
    return _localize(instant, tz).strftime("%Y-%m-%dT%H:%M")


def format_clock(instant: datetime, tz: tzinfo | None = None) -> str:
    """Render ``instant`` as e.g. ``9:15 am``."""
    local = _localize(instant, tz)
    hour = local.hour % 12 or 12
    suffix = "am" if local.hour < 12 else "pm"
    return f"{hour}:{local.minute:02d} {suffix}"


def format_window(signal: Signal, tz: tzinfo | None = None) -> str:
    return f"{format_clock(signal.window_start, tz)}–{format_clock(signal.window_end, tz)}"

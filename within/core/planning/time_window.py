"""
Bucketed run window planning.

A run's start is aligned to the next bucket boundary after "now" so that an
operator never commits to a start time that has already passed by the time
the form is submitted, and so that start times land on friendly marks
(quarter hours for 15 minute buckets).

All functions are pure: the current instant is always passed in by the
caller.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

from within.core.domain.errors import InvalidArgument
from within.core.planning.models import RunWindow

DEFAULT_BUCKET_MINUTES: int = 15
DEFAULT_EXPIRY_GRACE_HOURS: float = 2.0

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_US = timedelta(microseconds=1)


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _require_aware(now: datetime) -> None:
    if not isinstance(now, datetime):
        raise InvalidArgument(f"now must be a datetime, got {type(now).__name__}")
    if now.tzinfo is None or now.utcoffset() is None:
        raise InvalidArgument("now must be timezone-aware")


def round_up_to_bucket(now: datetime, bucket_minutes: int = DEFAULT_BUCKET_MINUTES) -> datetime:
    """Round ``now`` up to the next multiple of ``bucket_minutes`` since the Unix epoch.

    Instants already on a boundary are returned unchanged. The result keeps
    the timezone of ``now``.
    """
    _require_aware(now)
    if not isinstance(bucket_minutes, int) or isinstance(bucket_minutes, bool) or bucket_minutes <= 0:
        raise InvalidArgument(f"bucket_minutes must be a positive integer, got {bucket_minutes!r}")

    elapsed_us = (now - _EPOCH) // _ONE_US
    bucket_us = bucket_minutes * 60 * 1_000_000

    # ceil division on integers keeps sub-millisecond inputs exact
    rounded_us = -(-elapsed_us // bucket_us) * bucket_us
    try:
        rounded = _EPOCH + timedelta(microseconds=rounded_us)
    except OverflowError as exc:
        raise InvalidArgument(f"no bucket boundary after {now.isoformat()}") from exc
    return rounded.astimezone(now.tzinfo)


def plan_window(
    now: datetime,
    bucket_minutes: int = DEFAULT_BUCKET_MINUTES,
    leave_in_minutes: float = 0,
    window_hours: float = 2,
    *,
    expiry_grace_hours: float = DEFAULT_EXPIRY_GRACE_HOURS,
) -> RunWindow:
    """
    Compute the start, end and expiry instants of a run.

    Parameters
    ----------
    now:
        Current instant (timezone-aware). Never read from the process clock here.

    bucket_minutes:
        Rounding granularity for the start time.

    leave_in_minutes:
        Offset added after rounding ("leave in 15 min").

    window_hours:
        Duration of the claimable window.

    expiry_grace_hours:
        Time after the window end at which the run stops accepting claims.

    Returns
    -------
    RunWindow
        With start <= end < expires_at.
    """
    if not _is_number(leave_in_minutes) or leave_in_minutes < 0:
        raise InvalidArgument(f"leave_in_minutes must be a finite number >= 0, got {leave_in_minutes!r}")
    if not _is_number(window_hours) or window_hours <= 0:
        raise InvalidArgument(f"window_hours must be a finite number > 0, got {window_hours!r}")
    if not _is_number(expiry_grace_hours) or expiry_grace_hours <= 0:
        raise InvalidArgument(
            f"expiry_grace_hours must be a finite number > 0, got {expiry_grace_hours!r}"
        )

    rounded = round_up_to_bucket(now, bucket_minutes)

    try:
        leave_in = timedelta(minutes=leave_in_minutes)
        window = timedelta(hours=window_hours)
        grace = timedelta(hours=expiry_grace_hours)
    except OverflowError as exc:
        raise InvalidArgument(f"run window durations out of range: {exc}") from exc

    # timedelta keeps microseconds; anything shorter collapses to zero
    if grace <= timedelta(0):
        raise InvalidArgument(
            f"expiry_grace_hours must be at least one microsecond, got {expiry_grace_hours!r}"
        )

    try:
        start = rounded + leave_in
        end = start + window
        expires_at = end + grace
    except OverflowError as exc:
        raise InvalidArgument(f"run window falls outside the supported date range: {exc}") from exc

    return RunWindow(start=start, end=end, expires_at=expires_at)

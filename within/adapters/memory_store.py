"""In-memory signal store.

Reference implementation of the SignalStore protocol used by tests and the
CLI. The claimed-units counter is guarded by a lock so that the conditional
increment behaves like the backend's atomic procedure.
"""

from __future__ import annotations

import itertools
import logging
import threading
from datetime import datetime, timezone
from typing import Callable

from within.core.domain.errors import StoreError
from within.core.domain.types import (
    ClaimInsert,
    FeedbackInsert,
    FeedbackValue,
    RequestInsert,
    RequestRow,
    Signal,
    SignalInsert,
)

LOGGER = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemorySignalStore:
    """Thread-safe SignalStore kept in process memory."""

    def __init__(self, *, clock: Callable[[], datetime] = _utc_now) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._clock = clock

        self._signals: dict[str, Signal] = {}
        self._claims: dict[str, dict[str, object]] = {}
        self._feedback: list[FeedbackInsert] = []
        self._requests: list[RequestRow] = []

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------

    def list_signals(self) -> list[Signal]:
        with self._lock:
            rows = list(self._signals.values())
        return sorted(rows, key=lambda s: s.window_start)

    def get_signal(self, signal_id: str) -> Signal | None:
        with self._lock:
            return self._signals.get(signal_id)

    def insert_signal(self, payload: SignalInsert) -> Signal:
        with self._lock:
            signal_id = self._next_id("signal")
            row = Signal(id=signal_id, units_claimed=0, **payload.model_dump())
            self._signals[signal_id] = row
        LOGGER.debug("Inserted signal", extra={"signal_id": signal_id})
        return row

    # ------------------------------------------------------------------
    # Claims
    # ------------------------------------------------------------------

    def insert_claim(self, payload: ClaimInsert) -> str:
        with self._lock:
            if payload.signal_id not in self._signals:
                raise StoreError(f"Unknown signal {payload.signal_id!r}")
            claim_id = self._next_id("claim")
            self._claims[claim_id] = {
                "signal_id": payload.signal_id,
                "unit_count": payload.unit_count,
                "feedback": None,
                "feedback_notes": None,
            }
        return claim_id

    def claims_for(self, signal_id: str) -> list[dict[str, object]]:
        with self._lock:
            return [dict(c, id=cid) for cid, c in self._claims.items() if c["signal_id"] == signal_id]

    def increment_claimed(self, signal_id: str, count: int) -> bool:
        if count <= 0:
            raise StoreError(f"count must be positive, got {count}")

        with self._lock:
            row = self._signals.get(signal_id)
            if row is None:
                raise StoreError(f"Unknown signal {signal_id!r}")
            if row.units_claimed + count > row.units_total:
                return False
            self._signals[signal_id] = row.model_copy(
                update={"units_claimed": row.units_claimed + count}
            )
        return True

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------

    def insert_feedback(self, payload: FeedbackInsert) -> None:
        with self._lock:
            row = self._signals.get(payload.signal_id)
            if row is None:
                raise StoreError(f"Unknown signal {payload.signal_id!r}")
            self._feedback.append(payload)
            self._signals[payload.signal_id] = row.model_copy(
                update={"feedback": payload.feedback, "feedback_notes": payload.notes}
            )

    def update_claim_feedback(self, claim_id: str, feedback: FeedbackValue, notes: str) -> None:
        with self._lock:
            claim = self._claims.get(claim_id)
            if claim is None:
                raise StoreError(f"Unknown claim {claim_id!r}")
            claim["feedback"] = feedback
            claim["feedback_notes"] = notes

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def insert_request(self, payload: RequestInsert) -> RequestRow:
        with self._lock:
            row = RequestRow(
                id=self._next_id("request"),
                created_at=self._clock(),
                status="open",
                **payload.model_dump(),
            )
            self._requests.append(row)
        return row

    def list_requests(self, limit: int = 50) -> list[RequestRow]:
        with self._lock:
            rows = sorted(
                reversed(self._requests),
                key=lambda r: r.created_at or datetime.min.replace(tzinfo=timezone.utc),
                reverse=True,
            )
        return rows[:limit]

"""Signal store protocol.

This module defines the abstract boundary to the hosted data backend that
owns runs, claims, feedback and requests. Concrete implementations adapt a
specific backend to this protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from within.core.domain.types import (
        ClaimInsert,
        FeedbackInsert,
        FeedbackValue,
        RequestInsert,
        RequestRow,
        Signal,
        SignalInsert,
    )


class SignalStore(Protocol):
    """Backend-facing persistence boundary.

    Failures are raised as ``StoreError``.
    """

    def list_signals(self) -> list[Signal]:
        """Return all runs ordered by window_start ascending."""

    def insert_signal(self, payload: SignalInsert) -> Signal:
        """Persist a new run with units_claimed = 0 and return the stored row."""

    def insert_claim(self, payload: ClaimInsert) -> str:
        """Persist a claim row and return its id."""

    def increment_claimed(self, signal_id: str, count: int) -> bool:
        """Atomically add ``count`` to units_claimed.

        The increment must be conditional: it is applied only if the result
        does not exceed units_total, even under concurrent callers. Returns
        False when the increment was refused.
        """

    def insert_feedback(self, payload: FeedbackInsert) -> None:
        """Persist run-level feedback."""

    def update_claim_feedback(self, claim_id: str, feedback: FeedbackValue, notes: str) -> None:
        """Attach feedback to an existing claim row."""

    def insert_request(self, payload: RequestInsert) -> RequestRow:
        """Persist an open request and return the stored row."""

    def list_requests(self, limit: int = 50) -> list[RequestRow]:
        """Return the most recent requests, newest first."""

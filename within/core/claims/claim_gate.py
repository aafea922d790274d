"""Claim gating for runs.

The gate decides whether a claim may be attempted against the store. It does
not guarantee the claim succeeds: the store's conditional increment is the
final arbiter when several requesters race for the last unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Literal

from within.core.domain.reject_reasons import ClaimRejectReason

if TYPE_CHECKING:
    from within.core.domain.types import Signal

SignalStatus = Literal["open", "full", "expired"]


@dataclass(frozen=True, slots=True)
class ClaimDecision:
    """Outcome of a claim attempt.

    - accepted: the claim may be (or was) sent to the store
    - reason: a ClaimRejectReason when not accepted
    - claim_id: populated by the service once the claim row exists
    """

    signal_id: str
    accepted: bool
    reason: str | None = None
    claim_id: str | None = None


def is_expired(signal: Signal, now: datetime) -> bool:
    """Return True once ``now`` is past the run's expiry instant."""
    return now > signal.expires_at


def is_active(signal: Signal, now: datetime) -> bool:
    """Return True while the run is still listed to requesters."""
    return now < signal.expires_at


def signal_status(signal: Signal, now: datetime) -> SignalStatus:
    if signal.is_full():
        return "full"
    if is_expired(signal, now):
        return "expired"
    return "open"


class ClaimGate:
    """Pre-store checks applied before a unit is claimed."""

    def decide(self, signal: Signal, now: datetime) -> ClaimDecision:
        if signal.is_full():
            return ClaimDecision(signal_id=signal.id, accepted=False, reason=ClaimRejectReason.FULL)
        if is_expired(signal, now):
            return ClaimDecision(signal_id=signal.id, accepted=False, reason=ClaimRejectReason.EXPIRED)
        return ClaimDecision(signal_id=signal.id, accepted=True)

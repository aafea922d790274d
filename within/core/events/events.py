"""
Domain event models.

These events are immutable facts about runs: a run was posted, a unit was
claimed or turned away, feedback was recorded. They are consumed by loggers,
recorders and metrics sinks.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SignalPostedEvent:
    signal_id: str
    purpose: str
    direction: str

    window_start: str
    window_end: str
    expires_at: str

    units_total: int


@dataclass(frozen=True, slots=True)
class UnitClaimedEvent:
    signal_id: str
    claim_id: str
    unit_count: int
    claimed_at: str


@dataclass(frozen=True, slots=True)
class ClaimRejectedEvent:
    signal_id: str
    reason: str
    rejected_at: str


@dataclass(frozen=True, slots=True)
class FeedbackRecordedEvent:
    signal_id: str
    feedback: str
    has_notes: bool


@dataclass(frozen=True, slots=True)
class RequestPostedEvent:
    request_id: str
    purpose: str
    direction: str

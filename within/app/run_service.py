"""Run service.

Headless application layer for shared runs: builds a run from the operator
form, posts it, lists active runs, claims units and records feedback. All
persistence goes through a SignalStore; every operation that depends on the
current instant takes it as an explicit ``now`` argument.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from within.config.run_config import RunConfig
from within.core.claims.claim_gate import ClaimDecision, ClaimGate, is_active
from within.core.domain.catalog import CATALOG, CatalogItem, Store, purpose_text, resolve_item
from within.core.domain.errors import InvalidArgument, StoreError
from within.core.domain.reject_reasons import ClaimRejectReason
from within.core.domain.types import (
    ClaimInsert,
    Direction,
    FeedbackInsert,
    FeedbackValue,
    RequestInsert,
    RequestRow,
    RunForm,
    Signal,
    SignalInsert,
)
from within.core.events.events import (
    ClaimRejectedEvent,
    FeedbackRecordedEvent,
    RequestPostedEvent,
    SignalPostedEvent,
    UnitClaimedEvent,
)
from within.core.events.sinks.null_event_bus import NullEventBus
from within.core.planning.models import RunWindow, UnitPlan
from within.core.planning.time_window import plan_window
from within.core.planning.units import clamp_units_total, plan_units

if TYPE_CHECKING:
    from within.core.events.event_bus import EventBus
    from within.core.ports.signal_store import SignalStore

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunDraft:
    """Everything a run would be posted with, before it reaches the store."""

    direction: Direction
    store: Store
    item: CatalogItem
    purpose: str
    window: RunWindow
    units: UnitPlan
    units_total: int

    def to_insert(self) -> SignalInsert:
        return SignalInsert(
            direction=self.direction,
            purpose=self.purpose,
            window_start=self.window.start,
            window_end=self.window.end,
            units_total=self.units_total,
            expires_at=self.window.expires_at,
        )

    def summary(self) -> str:
        """Human summary, e.g. ``"30 total → 5 units • 6 each"``."""
        return f"{self.item.total} total → {self.units_total} units • {self.units.unit_size} each"


class RunService:
    """Coordinates planning, the claim gate and the signal store."""

    def __init__(
        self,
        store: SignalStore,
        *,
        config: RunConfig | None = None,
        event_bus: EventBus | None = None,
        catalog: dict[str, Store] | None = None,
    ) -> None:
        self._store = store
        self._config = config if config is not None else RunConfig()
        self._event_bus = event_bus if event_bus is not None else NullEventBus()
        self._catalog = catalog if catalog is not None else CATALOG
        self._gate = ClaimGate()

    # ---------------------------------------------------------------------
    # Operator side
    # ---------------------------------------------------------------------

    def preview(self, form: RunForm, now: datetime) -> RunDraft:
        """Compute the run the form would post at ``now`` without touching the store."""
        cfg = self._config

        if form.leave_in_min not in cfg.leave_in_options:
            raise InvalidArgument(
                f"leave_in_min must be one of {cfg.leave_in_options}, got {form.leave_in_min}"
            )
        if form.window_hours not in cfg.window_hours_options:
            raise InvalidArgument(
                f"window_hours must be one of {cfg.window_hours_options}, got {form.window_hours}"
            )
        unknown_payments = [m for m in form.payments if m not in cfg.payment_methods]
        if unknown_payments:
            raise InvalidArgument(f"Unknown payment methods: {unknown_payments}")

        store, item = resolve_item(form.store_key, form.item_key, self._catalog)
        units = plan_units(item.total)
        window = plan_window(
            now,
            cfg.bucket_minutes,
            form.leave_in_min,
            form.window_hours,
            expiry_grace_hours=cfg.expiry_grace_hours,
        )
        units_total = clamp_units_total(
            units.unit_count,
            lower=cfg.units_total_min,
            upper=cfg.units_total_max,
        )

        return RunDraft(
            direction=form.direction,
            store=store,
            item=item,
            purpose=purpose_text(store, item),
            window=window,
            units=units,
            units_total=units_total,
        )

    def post_run(self, form: RunForm, now: datetime) -> Signal:
        """Plan and persist a run, returning the stored row."""
        payload = self.preview(form, now).to_insert()

        try:
            row = self._store.insert_signal(payload)
        except StoreError:
            LOGGER.error("Insert failed", exc_info=True, extra={"purpose": payload.purpose})
            raise

        self._event_bus.emit(
            SignalPostedEvent(
                signal_id=row.id,
                purpose=row.purpose,
                direction=row.direction,
                window_start=row.window_start.isoformat(),
                window_end=row.window_end.isoformat(),
                expires_at=row.expires_at.isoformat(),
                units_total=row.units_total,
            )
        )
        LOGGER.info("Run posted", extra={"signal_id": row.id, "units_total": row.units_total})
        return row

    # ---------------------------------------------------------------------
    # Requester side
    # ---------------------------------------------------------------------

    def load_signals(self) -> list[Signal]:
        return self._store.list_signals()

    def active_signals(self, now: datetime) -> list[Signal]:
        """Return runs that have not yet expired, ordered by window_start."""
        return [s for s in self.load_signals() if is_active(s, now)]

    def claim_one(self, signal_id: str, now: datetime) -> ClaimDecision:
        """Claim a single unit of a run.

        Full or expired runs are turned away without a store write. A refused
        conditional increment (another requester took the last unit) is
        reported as FULL. The increment runs before the claim row is written,
        so a lost race leaves no orphan claim; a StoreError from the claim
        insert is logged and re-raised.
        """
        signal = next((s for s in self.load_signals() if s.id == signal_id), None)
        if signal is None:
            return self._reject(signal_id, ClaimRejectReason.UNKNOWN_SIGNAL, now)

        decision = self._gate.decide(signal, now)
        if not decision.accepted:
            return self._reject(signal_id, decision.reason or ClaimRejectReason.FULL, now)

        if not self._store.increment_claimed(signal_id, 1):
            return self._reject(signal_id, ClaimRejectReason.FULL, now)

        try:
            claim_id = self._store.insert_claim(ClaimInsert(signal_id=signal_id, unit_count=1))
        except StoreError:
            # the unit is already counted against the run at this point
            LOGGER.error("Claim insert failed", exc_info=True, extra={"signal_id": signal_id})
            raise

        self._event_bus.emit(
            UnitClaimedEvent(
                signal_id=signal_id,
                claim_id=claim_id,
                unit_count=1,
                claimed_at=now.isoformat(),
            )
        )
        return ClaimDecision(signal_id=signal_id, accepted=True, claim_id=claim_id)

    def _reject(self, signal_id: str, reason: str, now: datetime) -> ClaimDecision:
        LOGGER.info("Claim rejected", extra={"signal_id": signal_id, "reason": reason})
        self._event_bus.emit(
            ClaimRejectedEvent(signal_id=signal_id, reason=reason, rejected_at=now.isoformat())
        )
        return ClaimDecision(signal_id=signal_id, accepted=False, reason=reason)

    # ---------------------------------------------------------------------
    # Feedback
    # ---------------------------------------------------------------------

    def submit_feedback(
        self,
        signal_id: str,
        feedback: FeedbackValue,
        notes: str | None = None,
    ) -> FeedbackInsert:
        payload = FeedbackInsert(signal_id=signal_id, feedback=feedback, notes=notes)
        self._store.insert_feedback(payload)
        self._event_bus.emit(
            FeedbackRecordedEvent(
                signal_id=signal_id,
                feedback=payload.feedback,
                has_notes=payload.notes is not None,
            )
        )
        return payload

    def update_claim_feedback(self, claim_id: str, feedback: FeedbackValue, notes: str = "") -> None:
        self._store.update_claim_feedback(claim_id, feedback, notes)

    # ---------------------------------------------------------------------
    # Open requests
    # ---------------------------------------------------------------------

    def post_request(
        self,
        purpose: str,
        direction: Direction = "north",
        payment_method: str | None = None,
        window_start: datetime | None = None,
        window_end: datetime | None = None,
    ) -> RequestRow:
        payload = RequestInsert(
            purpose=purpose,
            direction=direction,
            payment_method=payment_method,
            window_start=window_start,
            window_end=window_end,
        )
        row = self._store.insert_request(payload)
        self._event_bus.emit(
            RequestPostedEvent(request_id=row.id, purpose=row.purpose, direction=payload.direction)
        )
        return row

    def recent_requests(self, limit: int = 50) -> list[RequestRow]:
        return self._store.list_requests(limit)

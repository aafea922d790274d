"""Prometheus metrics sink for run events.

Counts posted runs, claimed units, rejected claims and recorded feedback in a
private CollectorRegistry. When PROMETHEUS_PUSHGATEWAY_URL is set, close()
pushes the registry to the Pushgateway.

Optional:
- PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON: JSON object used as grouping key.

Delivery is best-effort: a failed push is logged and never propagated.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from prometheus_client import CollectorRegistry, Counter, push_to_gateway

from within.core.events.events import (
    ClaimRejectedEvent,
    FeedbackRecordedEvent,
    RequestPostedEvent,
    SignalPostedEvent,
    UnitClaimedEvent,
)

LOGGER = logging.getLogger(__name__)


class PrometheusEventSink:
    """Event sink that maintains Prometheus counters."""

    def __init__(
        self,
        *,
        job: str = "within",
        registry: CollectorRegistry | None = None,
    ) -> None:
        self._job = job
        self._pushgateway_url = os.environ.get("PROMETHEUS_PUSHGATEWAY_URL")
        self._grouping_key = self._load_grouping_key()
        self.registry = registry if registry is not None else CollectorRegistry()
        self._closed = False

        self._signals_posted = Counter(
            "within_signals_posted",
            "Runs posted by operators.",
            labelnames=["direction"],
            registry=self.registry,
        )
        self._units_offered = Counter(
            "within_units_offered",
            "Units offered across posted runs.",
            registry=self.registry,
        )
        self._units_claimed = Counter(
            "within_units_claimed",
            "Units claimed by requesters.",
            registry=self.registry,
        )
        self._claims_rejected = Counter(
            "within_claims_rejected",
            "Claim attempts turned away.",
            labelnames=["reason"],
            registry=self.registry,
        )
        self._feedback = Counter(
            "within_feedback_recorded",
            "Feedback entries recorded.",
            labelnames=["feedback"],
            registry=self.registry,
        )
        self._requests = Counter(
            "within_requests_posted",
            "Open requests posted by requesters.",
            registry=self.registry,
        )

    def is_push_enabled(self) -> bool:
        return self._pushgateway_url is not None

    @staticmethod
    def _load_grouping_key() -> dict[str, str]:
        raw = os.environ.get("PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON")
        if not raw:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning(
                "Invalid PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON; ignoring"
            )
            return {}

        if not isinstance(data, dict):
            return {}

        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def on_event(self, event: Any) -> None:
        if isinstance(event, SignalPostedEvent):
            self._signals_posted.labels(direction=event.direction).inc()
            self._units_offered.inc(event.units_total)
        elif isinstance(event, UnitClaimedEvent):
            self._units_claimed.inc(event.unit_count)
        elif isinstance(event, ClaimRejectedEvent):
            self._claims_rejected.labels(reason=event.reason).inc()
        elif isinstance(event, FeedbackRecordedEvent):
            self._feedback.labels(feedback=event.feedback).inc()
        elif isinstance(event, RequestPostedEvent):
            self._requests.inc()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        if not self._pushgateway_url:
            return

        try:
            push_to_gateway(
                gateway=self._pushgateway_url,
                job=self._job,
                registry=self.registry,
                grouping_key=self._grouping_key,
            )
        except OSError:
            LOGGER.warning("Prometheus push failed", exc_info=True)
            return

        LOGGER.info(
            "Prometheus metrics pushed",
            extra={"job": self._job, "grouping_key": self._grouping_key},
        )

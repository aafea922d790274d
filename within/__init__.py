"""Public API for the within package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Planning core
# ----------------------------------------------------------------------
from within.core.planning.models import RunWindow, UnitPlan
from within.core.planning.time_window import plan_window, round_up_to_bucket
from within.core.planning.units import clamp_units_total, largest_prime_factor, plan_units

# ----------------------------------------------------------------------
# Domain types and errors
# ----------------------------------------------------------------------
from within.core.domain.catalog import CATALOG, CatalogItem, Store, purpose_text, resolve_item
from within.core.domain.errors import InvalidArgument, StoreError
from within.core.domain.types import (
    ClaimInsert,
    FeedbackInsert,
    RequestInsert,
    RequestRow,
    RunForm,
    Signal,
    SignalInsert,
)
from within.core.claims.claim_gate import ClaimDecision, ClaimGate
from within.core.ports.signal_store import SignalStore

# ----------------------------------------------------------------------
# Application layer
# ----------------------------------------------------------------------
from within.adapters.memory_store import InMemorySignalStore
from within.app.run_service import RunDraft, RunService
from within.config.run_config import RunConfig

__all__ = [
    # Planning
    "RunWindow",
    "UnitPlan",
    "plan_window",
    "round_up_to_bucket",
    "plan_units",
    "largest_prime_factor",
    "clamp_units_total",

    # Domain
    "CATALOG",
    "CatalogItem",
    "Store",
    "purpose_text",
    "resolve_item",
    "InvalidArgument",
    "StoreError",
    "Signal",
    "SignalInsert",
    "ClaimInsert",
    "FeedbackInsert",
    "RequestInsert",
    "RequestRow",
    "RunForm",
    "ClaimDecision",
    "ClaimGate",
    "SignalStore",

    # Application
    "InMemorySignalStore",
    "RunDraft",
    "RunService",
    "RunConfig",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("within")
except PackageNotFoundError:
    __version__ = "0.0.0"

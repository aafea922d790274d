"""Core shared data models and schemas.

This module defines the canonical Pydantic models exchanged with the signal
store: posted runs (signals), claims, feedback and open requests, plus the
operator form that a run is built from. The store payload models mirror the
JSON Schemas in ``within/core/schemas``.
"""

# pylint: disable=line-too-long,missing-class-docstring,missing-function-docstring
from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

Direction = Literal["north", "south", "east", "west"]
FeedbackValue = Literal["ok", "not_ok"]

DIRECTIONS: tuple[str, ...] = ("north", "south", "east", "west")


def _aware(value: datetime, field_name: str) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{field_name} must be timezone-aware")
    return value


# ---------------------------------------------------------------------------
# Signals (posted runs)
# ---------------------------------------------------------------------------


class SignalInsert(BaseModel):
    """Payload persisted when an operator posts a run."""

    direction: Direction
    purpose: str = Field(..., min_length=1)
    window_start: datetime
    window_end: datetime
    units_total: int = Field(..., ge=1, le=24)
    expires_at: datetime

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("window_start", "window_end", "expires_at")
    @classmethod
    def _require_timezone(cls, value: datetime, info: ValidationInfo) -> datetime:
        return _aware(value, info.field_name)

    @model_validator(mode="after")
    def validate_window_order(self) -> SignalInsert:
        """Enforce window_start <= window_end < expires_at."""
        if self.window_start > self.window_end:
            raise ValueError("window_start must be <= window_end")
        if self.window_end >= self.expires_at:
            raise ValueError("window_end must be < expires_at")
        return self


class Signal(BaseModel):
    """A run row as returned by the store."""

    id: str = Field(..., min_length=1)
    direction: Direction
    purpose: str
    window_start: datetime
    window_end: datetime
    units_total: int = Field(default=0, ge=0)
    units_claimed: int = Field(default=0, ge=0)
    expires_at: datetime

    feedback: FeedbackValue | None = None
    feedback_notes: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("units_total", "units_claimed", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        # Backend rows may carry nulls or strings; anything non-numeric counts as 0.
        if isinstance(value, bool):
            return 0
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0
        if number != number or number in (float("inf"), float("-inf")):
            return 0
        return int(number)

    @field_validator("window_start", "window_end", "expires_at")
    @classmethod
    def _require_timezone(cls, value: datetime, info: ValidationInfo) -> datetime:
        return _aware(value, info.field_name)

    @property
    def units_remaining(self) -> int:
        return max(0, self.units_total - self.units_claimed)

    def is_full(self) -> bool:
        return self.units_claimed >= self.units_total


# ---------------------------------------------------------------------------
# Claims and feedback
# ---------------------------------------------------------------------------


class ClaimInsert(BaseModel):
    signal_id: str = Field(..., min_length=1)
    unit_count: int = Field(default=1, ge=1)

    model_config = ConfigDict(extra="forbid", frozen=True)


class FeedbackInsert(BaseModel):
    signal_id: str = Field(..., min_length=1)
    feedback: FeedbackValue
    notes: str | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("notes", mode="before")
    @classmethod
    def _blank_notes_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


# ---------------------------------------------------------------------------
# Open requests (requester view)
# ---------------------------------------------------------------------------


class RequestInsert(BaseModel):
    purpose: str = Field(..., min_length=1)
    direction: Direction = "north"
    payment_method: str | None = None
    window_start: datetime | None = None
    window_end: datetime | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("payment_method", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class RequestRow(BaseModel):
    id: str = Field(..., min_length=1)
    purpose: str
    direction: str | None = None
    window_start: datetime | None = None
    window_end: datetime | None = None
    payment_method: str | None = None
    status: str | None = None
    created_at: datetime | None = None

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Operator form
# ---------------------------------------------------------------------------


class RunForm(BaseModel):
    """Operator form state used to build a run."""

    direction: Direction = "north"
    store_key: str = Field(default="costco", min_length=1)
    item_key: str = Field(default="tp30", min_length=1)
    leave_in_min: int = Field(default=0, ge=0)
    window_hours: float = Field(default=2, gt=0)
    payments: list[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def toggle_payment(self, method: str) -> RunForm:
        """Return a copy with ``method`` added to or removed from payments."""
        if method in self.payments:
            payments = [m for m in self.payments if m != method]
        else:
            payments = [*self.payments, method]
        return self.model_copy(update={"payments": payments})

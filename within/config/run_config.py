"""Run configuration model.

This module defines the RunConfig schema used to parse operator-facing
settings from JSON: bucket size, expiry grace, the units_total bounds and the
leave-in / window choices offered on the form.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from within.core.planning.time_window import DEFAULT_BUCKET_MINUTES, DEFAULT_EXPIRY_GRACE_HOURS
from within.core.planning.units import UNITS_TOTAL_MAX, UNITS_TOTAL_MIN


class RunConfig(BaseModel):
    """Structured run planning configuration.

    JSON example:
        {
          "bucket_minutes": 15,
          "expiry_grace_hours": 2,
          "units_total_min": 1,
          "units_total_max": 24,
          "leave_in_options": [0, 15, 30, 45, 60],
          "window_hours_options": [1, 2]
        }
    """

    bucket_minutes: int = Field(default=DEFAULT_BUCKET_MINUTES, gt=0)
    expiry_grace_hours: float = Field(
        default=DEFAULT_EXPIRY_GRACE_HOURS, gt=0, allow_inf_nan=False
    )

    units_total_min: int = Field(default=UNITS_TOTAL_MIN, ge=1)
    units_total_max: int = Field(default=UNITS_TOTAL_MAX, ge=1, le=UNITS_TOTAL_MAX)

    leave_in_options: list[int] = Field(default_factory=lambda: [0, 15, 30, 45, 60])
    window_hours_options: list[float] = Field(default_factory=lambda: [1.0, 2.0])

    payment_methods: list[str] = Field(
        default_factory=lambda: ["Venmo", "Cash App", "Zelle", "Cash"]
    )

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_json_obj(cls, cfg_obj: dict[str, Any]) -> RunConfig:
        """Create a RunConfig instance from a JSON-compatible object."""
        return cls.model_validate(cfg_obj)

    @classmethod
    def from_path(cls, path: str | Path) -> RunConfig:
        """Load a RunConfig from a JSON file."""
        cfg_path = Path(path)
        if not cfg_path.exists():
            raise FileNotFoundError(cfg_path)
        return cls.from_json_obj(json.loads(cfg_path.read_text(encoding="utf-8")))

    @model_validator(mode="after")
    def validate_consistency(self) -> RunConfig:
        """Validate internal consistency of the run configuration."""
        if self.units_total_min > self.units_total_max:
            raise ValueError("units_total_min must be <= units_total_max")
        if not self.leave_in_options:
            raise ValueError("leave_in_options must not be empty")
        if any(v < 0 for v in self.leave_in_options):
            raise ValueError("leave_in_options must be >= 0")
        if not self.window_hours_options:
            raise ValueError("window_hours_options must not be empty")
        if any(not math.isfinite(v) or v <= 0 for v in self.window_hours_options):
            raise ValueError("window_hours_options must be finite and > 0")
        return self

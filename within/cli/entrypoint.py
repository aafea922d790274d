from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, NoReturn
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from within.adapters.memory_store import InMemorySignalStore
from within.app.display import to_local_input
from within.app.run_service import RunDraft, RunService
from within.config.run_config import RunConfig
from within.core.domain.errors import InvalidArgument
from within.core.domain.types import DIRECTIONS, RunForm

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_now(raw: str | None) -> datetime:
    if raw is None:
        return datetime.now(timezone.utc)

    try:
        value = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise InvalidArgument(f"--now is not an ISO-8601 instant: {raw!r}") from exc
    if value.tzinfo is None:
        raise InvalidArgument(f"--now must include a UTC offset, got {raw!r}")
    return value


def _draft_to_json_obj(draft: RunDraft, tz: ZoneInfo | None) -> dict[str, Any]:
    payload = draft.to_insert().model_dump(mode="json")
    return {
        "signal": payload,
        "units": {
            "item_total": draft.item.total,
            "unit_count": draft.units.unit_count,
            "unit_size": draft.units.unit_size,
            "units_total": draft.units_total,
        },
        "local": {
            "window_start": to_local_input(draft.window.start, tz),
            "window_end": to_local_input(draft.window.end, tz),
            "expires_at": to_local_input(draft.window.expires_at, tz),
        },
        "summary": draft.summary(),
    }


def _fail(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(2)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Preview the shared run an operator form would post."
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a RunConfig JSON file.",
    )

    parser.add_argument("--direction", choices=DIRECTIONS, default="north")
    parser.add_argument("--store", default="costco", help="Catalog store key.")
    parser.add_argument("--item", default="tp30", help="Catalog item key.")

    parser.add_argument(
        "--leave-in",
        type=int,
        default=0,
        help="Minutes after the rounded current time the run starts.",
    )

    parser.add_argument(
        "--window-hours",
        type=float,
        default=2.0,
        help="Length of the claimable window in hours.",
    )

    parser.add_argument(
        "--now",
        default=None,
        help="ISO-8601 instant with offset used as the current time (defaults to the wall clock).",
    )

    parser.add_argument(
        "--tz",
        default=None,
        help="IANA zone used for the local-time preview (defaults to the process zone).",
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level.",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # ------------------------------------------------------------------
    # Load config
    # ------------------------------------------------------------------

    try:
        config = RunConfig.from_path(args.config) if args.config is not None else RunConfig()
    except FileNotFoundError as exc:
        _fail(f"config not found: {exc}")
    except (ValidationError, json.JSONDecodeError) as exc:
        _fail(f"invalid config: {exc}")

    try:
        tz = ZoneInfo(args.tz) if args.tz else None
    except (ZoneInfoNotFoundError, ValueError) as exc:
        _fail(f"unknown time zone {args.tz!r}: {exc}")

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    service = RunService(InMemorySignalStore(), config=config)

    try:
        form = RunForm(
            direction=args.direction,
            store_key=args.store,
            item_key=args.item,
            leave_in_min=args.leave_in,
            window_hours=args.window_hours,
        )
        draft = service.preview(form, _parse_now(args.now))
    except (InvalidArgument, ValidationError) as exc:
        _fail(str(exc))

    LOGGER.info("Run previewed", extra={"purpose": draft.purpose})
    print(json.dumps(_draft_to_json_obj(draft, tz), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()

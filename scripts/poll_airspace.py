#!/usr/bin/env python3
"""Poll a live airspace endpoint and log every lifecycle transition.

Stands in for the map frontend: instead of painting markers it logs what
it would have painted, so the reconciler can be watched against a real
feed.

Examples::

    python scripts/poll_airspace.py --url http://localhost:8080/?json=1
    PYAIRSPACE_URL=... python scripts/poll_airspace.py --budget 12 --heatmap
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyairspace import AirspaceConfig, AirspaceTracker, PollStatus  # noqa: E402
from pyairspace.exceptions import AirspaceConfigError  # noqa: E402
from pyairspace.models import EXPIRED_COLOR, AircraftData, HeatmapPoint  # noqa: E402

_logger = logging.getLogger("poll_airspace")


class LoggingAdapter:
    """Presentation adapter that logs instead of drawing."""

    def __init__(self) -> None:
        self._next_handle = 0

    def on_create(self, entity_id: str, attributes: Any) -> int:
        self._next_handle += 1
        _logger.info("+ %s %s", entity_id, _describe(attributes))
        return self._next_handle

    def on_update(self, entity_id: str, attributes: Any, handle: Any) -> None:
        _logger.debug("~ %s #%s %s", entity_id, handle, _describe(attributes))

    def on_expire(self, entity_id: str, handle: Any) -> None:
        _logger.info("- %s #%s now %s", entity_id, handle, EXPIRED_COLOR)

    def on_reappear(self, entity_id: str, attributes: Any, handle: Any) -> None:
        _logger.info("^ %s #%s %s", entity_id, handle, _describe(attributes))

    def on_focused_update(self, entity_id: str, attributes: Any) -> None:
        _logger.info("* %s %s", entity_id, _describe(attributes))

    def on_remove(self, entity_id: str, handle: Any) -> None:
        _logger.info("x %s #%s", entity_id, handle)


def _describe(attributes: Any) -> str:
    if not isinstance(attributes, AircraftData):
        return repr(attributes)
    msg = attributes.msg
    return (
        f"{attributes.ident or '?'} ({msg.position.lat:.4f},{msg.position.long:.4f}) "
        f"{msg.altitude}ft {msg.ground_speed}kt hdg {attributes.heading} "
        f"[{attributes.source_name}/{attributes.data_system} {attributes.color}]"
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--url", help="Snapshot endpoint (default: $PYAIRSPACE_URL)")
    parser.add_argument("--interval-ms", type=int, help="Poll interval in milliseconds")
    parser.add_argument("--budget", type=int, help="Stop after this many polls (0 = unbounded)")
    parser.add_argument("--focus", help="Callsign to keep focused")
    parser.add_argument("--heatmap", action="store_true", help="Also poll the complaint heatmap")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every update")
    return parser.parse_args(argv)


async def _run(config: AirspaceConfig, args: argparse.Namespace) -> None:
    def on_status(status: PollStatus) -> None:
        _logger.info("Polling %s (budget left: %s)", status.label, status.remaining_budget)

    def on_heatmap(points: list[HeatmapPoint]) -> None:
        _logger.info("Heatmap: %d points", len(points))

    async with AirspaceTracker(
        config,
        adapter=LoggingAdapter(),
        on_status=on_status,
        on_heatmap=on_heatmap,
    ) as tracker:
        if args.heatmap:
            tracker.heatmap.start()
        if args.focus:
            # The callsign has to be live before it can be found.
            await tracker.poll_once()
            if tracker.highlight(args.focus) is None:
                _logger.warning("No live aircraft with callsign %s", args.focus)
        tracker.start_polling()
        await tracker.scheduler.wait(config.name)
        _logger.info(tracker.status_line())


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.url:
        overrides["url"] = args.url
    if args.interval_ms is not None:
        overrides["interval_millis"] = args.interval_ms
    if args.budget is not None:
        overrides["budget"] = args.budget or None

    try:
        config = AirspaceConfig.from_env(**overrides)
    except AirspaceConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        asyncio.run(_run(config, args))
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Complaint heatmap feed.

Unlike aircraft, heatmap points have no identity: every fetch replaces the
whole point list. The feed runs as its own named poll task so it never
interferes with the aircraft poller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pyairspace._api.heatmap import fetch_heatmap_points
from pyairspace._constants import DEFAULT_HEATMAP_DURATION
from pyairspace._transport import SnapshotFetcher
from pyairspace.models.heatmap import HeatmapPoint
from pyairspace.polling import PollingScheduler

_logger = logging.getLogger(__name__)


class HeatmapFeed:
    """Fetch complaint points, once or on a schedule."""

    def __init__(
        self,
        fetcher: SnapshotFetcher,
        scheduler: PollingScheduler,
        *,
        url: str,
        name: str,
        interval_millis: int,
        duration: str = DEFAULT_HEATMAP_DURATION,
        on_points: Callable[[list[HeatmapPoint]], None] | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._scheduler = scheduler
        self._url = url
        self._name = name
        self._interval_millis = interval_millis
        self._duration = duration or DEFAULT_HEATMAP_DURATION
        self._icao_id: str | None = None
        self._points: list[HeatmapPoint] = []
        self._on_points = on_points

    @property
    def name(self) -> str:
        return self._name

    @property
    def points(self) -> list[HeatmapPoint]:
        return list(self._points)

    @property
    def duration(self) -> str:
        return self._duration

    @duration.setter
    def duration(self, value: str) -> None:
        self._duration = value or DEFAULT_HEATMAP_DURATION

    @property
    def icao_id(self) -> str | None:
        return self._icao_id

    @property
    def is_polling(self) -> bool:
        return self._scheduler.is_running(self._name)

    def set_icao_id(self, icao_id: str | None) -> None:
        """Restrict complaints to one aircraft; narrowing forces a 15m window."""
        self._icao_id = icao_id or None
        if self._icao_id is not None:
            self._duration = DEFAULT_HEATMAP_DURATION

    async def fetch_once(self) -> list[HeatmapPoint]:
        points = await fetch_heatmap_points(
            self._fetcher,
            self._url,
            duration=self._duration,
            icao_id=self._icao_id,
        )
        self._points = points
        _logger.debug("Heatmap %s now holds %d points", self._duration, len(points))
        if self._on_points is not None:
            try:
                self._on_points(list(points))
            except Exception:
                _logger.debug("on_points callback failed", exc_info=True)
        return points

    def start(self) -> None:
        self._scheduler.start(self._name, self.fetch_once, self._interval_millis)

    def stop(self) -> None:
        self._scheduler.stop(self._name)

    def toggle(self) -> bool:
        """Flip polling on or off; returns whether it is now polling."""
        if self.is_polling:
            self.stop()
            return False
        self.start()
        return True

    def summary(self) -> str:
        text = f"Complaints in last {self._duration}: {len(self._points)}"
        if self._icao_id:
            text += f"\nIcaoId: {self._icao_id}"
        return text

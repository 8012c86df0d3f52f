"""High-level async tracker for a live airspace view."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import aiohttp

from pyairspace._api.airspace import fetch_airspace_snapshot
from pyairspace._transport import JsonTransport, SnapshotFetcher
from pyairspace.adapter import PresentationAdapter
from pyairspace.config import AirspaceConfig
from pyairspace.exceptions import AirspaceError, PartialEntityFailure
from pyairspace.heatmap import HeatmapFeed
from pyairspace.ingestion.aircraft import aircraft_label, parse_aircraft
from pyairspace.models.heatmap import HeatmapPoint
from pyairspace.polling import PollingScheduler, SleepFn
from pyairspace.state.entity import Entity, EntityModel, EntityState
from pyairspace.state.events import ReconciliationResult
from pyairspace.state.focus import FocusTracker
from pyairspace.state.reconciler import EntityReconciler
from pyairspace.state.search import SearchIndex

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollStatus:
    """What the legend needs to know about the aircraft poller."""

    name: str
    running: bool
    paused: bool
    exhausted: bool
    remaining_budget: int | None

    @property
    def label(self) -> str:
        if not self.running:
            return "stopped"
        return "off" if self.paused else "on"


class AirspaceTracker:
    """Async tracker that keeps a reconciled model of the aircraft overhead.

    Usage::

        async with AirspaceTracker(config, adapter=my_map) as tracker:
            tracker.start_polling()
            ...
    """

    def __init__(
        self,
        config: AirspaceConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        fetcher: SnapshotFetcher | None = None,
        adapter: PresentationAdapter | None = None,
        sleep: SleepFn = asyncio.sleep,
        clock: Callable[[], datetime] = datetime.now,
        on_status: Callable[[PollStatus], None] | None = None,
        on_error: Callable[[str, Exception], None] | None = None,
        on_diagnostic: Callable[[PartialEntityFailure], None] | None = None,
        on_heatmap: Callable[[list[HeatmapPoint]], None] | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._fetcher: SnapshotFetcher | None = fetcher
        self._external_fetcher = fetcher is not None
        self._clock = clock
        self._on_status = on_status
        self._on_error_cb = on_error
        self._on_heatmap = on_heatmap

        self.model = EntityModel()
        self.focus_tracker = FocusTracker()
        self.search = SearchIndex()
        self.reconciler = EntityReconciler(
            self.model,
            adapter,
            focus=self.focus_tracker,
            search=self.search,
            parse=parse_aircraft,
            label_of=aircraft_label,
            on_diagnostic=on_diagnostic,
        )
        self.scheduler = PollingScheduler(
            sleep=sleep,
            on_error=self._on_poll_error,
            on_exhausted=self._on_poll_exhausted,
        )
        self._heatmap: HeatmapFeed | None = None
        self._exhausted = False
        self.last_result: ReconciliationResult | None = None
        self.last_poll_at: datetime | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> AirspaceTracker:
        if self._fetcher is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._fetcher = JsonTransport(self._http_session, timeout=self._config.request_timeout)
        self._heatmap = HeatmapFeed(
            self._fetcher,
            self.scheduler,
            url=self._config.heatmap_url,
            name=self._config.heatmap_name,
            interval_millis=self._config.heatmap_interval_millis,
            duration=self._config.heatmap_duration,
            on_points=self._on_heatmap,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.scheduler.aclose()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_fetcher:
            self._fetcher = None
        self._heatmap = None

    def _require_fetcher(self) -> SnapshotFetcher:
        if self._fetcher is None:
            raise AirspaceError("Tracker not initialized. Use 'async with AirspaceTracker(...) as tracker:'")
        return self._fetcher

    @property
    def heatmap(self) -> HeatmapFeed:
        if self._heatmap is None:
            raise AirspaceError("Tracker not initialized. Use 'async with AirspaceTracker(...) as tracker:'")
        return self._heatmap

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def poll_once(self) -> ReconciliationResult:
        """Fetch one snapshot and reconcile it into the model."""
        snapshot = await fetch_airspace_snapshot(
            self._require_fetcher(),
            self._config.url,
            key=self._config.snapshot_key,
        )
        result = self.reconciler.apply(snapshot)
        self.last_result = result
        self.last_poll_at = self._clock()
        if result.has_transitions:
            _logger.debug("Poll %s: %s", self._config.name, result.summary())
        return result

    def start_polling(self) -> None:
        """Start (or restart) the aircraft poller with a fresh budget."""
        self._require_fetcher()
        self._exhausted = False
        self.scheduler.start(
            self._config.name,
            self.poll_once,
            self._config.interval_millis,
            self._config.budget,
        )
        self._emit_status()

    def stop_polling(self) -> None:
        self.scheduler.stop(self._config.name)
        self._emit_status()

    def pause_polling(self) -> None:
        self.scheduler.pause(self._config.name)
        self._emit_status()

    def resume_polling(self) -> None:
        self.scheduler.resume(self._config.name)
        self._emit_status()

    def toggle_polling(self) -> PollStatus:
        """Pause an active poller, or resume a paused or stopped one.

        A poller that stopped itself after using up its budget is started
        again with a full budget.
        """
        name = self._config.name
        if not self.scheduler.is_running(name):
            self.start_polling()
        elif self.scheduler.is_paused(name):
            self.resume_polling()
        else:
            self.pause_polling()
        return self.polling_status()

    def polling_status(self) -> PollStatus:
        name = self._config.name
        return PollStatus(
            name=name,
            running=self.scheduler.is_running(name),
            paused=self.scheduler.is_paused(name),
            exhausted=self._exhausted,
            remaining_budget=self.scheduler.remaining_budget(name),
        )

    def _emit_status(self) -> None:
        if self._on_status is None:
            return
        try:
            self._on_status(self.polling_status())
        except Exception:
            _logger.debug("on_status callback failed", exc_info=True)

    def _on_poll_error(self, name: str, exc: Exception) -> None:
        if self._on_error_cb is None:
            return
        try:
            self._on_error_cb(name, exc)
        except Exception:
            _logger.debug("on_error callback failed", exc_info=True)

    def _on_poll_exhausted(self, name: str) -> None:
        if name != self._config.name:
            return
        self._exhausted = True
        self._emit_status()

    # ------------------------------------------------------------------
    # Focus and search
    # ------------------------------------------------------------------

    def focus(self, entity_id: str) -> None:
        self.focus_tracker.focus(entity_id)

    def clear_focus(self) -> None:
        self.focus_tracker.clear()

    @property
    def focused(self) -> Entity | None:
        """The focused entity, or ``None`` when nothing (or an unknown id) is focused."""
        entity_id = self.focus_tracker.current()
        if entity_id is None:
            return None
        return self.model.get(entity_id)

    def lookup(self, label: str) -> list[str]:
        return self.search.lookup(label)

    def highlight(self, label: str) -> str | None:
        """Focus the first live aircraft (by sorted id) whose callsign is ``label``."""
        matches = sorted(self.search.lookup(label.strip()))
        if not matches:
            return None
        self.focus_tracker.focus(matches[0])
        return matches[0]

    # ------------------------------------------------------------------
    # Model views
    # ------------------------------------------------------------------

    def count_live(self) -> int:
        return self.model.count(EntityState.LIVE)

    def clear_expired(self) -> list[str]:
        return self.reconciler.clear_expired()

    def status_line(self, now: datetime | None = None) -> str:
        """Legend text, e.g. ``"[Polling: on] 12 aircraft, 14:03:22"``."""
        stamp = (now or self._clock()).strftime("%H:%M:%S")
        return f"[Polling: {self.polling_status().label}] {self.count_live()} aircraft, {stamp}"

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest


async def settle(rounds: int = 20) -> None:
    """Let every ready task run until the loop is idle."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeClock:
    """Virtual clock whose ``sleep`` only returns when ``advance`` passes its deadline."""

    def __init__(self) -> None:
        self.now = 0.0
        self._seq = 0
        self._sleepers: list[tuple[float, int, asyncio.Future[None]]] = []

    async def sleep(self, seconds: float) -> None:
        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._seq += 1
        self._sleepers.append((self.now + seconds, self._seq, fut))
        await fut

    @property
    def pending(self) -> int:
        return sum(1 for _, _, fut in self._sleepers if not fut.done())

    async def advance(self, seconds: float) -> None:
        target = self.now + seconds
        await settle()
        while True:
            self._sleepers = [s for s in self._sleepers if not s[2].done()]
            due = [s for s in self._sleepers if s[0] <= target + 1e-9]
            if not due:
                break
            entry = min(due, key=lambda s: (s[0], s[1]))
            self._sleepers.remove(entry)
            self.now = max(self.now, entry[0])
            entry[2].set_result(None)
            await settle()
        self.now = target
        await settle()


@dataclass
class RecordingAdapter:
    """Presentation adapter that records every call and hands out integer handles."""

    calls: list[tuple[Any, ...]] = field(default_factory=list)
    next_handle: int = 0

    def on_create(self, entity_id: str, attributes: Any) -> int:
        self.next_handle += 1
        self.calls.append(("create", entity_id, attributes))
        return self.next_handle

    def on_update(self, entity_id: str, attributes: Any, handle: Any) -> None:
        self.calls.append(("update", entity_id, attributes, handle))

    def on_expire(self, entity_id: str, handle: Any) -> None:
        self.calls.append(("expire", entity_id, handle))

    def on_reappear(self, entity_id: str, attributes: Any, handle: Any) -> None:
        self.calls.append(("reappear", entity_id, attributes, handle))

    def on_focused_update(self, entity_id: str, attributes: Any) -> None:
        self.calls.append(("focused", entity_id, attributes))

    def on_remove(self, entity_id: str, handle: Any) -> None:
        self.calls.append(("remove", entity_id, handle))

    def kinds(self, kind: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == kind]


@dataclass
class FakeFetcher:
    """Snapshot fetcher that serves queued documents keyed by URL.

    The last document queued for a URL is served again once the queue
    runs dry. Queue an ``Exception`` instance to make that request fail.
    """

    responses: dict[str, list[Any]] = field(default_factory=dict)
    requests: list[tuple[str, dict[str, str] | None]] = field(default_factory=list)

    def queue(self, url: str, *documents: Any) -> None:
        self.responses.setdefault(url, []).extend(documents)

    async def get_json(self, url: str, params: Mapping[str, str] | None = None) -> Any:
        self.requests.append((url, dict(params) if params is not None else None))
        queued = self.responses.get(url)
        if not queued:
            raise AssertionError(f"no response queued for {url}")
        document = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(document, Exception):
            raise document
        return document


def aircraft(icao24: str, *, callsign: str = "", lat: float = 37.6, long: float = -122.3, **extra: Any) -> dict[str, Any]:
    """Build a snapshot entry shaped like the airspace feed's."""
    msg = {
        "Type": "MSG",
        "Icao24": icao24,
        "Callsign": callsign,
        "Altitude": 10050,
        "GroundSpeed": 290,
        "Track": 341,
        "Position": {"Lat": lat, "Long": long},
        "GeneratedTimestampUTC": "2016-11-14T19:46:10.72Z",
        "ReceiverName": "CulverCity",
    }
    msg.update(extra.pop("msg", {}))
    entry: dict[str, Any] = {
        "Msg": msg,
        "Icao24": icao24,
        "Registration": "",
        "IATA": "",
        "Number": 0,
        "Source": "",
        "NumMessagesSeen": 12,
        "PlannedDepartureUTC": "0001-01-01T00:00:00Z",
    }
    entry.update(extra)
    return entry


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def adapter() -> RecordingAdapter:
    return RecordingAdapter()

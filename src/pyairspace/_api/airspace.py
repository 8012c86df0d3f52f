"""Airspace snapshot endpoint.

The endpoint serves ``{"Aircraft": {icao24: {...}, ...}}``; an airspace
with nothing in it may serialize the inner mapping as ``null``.
"""

from __future__ import annotations

import logging
from typing import Any

from pyairspace._constants import SNAPSHOT_KEY
from pyairspace._transport import SnapshotFetcher
from pyairspace.exceptions import DecodeFailure

_logger = logging.getLogger(__name__)


def extract_snapshot(document: Any, *, key: str = SNAPSHOT_KEY, url: str = "") -> dict[str, Any]:
    """Pull the ``id -> attributes`` mapping out of a decoded document."""
    if not isinstance(document, dict):
        raise DecodeFailure(f"Snapshot from {url} is {type(document).__name__}, expected an object", url=url)
    if key not in document:
        raise DecodeFailure(f"Snapshot from {url} has no {key!r} field", url=url)
    entries = document[key]
    if entries is None:
        return {}
    if not isinstance(entries, dict):
        raise DecodeFailure(f"Snapshot field {key!r} from {url} is {type(entries).__name__}", url=url)
    return entries


async def fetch_airspace_snapshot(
    transport: SnapshotFetcher,
    url: str,
    *,
    key: str = SNAPSHOT_KEY,
) -> dict[str, Any]:
    """Fetch one full snapshot of the airspace."""
    document = await transport.get_json(url)
    entries = extract_snapshot(document, key=key, url=url)
    _logger.debug("Snapshot from %s lists %d aircraft", url, len(entries))
    return entries

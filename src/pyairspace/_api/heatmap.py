"""Complaint heatmap endpoint.

``GET <heatmap_url>?d=<duration>[&icaoid=<icao24>]`` returns a JSON list of
``{"Lat": .., "Long": ..}`` objects.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pyairspace._transport import SnapshotFetcher
from pyairspace.exceptions import DecodeFailure
from pyairspace.models.heatmap import HeatmapPoint

_logger = logging.getLogger(__name__)


def build_heatmap_params(duration: str, icao_id: str | None = None) -> dict[str, str]:
    params = {"d": duration}
    if icao_id:
        params["icaoid"] = icao_id
    return params


def parse_heatmap_points(document: Any, *, url: str = "") -> list[HeatmapPoint]:
    """Parse the point list, dropping individual points that fail validation."""
    if document is None:
        return []
    if not isinstance(document, list):
        raise DecodeFailure(f"Heatmap from {url} is {type(document).__name__}, expected a list", url=url)
    points: list[HeatmapPoint] = []
    for item in document:
        try:
            points.append(HeatmapPoint.model_validate(item))
        except ValidationError:
            _logger.debug("Dropping malformed heatmap point %r", item)
    return points


async def fetch_heatmap_points(
    transport: SnapshotFetcher,
    url: str,
    *,
    duration: str,
    icao_id: str | None = None,
) -> list[HeatmapPoint]:
    document = await transport.get_json(url, build_heatmap_params(duration, icao_id))
    return parse_heatmap_points(document, url=url)

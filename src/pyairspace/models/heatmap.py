"""Complaint heatmap point model."""

from __future__ import annotations

from pydantic import field_validator

from pyairspace.ingestion.normalize import safe_float
from pyairspace.models._base import AirspaceBaseModel


class HeatmapPoint(AirspaceBaseModel):
    """A single complaint location."""

    lat: float
    long: float

    @field_validator("lat", "long", mode="before")
    @classmethod
    def _coerce_floats(cls, value: object) -> float | None:
        return safe_float(value)

"""Typed snapshot models."""

from pyairspace.models.aircraft import EXPIRED_COLOR, AircraftData, CompositeMsg, Position
from pyairspace.models.heatmap import HeatmapPoint

__all__ = [
    "EXPIRED_COLOR",
    "AircraftData",
    "CompositeMsg",
    "HeatmapPoint",
    "Position",
]

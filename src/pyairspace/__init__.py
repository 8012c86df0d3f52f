"""pyairspace - Async live airspace tracker with entity reconciliation."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyairspace")
except PackageNotFoundError:
    __version__ = "0+local"
from pyairspace.adapter import NullAdapter, PresentationAdapter
from pyairspace.client import AirspaceTracker, PollStatus
from pyairspace.config import AirspaceConfig
from pyairspace.exceptions import (
    AirspaceConfigError,
    AirspaceError,
    DecodeFailure,
    FetchFailure,
    PartialEntityFailure,
)
from pyairspace.heatmap import HeatmapFeed
from pyairspace.models import AircraftData, HeatmapPoint
from pyairspace.polling import PollingScheduler, PollTask
from pyairspace.state import (
    Entity,
    EntityModel,
    EntityReconciler,
    EntityState,
    FocusTracker,
    ReconciliationResult,
    SearchIndex,
)

__all__ = [
    "__version__",
    "AircraftData",
    "AirspaceConfig",
    "AirspaceConfigError",
    "AirspaceError",
    "AirspaceTracker",
    "DecodeFailure",
    "Entity",
    "EntityModel",
    "EntityReconciler",
    "EntityState",
    "FetchFailure",
    "FocusTracker",
    "HeatmapFeed",
    "HeatmapPoint",
    "NullAdapter",
    "PartialEntityFailure",
    "PollStatus",
    "PollTask",
    "PollingScheduler",
    "PresentationAdapter",
    "ReconciliationResult",
    "SearchIndex",
]

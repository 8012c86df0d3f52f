"""State layer.

This package is the single source of truth for how successive snapshots
are merged into the client-side entity model. Only
:class:`~pyairspace.state.reconciler.EntityReconciler` writes to the model;
everything else reads it between ``apply`` calls.
"""

from pyairspace.state.entity import Entity, EntityModel, EntityState
from pyairspace.state.events import ReconciliationResult
from pyairspace.state.focus import FocusTracker
from pyairspace.state.reconciler import EntityReconciler
from pyairspace.state.search import SearchIndex

__all__ = [
    "Entity",
    "EntityModel",
    "EntityReconciler",
    "EntityState",
    "FocusTracker",
    "ReconciliationResult",
    "SearchIndex",
]

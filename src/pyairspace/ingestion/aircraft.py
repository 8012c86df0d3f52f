"""Aircraft snapshot entry parsing.

These are the attribute hooks the tracker hands to
:class:`pyairspace.state.reconciler.EntityReconciler`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from pyairspace.exceptions import PartialEntityFailure
from pyairspace.ingestion.normalize import normalize_label
from pyairspace.models.aircraft import AircraftData


def parse_aircraft(entity_id: str, raw: Any) -> AircraftData:
    """Validate one snapshot entry.

    Raises :class:`PartialEntityFailure` when the entry is not a mapping
    or lacks the fields needed to place it on the map.
    """
    if not isinstance(raw, Mapping):
        raise PartialEntityFailure(
            f"Aircraft {entity_id} is {type(raw).__name__}, expected an object",
            entity_id=entity_id,
        )
    try:
        return AircraftData.model_validate(dict(raw))
    except ValidationError as exc:
        raise PartialEntityFailure(
            f"Aircraft {entity_id} is malformed: {exc.error_count()} validation error(s)",
            entity_id=entity_id,
        ) from exc


def aircraft_label(attributes: Any) -> str | None:
    """Searchable label for an aircraft: its callsign."""
    if isinstance(attributes, AircraftData):
        return normalize_label(attributes.msg.callsign)
    return None

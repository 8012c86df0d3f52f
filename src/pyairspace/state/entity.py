"""Entity model held by a single map view."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class EntityState(StrEnum):
    LIVE = "live"
    EXPIRED = "expired"


@dataclass(slots=True)
class Entity:
    """One tracked object.

    ``attributes`` is whatever the attribute parser produced and is never
    interpreted here. ``rendered_handle`` belongs to the presentation
    adapter; the model only keeps it so later updates reach the same
    marker.
    """

    id: str
    attributes: Any
    state: EntityState = EntityState.LIVE
    label: str | None = None
    rendered_handle: Any = None

    @property
    def is_live(self) -> bool:
        return self.state is EntityState.LIVE

    @property
    def is_expired(self) -> bool:
        return self.state is EntityState.EXPIRED


class EntityModel:
    """Mapping of ``id -> Entity``; at most one entity per id."""

    def __init__(self) -> None:
        self._entities: dict[str, Entity] = {}

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    def get(self, entity_id: str) -> Entity | None:
        return self._entities.get(entity_id)

    def ids(self) -> list[str]:
        return list(self._entities)

    def live(self) -> list[Entity]:
        return [e for e in self._entities.values() if e.is_live]

    def expired(self) -> list[Entity]:
        return [e for e in self._entities.values() if e.is_expired]

    def count(self, state: EntityState | None = None) -> int:
        if state is None:
            return len(self._entities)
        return sum(1 for e in self._entities.values() if e.state is state)

    # Mutators below are for the reconciler only.

    def _put(self, entity: Entity) -> None:
        self._entities[entity.id] = entity

    def _pop(self, entity_id: str) -> Entity | None:
        return self._entities.pop(entity_id, None)

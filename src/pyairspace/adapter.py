"""Presentation adapter interface.

The core never draws anything. It tells an adapter what changed and keeps
whatever handle the adapter returned from :meth:`on_create` so later calls
can reach the same marker.
"""

from __future__ import annotations

from typing import Any, Protocol


class PresentationAdapter(Protocol):
    """Structural interface for whatever renders the entity model."""

    def on_create(self, entity_id: str, attributes: Any) -> Any:
        """Draw a new entity and return its handle."""
        ...

    def on_update(self, entity_id: str, attributes: Any, handle: Any) -> None: ...

    def on_expire(self, entity_id: str, handle: Any) -> None:
        """Switch the entity to its expired decoration; do not remove it."""
        ...

    def on_reappear(self, entity_id: str, attributes: Any, handle: Any) -> None:
        """Undo the expired decoration and repaint with fresh attributes."""
        ...

    def on_focused_update(self, entity_id: str, attributes: Any) -> None:
        """Refresh the open detail view for the focused entity."""
        ...

    def on_remove(self, entity_id: str, handle: Any) -> None:
        """Tear down an entity cleared from the model."""
        ...


class NullAdapter:
    """Adapter that renders nothing. Used when the model is consumed headless."""

    def on_create(self, entity_id: str, attributes: Any) -> Any:
        return None

    def on_update(self, entity_id: str, attributes: Any, handle: Any) -> None:
        return None

    def on_expire(self, entity_id: str, handle: Any) -> None:
        return None

    def on_reappear(self, entity_id: str, attributes: Any, handle: Any) -> None:
        return None

    def on_focused_update(self, entity_id: str, attributes: Any) -> None:
        return None

    def on_remove(self, entity_id: str, handle: Any) -> None:
        return None

"""Currently focused entity."""

from __future__ import annotations


class FocusTracker:
    """Remembers which entity's detail view is open.

    Focusing an id the model has never seen is allowed; the detail view
    shows it as unknown until it appears. Expiry never clears the focus,
    only :meth:`clear` does.
    """

    def __init__(self) -> None:
        self._current: str | None = None

    def focus(self, entity_id: str) -> None:
        self._current = entity_id

    def clear(self) -> None:
        self._current = None

    def current(self) -> str | None:
        return self._current

    def is_focused(self, entity_id: str) -> bool:
        return self._current is not None and self._current == entity_id

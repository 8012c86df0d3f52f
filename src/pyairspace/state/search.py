"""Secondary index of live entities by searchable label."""

from __future__ import annotations

from collections.abc import Iterable

from pyairspace.state.entity import Entity


class SearchIndex:
    """Exact-match ``label -> ids`` lookup restricted to live entities.

    Several ids may share a label. Case folding is the caller's job.
    """

    def __init__(self) -> None:
        self._by_label: dict[str, dict[str, None]] = {}
        self._label_of: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._label_of)

    def lookup(self, label: str) -> list[str]:
        ids = self._by_label.get(label)
        return list(ids) if ids else []

    def labels(self) -> list[str]:
        return list(self._by_label)

    def upsert(self, entity_id: str, label: str | None) -> None:
        """Index ``entity_id`` under ``label``, dropping any previous label."""
        previous = self._label_of.get(entity_id)
        if previous == label:
            return
        if previous is not None:
            self._discard(entity_id, previous)
        if label is None:
            return
        self._label_of[entity_id] = label
        self._by_label.setdefault(label, {})[entity_id] = None

    def remove(self, entity_id: str) -> None:
        previous = self._label_of.get(entity_id)
        if previous is not None:
            self._discard(entity_id, previous)

    def rebuild(self, entities: Iterable[Entity]) -> None:
        self._by_label.clear()
        self._label_of.clear()
        for entity in entities:
            if entity.is_live:
                self.upsert(entity.id, entity.label)

    def _discard(self, entity_id: str, label: str) -> None:
        self._label_of.pop(entity_id, None)
        bucket = self._by_label.get(label)
        if bucket is None:
            return
        bucket.pop(entity_id, None)
        if not bucket:
            del self._by_label[label]

"""Snapshot reconciliation.

This is the only component allowed to write to the entity model.

Each :meth:`EntityReconciler.apply` call runs in three steps:

1. parse every snapshot entry, skipping malformed ones
2. commit the state transitions to the model and the search index
3. tell the presentation adapter what changed

Steps 1 and 2 never call out to the adapter, so the model is already
consistent when the first render callback runs.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
from typing import Any

from pyairspace.adapter import NullAdapter, PresentationAdapter
from pyairspace.exceptions import DecodeFailure, PartialEntityFailure
from pyairspace.ingestion.normalize import normalize_label
from pyairspace.state.entity import Entity, EntityModel, EntityState
from pyairspace.state.events import ReconciliationResult
from pyairspace.state.focus import FocusTracker
from pyairspace.state.search import SearchIndex

_logger = logging.getLogger(__name__)

AttributeParser = Callable[[str, Any], Any]
LabelExtractor = Callable[[Any], str | None]


def _parse_mapping(entity_id: str, raw: Any) -> Any:
    if not isinstance(raw, Mapping):
        raise PartialEntityFailure(
            f"Entity {entity_id} is {type(raw).__name__}, expected a mapping",
            entity_id=entity_id,
        )
    return dict(raw)


def _mapping_label(attributes: Any) -> str | None:
    if isinstance(attributes, Mapping):
        return normalize_label(attributes.get("label"))
    return None


@dataclass
class TransitionPlan:
    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    reappeared: list[str] = field(default_factory=list)
    expired: list[str] = field(default_factory=list)


def plan_transitions(
    model: EntityModel,
    present_ids: Collection[str],
    *,
    changed_ids: Collection[str] | None = None,
) -> TransitionPlan:
    """Classify ids without touching the model.

    ``present_ids`` is every id the snapshot mentioned. ``changed_ids`` is
    the subset carrying usable attributes (defaults to all of them); ids
    present but not changed keep their current state and attributes.
    """
    if changed_ids is None:
        changed_ids = present_ids
    plan = TransitionPlan()
    for entity_id in changed_ids:
        entity = model.get(entity_id)
        if entity is None:
            plan.created.append(entity_id)
        elif entity.is_expired:
            plan.reappeared.append(entity_id)
        else:
            plan.updated.append(entity_id)
    for entity in model:
        if entity.is_live and entity.id not in present_ids:
            plan.expired.append(entity.id)
    return plan


class EntityReconciler:
    """Diff successive full snapshots against the retained entity model.

    Expired entities are never deleted by ``apply``; they stay in the model
    (and keep their rendered handle) until :meth:`clear_expired`.
    """

    def __init__(
        self,
        model: EntityModel,
        adapter: PresentationAdapter | None = None,
        *,
        focus: FocusTracker | None = None,
        search: SearchIndex | None = None,
        parse: AttributeParser = _parse_mapping,
        label_of: LabelExtractor = _mapping_label,
        on_diagnostic: Callable[[PartialEntityFailure], None] | None = None,
    ) -> None:
        self._model = model
        self._adapter: PresentationAdapter = adapter if adapter is not None else NullAdapter()
        self._focus = focus if focus is not None else FocusTracker()
        self._search = search if search is not None else SearchIndex()
        self._parse = parse
        self._label_of = label_of
        self._on_diagnostic = on_diagnostic

    @property
    def model(self) -> EntityModel:
        return self._model

    @property
    def focus(self) -> FocusTracker:
        return self._focus

    @property
    def search(self) -> SearchIndex:
        return self._search

    def apply(self, snapshot: Mapping[str, Any]) -> ReconciliationResult:
        """Apply one full snapshot (``id -> raw attributes``)."""
        if not isinstance(snapshot, Mapping):
            raise DecodeFailure(f"Snapshot is {type(snapshot).__name__}, expected a mapping")

        parsed, skipped = self._parse_snapshot(snapshot)
        present = set(parsed) | set(skipped)
        plan = plan_transitions(self._model, present, changed_ids=list(parsed))

        self._commit(plan, parsed)
        self._render(plan)

        result = ReconciliationResult(
            created_ids=plan.created,
            updated_ids=plan.updated,
            expired_ids=plan.expired,
            reappeared_ids=plan.reappeared,
            skipped_ids=skipped,
        )
        _logger.debug("Reconciled %d entries: %s", len(snapshot), result.summary())
        return result

    def clear_expired(self) -> list[str]:
        """Drop every expired entity and ask the adapter to tear it down."""
        cleared: list[Entity] = []
        for entity in self._model.expired():
            self._model._pop(entity.id)  # noqa: SLF001
            cleared.append(entity)
        for entity in cleared:
            self._notify("on_remove", entity.id, entity.rendered_handle)
        if cleared:
            _logger.debug("Cleared %d expired entities", len(cleared))
        return [entity.id for entity in cleared]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _parse_snapshot(self, snapshot: Mapping[str, Any]) -> tuple[dict[str, Any], list[str]]:
        parsed: dict[str, Any] = {}
        skipped: list[str] = []
        for entity_id, raw in snapshot.items():
            try:
                if not isinstance(entity_id, str) or not entity_id:
                    raise PartialEntityFailure(f"Invalid entity id {entity_id!r}", entity_id=str(entity_id))
                parsed[entity_id] = self._parse(entity_id, raw)
            except PartialEntityFailure as exc:
                _logger.warning("Skipping snapshot entry: %s", exc)
                if isinstance(entity_id, str) and entity_id:
                    skipped.append(entity_id)
                self._report(exc)
        return parsed, skipped

    def _report(self, exc: PartialEntityFailure) -> None:
        if self._on_diagnostic is None:
            return
        try:
            self._on_diagnostic(exc)
        except Exception:
            _logger.debug("on_diagnostic callback failed", exc_info=True)

    def _commit(self, plan: TransitionPlan, parsed: dict[str, Any]) -> None:
        for entity_id in plan.created:
            attributes = parsed[entity_id]
            entity = Entity(id=entity_id, attributes=attributes, label=self._label(attributes))
            self._model._put(entity)  # noqa: SLF001
            self._search.upsert(entity_id, entity.label)

        for entity_id in (*plan.updated, *plan.reappeared):
            entity = self._require(entity_id)
            entity.attributes = parsed[entity_id]
            entity.label = self._label(entity.attributes)
            entity.state = EntityState.LIVE
            self._search.upsert(entity_id, entity.label)

        for entity_id in plan.expired:
            entity = self._require(entity_id)
            entity.state = EntityState.EXPIRED
            self._search.remove(entity_id)

    def _render(self, plan: TransitionPlan) -> None:
        for entity_id in plan.created:
            entity = self._require(entity_id)
            entity.rendered_handle = self._notify("on_create", entity_id, entity.attributes)

        for entity_id in plan.updated:
            entity = self._require(entity_id)
            self._notify("on_update", entity_id, entity.attributes, entity.rendered_handle)

        for entity_id in plan.reappeared:
            entity = self._require(entity_id)
            self._notify("on_reappear", entity_id, entity.attributes, entity.rendered_handle)

        for entity_id in plan.expired:
            entity = self._require(entity_id)
            self._notify("on_expire", entity_id, entity.rendered_handle)

        focused_id = self._focus.current()
        if focused_id is None:
            return
        if focused_id in plan.created or focused_id in plan.updated or focused_id in plan.reappeared:
            self._notify("on_focused_update", focused_id, self._require(focused_id).attributes)

    def _require(self, entity_id: str) -> Entity:
        entity = self._model.get(entity_id)
        assert entity is not None  # noqa: S101
        return entity

    def _label(self, attributes: Any) -> str | None:
        try:
            return self._label_of(attributes)
        except Exception:
            _logger.debug("Label extraction failed", exc_info=True)
            return None

    def _notify(self, callback: str, *args: Any) -> Any:
        try:
            return getattr(self._adapter, callback)(*args)
        except Exception:
            _logger.debug("Adapter %s callback failed for %s", callback, args[0], exc_info=True)
            return None

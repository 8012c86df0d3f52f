from __future__ import annotations

from typing import Any

import pytest
from conftest import RecordingAdapter

from pyairspace.exceptions import DecodeFailure, PartialEntityFailure
from pyairspace.state.entity import EntityModel, EntityState
from pyairspace.state.focus import FocusTracker
from pyairspace.state.reconciler import EntityReconciler, plan_transitions
from pyairspace.state.search import SearchIndex


def _reconciler(adapter: Any = None, **kwargs: Any) -> EntityReconciler:
    return EntityReconciler(EntityModel(), adapter, **kwargs)


def test_expire_and_reappear_reuses_rendered_handle(adapter: RecordingAdapter) -> None:
    reconciler = _reconciler(adapter)
    model = reconciler.model

    first = reconciler.apply({"A": {"pos": 1}})
    entity = model.get("A")
    assert first.created_ids == ["A"]
    assert entity is not None
    assert entity.state is EntityState.LIVE
    assert entity.attributes == {"pos": 1}
    handle = entity.rendered_handle
    assert handle == 1

    second = reconciler.apply({})
    assert second.expired_ids == ["A"]
    assert entity.state is EntityState.EXPIRED
    assert entity.attributes == {"pos": 1}
    assert entity.rendered_handle == handle

    third = reconciler.apply({"A": {"pos": 2}})
    assert third.reappeared_ids == ["A"]
    assert third.created_ids == []
    assert entity.state is EntityState.LIVE
    assert entity.attributes == {"pos": 2}
    assert entity.rendered_handle == handle

    assert len(adapter.kinds("create")) == 1
    assert adapter.kinds("expire") == [("expire", "A", handle)]
    assert adapter.kinds("reappear") == [("reappear", "A", {"pos": 2}, handle)]


def test_successive_snapshots_classify_every_id() -> None:
    reconciler = _reconciler()
    model = reconciler.model

    reconciler.apply({"A": {}, "B": {}, "C": {}})
    result = reconciler.apply({"B": {}, "C": {}, "D": {}})

    assert sorted(result.updated_ids) == ["B", "C"]
    assert result.created_ids == ["D"]
    assert result.expired_ids == ["A"]
    for entity_id in ("B", "C", "D"):
        entity = model.get(entity_id)
        assert entity is not None and entity.is_live
    expired = model.get("A")
    assert expired is not None and expired.is_expired
    assert "E" not in model


def test_same_snapshot_twice_only_updates() -> None:
    reconciler = _reconciler()
    snapshot = {"A": {"pos": 1}, "B": {"pos": 2}}

    reconciler.apply(snapshot)
    again = reconciler.apply(snapshot)

    assert again.created_ids == []
    assert again.expired_ids == []
    assert again.reappeared_ids == []
    assert sorted(again.updated_ids) == ["A", "B"]
    assert not again.has_transitions


def test_expiry_is_idempotent(adapter: RecordingAdapter) -> None:
    reconciler = _reconciler(adapter)
    reconciler.apply({"A": {}})
    reconciler.apply({})
    result = reconciler.apply({})

    assert result.expired_ids == []
    assert len(adapter.kinds("expire")) == 1


def test_empty_snapshot_expires_all_live_and_creates_nothing() -> None:
    reconciler = _reconciler()
    reconciler.apply({"A": {}, "B": {}})

    result = reconciler.apply({})

    assert sorted(result.expired_ids) == ["A", "B"]
    assert result.created_ids == []
    assert reconciler.model.count(EntityState.LIVE) == 0
    assert reconciler.model.count(EntityState.EXPIRED) == 2


def test_malformed_entry_skipped_rest_applied() -> None:
    failures: list[PartialEntityFailure] = []
    reconciler = _reconciler(on_diagnostic=failures.append)

    result = reconciler.apply({"A": {"pos": 1}, "B": "not-a-record", "C": {"pos": 3}})

    assert sorted(result.created_ids) == ["A", "C"]
    assert result.skipped_ids == ["B"]
    assert "B" not in reconciler.model
    assert len(failures) == 1
    assert failures[0].entity_id == "B"


def test_malformed_entry_for_known_entity_keeps_it_live_and_unchanged() -> None:
    reconciler = _reconciler()
    reconciler.apply({"A": {"pos": 1}})

    result = reconciler.apply({"A": None})

    entity = reconciler.model.get("A")
    assert entity is not None
    assert entity.is_live
    assert entity.attributes == {"pos": 1}
    assert result.expired_ids == []
    assert result.updated_ids == []
    assert result.skipped_ids == ["A"]


def test_custom_parser_failures_are_local() -> None:
    def parse(entity_id: str, raw: Any) -> int:
        if raw < 0:
            raise PartialEntityFailure("negative", entity_id=entity_id)
        return raw

    reconciler = _reconciler(parse=parse, label_of=lambda attrs: None)
    result = reconciler.apply({"A": 1, "B": -1})

    assert result.created_ids == ["A"]
    assert result.skipped_ids == ["B"]


def test_non_mapping_snapshot_is_a_decode_failure() -> None:
    reconciler = _reconciler()
    with pytest.raises(DecodeFailure):
        reconciler.apply(["A", "B"])  # type: ignore[arg-type]


def test_creates_and_updates_render_before_expiries(adapter: RecordingAdapter) -> None:
    reconciler = _reconciler(adapter)
    reconciler.apply({"A": {}, "B": {}})
    adapter.calls.clear()

    reconciler.apply({"B": {}, "C": {}})

    kinds = [call[0] for call in adapter.calls]
    assert kinds == ["create", "update", "expire"]


def test_adapter_failure_does_not_break_reconciliation() -> None:
    class ExplodingAdapter(RecordingAdapter):
        def on_create(self, entity_id: str, attributes: Any) -> int:
            raise RuntimeError("map not ready")

    reconciler = _reconciler(ExplodingAdapter())
    result = reconciler.apply({"A": {}, "B": {}})

    assert sorted(result.created_ids) == ["A", "B"]
    entity = reconciler.model.get("A")
    assert entity is not None
    assert entity.rendered_handle is None


def test_focused_entity_update_refreshes_detail_view(adapter: RecordingAdapter) -> None:
    focus = FocusTracker()
    reconciler = _reconciler(adapter, focus=focus)
    reconciler.apply({"X": {"pos": 1}, "Y": {"pos": 5}})
    focus.focus("X")
    adapter.calls.clear()

    reconciler.apply({"X": {"pos": 2}, "Y": {"pos": 6}})

    assert adapter.kinds("focused") == [("focused", "X", {"pos": 2})]


def test_focus_survives_expiry(adapter: RecordingAdapter) -> None:
    focus = FocusTracker()
    reconciler = _reconciler(adapter, focus=focus)
    reconciler.apply({"X": {"pos": 1}})
    focus.focus("X")
    adapter.calls.clear()

    reconciler.apply({})

    assert focus.current() == "X"
    assert adapter.kinds("focused") == []


def test_focusing_unknown_id_then_it_appears(adapter: RecordingAdapter) -> None:
    focus = FocusTracker()
    reconciler = _reconciler(adapter, focus=focus)
    focus.focus("GHOST")

    reconciler.apply({"A": {}})
    assert adapter.kinds("focused") == []

    reconciler.apply({"A": {}, "GHOST": {"pos": 9}})
    assert adapter.kinds("focused") == [("focused", "GHOST", {"pos": 9})]


def test_search_index_tracks_only_live_entities() -> None:
    search = SearchIndex()
    reconciler = _reconciler(search=search)

    reconciler.apply({"A": {"label": "SWA2848"}, "B": {"label": "KAL018"}})
    assert search.lookup("SWA2848") == ["A"]

    reconciler.apply({"B": {"label": "KAL018"}})
    assert search.lookup("SWA2848") == []
    assert search.lookup("KAL018") == ["B"]

    reconciler.apply({"A": {"label": "SWA2848"}, "B": {"label": "KAL019"}})
    assert search.lookup("SWA2848") == ["A"]
    assert search.lookup("KAL018") == []
    assert search.lookup("KAL019") == ["B"]


def test_clear_expired_tears_down_only_expired(adapter: RecordingAdapter) -> None:
    reconciler = _reconciler(adapter)
    reconciler.apply({"A": {}, "B": {}})
    reconciler.apply({"B": {}})

    cleared = reconciler.clear_expired()

    assert cleared == ["A"]
    assert "A" not in reconciler.model
    assert "B" in reconciler.model
    assert adapter.kinds("remove") == [("remove", "A", 1)]

    # A cleared id coming back is a brand new entity.
    result = reconciler.apply({"A": {}, "B": {}})
    assert result.created_ids == ["A"]


def test_plan_transitions_does_not_touch_model() -> None:
    reconciler = _reconciler()
    reconciler.apply({"A": {}, "B": {}})
    reconciler.apply({"A": {}})

    plan = plan_transitions(reconciler.model, {"B", "C"})

    assert plan.created == ["C"]
    assert plan.reappeared == ["B"]
    assert plan.expired == ["A"]
    entity = reconciler.model.get("A")
    assert entity is not None and entity.is_live
    assert "C" not in reconciler.model

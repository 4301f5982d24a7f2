"""Tests for the debounced style document."""

import json
from pathlib import Path

import pytest

from tilestyle.config import StyleConfig
from tilestyle.diagnostics import CollectingSink
from tilestyle.editor import EditAction, SharedStyle, StyleDoc, SymbolType
from tilestyle.events import EventBus, StyleCommitted, StyleLoaded, StyleLoadFailed
from tilestyle.model import Color, LineSymbol, PolygonSymbol, StyleRule, VectorTileStyle
from tilestyle.model.style import DEFAULT_BACKGROUND

FIXTURE = Path(__file__).parent.parent / "fixtures" / "streets.json"


MS = 1_000_000  # nanoseconds


class FakeClock:
    def __init__(self, now: int = 0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def doc(clock):
    return StyleDoc(clock=clock, sink=CollectingSink())


def _filled(doc, count):
    for i in range(count):
        rule = doc.add_rule()
        rule.layer_name = f"layer{i}"
    return [r.id for r in doc.rules]


# ---------------------------------------------------------------------------
# Initial state
# ---------------------------------------------------------------------------


class TestInitialState:
    def test_empty_document(self, doc):
        assert doc.rules == []
        assert doc.background_color == DEFAULT_BACKGROUND
        assert doc.last_rule_id == 0
        assert not doc.is_changed
        assert doc.last_changed_at is None

    def test_initial_style(self):
        style = VectorTileStyle.of(
            [StyleRule("water", (), PolygonSymbol(Color.WHITE)), StyleRule("roads")],
            background=Color.BLACK,
        )
        doc = StyleDoc(style)
        assert [r.id for r in doc.rules] == [1, 2]
        assert doc.last_rule_id == 2
        assert doc.background_color == Color.BLACK
        assert not doc.is_pending

    def test_configured_background(self):
        doc = StyleDoc(config=StyleConfig(default_background=Color.WHITE))
        assert doc.background_color == Color.WHITE


# ---------------------------------------------------------------------------
# Debounce
# ---------------------------------------------------------------------------


class TestDebounce:
    def test_commit_after_interval(self, doc, clock):
        doc.set_background(Color.BLACK)
        assert doc.is_pending

        clock.now = 50 * MS
        assert not doc.tick()
        assert not doc.is_changed

        clock.now = 100 * MS
        assert doc.tick()
        assert doc.is_changed
        assert not doc.is_pending

    def test_each_change_restarts_window(self, doc, clock):
        doc.set_background(Color.BLACK)
        clock.now = 80 * MS
        doc.set_background(Color.WHITE)
        clock.now = 150 * MS
        assert not doc.tick()
        clock.now = 200 * MS
        assert doc.tick()

    def test_commit_exactly_at_deadline(self, doc, clock):
        clock.now = 200 * MS
        doc.set_background(Color.BLACK)
        clock.now = 300 * MS - 1
        assert not doc.tick()
        clock.now = 300 * MS
        assert doc.tick()

    def test_default_clock_is_monotonic_ns(self, doc):
        real = StyleDoc()
        real.mark_changed()
        assert isinstance(real.last_changed_at, int)

    def test_tick_without_changes(self, doc, clock):
        clock.now = 10000 * MS
        assert not doc.tick()
        assert not doc.is_changed

    def test_commits_once(self, doc, clock):
        doc.set_background(Color.BLACK)
        clock.now = 1000 * MS
        assert doc.tick()
        assert not doc.tick()

    def test_mark_unchanged(self, doc, clock):
        doc.set_background(Color.BLACK)
        clock.now = 1000 * MS
        doc.tick()
        doc.mark_unchanged()
        assert not doc.is_changed

    def test_custom_interval(self, clock):
        doc = StyleDoc(config=StyleConfig(debounce_interval=0.5), clock=clock)
        doc.set_background(Color.BLACK)
        clock.now = 400 * MS
        assert not doc.tick()
        clock.now = 500 * MS
        assert doc.tick()

    def test_unchanged_background_does_not_schedule(self, doc):
        doc.set_background(DEFAULT_BACKGROUND)
        assert not doc.is_pending


# ---------------------------------------------------------------------------
# Rule ids
# ---------------------------------------------------------------------------


class TestRuleIds:
    def test_ids_are_sequential(self, doc):
        assert _filled(doc, 3) == [1, 2, 3]

    def test_ids_are_never_reused(self, doc):
        _filled(doc, 3)
        doc.remove_rule(2)
        doc.remove_rule(0)
        assert doc.add_rule().id == 4
        ids = [r.id for r in doc.rules]
        assert len(set(ids)) == len(ids)
        assert all(i <= doc.last_rule_id for i in ids)

    def test_add_rule_does_not_schedule(self, doc):
        doc.add_rule()
        assert not doc.is_pending

    def test_rule_by_id(self, doc):
        _filled(doc, 2)
        assert doc.rule_by_id(2).layer_name == "layer1"
        assert doc.rule_by_id(99) is None


# ---------------------------------------------------------------------------
# Reordering and modification
# ---------------------------------------------------------------------------


class TestRuleOperations:
    def test_move_up(self, doc):
        _filled(doc, 3)
        assert doc.move_up(1)
        assert [r.id for r in doc.rules] == [2, 1, 3]
        assert doc.is_pending

    def test_move_down(self, doc):
        _filled(doc, 3)
        assert doc.move_down(1)
        assert [r.id for r in doc.rules] == [1, 3, 2]

    def test_move_up_then_down_restores_order(self, doc):
        _filled(doc, 4)
        before = [r.id for r in doc.rules]
        doc.move_up(2)
        doc.move_down(1)
        assert [r.id for r in doc.rules] == before

    @pytest.mark.parametrize("op, index", [("move_up", 0), ("move_down", 2), ("move_up", 5), ("move_down", -1)])
    def test_moves_at_edges_are_no_ops(self, doc, op, index):
        _filled(doc, 3)
        assert not getattr(doc, op)(index)
        assert [r.id for r in doc.rules] == [1, 2, 3]
        assert not doc.is_pending

    def test_remove_rule(self, doc):
        _filled(doc, 3)
        removed = doc.remove_rule(1)
        assert removed.id == 2
        assert [r.id for r in doc.rules] == [1, 3]
        assert doc.is_pending

    def test_modify_rule(self, doc):
        _filled(doc, 1)
        rule = doc.modify_rule(0, symbol_type=SymbolType.LINE, color=Color.BLACK, size=2.0)
        assert rule.symbol_type is SymbolType.LINE
        assert doc.is_pending

    def test_modify_without_change_does_not_schedule(self, doc):
        _filled(doc, 1)
        doc.modify_rule(0, layer_name="layer0")
        assert not doc.is_pending

    def test_modify_rejects_unknown_fields(self, doc):
        _filled(doc, 1)
        with pytest.raises(AttributeError):
            doc.modify_rule(0, id=5)


# ---------------------------------------------------------------------------
# Row actions
# ---------------------------------------------------------------------------


class TestActions:
    def test_no_action(self, doc):
        _filled(doc, 2)
        assert doc.apply_actions() is EditAction.NONE
        assert not doc.is_pending

    def test_remove_action(self, doc):
        _filled(doc, 3)
        doc.rules[1].action = EditAction.REMOVE
        assert doc.apply_actions() is EditAction.REMOVE
        assert [r.id for r in doc.rules] == [1, 3]

    def test_first_action_wins_and_all_reset(self, doc):
        _filled(doc, 3)
        doc.rules[1].action = EditAction.MOVE_UP
        doc.rules[2].action = EditAction.REMOVE
        assert doc.apply_actions() is EditAction.MOVE_UP
        assert [r.id for r in doc.rules] == [2, 1, 3]
        assert all(r.action is EditAction.NONE for r in doc.rules)

    def test_move_down_action(self, doc):
        _filled(doc, 2)
        doc.rules[0].action = EditAction.MOVE_DOWN
        doc.apply_actions()
        assert [r.id for r in doc.rules] == [2, 1]

    def test_modified_action_schedules_commit(self, doc):
        _filled(doc, 1)
        doc.rules[0].size = 3.0
        doc.rules[0].action = EditAction.MODIFIED
        assert doc.apply_actions() is EditAction.MODIFIED
        assert doc.is_pending


# ---------------------------------------------------------------------------
# Compilation and publishing
# ---------------------------------------------------------------------------


class TestPublishing:
    def test_style_compiles_rows_in_order(self, doc):
        _filled(doc, 2)
        doc.modify_rule(1, symbol_type=SymbolType.LINE, color=Color.BLACK, size=2.0, filter_text="class == x")
        style = doc.style()
        assert [r.layer_name for r in style.rules] == ["layer0", "layer1"]
        assert style.rules[1].symbol == LineSymbol(2.0, Color.BLACK)
        assert style.background == doc.background_color

    def test_commit_publishes_snapshot_and_event(self, clock):
        shared = SharedStyle()
        bus = EventBus()
        events = []
        bus.subscribe(StyleCommitted, events.append)
        doc = StyleDoc(clock=clock, shared=shared, bus=bus)

        doc.set_background(Color.BLACK)
        before = shared.snapshot()
        clock.now = 100 * MS
        doc.tick()

        assert before.background == DEFAULT_BACKGROUND
        assert shared.version == 1
        assert shared.snapshot().background == Color.BLACK
        assert len(events) == 1
        assert events[0].version == 1
        assert events[0].style == shared.snapshot()

    def test_snapshot_is_isolated_from_later_edits(self, clock):
        shared = SharedStyle()
        doc = StyleDoc(clock=clock, shared=shared)
        _filled(doc, 1)
        doc.mark_changed()
        clock.now = 1000 * MS
        doc.tick()
        snapshot = shared.snapshot()

        doc.modify_rule(0, layer_name="renamed")
        assert snapshot.rules[0].layer_name == "layer0"

    def test_invalid_filter_text_is_reported(self, clock):
        sink = CollectingSink()
        doc = StyleDoc(clock=clock, sink=sink)
        _filled(doc, 1)
        doc.modify_rule(0, filter_text="nonsense")
        assert doc.style().rules[0].properties == ()
        assert sink.codes() == ["invalid_filter_text"]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoading:
    def test_load_style_renumbers(self, doc):
        _filled(doc, 5)
        doc.load_style(VectorTileStyle.of([StyleRule("a"), StyleRule("b")]))
        assert [r.id for r in doc.rules] == [1, 2]
        assert doc.last_rule_id == 2
        assert doc.is_pending

    def test_load_ess_file(self, clock):
        bus = EventBus()
        events = []
        bus.on_all(events.append)
        sink = CollectingSink()
        doc = StyleDoc(clock=clock, bus=bus, sink=sink)

        assert doc.load_ess_file(FIXTURE)
        assert [r.layer_name for r in doc.rules] == [
            "globallandcover",
            "water",
            "waterway",
            "transportation",
            "place",
        ]
        assert doc.rules[4].filter_text == "name exist && rank >= 3"
        assert doc.rules[4].symbol_type is SymbolType.LABEL
        assert "unsupported_filter" in sink.codes()
        assert events == [StyleLoaded(source=str(FIXTURE), rule_count=5)]

    def test_load_missing_file_keeps_document(self, doc, tmp_path):
        _filled(doc, 2)
        assert not doc.load_ess_file(tmp_path / "missing.json")
        assert len(doc.rules) == 2
        assert not doc.is_pending

    def test_load_failure_event(self, clock, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[1, 2", encoding="utf-8")
        bus = EventBus()
        failures = []
        bus.subscribe(StyleLoadFailed, failures.append)
        doc = StyleDoc(clock=clock, bus=bus)

        assert not doc.load_ess_file(path)
        assert len(failures) == 1
        assert failures[0].path == str(path)

    def test_load_non_utf8_file(self, clock, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"version": 8, "name": "\xff\xfe"}')
        bus = EventBus()
        failures = []
        bus.subscribe(StyleLoadFailed, failures.append)
        doc = StyleDoc(clock=clock, bus=bus)
        _filled(doc, 1)

        assert not doc.load_ess_file(path)
        assert len(doc.rules) == 1
        assert not doc.is_pending
        assert [f.path for f in failures] == [str(path)]

    def test_load_malformed_style(self, doc, tmp_path):
        path = tmp_path / "style.json"
        path.write_text(json.dumps({"version": 8, "layers": "nope"}), encoding="utf-8")
        assert not doc.load_ess_file(path)

    def test_load_failure_is_logged(self, doc, tmp_path, caplog):
        with caplog.at_level("ERROR", logger="tilestyle.editor"):
            doc.load_ess_file(tmp_path / "missing.json")
        assert "Failed to load style" in caplog.text


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class TestPersistence:
    def test_round_trip(self, doc, tmp_path):
        _filled(doc, 3)
        doc.remove_rule(2)
        doc.modify_rule(0, symbol_type=SymbolType.POLYGON, color=Color(1, 2, 3, 4))
        doc.set_background(Color.WHITE)

        path = tmp_path / "doc.json"
        doc.save(path)
        restored = StyleDoc.load(path)

        assert restored.rules == doc.rules
        assert restored.background_color == Color.WHITE
        assert restored.last_rule_id == 3
        assert restored.add_rule().id == 4

    def test_pending_state_is_not_saved(self, doc):
        doc.set_background(Color.BLACK)
        restored = StyleDoc.from_dict(doc.to_dict())
        assert not restored.is_pending

    def test_last_rule_id_covers_stored_rows(self):
        restored = StyleDoc.from_dict({"rules": [{"id": 8}], "last_rule_id": 2})
        assert restored.last_rule_id == 8

    def test_constructor_arguments(self, clock):
        restored = StyleDoc.from_dict({"rules": []}, clock=clock)
        restored.set_background(Color.BLACK)
        assert restored.last_changed_at == clock.now

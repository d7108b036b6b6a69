"""
Unit tests for ProgressStore: recording, unlock rules, achievements.
"""

import json

import pytest

from src.core.errors import PersistenceFailure, UnknownUnit
from src.progress.curriculum import Curriculum, GroupConfig, LinearRule, ThresholdCountRule, UnitConfig
from src.progress.persistence import MemoryPersistence
from src.progress.store import ProgressStore, deep_merge

FOUNDATIONS = ["hand-strength", "position", "equity", "ranges"]
DRILLS = ["hand-ranking", "open-fold", "equity-snap", "range-check", "position-speed"]
SCENARIOS = ["defend-3bet", "bb-defense", "3bet-value", "sb-3bet-fold", "cold-4bet", "board-texture"]


def pass_units(store, units, factory, accuracy=100.0):
    changes = []
    for unit_id in units:
        changes.append(store.record_attempt(unit_id, factory(unit_id, accuracy)))
    return changes


class FailingPersistence:
    """Persistence whose every call fails."""

    def __init__(self, load_error=True):
        self.load_error = load_error
        self.saves = 0

    def load(self):
        if self.load_error:
            raise PersistenceFailure("disk on fire")
        return None

    def save(self, document):
        self.saves += 1
        raise PersistenceFailure("disk on fire")


class TestDefaults:
    """Test the fresh document."""

    def test_initial_unlocks(self, memory_store):
        store = memory_store
        assert store.is_unlocked("hand-strength")
        assert not store.is_unlocked("position")
        assert not store.is_unlocked("ranges")

    def test_drills_locked_until_group_unlocks(self, memory_store):
        # hand-ranking is unlocked inside a locked group
        assert memory_store.record("hand-ranking")["unlocked"] is True
        assert not memory_store.is_group_unlocked("drills")
        assert not memory_store.is_unlocked("hand-ranking")

    def test_nothing_completed(self, memory_store):
        assert memory_store.overall_progress() == 0
        assert not any(memory_store.is_completed(u) for u in FOUNDATIONS + DRILLS + SCENARIOS)

    def test_current_unit(self, memory_store):
        assert memory_store.current_unit("foundations") == "hand-strength"
        assert memory_store.current_unit("drills") == "hand-ranking"
        assert memory_store.current_unit("full-hands") is None

    def test_thresholds(self, memory_store):
        assert memory_store.threshold("hand-ranking") == 80
        assert memory_store.threshold("cold-4bet") == 70
        assert memory_store.threshold("open-fold") == 75


class TestRecordAttempt:
    """Test bests and completion."""

    def test_bests_are_monotonic(self, memory_store, summary_factory):
        store = memory_store
        store.record_attempt("hand-strength", summary_factory("hand-strength", 90, avg_time_ms=2500, best_streak=6))
        store.record_attempt("hand-strength", summary_factory("hand-strength", 40, avg_time_ms=4000, best_streak=2))
        record = store.record("hand-strength")
        assert record["best_score"] == 90
        assert record["best_streak"] == 6
        assert record["best_avg_time"] == 2500
        assert record["attempts"] == 2
        assert record["last_attempt"] == "2026-01-01T00:00:00"

    def test_faster_time_replaces_best(self, memory_store, summary_factory):
        store = memory_store
        store.record_attempt("hand-strength", summary_factory("hand-strength", 50, avg_time_ms=3000))
        store.record_attempt("hand-strength", summary_factory("hand-strength", 50, avg_time_ms=1800))
        assert store.record("hand-strength")["best_avg_time"] == 1800

    def test_failing_attempt_does_not_complete(self, memory_store, summary_factory):
        change = memory_store.record_attempt("hand-strength", summary_factory("hand-strength", 69.9))
        assert not change.passed
        assert not memory_store.is_completed("hand-strength")
        assert not memory_store.is_unlocked("position")
        assert not change.has_unlocks

    def test_pass_at_threshold(self, memory_store, summary_factory):
        change = memory_store.record_attempt("hand-strength", summary_factory("hand-strength", 70))
        assert change.passed
        assert change.newly_completed == ["hand-strength"]
        assert change.newly_unlocked == ["position"]
        assert memory_store.is_unlocked("position")

    def test_completion_is_permanent(self, memory_store, summary_factory):
        store = memory_store
        store.record_attempt("hand-strength", summary_factory("hand-strength", 100))
        change = store.record_attempt("hand-strength", summary_factory("hand-strength", 0))
        assert store.is_completed("hand-strength")
        assert change.newly_completed == []
        assert store.record("hand-strength")["best_score"] == 100

    def test_group_attempts_counted(self, memory_store, summary_factory):
        store = memory_store
        store.record_attempt("hand-strength", summary_factory("hand-strength", 10))
        store.record_attempt("hand-strength", summary_factory("hand-strength", 10))
        assert store.stats("foundations").attempts == 2

    def test_on_change_listener(self, summary_factory):
        seen = []
        store = ProgressStore(persistence=MemoryPersistence(), on_change=seen.append)
        change = store.record_attempt("hand-strength", summary_factory("hand-strength", 100))
        assert seen == [change]


class TestUnlockRules:
    """Test linear, group and threshold-count gating."""

    def test_linear_foundations(self, memory_store, summary_factory):
        changes = pass_units(memory_store, FOUNDATIONS[:3], summary_factory)
        assert [c.newly_unlocked for c in changes] == [["position"], ["equity"], ["ranges"]]

    def test_foundations_unlock_drills(self, memory_store, summary_factory):
        changes = pass_units(memory_store, FOUNDATIONS, summary_factory)
        last = changes[-1]
        assert last.newly_completed_groups == ["foundations"]
        assert last.newly_unlocked_groups == ["drills"]
        assert memory_store.is_group_completed("foundations")
        assert memory_store.is_unlocked("hand-ranking")
        assert not memory_store.is_unlocked("open-fold")

    def test_drills_unlock_scenarios(self, memory_store, summary_factory):
        pass_units(memory_store, FOUNDATIONS, summary_factory)
        changes = pass_units(memory_store, DRILLS, summary_factory)
        assert [c.newly_unlocked for c in changes[:-1]] == [
            ["open-fold"], ["equity-snap"], ["range-check"], ["position-speed"]
        ]
        assert changes[-1].newly_unlocked_groups == ["scenarios"]
        for unit_id in ["defend-3bet", "bb-defense", "3bet-value", "sb-3bet-fold", "board-texture"]:
            assert memory_store.is_unlocked(unit_id)
        assert not memory_store.is_unlocked("cold-4bet")

    def test_cold_4bet_needs_two_tier_one_scenarios_at_75(self, memory_store, summary_factory):
        store = memory_store
        pass_units(store, FOUNDATIONS + DRILLS, summary_factory)

        first = store.record_attempt("defend-3bet", summary_factory("defend-3bet", 80))
        assert "cold-4bet" not in first.newly_unlocked

        second = store.record_attempt("bb-defense", summary_factory("bb-defense", 75))
        assert second.newly_unlocked == ["cold-4bet"]
        assert store.is_unlocked("cold-4bet")

    def test_cold_4bet_not_unlocked_by_failed_attempts(self, memory_store, summary_factory):
        store = memory_store
        pass_units(store, FOUNDATIONS + DRILLS, summary_factory)
        store.record_attempt("defend-3bet", summary_factory("defend-3bet", 74))
        store.record_attempt("bb-defense", summary_factory("bb-defense", 74))
        assert not store.is_unlocked("cold-4bet")

    def test_scenarios_unlock_full_hands(self, memory_store, summary_factory):
        store = memory_store
        pass_units(store, FOUNDATIONS + DRILLS, summary_factory)
        changes = pass_units(store, SCENARIOS, summary_factory)
        assert changes[-1].newly_unlocked_groups == ["full-hands"]
        assert store.is_group_completed("scenarios")
        assert store.overall_progress() == 100

    def test_locked_unit_is_never_completed(self, memory_store, summary_factory):
        """A pass on a locked unit keeps its bests but leaves it locked and incomplete."""
        store = memory_store
        change = store.record_attempt("equity", summary_factory("equity", 100))
        record = store.record("equity")
        assert record["unlocked"] is False
        assert record["completed"] is False
        assert record["best_score"] == 100
        assert record["attempts"] == 1
        assert not change.passed
        assert change.newly_completed == []
        assert change.newly_unlocked == []
        assert any("locked" in w for w in change.warnings)

    def test_unlocked_after_locked_attempt_completes_on_next_pass(self, memory_store, summary_factory):
        store = memory_store
        store.record_attempt("position", summary_factory("position", 100))
        pass_units(store, ["hand-strength"], summary_factory)
        assert store.is_unlocked("position")
        assert not store.is_completed("position")
        change = store.record_attempt("position", summary_factory("position", 100))
        assert change.newly_completed == ["position"]
        assert change.newly_unlocked == ["equity"]


class TestAchievements:
    """Test achievement triggers."""

    @pytest.fixture
    def drills_open(self, memory_store, summary_factory):
        pass_units(memory_store, FOUNDATIONS, summary_factory)
        return memory_store

    def test_speed_demon(self, drills_open, summary_factory):
        change = drills_open.record_attempt(
            "hand-ranking", summary_factory("hand-ranking", 85, avg_time_ms=1500)
        )
        assert "speed-demon" in change.new_achievements

    def test_speed_demon_needs_a_pass(self, drills_open, summary_factory):
        change = drills_open.record_attempt(
            "hand-ranking", summary_factory("hand-ranking", 20, avg_time_ms=500)
        )
        assert "speed-demon" not in change.new_achievements

    def test_speed_demon_limit_is_exclusive(self, drills_open, summary_factory):
        change = drills_open.record_attempt(
            "hand-ranking", summary_factory("hand-ranking", 90, avg_time_ms=2000)
        )
        assert "speed-demon" not in change.new_achievements

    def test_perfect_run_and_on_fire(self, drills_open, summary_factory):
        change = drills_open.record_attempt(
            "hand-ranking", summary_factory("hand-ranking", 100, best_streak=25, total=25)
        )
        assert "perfect-run" in change.new_achievements
        assert "on-fire" in change.new_achievements

    def test_achievements_award_once(self, drills_open, summary_factory):
        drills_open.record_attempt("hand-ranking", summary_factory("hand-ranking", 100))
        change = drills_open.record_attempt("hand-ranking", summary_factory("hand-ranking", 100))
        assert "perfect-run" not in change.new_achievements
        assert drills_open.achievements("drills").count("perfect-run") == 1

    def test_achievements_scoped_to_group(self, memory_store, summary_factory):
        change = memory_store.record_attempt("hand-strength", summary_factory("hand-strength", 100, avg_time_ms=100))
        assert change.new_achievements == []

    def test_drill_master(self, drills_open, summary_factory):
        changes = pass_units(drills_open, DRILLS, summary_factory, accuracy=90)
        assert "drill-master" in changes[-1].new_achievements
        assert all("drill-master" not in c.new_achievements for c in changes[:-1])

    def test_scenario_achievements(self, drills_open, summary_factory):
        store = drills_open
        pass_units(store, DRILLS, summary_factory)
        store.record_attempt("defend-3bet", summary_factory("defend-3bet", 90))
        change = store.record_attempt("bb-defense", summary_factory("bb-defense", 85))
        assert "defender" in change.new_achievements

        store.record_attempt("3bet-value", summary_factory("3bet-value", 85))
        change = store.record_attempt("sb-3bet-fold", summary_factory("sb-3bet-fold", 84))
        assert "3bet-specialist" not in change.new_achievements
        change = store.record_attempt("sb-3bet-fold", summary_factory("sb-3bet-fold", 86))
        assert "3bet-specialist" in change.new_achievements

        change = store.record_attempt("cold-4bet", summary_factory("cold-4bet", 100))
        assert "preflop-master" in change.new_achievements
        assert "perfect-decisions" in change.new_achievements

        change = store.record_attempt("board-texture", summary_factory("board-texture", 80))
        assert "scenario-solver" in change.new_achievements


class TestSummaries:
    """Test stats and progress percentages."""

    def test_overall_progress_rounds_half_up(self, memory_store, summary_factory):
        # 15 units in total: 1/15 = 6.67%
        pass_units(memory_store, ["hand-strength"], summary_factory)
        assert memory_store.overall_progress() == 7

    def test_group_progress(self, memory_store, summary_factory):
        pass_units(memory_store, FOUNDATIONS[:2], summary_factory)
        assert memory_store.group_progress("foundations") == 50
        assert memory_store.group_progress("full-hands") == 0

    def test_stats(self, memory_store, summary_factory):
        store = memory_store
        store.record_attempt("hand-strength", summary_factory("hand-strength", 100, best_streak=10))
        stats = store.stats("foundations")
        assert stats.completed == 1
        assert stats.total == 4
        assert stats.best_streak == 10

    def test_current_unit_moves_on(self, memory_store, summary_factory):
        pass_units(memory_store, FOUNDATIONS[:2], summary_factory)
        assert memory_store.current_unit("foundations") == "equity"

    def test_current_unit_when_all_done(self, memory_store, summary_factory):
        pass_units(memory_store, FOUNDATIONS, summary_factory)
        assert memory_store.current_unit("foundations") == "hand-strength"


class TestUnknownUnits:
    """Unknown ids are locked, or raise in strict mode."""

    def test_lenient(self, memory_store, summary_factory):
        assert not memory_store.is_unlocked("river-bluffs")
        assert memory_store.record("river-bluffs") is None
        change = memory_store.record_attempt("river-bluffs", summary_factory("river-bluffs", 100))
        assert change.warnings
        assert not change.passed

    def test_strict(self, summary_factory):
        store = ProgressStore(persistence=MemoryPersistence(), strict=True)
        with pytest.raises(UnknownUnit):
            store.is_unlocked("river-bluffs")
        with pytest.raises(UnknownUnit):
            store.record_attempt("river-bluffs", summary_factory("river-bluffs", 100))
        with pytest.raises(UnknownUnit):
            store.stats("river")

    def test_unknown_group_lenient(self, memory_store):
        assert memory_store.stats("river").total == 0
        assert memory_store.current_unit("river") is None
        assert memory_store.achievements("river") == []


class TestPersistenceFailures:
    """Storage problems never raise out of the store."""

    def test_load_failure_falls_back_to_defaults(self):
        store = ProgressStore(persistence=FailingPersistence())
        assert store.is_unlocked("hand-strength")
        assert any("disk on fire" in w for w in store.warnings)

    def test_save_failure_keeps_memory_state(self, summary_factory):
        persistence = FailingPersistence(load_error=False)
        store = ProgressStore(persistence=persistence)
        change = store.record_attempt("hand-strength", summary_factory("hand-strength", 100))
        assert persistence.saves == 1
        assert change.warnings
        assert store.is_completed("hand-strength")
        assert store.is_unlocked("position")

    def test_malformed_document_falls_back(self):
        store = ProgressStore(persistence=MemoryPersistence({"groups": {"foundations": {"units": "oops"}}}))
        assert store.record("hand-strength")["completed"] is False
        assert store.warnings

    def test_reload_round_trip(self, summary_factory):
        persistence = MemoryPersistence()
        store = ProgressStore(persistence=persistence)
        pass_units(store, FOUNDATIONS, summary_factory)
        reloaded = ProgressStore(persistence=persistence)
        assert reloaded.document["groups"] == store.document["groups"]
        assert reloaded.is_unlocked("hand-ranking")


class TestMerge:
    """Test deep merge over defaults."""

    def test_stored_values_win(self):
        merged = deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 9}})
        assert merged == {"a": 1, "b": {"c": 9, "d": 3}}

    def test_new_units_get_defaults(self):
        stored = {
            "groups": {
                "foundations": {
                    "unlocked": True,
                    "units": {"hand-strength": {"unlocked": True, "completed": True, "best_score": 95}},
                }
            }
        }
        store = ProgressStore(persistence=MemoryPersistence(stored))
        assert store.is_completed("hand-strength")
        assert store.record("hand-strength")["best_score"] == 95
        assert store.record("position")["attempts"] == 0
        assert store.record("cold-4bet")["unlocked"] is False

    def test_defaults_not_mutated(self):
        defaults = {"a": {"b": 1}}
        deep_merge(defaults, {"a": {"b": 2}})
        assert defaults == {"a": {"b": 1}}


class TestMaintenance:
    """Test reset, export and import."""

    def test_reset(self, memory_store, summary_factory):
        pass_units(memory_store, FOUNDATIONS, summary_factory)
        assert memory_store.reset() == []
        assert memory_store.overall_progress() == 0
        assert not memory_store.is_group_unlocked("drills")

    def test_export_import(self, memory_store, summary_factory):
        pass_units(memory_store, FOUNDATIONS, summary_factory)
        exported = memory_store.export_json()

        other = ProgressStore(persistence=MemoryPersistence())
        assert other.import_json(exported) == []
        assert other.is_unlocked("hand-ranking")
        assert other.document["groups"] == memory_store.document["groups"]

    def test_import_rejects_bad_json(self, memory_store):
        with pytest.raises(PersistenceFailure):
            memory_store.import_json("{not json")
        with pytest.raises(PersistenceFailure):
            memory_store.import_json("[1, 2]")
        with pytest.raises(PersistenceFailure):
            memory_store.import_json(json.dumps({"groups": []}))

    def test_failed_import_leaves_progress(self, memory_store, summary_factory):
        pass_units(memory_store, ["hand-strength"], summary_factory)
        with pytest.raises(PersistenceFailure):
            memory_store.import_json("nope")
        assert memory_store.is_completed("hand-strength")


def single_group(*units, rules=()):
    """Curriculum with one open group holding `units`."""
    return Curriculum(groups=[GroupConfig(id="g", title="G", unlocked=True, units=list(units))], rules=list(rules))


class TestRuleEvaluation:
    """Rules are re-checked after every attempt and after loading."""

    @pytest.fixture
    def floor_store(self):
        curriculum = single_group(
            UnitConfig(id="a", title="A", unlocked=True, threshold=70),
            UnitConfig(id="b", title="B", unlocked=True, threshold=70),
            UnitConfig(id="c", title="C"),
            rules=[ThresholdCountRule(units=["a", "b"], count=2, min_score=85, unlock="c")],
        )
        return ProgressStore(persistence=MemoryPersistence(), curriculum=curriculum)

    def test_score_floor_above_pass_threshold(self, floor_store, summary_factory):
        store = floor_store
        pass_units(store, ["a", "b"], summary_factory, accuracy=75)
        assert store.is_completed("a") and store.is_completed("b")
        assert not store.is_unlocked("c")

        store.record_attempt("a", summary_factory("a", 90))
        assert not store.is_unlocked("c")
        change = store.record_attempt("b", summary_factory("b", 90))
        assert change.newly_unlocked == ["c"]
        assert change.newly_completed == []
        assert store.is_unlocked("c")

    def test_failed_attempt_cannot_raise_the_floor(self, floor_store, summary_factory):
        store = floor_store
        pass_units(store, ["a"], summary_factory, accuracy=90)
        store.record_attempt("b", summary_factory("b", 60))
        assert not store.is_unlocked("c")

    def test_new_unit_behind_completed_one_unlocks_on_load(self, summary_factory):
        persistence = MemoryPersistence()
        old = single_group(UnitConfig(id="a", title="A", unlocked=True))
        ProgressStore(persistence=persistence, curriculum=old).record_attempt("a", summary_factory("a", 100))

        new = single_group(
            UnitConfig(id="a", title="A", unlocked=True),
            UnitConfig(id="b", title="B"),
            rules=[LinearRule(units=["a", "b"])],
        )
        store = ProgressStore(persistence=persistence, curriculum=new)
        assert store.is_completed("a")
        assert store.is_unlocked("b")
        assert store.warnings == []
        assert persistence.load()["groups"]["g"]["units"]["b"]["unlocked"] is True

    def test_new_unit_behind_completed_one_unlocks_on_import(self, summary_factory):
        old_store = ProgressStore(
            persistence=MemoryPersistence(), curriculum=single_group(UnitConfig(id="a", title="A", unlocked=True))
        )
        old_store.record_attempt("a", summary_factory("a", 100))

        new = single_group(
            UnitConfig(id="a", title="A", unlocked=True),
            UnitConfig(id="b", title="B"),
            rules=[LinearRule(units=["a", "b"])],
        )
        store = ProgressStore(persistence=MemoryPersistence(), curriculum=new)
        assert not store.is_unlocked("b")
        assert store.import_json(old_store.export_json()) == []
        assert store.is_unlocked("b")

    def test_fresh_store_is_not_saved(self):
        class CountingPersistence(MemoryPersistence):
            saves = 0

            def save(self, document):
                self.saves += 1
                return super().save(document)

        persistence = CountingPersistence()
        ProgressStore(persistence=persistence)
        assert persistence.saves == 0


class TestStoredValues:
    """Records with wrongly typed fields are repaired, not fatal."""

    def test_bad_fields_fall_back_to_defaults(self, summary_factory):
        stored = {"groups": {"foundations": {"units": {"hand-strength": {"best_score": None, "attempts": "3"}}}}}
        store = ProgressStore(persistence=MemoryPersistence(stored))
        assert any("best_score" in w for w in store.warnings)

        record = store.record("hand-strength")
        assert record["best_score"] == 0
        assert record["attempts"] == 3

        store.record_attempt("hand-strength", summary_factory("hand-strength", 80))
        assert store.record("hand-strength")["attempts"] == 4
        assert store.is_completed("hand-strength")

    def test_other_fields_of_a_bad_record_survive(self):
        stored = {
            "groups": {
                "foundations": {
                    "units": {"hand-strength": {"completed": True, "best_score": 92, "best_streak": "many"}}
                }
            }
        }
        store = ProgressStore(persistence=MemoryPersistence(stored))
        record = store.record("hand-strength")
        assert record["completed"] is True
        assert record["best_score"] == 92
        assert record["best_streak"] == 0

    def test_bad_group_fields(self):
        stored = {"groups": {"foundations": {"attempts": -2, "achievements": "speed-demon"}}}
        store = ProgressStore(persistence=MemoryPersistence(stored))
        assert store.stats("foundations").attempts == 0
        assert store.achievements("foundations") == []
        assert len(store.warnings) == 1

    def test_unknown_fields_are_kept(self):
        stored = {"groups": {"foundations": {"units": {"hand-strength": {"note": "from a newer version"}}}}}
        store = ProgressStore(persistence=MemoryPersistence(stored))
        assert store.record("hand-strength")["note"] == "from a newer version"
        assert store.warnings == []

    def test_bad_lifetime_stats(self):
        store = ProgressStore(persistence=MemoryPersistence({"stats": 5}))
        assert store.lifetime_stats().sessions == 0
        assert store.warnings

    def test_import_repairs_and_reports(self, memory_store, summary_factory):
        stored = {"groups": {"foundations": {"units": {"hand-strength": {"completed": True, "attempts": None}}}}}
        warnings = memory_store.import_json(json.dumps(stored))
        assert any("attempts" in w for w in warnings)
        assert memory_store.record("hand-strength")["attempts"] == 0
        assert memory_store.is_completed("hand-strength")
        memory_store.record_attempt("hand-strength", summary_factory("hand-strength", 10))
        assert memory_store.record("hand-strength")["attempts"] == 1


class TestLifetimeStats:
    """Test the totals kept across every session."""

    def test_fresh(self, memory_store):
        stats = memory_store.lifetime_stats()
        assert stats.sessions == 0
        assert stats.accuracy == 0.0

    def test_totals(self, memory_store, summary_factory):
        store = memory_store
        store.record_attempt("hand-strength", summary_factory("hand-strength", 100, best_streak=20))
        store.record_attempt("position", summary_factory("position", 50, avg_time_ms=1000, best_streak=4))
        stats = store.lifetime_stats()
        assert stats.sessions == 2
        assert stats.questions == 40
        assert stats.correct == 30
        assert stats.accuracy == 75.0
        assert stats.total_time_ms == pytest.approx(3000 * 20 + 1000 * 20)
        assert stats.best_streak == 20

    def test_unknown_unit_not_counted(self, memory_store, summary_factory):
        memory_store.record_attempt("river-bluffs", summary_factory("river-bluffs", 100))
        assert memory_store.lifetime_stats().sessions == 0

    def test_reset_clears_totals(self, memory_store, summary_factory):
        memory_store.record_attempt("hand-strength", summary_factory("hand-strength", 100))
        memory_store.reset()
        assert memory_store.lifetime_stats().questions == 0

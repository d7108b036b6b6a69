"""
ProgressStore: unlock/completion state for every curriculum unit.

Document shape (one JSON object, owned by the store):

    {
      "version": 1,
      "groups": {
        "<group>": {
          "unlocked": bool, "completed": bool,
          "attempts": int, "achievements": [ids],
          "units": {
            "<unit>": {
              "unlocked", "completed", "best_score", "best_streak",
              "best_avg_time", "attempts", "last_attempt"
            }
          }
        }
      },
      "stats": {
        "sessions", "questions", "correct", "total_time_ms", "best_streak"
      },
      "last_updated": iso timestamp | null
    }

Per unit: locked -> unlocked -> completed, never backwards. A loaded
document is deep-merged over a fresh default tree, so units added to the
curriculum later get defaults without losing stored progress; the unlock
rules are then re-run so new units behind completed ones open up.
"""
from __future__ import annotations

import copy
import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterator, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config import get_settings
from src.core.errors import PersistenceFailure, UnknownUnit
from src.engine.base import SessionSummary
from src.progress.curriculum import (
    AllOfGroupRule,
    AvgTimeBelow,
    Curriculum,
    GroupCompleted,
    GroupConfig,
    LinearRule,
    PerfectAccuracy,
    StreakAtLeast,
    ThresholdCountRule,
    UnitConfig,
    UnitsBestScoreAtLeast,
    UnitsCompleted,
    UnlockRule,
    get_curriculum,
)
from src.progress.persistence import JsonFilePersistence, Persistence

DEFAULT_THRESHOLD = 70.0


@dataclass
class ProgressChange:
    """What one recorded attempt changed. Emitted to on_change listeners."""

    unit_id: Optional[str]
    passed: bool = False
    newly_unlocked: list[str] = field(default_factory=list)
    newly_completed: list[str] = field(default_factory=list)
    newly_unlocked_groups: list[str] = field(default_factory=list)
    newly_completed_groups: list[str] = field(default_factory=list)
    new_achievements: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def has_unlocks(self) -> bool:
        return bool(self.newly_unlocked or self.newly_unlocked_groups)


@dataclass(frozen=True)
class GroupStats:
    completed: int
    total: int
    attempts: int
    best_streak: int
    achievements: int


# =============================================================================
# Stored records
# =============================================================================


class _StoredRecord(BaseModel):
    # Keys this version does not know about are carried through untouched.
    model_config = ConfigDict(extra="allow")


class ProgressRecord(_StoredRecord):
    """One unit's stored progress."""

    unlocked: bool = False
    completed: bool = False
    best_score: float = Field(0, ge=0, le=100)
    best_streak: int = Field(0, ge=0)
    best_avg_time: Optional[float] = Field(None, gt=0)
    attempts: int = Field(0, ge=0)
    last_attempt: Optional[str] = None


class GroupRecord(_StoredRecord):
    unlocked: bool = False
    completed: bool = False
    attempts: int = Field(0, ge=0)
    achievements: list[str] = Field(default_factory=list)


class LifetimeStats(_StoredRecord):
    """Totals over every recorded session, whatever the unit."""

    sessions: int = Field(0, ge=0)
    questions: int = Field(0, ge=0)
    correct: int = Field(0, ge=0)
    total_time_ms: float = Field(0, ge=0)
    best_streak: int = Field(0, ge=0)

    @property
    def accuracy(self) -> float:
        if self.questions == 0:
            return 0.0
        return self.correct / self.questions * 100


def repair_record(
    model: type[_StoredRecord],
    raw: dict[str, Any],
    defaults: dict[str, Any],
    label: str,
    problems: list[str],
) -> dict[str, Any]:
    """
    Validate one stored record against `model`.

    Fields that fail validation are replaced by their value in `defaults`
    and reported in `problems`; valid fields (and unknown extras) are kept.
    """
    try:
        return model.model_validate(raw).model_dump()
    except ValidationError as e:
        bad = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        problems.append(f"Stored progress for {label} had invalid {', '.join(bad)}; reset to defaults")
        kept = {key: value for key, value in raw.items() if key not in bad}
        return model.model_validate({**defaults, **kept}).model_dump()


def deep_merge(defaults: dict[str, Any], stored: dict[str, Any]) -> dict[str, Any]:
    """Stored values over defaults. Dicts recurse; scalars and lists from `stored` win."""
    result = copy.deepcopy(defaults)
    for key, value in stored.items():
        if isinstance(value, dict):
            base = result.get(key)
            result[key] = deep_merge(base if isinstance(base, dict) else {}, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def _percent(done: int, total: int) -> int:
    """Integer percent, halves rounded up."""
    if total == 0:
        return 0
    return math.floor(done / total * 100 + 0.5)


class ProgressStore:
    """
    Records attempts and applies the curriculum's unlock rules.

    Persistence failures never raise out of the store: it falls back to
    defaults (on load) or keeps the in-memory state (on save), and reports
    the problem through `warnings` / ProgressChange.warnings.
    """

    def __init__(
        self,
        persistence: Optional[Persistence] = None,
        curriculum: Optional[Curriculum] = None,
        strict: Optional[bool] = None,
        on_change: Optional[Callable[[ProgressChange], None]] = None,
        now: Optional[Callable[[], str]] = None,
    ):
        settings = get_settings()
        self.persistence = persistence or JsonFilePersistence(settings.progress_path)
        self.curriculum = curriculum or get_curriculum()
        self.on_change = on_change
        self._strict = settings.strict_mode if strict is None else strict
        self._speed_demon_ms = settings.speed_demon_ms
        self._now = now or (lambda: datetime.now().isoformat())
        self.warnings: list[str] = []
        self.document = self._load()
        self._catch_up()

    # =========================================================================
    # Document lifecycle
    # =========================================================================

    def default_document(self) -> dict[str, Any]:
        return {
            "version": self.curriculum.version,
            "groups": {
                group.id: {
                    "unlocked": group.unlocked,
                    "completed": False,
                    "attempts": 0,
                    "achievements": [],
                    "units": {unit.id: self._default_record(unit) for unit in group.units},
                }
                for group in self.curriculum.groups
            },
            "stats": LifetimeStats().model_dump(),
            "last_updated": None,
        }

    @staticmethod
    def _default_record(unit: UnitConfig) -> dict[str, Any]:
        return {
            "unlocked": unit.unlocked,
            "completed": False,
            "best_score": 0,
            "best_streak": 0,
            "best_avg_time": None,
            "attempts": 0,
            "last_attempt": None,
        }

    def _load(self) -> dict[str, Any]:
        try:
            stored = self.persistence.load()
        except PersistenceFailure as e:
            self._warn(f"{e}; starting from default progress")
            return self.default_document()

        if stored is None:
            return self.default_document()

        merged = deep_merge(self.default_document(), stored)
        if not self._well_formed(merged):
            self._warn("Stored progress has an unexpected shape; starting from default progress")
            return self.default_document()
        for problem in self._repair(merged):
            self._warn(problem)
        return merged

    def _well_formed(self, document: dict[str, Any]) -> bool:
        """Structure check only; field values are checked by `_repair`."""
        groups = document.get("groups")
        if not isinstance(groups, dict):
            return False
        for group in self.curriculum.groups:
            group_doc = groups.get(group.id)
            if not isinstance(group_doc, dict) or not isinstance(group_doc.get("units"), dict):
                return False
            if not all(isinstance(group_doc["units"].get(u), dict) for u in group.unit_ids):
                return False
        return True

    def _repair(self, document: dict[str, Any]) -> list[str]:
        """Validate every curriculum record in place. Returns what had to be reset."""
        problems: list[str] = []
        defaults = self.default_document()

        for group in self.curriculum.groups:
            group_doc = document["groups"][group.id]
            default_group = defaults["groups"][group.id]
            units = group_doc["units"]
            for unit_id in group.unit_ids:
                units[unit_id] = repair_record(
                    ProgressRecord, units[unit_id], default_group["units"][unit_id], f"unit {unit_id}", problems
                )

            header = {key: value for key, value in group_doc.items() if key != "units"}
            default_header = {key: value for key, value in default_group.items() if key != "units"}
            repaired = repair_record(GroupRecord, header, default_header, f"stage {group.id}", problems)
            document["groups"][group.id] = {**repaired, "units": units}

        stats = document.get("stats")
        if not isinstance(stats, dict):
            problems.append("Stored lifetime stats were not an object; reset to defaults")
            stats = {}
        document["stats"] = repair_record(LifetimeStats, stats, defaults["stats"], "lifetime stats", problems)
        return problems

    def _catch_up(self) -> ProgressChange:
        """
        Re-run the unlock rules over the current document.

        Stored progress may predate the curriculum it is loaded into; a unit
        added behind an already-completed one would otherwise stay locked
        forever. Saves only when something actually moved.
        """
        change = ProgressChange(unit_id=None)
        self._apply_rules(change)
        if change.has_unlocks or change.newly_completed_groups:
            logger.info(
                f"Unlock rules caught up with stored progress: "
                f"{change.newly_unlocked + change.newly_unlocked_groups}"
            )
            self._save(change.warnings)
        return change

    def _save(self, warnings: list[str]) -> None:
        self.document["last_updated"] = self._now()
        try:
            if not self.persistence.save(self.document):
                warnings.append(self._warn("Progress could not be saved; keeping it in memory"))
        except PersistenceFailure as e:
            warnings.append(self._warn(f"{e}; keeping progress in memory"))

    def _warn(self, message: str) -> str:
        logger.warning(message)
        self.warnings.append(message)
        return message

    # =========================================================================
    # Lookups
    # =========================================================================

    def _group_for(self, unit_id: str) -> GroupConfig | None:
        group = self.curriculum.group_of(unit_id)
        if group is None:
            if self._strict:
                raise UnknownUnit(unit_id)
            logger.warning(f"Unknown curriculum unit {unit_id!r}; treating it as locked")
        return group

    def _group_doc(self, group_id: str) -> dict[str, Any]:
        return self.document["groups"][group_id]

    def _unit_doc(self, unit_id: str) -> dict[str, Any]:
        group = self.curriculum.group_of(unit_id)
        return self._group_doc(group.id)["units"][unit_id]

    def _completed(self, unit_id: str) -> bool:
        return bool(self._unit_doc(unit_id)["completed"])

    def _group_done(self, group: GroupConfig) -> bool:
        return bool(group.units) and all(self._completed(u) for u in group.unit_ids)

    def is_unlocked(self, unit_id: str) -> bool:
        """Unit and its group are both unlocked. Unknown units count as locked."""
        group = self._group_for(unit_id)
        if group is None:
            return False
        return bool(self._group_doc(group.id)["unlocked"] and self._unit_doc(unit_id)["unlocked"])

    def is_completed(self, unit_id: str) -> bool:
        if self._group_for(unit_id) is None:
            return False
        return self._completed(unit_id)

    def is_group_unlocked(self, group_id: str) -> bool:
        if self.curriculum.group(group_id) is None:
            return self._unknown_group(group_id, False)
        return bool(self._group_doc(group_id)["unlocked"])

    def is_group_completed(self, group_id: str) -> bool:
        if self.curriculum.group(group_id) is None:
            return self._unknown_group(group_id, False)
        return bool(self._group_doc(group_id)["completed"])

    def record(self, unit_id: str) -> dict[str, Any] | None:
        """Copy of a unit's progress record."""
        if self._group_for(unit_id) is None:
            return None
        return dict(self._unit_doc(unit_id))

    def threshold(self, unit_id: str) -> float:
        unit = self.curriculum.unit(unit_id)
        if unit is None:
            self._group_for(unit_id)
            return DEFAULT_THRESHOLD
        return unit.threshold

    def _unknown_group(self, group_id: str, fallback: Any) -> Any:
        if self._strict:
            raise UnknownUnit(group_id)
        logger.warning(f"Unknown curriculum group {group_id!r}")
        return fallback

    # =========================================================================
    # Recording
    # =========================================================================

    def record_attempt(self, unit_id: str, summary: SessionSummary) -> ProgressChange:
        """
        Fold one finished session into the unit's record.

        Bests only ever improve. The first passing attempt on an unlocked
        unit completes it. An attempt on a locked unit keeps its attempts
        and bests but never completes it, so completed always implies
        unlocked. The unlock rules run after every attempt, because a new
        best score can satisfy a threshold_count rule on a unit that was
        completed earlier. Achievements for the unit's group are checked
        on every attempt at an unlocked unit.
        """
        change = ProgressChange(unit_id=unit_id)
        group = self._group_for(unit_id)
        if group is None:
            change.warnings.append(f"Unknown curriculum unit {unit_id!r}; attempt not recorded")
            return change

        unit = self.curriculum.unit(unit_id)
        unlocked = self.is_unlocked(unit_id)
        record = self._unit_doc(unit_id)
        group_doc = self._group_doc(group.id)

        record["attempts"] += 1
        record["last_attempt"] = self._now()
        group_doc["attempts"] += 1

        if summary.accuracy > record["best_score"]:
            record["best_score"] = summary.accuracy
        if summary.best_streak > record["best_streak"]:
            record["best_streak"] = summary.best_streak
        if summary.avg_time_ms and (record["best_avg_time"] is None or summary.avg_time_ms < record["best_avg_time"]):
            record["best_avg_time"] = summary.avg_time_ms
        self._add_to_lifetime(summary)

        if not unlocked:
            change.warnings.append(self._warn(f"{unit_id} is locked; attempt stored without completing it"))
        else:
            change.passed = summary.accuracy >= unit.threshold
            if change.passed and not record["completed"]:
                record["completed"] = True
                change.newly_completed.append(unit_id)
                logger.info(f"Completed {unit_id} ({summary.accuracy:.0f}%)")

        self._apply_rules(change)
        if unlocked:
            self._award_achievements(group, summary, change)
        self._save(change.warnings)

        if self.on_change:
            self.on_change(change)
        return change

    def _add_to_lifetime(self, summary: SessionSummary) -> None:
        stats = self.document["stats"]
        stats["sessions"] += 1
        stats["questions"] += summary.answered
        stats["correct"] += summary.correct
        stats["total_time_ms"] += summary.avg_time_ms * summary.answered
        stats["best_streak"] = max(stats["best_streak"], summary.best_streak)

    def _apply_rules(self, change: ProgressChange) -> None:
        """Run every unlock rule until a full pass changes nothing."""
        changed = True
        while changed:
            changed = False
            for group in self.curriculum.groups:
                group_doc = self._group_doc(group.id)
                if not group_doc["completed"] and self._group_done(group):
                    group_doc["completed"] = True
                    change.newly_completed_groups.append(group.id)
                    logger.info(f"Completed stage {group.id}")
                    changed = True

            for rule in self.curriculum.rules:
                for kind, target in self._rule_targets(rule):
                    if self._unlock(kind, target, change):
                        changed = True

    def _rule_targets(self, rule: UnlockRule) -> Iterator[tuple[str, str]]:
        if isinstance(rule, LinearRule):
            for current, following in zip(rule.units, rule.units[1:]):
                if self._completed(current):
                    yield "unit", following

        elif isinstance(rule, AllOfGroupRule):
            if self._group_done(self.curriculum.group(rule.group)):
                if rule.unlock_group:
                    yield "group", rule.unlock_group
                for unit_id in rule.unlock_units:
                    yield "unit", unit_id

        elif isinstance(rule, ThresholdCountRule):
            qualifying = sum(
                1
                for unit_id in rule.units
                if self._completed(unit_id) and self._unit_doc(unit_id)["best_score"] >= rule.min_score
            )
            if qualifying >= rule.count:
                yield "unit", rule.unlock

    def _unlock(self, kind: str, target: str, change: ProgressChange) -> bool:
        doc = self._group_doc(target) if kind == "group" else self._unit_doc(target)
        if doc["unlocked"]:
            return False
        doc["unlocked"] = True
        if kind == "group":
            change.newly_unlocked_groups.append(target)
        else:
            change.newly_unlocked.append(target)
        logger.info(f"Unlocked {kind} {target}")
        return True

    def _award_achievements(self, group: GroupConfig, summary: SessionSummary, change: ProgressChange) -> None:
        earned = self._group_doc(group.id)["achievements"]
        for achievement in self.curriculum.achievements:
            if achievement.group != group.id or achievement.id in earned:
                continue
            if self._achievement_met(achievement, summary, change.passed):
                earned.append(achievement.id)
                change.new_achievements.append(achievement.id)
                logger.info(f"Achievement unlocked: {achievement.id}")

    def _achievement_met(self, achievement: Any, summary: SessionSummary, passed: bool) -> bool:
        if isinstance(achievement, AvgTimeBelow):
            limit = achievement.ms or self._speed_demon_ms
            return passed and summary.answered > 0 and 0 < summary.avg_time_ms < limit
        if isinstance(achievement, PerfectAccuracy):
            return summary.accuracy >= 100
        if isinstance(achievement, StreakAtLeast):
            return summary.best_streak >= achievement.n
        if isinstance(achievement, GroupCompleted):
            return self._group_done(self.curriculum.group(achievement.group))
        if isinstance(achievement, UnitsCompleted):
            return all(self._completed(u) for u in achievement.units)
        if isinstance(achievement, UnitsBestScoreAtLeast):
            return all(self._unit_doc(u)["best_score"] >= achievement.score for u in achievement.units)
        return False

    # =========================================================================
    # Summaries
    # =========================================================================

    def stats(self, group_id: str) -> GroupStats:
        group = self.curriculum.group(group_id)
        if group is None:
            return self._unknown_group(group_id, GroupStats(0, 0, 0, 0, 0))

        group_doc = self._group_doc(group_id)
        records = [group_doc["units"][u] for u in group.unit_ids]
        return GroupStats(
            completed=sum(1 for r in records if r["completed"]),
            total=len(records),
            attempts=group_doc["attempts"],
            best_streak=max((r["best_streak"] for r in records), default=0),
            achievements=len(group_doc["achievements"]),
        )

    def current_unit(self, group_id: str) -> str | None:
        """First unlocked, incomplete unit; else the first unlocked one; else the first."""
        group = self.curriculum.group(group_id)
        if group is None:
            return self._unknown_group(group_id, None)
        if not group.units:
            return None

        units = self._group_doc(group_id)["units"]
        for unit_id in group.unit_ids:
            if units[unit_id]["unlocked"] and not units[unit_id]["completed"]:
                return unit_id
        for unit_id in group.unit_ids:
            if units[unit_id]["unlocked"]:
                return unit_id
        return group.unit_ids[0]

    def overall_progress(self) -> int:
        unit_ids = self.curriculum.unit_ids
        return _percent(sum(1 for u in unit_ids if self._completed(u)), len(unit_ids))

    def group_progress(self, group_id: str) -> int:
        group = self.curriculum.group(group_id)
        if group is None:
            return self._unknown_group(group_id, 0)
        return _percent(sum(1 for u in group.unit_ids if self._completed(u)), len(group.units))

    def lifetime_stats(self) -> LifetimeStats:
        return LifetimeStats.model_validate(self.document["stats"])

    def achievements(self, group_id: str | None = None) -> list[str]:
        if group_id is not None:
            if self.curriculum.group(group_id) is None:
                return self._unknown_group(group_id, [])
            return list(self._group_doc(group_id)["achievements"])
        return [a for g in self.curriculum.group_ids for a in self._group_doc(g)["achievements"]]

    # =========================================================================
    # Maintenance
    # =========================================================================

    def reset(self) -> list[str]:
        """Back to a fresh document. Returns any save warnings."""
        warnings: list[str] = []
        self.document = self.default_document()
        self._save(warnings)
        logger.info("Progress reset")
        return warnings

    def export_json(self) -> str:
        return json.dumps(self.document, indent=2)

    def import_json(self, text: str) -> list[str]:
        """
        Replace progress with an exported document (deep-merged over defaults).

        Raises PersistenceFailure if the text is not a JSON object of the
        expected shape; the current progress is left untouched in that case.
        Fields with invalid values fall back to their defaults and are
        reported in the returned warnings. The unlock rules are re-run over
        the imported progress before it is saved.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise PersistenceFailure(f"Cannot import progress: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceFailure("Cannot import progress: expected a JSON object")

        merged = deep_merge(self.default_document(), data)
        if not self._well_formed(merged):
            raise PersistenceFailure("Cannot import progress: unexpected document shape")

        warnings = [self._warn(problem) for problem in self._repair(merged)]
        self.document = merged
        self._apply_rules(ProgressChange(unit_id=None))
        self._save(warnings)
        return warnings

"""
Curriculum configuration: stages, units, unlock rules and achievements.

Everything the progress store needs to know about the course lives here as
data. Rules and achievements are pydantic discriminated unions on `kind`,
so a curriculum JSON file can add units or change the gating without code
changes.

Rule kinds:
- linear: completing units[i] unlocks units[i+1]
- all_of_group: completing every unit in a group unlocks another group
  (and optionally specific units)
- threshold_count: `count` of `units` completed at >= `min_score` unlocks
  one more unit
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal, Optional, Union

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, model_validator

from config import get_settings
from src.core.errors import PersistenceFailure


# =============================================================================
# Units and groups
# =============================================================================


class UnitConfig(BaseModel):
    """One content unit (module, drill or scenario)."""

    id: str
    title: str
    unlocked: bool = Field(False, description="Unlocked state in a fresh progress document")
    threshold: float = Field(70.0, ge=0, le=100, description="Pass threshold (percent)")
    timed: bool = Field(False, description="Track best average answer time")
    questions: Optional[int] = Field(None, gt=0, description="Session length; None keeps the drill default")


class GroupConfig(BaseModel):
    """A stage of the course. Units are listed in teaching order."""

    id: str
    title: str
    unlocked: bool = False
    units: list[UnitConfig] = Field(default_factory=list)

    @property
    def unit_ids(self) -> list[str]:
        return [unit.id for unit in self.units]


# =============================================================================
# Unlock rules
# =============================================================================


class LinearRule(BaseModel):
    kind: Literal["linear"] = "linear"
    units: list[str]


class AllOfGroupRule(BaseModel):
    kind: Literal["all_of_group"] = "all_of_group"
    group: str
    unlock_group: Optional[str] = None
    unlock_units: list[str] = Field(default_factory=list)


class ThresholdCountRule(BaseModel):
    kind: Literal["threshold_count"] = "threshold_count"
    units: list[str]
    count: int = Field(..., ge=1)
    min_score: float = Field(..., ge=0, le=100)
    unlock: str


UnlockRule = Annotated[
    Union[LinearRule, AllOfGroupRule, ThresholdCountRule],
    Field(discriminator="kind"),
]


# =============================================================================
# Achievements
# =============================================================================


class _AchievementBase(BaseModel):
    id: str
    title: str
    description: str = ""
    group: str = Field(..., description="Only attempts on this group's units can earn it")


class AvgTimeBelow(_AchievementBase):
    """Passing attempt with an average answer time under `ms`."""

    kind: Literal["avg_time_below"] = "avg_time_below"
    ms: Optional[float] = Field(None, gt=0, description="Defaults to settings.speed_demon_ms")


class PerfectAccuracy(_AchievementBase):
    kind: Literal["perfect_accuracy"] = "perfect_accuracy"


class StreakAtLeast(_AchievementBase):
    kind: Literal["streak_at_least"] = "streak_at_least"
    n: int = Field(..., ge=1)


class GroupCompleted(_AchievementBase):
    """Every unit of `group` completed."""

    kind: Literal["group_completed"] = "group_completed"


class UnitsCompleted(_AchievementBase):
    kind: Literal["units_completed"] = "units_completed"
    units: list[str]


class UnitsBestScoreAtLeast(_AchievementBase):
    kind: Literal["units_best_score_at_least"] = "units_best_score_at_least"
    units: list[str]
    score: float = Field(..., ge=0, le=100)


Achievement = Annotated[
    Union[
        AvgTimeBelow,
        PerfectAccuracy,
        StreakAtLeast,
        GroupCompleted,
        UnitsCompleted,
        UnitsBestScoreAtLeast,
    ],
    Field(discriminator="kind"),
]


# =============================================================================
# Curriculum
# =============================================================================


class Curriculum(BaseModel):
    version: int = 1
    groups: list[GroupConfig]
    rules: list[UnlockRule] = Field(default_factory=list)
    achievements: list[Achievement] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_references(self) -> "Curriculum":
        group_ids = [g.id for g in self.groups]
        unit_ids = [u.id for g in self.groups for u in g.units]
        if len(set(group_ids)) != len(group_ids):
            raise ValueError("duplicate group id in curriculum")
        if len(set(unit_ids)) != len(unit_ids):
            raise ValueError("duplicate unit id in curriculum")

        known_units, known_groups = set(unit_ids), set(group_ids)
        for rule in self.rules:
            if isinstance(rule, LinearRule):
                referenced_units, referenced_groups = rule.units, []
            elif isinstance(rule, AllOfGroupRule):
                referenced_units = rule.unlock_units
                referenced_groups = [rule.group] + ([rule.unlock_group] if rule.unlock_group else [])
            else:
                referenced_units, referenced_groups = rule.units + [rule.unlock], []
            missing = [u for u in referenced_units if u not in known_units]
            missing += [g for g in referenced_groups if g not in known_groups]
            if missing:
                raise ValueError(f"{rule.kind} rule references unknown ids: {missing}")

        for achievement in self.achievements:
            if achievement.group not in known_groups:
                raise ValueError(f"achievement {achievement.id} belongs to unknown group {achievement.group}")
        return self

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @property
    def group_ids(self) -> list[str]:
        return [g.id for g in self.groups]

    @property
    def unit_ids(self) -> list[str]:
        return [u.id for g in self.groups for u in g.units]

    def group(self, group_id: str) -> GroupConfig | None:
        return next((g for g in self.groups if g.id == group_id), None)

    def unit(self, unit_id: str) -> UnitConfig | None:
        for group in self.groups:
            for unit in group.units:
                if unit.id == unit_id:
                    return unit
        return None

    def group_of(self, unit_id: str) -> GroupConfig | None:
        return next((g for g in self.groups if unit_id in g.unit_ids), None)


# =============================================================================
# Built-in course
# =============================================================================

TIER_1_SCENARIOS = ["defend-3bet", "bb-defense", "3bet-value", "sb-3bet-fold"]

DEFAULT_CURRICULUM = Curriculum(
    groups=[
        GroupConfig(
            id="foundations",
            title="Foundations",
            unlocked=True,
            units=[
                UnitConfig(id="hand-strength", title="Hand Strength", unlocked=True),
                UnitConfig(id="position", title="Position"),
                UnitConfig(id="equity", title="Equity"),
                UnitConfig(id="ranges", title="Ranges"),
            ],
        ),
        GroupConfig(
            id="drills",
            title="Speed Drills",
            units=[
                UnitConfig(id="hand-ranking", title="Hand Ranking Speed", unlocked=True, threshold=80, timed=True),
                UnitConfig(id="open-fold", title="Open or Fold", threshold=75, timed=True),
                UnitConfig(id="equity-snap", title="Equity Snap", threshold=70, timed=True),
                UnitConfig(id="range-check", title="Range Check", threshold=75, timed=True),
                UnitConfig(id="position-speed", title="Position Speed", threshold=80, timed=True),
            ],
        ),
        GroupConfig(
            id="scenarios",
            title="Scenarios",
            units=[
                # Tier 1: high consensus, open as soon as the stage opens
                UnitConfig(id="defend-3bet", title="Defend vs 3-Bet", unlocked=True, threshold=75),
                UnitConfig(id="bb-defense", title="BB Defense", unlocked=True, threshold=75),
                UnitConfig(id="3bet-value", title="3-Bet for Value", unlocked=True, threshold=75),
                UnitConfig(id="sb-3bet-fold", title="SB: 3-Bet or Fold", unlocked=True, threshold=75),
                # Tier 2: needs two tier 1 scenarios at 75%+
                UnitConfig(id="cold-4bet", title="Cold 4-Bet Spots", threshold=70),
                # Tier 3: heuristic, always available
                UnitConfig(id="board-texture", title="Board Texture", unlocked=True, threshold=80),
            ],
        ),
        GroupConfig(id="full-hands", title="Full Hands"),
    ],
    rules=[
        LinearRule(units=["hand-strength", "position", "equity", "ranges"]),
        AllOfGroupRule(group="foundations", unlock_group="drills"),
        LinearRule(units=["hand-ranking", "open-fold", "equity-snap", "range-check", "position-speed"]),
        AllOfGroupRule(group="drills", unlock_group="scenarios"),
        ThresholdCountRule(units=TIER_1_SCENARIOS, count=2, min_score=75, unlock="cold-4bet"),
        AllOfGroupRule(group="scenarios", unlock_group="full-hands"),
    ],
    achievements=[
        AvgTimeBelow(id="speed-demon", title="Speed Demon", description="Average under 2s per question", group="drills"),
        PerfectAccuracy(id="perfect-run", title="Perfect Run", description="100% on a drill", group="drills"),
        StreakAtLeast(id="on-fire", title="On Fire", description="25 correct in a row", group="drills", n=25),
        GroupCompleted(id="drill-master", title="Drill Master", description="Complete every drill", group="drills"),
        PerfectAccuracy(
            id="perfect-decisions", title="Perfect Decisions", description="100% on any scenario", group="scenarios"
        ),
        GroupCompleted(
            id="scenario-solver", title="Scenario Solver", description="Complete every scenario", group="scenarios"
        ),
        UnitsCompleted(
            id="preflop-master",
            title="Preflop Master",
            description="Complete all five preflop scenarios",
            group="scenarios",
            units=TIER_1_SCENARIOS + ["cold-4bet"],
        ),
        UnitsBestScoreAtLeast(
            id="3bet-specialist",
            title="3-Bet Specialist",
            description="85%+ on both 3-bet scenarios",
            group="scenarios",
            units=["3bet-value", "sb-3bet-fold"],
            score=85,
        ),
        UnitsBestScoreAtLeast(
            id="defender",
            title="Defender",
            description="85%+ on both defense scenarios",
            group="scenarios",
            units=["defend-3bet", "bb-defense"],
            score=85,
        ),
    ],
)


def load_curriculum(path: Path | str) -> Curriculum:
    """Read and validate a curriculum JSON file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise PersistenceFailure(f"Cannot read curriculum {path}: {e}", path=path) from e
    try:
        return Curriculum.model_validate(data)
    except ValidationError as e:
        raise PersistenceFailure(f"Invalid curriculum {path}: {e}", path=path) from e


@lru_cache(maxsize=1)
def get_curriculum() -> Curriculum:
    """Curriculum from settings.curriculum_file, else the built-in course."""
    curriculum_file = get_settings().curriculum_file
    if curriculum_file:
        logger.debug(f"Loading curriculum from {curriculum_file}")
        return load_curriculum(curriculum_file)
    return DEFAULT_CURRICULUM

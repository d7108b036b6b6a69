"""
TutorService: the seam between drill sessions and learner progress.

Renderers (the CLI, tests) go through this service to:
- list units with their lock/completion state
- start a drill session for an unlocked unit
- have finished sessions recorded into the ProgressStore
- score range-builder submissions (the `ranges` foundations unit)
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from loguru import logger

from config import get_settings
from src.core.errors import UnitLocked, UnknownUnit
from src.drills import get_drill
from src.engine.base import DrillHandler, EngineEvents, SessionSummary
from src.engine.drill_engine import DrillEngine
from src.hands.hand import Hand
from src.ranges.algebra import RangeDifference, difference, similarity
from src.ranges.opening import opening_range
from src.progress.store import ProgressChange, ProgressStore

RANGE_BUILDER_UNIT = "ranges"
RANGE_BUILDER_TARGET = "BTN"


@dataclass(frozen=True)
class UnitStatus:
    unit_id: str
    title: str
    group: str
    unlocked: bool
    completed: bool
    threshold: float
    best_score: float
    best_streak: int
    best_avg_time: Optional[float]
    attempts: int
    timed: bool


@dataclass
class DrillSession:
    """A running drill plus the progress change recorded when it ends."""

    handler: DrillHandler
    engine: DrillEngine
    change: Optional[ProgressChange] = None

    @property
    def unit_id(self) -> str:
        return self.handler.unit_id


@dataclass(frozen=True)
class RangeBuildResult:
    position: str
    similarity: float
    difference: RangeDifference
    passed: bool
    change: Optional[ProgressChange] = field(default=None, compare=False)


class TutorService:
    """Coordinates curriculum state and drill sessions for one learner."""

    def __init__(
        self,
        store: Optional[ProgressStore] = None,
        seed: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.store = store or ProgressStore()
        self._seed = get_settings().rng_seed if seed is None else seed
        self._clock = clock

    # =========================================================================
    # Curriculum view
    # =========================================================================

    def units(self, group_id: str) -> list[UnitStatus]:
        group = self.store.curriculum.group(group_id)
        if group is None:
            raise UnknownUnit(group_id)

        statuses = []
        for unit in group.units:
            record = self.store.record(unit.id) or {}
            statuses.append(
                UnitStatus(
                    unit_id=unit.id,
                    title=unit.title,
                    group=group.id,
                    unlocked=self.store.is_unlocked(unit.id),
                    completed=self.store.is_completed(unit.id),
                    threshold=unit.threshold,
                    best_score=record.get("best_score", 0),
                    best_streak=record.get("best_streak", 0),
                    best_avg_time=record.get("best_avg_time"),
                    attempts=record.get("attempts", 0),
                    timed=unit.timed,
                )
            )
        return statuses

    # =========================================================================
    # Drill sessions
    # =========================================================================

    def start_drill(
        self,
        unit_id: str,
        total_questions: Optional[int] = None,
        events: Optional[EngineEvents] = None,
        seed: Optional[int] = None,
    ) -> DrillSession:
        """
        Build an engine for an unlocked drill and wire its end event into the store.

        Raises UnknownUnit if no drill handler exists for `unit_id` and
        UnitLocked if the learner has not reached it yet.
        """
        handler = get_drill(unit_id)
        if handler is None:
            raise UnknownUnit(unit_id)
        if not self.store.is_unlocked(handler.unit_id):
            raise UnitLocked(handler.unit_id)

        events = events or EngineEvents()
        seed = self._seed if seed is None else seed
        unit = self.store.curriculum.unit(handler.unit_id)
        if total_questions is None and unit is not None:
            total_questions = unit.questions
        engine_kwargs = {"rng": random.Random(seed)}
        if self._clock is not None:
            engine_kwargs["clock"] = self._clock

        session_events = EngineEvents(
            on_question_ready=events.on_question_ready,
            on_answer_result=events.on_answer_result,
        )
        engine = DrillEngine.for_handler(
            handler,
            pass_threshold=self.store.threshold(handler.unit_id),
            total_questions=total_questions,
            events=session_events,
            **engine_kwargs,
        )
        session = DrillSession(handler=handler, engine=engine)

        def on_session_end(summary: SessionSummary) -> None:
            session.change = self.store.record_attempt(handler.unit_id, summary)
            if events.on_session_end:
                events.on_session_end(summary)

        session_events.on_session_end = on_session_end
        logger.debug(f"Starting {handler.unit_id} (seed={seed})")
        return session

    # =========================================================================
    # Range builder
    # =========================================================================

    def build_range(
        self,
        hands: Iterable[str | Hand],
        position: str = RANGE_BUILDER_TARGET,
    ) -> RangeBuildResult:
        """
        Score a hand-picked opening range against a position's reference.

        Only the button exercise counts toward the `ranges` unit; other
        positions are practice and leave progress untouched.
        """
        position = position.upper()
        reference = opening_range(position)
        hands = list(hands)
        score = similarity(hands, reference)
        threshold = self.store.threshold(RANGE_BUILDER_UNIT)
        passed = score >= threshold

        change = None
        if position == RANGE_BUILDER_TARGET:
            if not self.store.is_unlocked(RANGE_BUILDER_UNIT):
                raise UnitLocked(RANGE_BUILDER_UNIT)
            summary = SessionSummary(
                unit_id=RANGE_BUILDER_UNIT,
                total_questions=1,
                answered=1,
                correct=int(passed),
                accuracy=score,
                avg_time_ms=0.0,
                fastest_time_ms=0.0,
                best_streak=0,
                passed=passed,
                pass_threshold=threshold,
            )
            change = self.store.record_attempt(RANGE_BUILDER_UNIT, summary)

        return RangeBuildResult(
            position=position,
            similarity=score,
            difference=difference(hands, reference),
            passed=passed,
            change=change,
        )

"""
DrillEngine: fixed-length, timed question/answer state machine.

States:
    idle -> question_ready -> answered -> question_ready -> ... -> ended
                       \\____________ stop() ____________/-> stopped

The engine is synchronous and request/response: submit_answer() scores the
pending question, next_question() advances. There is no auto-advance; any
delay between the two is a renderer concern.

Calls made in the wrong state (a second submit for the same question,
next before answering) are rejected: in strict mode they raise
InvalidStateTransition, otherwise they are logged and return None.
"""
from __future__ import annotations

import random
import time
from typing import Any, Callable, Optional

from loguru import logger

from config import get_settings
from src.core.errors import InvalidStateTransition
from src.engine.base import (
    DEFAULT_CATEGORY,
    AnswerRecord,
    AnswerResult,
    AnswerValidator,
    CategoryStats,
    DrillHandler,
    EngineEvents,
    EngineState,
    Explainer,
    Question,
    QuestionGenerator,
    QuestionReady,
    RunningStats,
    SessionSummary,
    SessionView,
)


class DrillEngine:
    """Drives one learner session. One instance per session; no shared state."""

    def __init__(
        self,
        unit_id: str,
        total_questions: int,
        generate_question: QuestionGenerator,
        validate_answer: AnswerValidator,
        explain: Optional[Explainer] = None,
        pass_threshold: float = 70.0,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        events: Optional[EngineEvents] = None,
        strict: Optional[bool] = None,
    ):
        if total_questions <= 0:
            raise ValueError(f"total_questions must be positive, got {total_questions}")

        self.unit_id = unit_id
        self.total_questions = total_questions
        self.pass_threshold = pass_threshold
        self._generate = generate_question
        self._validate = validate_answer
        self._explain = explain
        self._clock = clock
        self._rng = rng or random.Random()
        self._events = events or EngineEvents()
        self._strict = get_settings().strict_mode if strict is None else strict

        self._state = EngineState.IDLE
        self._summary: SessionSummary | None = None
        self._reset()

    @classmethod
    def for_handler(
        cls,
        handler: DrillHandler,
        pass_threshold: float,
        total_questions: int | None = None,
        **kwargs: Any,
    ) -> "DrillEngine":
        """Build an engine around a registered drill handler."""
        return cls(
            unit_id=handler.unit_id,
            total_questions=total_questions or handler.total_questions,
            generate_question=handler.generate,
            validate_answer=handler.validate,
            explain=handler.explain,
            pass_threshold=pass_threshold,
            **kwargs,
        )

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state in (EngineState.QUESTION_READY, EngineState.ANSWERED)

    @property
    def question_number(self) -> int:
        return self._question_number

    @property
    def current_question(self) -> Question | None:
        return self._current

    @property
    def answers(self) -> tuple[AnswerRecord, ...]:
        return tuple(self._answers)

    @property
    def category_stats(self) -> dict[str, CategoryStats]:
        return {k: CategoryStats(v.total, v.correct) for k, v in self._category_stats.items()}

    @property
    def summary(self) -> SessionSummary | None:
        """Final summary once ended or stopped."""
        return self._summary

    def snapshot(self) -> RunningStats:
        return RunningStats(
            current_question=self._question_number,
            total_questions=self.total_questions,
            answered=len(self._answers),
            correct=self._correct,
            streak=self._streak,
            best_streak=self._best_streak,
        )

    # =========================================================================
    # Transitions
    # =========================================================================

    def start(self) -> Question:
        """Reset counters and present question 1."""
        if self.is_active:
            self._reject("start")
            logger.info(f"{self.unit_id}: restarting active session")

        self._reset()
        self._summary = None
        logger.debug(f"{self.unit_id}: session started ({self.total_questions} questions)")
        return self._present_next()

    def submit_answer(self, answer: Any) -> AnswerResult | None:
        """Score the pending question. Returns None if no question is pending."""
        if self._state is not EngineState.QUESTION_READY or self._current is None:
            return self._reject("submit an answer")

        elapsed_ms = max(0.0, (self._clock() - self._shown_at) * 1000)
        question = self._current
        validation = self._validate(answer, question)

        if validation.correct:
            self._correct += 1
            self._streak += 1
            self._best_streak = max(self._best_streak, self._streak)
        else:
            self._streak = 0

        bucket = self._category_stats.setdefault(question.category or DEFAULT_CATEGORY, CategoryStats())
        bucket.total += 1
        if validation.correct:
            bucket.correct += 1

        explanation = self._explain(question, validation) if self._explain else None

        self._answers.append(
            AnswerRecord(
                question_number=self._question_number,
                question=question,
                player_answer=answer,
                correct_answer=validation.correct_answer,
                correct=validation.correct,
                elapsed_ms=elapsed_ms,
                explanation=explanation,
            )
        )
        self._state = EngineState.ANSWERED

        result = AnswerResult(
            correct=validation.correct,
            player_answer=answer,
            correct_answer=validation.correct_answer,
            elapsed_ms=elapsed_ms,
            stats=self.snapshot(),
            explanation=explanation,
        )
        if self._events.on_answer_result:
            self._events.on_answer_result(result)
        return result

    def next_question(self) -> SessionSummary | None:
        """
        Advance after an answer.

        Returns the final SessionSummary when the last question has been
        answered, otherwise None (the next question is now current).
        """
        if self._state is not EngineState.ANSWERED:
            return self._reject("advance")

        if self._question_number >= self.total_questions:
            return self._finish(stopped=False)

        self._present_next()
        return None

    def stop(self) -> SessionSummary:
        """Learner quit. Halts the session without a pass/fail verdict."""
        if self._summary is not None:
            return self._summary
        return self._finish(stopped=True)

    # =========================================================================
    # Internals
    # =========================================================================

    def _reset(self) -> None:
        self._question_number = 0
        self._correct = 0
        self._streak = 0
        self._best_streak = 0
        self._current: Question | None = None
        self._shown_at = 0.0
        self._answers: list[AnswerRecord] = []
        self._category_stats: dict[str, CategoryStats] = {}

    def _present_next(self) -> Question:
        self._question_number += 1
        view = SessionView(
            question_number=self._question_number,
            total_questions=self.total_questions,
            correct=self._correct,
            answered=len(self._answers),
            previous=self._current,
        )
        self._current = self._generate(view, self._rng)
        self._shown_at = self._clock()
        self._state = EngineState.QUESTION_READY

        if self._events.on_question_ready:
            self._events.on_question_ready(
                QuestionReady(self._question_number, self.total_questions, self._current)
            )
        return self._current

    def _finish(self, stopped: bool) -> SessionSummary:
        times = [a.elapsed_ms for a in self._answers]
        accuracy = self._correct / self.total_questions * 100

        summary = SessionSummary(
            unit_id=self.unit_id,
            total_questions=self.total_questions,
            answered=len(self._answers),
            correct=self._correct,
            accuracy=accuracy,
            avg_time_ms=sum(times) / len(times) if times else 0.0,
            fastest_time_ms=min(times) if times else 0.0,
            best_streak=self._best_streak,
            passed=None if stopped else accuracy >= self.pass_threshold,
            stopped=stopped,
            pass_threshold=self.pass_threshold,
            category_stats=self.category_stats,
            answers=list(self._answers),
        )
        self._summary = summary
        self._state = EngineState.STOPPED if stopped else EngineState.ENDED
        self._current = None

        logger.debug(
            f"{self.unit_id}: session {self._state.value} "
            f"({summary.correct}/{summary.total_questions}, {summary.accuracy:.1f}%)"
        )
        if not stopped and self._events.on_session_end:
            self._events.on_session_end(summary)
        return summary

    def _reject(self, action: str) -> None:
        if self._strict:
            raise InvalidStateTransition(self._state.value, action)
        logger.warning(f"{self.unit_id}: ignored attempt to {action} while {self._state.value}")
        return None

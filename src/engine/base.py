"""
Contracts and records for the drill engine.

A drill plugs into the engine through three callables:
- generate(view, rng) -> Question
- validate(answer, question) -> Validation
- explain(question, validation) -> str   (cosmetic, never scored)

Everything the engine hands back to callers is plain data so renderers
(CLI, tests, a future web front end) own no logic.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Protocol

DEFAULT_CATEGORY = "default"


class EngineState(str, Enum):
    IDLE = "idle"
    QUESTION_READY = "question_ready"
    ANSWERED = "answered"
    ENDED = "ended"
    STOPPED = "stopped"


@dataclass(frozen=True)
class Question:
    """One generated question. `category` is an opaque grouping key."""
    category: str
    prompt: str
    options: tuple[str, ...] = ()
    payload: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Validation:
    correct: bool
    correct_answer: str


@dataclass(frozen=True)
class AnswerRecord:
    """Immutable log entry for one answered question."""
    question_number: int
    question: Question
    player_answer: Any
    correct_answer: str
    correct: bool
    elapsed_ms: float
    explanation: str | None = None


@dataclass
class CategoryStats:
    total: int = 0
    correct: int = 0

    @property
    def accuracy(self) -> float:
        if self.total == 0:
            return 0.0
        return self.correct / self.total * 100


@dataclass(frozen=True)
class SessionView:
    """Read-only state handed to question generators."""
    question_number: int
    total_questions: int
    correct: int
    answered: int
    previous: Optional[Question] = None


@dataclass(frozen=True)
class RunningStats:
    current_question: int
    total_questions: int
    answered: int
    correct: int
    streak: int
    best_streak: int

    @property
    def accuracy(self) -> float:
        """Accuracy over answered questions so far."""
        if self.answered == 0:
            return 0.0
        return self.correct / self.answered * 100


@dataclass(frozen=True)
class QuestionReady:
    question_number: int
    total_questions: int
    question: Question


@dataclass(frozen=True)
class AnswerResult:
    """Returned by submit_answer."""
    correct: bool
    player_answer: Any
    correct_answer: str
    elapsed_ms: float
    stats: RunningStats
    explanation: str | None = None


@dataclass
class SessionSummary:
    """Terminal statistics for one engine run (ended or stopped)."""

    unit_id: str
    total_questions: int
    answered: int
    correct: int
    accuracy: float
    avg_time_ms: float
    fastest_time_ms: float
    best_streak: int
    passed: bool | None
    stopped: bool = False
    pass_threshold: float | None = None
    category_stats: dict[str, CategoryStats] = field(default_factory=dict)
    answers: list[AnswerRecord] = field(default_factory=list)


@dataclass
class EngineEvents:
    """Optional outward notifications. Any callback may be None."""
    on_question_ready: Optional[Callable[[QuestionReady], None]] = None
    on_answer_result: Optional[Callable[[AnswerResult], None]] = None
    on_session_end: Optional[Callable[[SessionSummary], None]] = None


QuestionGenerator = Callable[[SessionView, random.Random], Question]
AnswerValidator = Callable[[Any, Question], Validation]
Explainer = Callable[[Question, Validation], str]


class DrillHandler(Protocol):
    """Protocol for drill/scenario handlers registered in src.drills."""

    unit_id: str
    group: str
    title: str
    total_questions: int

    def generate(self, view: SessionView, rng: random.Random) -> Question:
        """Produce the next question."""
        ...

    def validate(self, answer: Any, question: Question) -> Validation:
        """Score an answer against the reference policy."""
        ...

    def explain(self, question: Question, validation: Validation) -> str:
        """Human-readable reasoning for the correct answer."""
        ...

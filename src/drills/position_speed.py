"""
Position speed drill: quick two-seat questions about action order.
"""
from __future__ import annotations

import random
from enum import Enum
from typing import Any

from src.engine.base import Question, SessionView, Validation
from src.ranges.opening import (
    OPENING_POSITIONS,
    POSITION_VALUE,
    POSITIONS,
    POSTFLOP_ORDER,
    PREFLOP_ORDER,
)

from . import DrillKind, register
from .common import resolve_option


class QuestionType(str, Enum):
    PREFLOP_FIRST = "preflop_first"
    POSTFLOP_FIRST = "postflop_first"
    HAS_POSITION = "has_position"
    BEST_POSITION = "best_position"
    OPENING_WIDER = "opening_wider"


PROMPTS = {
    QuestionType.PREFLOP_FIRST: "Who acts FIRST preflop?",
    QuestionType.POSTFLOP_FIRST: "Who acts FIRST postflop?",
    QuestionType.HAS_POSITION: "Who has POSITION (acts last)?",
    QuestionType.BEST_POSITION: "Which is the BETTER position?",
    QuestionType.OPENING_WIDER: "Which position opens WIDER?",
}

ALL_SEATS = tuple(POSITIONS)


def answer_for(kind: QuestionType, first: str, second: str) -> str:
    """The correct seat of the two for a question type."""
    if kind is QuestionType.PREFLOP_FIRST:
        return first if PREFLOP_ORDER.index(first) < PREFLOP_ORDER.index(second) else second
    if kind is QuestionType.POSTFLOP_FIRST:
        return first if POSTFLOP_ORDER.index(first) < POSTFLOP_ORDER.index(second) else second
    if kind is QuestionType.OPENING_WIDER:
        return first if POSITIONS[first].opening_percent > POSITIONS[second].opening_percent else second
    # has_position / best_position
    return first if POSITION_VALUE[first] > POSITION_VALUE[second] else second


@register(DrillKind.POSITION_SPEED)
class PositionSpeedDrill:
    unit_id = DrillKind.POSITION_SPEED.value
    group = "drills"
    title = "Position Speed"
    total_questions = 15

    def generate(self, view: SessionView, rng: random.Random) -> Question:
        kind = rng.choice(list(QuestionType))
        # BB never opens, so it sits out of the opening comparison.
        seats = OPENING_POSITIONS if kind is QuestionType.OPENING_WIDER else ALL_SEATS
        first, second = rng.sample(seats, 2)
        return Question(
            category=kind.value,
            prompt=PROMPTS[kind],
            options=(first, second),
            payload={"type": kind.value, "correct": answer_for(kind, first, second)},
        )

    def validate(self, answer: Any, question: Question) -> Validation:
        correct = question.payload["correct"]
        return Validation(correct=resolve_option(answer, question.options) == correct, correct_answer=correct)

    def explain(self, question: Question, validation: Validation) -> str:
        kind = QuestionType(question.payload["type"])
        seat = validation.correct_answer
        if kind is QuestionType.PREFLOP_FIRST:
            return f"Preflop order: {' → '.join(PREFLOP_ORDER)}"
        if kind is QuestionType.POSTFLOP_FIRST:
            return f"Postflop order: {' → '.join(POSTFLOP_ORDER)}"
        if kind is QuestionType.OPENING_WIDER:
            return f"{seat} opens about {POSITIONS[seat].opening_percent}% of hands."
        return f"{seat}: {POSITIONS[seat].description}"

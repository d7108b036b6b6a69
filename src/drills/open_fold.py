"""
Open or fold: a position and a hand, decide from the opening range.
"""
from __future__ import annotations

import random
from typing import Any

from src.engine.base import Question, SessionView, Validation
from src.hands.hand import random_hand
from src.ranges.models import Action
from src.ranges.opening import OPENING_POSITIONS, POSITIONS, recommended_action

from . import DrillKind, register
from .common import resolve_action

OPTIONS = (Action.OPEN.value, Action.FOLD.value)


@register(DrillKind.OPEN_FOLD)
class OpenFoldDrill:
    """Per-position accuracy comes out of the category stats."""

    unit_id = DrillKind.OPEN_FOLD.value
    group = "drills"
    title = "Open or Fold"
    total_questions = 25

    def generate(self, view: SessionView, rng: random.Random) -> Question:
        seat = rng.choice(OPENING_POSITIONS)
        hand = random_hand(rng).notation
        return Question(
            category=seat,
            prompt=f"{seat}: {hand}. Open or fold?",
            options=OPTIONS,
            payload={"position": seat, "hand": hand},
        )

    def validate(self, answer: Any, question: Question) -> Validation:
        expected = recommended_action(question.payload["hand"], question.payload["position"])
        chosen = resolve_action(answer, question.options)
        return Validation(correct=chosen is expected, correct_answer=expected.value)

    def explain(self, question: Question, validation: Validation) -> str:
        seat = POSITIONS[question.payload["position"]]
        hand = question.payload["hand"]
        if validation.correct_answer == Action.OPEN.value:
            return f"{hand} is in the {seat.key} opening range (~{seat.opening_percent}% of hands)."
        return f"{hand} is outside the {seat.key} opening range (~{seat.opening_percent}% of hands)."

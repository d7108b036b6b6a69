"""
Range check: is this hand in the position's opening range? yes / no.
"""
from __future__ import annotations

import random
from typing import Any

from src.engine.base import Question, SessionView, Validation
from src.hands.hand import random_hand
from src.ranges.opening import OPENING_POSITIONS, is_in_opening_range, opening_range
from src.ranges.algebra import percentage_of_deck

from . import DrillKind, register
from .common import parse_yes_no, resolve_option

OPTIONS = ("yes", "no")


@register(DrillKind.RANGE_CHECK)
class RangeCheckDrill:
    unit_id = DrillKind.RANGE_CHECK.value
    group = "drills"
    title = "Range Check"
    total_questions = 20

    def generate(self, view: SessionView, rng: random.Random) -> Question:
        seat = rng.choice(OPENING_POSITIONS)
        hand = random_hand(rng).notation
        return Question(
            category=seat,
            prompt=f"Is {hand} in the {seat} opening range?",
            options=OPTIONS,
            payload={"position": seat, "hand": hand},
        )

    def validate(self, answer: Any, question: Question) -> Validation:
        in_range = is_in_opening_range(question.payload["hand"], question.payload["position"])
        chosen = parse_yes_no(answer)
        if chosen is None:
            option = resolve_option(answer, question.options)
            chosen = None if option is None else option == "yes"
        return Validation(correct=chosen is in_range, correct_answer="yes" if in_range else "no")

    def explain(self, question: Question, validation: Validation) -> str:
        seat = question.payload["position"]
        share = percentage_of_deck(opening_range(seat))
        verdict = "in" if validation.correct_answer == "yes" else "not in"
        return f"{question.payload['hand']} is {verdict} the {seat} range ({share:.1f}% of combos)."

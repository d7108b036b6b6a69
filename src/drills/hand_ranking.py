"""
Hand ranking speed drill: two hands side by side, pick the stronger one.
"""
from __future__ import annotations

import random
from typing import Any

from src.engine.base import Question, SessionView, Validation
from src.hands.equity import equity, equity_percent
from src.hands.hand import parse, random_hand

from . import DrillKind, register
from .common import clean

# Hands closer than this in equity are too close to call at speed.
MIN_EQUITY_GAP = 0.01

SIDES = ("left", "right")


@register(DrillKind.HAND_RANKING)
class HandRankingDrill:
    unit_id = DrillKind.HAND_RANKING.value
    group = "drills"
    title = "Hand Ranking Speed"
    total_questions = 20

    def generate(self, view: SessionView, rng: random.Random) -> Question:
        while True:
            left = random_hand(rng).notation
            right = random_hand(rng).notation
            if left != right and abs(equity(left) - equity(right)) >= MIN_EQUITY_GAP:
                break

        stronger = "left" if equity(left) > equity(right) else "right"
        stronger_hand = left if stronger == "left" else right
        return Question(
            category=parse(stronger_hand).shape.value,
            prompt=f"Which hand is stronger? {left} vs {right}",
            options=SIDES,
            payload={"left": left, "right": right, "stronger": stronger},
        )

    def validate(self, answer: Any, question: Question) -> Validation:
        text = clean(answer)
        side = {"l": "left", "1": "left", "r": "right", "2": "right"}.get(text, text)
        correct = question.payload["stronger"]
        return Validation(correct=side == correct, correct_answer=correct)

    def explain(self, question: Question, validation: Validation) -> str:
        left, right = question.payload["left"], question.payload["right"]
        winner, loser = (left, right) if validation.correct_answer == "left" else (right, left)
        return (
            f"{winner} is stronger "
            f"({round(equity_percent(winner))}% vs {round(equity_percent(loser))}%)"
        )

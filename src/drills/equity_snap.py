"""
Equity snap: pick the 10% bucket a hand's equity falls into.
"""
from __future__ import annotations

import random
from typing import Any

from src.engine.base import Question, SessionView, Validation
from src.hands.equity import equity_percent
from src.hands.hand import random_hand

from . import DrillKind, register
from .common import resolve_option

BUCKET_WIDTH = 10
OPTION_COUNT = 4


def bucket_label(bucket: int) -> str:
    low = bucket * BUCKET_WIDTH
    return f"{low}-{low + BUCKET_WIDTH}%"


def snap_options(percent: float) -> tuple[tuple[str, ...], str]:
    """
    Four consecutive buckets around `percent` and the label of the right one.

    The window starts one bucket below the answer, clamped so it never
    runs below 0% or past 100%.
    """
    correct_bucket = min(int(percent // BUCKET_WIDTH), 9)
    if correct_bucket <= 1:
        start = 0
    elif correct_bucket >= 8:
        start = 6
    else:
        start = correct_bucket - 1
    labels = tuple(bucket_label(start + i) for i in range(OPTION_COUNT))
    return labels, bucket_label(correct_bucket)


@register(DrillKind.EQUITY_SNAP)
class EquitySnapDrill:
    unit_id = DrillKind.EQUITY_SNAP.value
    group = "drills"
    title = "Equity Snap"
    total_questions = 15

    def generate(self, view: SessionView, rng: random.Random) -> Question:
        hand = random_hand(rng).notation
        percent = equity_percent(hand)
        options, correct = snap_options(percent)
        return Question(
            category=correct,
            prompt=f"{hand} equity vs a random hand?",
            options=options,
            payload={"hand": hand, "equity": percent, "correct": correct},
        )

    def validate(self, answer: Any, question: Question) -> Validation:
        correct = question.payload["correct"]
        return Validation(correct=resolve_option(answer, question.options) == correct, correct_answer=correct)

    def explain(self, question: Question, validation: Validation) -> str:
        return f"{question.payload['hand']}: {question.payload['equity']:.1f}% vs a random hand."

"""
Stage 1 foundations quizzes.

- hand-strength: name the tier of a hand
- position: which seat is better, who acts first, why position matters
- equity: estimate equity vs a random hand within +/-10 points

The fourth foundations module (ranges) is a range builder rather than a
question loop; it is scored in src.tutor.service.
"""
from __future__ import annotations

import random
from typing import Any

from src.engine.base import Question, SessionView, Validation
from src.hands.equity import PREFLOP_EQUITY, equity_percent
from src.hands.tiers import HAND_TIERS, TIER_ORDER
from src.ranges.opening import OPENING_POSITIONS, POSITION_VALUE, POSITIONS

from . import DrillKind, register
from .common import clean, resolve_option

QUIZ_LENGTH = 10
EQUITY_TOLERANCE = 10


@register(DrillKind.HAND_STRENGTH)
class HandStrengthQuiz:
    """Classify a hand as premium / strong / playable / marginal / trash."""

    unit_id = DrillKind.HAND_STRENGTH.value
    group = "foundations"
    title = "Hand Strength"
    total_questions = QUIZ_LENGTH

    def generate(self, view: SessionView, rng: random.Random) -> Question:
        # Tier first, then hand, so every tier shows up regardless of its size.
        tier = rng.choice(TIER_ORDER)
        hand = rng.choice(sorted(HAND_TIERS[tier].hands))
        return Question(
            category=tier,
            prompt=f"What tier is {hand}?",
            options=tuple(HAND_TIERS[t].name for t in TIER_ORDER),
            payload={"hand": hand, "tier": tier},
        )

    def validate(self, answer: Any, question: Question) -> Validation:
        tier = question.payload["tier"]
        chosen = resolve_option(answer, question.options)
        correct_name = HAND_TIERS[tier].name
        return Validation(correct=chosen == correct_name, correct_answer=correct_name)

    def explain(self, question: Question, validation: Validation) -> str:
        tier = HAND_TIERS[question.payload["tier"]]
        return f"{question.payload['hand']} is {tier.name}: {tier.description}"


# Fixed trivia questions: (prompt, options, correct)
POSITION_TRIVIA: tuple[tuple[str, tuple[str, ...], str], ...] = (
    ("Who acts first preflop?", ("UTG", "BTN", "BB", "CO"), "UTG"),
    ("Who acts last postflop?", ("BTN", "BB", "UTG", "SB"), "BTN"),
    ("Which position should have the widest opening range?", ("BTN", "UTG", "BB", "MP"), "BTN"),
    ("Which position is worst postflop?", ("SB", "BTN", "CO", "UTG"), "SB"),
    (
        "Why is position valuable in poker?",
        (
            "You get to see others act first",
            "You get dealt better cards",
            "You win more blinds",
            "You can bet more",
        ),
        "You get to see others act first",
    ),
)


@register(DrillKind.POSITION)
class PositionQuiz:
    """Half seat comparisons, half fixed trivia."""

    unit_id = DrillKind.POSITION.value
    group = "foundations"
    title = "Position"
    total_questions = QUIZ_LENGTH

    def generate(self, view: SessionView, rng: random.Random) -> Question:
        if rng.random() < 0.5:
            first, second = rng.sample(OPENING_POSITIONS, 2)
            # Blinds play out of position postflop.
            better = first if POSITION_VALUE[first] > POSITION_VALUE[second] else second
            return Question(
                category="compare",
                prompt="Which position has more advantage?",
                options=(first, second),
                payload={"correct": better},
            )

        prompt, options, correct = rng.choice(POSITION_TRIVIA)
        shuffled = list(options)
        rng.shuffle(shuffled)
        return Question(
            category="trivia",
            prompt=prompt,
            options=tuple(shuffled),
            payload={"correct": correct},
        )

    def validate(self, answer: Any, question: Question) -> Validation:
        correct = question.payload["correct"]
        return Validation(correct=resolve_option(answer, question.options) == correct, correct_answer=correct)

    def explain(self, question: Question, validation: Validation) -> str:
        correct = validation.correct_answer
        if correct in POSITIONS:
            return f"{correct} ({POSITIONS[correct].name}): {POSITIONS[correct].description}"
        return "Acting last means you see everyone else's decision before making yours."


@register(DrillKind.EQUITY)
class EquityEstimateQuiz:
    """Type an equity estimate; within +/-10 points counts."""

    unit_id = DrillKind.EQUITY.value
    group = "foundations"
    title = "Equity"
    total_questions = QUIZ_LENGTH

    def generate(self, view: SessionView, rng: random.Random) -> Question:
        hand = rng.choice(sorted(PREFLOP_EQUITY))
        target = round(equity_percent(hand))
        return Question(
            category="pair" if len(hand) == 2 else ("suited" if hand.endswith("s") else "offsuit"),
            prompt=f"Estimate {hand}'s equity vs a random hand (%)",
            payload={"hand": hand, "equity": target},
        )

    def validate(self, answer: Any, question: Question) -> Validation:
        target = question.payload["equity"]
        try:
            guess = float(clean(answer).rstrip("%"))
        except ValueError:
            return Validation(correct=False, correct_answer=f"{target}%")
        return Validation(correct=abs(guess - target) <= EQUITY_TOLERANCE, correct_answer=f"{target}%")

    def explain(self, question: Question, validation: Validation) -> str:
        return (
            f"{question.payload['hand']} wins about {validation.correct_answer} of the time "
            f"against a random hand (within ±{EQUITY_TOLERANCE}% counts)."
        )

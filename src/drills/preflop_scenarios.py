"""
Preflop scenario drills.

Every scenario follows the same loop:
1. Pick a spot (who opened, who raised, where the hero sits)
2. Roll a weighted action to pick which bucket the hand comes from
3. Draw a hand from that bucket, or from a curated fold pool
4. Score the learner's action against bucket_for() on the spot's range

The weighted roll only shapes which hands show up. The correct answer is
always read back from the range, so a hand that sits in two buckets (or a
fold-pool hand that is actually playable in this spot) is still scored by
the table.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

from src.engine.base import Question, SessionView, Validation
from src.engine.sampling import pick_excluding, weighted_choice
from src.ranges.algebra import bucket_for
from src.ranges.models import ACTION_PRIORITY, Action, BucketedRange
from src.ranges.scenario_ranges import (
    BB_DEFENSE,
    COLD_4BET,
    DEFEND_VS_3BET,
    SB_3BET_OR_FOLD,
    VALUE_3BET,
    scenario_range,
)

from . import DrillKind, register
from .common import resolve_action


@dataclass(frozen=True)
class Spot:
    key: str  # range table key, also the stats category
    hero: str
    villain: str
    setup: str


def exclusive_hands(bucketed: BucketedRange, action: Action) -> list[str]:
    """Hands that resolve to `action`: its bucket minus anything a stronger bucket claims."""
    stronger: set[str] = set()
    for candidate in ACTION_PRIORITY:
        if candidate is action:
            break
        stronger |= bucketed.hands_for(candidate)
    return sorted(bucketed.hands_for(action) - stronger)


class PreflopScenario:
    """Shared generate/validate/explain for the range-table scenarios."""

    unit_id: ClassVar[str]
    group: ClassVar[str] = "scenarios"
    title: ClassVar[str]
    total_questions: ClassVar[int] = 20

    table: ClassVar[Mapping[str, BucketedRange]]
    spots: ClassVar[tuple[Spot, ...]]
    # (action, weight) in roll order; Fold last takes the remainder.
    roll: ClassVar[tuple[tuple[Action, float], ...]]
    fold_pool: ClassVar[tuple[str, ...]]
    fold_fallback: ClassVar[tuple[str, ...]] = ()
    options: ClassVar[tuple[str, ...]]
    explanations: ClassVar[Mapping[Action, str]]

    def generate(self, view: SessionView, rng: random.Random) -> Question:
        spot = rng.choice(self.spots)
        bucketed = scenario_range(self.table, spot.key)
        target = weighted_choice(rng, self.roll)

        pool = exclusive_hands(bucketed, target) if target is not Action.FOLD else []
        if pool:
            hand = rng.choice(pool)
        else:
            hand = pick_excluding(
                rng,
                self.fold_pool,
                bucketed.all_hands(),
                self.fold_fallback or self.fold_pool,
            )

        return Question(
            category=spot.key,
            prompt=f"{spot.setup} You hold {hand}.",
            options=self.options,
            payload={"spot": spot, "hand": hand},
        )

    def correct_action(self, question: Question) -> Action:
        spot: Spot = question.payload["spot"]
        return bucket_for(scenario_range(self.table, spot.key), question.payload["hand"])

    def validate(self, answer: Any, question: Question) -> Validation:
        expected = self.correct_action(question)
        chosen = resolve_action(answer, self.options)
        return Validation(correct=chosen is expected, correct_answer=expected.value)

    def explain(self, question: Question, validation: Validation) -> str:
        spot: Spot = question.payload["spot"]
        action = Action(validation.correct_answer)
        template = self.explanations.get(action, "The correct action is {action}.")
        return template.format(
            hand=question.payload["hand"],
            hero=spot.hero,
            villain=spot.villain,
            action=action.value,
        )


@register(DrillKind.DEFEND_3BET)
class Defend3BetScenario(PreflopScenario):
    """You open and a later seat 3-bets."""

    unit_id = DrillKind.DEFEND_3BET.value
    title = "Defend vs 3-Bet"
    table = DEFEND_VS_3BET
    spots = tuple(
        Spot(f"{hero}_vs_{villain}", hero, villain, f"You open {hero}, {villain} 3-bets.")
        for hero, villain in (
            ("CO", "BTN"), ("CO", "SB"), ("CO", "BB"),
            ("BTN", "SB"), ("BTN", "BB"),
            ("MP", "CO"), ("UTG", "MP"),
        )
    )
    roll = ((Action.FOUR_BET, 0.25), (Action.CALL, 0.35), (Action.FOLD, 0.0))
    fold_pool = (
        "K9o", "K8o", "K7o", "K6o", "K5o", "K4o", "K3o", "K2o",
        "Q9o", "Q8o", "Q7o", "Q6o", "Q5o",
        "J9o", "J8o", "J7o",
        "T8o", "T7o",
        "97o", "96o",
        "86o", "85o",
        "75o", "74o",
        "64o", "63o",
        "53o", "52o",
        "42o", "43o",
        "K8s", "K7s", "K6s", "K5s",
        "Q8s", "Q7s", "Q6s",
        "J7s", "J6s",
        "T6s", "T5s",
        "96s", "95s",
        "85s", "84s",
        "74s", "73s",
        "88", "77", "66", "55", "44", "33", "22",
    )
    fold_fallback = ("K7o", "Q8o", "J7o", "T6o", "95o")
    options = (Action.FOUR_BET.value, Action.CALL.value, Action.FOLD.value)
    explanations = {
        Action.FOUR_BET: "{hand} is strong enough to 4-bet for value against {villain}'s 3-bet range.",
        Action.CALL: "{hand} has good playability but isn't strong enough to 4-bet for value.",
        Action.FOLD: "{hand} isn't strong enough to profitably continue against {villain}'s 3-bet.",
    }


@register(DrillKind.BB_DEFENSE)
class BBDefenseScenario(PreflopScenario):
    """Villain opens, hero defends the big blind."""

    unit_id = DrillKind.BB_DEFENSE.value
    title = "BB Defense"
    table = BB_DEFENSE
    spots = tuple(
        Spot(f"vs_{opener}", "BB", opener, f"{opener} opens 2.5bb, you are in the BB.")
        for opener in ("BTN", "CO", "MP", "UTG", "SB")
    )
    roll = ((Action.THREE_BET, 0.20), (Action.CALL, 0.35), (Action.FOLD, 0.0))
    fold_pool = (
        "K5o", "K4o", "K3o", "K2o",
        "Q6o", "Q5o", "Q4o", "Q3o", "Q2o",
        "J6o", "J5o", "J4o", "J3o", "J2o",
        "T6o", "T5o", "T4o", "T3o", "T2o",
        "95o", "94o", "93o", "92o",
        "84o", "83o", "82o",
        "73o", "72o",
        "62o", "63o",
        "52o",
        "42o", "43o",
        "32o",
        "K4s", "K3s", "K2s",
        "Q5s", "Q4s", "Q3s", "Q2s",
        "J5s", "J4s", "J3s", "J2s",
        "T4s", "T3s", "T2s",
        "93s", "92s",
        "83s", "82s",
        "72s", "73s",
        "62s", "63s",
        "52s",
    )
    fold_fallback = ("K3o", "Q4o", "J5o", "T4o", "94o")
    options = (Action.THREE_BET.value, Action.CALL.value, Action.FOLD.value)
    explanations = {
        Action.THREE_BET: "{hand} is strong enough to 3-bet for value/protection against {villain}'s open.",
        Action.CALL: "{hand} is playable but not strong enough to 3-bet vs {villain}.",
        Action.FOLD: "{hand} isn't strong enough to defend against {villain}'s range.",
    }


@register(DrillKind.VALUE_3BET)
class Value3BetScenario(PreflopScenario):
    """Separate value 3-bets from flats and folds."""

    unit_id = DrillKind.VALUE_3BET.value
    title = "3-Bet for Value"
    table = VALUE_3BET
    spots = tuple(
        Spot(key, hero, opener, f"{opener} opens 2.5bb, you are in the {hero}.")
        for hero, opener, key in (
            ("BB", "BTN", "BB_vs_steal"),
            ("BB", "CO", "BB_vs_steal"),
            ("SB", "BTN", "SB_vs_BTN"),
            ("CO", "UTG", "CO_vs_EP"),
            ("CO", "MP", "CO_vs_EP"),
            ("BTN", "CO", "BTN_vs_open"),
            ("BTN", "MP", "BTN_vs_open"),
        )
    )
    roll = ((Action.THREE_BET, 0.35), (Action.CALL, 0.20), (Action.FOLD, 0.0))
    fold_pool = (
        "K8o", "K7o", "K6o", "K5o",
        "Q9o", "Q8o", "Q7o",
        "J8o", "J7o", "J6o",
        "T7o", "T6o",
        "96o", "95o",
        "85o", "84o",
        "74o", "73o",
        "63o", "62o",
        "52o", "53o",
        "42o", "43o",
        "K6s", "K5s", "K4s",
        "Q6s", "Q5s", "Q4s",
        "J6s", "J5s",
        "T5s", "T4s",
        "94s", "93s",
        "84s", "83s",
        "55", "44", "33", "22",
    )
    fold_fallback = ("K7o", "Q8o", "J7o", "T6o", "95o")
    options = (Action.THREE_BET.value, Action.CALL.value, Action.FOLD.value)
    explanations = {
        Action.THREE_BET: "{hand} is strong enough to 3-bet for value from {hero} vs {villain}'s open.",
        Action.CALL: "{hand} is playable but not strong enough to 3-bet for value.",
        Action.FOLD: "{hand} isn't strong enough to continue vs {villain}'s opening range.",
    }


@register(DrillKind.SB_3BET_FOLD)
class SB3BetOrFoldScenario(PreflopScenario):
    """From the small blind there is no flat: 3-bet or fold."""

    unit_id = DrillKind.SB_3BET_FOLD.value
    title = "SB: 3-Bet or Fold"
    table = SB_3BET_OR_FOLD
    spots = tuple(
        Spot(f"vs_{opener}", "SB", opener, f"{opener} opens 2.5bb, you are in the SB.")
        for opener in ("BTN", "CO", "MP", "UTG")
    )
    roll = ((Action.THREE_BET, 0.45), (Action.FOLD, 0.0))
    fold_pool = (
        "KTo", "K9o", "K8o", "K7o", "K6o", "K5o",
        "QJo", "QTo", "Q9o", "Q8o", "Q7o",
        "JTo", "J9o", "J8o", "J7o",
        "T9o", "T8o", "T7o",
        "98o", "97o", "96o",
        "87o", "86o",
        "76o", "75o",
        "65o", "64o",
        "54o", "53o",
        "K8s", "K7s", "K6s",
        "Q8s", "Q7s", "Q6s",
        "J7s", "J6s",
        "T6s", "T5s",
        "96s", "95s",
        "85s", "84s",
        "75s", "74s",
        "64s", "63s",
        "53s", "52s",
        "88", "77", "66", "55", "44", "33", "22",
    )
    fold_fallback = ("K7o", "Q8o", "J8o", "T7o", "97o")
    options = (Action.THREE_BET.value, Action.FOLD.value)
    explanations = {
        Action.THREE_BET: "{hand} is strong enough to 3-bet from SB vs {villain}.",
        Action.FOLD: "{hand} isn't strong enough to 3-bet from SB vs {villain}.",
    }


@register(DrillKind.COLD_4BET)
class Cold4BetScenario(PreflopScenario):
    """Facing an open and a 3-bet: only AA/KK continue."""

    unit_id = DrillKind.COLD_4BET.value
    title = "Cold 4-Bet Spots"
    table = COLD_4BET
    spots = tuple(
        Spot(
            "IP" if in_position else "OOP",
            hero,
            three_bettor,
            f"{opener} opens, {three_bettor} 3-bets, you are in the {hero}.",
        )
        for opener, three_bettor, hero, in_position in (
            ("UTG", "MP", "CO", True),
            ("UTG", "MP", "BTN", True),
            ("MP", "CO", "BTN", True),
            ("CO", "BTN", "SB", False),
            ("CO", "BTN", "BB", False),
            ("BTN", "SB", "BB", False),
        )
    )
    roll = ((Action.FOUR_BET, 0.10), (Action.FOLD, 0.0))
    fold_pool = (
        "QQ", "JJ", "TT", "99", "88", "77", "66", "55", "44", "33", "22",
        "AKs", "AQs", "AJs", "ATs", "A9s", "A8s", "A7s", "A6s", "A5s", "A4s", "A3s", "A2s",
        "AKo", "AQo", "AJo", "ATo",
        "KQs", "KJs", "KTs", "K9s",
        "KQo", "KJo",
        "QJs", "QTs", "Q9s",
        "QJo", "QTo",
        "JTs", "J9s",
        "JTo",
        "T9s", "T8s",
        "98s", "97s",
        "87s", "86s",
        "76s", "75s",
        "65s", "64s",
        "54s",
    )
    options = (Action.FOUR_BET.value, Action.FOLD.value)
    explanations = {
        Action.FOUR_BET: "{hand} is strong enough to cold 4-bet.",
        Action.FOLD: "{hand} should fold facing an open and 3-bet.",
    }

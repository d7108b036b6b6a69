"""
Range types.

A Range is a named set of canonical hand notations. A BucketedRange splits
a decision into action buckets (4-bet, 3-bet, Call, Open); any hand not
listed in a bucket is an implicit Fold.

Bucket precedence: strongest action wins. Buckets are stored in that order,
so a hand listed under both 3-bet and Call resolves to 3-bet.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping

from loguru import logger

from src.hands.hand import normalize


class Action(str, Enum):
    """Preflop actions, strongest first."""
    FOUR_BET = "4-bet"
    THREE_BET = "3-bet"
    CALL = "Call"
    OPEN = "Open"
    FOLD = "Fold"


ACTION_PRIORITY: tuple[Action, ...] = (
    Action.FOUR_BET,
    Action.THREE_BET,
    Action.CALL,
    Action.OPEN,
    Action.FOLD,
)

_ACTION_ALIASES = {
    "4bet": Action.FOUR_BET,
    "fourbet": Action.FOUR_BET,
    "3bet": Action.THREE_BET,
    "threebet": Action.THREE_BET,
    "call": Action.CALL,
    "open": Action.OPEN,
    "raise": Action.OPEN,
    "fold": Action.FOLD,
}


def parse_action(text: str | Action) -> Action | None:
    """Map free-form answers ("3bet", "Three-Bet", "call") to an Action."""
    if isinstance(text, Action):
        return text
    if not isinstance(text, str):
        return None
    key = text.strip().lower().replace("-", "").replace(" ", "").replace("_", "")
    return _ACTION_ALIASES.get(key)


@dataclass(frozen=True)
class Range:
    """A named set of canonical hand notations."""

    name: str
    hands: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, name: str, hands: Iterable[str]) -> "Range":
        return cls(name, frozenset(normalize(h) for h in hands))

    def __contains__(self, hand: object) -> bool:
        return normalize(hand) in self.hands  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self.hands)


@dataclass(frozen=True)
class BucketedRange:
    """Ordered (action, hands) buckets with an implicit Fold catch-all."""

    name: str
    buckets: tuple[tuple[Action, frozenset[str]], ...]

    @classmethod
    def from_buckets(cls, name: str, buckets: Mapping[Action, Iterable[str]]) -> "BucketedRange":
        """Build from a mapping in any order; buckets are re-sorted strongest first."""
        if Action.FOLD in buckets:
            raise ValueError("Fold is implicit and cannot be listed as a bucket")

        ordered = tuple(
            (action, frozenset(normalize(h) for h in buckets[action]))
            for action in ACTION_PRIORITY
            if action in buckets
        )

        seen: dict[str, Action] = {}
        for action, hands in ordered:
            for hand in hands:
                if hand in seen:
                    logger.debug(
                        f"{name}: {hand} listed under {seen[hand].value} and {action.value}; "
                        f"{seen[hand].value} takes precedence"
                    )
                else:
                    seen[hand] = action
        return cls(name, ordered)

    def hands_for(self, action: Action) -> frozenset[str]:
        """Hands explicitly listed under an action (empty for Fold)."""
        for bucket_action, hands in self.buckets:
            if bucket_action is action:
                return hands
        return frozenset()

    def all_hands(self) -> frozenset[str]:
        """Every hand that is not an implicit fold."""
        result: set[str] = set()
        for _, hands in self.buckets:
            result |= hands
        return frozenset(result)

    @property
    def actions(self) -> tuple[Action, ...]:
        """Actions available in this spot, Fold last."""
        return tuple(action for action, _ in self.buckets) + (Action.FOLD,)

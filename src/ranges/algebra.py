"""
Range algebra: membership, bucket lookup, similarity, difference, weight.

Similarity is measured over all 169 hands: a hand counts as a match when
the learner and the reference agree on it, whether both include it or
both leave it out.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Union

from loguru import logger

from src.core.errors import InvalidNotation
from src.hands.hand import ALL_NOTATIONS, GRID_SIZE, TOTAL_COMBOS, Hand, from_grid, normalize, parse
from src.ranges.models import Action, BucketedRange, Range

RangeLike = Union[Range, BucketedRange, Iterable[str]]


@dataclass
class RangeDifference:
    """Hands the learner left out (missing) and wrongly added (extra), in grid order."""
    missing: list[str] = field(default_factory=list)
    extra: list[str] = field(default_factory=list)

    @property
    def is_exact(self) -> bool:
        return not self.missing and not self.extra


def hand_set(reference: RangeLike) -> frozenset[str]:
    """Canonical notations of a Range, a BucketedRange's non-fold hands, or a plain iterable."""
    if isinstance(reference, Range):
        return reference.hands
    if isinstance(reference, BucketedRange):
        return reference.all_hands()
    return frozenset(normalize(h) for h in reference)


def _user_set(user_hands: Iterable[str | Hand]) -> set[str]:
    """Normalize learner input, skipping anything unparseable."""
    result: set[str] = set()
    for hand in user_hands:
        try:
            result.add(normalize(hand))
        except InvalidNotation as exc:
            logger.warning(f"Ignoring invalid hand in range input: {exc}")
    return result


def _grid_order() -> Iterable[str]:
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            yield from_grid(row, col).notation


# ============================================================================
# MEMBERSHIP
# ============================================================================


def contains(reference: RangeLike, hand: str | Hand) -> bool:
    return normalize(hand) in hand_set(reference)


def bucket_for(bucketed: BucketedRange, hand: str | Hand) -> Action:
    """First bucket (strongest action first) holding the hand, else Fold."""
    notation = normalize(hand)
    for action, hands in bucketed.buckets:
        if notation in hands:
            return action
    return Action.FOLD


# ============================================================================
# COMPARISON
# ============================================================================


def similarity(user_hands: Iterable[str | Hand], reference: RangeLike) -> float:
    """Percentage of the 169 hands where membership agrees, one decimal place."""
    user = _user_set(user_hands)
    target = hand_set(reference)
    matches = sum(1 for notation in ALL_NOTATIONS if (notation in user) == (notation in target))
    return round(matches / len(ALL_NOTATIONS) * 100, 1)


def difference(user_hands: Iterable[str | Hand], reference: RangeLike) -> RangeDifference:
    user = _user_set(user_hands)
    target = hand_set(reference)
    result = RangeDifference()
    for notation in _grid_order():
        in_user, in_target = notation in user, notation in target
        if in_target and not in_user:
            result.missing.append(notation)
        elif in_user and not in_target:
            result.extra.append(notation)
    return result


def percentage_of_deck(hands: Iterable[str | Hand] | RangeLike) -> float:
    """Share of the 1326 two-card combinations covered, in percent (unrounded)."""
    notations = hand_set(hands)  # type: ignore[arg-type]
    combos = sum(parse(n).combos for n in notations)
    return combos / TOTAL_COMBOS * 100


# ============================================================================
# GRID CONVERSION
# ============================================================================


def range_to_grid(reference: RangeLike) -> list[list[bool]]:
    """13x13 membership matrix."""
    target = hand_set(reference)
    return [
        [from_grid(row, col).notation in target for col in range(GRID_SIZE)]
        for row in range(GRID_SIZE)
    ]


def grid_to_hands(grid: Sequence[Sequence[bool]]) -> list[str]:
    """Selected cells of a 13x13 matrix as notations, in grid order."""
    if len(grid) != GRID_SIZE or any(len(row) != GRID_SIZE for row in grid):
        raise ValueError(f"Range grid must be {GRID_SIZE}x{GRID_SIZE}")
    return [
        from_grid(row, col).notation
        for row in range(GRID_SIZE)
        for col in range(GRID_SIZE)
        if grid[row][col]
    ]

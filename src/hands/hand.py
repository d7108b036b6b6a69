"""
Canonical starting-hand model.

A Texas Hold'em starting hand reduces to one of 169 classes:
- 13 pocket pairs (AA ... 22)
- 78 suited hands (AKs ... 32s)
- 78 offsuit hands (AKo ... 32o)

Hands are immutable and compared by value. Canonical notation always puts
the higher rank first; pairs carry no suffix.

Grid layout (13x13, rank index 0 = Ace):
- row == col: pair
- row <  col: suited   (upper-right triangle)
- row >  col: offsuit  (lower-left triangle)
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum

from src.core.errors import InvalidNotation

RANKS: tuple[str, ...] = ("A", "K", "Q", "J", "T", "9", "8", "7", "6", "5", "4", "3", "2")
RANK_INDEX: dict[str, int] = {rank: i for i, rank in enumerate(RANKS)}
GRID_SIZE = len(RANKS)

TOTAL_COMBOS = 1326


class Shape(str, Enum):
    """Pair / suited / offsuit."""
    PAIR = "pair"
    SUITED = "suited"
    OFFSUIT = "offsuit"


_COMBOS = {Shape.PAIR: 6, Shape.SUITED: 4, Shape.OFFSUIT: 12}
_SUFFIX = {Shape.PAIR: "", Shape.SUITED: "s", Shape.OFFSUIT: "o"}


def rank_value(rank: str) -> int:
    """Numeric rank value, A=14 down to 2=2."""
    return 14 - RANK_INDEX[rank.upper()]


@dataclass(frozen=True)
class Hand:
    """One of the 169 starting-hand classes."""

    high_rank: str
    low_rank: str
    shape: Shape

    @property
    def notation(self) -> str:
        return f"{self.high_rank}{self.low_rank}{_SUFFIX[self.shape]}"

    @property
    def combos(self) -> int:
        """Number of physical two-card combinations in this class."""
        return _COMBOS[self.shape]

    @property
    def is_pair(self) -> bool:
        return self.shape is Shape.PAIR

    @property
    def is_suited(self) -> bool:
        return self.shape is Shape.SUITED

    def __str__(self) -> str:
        return self.notation


def parse(notation: str) -> Hand:
    """
    Parse hand notation into a Hand.

    Accepts 2-3 characters, case-insensitive, ranks in either order
    ("AKs", "kas", "TT", "72"). A missing suffix on a non-pair means
    offsuit; an 'o' on a pair is tolerated and dropped.

    Raises:
        InvalidNotation: wrong length, unknown rank, unknown suffix,
            or a suited pair.
    """
    if not isinstance(notation, str):
        raise InvalidNotation(notation, "expected a string")

    text = notation.strip()
    if len(text) not in (2, 3):
        raise InvalidNotation(notation, "expected 2 or 3 characters")

    first, second = text[0].upper(), text[1].upper()
    for rank in (first, second):
        if rank not in RANK_INDEX:
            raise InvalidNotation(notation, f"unknown rank {rank!r}")

    suffix = text[2].lower() if len(text) == 3 else ""
    if suffix not in ("", "s", "o"):
        raise InvalidNotation(notation, f"unknown suffix {text[2]!r}")

    if first == second:
        if suffix == "s":
            raise InvalidNotation(notation, "a pair cannot be suited")
        return Hand(first, second, Shape.PAIR)

    high, low = (first, second) if RANK_INDEX[first] < RANK_INDEX[second] else (second, first)
    shape = Shape.SUITED if suffix == "s" else Shape.OFFSUIT
    return Hand(high, low, shape)


def normalize(notation: str | Hand) -> str:
    """Canonical notation string. Idempotent."""
    if isinstance(notation, Hand):
        return notation.notation
    return parse(notation).notation


def as_hand(value: str | Hand) -> Hand:
    """Accept either a Hand or a notation string."""
    return value if isinstance(value, Hand) else parse(value)


# ============================================================================
# GRID MAPPING
# ============================================================================


def grid_coord(hand: str | Hand) -> tuple[int, int]:
    """(row, col) of a hand in the 13x13 matrix."""
    hand = as_hand(hand)
    high, low = RANK_INDEX[hand.high_rank], RANK_INDEX[hand.low_rank]
    if hand.shape is Shape.PAIR:
        return high, high
    if hand.shape is Shape.SUITED:
        return high, low
    return low, high


def from_grid(row: int, col: int) -> Hand:
    """Inverse of grid_coord."""
    if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
        raise ValueError(f"Grid cell out of range: ({row}, {col})")
    if row == col:
        return Hand(RANKS[row], RANKS[col], Shape.PAIR)
    if row < col:
        return Hand(RANKS[row], RANKS[col], Shape.SUITED)
    return Hand(RANKS[col], RANKS[row], Shape.OFFSUIT)


# ============================================================================
# ENUMERATION & SAMPLING
# ============================================================================


def _build_all_hands() -> tuple[Hand, ...]:
    hands: list[Hand] = []
    for i, high in enumerate(RANKS):
        for low in RANKS[i:]:
            if high == low:
                hands.append(Hand(high, low, Shape.PAIR))
            else:
                hands.append(Hand(high, low, Shape.SUITED))
                hands.append(Hand(high, low, Shape.OFFSUIT))
    return tuple(hands)


ALL_HANDS: tuple[Hand, ...] = _build_all_hands()
ALL_NOTATIONS: tuple[str, ...] = tuple(h.notation for h in ALL_HANDS)


def enumerate_all() -> tuple[Hand, ...]:
    """All 169 hands in fixed order: by rank index, then pair/suited/offsuit."""
    return ALL_HANDS


def random_hand(rng: random.Random | None = None) -> Hand:
    """
    Uniformly random hand class.

    Sampling is uniform over the 169 classes, not over the 1326 card
    combinations: a pair comes up 13/169 of the time here versus 78/1326
    at a real table, and offsuit hands come up less often than they are
    actually dealt.
    """
    return (rng or random).choice(ALL_HANDS)

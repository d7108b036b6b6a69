"""
Flop texture classification and texture-targeted board generation.

Classification checks run in a fixed order:
1. monotone - all three cards share a suit
2. paired   - any two ranks match
3. wet      - two-tone (flush draw) or every sorted rank gap <= 2 (A high)
4. dry      - everything else
"""
from __future__ import annotations

import random
from collections import Counter
from enum import Enum
from typing import Sequence

from src.hands.cards import SUITS, Card, parse_card
from src.hands.hand import RANKS, rank_value


class BoardTexture(str, Enum):
    DRY = "dry"
    WET = "wet"
    PAIRED = "paired"
    MONOTONE = "monotone"


TEXTURE_NOTES: dict[BoardTexture, tuple[str, ...]] = {
    BoardTexture.DRY: ("Rainbow (3 suits)", "Unconnected (gaps of 3+)", "Few draws possible"),
    BoardTexture.WET: ("Two-tone (2 of same suit)", "Connected (gaps of 1-2)", "Many draws available"),
    BoardTexture.PAIRED: ("Two cards of same rank", "Trips possible"),
    BoardTexture.MONOTONE: ("All three cards same suit", "Flush possible"),
}


def _coerce(cards: Sequence[Card | str]) -> list[Card]:
    return [c if isinstance(c, Card) else parse_card(c) for c in cards]


def classify_board_texture(cards: Sequence[Card | str]) -> BoardTexture:
    """Classify a three-card flop. Raises ValueError for any other card count."""
    board = _coerce(cards)
    if len(board) != 3:
        raise ValueError(f"A flop has exactly 3 cards, got {len(board)}")

    suit_counts = Counter(c.suit for c in board)
    if len(suit_counts) == 1:
        return BoardTexture.MONOTONE

    if len({c.rank for c in board}) < 3:
        return BoardTexture.PAIRED

    two_tone = 2 in suit_counts.values()
    values = sorted(rank_value(c.rank) for c in board)
    connected = all(b - a <= 2 for a, b in zip(values, values[1:]))
    if two_tone or connected:
        return BoardTexture.WET

    return BoardTexture.DRY


# ============================================================================
# GENERATION
# ============================================================================


def _dry(rng: random.Random) -> list[Card]:
    # One card from each band keeps every gap >= 3; three suits keeps it rainbow.
    bands = (("A", "K", "Q"), ("9", "8", "7"), ("4", "3", "2"))
    suits = rng.sample(SUITS, 3)
    return [Card(rng.choice(band), suit) for band, suit in zip(bands, suits)]


def _wet(rng: random.Random) -> list[Card]:
    start = rng.randint(2, 9)  # Q-J-T down to 5-4-3
    flush_suit, other_suit = rng.sample(SUITS, 2)
    ranks = RANKS[start:start + 3]
    return [Card(ranks[0], flush_suit), Card(ranks[1], flush_suit), Card(ranks[2], other_suit)]


def _paired(rng: random.Random) -> list[Card]:
    pair_rank = rng.choice(RANKS)
    first, second = rng.sample(SUITS, 2)
    third_rank = rng.choice([r for r in RANKS if r != pair_rank])
    return [Card(pair_rank, first), Card(pair_rank, second), Card(third_rank, rng.choice(SUITS))]


def _monotone(rng: random.Random) -> list[Card]:
    suit = rng.choice(SUITS)
    return [Card(rank, suit) for rank in rng.sample(RANKS, 3)]


_GENERATORS = {
    BoardTexture.DRY: _dry,
    BoardTexture.WET: _wet,
    BoardTexture.PAIRED: _paired,
    BoardTexture.MONOTONE: _monotone,
}


def generate_board(texture: BoardTexture | str, rng: random.Random | None = None) -> list[Card]:
    """Random flop that classifies as `texture`."""
    return _GENERATORS[BoardTexture(texture)](rng or random.Random())

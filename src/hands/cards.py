"""
Concrete playing cards.

Hand classes (src.hands.hand) abstract suits away; boards and on-screen
hands need real cards.
"""
from __future__ import annotations

import random
from dataclasses import dataclass

from src.core.errors import InvalidNotation
from src.hands.hand import RANK_INDEX, Hand, as_hand

SUITS: tuple[str, ...] = ("s", "h", "d", "c")
SUIT_SYMBOLS = {"s": "♠", "h": "♥", "d": "♦", "c": "♣"}
SUIT_NAMES = {"s": "spades", "h": "hearts", "d": "diamonds", "c": "clubs"}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    @property
    def pretty(self) -> str:
        return f"{self.rank}{SUIT_SYMBOLS[self.suit]}"


def parse_card(text: str) -> Card:
    """Parse "Kh", "td", "2C" into a Card."""
    if not isinstance(text, str) or len(text.strip()) != 2:
        raise InvalidNotation(text, "a card is a rank followed by a suit, e.g. 'Kh'")
    rank, suit = text.strip()[0].upper(), text.strip()[1].lower()
    if rank not in RANK_INDEX:
        raise InvalidNotation(text, f"unknown rank {rank!r}")
    if suit not in SUITS:
        raise InvalidNotation(text, f"unknown suit {suit!r}")
    return Card(rank, suit)


def cards_for_hand(hand: str | Hand, rng: random.Random | None = None) -> tuple[Card, Card]:
    """Deal one concrete combination of a hand class."""
    hand = as_hand(hand)
    rng = rng or random
    if hand.is_suited:
        suit = rng.choice(SUITS)
        return Card(hand.high_rank, suit), Card(hand.low_rank, suit)
    first, second = rng.sample(SUITS, 2)
    return Card(hand.high_rank, first), Card(hand.low_rank, second)

"""
Six-max positions and simplified 100bb opening ranges.
"""
from __future__ import annotations

from dataclasses import dataclass

from src.hands.hand import ALL_NOTATIONS, Hand, normalize
from src.ranges.models import Action, Range


@dataclass(frozen=True)
class Position:
    key: str
    name: str
    description: str
    order: int  # preflop action order, 1 = first to act
    opening_percent: int


POSITIONS: dict[str, Position] = {
    "UTG": Position("UTG", "Under the Gun", "First to act preflop. Tightest opening range.", 1, 15),
    "MP": Position("MP", "Middle Position", "Second to act. Slightly wider than UTG.", 2, 18),
    "CO": Position("CO", "Cutoff", "One off the button. Good stealing position.", 3, 27),
    "BTN": Position("BTN", "Button", "Best position. Acts last postflop. Widest opening range.", 4, 42),
    "SB": Position("SB", "Small Blind", "Posts small blind. Worst position postflop.", 5, 36),
    "BB": Position("BB", "Big Blind", "Posts big blind. Defends vs opens.", 6, 0),
}

OPENING_POSITIONS: tuple[str, ...] = ("UTG", "MP", "CO", "BTN", "SB")

# Preflop: UTG acts first. Postflop: the blinds act first, BTN last.
PREFLOP_ORDER: tuple[str, ...] = ("UTG", "MP", "CO", "BTN", "SB", "BB")
POSTFLOP_ORDER: tuple[str, ...] = ("SB", "BB", "UTG", "MP", "CO", "BTN")

# Positional advantage, higher is better. Blinds are out of position postflop.
POSITION_VALUE: dict[str, float] = {
    "UTG": 1,
    "MP": 2,
    "CO": 3,
    "BTN": 4,
    "SB": 0.5,
    "BB": 0.7,
}

OPENING_RANGES: dict[str, Range] = {
    "UTG": Range.of("UTG open", [
        "AA", "KK", "QQ", "JJ", "TT", "99", "88", "77",
        "AKs", "AQs", "AJs", "ATs", "KQs", "KJs", "QJs", "JTs",
        "AKo", "AQo", "AJo", "KQo",
    ]),
    "MP": Range.of("MP open", [
        "AA", "KK", "QQ", "JJ", "TT", "99", "88", "77", "66",
        "AKs", "AQs", "AJs", "ATs", "A9s", "KQs", "KJs", "KTs", "QJs", "QTs", "JTs", "T9s",
        "AKo", "AQo", "AJo", "ATo", "KQo", "KJo",
    ]),
    "CO": Range.of("CO open", [
        "AA", "KK", "QQ", "JJ", "TT", "99", "88", "77", "66", "55", "44",
        "AKs", "AQs", "AJs", "ATs", "A9s", "A8s", "A7s", "A6s", "A5s", "A4s", "A3s", "A2s",
        "KQs", "KJs", "KTs", "K9s", "K8s", "K7s",
        "QJs", "QTs", "Q9s",
        "JTs", "T9s", "98s", "87s", "76s", "65s",
        "AKo", "AQo", "AJo", "ATo", "A9o", "KQo", "KJo", "KTo", "QJo", "QTo", "JTo",
    ]),
    "BTN": Range.of("BTN open", [
        "AA", "KK", "QQ", "JJ", "TT", "99", "88", "77", "66", "55", "44", "33", "22",
        "AKs", "AQs", "AJs", "ATs", "A9s", "A8s", "A7s", "A6s", "A5s", "A4s", "A3s", "A2s",
        "KQs", "KJs", "KTs", "K9s", "K8s", "K7s", "K6s", "K5s", "K4s", "K3s", "K2s",
        "QJs", "QTs", "Q9s", "Q8s", "Q7s", "Q6s",
        "JTs", "J9s", "J8s", "J7s",
        "T9s", "T8s", "T7s", "98s", "97s", "96s", "87s", "86s", "76s", "75s",
        "65s", "64s", "54s", "53s", "43s",
        "AKo", "AQo", "AJo", "ATo", "A9o", "A8o", "A7o", "A6o", "A5o", "A4o", "A3o", "A2o",
        "KQo", "KJo", "KTo", "K9o", "K8o",
        "QJo", "QTo", "Q9o",
        "JTo", "J9o",
        "T9o", "T8o",
        "98o", "87o",
    ]),
    "SB": Range.of("SB open", [
        "AA", "KK", "QQ", "JJ", "TT", "99", "88", "77", "66", "55", "44", "33", "22",
        "AKs", "AQs", "AJs", "ATs", "A9s", "A8s", "A7s", "A6s", "A5s", "A4s", "A3s", "A2s",
        "KQs", "KJs", "KTs", "K9s", "K8s", "K7s", "K6s", "K5s", "K4s",
        "QJs", "QTs", "Q9s", "Q8s", "Q7s",
        "JTs", "J9s", "J8s",
        "T9s", "T8s", "98s", "97s", "87s", "86s", "76s", "75s", "65s", "64s", "54s",
        "AKo", "AQo", "AJo", "ATo", "A9o", "A8o", "A7o", "A6o", "A5o",
        "KQo", "KJo", "KTo", "K9o",
        "QJo", "QTo", "Q9o",
        "JTo", "J9o",
        "T9o", "98o",
    ]),
    # BB never opens; it defends (see scenario_ranges.BB_DEFENSE).
    "BB": Range("BB open", frozenset()),
}


def position(key: str) -> Position:
    """Look up a position by key (case-insensitive). Raises KeyError."""
    return POSITIONS[key.upper()]


def opening_range(key: str) -> Range:
    return OPENING_RANGES[key.upper()]


def is_in_opening_range(hand: str | Hand, key: str) -> bool:
    return normalize(hand) in opening_range(key).hands


def recommended_action(hand: str | Hand, key: str) -> Action:
    """Open if the hand is in the position's opening range, otherwise Fold."""
    return Action.OPEN if is_in_opening_range(hand, key) else Action.FOLD


def compare_positions(first: str, second: str) -> int:
    """Positive when `first` acts later preflop (the better seat to open from)."""
    return position(first).order - position(second).order


def position_difference_hands(first: str, second: str) -> list[str]:
    """Hands opened from `first` but not from `second`, in enumeration order."""
    mine, other = opening_range(first).hands, opening_range(second).hands
    return [h for h in ALL_NOTATIONS if h in mine and h not in other]

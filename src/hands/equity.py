"""
Static preflop equity table.

Values are heads-up all-in equity (percent) against a uniformly random
hand. They are pre-computed approximations, not solver output.
"""
from __future__ import annotations

from typing import Iterable

from loguru import logger

from src.core.errors import InvalidNotation
from src.hands.hand import Hand, normalize

# Returned for anything not in the table. Deliberately not 0.0 so that a
# lookup miss is visible in quiz output rather than ranking below 32o.
EQUITY_FALLBACK = 0.30

PREFLOP_EQUITY: dict[str, float] = {
    # Pocket pairs
    "AA": 85.0, "KK": 82.4, "QQ": 80.0, "JJ": 77.5, "TT": 75.1,
    "99": 72.1, "88": 69.1, "77": 66.2, "66": 63.3, "55": 60.3,
    "44": 57.0, "33": 53.7, "22": 50.3,
    # Ax
    "AKs": 67.0, "AQs": 66.1, "AJs": 65.4, "ATs": 64.7, "A9s": 63.0,
    "A8s": 62.1, "A7s": 61.1, "A6s": 60.0, "A5s": 60.2, "A4s": 59.3,
    "A3s": 58.5, "A2s": 57.7,
    "AKo": 65.3, "AQo": 64.4, "AJo": 63.6, "ATo": 62.8, "A9o": 60.7,
    "A8o": 59.7, "A7o": 58.6, "A6o": 57.4, "A5o": 57.6, "A4o": 56.6,
    "A3o": 55.8, "A2o": 55.0,
    # Kx
    "KQs": 63.4, "KJs": 62.6, "KTs": 61.9, "K9s": 60.0, "K8s": 58.5,
    "K7s": 57.8, "K6s": 56.8, "K5s": 55.8, "K4s": 54.9, "K3s": 54.1,
    "K2s": 53.3,
    "KQo": 61.4, "KJo": 60.6, "KTo": 59.8, "K9o": 57.6, "K8o": 55.8,
    "K7o": 55.0, "K6o": 53.9, "K5o": 52.9, "K4o": 51.9, "K3o": 51.1,
    "K2o": 50.2,
    # Qx
    "QJs": 60.3, "QTs": 59.5, "Q9s": 57.9, "Q8s": 56.2, "Q7s": 54.6,
    "Q6s": 54.0, "Q5s": 53.1, "Q4s": 52.2, "Q3s": 51.4, "Q2s": 50.6,
    "QJo": 58.2, "QTo": 57.3, "Q9o": 55.3, "Q8o": 53.3, "Q7o": 51.5,
    "Q6o": 50.8, "Q5o": 49.8, "Q4o": 48.8, "Q3o": 47.9, "Q2o": 47.1,
    # Jx
    "JTs": 57.5, "J9s": 55.8, "J8s": 54.2, "J7s": 52.4, "J6s": 51.0,
    "J5s": 50.4, "J4s": 49.5, "J3s": 48.7, "J2s": 47.9,
    "JTo": 55.4, "J9o": 53.4, "J8o": 51.5, "J7o": 49.5, "J6o": 47.9,
    "J5o": 47.3, "J4o": 46.3, "J3o": 45.5, "J2o": 44.6,
    # Tx
    "T9s": 54.3, "T8s": 52.6, "T7s": 50.9, "T6s": 49.3, "T5s": 47.8,
    "T4s": 47.2, "T3s": 46.4, "T2s": 45.6,
    "T9o": 51.7, "T8o": 49.8, "T7o": 47.8, "T6o": 46.0, "T5o": 44.4,
    "T4o": 43.7, "T3o": 42.8, "T2o": 42.0,
    # 9x
    "98s": 51.1, "97s": 49.5, "96s": 47.8, "95s": 46.1, "94s": 44.7,
    "93s": 44.1, "92s": 43.4,
    "98o": 48.3, "97o": 46.5, "96o": 44.5, "95o": 42.7, "94o": 41.2,
    "93o": 40.5, "92o": 39.7,
    # 8x
    "87s": 48.2, "86s": 46.5, "85s": 44.8, "84s": 43.2, "83s": 41.8,
    "82s": 41.2,
    "87o": 45.2, "86o": 43.2, "85o": 41.4, "84o": 39.6, "83o": 38.1,
    "82o": 37.4,
    # 7x
    "76s": 45.7, "75s": 44.0, "74s": 42.3, "73s": 40.7, "72s": 39.4,
    "76o": 42.5, "75o": 40.6, "74o": 38.7, "73o": 36.9, "72o": 35.5,
    # 6x
    "65s": 43.2, "64s": 41.4, "63s": 39.8, "62s": 38.4,
    "65o": 39.8, "64o": 37.8, "63o": 36.0, "62o": 34.5,
    # 5x
    "54s": 41.1, "53s": 39.4, "52s": 37.9,
    "54o": 37.6, "53o": 35.7, "52o": 34.2,
    # 4x
    "43s": 38.0, "42s": 36.6,
    "43o": 34.3, "42o": 32.7,
    # 3x
    "32s": 35.4,
    "32o": 31.6,
}


def equity(hand: str | Hand) -> float:
    """
    Equity vs a random hand as a fraction in [0, 1].

    Unparseable or unknown input returns EQUITY_FALLBACK.
    """
    try:
        key = normalize(hand)
    except InvalidNotation:
        logger.warning(f"Equity lookup for invalid hand {hand!r}; using fallback {EQUITY_FALLBACK}")
        return EQUITY_FALLBACK

    value = PREFLOP_EQUITY.get(key)
    if value is None:
        logger.warning(f"No equity entry for {key}; using fallback {EQUITY_FALLBACK}")
        return EQUITY_FALLBACK
    return value / 100


def equity_percent(hand: str | Hand) -> float:
    """Equity vs a random hand in percent."""
    return round(equity(hand) * 100, 1)


def compare_hands(first: str | Hand, second: str | Hand) -> float:
    """Positive when `first` has more equity than `second`."""
    return equity(first) - equity(second)


def sort_by_equity(hands: Iterable[str | Hand]) -> list[str]:
    """Canonical notations sorted strongest first."""
    return sorted((normalize(h) for h in hands), key=equity, reverse=True)

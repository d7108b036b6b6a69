"""
HandModel - the 169 canonical starting hands.

- hand: Hand/Shape, parse/normalize, grid mapping, enumeration, sampling
- equity: static equity-vs-random table
- tiers: premium ... trash classification
- cards: concrete cards for boards and display
"""

from src.hands.equity import EQUITY_FALLBACK, PREFLOP_EQUITY, equity
from src.hands.hand import (
    ALL_HANDS,
    ALL_NOTATIONS,
    RANKS,
    Hand,
    Shape,
    enumerate_all,
    from_grid,
    grid_coord,
    normalize,
    parse,
    random_hand,
)

__all__ = [
    "ALL_HANDS",
    "ALL_NOTATIONS",
    "EQUITY_FALLBACK",
    "PREFLOP_EQUITY",
    "RANKS",
    "Hand",
    "Shape",
    "enumerate_all",
    "equity",
    "from_grid",
    "grid_coord",
    "normalize",
    "parse",
    "random_hand",
]

"""
Drill and scenario handlers for tutor sessions.

Each content unit that runs on the DrillEngine has its own handler with:
- generate(): build the next question from session state and an RNG
- validate(): score an answer against the reference range/table
- explain(): reasoning shown after the answer

Handlers register themselves by unit id; the progress curriculum refers
to the same ids.
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.engine.base import DrillHandler


class DrillKind(str, Enum):
    """Unit ids that run on the drill engine."""
    # Stage 1: foundations quizzes
    HAND_STRENGTH = "hand-strength"
    POSITION = "position"
    EQUITY = "equity"
    # Stage 2: speed drills
    HAND_RANKING = "hand-ranking"
    OPEN_FOLD = "open-fold"
    EQUITY_SNAP = "equity-snap"
    RANGE_CHECK = "range-check"
    POSITION_SPEED = "position-speed"
    # Stage 3: scenarios
    DEFEND_3BET = "defend-3bet"
    BB_DEFENSE = "bb-defense"
    VALUE_3BET = "3bet-value"
    SB_3BET_FOLD = "sb-3bet-fold"
    COLD_4BET = "cold-4bet"
    BOARD_TEXTURE = "board-texture"


# Handler registry - populated by @register decorator
HANDLERS: dict[DrillKind, "DrillHandler"] = {}


def register(kind: DrillKind):
    """Decorator to register a drill handler."""
    def decorator(cls):
        HANDLERS[kind] = cls()
        return cls
    return decorator


def get_drill(kind: str | DrillKind) -> "DrillHandler | None":
    """Get the handler for a unit id."""
    if isinstance(kind, str):
        try:
            kind = DrillKind(kind.lower())
        except ValueError:
            return None
    return HANDLERS.get(kind)


# Import handlers to trigger registration
from . import foundations
from . import hand_ranking
from . import open_fold
from . import equity_snap
from . import range_check
from . import position_speed
from . import preflop_scenarios
from . import board_texture

__all__ = [
    "DrillKind",
    "HANDLERS",
    "get_drill",
    "register",
]

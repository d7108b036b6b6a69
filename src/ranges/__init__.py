"""
RangeModel - named hand sets and the algebra drills need.

- models: Action, Range, BucketedRange
- algebra: contains, bucket_for, similarity, difference, percentage_of_deck
- opening: positions and opening ranges
- scenario_ranges: 3-bet / 4-bet / defense tables
- board: flop texture classification and generation
"""

from src.ranges.algebra import (
    RangeDifference,
    bucket_for,
    contains,
    difference,
    grid_to_hands,
    percentage_of_deck,
    range_to_grid,
    similarity,
)
from src.ranges.board import BoardTexture, classify_board_texture, generate_board
from src.ranges.models import Action, BucketedRange, Range, parse_action

__all__ = [
    "Action",
    "BoardTexture",
    "BucketedRange",
    "Range",
    "RangeDifference",
    "bucket_for",
    "classify_board_texture",
    "contains",
    "difference",
    "generate_board",
    "grid_to_hands",
    "parse_action",
    "percentage_of_deck",
    "range_to_grid",
    "similarity",
]

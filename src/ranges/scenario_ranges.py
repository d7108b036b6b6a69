"""
Consensus preflop ranges for the scenario stage.

Simplified from solver output and common training material: mixed-strategy
hands are collapsed to a single action. Every table maps a spot key to a
BucketedRange; hands not listed are folds.
"""
from __future__ import annotations

from typing import Mapping

from src.ranges.models import Action, BucketedRange, Range

A4, A3, CALL = Action.FOUR_BET, Action.THREE_BET, Action.CALL


# ============================================================================
# DEFEND VS 3-BET: you opened, villain 3-bets. 4-bet / Call / Fold.
# ============================================================================

DEFEND_VS_3BET: dict[str, BucketedRange] = {
    "CO_vs_BTN": BucketedRange.from_buckets("CO open vs BTN 3-bet", {
        A4: ["AA", "KK", "QQ", "AKs", "AKo"],
        CALL: ["JJ", "TT", "99", "AQs", "AJs", "ATs", "KQs", "KJs", "QJs", "JTs", "AQo"],
    }),
    "CO_vs_SB": BucketedRange.from_buckets("CO open vs SB 3-bet", {
        A4: ["AA", "KK", "QQ", "AKs", "AKo"],
        CALL: ["JJ", "TT", "99", "AQs", "AJs", "ATs", "KQs", "QJs", "JTs", "AQo"],
    }),
    "CO_vs_BB": BucketedRange.from_buckets("CO open vs BB 3-bet", {
        A4: ["AA", "KK", "QQ", "AKs", "AKo"],
        CALL: [
            "JJ", "TT", "99", "88", "AQs", "AJs", "ATs", "A9s", "KQs", "KJs",
            "QJs", "JTs", "T9s", "AQo", "AJo",
        ],
    }),
    "BTN_vs_SB": BucketedRange.from_buckets("BTN open vs SB 3-bet", {
        A4: ["AA", "KK", "QQ", "AKs", "AKo"],
        CALL: [
            "JJ", "TT", "99", "88", "AQs", "AJs", "ATs", "A9s", "A8s",
            "KQs", "KJs", "KTs", "QJs", "QTs", "JTs", "J9s", "T9s",
            "AQo", "AJo", "KQo",
        ],
    }),
    "BTN_vs_BB": BucketedRange.from_buckets("BTN open vs BB 3-bet", {
        A4: ["AA", "KK", "QQ", "AKs", "AKo"],
        CALL: [
            "JJ", "TT", "99", "88", "77", "AQs", "AJs", "ATs", "A9s", "A8s", "A7s",
            "KQs", "KJs", "KTs", "K9s", "QJs", "QTs", "JTs", "J9s", "T9s", "T8s", "98s",
            "AQo", "AJo", "ATo", "KQo", "KJo",
        ],
    }),
    "MP_vs_CO": BucketedRange.from_buckets("MP open vs CO 3-bet", {
        A4: ["AA", "KK", "QQ", "AKs"],
        CALL: ["JJ", "TT", "AQs", "AJs", "KQs", "AKo"],
    }),
    "UTG_vs_MP": BucketedRange.from_buckets("UTG open vs MP 3-bet", {
        A4: ["AA", "KK"],
        CALL: ["QQ", "JJ", "AKs", "AQs", "AKo"],
    }),
}


# ============================================================================
# BB DEFENSE: villain opens, you are in the big blind. 3-bet / Call / Fold.
# ============================================================================

BB_DEFENSE: dict[str, BucketedRange] = {
    "vs_BTN": BucketedRange.from_buckets("BB vs BTN open", {
        A3: [
            "AA", "KK", "QQ", "JJ", "AKs", "AQs", "AJs", "AKo", "AQo",
            "A5s", "A4s", "A3s", "A2s",
        ],
        CALL: [
            "TT", "99", "88", "77", "66", "55", "44", "33", "22",
            "ATs", "A9s", "A8s", "A7s", "A6s",
            "KQs", "KJs", "KTs", "K9s", "K8s", "K7s",
            "QJs", "QTs", "Q9s", "Q8s", "JTs", "J9s", "J8s", "T9s", "T8s",
            "98s", "97s", "87s", "86s", "76s", "75s", "65s", "64s", "54s", "53s", "43s",
            "AJo", "ATo", "A9o", "KQo", "KJo", "KTo", "QJo", "QTo", "JTo",
        ],
    }),
    "vs_CO": BucketedRange.from_buckets("BB vs CO open", {
        A3: ["AA", "KK", "QQ", "JJ", "AKs", "AQs", "AKo", "A5s", "A4s"],
        CALL: [
            "TT", "99", "88", "77", "66", "55",
            "AJs", "ATs", "A9s", "A8s", "KQs", "KJs", "KTs", "K9s",
            "QJs", "QTs", "Q9s", "JTs", "J9s", "T9s", "T8s",
            "98s", "97s", "87s", "86s", "76s", "75s", "65s", "54s",
            "AQo", "AJo", "ATo", "KQo", "KJo", "QJo",
        ],
    }),
    "vs_MP": BucketedRange.from_buckets("BB vs MP open", {
        A3: ["AA", "KK", "QQ", "AKs", "AQs", "AKo", "A5s"],
        CALL: [
            "JJ", "TT", "99", "88", "77", "AJs", "ATs", "A9s", "KQs", "KJs", "KTs",
            "QJs", "QTs", "JTs", "J9s", "T9s", "98s", "87s", "76s", "65s",
            "AQo", "AJo", "KQo",
        ],
    }),
    "vs_UTG": BucketedRange.from_buckets("BB vs UTG open", {
        A3: ["AA", "KK", "QQ", "AKs"],
        CALL: [
            "JJ", "TT", "99", "88", "77", "AQs", "AJs", "ATs", "KQs", "KJs",
            "QJs", "JTs", "T9s", "98s", "87s", "76s", "AQo", "AJo", "KQo",
        ],
    }),
    "vs_SB": BucketedRange.from_buckets("BB vs SB open", {
        A3: [
            "AA", "KK", "QQ", "JJ", "TT", "AKs", "AQs", "AJs", "ATs", "AKo", "AQo",
            "A5s", "A4s", "A3s", "A2s", "K9s", "Q9s", "J9s",
        ],
        CALL: [
            "99", "88", "77", "66", "55", "44", "33", "22",
            "A9s", "A8s", "A7s", "A6s",
            "KQs", "KJs", "KTs", "K8s", "K7s", "K6s", "K5s", "K4s",
            "QJs", "QTs", "Q8s", "JTs", "J8s", "T9s", "T8s", "T7s",
            "98s", "97s", "96s", "87s", "86s", "85s", "76s", "75s", "74s",
            "65s", "64s", "54s", "53s", "43s",
            "AJo", "ATo", "A9o", "A8o", "KJo", "KTo", "K9o", "QJo", "QTo", "JTo", "J9o", "T9o",
        ],
    }),
}


# ============================================================================
# VALUE 3-BET: value and blocker 3-bets vs an open. 3-bet / Call / Fold.
# ============================================================================

VALUE_3BET_UNIVERSAL = Range.of("Universal value 3-bets", ["AA", "KK", "QQ", "AKs", "AKo"])

# Hands good enough to flat an open but not to 3-bet for value.
VALUE_3BET_CALL_HANDS: tuple[str, ...] = (
    "TT", "99", "88", "77", "66",
    "AJs", "ATs", "A9s", "KQs", "KJs", "KTs", "QJs", "QTs", "JTs", "J9s",
    "T9s", "T8s", "98s", "97s", "87s", "86s", "76s",
    "AQo", "AJo", "ATo", "KQo", "KJo",
)


def _value_spot(name: str, value: list[str], bluff: list[str]) -> BucketedRange:
    return BucketedRange.from_buckets(name, {A3: value + bluff, CALL: VALUE_3BET_CALL_HANDS})


VALUE_3BET: dict[str, BucketedRange] = {
    "BB_vs_steal": _value_spot(
        "BB vs steal",
        ["AA", "KK", "QQ", "JJ", "AKs", "AQs", "AJs", "AKo", "AQo"],
        ["A5s", "A4s", "A3s", "A2s"],
    ),
    "SB_vs_BTN": _value_spot(
        "SB vs BTN open",
        ["AA", "KK", "QQ", "JJ", "TT", "AKs", "AQs", "AJs", "AKo", "AQo"],
        ["A5s", "A4s", "A3s", "A2s", "K5s", "K4s"],
    ),
    "CO_vs_EP": _value_spot(
        "CO vs early-position open",
        ["AA", "KK", "QQ", "AKs", "AKo"],
        ["A5s", "A4s"],
    ),
    "BTN_vs_open": _value_spot(
        "BTN vs open",
        ["AA", "KK", "QQ", "JJ", "AKs", "AQs", "AKo", "AQo"],
        ["A5s", "A4s", "A3s", "K5s", "Q5s"],
    ),
}


# ============================================================================
# SB 3-BET OR FOLD: from the small blind, flatting is rarely right.
# ============================================================================

SB_3BET_OR_FOLD: dict[str, BucketedRange] = {
    "vs_BTN": BucketedRange.from_buckets("SB vs BTN open", {
        A3: [
            "AA", "KK", "QQ", "JJ", "TT", "99", "AKs", "AQs", "AJs", "ATs",
            "AKo", "AQo", "AJo", "KQs", "KJs", "A5s", "A4s", "A3s", "A2s", "K5s", "K4s",
        ],
    }),
    "vs_CO": BucketedRange.from_buckets("SB vs CO open", {
        A3: ["AA", "KK", "QQ", "JJ", "TT", "AKs", "AQs", "AJs", "AKo", "AQo", "KQs", "A5s", "A4s"],
    }),
    "vs_MP": BucketedRange.from_buckets("SB vs MP open", {
        A3: ["AA", "KK", "QQ", "JJ", "AKs", "AQs", "AKo", "A5s"],
    }),
    "vs_UTG": BucketedRange.from_buckets("SB vs UTG open", {
        A3: ["AA", "KK", "QQ", "AKs", "AKo"],
    }),
}


# ============================================================================
# COLD 4-BET: facing an open and a 3-bet. 4-bet / Fold.
# ============================================================================

COLD_4BET: dict[str, BucketedRange] = {
    "IP": BucketedRange.from_buckets("Cold 4-bet in position", {A4: ["AA", "KK"]}),
    "OOP": BucketedRange.from_buckets("Cold 4-bet out of position", {A4: ["AA", "KK"]}),
}


def scenario_range(table: Mapping[str, BucketedRange], key: str) -> BucketedRange:
    """Spot lookup with a readable KeyError."""
    try:
        return table[key]
    except KeyError:
        raise KeyError(f"No scenario range for spot {key!r}; known spots: {', '.join(sorted(table))}") from None

"""
Five-tier starting-hand classification used by the hand-strength module.
"""
from __future__ import annotations

from dataclasses import dataclass

from src.hands.hand import Hand, normalize


@dataclass(frozen=True)
class Tier:
    key: str
    name: str
    description: str
    hands: frozenset[str]


HAND_TIERS: dict[str, Tier] = {
    "premium": Tier(
        "premium",
        "Premium",
        "The strongest starting hands. Raise from any position.",
        frozenset({"AA", "KK", "QQ", "JJ", "TT", "AKs", "AKo", "AQs"}),
    ),
    "strong": Tier(
        "strong",
        "Strong",
        "Very playable hands. Open from most positions.",
        frozenset({"99", "88", "77", "AQo", "AJs", "ATs", "KQs", "KJs", "QJs", "JTs"}),
    ),
    "playable": Tier(
        "playable",
        "Playable",
        "Good hands in position. Be more selective early position.",
        frozenset({
            "66", "55", "44", "33", "22", "AJo", "ATo",
            "A9s", "A8s", "A7s", "A6s", "A5s", "A4s", "A3s", "A2s",
            "KQo", "KJo", "KTs", "K9s", "QJo", "QTs", "Q9s", "JTo", "J9s",
            "T9s", "T8s", "98s", "87s", "76s", "65s", "54s",
        }),
    ),
    "marginal": Tier(
        "marginal",
        "Marginal",
        "Only playable in late position or specific situations.",
        frozenset({
            "A9o", "A8o", "A7o", "A6o", "A5o", "A4o", "A3o", "A2o",
            "KTo", "K9o", "K8s", "K7s", "K6s", "K5s", "K4s", "K3s", "K2s",
            "QTo", "Q9o", "Q8s", "Q7s", "J9o", "J8s", "T9o", "T8o", "T7s",
            "97s", "96s", "86s", "85s", "75s", "74s", "64s", "53s", "43s",
        }),
    ),
    "trash": Tier(
        "trash",
        "Trash",
        "Fold these hands. Not profitable to play.",
        frozenset({
            "72o", "83o", "84o", "93o", "94o", "95o", "T2o", "T3o", "T4o",
            "J2o", "J3o", "J4o", "Q2o", "Q3o", "Q4o", "Q5o", "K2o", "62o",
            "63o", "73o", "74o", "82o", "92o", "52o", "42o", "32o",
        }),
    ),
}

TIER_ORDER: tuple[str, ...] = tuple(HAND_TIERS)


def hand_tier(hand: str | Hand) -> str:
    """Tier key for a hand; anything not listed is trash."""
    notation = normalize(hand)
    for key, tier in HAND_TIERS.items():
        if notation in tier.hands:
            return key
    return "trash"

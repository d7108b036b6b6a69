"""
Sampling helpers for question generators.

All randomness goes through an injected random.Random so sessions are
reproducible under a seed.
"""
from __future__ import annotations

import random
from typing import Iterable, Sequence, TypeVar

T = TypeVar("T")


def weighted_choice(rng: random.Random, weights: Sequence[tuple[T, float]]) -> T:
    """
    Single roll against cumulative weights.

    Weights need not sum to 1: the last entry absorbs whatever probability
    mass remains, so `[(a, 0.25), (b, 0.35), (c, 0.0)]` picks c 40% of the time.
    """
    if not weights:
        raise ValueError("weighted_choice needs at least one option")
    roll = rng.random()
    cumulative = 0.0
    for value, weight in weights[:-1]:
        cumulative += weight
        if roll < cumulative:
            return value
    return weights[-1][0]


def pick_excluding(
    rng: random.Random,
    pool: Sequence[str],
    exclude: Iterable[str],
    fallback: Sequence[str],
) -> str:
    """Random item from `pool` not in `exclude`; `fallback` if nothing survives the filter."""
    blocked = set(exclude)
    candidates = [item for item in pool if item not in blocked]
    return rng.choice(candidates or list(fallback))

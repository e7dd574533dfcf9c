"""Selection and crossover operators shared by the genetic algorithms."""

from __future__ import annotations

import random
from typing import Sequence, TypeVar

S = TypeVar("S", str, list, tuple)


def roulette_select(normfit: Sequence[float], rng: random.Random) -> int:
    """Pick an index with probability given by normalised fitness.

    If rounding leaves the cumulative sum short of the drawn value, the
    last index is returned.
    """
    if not normfit:
        raise ValueError("cannot select from an empty population")
    x = rng.random()
    total = 0.0
    for i, value in enumerate(normfit):
        total += value
        if x <= total:
            return i
    return len(normfit) - 1


def crossover(a: S, b: S, cpoint: int) -> tuple[S, S]:
    """Swap the tails of two equal-length sequences after ``cpoint`` items."""
    if len(a) != len(b):
        raise ValueError(f"parents differ in length: {len(a)} and {len(b)}")
    if not 0 <= cpoint <= len(a):
        raise ValueError(f"crossover point {cpoint} is outside 0..{len(a)}")
    return a[:cpoint] + b[cpoint:], b[:cpoint] + a[cpoint:]
"""Find the highest peak of a multi-humped surface with a genetic algorithm."""

from __future__ import annotations

import argparse
import math
import random
from typing import Iterator, Sequence

from .genetic import crossover, roulette_select


def _bump(x: float, y: float, a: float, b: float) -> float:
    return math.exp(-(x - a) * (x - a) - (y - b) * (y - b))


def surface(x: float, y: float) -> float:
    """Sum of nine radial bumps scaled so the highest peak is about 1."""
    return (
        _bump(x, y, 2, 2) + _bump(x, y, -2, 2) + _bump(x, y, -2, -2)
        + _bump(x, y, 2, -2) + 1.5 * _bump(x, y, 0, 0)
        + 0.5 * (_bump(x, y, 0, 3) + _bump(x, y, 3, 0)
                 + _bump(x, y, 0, -3) + _bump(x, y, -3, 0))
    ) / 1.50158867011978


def decode(bits: str) -> float:
    """Map a string of '0' and '1' onto [-4, 4)."""
    if not bits or set(bits) - {"0", "1"}:
        raise ValueError(f"not a bit string: {bits!r}")
    return int(bits, 2) / 2 ** len(bits) * 8 - 4


def _random_bits(count: int, rng: random.Random) -> str:
    """Return ``count`` random '0'/'1' characters."""
    return "".join(str(rng.randrange(2)) for _ in range(count))


def _normalize(fit: Sequence[float]) -> list[float]:
    total = sum(fit)
    if total == 0:
        return [1.0 / len(fit)] * len(fit)
    return [f / total for f in fit]


def _reproduce(
    pa: str, pb: str, crate: float, mrate: float, rng: random.Random
) -> tuple[str, str]:
    length = len(pa)
    cpoint = rng.randrange(1, length) if rng.random() < crate and length > 1 else length
    a, b = (list(s) for s in crossover(pa, pb, cpoint))
    for i in range(length):
        if rng.random() < mrate:
            a[i] = str(rng.randrange(2))
        if rng.random() < mrate:
            b[i] = str(rng.randrange(2))
    return "".join(a), "".join(b)


def _run(size, gens, length, crate, mrate, rng):
    pop = [_random_bits(2 * length, rng) for _ in range(size)]
    for _ in range(gens):
        fit = [surface(decode(dna[:length]), decode(dna[length:])) for dna in pop]
        yield list(pop), fit
        normfit = _normalize(fit)
        nextpop: list[str] = []
        while len(nextpop) < size:
            pa = pop[roulette_select(normfit, rng)]
            pb = pop[roulette_select(normfit, rng)]
            nextpop.extend(_reproduce(pa, pb, crate, mrate, rng))
        pop = nextpop


def evolve(
    size: int = 10,
    gens: int = 50,
    length: int = 16,
    crate: float = 0.75,
    mrate: float = 0.01,
    rng: random.Random | None = None,
) -> Iterator[tuple[list[str], list[float]]]:
    """Yield (population, raw fitnesses) for each generation.

    Each DNA string holds x in its first ``length`` bits and y in the
    rest.  An odd population size is rounded up to the next even number.
    """
    if size < 1:
        raise ValueError(f"population size must be positive, got {size}")
    if length < 1:
        raise ValueError(f"DNA length must be positive, got {length}")
    size += size % 2
    return _run(size, gens, length, crate, mrate,
                rng if rng is not None else random.Random(0))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gasurf",
        allow_abbrev=False,
        description="Find the maximum of a multi-humped surface with a genetic algorithm.",
    )
    parser.add_argument("-size", type=int, default=10, help="Population size.")
    parser.add_argument("-len", dest="length", type=int, default=16, help="DNA length.")
    parser.add_argument("-gens", type=int, default=50, help="Number of generations.")
    parser.add_argument("-seed", type=int, default=0)
    parser.add_argument("-crate", type=float, default=0.75, help="Crossover rate.")
    parser.add_argument("-mrate", type=float, default=0.01, help="Mutation rate.")
    args = parser.parse_args(argv)
    try:
        generations = evolve(args.size, args.gens, args.length, args.crate,
                             args.mrate, random.Random(args.seed))
    except ValueError as exc:
        parser.error(str(exc))
    n = args.length
    for t, (pop, fit) in enumerate(generations):
        besti = max(range(len(fit)), key=fit.__getitem__)
        best = pop[besti]
        print("---")
        print(f"time = {t}")
        print(f"average value = {sum(fit) / len(fit):f}")
        print(f"best (x, y) = ({decode(best[:n]):f}, {decode(best[n:]):f})")
        print(f'best DNA = "{best}"')
        print(f"best value = {fit[besti]:f}")
    return 0
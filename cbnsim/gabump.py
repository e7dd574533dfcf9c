"""Find the peak of a one-dimensional bump with a genetic algorithm."""

from __future__ import annotations

import argparse
import math
import random
from typing import Iterator, Sequence

from .genetic import crossover, roulette_select


def bump(x: float, target: float = 0.5, var: float = 1.0) -> float:
    """Gaussian bump of height 1 centred at ``target``."""
    return math.exp(-(x - target) * (x - target) / var)


def decode(bits: str) -> float:
    """Read a string of '0' and '1' as a binary fraction in [0, 1)."""
    if not bits or set(bits) - {"0", "1"}:
        raise ValueError(f"not a bit string: {bits!r}")
    return int(bits, 2) / 2 ** len(bits)


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


def _run(size, gens, length, crate, mrate, target, var, rng):
    pop = [_random_bits(length, rng) for _ in range(size)]
    for _ in range(gens):
        fit = [bump(decode(dna), target, var) for dna in pop]
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
    crate: float = 0.25,
    mrate: float = 0.01,
    target: float = 0.5,
    var: float = 1.0,
    rng: random.Random | None = None,
) -> Iterator[tuple[list[str], list[float]]]:
    """Yield (population, raw fitnesses) for each generation.

    An odd population size is rounded up to the next even number.
    """
    if size < 1:
        raise ValueError(f"population size must be positive, got {size}")
    if length < 1:
        raise ValueError(f"DNA length must be positive, got {length}")
    size += size % 2
    return _run(size, gens, length, crate, mrate, target, var,
                rng if rng is not None else random.Random(0))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gabump",
        allow_abbrev=False,
        description="Find the maximum of a single-humped function with a genetic algorithm.",
    )
    parser.add_argument("-target", type=float, default=0.5, help="Centre of the bump.")
    parser.add_argument("-var", type=float, default=1.0, help="Variance of the bump.")
    parser.add_argument("-size", type=int, default=10, help="Population size.")
    parser.add_argument("-len", dest="length", type=int, default=16, help="DNA length.")
    parser.add_argument("-gens", type=int, default=50, help="Number of generations.")
    parser.add_argument("-seed", type=int, default=0)
    parser.add_argument("-crate", type=float, default=0.25, help="Crossover rate.")
    parser.add_argument("-mrate", type=float, default=0.01, help="Mutation rate.")
    args = parser.parse_args(argv)
    try:
        generations = evolve(args.size, args.gens, args.length, args.crate, args.mrate,
                             args.target, args.var, random.Random(args.seed))
    except ValueError as exc:
        parser.error(str(exc))
    for t, (pop, fit) in enumerate(generations):
        besti = max(range(len(fit)), key=fit.__getitem__)
        print("---")
        print(f"time = {t}")
        print(f"average value = {sum(fit) / len(fit):f}")
        print(f"best x = {decode(pop[besti]):f}")
        print(f'best DNA = "{pop[besti]}"')
        print(f"best value = {fit[besti]:f}")
    return 0
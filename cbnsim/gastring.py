"""Breed strings toward a target string with a genetic algorithm."""

from __future__ import annotations

import argparse
import random
import string
from dataclasses import dataclass
from typing import Iterator, Sequence

from .genetic import crossover, roulette_select

_ALPHABET = string.ascii_lowercase + " "


@dataclass(frozen=True)
class GenerationStats:
    """Summary of one generation: mean and best fraction of correct letters."""

    time: int
    average: float
    best_fraction: float
    best: str


def random_letter_or_space(rng: random.Random) -> str:
    """A lower-case letter or a space, each equally likely."""
    return _ALPHABET[rng.randrange(len(_ALPHABET))]


def string_fitness(
    population: Sequence[str], target: str, pbase: float = 2.0
) -> tuple[list[int], list[float]]:
    """Return the correct-letter counts and the normalised fitnesses.

    One more correct letter makes a string ``pbase`` times as fit.
    """
    tlen = len(target)
    correct = [sum(1 for a, b in zip(s, target) if a == b) for s in population]
    raw = [pbase ** (c - tlen) for c in correct]
    total = sum(raw)
    if total == 0:
        raise ValueError("fitnesses sum to zero; check pbase")
    return correct, [f / total for f in raw]


def _reproduce(
    pa: str, pb: str, crate: float, mrate: float, rng: random.Random
) -> tuple[str, str]:
    length = len(pa)
    cpoint = rng.randrange(1, length) if rng.random() < crate and length > 1 else length
    a, b = (list(s) for s in crossover(pa, pb, cpoint))
    for i in range(length):
        if rng.random() < mrate:
            a[i] = random_letter_or_space(rng)
        if rng.random() < mrate:
            b[i] = random_letter_or_space(rng)
    return "".join(a), "".join(b)


def _run(
    target: str, size: int, steps: int, crate: float, mrate: float,
    pbase: float, rng: random.Random,
) -> Iterator[GenerationStats]:
    tlen = len(target)
    pop = ["".join(random_letter_or_space(rng) for _ in range(tlen)) for _ in range(size)]
    for t in range(steps):
        correct, normfit = string_fitness(pop, target, pbase)
        besti = max(range(size), key=normfit.__getitem__)
        yield GenerationStats(
            t, sum(correct) / size / tlen, correct[besti] / tlen, pop[besti]
        )
        nextpop: list[str] = []
        while len(nextpop) < size:
            pa = pop[roulette_select(normfit, rng)]
            pb = pop[roulette_select(normfit, rng)]
            nextpop.extend(_reproduce(pa, pb, crate, mrate, rng))
        pop = nextpop


def evolve(
    target: str = "furious green ideas sweat profusely",
    size: int = 500,
    steps: int = 50,
    crate: float = 0.75,
    mrate: float = 0.01,
    pbase: float = 2.0,
    rng: random.Random | None = None,
) -> Iterator[GenerationStats]:
    """Yield statistics for each of ``steps`` generations.

    An odd population size is rounded up to the next even number.
    """
    if not target:
        raise ValueError("target string must not be empty")
    if size < 1:
        raise ValueError(f"population size must be positive, got {size}")
    size += size % 2
    return _run(target, size, steps, crate, mrate, pbase,
                rng if rng is not None else random.Random(0))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gastring",
        allow_abbrev=False,
        description="Breed strings that match a target string with a genetic algorithm.",
    )
    parser.add_argument("-target", default="furious green ideas sweat profusely")
    parser.add_argument("-size", type=int, default=500, help="Population size.")
    parser.add_argument("-steps", type=int, default=50, help="Number of generations.")
    parser.add_argument("-seed", type=int, default=0)
    parser.add_argument("-crate", type=float, default=0.75, help="Crossover rate.")
    parser.add_argument("-mrate", type=float, default=0.01, help="Mutation rate.")
    parser.add_argument("-pbase", type=float, default=2.0, help="Power base for fitness.")
    args = parser.parse_args(argv)
    try:
        generations = evolve(args.target, args.size, args.steps, args.crate,
                             args.mrate, args.pbase, random.Random(args.seed))
    except ValueError as exc:
        parser.error(str(exc))
    for stats in generations:
        print("---")
        print(f"time = {stats.time}")
        print(f"average % letters correct = {stats.average:f}")
        print(f"best % letters correct = {stats.best_fraction:f}")
        print(f'best = "{stats.best}"')
    return 0
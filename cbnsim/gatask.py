"""Solve a task assignment problem with a genetic algorithm.

A candidate solution is a permutation: entry i names the task done by
performer i.  The crossover and mutation operators both swap entries, so
every child is still a permutation.  Higher total values are fitter, and
a solution scoring one more than another is ``pbase`` times as likely to
be chosen as a parent.
"""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import Iterator, Sequence

from .genetic import roulette_select

_BAD_FILE = "Problem found in specification file."


def _to_int(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        return int(float(token))


def read_specs(path: str | Path) -> list[list[int]]:
    """Read an n followed by n*n integer values; '#' starts a comment."""
    tokens: list[str] = []
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            tokens.extend(line.split("#", 1)[0].split())
    if not tokens:
        raise ValueError(_BAD_FILE)
    try:
        n = _to_int(tokens[0])
        values = [_to_int(tok) for tok in tokens[1 : 1 + n * n]]
    except ValueError:
        raise ValueError(_BAD_FILE) from None
    if n < 1 or len(values) < n * n:
        raise ValueError(_BAD_FILE)
    return [values[i * n : (i + 1) * n] for i in range(n)]


def random_solution(n: int, rng: random.Random) -> list[int]:
    """A uniformly random permutation of 0 .. n-1."""
    if n < 0:
        raise ValueError(f"solution length must not be negative, got {n}")
    x = list(range(n))
    for i in range(n - 1):
        j = rng.randrange(i, n)
        x[i], x[j] = x[j], x[i]
    return x


def task_cost(cost: Sequence[Sequence[float]], solution: Sequence[int]) -> float:
    """Total value of giving performer i the task ``solution[i]``."""
    if len(solution) != len(cost):
        raise ValueError(
            f"solution has {len(solution)} entries for {len(cost)} performers"
        )
    return sum(row[task] for row, task in zip(cost, solution))


def _check_permutation(p: Sequence[int]) -> None:
    if sorted(p) != list(range(len(p))):
        raise ValueError(f"not a permutation: {list(p)!r}")


def task_crossover(
    a: Sequence[int], b: Sequence[int], index: int
) -> tuple[list[int], list[int]]:
    """Blend two permutations so that both children stay permutations.

    The first child takes the second parent's value at ``index``; the
    place where that value used to sit in the first parent receives the
    displaced value.  The second child swaps the same two positions.
    """
    if len(a) != len(b):
        raise ValueError(f"parents differ in length: {len(a)} and {len(b)}")
    _check_permutation(a)
    _check_permutation(b)
    if not 0 <= index < len(a):
        raise ValueError(f"crossover index {index} is outside 0..{len(a) - 1}")
    ca, cb = list(a), list(b)
    other = ca.index(cb[index])
    ca[index], ca[other] = ca[other], ca[index]
    cb[index], cb[other] = cb[other], cb[index]
    return ca, cb


def _selection_weights(fit: Sequence[float], pbase: float) -> list[float]:
    # Normalised pbase ** (f - ref) does not depend on ref; pick the one
    # that keeps every power at most 1.
    ref = max(fit) if pbase >= 1 else min(fit)
    raw = [pbase ** (f - ref) for f in fit]
    total = sum(raw)
    return [r / total for r in raw]


def _reproduce(
    pa: list[int], pb: list[int], crate: float, mrate: float, rng: random.Random
) -> tuple[list[int], list[int]]:
    n = len(pa)
    ca, cb = list(pa), list(pb)
    if rng.random() < crate:
        ca, cb = task_crossover(ca, cb, rng.randrange(n))
    for i in range(n):
        if rng.random() < mrate:
            j = rng.randrange(n)
            ca[i], ca[j] = ca[j], ca[i]
        if rng.random() < mrate:
            j = rng.randrange(n)
            cb[i], cb[j] = cb[j], cb[i]
    return ca, cb


def _run(cost, size, gens, crate, mrate, pbase, rng):
    n = len(cost)
    pop = [random_solution(n, rng) for _ in range(size)]
    for _ in range(gens):
        fit = [task_cost(cost, p) for p in pop]
        yield [list(p) for p in pop], fit
        normfit = _selection_weights(fit, pbase)
        nextpop: list[list[int]] = []
        while len(nextpop) < size:
            pa = pop[roulette_select(normfit, rng)]
            pb = pop[roulette_select(normfit, rng)]
            nextpop.extend(_reproduce(pa, pb, crate, mrate, rng))
        pop = nextpop


def evolve(
    cost: Sequence[Sequence[float]],
    size: int = 10,
    gens: int = 30,
    crate: float = 0.75,
    mrate: float = 0.01,
    pbase: float = 2.0,
    rng: random.Random | None = None,
) -> Iterator[tuple[list[list[int]], list[float]]]:
    """Yield (population, total values) for each generation.

    An odd population size is rounded up to the next even number.
    """
    n = len(cost)
    if n < 1 or any(len(row) != n for row in cost):
        raise ValueError("cost matrix must be square and non-empty")
    if size < 1:
        raise ValueError(f"population size must be positive, got {size}")
    if pbase <= 0:
        raise ValueError(f"exponentiation base must be positive, got {pbase}")
    size += size % 2
    return _run(cost, size, gens, crate, mrate, pbase,
                rng if rng is not None else random.Random(0))


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gatask",
        allow_abbrev=False,
        description="Solve a task assignment problem with a genetic algorithm.",
    )
    parser.add_argument("-specs", default="data/hop1.dat", help="Problem specification file.")
    parser.add_argument("-size", type=int, default=10, help="Population size.")
    parser.add_argument("-gens", type=int, default=30, help="Number of generations.")
    parser.add_argument("-seed", type=int, default=0)
    parser.add_argument("-crate", type=float, default=0.75, help="Crossover rate.")
    parser.add_argument("-mrate", type=float, default=0.01, help="Mutation rate.")
    parser.add_argument("-pbase", type=float, default=2.0, help="Exponentiation base.")
    args = parser.parse_args(argv)

    rng = random.Random(args.seed)
    try:
        cost = read_specs(args.specs)
    except OSError:
        print(f'Cannot open specification file "{args.specs}".', file=sys.stderr)
        return 1
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        generations = evolve(cost, args.size, args.gens, args.crate, args.mrate,
                             args.pbase, rng)
    except ValueError as exc:
        parser.error(str(exc))

    for t, (pop, fit) in enumerate(generations):
        besti = max(range(len(fit)), key=fit.__getitem__)
        print("---")
        print(f"time = {t}")
        print(f"average value = {sum(fit) / len(fit):f}")
        print("best DNA      = " + ", ".join(str(task + 1) for task in pop[besti]))
        print(f"best score    = {int(fit[besti])}")
    return 0
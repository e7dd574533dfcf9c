"""Breed iterated Prisoner's Dilemma strategies with a genetic algorithm.

A strategy with history length H is a lookup table of moves (0 for
cooperate, 1 for defect).  Its first entry is the opening move.  It is
followed by 4 entries for a history of one round, 16 for two rounds,
and so on.  A history is read as the bits A(t-1) B(t-1) A(t-2) B(t-2)
and so on, where A is the player's own move and B the opponent's.
"""

from __future__ import annotations

import argparse
import random
import sys
from collections import deque
from typing import Sequence

from .eipd import Payoffs
from .genetic import crossover, roulette_select

_MOVE_LETTERS = "CD"


def dna_offsets(hlen: int) -> list[int]:
    """Start of each history-length table in the DNA, plus the total length.

    ``dna_offsets(h)[t]`` is where the table for ``t`` remembered rounds
    begins; the final entry is the length of the whole strategy.
    """
    if hlen < 1:
        raise ValueError(f"history length must be at least 1, got {hlen}")
    offsets = [0]
    for i in range(hlen + 1):
        offsets.append(offsets[-1] + 4 ** i)
    return offsets


def format_strategy(dna: Sequence[int]) -> str:
    """Spell a strategy with 'C' for cooperate and 'D' for defect."""
    try:
        return "".join(_MOVE_LETTERS[move] for move in dna)
    except (IndexError, TypeError):
        raise ValueError(f"strategy moves must be 0 or 1: {dna!r}") from None


def _parse_strategy(strategy: str | Sequence[int]) -> list[int]:
    if isinstance(strategy, str):
        try:
            return [_MOVE_LETTERS.index(ch) for ch in strategy.upper()]
        except ValueError:
            raise ValueError(f"strategy letters must be C or D: {strategy!r}") from None
    moves = [int(m) for m in strategy]
    if any(m not in (0, 1) for m in moves):
        raise ValueError(f"strategy moves must be 0 or 1: {strategy!r}")
    return moves


class IPDGA:
    """A population of IPD strategies evolved by fitness-proportional breeding."""

    def __init__(
        self,
        size: int = 100,
        bouts: int = 50,
        rounds: int = 20,
        hlen: int = 1,
        crate: float = 0.25,
        mrate: float = 0.001,
        noise: float = 0.0,
        payoffs: Payoffs | None = None,
        rng: random.Random | None = None,
        population: Sequence[str | Sequence[int]] | None = None,
    ) -> None:
        if bouts < 1:
            raise ValueError(f"bouts per generation must be positive, got {bouts}")
        if rounds < 1:
            raise ValueError(f"rounds per bout must be positive, got {rounds}")
        self.offsets = dna_offsets(hlen)
        self.dna_length = self.offsets[-1]
        self.hlen = hlen
        self.bouts = bouts
        self.rounds = rounds
        self.crate = crate
        self.mrate = mrate
        self.noise = noise
        self.payoffs = payoffs if payoffs is not None else Payoffs(cc=4.0, cd=0.0, dc=5.0, dd=1.0)
        self.rng = rng if rng is not None else random.Random(0)

        if population is None:
            if size < 1:
                raise ValueError(f"population size must be positive, got {size}")
            size += size % 2
            self.population = [
                [self.rng.randrange(2) for _ in range(self.dna_length)] for _ in range(size)
            ]
        else:
            self.population = [_parse_strategy(s) for s in population]
            if not self.population:
                raise ValueError("population must not be empty")
            for dna in self.population:
                if len(dna) != self.dna_length:
                    raise ValueError(
                        f"strategy length {len(dna)} does not match history length "
                        f"{hlen} (expected {self.dna_length})"
                    )
        self.size = len(self.population)
        self.fitness: list[float] = []
        self.scores: list[float] = []

    def _bout(self, a: int, b: int) -> tuple[int, int, int]:
        dna_a, dna_b = self.population[a], self.population[b]
        rng = self.rng
        history: deque[tuple[int, int]] = deque(maxlen=self.hlen)
        total_a = total_b = 0
        for _ in range(self.rounds):
            index_a = index_b = 0
            for move_a, move_b in reversed(history):
                index_a = index_a * 4 + 2 * move_a + move_b
                index_b = index_b * 4 + 2 * move_b + move_a
            base = self.offsets[len(history)]
            move_a = dna_a[base + index_a]
            move_b = dna_b[base + index_b]
            if rng.random() < self.noise:
                move_a = rng.randrange(2)
            if rng.random() < self.noise:
                move_b = rng.randrange(2)
            total_a += int(self.payoffs.score(move_a, move_b))
            total_b += int(self.payoffs.score(move_b, move_a))
            history.append((move_a, move_b))
        return total_a, total_b, self.rounds

    def compute_fitness(self) -> list[float]:
        """Play every member against random opponents; return normalised fitness.

        Also records each member's average score per round in ``scores``.
        """
        score = [0] * self.size
        played = [0] * self.size
        for i in range(self.size):
            for _ in range(self.bouts):
                opponent = self.rng.randrange(self.size)
                total_a, total_b, rounds = self._bout(i, opponent)
                score[i] += total_a
                score[opponent] += total_b
                played[i] += rounds
                played[opponent] += rounds
        self.scores = [s / n for s, n in zip(score, played)]
        total = sum(self.scores)
        if total == 0:
            self.fitness = [1.0 / self.size] * self.size
        else:
            self.fitness = [s / total for s in self.scores]
        return list(self.fitness)

    def _reproduce(self, pa: list[int], pb: list[int]) -> tuple[list[int], list[int]]:
        rng = self.rng
        length = self.dna_length
        cpoint = rng.randrange(1, length) if rng.random() < self.crate else length
        a, b = crossover(pa, pb, cpoint)
        for i in range(length):
            if rng.random() < self.mrate:
                a[i] = rng.randrange(2)
            if rng.random() < self.mrate:
                b[i] = rng.randrange(2)
        return a, b

    def next_generation(self) -> list[list[int]]:
        """Replace the population by children of fitness-selected parents."""
        if not self.fitness:
            self.compute_fitness()
        children: list[list[int]] = []
        while len(children) < self.size:
            pa = self.population[roulette_select(self.fitness, self.rng)]
            pb = self.population[roulette_select(self.fitness, self.rng)]
            children.extend(self._reproduce(pa, pb))
        self.population = children[: self.size]
        self.fitness = []
        self.scores = []
        return self.population

    def best(self) -> tuple[tuple[int, ...], float]:
        """The fittest strategy and its average score per round."""
        if not self.fitness:
            self.compute_fitness()
        besti = max(range(self.size), key=self.fitness.__getitem__)
        return tuple(self.population[besti]), self.scores[besti]


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gaipd",
        allow_abbrev=False,
        description="Evolve iterated Prisoner's Dilemma strategies with a genetic algorithm.",
    )
    parser.add_argument("-size", type=int, default=100, help="Population size.")
    parser.add_argument("-gens", type=int, default=50, help="Number of generations.")
    parser.add_argument("-bouts", type=int, default=50, help="Bouts per generation.")
    parser.add_argument("-rounds", type=int, default=20, help="Rounds per bout.")
    parser.add_argument("-hlen", type=int, default=1, help="History length.")
    parser.add_argument("-seed", type=int, default=0)
    parser.add_argument("-crate", type=float, default=0.25, help="Crossover rate.")
    parser.add_argument("-mrate", type=float, default=0.001, help="Mutation rate.")
    parser.add_argument("-noise", type=float, default=0.0,
                        help="Chance of mistake in transaction.")
    parser.add_argument("-CC", type=float, default=4.0, help="Reward payoff.")
    parser.add_argument("-CD", type=float, default=0.0, help="Sucker payoff.")
    parser.add_argument("-DC", type=float, default=5.0, help="Temptation payoff.")
    parser.add_argument("-DD", type=float, default=1.0, help="Punish payoff.")
    parser.add_argument("-dump", action="store_true", help="Print entire population at end?")
    args = parser.parse_args(argv)

    try:
        ga = IPDGA(
            args.size, args.bouts, args.rounds, args.hlen, args.crate, args.mrate,
            args.noise, Payoffs(args.CC, args.CD, args.DC, args.DD),
            random.Random(args.seed),
        )
    except ValueError as exc:
        parser.error(str(exc))

    for t in range(args.gens):
        ga.compute_fitness()
        dna, best_score = ga.best()
        print("---", file=sys.stderr)
        print(f"time = {t}", file=sys.stderr)
        print(f"average score = {sum(ga.scores) / ga.size:f}", file=sys.stderr)
        print(f"best average score = {best_score:f}", file=sys.stderr)
        print(f"best = {format_strategy(dna)}", file=sys.stderr)
        ga.next_generation()

    if args.dump:
        for dna in ga.population:
            print(format_strategy(dna))
    return 0
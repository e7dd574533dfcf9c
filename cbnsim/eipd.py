"""The ecological iterated Prisoner's Dilemma."""

from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Mapping, Sequence

COOPERATE = 0
DEFECT = 1


class Strategy(IntEnum):
    """The five competing strategies, in output order."""

    ALLC = 0
    TFT = 1
    RAND = 2
    PAV = 3
    ALLD = 4


@dataclass(frozen=True)
class Payoffs:
    """Reward, sucker, temptation and punishment payoffs."""

    cc: float = 3.0
    cd: float = 0.0
    dc: float = 5.0
    dd: float = 1.0

    def score(self, me: int, him: int) -> float:
        """Payoff earned by a player who made move ``me`` against ``him``."""
        if me:
            return self.dd if him else self.dc
        return self.cd if him else self.cc


def play(
    strategy: Strategy,
    last_him: int,
    last_me: int,
    noise: float = 0.0,
    rcp: float = 0.5,
    rng: random.Random | None = None,
) -> int:
    """Return the move (0 cooperate, 1 defect) given the previous round."""
    if rng is None:
        rng = random.Random(0)
    if noise > 0 and rng.random() < noise:
        return COOPERATE if rng.random() < 0.5 else DEFECT
    if strategy == Strategy.ALLC:
        return COOPERATE
    if strategy == Strategy.TFT:
        return last_him
    if strategy == Strategy.RAND:
        return COOPERATE if rng.random() < rcp else DEFECT
    if strategy == Strategy.PAV:
        return int(not last_me) if last_him else last_me
    if strategy == Strategy.ALLD:
        return DEFECT
    return COOPERATE


def _run(
    pops: list[float],
    steps: int,
    rounds: int,
    payoffs: Payoffs,
    noise: float,
    rcp: float,
    rng: random.Random,
) -> Iterator[dict[Strategy, float]]:
    strategies = list(Strategy)
    for _ in range(steps):
        yield dict(zip(strategies, pops))
        scores = [0.0] * len(strategies)
        for j in strategies:
            if pops[j] == 0.0:
                continue
            for k in strategies:
                total = 0.0
                last_him = last_me = COOPERATE
                for _ in range(rounds):
                    act_me = play(j, last_him, last_me, noise, rcp, rng)
                    act_him = play(k, last_me, last_him, noise, rcp, rng)
                    total += payoffs.score(act_me, act_him)
                    last_me, last_him = act_me, act_him
                scores[j] += total * pops[k]
        weighted = [pop * score for pop, score in zip(pops, scores)]
        norm = sum(weighted)
        if norm == 0:
            raise ValueError("every strategy scored nothing; populations cannot be renormalised")
        pops = [w / norm for w in weighted]


def ecology(
    populations: Mapping[Strategy, float],
    steps: int = 100000,
    rounds: int = 10,
    payoffs: Payoffs | None = None,
    noise: float = 0.0,
    rcp: float = 0.5,
    rng: random.Random | None = None,
) -> Iterator[dict[Strategy, float]]:
    """Yield the normalised populations before each of ``steps`` updates.

    Each strategy's share grows in proportion to its score against every
    strategy, weighted by the opponents' shares.
    """
    pops = [float(populations.get(s, 0.0)) for s in Strategy]
    if any(p < 0 for p in pops):
        raise ValueError("populations must not be negative")
    total = sum(pops)
    if total <= 0:
        raise ValueError("at least one strategy needs a positive population")
    pops = [p / total for p in pops]
    return _run(
        pops, steps, rounds,
        payoffs if payoffs is not None else Payoffs(),
        noise, rcp,
        rng if rng is not None else random.Random(0),
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="eipd",
        allow_abbrev=False,
        description="Simulate the ecological iterated Prisoner's Dilemma.",
    )
    parser.add_argument("-steps", type=int, default=100000)
    parser.add_argument("-rounds", type=int, default=10)
    parser.add_argument("-seed", type=int, default=0)
    parser.add_argument("-CC", type=float, default=3.0, help="Reward payoff.")
    parser.add_argument("-CD", type=float, default=0.0, help="Sucker payoff.")
    parser.add_argument("-DC", type=float, default=5.0, help="Temptation payoff.")
    parser.add_argument("-DD", type=float, default=1.0, help="Punish payoff.")
    parser.add_argument("-Iallc", type=float, default=0.2)
    parser.add_argument("-Itft", type=float, default=0.2)
    parser.add_argument("-Irand", type=float, default=0.2)
    parser.add_argument("-Ipav", type=float, default=0.2)
    parser.add_argument("-Ialld", type=float, default=0.2)
    parser.add_argument("-rcp", type=float, default=0.5,
                        help="Probability of C for the Random strategy.")
    parser.add_argument("-noise", type=float, default=0.0)
    args = parser.parse_args(argv)

    populations = {
        Strategy.ALLC: args.Iallc,
        Strategy.TFT: args.Itft,
        Strategy.RAND: args.Irand,
        Strategy.PAV: args.Ipav,
        Strategy.ALLD: args.Ialld,
    }
    payoffs = Payoffs(args.CC, args.CD, args.DC, args.DD)
    try:
        for row in ecology(populations, args.steps, args.rounds, payoffs,
                           args.noise, args.rcp, random.Random(args.seed)):
            print("".join(f"{row[s]:f}\t" for s in Strategy))
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0
"""Solve a task assignment problem with a Hopfield network.

Neurons form an n x n grid; each inhibits every other neuron in its row
and column with weight -2 and receives an external input near 2, as the
K-out-of-N rule prescribes.  The inputs are nudged up for assignments of
higher value, so the network settles on a permutation matrix that
favours them.
"""

from __future__ import annotations

import argparse
import math
import random
import sys
from pathlib import Path
from typing import Sequence

from .raster import Canvas


def sigmoid(x: float, gain: float = 0.5) -> float:
    """Logistic function bounded by 0 and 1."""
    z = -x * gain
    if z > 700:
        return 0.0
    return 1.0 / (1.0 + math.exp(z))


def read_specs(path: str | Path) -> list[list[float]]:
    """Read an n followed by n*n costs; '#' starts a comment."""
    tokens: list[str] = []
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            tokens.extend(line.split("#", 1)[0].split())
    bad = "Problem found in specification file."
    if not tokens:
        raise ValueError(bad)
    try:
        n = int(tokens[0])
        values = [float(tok) for tok in tokens[1 : 1 + n * n]]
    except ValueError:
        raise ValueError(bad) from None
    if n < 1 or len(values) < n * n:
        raise ValueError(bad)
    return [values[i * n : (i + 1) * n] for i in range(n)]


class HopfieldNetwork:
    """Continuous Hopfield network over an n x n cost matrix."""

    def __init__(
        self,
        cost: Sequence[Sequence[float]],
        dt: float = 0.1,
        tau: float = 10.0,
        scale: float = 0.5,
        gain: float = 0.5,
        rng: random.Random | None = None,
        state: Sequence[float] | None = None,
    ) -> None:
        n = len(cost)
        if n < 1 or any(len(row) != n for row in cost):
            raise ValueError("cost matrix must be square and non-empty")
        self.n = n
        self.cost = [float(c) for row in cost for c in row]
        self.dt = dt
        self.tau = tau
        self.gain = gain

        if state is None:
            rng = rng if rng is not None else random.Random(0)
            self.state = [rng.uniform(-1.0, 1.0) for _ in self.cost]
        else:
            if len(state) != n * n:
                raise ValueError(f"state needs {n * n} values, got {len(state)}")
            self.state = [float(u) for u in state]
        self.activations = [sigmoid(u, gain) for u in self.state]

        lo, hi = min(self.cost), max(self.cost)
        ave = sum(self.cost) / len(self.cost)
        spread = hi - lo
        # A flat cost matrix gives no preference: every input sits at 2.
        self.inputs = [
            scale * (c - ave) / spread + 2.0 if spread else 2.0 for c in self.cost
        ]

    def step(self) -> list[float]:
        """Advance one time step; return the activations used for it."""
        n = self.n
        v = [sigmoid(u, self.gain) for u in self.state]
        self.activations = v
        row_sums = [sum(v[i * n : (i + 1) * n]) for i in range(n)]
        col_sums = [sum(v[j::n]) for j in range(n)]
        new_state = []
        for k, (u, inp) in enumerate(zip(self.state, self.inputs)):
            i, j = divmod(k, n)
            inhibition = -2.0 * (row_sums[i] + col_sums[j] - 2.0 * v[k])
            new_state.append(u + self.dt * (inhibition + inp - u / self.tau))
        self.state = new_state
        return list(v)

    def final_cost(self) -> float:
        """Total cost of the assignments whose neurons are more than half on."""
        return sum(c for c, a in zip(self.cost, self.activations) if a > 0.5)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hopfield",
        allow_abbrev=False,
        description="Solve a task assignment problem with a Hopfield network.",
    )
    parser.add_argument("-specs", default="data/hop1.dat", help="Problem specification file.")
    parser.add_argument("-dt", type=float, default=0.1, help="Time step increment.")
    parser.add_argument("-tau", type=float, default=10.0, help="Decay term.")
    parser.add_argument("-gain", type=float, default=0.5, help="Sigmoidal gain.")
    parser.add_argument("-scale", type=float, default=0.5, help="Scaling for inputs.")
    parser.add_argument("-seed", type=int, default=0)
    parser.add_argument("-steps", type=int, default=1000, help="Number of time steps.")
    parser.add_argument("-gray", type=int, default=256, help="Number of gray levels.")
    parser.add_argument("-inv", dest="invert", action="store_true")
    parser.add_argument("-mag", type=int, default=10)
    parser.add_argument("-term", default=None, help="Output PGM file ('-' for stdout).")
    args = parser.parse_args(argv)

    try:
        cost = read_specs(args.specs)
    except OSError:
        print(f'Cannot open specification file "{args.specs}".', file=sys.stderr)
        return 1
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    net = HopfieldNetwork(cost, args.dt, args.tau, args.scale, args.gain,
                          random.Random(args.seed))
    try:
        canvas = Canvas(net.n, net.n, args.gray)
    except ValueError as exc:
        parser.error(str(exc))
    for _ in range(args.steps):
        net.step()
    for k, value in enumerate(net.activations):
        i, j = divmod(k, net.n)
        canvas.plot(j, i, int(value * args.gray))

    print(f"Final cost = {net.final_cost():f}", file=sys.stderr)
    canvas.save(args.term, args.invert, args.mag)
    return 0
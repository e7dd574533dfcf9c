"""One-dimensional totalistic cellular automata and Langton's lambda."""

from __future__ import annotations

import argparse
import random
import sys
from itertools import accumulate
from typing import Iterator, Sequence

from .raster import Canvas


def _rule_length(states: int, radius: int) -> int:
    return (states - 1) * (2 * radius + 1) + 1


def _check_shape(states: int, radius: int) -> None:
    if states < 2:
        raise ValueError(f"a CA needs at least 2 states, got {states}")
    if radius < 0:
        raise ValueError(f"radius must not be negative, got {radius}")


def lambda_table(states: int, radius: int) -> list[float]:
    """Fraction of neighbourhoods whose cell values sum to each possible total."""
    _check_shape(states, radius)
    area = 2 * radius + 1
    length = _rule_length(states, radius)
    counts = [1 if i < states else 0 for i in range(length)]
    for _ in range(area - 1):
        counts = [
            sum(counts[j - k] for k in range(states) if j - k >= 0)
            for j in range(length)
        ]
    total = states ** area
    return [c / total for c in counts]


def rule_lambda(rules: str, states: int, radius: int) -> float:
    """Lambda of a rule string: the fraction of neighbourhoods mapped to non-zero."""
    length = _rule_length(states, radius)
    if len(rules) != length:
        raise ValueError(f"Rule length should be {length} not {len(rules)}")
    vals = lambda_table(states, radius)
    return sum(v for v, ch in zip(vals, rules) if ch != "0")


def random_rule(
    states: int = 2,
    radius: int = 1,
    target_lambda: float = 0.5,
    quiescent: bool = True,
    rng: random.Random | None = None,
) -> tuple[str, float]:
    """Generate a random rule with a lambda near ``target_lambda``.

    Returns the rule string and its actual lambda.  With ``quiescent``
    the all-zero neighbourhood maps to 0 and a uniform neighbourhood of
    state i maps to i.
    """
    _check_shape(states, radius)
    if rng is None:
        rng = random.Random(0)
    area = 2 * radius + 1
    length = _rule_length(states, radius)
    if quiescent and area == 1:
        raise ValueError("strong quiescence leaves no free rule entries at radius 0")
    vals = lambda_table(states, radius)

    bits = [rng.randrange(2) for _ in range(length)]
    if quiescent:
        bits[0] = 0
        for i in range(1, states):
            bits[i * area] = 1

    def pick() -> tuple[int, int]:
        while True:
            index = rng.randrange(length)
            if quiescent and index % area == 0:
                continue
            return index, rng.randrange(2)

    current = sum(v * bit for v, bit in zip(vals, bits))
    stale = 0
    while stale < 1000:
        a, aval = pick()
        b, bval = pick()
        candidate = current + (aval - bits[a]) * vals[a] + (bval - bits[b]) * vals[b]
        if abs(candidate - target_lambda) < abs(current - target_lambda):
            current = candidate
            bits[a] = aval
            bits[b] = bval
            stale = 0
        else:
            stale += 1

    chars = [
        chr(ord("0") + rng.randrange(states - 1) + 1) if bit else "0" for bit in bits
    ]
    if quiescent:
        for i in range(1, states):
            chars[i * area] = chr(ord("0") + i)
    return "".join(chars), current


def initial_row(
    width: int, states: int, init: str, rng: random.Random | None = None
) -> list[int]:
    """Build the first row.

    A string of digits is centred in the row; ``"-N"`` instead gives each
    cell a 1 in N chance of a random non-zero state.
    """
    if width < 1:
        raise ValueError(f"width must be positive, got {width}")
    row = [0] * width
    if init.startswith("-"):
        try:
            odds = -int(init)
        except ValueError:
            raise ValueError(f"bad random init string {init!r}") from None
        if odds <= 0:
            raise ValueError(f"random init odds must be positive, got {init!r}")
        if rng is None:
            rng = random.Random(0)
        for i in range(width):
            if rng.randrange(odds) == 0:
                row[i] = rng.randrange(states - 1) + 1
        return row

    start = int((width - len(init)) / 2)
    for offset, ch in enumerate(init):
        value = ord(ch) - ord("0")
        if not 0 <= value < states:
            raise ValueError(f"init character {ch!r} is not a state below {states}")
        index = start + offset
        if 0 <= index < width:
            row[index] = value
    return row


def evolve(
    row: Sequence[int], rules: str, radius: int = 1, wrap: bool = True, steps: int = 1
) -> Iterator[list[int]]:
    """Yield ``steps`` successive rows, starting with ``row`` itself."""
    current = list(row)
    n = len(current)
    if wrap and radius > n:
        raise ValueError("radius is larger than the row in a wrapped space")
    table = [ord(ch) - ord("0") for ch in rules]
    span = 2 * radius + 1
    zeros = [0] * radius
    for _ in range(steps):
        yield list(current)
        if wrap:
            padded = current[n - radius:] + current + current[:radius]
        else:
            padded = zeros + current + zeros
        prefix = [0, *accumulate(padded)]
        try:
            current = [table[prefix[j + span] - prefix[j]] for j in range(n)]
        except IndexError:
            raise ValueError("rule string is too short for the neighbourhood sums") from None


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="ca",
        allow_abbrev=False,
        description="Compute a one-dimensional cellular automaton as a PGM image.",
    )
    parser.add_argument("-width", type=int, default=640)
    parser.add_argument("-height", type=int, default=480)
    parser.add_argument("-states", type=int, default=2)
    parser.add_argument("-radius", type=int, default=1)
    parser.add_argument("-seed", type=int, default=0)
    parser.add_argument("-wrap", action="store_false", help="Toggle wrap-around space.")
    parser.add_argument("-rules", default="0110")
    parser.add_argument("-init", default="11", help="Starting state ('-N' is random).")
    parser.add_argument("-lambda", dest="lam", type=float, default=-1.0,
                        help="Lambda value for random rules.")
    parser.add_argument("-sq", action="store_false", help="Toggle strong quiescence.")
    parser.add_argument("-bin", dest="binary", action="store_true")
    parser.add_argument("-inv", dest="invert", action="store_true")
    parser.add_argument("-mag", type=int, default=1)
    parser.add_argument("-term", default=None, help="Output PGM file ('-' for stdout).")
    args = parser.parse_args(argv)

    rng = random.Random(args.seed)
    try:
        _check_shape(args.states, args.radius)
        row = initial_row(args.width, args.states, args.init, rng)
        if 0.0 <= args.lam <= 1.0:
            rules, lam = random_rule(args.states, args.radius, args.lam, args.sq, rng)
            print(f"generated rules  = '{rules}'", file=sys.stderr)
            print(f"generated lambda = {lam:f}", file=sys.stderr)
        else:
            rules = args.rules
            lam = rule_lambda(rules, args.states, args.radius)
            print(f"supplied rule = '{rules}'", file=sys.stderr)
            print(f"actual lambda = {lam:f}", file=sys.stderr)

        canvas = Canvas(args.width, args.height, 2 if args.binary else args.states)
        for i, cells in enumerate(evolve(row, rules, args.radius, args.wrap, args.height)):
            for j, value in enumerate(cells):
                canvas.plot(j, i, (1 if value else 0) if args.binary else value)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    canvas.save(args.term, args.invert, args.mag)
    return 0
"""OGY control of the Henon system x(t+1) = A - x(t)^2 + B x(t-1)."""

from __future__ import annotations

import argparse
import math
import random
import sys
from dataclasses import dataclass
from typing import Iterator, Sequence


@dataclass(frozen=True)
class ControlSample:
    """One step of a controlled run: time, state and applied control force."""

    t: int
    x: float
    y: float
    p: float


def control_law(a: float, b: float) -> tuple[float, float, float]:
    """Return ``(xf, k0, k1)``: the embedded fixed point and the feedback gains.

    The control force is ``k0 * (x - xf) + k1 * (y - xf)``.
    """
    disc = (b - 1.0) ** 2 + 4.0 * a
    if disc < 0:
        raise ValueError(f"the Henon system with A={a}, B={b} has no real fixed point")
    xf = 0.5 * ((b - 1.0) + math.sqrt(disc))

    root = xf * xf + b
    if root < 0:
        raise ValueError(f"the fixed point for A={a}, B={b} has complex eigenvalues")
    lu = -xf - math.sqrt(root)
    ls = -xf + math.sqrt(root)

    nu = math.sqrt(lu * lu + 1.0)
    ns = math.sqrt(ls * ls + 1.0)
    eu = (lu / nu, 1.0 / nu)
    es = (ls / ns, 1.0 / ns)

    gu0 = 1.0 / (eu[0] - es[0] * eu[1] / es[1])
    gu1 = -gu0 * es[0] / es[1]

    k0 = gu0 * -lu / gu0
    k1 = gu1 * -lu / gu0
    return xf, k0, k1


def _run(
    a: float,
    b: float,
    points: int,
    on1: int,
    off: int,
    on2: int,
    skip: int,
    plimit: float,
    noise: float,
    rng: random.Random,
) -> Iterator[ControlSample]:
    xf, k0, k1 = control_law(a, b)
    x = rng.uniform(-0.1, 0.1)
    y = rng.uniform(-0.1, 0.1)
    for i in range(points + skip):
        if skip + on1 <= i < skip + off or i >= skip + on2:
            p = k0 * (x - xf) + k1 * (y - xf)
            if abs(p) > plimit:
                p = 0.0
        else:
            p = 0.0
        t = a - x * x + b * y + p + noise * rng.gauss(0.0, 1.0)
        y = x + noise * rng.gauss(0.0, 1.0)
        x = t
        if i >= skip:
            yield ControlSample(i - skip + 1, x, y, p)


def simulate(
    a: float = 1.29,
    b: float = 0.3,
    points: int = 300,
    on1: int = 50,
    off: int = 100,
    on2: int = 200,
    skip: int = 100,
    plimit: float = 0.2,
    noise: float = 0.0,
    rng: random.Random | None = None,
) -> Iterator[ControlSample]:
    """Run the system, switching control on in [on1, off) and from on2 onward.

    Control forces larger than ``plimit`` in magnitude are dropped.
    """
    if not 0 <= on1 <= off <= on2 <= points:
        raise ValueError("control times must satisfy 0 <= on1 <= off <= on2 <= points")
    if rng is None:
        rng = random.Random(0)
    return _run(a, b, points, on1, off, on2, skip, plimit, noise, rng)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hencon",
        allow_abbrev=False,
        description="Control the Henon system with the OGY control law.",
    )
    parser.add_argument("-points", type=int, default=300, help="Length of the time series.")
    parser.add_argument("-on1", type=int, default=50, help="Where to turn control on.")
    parser.add_argument("-off", type=int, default=100, help="Where to turn control off.")
    parser.add_argument("-on2", type=int, default=200, help="Where to turn control on again.")
    parser.add_argument("-skip", type=int, default=100, help="Amount to skip initially.")
    parser.add_argument("-seed", type=int, default=0, help="Random seed.")
    parser.add_argument("-plimit", type=float, default=0.2, help="Largest allowed size for p.")
    parser.add_argument("-A", dest="a", type=float, default=1.29)
    parser.add_argument("-B", dest="b", type=float, default=0.3)
    parser.add_argument("-gauss", type=float, default=0.0, help="Magnitude of Gaussian noise.")
    args = parser.parse_args(argv)

    try:
        samples = simulate(
            args.a, args.b, args.points, args.on1, args.off, args.on2,
            args.skip, args.plimit, args.gauss, random.Random(args.seed),
        )
        for s in samples:
            print(f"(t,x[t],y[t],p[t])=\t{s.t}\t{s.x: f}\t{s.y: f}\t{s.p: f}")
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0
"""Phase-space orbits of the Henon system x(t+1) = A - x(t)^2 + B x(t-1)."""

from __future__ import annotations

import argparse
import random
from collections import deque
from typing import Iterator, Sequence

from .raster import Canvas


def henon_step(x: float, y: float, a: float, b: float) -> tuple[float, float]:
    """Advance the Henon system one step; ``y`` holds the previous x."""
    return a - x * x + b * y, x


def viewport_right(ulx: float, uly: float, lly: float, width: int, height: int) -> float:
    """Right edge that gives equal x and y scales for the given plot size."""
    if height < 2:
        raise ValueError("height must be at least 2")
    return ulx + ((uly - lly) / (height - 1)) * (width - 1)


def orbit(
    a: float,
    b: float,
    x: float,
    y: float,
    points: int,
    skip: int = 0,
    delay: int = 1,
    swap: bool = True,
) -> Iterator[tuple[float, float]]:
    """Yield ``points`` delay-embedded pairs (x(t-delay+1)... , x(t+1)).

    With ``swap`` the delayed value comes first, otherwise the new one.
    """
    if delay < 1:
        raise ValueError("delay must be at least 1")
    held = deque(maxlen=delay)
    for i in range(points + skip + delay):
        held.append(x)
        x, y = henon_step(x, y, a, b)
        old = held[0]
        if i >= skip + delay:
            yield (old, x) if swap else (x, old)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="henon",
        allow_abbrev=False,
        description="Plot the phase space of the Henon system.",
    )
    parser.add_argument("-width", type=int, default=480)
    parser.add_argument("-height", type=int, default=480)
    parser.add_argument("-skip", type=int, default=100)
    parser.add_argument("-swap", action="store_false", help="Toggle axis swapping.")
    parser.add_argument("-points", type=int, default=1000)
    parser.add_argument("-delay", type=int, default=1)
    parser.add_argument("-A", dest="a", type=float, default=1.29)
    parser.add_argument("-B", dest="b", type=float, default=0.3)
    parser.add_argument("-ulx", type=float, default=-1.75)
    parser.add_argument("-uly", type=float, default=1.75)
    parser.add_argument("-lly", type=float, default=-1.75)
    parser.add_argument("-box", type=int, default=0)
    parser.add_argument("-bulx", type=float, default=0.0)
    parser.add_argument("-buly", type=float, default=0.0)
    parser.add_argument("-blly", type=float, default=0.0)
    parser.add_argument("-data", action="store_true", help="Print points instead of plotting.")
    parser.add_argument("-inv", dest="invert", action="store_true")
    parser.add_argument("-mag", type=int, default=1)
    parser.add_argument("-term", default=None, help="Output PGM file ('-' for stdout).")
    args = parser.parse_args(argv)
    if args.delay < 1:
        parser.error("-delay must be at least 1")

    lrx = viewport_right(args.ulx, args.uly, args.lly, args.width, args.height)
    canvas = None
    if not args.data:
        canvas = Canvas(args.width, args.height, 2)
        canvas.set_range(args.ulx, lrx, args.lly, args.uly)

    rng = random.Random(1)
    x0 = rng.uniform(-0.1, 0.1)
    y0 = rng.uniform(-0.1, 0.1)
    for u, v in orbit(args.a, args.b, x0, y0, args.points, args.skip, args.delay, args.swap):
        if args.ulx < u < lrx and args.lly < v < args.uly:
            if canvas is None:
                print(f"{u:f}\t{v:f}")
            else:
                canvas.plot(u, v, 1)

    if canvas is not None:
        if args.box > 0:
            blrx = viewport_right(args.bulx, args.buly, args.blly, args.width, args.height)
            canvas.box(args.bulx, args.buly, blrx, args.blly, args.box)
        canvas.save(args.term, args.invert, args.mag)
    return 0
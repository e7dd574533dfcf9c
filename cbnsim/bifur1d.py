"""Bifurcation diagrams of one-dimensional maps."""

from __future__ import annotations

import argparse
import math
from collections import deque
from typing import Iterator, Sequence

from .maps import MapFunc, get_map
from .raster import Canvas


def _clamp(value: float, lo: float, hi: float) -> float:
    return lo if value < lo else hi if value > hi else value


def bifurcation_points(
    func: MapFunc,
    rmin: float = 0.0,
    rmax: float = 1.0,
    width: int = 640,
    height: int = 480,
    skip: int = 500,
    factor: float = 2.0,
) -> Iterator[tuple[float, float]]:
    """Yield (r, x) pairs of long-term iterates for ``width`` values of r.

    Each column stops early once a period 1 to 4 orbit is detected.
    """
    if width < 2:
        raise ValueError("width must be at least 2")
    rmin = _clamp(rmin, 0.0, 1.0)
    rmax = _clamp(rmax, 0.0, 1.0)
    rinc = (rmax - rmin) / (width - 1)
    tol = 0.01 / height
    iterations = math.ceil(height * factor)
    r = rmin
    for _ in range(width):
        r = min(r, 1.0)
        x = 0.5
        for _ in range(skip):
            x = func(x, r)
        history = deque([5.0, 4.0, 3.0, 2.0], maxlen=4)
        for _ in range(iterations):
            history.append(x)
            x = func(x, r)
            yield r, x
            if any(abs(x - past) < tol for past in history):
                break
        r += rinc


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bifur1d",
        allow_abbrev=False,
        description="Plot a bifurcation diagram of a one-dimensional map as a PGM image.",
    )
    parser.add_argument("-width", type=int, default=640)
    parser.add_argument("-height", type=int, default=480)
    parser.add_argument("-skip", type=int, default=500)
    parser.add_argument("-rmin", type=float, default=0.0)
    parser.add_argument("-rmax", type=float, default=1.0)
    parser.add_argument("-func", default="log", help="log, tent, sin or gauss.")
    parser.add_argument("-factor", type=float, default=2.0)
    parser.add_argument("-ymin", type=float, default=0.0)
    parser.add_argument("-ymax", type=float, default=1.0)
    parser.add_argument("-aux", type=float, default=1.0)
    parser.add_argument("-box", type=int, default=0, help="Line width for a box.")
    parser.add_argument("-brmin", type=float, default=0.0)
    parser.add_argument("-brmax", type=float, default=0.0)
    parser.add_argument("-bymin", type=float, default=0.0)
    parser.add_argument("-bymax", type=float, default=0.0)
    parser.add_argument("-inv", dest="invert", action="store_true")
    parser.add_argument("-mag", type=int, default=1)
    parser.add_argument("-term", default=None, help="Output PGM file ('-' for stdout).")
    args = parser.parse_args(argv)
    try:
        func = get_map(args.func, args.aux)
    except ValueError as exc:
        parser.error(str(exc))

    rmin = _clamp(args.rmin, 0.0, 1.0)
    rmax = _clamp(args.rmax, 0.0, 1.0)
    canvas = Canvas(args.width, args.height, 2)
    canvas.set_range(rmin, rmax, args.ymin, args.ymax)
    for r, x in bifurcation_points(
        func, rmin, rmax, args.width, args.height, args.skip, args.factor
    ):
        canvas.plot(r, x, 1)
    if args.box > 0:
        canvas.box(args.brmin, args.bymax, args.brmax, args.bymin, args.box)
    canvas.save(args.term, args.invert, args.mag)
    return 0
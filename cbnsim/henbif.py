"""Bifurcation diagrams of the Henon system in either parameter."""

from __future__ import annotations

import argparse
import math
from collections import deque
from typing import Iterator, Sequence

from .henon import henon_step
from .raster import Canvas


def _clamp(value: float, lo: float, hi: float) -> float:
    return lo if value < lo else hi if value > hi else value


def _diverged(x: float, y: float) -> bool:
    return abs(x) > 10.0 or abs(y) > 10.0


def bifurcation_points(
    vary_a: bool = True,
    lo: float = 0.0,
    hi: float = 1.4,
    a: float = 1.29,
    b: float = 0.3,
    width: int = 640,
    height: int = 480,
    skip: int = 500,
    factor: float = 2.0,
) -> Iterator[tuple[float, float]]:
    """Yield (parameter, x) pairs while sweeping A (or B) from ``lo`` to ``hi``.

    The sweep stops entirely at the first parameter for which the
    transient diverges.
    """
    if width < 2:
        raise ValueError("width must be at least 2")
    lo = _clamp(lo, 0.0, 2.0)
    hi = _clamp(hi, 0.0, 2.0)
    rinc = (hi - lo) / (width - 1)
    tol = 0.01 / height
    iterations = math.ceil(height * factor)
    r = lo
    for _ in range(width):
        pa, pb = (r, b) if vary_a else (a, r)
        x = y = 0.0
        for _ in range(skip):
            if _diverged(x, y):
                break
            x, y = henon_step(x, y, pa, pb)
        if _diverged(x, y):
            return
        history = deque([5.0, 4.0, 3.0, 2.0], maxlen=4)
        for _ in range(iterations):
            history.append(x)
            if _diverged(x, y):
                break
            x, y = henon_step(x, y, pa, pb)
            yield r, x
            if any(abs(x - past) < tol for past in history):
                break
        r += rinc


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="henbif",
        allow_abbrev=False,
        description="Plot a bifurcation diagram of the Henon system.",
    )
    parser.add_argument("-width", type=int, default=640)
    parser.add_argument("-height", type=int, default=480)
    parser.add_argument("-skip", type=int, default=500)
    parser.add_argument("-abmin", type=float, default=0.0)
    parser.add_argument("-abmax", type=float, default=1.4)
    parser.add_argument("-ab", dest="vary_a", action="store_false",
                        help="Toggle: vary B instead of A.")
    parser.add_argument("-A", dest="a", type=float, default=1.29)
    parser.add_argument("-B", dest="b", type=float, default=0.3)
    parser.add_argument("-factor", type=float, default=2.0)
    parser.add_argument("-ymin", type=float, default=-1.75)
    parser.add_argument("-ymax", type=float, default=1.75)
    parser.add_argument("-box", type=int, default=0)
    parser.add_argument("-brmin", type=float, default=0.0)
    parser.add_argument("-brmax", type=float, default=0.0)
    parser.add_argument("-bymin", type=float, default=0.0)
    parser.add_argument("-bymax", type=float, default=0.0)
    parser.add_argument("-inv", dest="invert", action="store_true")
    parser.add_argument("-mag", type=int, default=1)
    parser.add_argument("-term", default=None, help="Output PGM file ('-' for stdout).")
    args = parser.parse_args(argv)

    lo = _clamp(args.abmin, 0.0, 2.0)
    hi = _clamp(args.abmax, 0.0, 2.0)
    canvas = Canvas(args.width, args.height, 2)
    canvas.set_range(lo, hi, args.ymin, args.ymax)
    for r, x in bifurcation_points(
        args.vary_a, lo, hi, args.a, args.b,
        args.width, args.height, args.skip, args.factor,
    ):
        canvas.plot(r, x, 1)
    if args.box > 0:
        canvas.box(args.brmin, args.bymax, args.brmax, args.bymin, args.box)
    canvas.save(args.term, args.invert, args.mag)
    return 0
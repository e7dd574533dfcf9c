"""Warp a square of points by repeated application of the Henon map."""

from __future__ import annotations

import argparse
from typing import Iterator, Sequence

from .henon import henon_step, viewport_right
from .raster import Canvas


def warp_square(
    a: float,
    b: float,
    length: int,
    count: int,
    xinc: float,
    yinc: float,
    swap: bool = True,
) -> Iterator[tuple[float, float]]:
    """Yield the images of a square grid of points after ``count`` Henon steps.

    Even lengths are rounded up to the next odd number.
    """
    if length % 2 == 0:
        length += 1
    for i in range(length):
        for j in range(length):
            x = xinc * (-0.5 * length + j)
            y = yinc * (-0.5 * length + i)
            for _ in range(count):
                x, y = henon_step(x, y, a, b)
            yield (y, x) if swap else (x, y)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="henwarp",
        allow_abbrev=False,
        description="Transform a square by the Henon system a fixed number of times.",
    )
    parser.add_argument("-width", type=int, default=480)
    parser.add_argument("-height", type=int, default=480)
    parser.add_argument("-swap", action="store_false", help="Toggle axis swapping.")
    parser.add_argument("-len", dest="length", type=int, default=301)
    parser.add_argument("-count", type=int, default=1)
    parser.add_argument("-A", dest="a", type=float, default=1.29)
    parser.add_argument("-B", dest="b", type=float, default=0.3)
    parser.add_argument("-ulx", type=float, default=-1.75)
    parser.add_argument("-uly", type=float, default=1.75)
    parser.add_argument("-lly", type=float, default=-1.75)
    parser.add_argument("-inv", dest="invert", action="store_true")
    parser.add_argument("-mag", type=int, default=1)
    parser.add_argument("-term", default=None, help="Output PGM file ('-' for stdout).")
    args = parser.parse_args(argv)

    lrx = viewport_right(args.ulx, args.uly, args.lly, args.width, args.height)
    xinc = (lrx - args.ulx) / (args.width - 1)
    yinc = (args.uly - args.lly) / (args.height - 1)

    canvas = Canvas(args.width, args.height, 2)
    canvas.set_range(args.ulx, lrx, args.lly, args.uly)
    for u, v in warp_square(args.a, args.b, args.length, args.count, xinc, yinc, args.swap):
        canvas.plot(u, v, 1)
    canvas.save(args.term, args.invert, args.mag)
    return 0
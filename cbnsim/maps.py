"""One-dimensional maps and time series generated from them."""

from __future__ import annotations

import argparse
import math
from functools import partial
from typing import Callable, Sequence

MapFunc = Callable[[float, float], float]


def logistic(x: float, r: float, aux: float = 1.0) -> float:
    """Logistic map: 4 r x (1 - x)."""
    return 4.0 * r * x * (1.0 - x)


def tent(x: float, r: float, aux: float = 1.0) -> float:
    """Tent map with peak height r at x = 0.5."""
    return 2.0 * r * x if x <= 0.5 else 2.0 * r * (1.0 - x)


def sine(x: float, r: float, aux: float = 1.0) -> float:
    """Sine map: sin(x pi aux 2 r) / 2 + 0.5."""
    return math.sin(x * math.pi * aux * 2.0 * r) / 2.0 + 0.5


def gaussian(x: float, r: float, aux: float = 1.0) -> float:
    """Gaussian map: r exp(-aux (x - 0.5)^2)."""
    return r * math.exp(-aux * (x - 0.5) * (x - 0.5))


_MAPS = {"log": logistic, "tent": tent, "sin": sine, "gauss": gaussian}


def get_map(name: str, aux: float = 1.0) -> MapFunc:
    """Return the named map as a function of (x, r) with ``aux`` bound."""
    try:
        func = _MAPS[name]
    except KeyError:
        raise ValueError(
            f"unknown map {name!r}; choose one of {', '.join(_MAPS)}"
        ) from None
    return partial(func, aux=aux)


def time_series(func: MapFunc, r: float, x0: float, points: int, skip: int = 0) -> list[float]:
    """Iterate ``func`` from ``x0``, dropping the first ``skip`` iterates."""
    values = []
    x = x0
    for i in range(points + skip):
        x = func(x, r)
        if i >= skip:
            values.append(x)
    return values


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="gen1d",
        allow_abbrev=False,
        description="Generate a time series from a one-dimensional map.",
    )
    parser.add_argument("-points", type=int, default=10, help="Number of points to print.")
    parser.add_argument("-skip", type=int, default=0, help="Number of initial points to skip.")
    parser.add_argument("-r", type=float, default=1.0, help="Value for the r parameter.")
    parser.add_argument("-aux", type=float, default=1.0, help="Auxiliary map parameter.")
    parser.add_argument("-x0", type=float, default=0.123456, help="Initial value for x.")
    parser.add_argument("-func", default="log", help="Map function: log, tent, sin or gauss.")
    args = parser.parse_args(argv)
    try:
        func = get_map(args.func, args.aux)
    except ValueError as exc:
        parser.error(str(exc))
    for value in time_series(func, args.r, args.x0, args.points, args.skip):
        print(f"{value:f}")
    return 0
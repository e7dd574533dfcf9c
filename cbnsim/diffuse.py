"""Diffusion limited aggregation of randomly walking particles."""

from __future__ import annotations

import argparse
import math
import random
from typing import Sequence

from .raster import Canvas


def near_another(grid: Sequence[Sequence[bool]], x: int, y: int) -> bool:
    """True if any of the eight wrapped neighbours of (x, y) is fixed."""
    width = len(grid)
    height = len(grid[0])
    for dx in (-1, 0, 1):
        for dy in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            if grid[(x + dx) % width][(y + dy) % height]:
                return True
    return False


def _bounce(value: int, lo: int, hi: int) -> int:
    if value < lo - 5:
        return hi + 5
    if value > hi + 5:
        return lo - 5
    return value


def _wrap(value: int, size: int) -> int:
    if value < 0:
        return size - 1
    if value > size - 1:
        return 0
    return value


def _clip(value: int, size: int) -> int:
    return min(max(value, 0), size - 1)


class Aggregate:
    """A growing cluster seeded at the centre plus floating walkers."""

    COLOR_PERIOD = 10

    def __init__(
        self,
        width: int = 300,
        height: int = 300,
        num: int = 20,
        rng: random.Random | None = None,
    ) -> None:
        if width < 2 or height < 2:
            raise ValueError(f"grid must be at least 2x2, got {width}x{height}")
        self.rng = rng if rng is not None else random.Random(0)
        self.width = width
        self.height = height
        self.particles = [
            [
                int(self.rng.uniform(-(width // 10), width // 10) + width // 2),
                int(self.rng.uniform(-(height // 10), height // 10) + height // 2),
            ]
            for _ in range(num)
        ]
        self.grid = [[False] * height for _ in range(width)]
        cx = int(width / 2.0 + 0.5)
        cy = int(height / 2.0 + 0.5)
        self.seed_cell = (cx, cy)
        self.grid[cx][cy] = True
        self.minx = self.maxx = cx
        self.miny = self.maxy = cy
        self.color = 1
        self._cinc = 0
        self.done = False

    def _respawn(self, particle: list[int]) -> None:
        cx, cy = self.width // 2, self.height // 2
        while self.grid[particle[0]][particle[1]]:
            ang = self.rng.uniform(0, math.pi * 2)
            rx = max(cx - self.minx, self.maxx - cx) + 5
            ry = max(cy - self.miny, self.maxy - cy) + 5
            particle[0] = _clip(int(math.cos(ang) * rx + cx), self.width)
            particle[1] = _clip(int(math.sin(ang) * ry + cy), self.height)

    def step(self) -> list[tuple[int, int, int]]:
        """Move every particle once; return (x, y, color) of newly fixed cells."""
        rng = self.rng
        frozen = []
        for particle in self.particles:
            nx, ny = particle
            if rng.random() < 0.5:
                nx += 1 if rng.random() < 0.5 else -1
            else:
                ny += 1 if rng.random() < 0.5 else -1
            nx = _wrap(_bounce(nx, self.minx, self.maxx), self.width)
            ny = _wrap(_bounce(ny, self.miny, self.maxy), self.height)
            particle[0], particle[1] = nx, ny

            if not near_another(self.grid, nx, ny):
                continue
            self.grid[nx][ny] = True
            self.minx = min(self.minx, nx)
            self.maxx = max(self.maxx, nx)
            self.miny = min(self.miny, ny)
            self.maxy = max(self.maxy, ny)
            if (self.minx < 5 or self.miny < 5
                    or self.maxx > self.width - 1 + 5 or self.maxy > self.height - 1 + 5):
                self.done = True
            frozen.append((nx, ny, self.color))
            self._respawn(particle)

            self._cinc += 1
            if self._cinc > self.COLOR_PERIOD:
                self.color = self.color % 255 + 1
                self._cinc = 0
        return frozen

    def run(self, steps: int) -> list[tuple[int, int, int]]:
        """Step until ``steps`` are done or the cluster nears the border.

        A negative count runs until the border is reached; zero runs once.
        """
        frozen = []
        if steps < 0:
            while not self.done:
                frozen.extend(self.step())
            return frozen
        for _ in range(max(steps, 1)):
            if self.done:
                break
            frozen.extend(self.step())
        return frozen


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="diffuse",
        allow_abbrev=False,
        description="Simulate diffusion limited aggregation as a PGM image.",
    )
    parser.add_argument("-width", type=int, default=300)
    parser.add_argument("-height", type=int, default=300)
    parser.add_argument("-levels", type=int, default=256, help="Number of gray levels.")
    parser.add_argument("-num", type=int, default=20, help="Number of floating particles.")
    parser.add_argument("-steps", type=int, default=1000000)
    parser.add_argument("-invis", action="store_true", help="Invisible particles?")
    parser.add_argument("-seed", type=int, default=0)
    parser.add_argument("-inv", dest="invert", action="store_true")
    parser.add_argument("-mag", type=int, default=1)
    parser.add_argument("-term", default=None, help="Output PGM file ('-' for stdout).")
    args = parser.parse_args(argv)

    try:
        aggregate = Aggregate(args.width, args.height, args.num, random.Random(args.seed))
        canvas = Canvas(args.width, args.height, args.levels)
    except ValueError as exc:
        parser.error(str(exc))
    canvas.plot(*aggregate.seed_cell, 1)
    for x, y, color in aggregate.run(args.steps):
        canvas.plot(x, y, color)
    if not args.invis:
        for x, y in aggregate.particles:
            canvas.plot(x, y, aggregate.color)
    canvas.save(args.term, args.invert, args.mag)
    return 0
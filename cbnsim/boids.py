"""A flock of boids steered by centering, copying, avoidance and visual rules."""

from __future__ import annotations

import argparse
import math
import random
from dataclasses import dataclass
from typing import Sequence

from .raster import Canvas


def normalize(x: float, y: float) -> tuple[float, float]:
    """Scale a vector to unit length; the zero vector is returned unchanged."""
    length = math.hypot(x, y)
    if length == 0.0:
        return x, y
    return x / length, y / length


def _cap(x: float, y: float) -> tuple[float, float]:
    return normalize(x, y) if math.hypot(x, y) > 1.0 else (x, y)


@dataclass
class FlockParams:
    """World size, rule radii and weights, and the physics of the flock.

    Angles are in degrees; radii are in pixels.
    """

    width: int = 640
    height: int = 480
    num: int = 20
    angle: float = 270.0
    vangle: float = 90.0
    minv: float = 0.5
    ddt: float = 0.95
    dt: float = 3.0
    rcopy: float = 80.0
    rcent: float = 30.0
    rviso: float = 40.0
    rvoid: float = 15.0
    wcopy: float = 0.2
    wcent: float = 0.4
    wviso: float = 0.8
    wvoid: float = 1.0
    wrand: float = 0.0


class Flock:
    """Boid positions and velocities in a wrap-around world."""

    def __init__(
        self,
        params: FlockParams | None = None,
        rng: random.Random | None = None,
        positions: Sequence[tuple[float, float]] | None = None,
        velocities: Sequence[tuple[float, float]] | None = None,
    ) -> None:
        self.params = params if params is not None else FlockParams()
        p = self.params
        if p.width < 1 or p.height < 1:
            raise ValueError(f"world size must be positive, got {p.width}x{p.height}")
        self.rng = rng if rng is not None else random.Random(0)

        if positions is None and velocities is None:
            if p.num < 0:
                raise ValueError(f"number of boids must not be negative, got {p.num}")
            positions, velocities = [], []
            for _ in range(p.num):
                positions.append(
                    (float(self.rng.randrange(p.width)), float(self.rng.randrange(p.height)))
                )
                velocities.append(
                    normalize(self.rng.uniform(-1.0, 1.0), self.rng.uniform(-1.0, 1.0))
                )
        elif positions is None or velocities is None or len(positions) != len(velocities):
            raise ValueError("positions and velocities must be given together, one per boid")

        self.positions = [(float(x), float(y)) for x, y in positions]
        self.velocities = [(float(x), float(y)) for x, y in velocities]
        self._cos_angle = math.cos(math.radians(p.angle) / 2)
        self._cos_vangle = math.cos(math.radians(p.vangle) / 2)
        self._maxr = max(p.rviso, p.rcopy, p.rcent, p.rvoid)

    def __len__(self) -> int:
        return len(self.positions)

    def _nearest_image(self, other: tuple[float, float], here: tuple[float, float]):
        p = self.params
        ox, oy = other
        px, py = here
        best, mx, my = math.inf, 0.0, 0.0
        for dx in (-p.width, 0, p.width):
            for dy in (-p.height, 0, p.height):
                d = math.hypot(ox + dx - px, oy + dy - py)
                if d < best:
                    best, mx, my = d, ox + dx, oy + dy
        return best, mx, my

    def compute_heading(self, which: int) -> tuple[float, float]:
        """Return the next velocity of boid ``which`` given its neighbours.

        Neighbours are seen across the wrapped borders; a neighbour at
        exactly the same spot is ignored.
        """
        p = self.params
        px, py = self.positions[which]
        vx, vy = self.velocities[which]
        speed = math.hypot(vx, vy)

        xa = ya = xb = yb = xc = yc = xd = yd = 0.0
        numcent = 0
        for i, other in enumerate(self.positions):
            if i == which:
                continue
            dist, mx, my = self._nearest_image(other, (px, py))
            if dist > self._maxr or dist == 0.0 or speed == 0.0:
                continue
            tx, ty = mx - px, my - py
            cos_to = (vx * tx + vy * ty) / (speed * dist)
            if cos_to < self._cos_angle:
                continue

            if p.rvoid < dist <= p.rcent:
                xa += tx
                ya += ty
                numcent += 1

            if p.rvoid < dist <= p.rcopy:
                ovx, ovy = self.velocities[i]
                xb += ovx
                yb += ovy

            if dist <= p.rvoid:
                xc += -tx / dist
                yc += -ty / dist

            if dist <= p.rviso and self._cos_vangle < cos_to:
                ax, ay = -tx, -ty
                u = v = 0.0
                if ax != 0 and ay != 0:
                    ratio2 = (ay / ax) ** 2
                    u = math.sqrt(ratio2 / (1 + ratio2))
                    v = -ax * u / ay
                elif ax != 0:
                    u = 1.0
                elif ay != 0:
                    v = 1.0
                if vx * u + vy * v < 0:
                    u, v = -u, -v
                xd += (ax + u) / dist
                yd += (ay + v) / dist

        if numcent < 2:
            xa = ya = 0.0

        xa, ya = _cap(xa, ya)
        xb, yb = _cap(xb, yb)
        xc, yc = _cap(xc, yc)
        xd, yd = _cap(xd, yd)

        xt = xa * p.wcent + xb * p.wcopy + xc * p.wvoid + xd * p.wviso
        yt = ya * p.wcent + yb * p.wcopy + yc * p.wvoid + yd * p.wviso

        if p.wrand > 0:
            xt += self.rng.uniform(-1.0, 1.0) * p.wrand
            yt += self.rng.uniform(-1.0, 1.0) * p.wrand

        nvx = vx * p.ddt + xt * (1 - p.ddt)
        nvy = vy * p.ddt + yt * (1 - p.ddt)
        d = math.hypot(nvx, nvy)
        if 0.0 < d < p.minv:
            nvx *= p.minv / d
            nvy *= p.minv / d
        return nvx, nvy

    def step(self) -> None:
        """Update every boid's velocity from the old state, then move and wrap."""
        p = self.params
        headings = [self.compute_heading(i) for i in range(len(self.positions))]
        for i, (nvx, nvy) in enumerate(headings):
            x, y = self.positions[i]
            x += nvx * p.dt
            y += nvy * p.dt
            if x < 0:
                x += p.width
            elif x >= p.width:
                x -= p.width
            if y < 0:
                y += p.height
            elif y >= p.height - 1:
                y -= p.height
            self.positions[i] = (x, y)
            self.velocities[i] = (nvx, nvy)


def _draw_boid(
    canvas: Canvas,
    position: tuple[float, float],
    velocity: tuple[float, float],
    length: int,
    angle: float,
    color: int,
) -> None:
    hx, hy = normalize(*velocity)
    x1, y1 = position
    x2, y2 = x1 - hx * length, y1 - hy * length
    canvas.line(x1, y1, x2, y2, color)
    if length == 0:
        return
    t = min(max((x1 - x2) / length, -1.0), 1.0)
    a = math.acos(t)
    if y1 - y2 < 0:
        a = -a
    for side in (a + angle / 2, a - angle / 2):
        x3 = x1 + math.cos(side) * length / 3.0
        y3 = y1 + math.sin(side) * length / 3.0
        canvas.line(x1, y1, x3, y3, color)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="boids",
        allow_abbrev=False,
        description="Simulate a flock of boids and draw the final configuration as PGM.",
    )
    defaults = FlockParams()
    parser.add_argument("-width", type=int, default=defaults.width)
    parser.add_argument("-height", type=int, default=defaults.height)
    parser.add_argument("-num", type=int, default=defaults.num, help="Number of boids.")
    parser.add_argument("-steps", type=int, default=100000000)
    parser.add_argument("-seed", type=int, default=0)
    parser.add_argument("-angle", type=float, default=defaults.angle)
    parser.add_argument("-vangle", type=float, default=defaults.vangle)
    for name in ("rcopy", "rcent", "rvoid", "rviso", "wcopy", "wcent", "wvoid", "wviso",
                 "wrand", "dt", "ddt", "minv"):
        parser.add_argument(f"-{name}", type=float, default=getattr(defaults, name))
    parser.add_argument("-len", dest="length", type=int, default=20, help="Tail length.")
    parser.add_argument("-psdump", action="store_true",
                        help="Render only the final configuration.")
    parser.add_argument("-inv", dest="invert", action="store_true")
    parser.add_argument("-mag", type=int, default=1)
    parser.add_argument("-term", default=None, help="Output PGM file ('-' for stdout).")
    args = parser.parse_args(argv)

    params = FlockParams(
        width=args.width, height=args.height, num=args.num,
        angle=args.angle, vangle=args.vangle, minv=args.minv, ddt=args.ddt, dt=args.dt,
        rcopy=args.rcopy, rcent=args.rcent, rviso=args.rviso, rvoid=args.rvoid,
        wcopy=args.wcopy, wcent=args.wcent, wviso=args.wviso, wvoid=args.wvoid,
        wrand=args.wrand,
    )
    try:
        flock = Flock(params, random.Random(args.seed))
        canvas = Canvas(args.width, args.height, 2)
    except ValueError as exc:
        parser.error(str(exc))
    for _ in range(args.steps):
        flock.step()
    angle = math.radians(params.angle)
    for position, velocity in zip(flock.positions, flock.velocities):
        _draw_boid(canvas, position, velocity, args.length, angle, 1)
    canvas.save(args.term, args.invert, args.mag)
    return 0
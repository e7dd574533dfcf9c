"""A small grey-level raster with optional world coordinates and PGM output."""

from __future__ import annotations

import math
import sys
from pathlib import Path


class Canvas:
    """A width x height grid of integer levels in ``0 .. levels - 1``.

    Coordinates are pixel columns and rows until :meth:`set_range` is
    called; afterwards they are world coordinates, with ``ymax`` at the
    top row and ``xmin`` at the left column.
    """

    def __init__(self, width: int, height: int, levels: int = 2) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"canvas size must be positive, got {width}x{height}")
        if not 2 <= levels <= 65536:
            raise ValueError(f"levels must be between 2 and 65536, got {levels}")
        self.width = width
        self.height = height
        self.levels = levels
        self._pixels = [[0] * width for _ in range(height)]
        self._range: tuple[float, float, float, float] | None = None

    def set_range(self, xmin: float, xmax: float, ymin: float, ymax: float) -> None:
        """Map world coordinates onto the pixel grid."""
        if xmax == xmin or ymax == ymin:
            raise ValueError("plot range must have non-zero extent")
        self._range = (xmin, xmax, ymin, ymax)

    def _to_pixel(self, x: float, y: float) -> tuple[int, int]:
        if self._range is None:
            return math.floor(x + 0.5), math.floor(y + 0.5)
        xmin, xmax, ymin, ymax = self._range
        col = (x - xmin) / (xmax - xmin) * (self.width - 1)
        row = (ymax - y) / (ymax - ymin) * (self.height - 1)
        return math.floor(col + 0.5), math.floor(row + 0.5)

    def _level(self, value: float) -> int:
        return min(max(int(value), 0), self.levels - 1)

    def _set(self, col: int, row: int, level: int) -> None:
        if 0 <= col < self.width and 0 <= row < self.height:
            self._pixels[row][col] = level

    def plot(self, x: float, y: float, value: int) -> None:
        """Set one point; points outside the canvas are ignored."""
        col, row = self._to_pixel(x, y)
        self._set(col, row, self._level(value))

    def _segment(self, c0: int, r0: int, c1: int, r1: int, level: int) -> None:
        dc, dr = abs(c1 - c0), -abs(r1 - r0)
        sc = 1 if c0 < c1 else -1
        sr = 1 if r0 < r1 else -1
        err = dc + dr
        while True:
            self._set(c0, r0, level)
            if c0 == c1 and r0 == r1:
                return
            e2 = 2 * err
            if e2 >= dr:
                err += dr
                c0 += sc
            if e2 <= dc:
                err += dc
                r0 += sr

    def line(self, x1: float, y1: float, x2: float, y2: float, value: int) -> None:
        """Draw a straight line between two points."""
        c0, r0 = self._to_pixel(x1, y1)
        c1, r1 = self._to_pixel(x2, y2)
        self._segment(c0, r0, c1, r1, self._level(value))

    def box(self, x1: float, y1: float, x2: float, y2: float, thickness: int) -> None:
        """Draw a rectangle outline, ``thickness`` pixels wide, inside the corners."""
        ca, ra = self._to_pixel(x1, y1)
        cb, rb = self._to_pixel(x2, y2)
        left, right = min(ca, cb), max(ca, cb)
        top, bottom = min(ra, rb), max(ra, rb)
        level = self.levels - 1
        for inset in range(thickness):
            l, r = left + inset, right - inset
            t, b = top + inset, bottom - inset
            if l > r or t > b:
                break
            self._segment(l, t, r, t, level)
            self._segment(l, b, r, b, level)
            self._segment(l, t, l, b, level)
            self._segment(r, t, r, b, level)

    def fill(self, value: int) -> None:
        """Set every pixel to ``value``."""
        level = self._level(value)
        for row in self._pixels:
            row[:] = [level] * self.width

    def get(self, col: int, row: int) -> int:
        """Return the level stored at a pixel."""
        if not (0 <= col < self.width and 0 <= row < self.height):
            raise IndexError(f"pixel ({col}, {row}) is outside the canvas")
        return self._pixels[row][col]

    def to_pgm(self, invert: bool = False, mag: int = 1) -> bytes:
        """Encode as binary PGM; level 0 is white unless ``invert`` is set."""
        if mag < 1:
            raise ValueError(f"magnification must be at least 1, got {mag}")
        maxval = self.levels - 1
        wide = maxval > 255
        header = f"P5\n{self.width * mag} {self.height * mag}\n{maxval}\n".encode("ascii")
        chunks = [header]
        for row in self._pixels:
            samples = (v if invert else maxval - v for v in row)
            if wide:
                line = b"".join(s.to_bytes(2, "big") * mag for s in samples)
            else:
                line = bytes(s for s in samples for _ in range(mag))
            chunks.extend([line] * mag)
        return b"".join(chunks)

    def save(self, path: str | Path | None, invert: bool = False, mag: int = 1) -> None:
        """Write the PGM image to ``path``, or to standard output for None or '-'."""
        data = self.to_pgm(invert, mag)
        if path is None or str(path) == "-":
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
        else:
            Path(path).write_bytes(data)
"""Recall stored images from a McCulloch-Pitts associative memory.

Patterns are stored by Hebb's rule; weights may then be pruned by
locality, by size, or at random.  Recall updates one randomly chosen
neuron at a time.
"""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import Sequence

from .raster import Canvas

Pattern = Sequence[Sequence[int]]


def _skip(data: bytes, pos: int) -> int:
    while pos < len(data):
        if data[pos] == ord("#"):
            end = data.find(b"\n", pos)
            pos = len(data) if end < 0 else end + 1
        elif data[pos : pos + 1].isspace():
            pos += 1
        else:
            break
    return pos


def _token(data: bytes, pos: int) -> tuple[bytes, int]:
    pos = _skip(data, pos)
    start = pos
    while pos < len(data) and not data[pos : pos + 1].isspace() and data[pos] != ord("#"):
        pos += 1
    return data[start:pos], pos


def read_pbm(path: str | Path) -> list[list[int]]:
    """Read a plain (P1) or raw (P4) PBM file as rows of 0 and 1."""
    data = Path(path).read_bytes()
    magic, pos = _token(data, 0)
    if magic not in (b"P1", b"P4"):
        raise ValueError(f"{path}: not a PBM file")
    try:
        wtok, pos = _token(data, pos)
        htok, pos = _token(data, pos)
        width, height = int(wtok), int(htok)
    except ValueError:
        raise ValueError(f"{path}: bad PBM header") from None
    if width < 1 or height < 1:
        raise ValueError(f"{path}: bad PBM dimensions {width}x{height}")

    if magic == b"P1":
        bits: list[int] = []
        while len(bits) < width * height:
            pos = _skip(data, pos)
            if pos >= len(data):
                raise ValueError(f"{path}: truncated PBM data")
            if data[pos] not in b"01":
                raise ValueError(f"{path}: bad PBM pixel {data[pos:pos + 1]!r}")
            bits.append(data[pos] - ord("0"))
            pos += 1
        return [bits[r * width : (r + 1) * width] for r in range(height)]

    pos += 1
    stride = (width + 7) // 8
    raster = data[pos : pos + stride * height]
    if len(raster) < stride * height:
        raise ValueError(f"{path}: truncated PBM data")
    rows = []
    for r in range(height):
        line = raster[r * stride : (r + 1) * stride]
        rows.append([(line[c // 8] >> (7 - c % 8)) & 1 for c in range(width)])
    return rows


class AssociativeMemory:
    """Fully connected binary network over a ``width`` x ``height`` image.

    ``weights[k][l]`` connects neuron k to neuron l, where a neuron's index
    is ``row * width + col``.
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"image size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.size = width * height
        self.patterns = 0
        n = self.size
        self._sums = [[0] * n for _ in range(n)]
        self._kept = [[True] * n for _ in range(n)]
        self.weights = [[0.0] * n for _ in range(n)]

    def _spins(self, pattern: Pattern) -> list[int]:
        if len(pattern) != self.height or any(len(row) != self.width for row in pattern):
            raise ValueError(
                f"pattern must be {self.width}x{self.height} "
                f"to match the stored patterns"
            )
        spins = []
        for row in pattern:
            for value in row:
                if value not in (0, 1):
                    raise ValueError(f"pattern values must be 0 or 1, got {value!r}")
                spins.append(2 * value - 1)
        return spins

    def _refresh(self) -> None:
        n = self.size
        self.weights = [
            [s / n if keep else 0.0 for s, keep in zip(srow, krow)]
            for srow, krow in zip(self._sums, self._kept)
        ]

    def store(self, pattern: Pattern) -> None:
        """Add a pattern's correlations to the weights by Hebb's rule."""
        spins = self._spins(pattern)
        for srow, sk in zip(self._sums, spins):
            srow[:] = [w + sk * sl for w, sl in zip(srow, spins)]
        self.patterns += 1
        self._refresh()

    def prune(
        self,
        local: int = 0,
        cutoff: float = 0.0,
        pprob: float = 0.0,
        rng: random.Random | None = None,
    ) -> int:
        """Remove weights and return how many remain.

        A weight goes if its neurons lie more than ``local`` rows or
        columns apart (when ``local`` is non-zero), else if its magnitude
        is below ``cutoff``, else with probability ``pprob``.
        """
        if rng is None:
            rng = random.Random(0)
        w = self.width
        for k, (wrow, krow) in enumerate(zip(self.weights, self._kept)):
            i, j = divmod(k, w)
            for l, weight in enumerate(wrow):
                ki, kj = divmod(l, w)
                if local and (abs(i - ki) > local or abs(j - kj) > local):
                    krow[l] = False
                elif abs(weight) < cutoff:
                    krow[l] = False
                elif pprob > 0 and rng.random() < pprob:
                    krow[l] = False
        self._refresh()
        return sum(sum(krow) for krow in self._kept)

    def recall(
        self, pattern: Pattern, steps: int = 1000, rng: random.Random | None = None
    ) -> list[list[int]]:
        """Settle from ``pattern`` by ``steps`` random single-neuron updates."""
        if rng is None:
            rng = random.Random(0)
        y = self._spins(pattern)
        bias = [-0.5 * sum(row) for row in self.weights]
        for _ in range(steps):
            k = rng.randrange(self.height) * self.width + rng.randrange(self.width)
            net = sum(a * b for a, b in zip(y, self.weights[k]))
            y[k] = 1 if net - bias[k] > 0 else -1
        w = self.width
        return [[(v + 1) // 2 for v in y[r * w : (r + 1) * w]] for r in range(self.height)]


def _bad_size(width: int, height: int, path: str) -> str:
    return f"Bad width ({width}) or height ({height}) in PPM file ({path})."


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="assoc",
        allow_abbrev=False,
        description="Reconstruct a corrupted image from a Hebbian associative memory.",
    )
    parser.add_argument("-pfile", action="append", default=[],
                        help="File with pattern to store (may be repeated).")
    parser.add_argument("-tfile", default="data/a.pbm", help="File with test pattern.")
    parser.add_argument("-local", type=int, default=0, help="Locality of permitted weights.")
    parser.add_argument("-cut", type=float, default=0.0, help="Cutoff size for weights.")
    parser.add_argument("-pprob", type=float, default=0.0,
                        help="Probability of random pruning.")
    parser.add_argument("-noise", type=float, default=0.0,
                        help="Amount of noise for test case.")
    parser.add_argument("-seed", type=int, default=0)
    parser.add_argument("-steps", type=int, default=1000, help="Number of time steps.")
    parser.add_argument("-inv", dest="invert", action="store_true")
    parser.add_argument("-mag", type=int, default=1)
    parser.add_argument("-term", default=None, help="Output PGM file ('-' for stdout).")
    args = parser.parse_args(argv)

    if not args.pfile:
        print("No stored files.  Use -pfile option.", file=sys.stderr)
        return 1

    memory: AssociativeMemory | None = None
    try:
        for path in args.pfile:
            rows = read_pbm(path)
            h, w = len(rows), len(rows[0])
            if memory is None:
                memory = AssociativeMemory(w, h)
            elif (w, h) != (memory.width, memory.height):
                print(_bad_size(w, h, path), file=sys.stderr)
                return 1
            memory.store(rows)

        rng = random.Random(args.seed)
        test = read_pbm(args.tfile)
    except (OSError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1
    th, tw = len(test), len(test[0])
    if (tw, th) != (memory.width, memory.height):
        print(_bad_size(tw, th, args.tfile), file=sys.stderr)
        return 1

    if 0 < args.noise < 1:
        test = [
            [rng.randrange(2) if rng.random() < args.noise else v for v in row]
            for row in test
        ]

    magnitudes = [abs(v) for row in memory.weights for v in row]
    print(f"|largest weight| = {max(magnitudes):f}", file=sys.stderr)
    print(f"|smallest weight| = {min(magnitudes):f}", file=sys.stderr)

    used = memory.prune(args.local, args.cut, args.pprob, rng)
    print(f"total used weights = {used}", file=sys.stderr)

    result = memory.recall(test, args.steps, rng)
    canvas = Canvas(memory.width, memory.height, 2)
    for i, row in enumerate(result):
        for j, value in enumerate(row):
            canvas.plot(j, i, value)
    canvas.save(args.term, args.invert, args.mag)
    return 0
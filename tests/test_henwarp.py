import pytest

from cbnsim.henon import henon_step
from cbnsim.henwarp import main, warp_square

A, B = 1.29, 0.3


def test_even_length_is_made_odd():
    assert len(list(warp_square(A, B, 4, 0, 0.01, 0.01, False))) == 25
    assert len(list(warp_square(A, B, 5, 0, 0.01, 0.01, False))) == 25


def test_zero_count_is_a_grid():
    pts = list(warp_square(A, B, 7, 0, 0.02, 0.03, False))
    xs = sorted({round(x, 12) for x, _ in pts})
    ys = sorted({round(y, 12) for _, y in pts})
    assert len(xs) == 7 and len(ys) == 7
    assert all(b - a == pytest.approx(0.02) for a, b in zip(xs, xs[1:]))
    assert all(b - a == pytest.approx(0.03) for a, b in zip(ys, ys[1:]))


def test_one_step_applies_henon():
    grid = list(warp_square(A, B, 5, 0, 0.01, 0.01, False))
    warped = list(warp_square(A, B, 5, 1, 0.01, 0.01, False))
    assert warped == [henon_step(x, y, A, B) for x, y in grid]


def test_swap():
    plain = list(warp_square(A, B, 3, 2, 0.01, 0.01, False))
    swapped = list(warp_square(A, B, 3, 2, 0.01, 0.01, True))
    assert swapped == [(y, x) for x, y in plain]


def test_main_writes_pgm(tmp_path):
    out = tmp_path / "warp.pgm"
    assert main(["-width", "60", "-height", "50", "-len", "21", "-term", str(out)]) == 0
    data = out.read_bytes()
    header = b"P5\n60 50\n1\n"
    assert data.startswith(header)
    assert len(data) == len(header) + 60 * 50
    assert 0 in data[len(header):]
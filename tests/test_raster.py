import pytest

from cbnsim.raster import Canvas


def _all(canvas):
    return [canvas.get(c, r) for r in range(canvas.height) for c in range(canvas.width)]


def test_plot_and_get():
    c = Canvas(4, 3)
    c.plot(1, 2, 1)
    assert c.get(1, 2) == 1
    assert sum(_all(c)) == 1


def test_out_of_bounds_points_are_ignored():
    c = Canvas(4, 3)
    for x, y in [(-1, 0), (4, 0), (0, -1), (0, 3)]:
        c.plot(x, y, 1)
    assert sum(_all(c)) == 0


def test_value_is_clamped_to_levels():
    c = Canvas(2, 2, levels=4)
    c.plot(0, 0, 99)
    c.plot(1, 1, -5)
    assert c.get(0, 0) == c.levels - 1
    assert c.get(1, 1) == 0


def test_set_range_maps_corners():
    c = Canvas(5, 4)
    c.set_range(-2.0, 2.0, 0.0, 1.0)
    c.plot(-2.0, 1.0, 1)
    c.plot(2.0, 0.0, 1)
    assert c.get(0, 0) == 1
    assert c.get(c.width - 1, c.height - 1) == 1
    assert sum(_all(c)) == 2


def test_line_is_connected():
    c = Canvas(6, 6)
    c.line(0, 0, 5, 5, 1)
    assert all(c.get(i, i) == 1 for i in range(6))
    assert sum(_all(c)) == 6
    h = Canvas(6, 3)
    h.line(0, 1, 5, 1, 1)
    assert [h.get(i, 1) for i in range(6)] == [1] * 6


def test_box_draws_border_only():
    c = Canvas(6, 6)
    c.box(0, 0, 5, 5, 1)
    border = [c.get(i, 0) for i in range(6)] + [c.get(0, i) for i in range(6)]
    assert all(v == 1 for v in border)
    assert all(c.get(i, j) == 0 for i in range(1, 5) for j in range(1, 5))


def test_fill():
    c = Canvas(3, 3, levels=8)
    c.fill(5)
    assert set(_all(c)) == {5}


def test_pgm_header_and_size():
    c = Canvas(2, 3)
    data = c.to_pgm()
    header = b"P5\n2 3\n1\n"
    assert data.startswith(header)
    assert len(data) == len(header) + 6
    assert set(data[len(header):]) == {1}
    inverted = c.to_pgm(invert=True)
    assert set(inverted[len(header):]) == {0}


def test_pgm_magnification():
    c = Canvas(2, 3)
    c.plot(0, 0, 1)
    data = c.to_pgm(mag=2)
    header = b"P5\n4 6\n1\n"
    assert data.startswith(header)
    body = data[len(header):]
    assert len(body) == 24
    assert body.count(0) == 4


def test_pgm_wide_samples():
    c = Canvas(2, 2, levels=300)
    data = c.to_pgm()
    header = b"P5\n2 2\n299\n"
    assert data.startswith(header)
    assert len(data) == len(header) + 2 * 4


def test_errors():
    with pytest.raises(ValueError):
        Canvas(0, 1)
    c = Canvas(2, 2)
    with pytest.raises(ValueError):
        c.set_range(1.0, 1.0, 0.0, 1.0)
    with pytest.raises(ValueError):
        c.to_pgm(mag=0)
    with pytest.raises(IndexError):
        c.get(2, 0)


def test_save_round_trip(tmp_path):
    c = Canvas(3, 2)
    c.plot(2, 1, 1)
    path = tmp_path / "out.pgm"
    c.save(path, invert=True, mag=2)
    assert path.read_bytes() == c.to_pgm(invert=True, mag=2)
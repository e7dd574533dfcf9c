import random

import pytest

from cbnsim.diffuse import Aggregate, main, near_another


def _grid(width, height, cells):
    grid = [[False] * height for _ in range(width)]
    for x, y in cells:
        grid[x][y] = True
    return grid


def test_near_another_neighbours():
    grid = _grid(6, 6, [(2, 2)])
    assert near_another(grid, 3, 3)
    assert near_another(grid, 2, 1)
    assert not near_another(grid, 2, 2)
    assert not near_another(grid, 4, 4)


def test_near_another_wraps():
    grid = _grid(5, 5, [(0, 0)])
    assert near_another(grid, 4, 4)
    assert near_another(grid, 0, 4)


def test_initial_state_has_single_seed():
    agg = Aggregate(40, 30, 5, random.Random(1))
    fixed = [(x, y) for x in range(40) for y in range(30) if agg.grid[x][y]]
    assert fixed == [agg.seed_cell]
    assert len(agg.particles) == 5
    assert all(0 <= x < 40 and 0 <= y < 30 for x, y in agg.particles)


def test_grown_cells_touch_the_cluster():
    agg = Aggregate(40, 40, 10, random.Random(4))
    events = agg.run(300)
    fixed = [(x, y) for x in range(40) for y in range(40) if agg.grid[x][y]]
    assert len(fixed) == len(events) + 1
    for x, y in fixed:
        if (x, y) != agg.seed_cell:
            assert near_another(agg.grid, x, y)
        assert agg.minx <= x <= agg.maxx
        assert agg.miny <= y <= agg.maxy


def test_colors_stay_in_range():
    agg = Aggregate(60, 60, 20, random.Random(7))
    events = agg.run(400)
    assert all(1 <= color <= 255 for _, _, color in events)
    assert 1 <= agg.color <= 255


def test_same_seed_same_cluster():
    first = Aggregate(30, 30, 8, random.Random(11))
    second = Aggregate(30, 30, 8, random.Random(11))
    assert first.run(100) == second.run(100)
    assert first.grid == second.grid


def test_unbounded_run_stops_at_border():
    agg = Aggregate(20, 20, 10, random.Random(2))
    agg.run(-1)
    assert agg.done
    assert agg.minx < 5 or agg.miny < 5


def test_too_small_grid_rejected():
    with pytest.raises(ValueError):
        Aggregate(1, 10)


def test_main_writes_pgm(tmp_path):
    out = tmp_path / "dla.pgm"
    assert main(["-width", "20", "-height", "20", "-steps", "50", "-invis",
                 "-term", str(out)]) == 0
    data = out.read_bytes()
    header = b"P5\n20 20\n255\n"
    assert data.startswith(header)
    assert len(data) == len(header) + 400
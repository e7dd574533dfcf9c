import random

import pytest

from cbnsim.gatask import (
    evolve,
    main,
    random_solution,
    read_specs,
    task_cost,
    task_crossover,
)


def _write_specs(tmp_path, text):
    path = tmp_path / "specs.dat"
    path.write_text(text, encoding="utf-8")
    return path


def test_read_specs_parses_matrix_and_comments(tmp_path):
    path = _write_specs(tmp_path, "# header\n3\n1 2 3 # row one\n4 5 6\n7 8 9\n")
    assert read_specs(path) == [[1, 2, 3], [4, 5, 6], [7, 8, 9]]


def test_read_specs_rejects_short_file(tmp_path):
    path = _write_specs(tmp_path, "3\n1 2 3\n4 5\n")
    with pytest.raises(ValueError):
        read_specs(path)


def test_read_specs_rejects_empty_file(tmp_path):
    path = _write_specs(tmp_path, "# nothing here\n")
    with pytest.raises(ValueError):
        read_specs(path)


@pytest.mark.parametrize("n", [1, 2, 5, 12])
def test_random_solution_is_permutation(n):
    rng = random.Random(3)
    assert sorted(random_solution(n, rng)) == list(range(n))


def test_random_solution_is_reproducible():
    first = random_solution(8, random.Random(7))
    second = random_solution(8, random.Random(7))
    assert sorted(first) == list(range(8))
    assert first == second


def test_task_cost_identity():
    assert task_cost([[1, 2], [3, 4]], [0, 1]) == 5


def test_task_cost_length_mismatch():
    with pytest.raises(ValueError):
        task_cost([[1, 2], [3, 4]], [0])


@pytest.mark.parametrize("index", [0, 1, 2, 3, 4])
def test_task_crossover_keeps_permutations(index):
    a = [0, 1, 2, 3, 4]
    b = [3, 0, 4, 1, 2]
    ca, cb = task_crossover(a, b, index)
    assert sorted(ca) == list(range(5))
    assert sorted(cb) == list(range(5))
    assert ca[index] == b[index]
    assert sum(x != y for x, y in zip(ca, a)) <= 2
    assert sum(x != y for x, y in zip(cb, b)) <= 2
    assert a == [0, 1, 2, 3, 4] and b == [3, 0, 4, 1, 2]


def test_task_crossover_of_equal_parents_is_identity():
    p = [2, 0, 1]
    assert task_crossover(p, p, 1) == ([2, 0, 1], [2, 0, 1])


def test_task_crossover_rejects_non_permutation():
    with pytest.raises(ValueError):
        task_crossover([0, 0, 1], [0, 1, 2], 0)


def test_task_crossover_rejects_bad_index():
    with pytest.raises(ValueError):
        task_crossover([0, 1], [1, 0], 2)


def test_evolve_population_stays_feasible():
    cost = [[1, 5, 2], [4, 1, 3], [2, 6, 1]]
    gens = list(evolve(cost, size=7, gens=5, mrate=0.3, rng=random.Random(1)))
    assert len(gens) == 5
    for pop, fit in gens:
        assert len(pop) == 8
        for solution in pop:
            assert sorted(solution) == [0, 1, 2]
        assert fit == [task_cost(cost, s) for s in pop]


def test_evolve_finds_dominant_assignment():
    cost = [[100, 0, 0], [0, 100, 0], [0, 0, 100]]
    best = max(
        max(fit) for _, fit in evolve(cost, size=40, gens=10, rng=random.Random(2))
    )
    assert best == 300


def test_evolve_is_deterministic():
    cost = [[3, 1], [2, 5]]
    first = list(evolve(cost, size=4, gens=3, rng=random.Random(9)))
    second = list(evolve(cost, size=4, gens=3, rng=random.Random(9)))
    assert first == second


def test_evolve_rejects_non_square_cost():
    with pytest.raises(ValueError):
        evolve([[1, 2], [3]])


def test_evolve_rejects_bad_pbase():
    with pytest.raises(ValueError):
        evolve([[1]], pbase=0.0)


def test_main_prints_generations(tmp_path, capsys):
    path = _write_specs(tmp_path, "2\n1 2\n3 4\n")
    assert main(["-specs", str(path), "-gens", "2", "-size", "4"]) == 0
    out = capsys.readouterr().out
    assert "time = 0" in out
    assert "time = 1" in out
    assert "best DNA      = " in out


def test_main_missing_file(tmp_path, capsys):
    assert main(["-specs", str(tmp_path / "missing.dat")]) == 1
    assert "Cannot open specification file" in capsys.readouterr().err
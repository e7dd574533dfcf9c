import random
import string

import pytest

from cbnsim.gastring import evolve, main, random_letter_or_space, string_fitness

VALID = set(string.ascii_lowercase + " ")


def test_random_letter_or_space_alphabet():
    rng = random.Random(3)
    letters = {random_letter_or_space(rng) for _ in range(2000)}
    assert letters == VALID


def test_string_fitness_counts_and_normalisation():
    correct, fit = string_fitness(["abc", "abd", "xyz"], "abc", 2.0)
    assert correct == [3, 2, 0]
    assert sum(fit) == pytest.approx(1.0)
    assert fit[0] / fit[1] == pytest.approx(2.0)


def test_string_fitness_pbase_ratio():
    _, fit = string_fitness(["ab", "xb"], "ab", 3.0)
    assert fit[0] / fit[1] == pytest.approx(3.0)


def test_evolve_yields_each_generation():
    stats = list(evolve("hello", size=20, steps=5, rng=random.Random(1)))
    assert [s.time for s in stats] == list(range(5))
    for s in stats:
        assert len(s.best) == 5
        assert set(s.best) <= VALID
        assert 0.0 <= s.average <= s.best_fraction <= 1.0


def test_evolve_is_reproducible():
    first = list(evolve("abc", size=10, steps=4, rng=random.Random(7)))
    second = list(evolve("abc", size=10, steps=4, rng=random.Random(7)))
    assert first == second


def test_evolve_finds_single_letter():
    stats = list(evolve("a", size=100, steps=20, rng=random.Random(2)))
    assert max(s.best_fraction for s in stats) == 1.0


def test_evolve_empty_target_raises():
    with pytest.raises(ValueError):
        evolve("", size=10, steps=1)


def test_main_output(capsys):
    assert main(["-target", "cat", "-size", "8", "-steps", "3"]) == 0
    out = capsys.readouterr().out
    assert out.count("---") == 3
    assert "time = 2" in out
    assert 'best = "' in out
import random

import pytest

from cbnsim.gabump import bump, decode, evolve, main


def test_bump_peak_is_one():
    assert bump(0.3, 0.3, 2.0) == 1.0


def test_bump_symmetric_and_decreasing():
    assert bump(0.2, 0.5, 1.0) == pytest.approx(bump(0.8, 0.5, 1.0))
    assert bump(0.5, 0.5, 1.0) > bump(0.7, 0.5, 1.0) > bump(1.5, 0.5, 1.0) > 0


def test_decode_binary_fraction():
    assert decode("0000") == 0.0
    assert decode("1000") == 0.5


def test_decode_stays_below_one():
    assert decode("1" * 16) < 1.0


def test_decode_rejects_bad_strings():
    with pytest.raises(ValueError):
        decode("10a1")
    with pytest.raises(ValueError):
        decode("")


def test_evolve_population_shape():
    gens = list(evolve(size=5, gens=3, length=8, rng=random.Random(4)))
    assert len(gens) == 3
    for pop, fit in gens:
        assert len(pop) == 6
        assert len(fit) == 6
        assert all(len(dna) == 8 and set(dna) <= {"0", "1"} for dna in pop)


def test_evolve_fitness_matches_bump():
    for pop, fit in evolve(size=4, gens=2, length=10, target=0.25, var=0.5,
                           rng=random.Random(9)):
        assert fit == [bump(decode(dna), 0.25, 0.5) for dna in pop]


def test_evolve_bad_size():
    with pytest.raises(ValueError):
        evolve(size=0)


def test_main_output(capsys):
    assert main(["-gens", "2", "-size", "4", "-len", "6"]) == 0
    out = capsys.readouterr().out
    assert out.count("---") == 2
    assert "best DNA = \"" in out
    assert "time = 1" in out
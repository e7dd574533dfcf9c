import random

import pytest

from cbnsim.ca import evolve, initial_row, lambda_table, main, random_rule, rule_lambda


@pytest.mark.parametrize("states,radius", [(2, 1), (3, 1), (2, 3), (4, 2)])
def test_lambda_table_is_a_distribution(states, radius):
    vals = lambda_table(states, radius)
    assert len(vals) == (states - 1) * (2 * radius + 1) + 1
    assert sum(vals) == pytest.approx(1.0)
    assert vals == pytest.approx(vals[::-1])


def test_default_rule_lambda():
    assert rule_lambda("0110", 2, 1) == pytest.approx(0.75)


def test_rule_lambda_extremes():
    assert rule_lambda("0000000", 3, 1) == 0.0
    assert rule_lambda("1111111", 3, 1) == pytest.approx(1.0)


def test_rule_lambda_wrong_length():
    with pytest.raises(ValueError):
        rule_lambda("011", 2, 1)


def test_random_rule_respects_quiescence():
    rules, lam = random_rule(3, 1, 0.4, True, random.Random(5))
    assert len(rules) == 7
    assert rules[0] == "0"
    assert rules[3] == "1"
    assert rules[6] == "2"
    assert set(rules) <= set("012")
    assert lam == pytest.approx(rule_lambda(rules, 3, 1))


def test_random_rule_approaches_target():
    rules, lam = random_rule(2, 3, 0.5, True, random.Random(1))
    assert abs(lam - 0.5) < 0.1
    assert lam == pytest.approx(rule_lambda(rules, 2, 3))


def test_random_rule_rejects_single_state():
    with pytest.raises(ValueError):
        random_rule(1, 1, 0.5, True, random.Random(0))


def test_initial_row_is_centred():
    row = initial_row(10, 2, "11")
    assert sum(row) == 2
    assert row == row[::-1]


def test_random_initial_row_all_nonzero_with_odds_one():
    row = initial_row(50, 4, "-1", random.Random(2))
    assert all(1 <= v <= 3 for v in row)


def test_bad_init_strings():
    with pytest.raises(ValueError):
        initial_row(10, 2, "-0")
    with pytest.raises(ValueError):
        initial_row(10, 2, "12")


def test_evolve_first_row_is_input_and_count():
    row = [0, 1, 0, 1, 1, 0]
    rows = list(evolve(row, "0110", 1, True, 5))
    assert len(rows) == 5
    assert rows[0] == row


def test_quiescent_row_stays_quiescent():
    rows = list(evolve([0] * 8, "0110", 1, True, 4))
    assert all(r == [0] * 8 for r in rows)


def test_wrap_versus_bounded():
    wrapped = list(evolve([1, 0, 0, 0, 0], "0110", 1, True, 2))
    bounded = list(evolve([1, 0, 0, 0, 0], "0110", 1, False, 2))
    assert wrapped[1] == [1, 1, 0, 0, 1]
    assert bounded[1] == [1, 1, 0, 0, 0]


def test_evolution_commutes_with_reflection():
    row = initial_row(31, 2, "-3", random.Random(9))
    forward = list(evolve(row, "0110", 1, True, 6))
    backward = list(evolve(row[::-1], "0110", 1, True, 6))
    assert [r[::-1] for r in backward] == forward


def test_main_writes_pgm(tmp_path):
    out = tmp_path / "ca.pgm"
    assert main(["-width", "16", "-height", "8", "-lambda", "0.5", "-term", str(out)]) == 0
    data = out.read_bytes()
    header = b"P5\n16 8\n1\n"
    assert data.startswith(header)
    assert len(data) == len(header) + 16 * 8


def test_main_rejects_bad_rule(tmp_path):
    out = tmp_path / "ca.pgm"
    assert main(["-rules", "01", "-term", str(out)]) == 1
    assert not out.exists()
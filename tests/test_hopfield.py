import pytest

from cbnsim.hopfield import HopfieldNetwork, main, read_specs, sigmoid

SPEC = """# two by two assignment
2
1 10   # first row
10 1
"""


@pytest.fixture
def spec_file(tmp_path):
    path = tmp_path / "spec.dat"
    path.write_text(SPEC)
    return path


def test_sigmoid_midpoint():
    assert sigmoid(0.0, 0.5) == 0.5


def test_sigmoid_is_bounded_and_increasing():
    values = [sigmoid(x, 0.5) for x in (-50, -1, 0, 1, 50)]
    assert values == sorted(values)
    assert all(0.0 <= v <= 1.0 for v in values)
    assert sigmoid(3.0, 0.5) + sigmoid(-3.0, 0.5) == pytest.approx(1.0)


def test_read_specs_skips_comments(spec_file):
    assert read_specs(spec_file) == [[1.0, 10.0], [10.0, 1.0]]


def test_read_specs_short_file(tmp_path):
    path = tmp_path / "bad.dat"
    path.write_text("3\n1 2 3\n")
    with pytest.raises(ValueError):
        read_specs(path)


def test_read_specs_missing_file(tmp_path):
    with pytest.raises(OSError):
        read_specs(tmp_path / "absent.dat")


def test_first_step_returns_initial_activations():
    net = HopfieldNetwork([[1, 10], [10, 1]], state=[0.0] * 4)
    assert net.step() == [0.5] * 4


def test_converges_to_most_valuable_permutation():
    net = HopfieldNetwork([[1, 10], [10, 1]], state=[0.0] * 4)
    for _ in range(1000):
        net.step()
    on = [a > 0.5 for a in net.activations]
    assert on == [False, True, True, False]
    assert net.final_cost() == pytest.approx(20.0)


def test_converges_on_the_diagonal_when_it_is_favoured():
    net = HopfieldNetwork([[10, 1], [1, 10]], state=[0.0] * 4)
    for _ in range(1000):
        net.step()
    assert [a > 0.5 for a in net.activations] == [True, False, False, True]


def test_random_start_settles_to_a_permutation():
    net = HopfieldNetwork([[3, 1, 2], [2, 3, 1], [1, 2, 3]])
    for _ in range(2000):
        net.step()
    on = [[net.activations[i * 3 + j] > 0.5 for j in range(3)] for i in range(3)]
    assert all(sum(row) == 1 for row in on)
    assert all(sum(col) == 1 for col in zip(*on))


def test_flat_costs_give_equal_inputs():
    net = HopfieldNetwork([[5, 5], [5, 5]], state=[0.0] * 4)
    assert net.inputs == [2.0] * 4


@pytest.mark.parametrize(
    "cost, state",
    [([[1, 2], [3]], None), ([], None), ([[1, 2], [3, 4]], [0.0, 0.0])],
)
def test_invalid_network_raises(cost, state):
    with pytest.raises(ValueError):
        HopfieldNetwork(cost, state=state)


def test_main_writes_image(spec_file, tmp_path, capsys):
    out = tmp_path / "net.pgm"
    assert main(["-specs", str(spec_file), "-steps", "50", "-mag", "3",
                 "-term", str(out)]) == 0
    assert out.read_bytes().startswith(b"P5\n6 6\n255\n")
    assert "Final cost = " in capsys.readouterr().err


def test_main_missing_specs(tmp_path, capsys):
    assert main(["-specs", str(tmp_path / "none.dat")]) == 1
    assert "Cannot open specification file" in capsys.readouterr().err
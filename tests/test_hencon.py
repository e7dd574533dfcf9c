import random

import pytest

from cbnsim.hencon import ControlSample, control_law, simulate


def test_fixed_point_satisfies_henon_equation():
    a, b = 1.29, 0.3
    xf, _, _ = control_law(a, b)
    assert xf == pytest.approx(a - xf * xf + b * xf)


def test_control_law_cancels_delay_coupling():
    a, b = 1.29, 0.3
    _, _, k1 = control_law(a, b)
    assert b + k1 == pytest.approx(0.0, abs=1e-12)


def test_closed_loop_is_stable():
    a, b = 1.29, 0.3
    xf, k0, k1 = control_law(a, b)
    trace = -2.0 * xf + k0
    det = -(b + k1)
    assert abs(trace) < 1.0
    assert abs(det) < 1e-12


def test_sample_count_and_times():
    samples = list(simulate(points=40, on1=10, off=20, on2=30, skip=5))
    assert [s.t for s in samples] == list(range(1, 41))
    assert all(isinstance(s, ControlSample) for s in samples)


def test_no_force_outside_control_windows():
    samples = list(simulate(points=60, on1=10, off=20, on2=40, skip=5))
    for s in samples:
        if s.t <= 10 or 20 < s.t <= 40:
            assert s.p == 0.0


def test_force_never_exceeds_limit():
    samples = list(simulate(points=200, on1=0, off=200, on2=200, plimit=0.1))
    assert all(abs(s.p) <= 0.1 for s in samples)


def test_bad_ordering_raises():
    with pytest.raises(ValueError):
        simulate(points=100, on1=60, off=50, on2=70)
    with pytest.raises(ValueError):
        simulate(points=100, on1=10, off=20, on2=150)


def test_long_control_reaches_fixed_point():
    xf, _, _ = control_law(1.29, 0.3)
    samples = list(simulate(points=3000, on1=0, off=3000, on2=3000, skip=0))
    last = samples[-1]
    assert last.x == pytest.approx(xf, abs=1e-6)
    assert last.p == pytest.approx(0.0, abs=1e-6)


def test_main_prints_one_line_per_point(capsys):
    from cbnsim.hencon import main

    assert main(["-points", "12", "-on1", "2", "-off", "4", "-on2", "8"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 12
    assert all(line.startswith("(t,x[t],y[t],p[t])=\t") for line in lines)


def test_main_rejects_bad_times(capsys):
    from cbnsim.hencon import main

    assert main(["-on1", "90", "-off", "50"]) == 1
    assert capsys.readouterr().out == ""
import math

import pytest

from hpckit import pi as pimod
from hpckit.pi import Strategy

STEPS = 100_000


@pytest.mark.parametrize("strategy", list(Strategy))
def test_every_strategy_approximates_pi(strategy):
    value = pimod.pi_threads(STEPS, 3, strategy)
    assert value == pytest.approx(math.pi, abs=1e-8)


def test_strategy_accepts_string_value():
    assert pimod.pi_threads(STEPS, 2, "critical") == pytest.approx(math.pi, abs=1e-8)


def test_partial_sums_add_up_to_single_thread_sum():
    whole = pimod.partial_sum(0, 1, STEPS)
    pieces = sum(pimod.partial_sum(tid, 4, STEPS) for tid in range(4))
    assert pieces == pytest.approx(whole, rel=1e-12)


def test_strategies_agree_with_each_other():
    results = {s: pimod.pi_threads(STEPS, 4, s) for s in Strategy}
    reference = results[Strategy.REDUCTION]
    for value in results.values():
        assert value == pytest.approx(reference, rel=1e-12)


def test_thread_count_does_not_change_result():
    one = pimod.pi_threads(STEPS, 1, Strategy.PADDED)
    many = pimod.pi_threads(STEPS, 7, Strategy.PADDED)
    assert many == pytest.approx(one, rel=1e-12)


def test_recursive_split_matches_direct_sum():
    step = 1.0 / STEPS
    direct = pimod.pi_recursive(0, STEPS, step, min_block=STEPS + 1)
    split = pimod.pi_recursive(0, STEPS, step, min_block=7)
    assert split == pytest.approx(direct, rel=1e-12)


def test_partial_sum_rejects_bad_thread_id():
    with pytest.raises(ValueError):
        pimod.partial_sum(4, 4, STEPS)


def test_pi_threads_rejects_zero_threads():
    with pytest.raises(ValueError):
        pimod.pi_threads(STEPS, 0, Strategy.ATOMIC)


def test_pi_threads_rejects_zero_steps():
    with pytest.raises(ValueError):
        pimod.pi_threads(0, 2, Strategy.ATOMIC)


def test_unknown_strategy_raises():
    with pytest.raises(ValueError):
        pimod.pi_threads(STEPS, 2, "bogus")


def test_main_reduction_output(capsys):
    assert pimod.main(["reduction", str(STEPS), "2"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("pi is 3.141593 in ")
    assert out.rstrip().endswith("2 threads")


def test_main_task_output(capsys):
    assert pimod.main(["task", str(STEPS)]) == 0
    assert capsys.readouterr().out.startswith("pi=3.14159,time=")


def test_main_rejects_unknown_strategy(capsys):
    assert pimod.main(["bogus"]) == 1
    assert "usage" in capsys.readouterr().out
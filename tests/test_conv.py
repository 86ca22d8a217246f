import numpy as np
import pytest

from hpckit.conv import SMOOTHING_KERNEL, convolve_ks5, generate_signal, main


def test_matches_numpy_valid_convolution():
    rng = np.random.default_rng(5)
    x = rng.random(37)
    kernel = rng.random(5)
    y = convolve_ks5(x, kernel)
    np.testing.assert_allclose(y[2:-2], np.convolve(x, kernel, mode="valid"))


def test_edges_are_zero():
    y = convolve_ks5(np.ones(9), SMOOTHING_KERNEL)
    np.testing.assert_array_equal(y[:2], 0.0)
    np.testing.assert_array_equal(y[-2:], 0.0)


def test_smoothing_preserves_constant():
    y = convolve_ks5(np.full(12, 3.5), SMOOTHING_KERNEL)
    np.testing.assert_allclose(y[2:-2], 3.5)


def test_too_short_signal():
    with pytest.raises(ValueError):
        convolve_ks5(np.ones(4), SMOOTHING_KERNEL)


def test_wrong_kernel_size():
    with pytest.raises(ValueError):
        convolve_ks5(np.ones(10), [1.0, 2.0, 3.0])


def test_generate_signal_noise_bounds():
    x = generate_signal(500)
    noise = x - np.sin(np.arange(500))
    assert x.shape == (500,)
    assert np.all(noise >= -1e-12)
    assert np.all(noise <= 0.99 + 1e-12)


def test_generate_signal_deterministic():
    np.testing.assert_array_equal(generate_signal(50, seed=8), generate_signal(50, seed=8))


def test_main_prints_probe(capsys):
    assert main(["1200"]) == 0
    lines = capsys.readouterr().out.splitlines()
    expected = convolve_ks5(generate_signal(1200), SMOOTHING_KERNEL)[1000]
    assert lines[0].startswith("timing=")
    assert lines[1] == f"yy[1000]={expected:.8f}"


def test_main_rejects_small_count():
    assert main(["10"]) == 1
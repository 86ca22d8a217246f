import math

import numpy as np
import pytest

from hpckit.crand import RAND_MAX, GlibcRandom
from hpckit.kernels import (
    add_then_multiply,
    dgemm_trans,
    host_initial_data,
    main,
    midpoint_pi,
    random_dense_matrix,
    sgemm,
    simple_multiply,
    vecadd,
)


def test_vecadd_inverts_with_subtraction():
    a = np.linspace(-3.0, 7.0, 11)
    b = np.linspace(5.0, 1.0, 11)
    result = vecadd(a, b)
    np.testing.assert_allclose(result - b, a)


def test_vecadd_shape_mismatch():
    with pytest.raises(ValueError):
        vecadd([1.0, 2.0], [1.0, 2.0, 3.0])


def test_simple_multiply_square_matches_matmul():
    rng = np.random.default_rng(7)
    a = rng.random(16)
    b = rng.random(16)
    result = simple_multiply(a, b, 4, 4, 4)
    expected = a.reshape(4, 4) @ b.reshape(4, 4)
    np.testing.assert_allclose(result.reshape(4, 4), expected)


def test_simple_multiply_rejects_short_operand():
    with pytest.raises(ValueError):
        simple_multiply(np.zeros(3), np.zeros(16), 4, 4, 4)


def test_dgemm_trans_with_identity():
    rng = np.random.default_rng(3)
    a = rng.random(9)
    result = dgemm_trans(3, a, np.eye(3).ravel())
    np.testing.assert_allclose(result, a)


def test_dgemm_trans_matches_transpose_product():
    rng = np.random.default_rng(11)
    a = rng.random(25)
    b = rng.random(25)
    expected = a.reshape(5, 5) @ b.reshape(5, 5).T
    np.testing.assert_allclose(dgemm_trans(5, a, b).reshape(5, 5), expected)


def test_dgemm_trans_rejects_wrong_size():
    with pytest.raises(ValueError):
        dgemm_trans(3, np.zeros(8), np.zeros(9))


def test_midpoint_pi_is_close_to_pi():
    assert abs(midpoint_pi(1000000) - math.pi) < 1e-10


def test_midpoint_pi_rejects_zero_steps():
    with pytest.raises(ValueError):
        midpoint_pi(0)


def test_random_dense_matrix_is_column_major():
    matrix = random_dense_matrix(GlibcRandom(9384), 3, 2)
    reference = GlibcRandom(9384)
    draws = [reference.rand() for _ in range(6)]
    assert matrix.shape == (3, 2)
    assert matrix.dtype == np.float32
    assert matrix[1, 0] == np.float32(draws[1] / RAND_MAX * 100.0)
    assert matrix[0, 1] == np.float32(draws[3] / RAND_MAX * 100.0)
    assert np.all((matrix >= 0.0) & (matrix <= 100.0))


def test_sgemm_identity_and_beta():
    a = np.arange(4, dtype=np.float32).reshape(2, 2)
    c = np.ones((2, 2), dtype=np.float32)
    result = sgemm(1.0, a, np.eye(2, dtype=np.float32), 0.0, c)
    np.testing.assert_array_equal(result, a)
    scaled = sgemm(0.0, a, a, 4.0, c)
    np.testing.assert_array_equal(scaled, 4.0 * c)


def test_sgemm_rejects_bad_shapes():
    with pytest.raises(ValueError):
        sgemm(1.0, np.ones((2, 3)), np.ones((2, 3)), 1.0, np.ones((2, 3)))


def test_host_initial_data_range_and_determinism():
    first = host_initial_data(64, seed=5)
    second = host_initial_data(64, seed=5)
    np.testing.assert_array_equal(first, second)
    assert np.all((first >= 0.0) & (first <= 25.5))
    tenths = np.round(first * 10.0)
    np.testing.assert_allclose(tenths / 10.0, first, atol=1e-5)


def test_add_then_multiply_values():
    assert list(add_then_multiply(4)) == [0, 3, 12, 27]


def test_main_openacc_prints_ten_values(capsys):
    assert main(["openacc"]) == 0
    line = capsys.readouterr().out.strip()
    assert line.endswith("...")
    assert line.split()[:10] == [str(v) for v in add_then_multiply(10)]


def test_main_unknown_demo():
    assert main(["nothing"]) == 1
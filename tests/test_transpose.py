import numpy as np
import pytest

from hpckit import transpose as tp

SIZE = 64


@pytest.fixture
def matrix():
    return np.arange(SIZE * SIZE, dtype=np.float32)


@pytest.mark.parametrize(
    "kernel",
    [
        tp.transpose_naive,
        tp.transpose_coalesced,
        tp.transpose_no_bank_conflicts,
        tp.transpose_swizzling,
    ],
)
def test_transposes_match_reference(kernel, matrix):
    result = kernel(matrix, SIZE)
    assert tp.check_result(tp.reference_transpose(matrix, SIZE), result) is None


@pytest.mark.parametrize("kernel", [tp.copy_tiles, tp.copy_shared])
def test_copies_reproduce_input(kernel, matrix):
    assert np.array_equal(kernel(matrix, SIZE), matrix)


def test_copy_handles_rectangular_matrix():
    data = np.arange(32 * 96, dtype=np.float32)
    assert np.array_equal(tp.copy_tiles(data, 96), data)


def test_reference_is_matrix_transpose(matrix):
    expected = matrix.reshape(SIZE, SIZE).T.ravel()
    assert np.array_equal(tp.reference_transpose(matrix, SIZE), expected)


def test_transpose_twice_is_identity(matrix):
    once = tp.transpose_swizzling(matrix, SIZE)
    assert np.array_equal(tp.transpose_coalesced(once, SIZE), matrix)


def test_check_result_reports_first_mismatch(matrix):
    result = matrix.copy()
    result[5] = -1.0
    result[9] = -1.0
    assert tp.check_result(matrix, result) == 5


def test_check_result_size_mismatch():
    with pytest.raises(ValueError):
        tp.check_result(np.zeros(4), np.zeros(5))


def test_width_must_be_tile_multiple():
    with pytest.raises(ValueError):
        tp.copy_tiles(np.zeros(40 * 40), 40)


def test_transpose_requires_square():
    with pytest.raises(ValueError):
        tp.transpose_naive(np.zeros(32 * 64), 64)


def test_bandwidth_scales_inversely_with_time():
    fast = tp.bandwidth_gbps(1024, 1.0)
    slow = tp.bandwidth_gbps(1024, 2.0)
    assert fast == pytest.approx(2 * slow)
    assert tp.bandwidth_gbps(1024, 1.0, reps=4) == pytest.approx(2 * fast)


def test_bandwidth_rejects_zero_time():
    with pytest.raises(ValueError):
        tp.bandwidth_gbps(1024, 0.0)


def test_main_runs_all_routines(capsys):
    assert tp.main(["64"]) == 0
    out = capsys.readouterr().out
    assert "swizzling transpose" in out
    assert "conflict-free transpose" in out
    assert "FAILED" not in out


def test_main_rejects_bad_size(capsys):
    assert tp.main(["40"]) == 1
    assert "multiple of TILE_DIM" in capsys.readouterr().out
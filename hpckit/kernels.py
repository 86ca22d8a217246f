"""Small dense numerical kernels: vector add, matrix products and pi."""

import sys
import time

import numpy as np

from hpckit.crand import RAND_MAX, GlibcRandom

VECTOR_LENGTH = 1024 * 1024
MATRIX_DIM = 1024
PI_STEPS = 1_000_000
DROP_IN_SEED = 9384
HOST_ELEMENTS = 1024
OPENACC_LENGTH = 1024


def _usec():
    return time.perf_counter_ns() // 1000


def vecadd(a, b):
    """Element-wise sum of two equally long vectors."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"vector shapes differ: {a.shape} and {b.shape}")
    return a + b


def simple_multiply(a, b, m, n, k):
    """Row-major product of flat arrays with the loop bounds of the naive kernel.

    Row ``r`` and column ``c`` (``c < k``) of the result are the dot product
    of ``a[r*k : r*k+n]`` with the column ``b[j*n + c]`` for ``j < n``; the
    value is stored at ``r*n + c`` of the returned flat array.
    """
    a = np.asarray(a, dtype=np.float64).ravel()
    b = np.asarray(b, dtype=np.float64).ravel()
    if m <= 0 or n <= 0 or k <= 0:
        raise ValueError("matrix dimensions must be positive")
    if a.size < (m - 1) * k + n:
        raise ValueError(f"first operand too short: {a.size} elements")
    if b.size < (n - 1) * n + k:
        raise ValueError(f"second operand too short: {b.size} elements")

    inner = np.arange(n)
    lhs = a[np.arange(m)[:, None] * k + inner[None, :]]
    rhs = b[inner[:, None] * n + np.arange(k)[None, :]]
    product = lhs @ rhs

    result = np.zeros(max(m * n, (m - 1) * n + k))
    for row, values in enumerate(product):
        result[row * n:row * n + k] = values
    return result


def dgemm_trans(n, a, b):
    """Return the flat ``n x n`` product ``A @ B^T`` of two flat row-major matrices."""
    a = np.asarray(a, dtype=np.float64).ravel()
    b = np.asarray(b, dtype=np.float64).ravel()
    if a.size != n * n or b.size != n * n:
        raise ValueError(f"operands must hold {n * n} elements")
    return (a.reshape(n, n) @ b.reshape(n, n).T).ravel()


def midpoint_pi(num_steps=PI_STEPS):
    """Approximate pi by the midpoint rule for the integral of 4/(1+x^2)."""
    if num_steps <= 0:
        raise ValueError("num_steps must be positive")
    step = 1.0 / num_steps
    x = (np.arange(num_steps) + 0.5) * step
    return float(step * np.sum(4.0 / (1.0 + x * x)))


def random_dense_matrix(rng, m, n):
    """An ``m x n`` float32 matrix of values in [0, 100], drawn column by column."""
    draws = np.fromiter(
        (rng.rand() for _ in range(m * n)), dtype=np.float64, count=m * n
    )
    values = (draws / float(RAND_MAX) * 100.0).astype(np.float32)
    return values.reshape(n, m).T.copy()


def sgemm(alpha, a, b, beta, c):
    """Single-precision ``alpha * a @ b + beta * c``."""
    a = np.asarray(a, dtype=np.float32)
    b = np.asarray(b, dtype=np.float32)
    c = np.asarray(c, dtype=np.float32)
    if a.shape[1] != b.shape[0] or c.shape != (a.shape[0], b.shape[1]):
        raise ValueError(
            f"incompatible shapes {a.shape}, {b.shape} and {c.shape}"
        )
    return (np.float32(alpha) * (a @ b) + np.float32(beta) * c).astype(np.float32)


def host_initial_data(size, seed=None):
    """``size`` float32 values ``(rand() & 0xFF) / 10``; seeded by the clock if no seed."""
    if seed is None:
        seed = int(time.time())
    rng = GlibcRandom(seed)
    return np.fromiter(
        ((rng.rand() & 0xFF) / np.float32(10.0) for _ in range(size)),
        dtype=np.float32,
        count=size,
    )


def add_then_multiply(n=OPENACC_LENGTH):
    """With ``A[i] = i`` and ``B[i] = 2i``, return ``D = (A + B) * A``."""
    a = np.arange(n, dtype=np.int64)
    b = 2 * a
    c = a + b
    return c * a


def _homework():
    a = np.zeros(VECTOR_LENGTH)
    b = np.zeros(VECTOR_LENGTH)
    start = _usec()
    vecadd(a, b)
    finish = _usec()
    print(f"Vecadd timing = {finish - start}us", flush=True)

    size = MATRIX_DIM * MATRIX_DIM
    aa = np.zeros(size)
    bb = np.zeros(size)
    start = _usec()
    cc = simple_multiply(aa, bb, MATRIX_DIM, MATRIX_DIM, MATRIX_DIM)
    finish = _usec()
    print(f"Matrix Multiply timing = {finish - start}us", flush=True)

    cc = dgemm_trans(MATRIX_DIM, aa, bb)
    shape = (MATRIX_DIM, MATRIX_DIM)
    col_a = aa.reshape(shape, order="F")
    col_b = bb.reshape(shape, order="F")
    col_c = cc.reshape(shape, order="F")
    col_c = 1.0 * (col_a @ col_b.T) + 1.0 * col_c

    print(f"{midpoint_pi():.8e}", flush=True)


def _drop_in():
    rng = GlibcRandom(DROP_IN_SEED)
    m = n = MATRIX_DIM
    a = random_dense_matrix(rng, m, n)
    b = random_dense_matrix(rng, n, m)
    c = random_dense_matrix(rng, m, n)
    c = sgemm(3.0, a, b, 4.0, c)
    for row in c[:10, :10]:
        print("".join(f"{value:2.2f} " for value in row) + "...")
    print("...")


def _openacc():
    d = add_then_multiply()
    print("".join(f"{value} " for value in d[:10]) + "...")


def _host():
    h_a = host_initial_data(HOST_ELEMENTS)
    h_b = host_initial_data(HOST_ELEMENTS)
    vecadd(h_a, h_b)


_DEMOS = {
    "homework": _homework,
    "sgemm": _drop_in,
    "openacc": _openacc,
    "host": _host,
}


def main(argv=None):
    """Run one demo: ``homework`` (default), ``sgemm``, ``openacc`` or ``host``."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    name = argv[0] if argv else "homework"
    demo = _DEMOS.get(name)
    if demo is None or len(argv) > 1:
        print(f"usage: kernels [{'|'.join(_DEMOS)}]")
        return 1
    demo()
    return 0
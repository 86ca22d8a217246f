"""One-dimensional convolution with a five-point kernel."""

import sys
import time

import numpy as np

from hpckit.crand import GlibcRandom

KERNEL_SIZE = 5
NUM_POINTS = 65536 * 128
SEED = 202403
SMOOTHING_KERNEL = (0.0625, 0.25, 0.375, 0.25, 0.0625)
_PROBE = 1000


def convolve_ks5(x, kernel):
    """Convolve ``x`` with a five-point kernel; the two edge points each side stay zero."""
    x = np.asarray(x, dtype=np.float64)
    kernel = np.asarray(kernel, dtype=np.float64)
    if kernel.shape != (KERNEL_SIZE,):
        raise ValueError(f"kernel must have {KERNEL_SIZE} taps")
    n = x.shape[0]
    if n < KERNEL_SIZE:
        raise ValueError(f"signal must have at least {KERNEL_SIZE} points, got {n}")
    y = np.zeros(n)
    y[2:n - 2] = (
        kernel[0] * x[4:]
        + kernel[1] * x[3:n - 1]
        + kernel[2] * x[2:n - 2]
        + kernel[3] * x[1:n - 3]
        + kernel[4] * x[:n - 4]
    )
    return y


def generate_signal(n, seed=SEED):
    """``sin(i)`` plus noise ``(rand() % 100) / 100`` for ``i < n``."""
    rng = GlibcRandom(seed)
    noise = np.fromiter(
        ((rng.rand() % 100) / 100.0 for _ in range(n)), dtype=np.float64, count=n
    )
    return np.sin(np.arange(n, dtype=np.float64)) + noise


def main(argv=None):
    """Smooth a noisy sine and report the timing and one output value."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    usage = f"usage: conv [points > {_PROBE}]"
    if len(argv) > 1:
        print(usage)
        return 1
    try:
        count = int(argv[0]) if argv else NUM_POINTS
    except ValueError:
        print(usage)
        return 1
    if count <= _PROBE:
        print(usage)
        return 1

    x = generate_signal(count)
    start = time.perf_counter_ns() // 1000
    y = convolve_ks5(x, SMOOTHING_KERNEL)
    finish = time.perf_counter_ns() // 1000
    print(f"timing={finish - start}us", flush=True)
    print(f"yy[{_PROBE}]={y[_PROBE]:.8f}", flush=True)
    return 0
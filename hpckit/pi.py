"""Midpoint-rule estimates of pi with several ways of combining thread sums."""

import os
import sys
import threading
import time
from enum import Enum

import numpy as np

NUM_STEPS = 1024 * 1024 * 1024
MIN_BLK = 1024 * 256
PAD = 8
_CHUNK = 1 << 20


class Strategy(Enum):
    """How per-thread partial sums are combined."""

    ATOMIC = "atomic"
    CRITICAL = "critical"
    FALSE_SHARING = "false-share"
    PADDED = "padded"
    REDUCTION = "reduction"
    TASK = "task"


def _terms_sum(indices, step):
    x = (indices + 0.5) * step
    return float(np.sum(4.0 / (1.0 + x * x)))


def _range_sum(start, stop, step):
    total = 0.0
    for first in range(start, stop, _CHUNK):
        indices = np.arange(first, min(first + _CHUNK, stop), dtype=np.float64)
        total += _terms_sum(indices, step)
    return total


def partial_sum(thread_id, num_threads, num_steps):
    """Sum of ``4/(1+x^2)`` over the steps ``thread_id, thread_id + num_threads, ...``."""
    if num_threads < 1:
        raise ValueError(f"num_threads must be positive, got {num_threads}")
    if not 0 <= thread_id < num_threads:
        raise ValueError(f"thread_id {thread_id} outside 0..{num_threads - 1}")
    if num_steps <= 0:
        raise ValueError(f"num_steps must be positive, got {num_steps}")
    step = 1.0 / num_steps
    stride = num_threads * _CHUNK
    total = 0.0
    for first in range(thread_id, num_steps, stride):
        indices = np.arange(
            first, min(first + stride, num_steps), num_threads, dtype=np.float64
        )
        total += _terms_sum(indices, step)
    return total


def _run_parallel(num_threads, work):
    threads = [threading.Thread(target=work, args=(tid,)) for tid in range(num_threads)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def pi_threads(num_steps=NUM_STEPS, num_threads=None, strategy=Strategy.REDUCTION):
    """Estimate pi with ``num_threads`` threads combining sums by ``strategy``."""
    strategy = Strategy(strategy)
    if num_steps <= 0:
        raise ValueError(f"num_steps must be positive, got {num_steps}")
    step = 1.0 / num_steps
    if strategy is Strategy.TASK:
        return step * pi_recursive(0, num_steps, step)

    if num_threads is None:
        num_threads = os.cpu_count() or 1
    if num_threads < 1:
        raise ValueError(f"num_threads must be positive, got {num_threads}")

    if strategy in (Strategy.ATOMIC, Strategy.CRITICAL):
        lock = threading.Lock()
        full_sum = [0.0]

        def work(tid):
            value = partial_sum(tid, num_threads, num_steps)
            with lock:
                full_sum[0] += value

        _run_parallel(num_threads, work)
        total = full_sum[0]
    elif strategy is Strategy.FALSE_SHARING:
        sums = np.zeros(num_threads)

        def work(tid):
            sums[tid] += partial_sum(tid, num_threads, num_steps)

        _run_parallel(num_threads, work)
        total = float(sum(sums))
    elif strategy is Strategy.PADDED:
        sums = np.zeros((num_threads, PAD))

        def work(tid):
            sums[tid, 0] += partial_sum(tid, num_threads, num_steps)

        _run_parallel(num_threads, work)
        total = float(sum(sums[:, 0]))
    else:
        base, extra = divmod(num_steps, num_threads)
        bounds = [0]
        for tid in range(num_threads):
            bounds.append(bounds[-1] + base + (1 if tid < extra else 0))
        results = [0.0] * num_threads

        def work(tid):
            results[tid] = _range_sum(bounds[tid], bounds[tid + 1], step)

        _run_parallel(num_threads, work)
        total = sum(results)
    return step * total


def pi_recursive(start, finish, step, min_block=MIN_BLK):
    """Sum the terms for steps ``[start, finish)``, halving ranges of ``min_block`` or more."""
    if min_block < 1:
        raise ValueError(f"min_block must be positive, got {min_block}")
    if finish - start < min_block:
        return _range_sum(start, finish, step)
    half = (finish - start) // 2
    middle = finish - half
    return pi_recursive(start, middle, step, min_block) + pi_recursive(
        middle, finish, step, min_block
    )


def main(argv=None):
    """Command line: ``[strategy] [num_steps] [threads]``."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    usage = (
        f"usage: pi [{'|'.join(s.value for s in Strategy)}] [num_steps] [threads]"
    )
    if len(argv) > 3:
        print(usage)
        return 1
    try:
        strategy = Strategy(argv[0]) if argv else Strategy.REDUCTION
        num_steps = int(argv[1]) if len(argv) > 1 else NUM_STEPS
        num_threads = int(argv[2]) if len(argv) > 2 else (os.cpu_count() or 1)
        start = time.perf_counter()
        pi = pi_threads(num_steps, num_threads, strategy)
    except ValueError:
        print(usage)
        return 1
    elapsed = time.perf_counter() - start

    if strategy in (Strategy.ATOMIC, Strategy.CRITICAL):
        print(f"\n pi  {pi:f} in {elapsed:f} secs {num_threads} threds \n ", end="")
    elif strategy in (Strategy.FALSE_SHARING, Strategy.PADDED):
        print(f"\n pi is {pi:f} in {elapsed:f} seconds {num_threads} thrds ")
    elif strategy is Strategy.REDUCTION:
        print(f"pi is {pi:f} in {elapsed:f} seconds {num_threads} threads")
    else:
        print(f"pi={pi:.5f},time={elapsed:.5f}")
    return 0
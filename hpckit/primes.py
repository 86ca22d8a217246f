"""Counting primes by trial division, with static or dynamic work sharing."""

import math
import os
import sys
import threading
import time

ITER = 50_000_000
DYNAMIC_CHUNK = 1
SCHEDULES = ("static", "dynamic")


def is_prime(num):
    """Trial division by every ``i`` with ``2 <= i <= sqrt(num)``.

    Numbers below 4 have no candidate divisor and so are reported prime,
    including 0, 1 and negatives.
    """
    if num < 4:
        return True
    return all(num % i for i in range(2, math.isqrt(num) + 1))


def _count_range(start, stop):
    return sum(1 for value in range(start, stop) if is_prime(value))


def count_primes(limit=ITER, workers=None, schedule="static"):
    """Count ``is_prime`` values in ``[2, limit]`` across ``workers`` threads."""
    if schedule not in SCHEDULES:
        raise ValueError(f"schedule must be one of {SCHEDULES}, got {schedule!r}")
    if workers is None:
        workers = os.cpu_count() or 1
    if workers < 1:
        raise ValueError(f"workers must be positive, got {workers}")
    if limit < 2:
        return 0

    first, stop = 2, limit + 1
    counts = [0] * workers

    if schedule == "static":
        block = -(-(stop - first) // workers)

        def work(wid):
            lo = first + wid * block
            counts[wid] = _count_range(lo, min(lo + block, stop))
    else:
        lock = threading.Lock()
        cursor = [first]

        def work(wid):
            while True:
                with lock:
                    lo = cursor[0]
                    cursor[0] = lo + DYNAMIC_CHUNK
                if lo >= stop:
                    return
                counts[wid] += _count_range(lo, min(lo + DYNAMIC_CHUNK, stop))

    threads = [threading.Thread(target=work, args=(wid,)) for wid in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return sum(counts)


def main(argv=None):
    """Command line: ``[static|dynamic] [limit] [workers]``."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    usage = "usage: primes [static|dynamic] [limit] [workers]"
    if len(argv) > 3:
        print(usage)
        return 1
    try:
        schedule = argv[0] if argv else "static"
        limit = int(argv[1]) if len(argv) > 1 else ITER
        workers = int(argv[2]) if len(argv) > 2 else None
        start = time.perf_counter()
        count = count_primes(limit, workers, schedule)
    except ValueError:
        print(usage)
        return 1
    elapsed = time.perf_counter() - start
    print(f"Number of prime numbers is {count} in {elapsed:f} sec ")
    return 0
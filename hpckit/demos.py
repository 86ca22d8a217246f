"""Thread demonstrations of parallel regions, work sharing and tasks.

Each demo runs real threads and returns the lines they emitted, in the
order they were emitted.
"""

import os
import sys
import threading

import numpy as np

DEFAULT_HELLO_THREADS = 4
_SECTIONS = ("Only me!", "No one else!", "Just me!")


def _check_count(count):
    if count < 1:
        raise ValueError(f"thread count must be positive, got {count}")


def _parallel(count, body):
    """Run ``body(thread_id, emit)`` on ``count`` threads; return the emitted lines."""
    _check_count(count)
    lines = []
    lock = threading.Lock()

    def emit(text):
        with lock:
            lines.append(text)

    threads = [threading.Thread(target=body, args=(tid, emit)) for tid in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return lines


def hello_threads(count=DEFAULT_HELLO_THREADS):
    """Every thread greets once."""
    return _parallel(count, lambda tid, emit: emit("Hello World."))


def conflicts(count):
    """Every thread reports a shared number and increments it."""
    number = [1]
    lock = threading.Lock()

    def body(tid, emit):
        with lock:
            value = number[0]
            number[0] += 1
        emit(f"I think the number is {value}.")

    return _parallel(count, body)


def master_region(count):
    """Only thread 0 runs the master line; there is no barrier after it."""
    def body(tid, emit):
        emit("In parallel.")
        if tid == 0:
            emit("Only once.")
        emit("More in parallel.")

    return _parallel(count, body)


def single_region(count):
    """The first thread to arrive runs the single line; all wait for it."""
    _check_count(count)
    taken = [False]
    lock = threading.Lock()
    barrier = threading.Barrier(count)

    def body(tid, emit):
        emit("In parallel.")
        with lock:
            mine = not taken[0]
            taken[0] = True
        if mine:
            emit("Only once.")
        barrier.wait()
        emit("More in parallel.")

    return _parallel(count, body)


def sections_region(count):
    """Every thread greets; each section is run by exactly one thread."""
    _check_count(count)
    pending = iter(_SECTIONS)
    lock = threading.Lock()
    barrier = threading.Barrier(count)

    def body(tid, emit):
        emit("Everyone!")
        while True:
            with lock:
                section = next(pending, None)
            if section is None:
                break
            emit(section)
        barrier.wait()

    return _parallel(count, body)


class _FloatSource:
    """A single-precision counter that grows by 0.001 per draw."""

    def __init__(self, start=1.0):
        self._value = np.float32(start)
        self._lock = threading.Lock()

    def next(self):
        with self._lock:
            self._value = np.float32(float(self._value) + 0.001)
            return self._value


def _copy_private_region(count, source):
    values = []
    lock = threading.Lock()
    barrier = threading.Barrier(count)

    def body(tid, emit):
        with lock:
            if not values:
                values.extend(source.next() for _ in range(4))
        barrier.wait()
        for value in values:
            emit(f"Value = {float(value):f}, thread = {tid}")

    return _parallel(count, body)


def copy_private(count):
    """One thread draws four values that every thread then reports.

    The region runs once on a single thread and then on ``count`` threads,
    drawing from the same counter.
    """
    _check_count(count)
    source = _FloatSource()
    lines = ["call CopyPrivate from a single thread"]
    lines.extend(_copy_private_region(1, source))
    lines.append("call CopyPrivate from a parallel region")
    lines.extend(_copy_private_region(count, source))
    return lines


def _emitter():
    lines = []
    lock = threading.Lock()

    def emit(text):
        with lock:
            lines.append(text)

    return lines, emit


def taskwait_order():
    """A task waits for its child before continuing; the creator does not wait."""
    lines, emit = _emitter()

    def inner():
        emit("Hello.")

    def outer():
        child = threading.Thread(target=inner)
        child.start()
        child.join()
        emit("Hi.")

    task = threading.Thread(target=outer)
    task.start()
    emit("Hej.")
    task.join()
    emit("Goodbye.")
    return lines


def taskgroup_order():
    """A task group waits for a task and all of its descendants."""
    lines, emit = _emitter()
    spawned = []
    lock = threading.Lock()

    def spawn(target):
        thread = threading.Thread(target=target)
        with lock:
            spawned.append(thread)
        thread.start()

    def inner():
        emit("Hello.")

    def outer():
        spawn(inner)
        emit("Hi.")

    spawn(outer)
    index = 0
    while True:
        with lock:
            if index >= len(spawned):
                break
            thread = spawned[index]
        thread.join()
        index += 1
    emit("Goodbye.")
    return lines


_COUNTED = {
    "hello": (hello_threads, DEFAULT_HELLO_THREADS),
    "pthreads": (hello_threads, DEFAULT_HELLO_THREADS),
    "conflicts": (conflicts, None),
    "master": (master_region, None),
    "single": (single_region, None),
    "sections": (sections_region, None),
    "copyprivate": (copy_private, None),
}
_UNCOUNTED = {
    "taskwait": taskwait_order,
    "taskgroup": taskgroup_order,
}


def main(argv=None):
    """Command line: ``<demo> [threads]``; prints the demo's output lines."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    names = "|".join([*_COUNTED, *_UNCOUNTED])
    usage = f"usage: demos <{names}> [threads]"
    if not argv or len(argv) > 2:
        print(usage)
        return 1
    name = argv[0]
    try:
        if name in _COUNTED:
            func, default = _COUNTED[name]
            if len(argv) > 1:
                count = int(argv[1])
            else:
                count = default if default is not None else (os.cpu_count() or 1)
            lines = func(count)
        elif name in _UNCOUNTED and len(argv) == 1:
            lines = _UNCOUNTED[name]()
        else:
            print(usage)
            return 1
    except ValueError:
        print(usage)
        return 1
    for line in lines:
        print(line)
    return 0
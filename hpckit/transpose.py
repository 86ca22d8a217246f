"""Tiled matrix copy and transpose kernels, modelled block by block on the host.

Each kernel walks the matrix in ``TILE_DIM x TILE_DIM`` blocks as a GPU grid
would.  Inside a block, thread ``(tx, ty)`` handles rows ``ty + j`` for
``j`` in ``0, BLOCK_ROWS, ...``, which together cover every row of the tile.
Matrices are flat row-major float32 arrays with a given row width.
"""

import sys
import time

import numpy as np

TILE_DIM = 32
BLOCK_ROWS = 8
NUM_REPS = 2
DEFAULT_SIZE = 1024

# Local row (ty + j) and column (tx) of every element a block touches.
_ROWS = np.arange(TILE_DIM)[:, None]
_COLS = np.arange(TILE_DIM)[None, :]


def _as_matrix(idata, width, square=False):
    data = np.asarray(idata, dtype=np.float32).ravel()
    if width <= 0 or width % TILE_DIM:
        raise ValueError(f"width must be a positive multiple of {TILE_DIM}, got {width}")
    if data.size % width:
        raise ValueError(f"{data.size} elements do not fill rows of width {width}")
    height = data.size // width
    if height == 0 or height % TILE_DIM:
        raise ValueError(f"height must be a positive multiple of {TILE_DIM}, got {height}")
    if square and height != width:
        raise ValueError(f"transpose needs a square matrix, got {height} x {width}")
    return data.reshape(height, width)


def _blocks(shape):
    height, width = shape
    for by in range(height // TILE_DIM):
        for bx in range(width // TILE_DIM):
            yield by, bx


def copy_tiles(idata, width):
    """Copy the matrix tile by tile straight from global memory."""
    src = _as_matrix(idata, width)
    out = np.zeros_like(src)
    for by, bx in _blocks(src.shape):
        y = by * TILE_DIM + _ROWS
        x = bx * TILE_DIM + _COLS
        out[y, x] = src[y, x]
    return out.ravel()


def copy_shared(idata, width):
    """Copy the matrix through a per-block shared tile."""
    src = _as_matrix(idata, width)
    out = np.zeros_like(src)
    tile = np.empty((TILE_DIM, TILE_DIM), dtype=np.float32)
    for by, bx in _blocks(src.shape):
        y = by * TILE_DIM + _ROWS
        x = bx * TILE_DIM + _COLS
        tile[_ROWS, _COLS] = src[y, x]
        out[y, x] = tile[_ROWS, _COLS]
    return out.ravel()


def transpose_naive(idata, width):
    """Transpose with coalesced reads and strided writes, no shared tile."""
    src = _as_matrix(idata, width, square=True)
    out = np.zeros_like(src)
    for by, bx in _blocks(src.shape):
        y = by * TILE_DIM + _ROWS
        x = bx * TILE_DIM + _COLS
        out[x, y] = src[y, x]
    return out.ravel()


def _transpose_through(src, tile):
    out = np.zeros_like(src)
    for by, bx in _blocks(src.shape):
        y = by * TILE_DIM + _ROWS
        x = bx * TILE_DIM + _COLS
        tile[_ROWS, _COLS] = src[y, x]
        y_out = bx * TILE_DIM + _ROWS
        x_out = by * TILE_DIM + _COLS
        out[y_out, x_out] = tile[_COLS, _ROWS]
    return out.ravel()


def transpose_coalesced(idata, width):
    """Transpose through a square shared tile."""
    src = _as_matrix(idata, width, square=True)
    return _transpose_through(src, np.empty((TILE_DIM, TILE_DIM), dtype=np.float32))


def transpose_no_bank_conflicts(idata, width):
    """Transpose through a shared tile padded by one column."""
    src = _as_matrix(idata, width, square=True)
    return _transpose_through(
        src, np.empty((TILE_DIM, TILE_DIM + 1), dtype=np.float32)
    )


def transpose_swizzling(idata, width):
    """Transpose through a shared tile whose columns are XOR-swizzled by row."""
    src = _as_matrix(idata, width, square=True)
    out = np.zeros_like(src)
    tile = np.empty((TILE_DIM, TILE_DIM), dtype=np.float32)
    for by, bx in _blocks(src.shape):
        y = by * TILE_DIM + _ROWS
        x = bx * TILE_DIM + _COLS
        tile[_ROWS, _COLS ^ _ROWS] = src[y, x]
        y_out = bx * TILE_DIM + _ROWS
        x_out = by * TILE_DIM + _COLS
        out[y_out, x_out] = tile[_COLS, _COLS ^ _ROWS]
    return out.ravel()


def reference_transpose(idata, width):
    """The expected transpose of a square matrix, as a flat array."""
    src = _as_matrix(idata, width, square=True)
    return src.T.ravel().copy()


def check_result(reference, result):
    """Return the first index where ``result`` differs from ``reference``, or None."""
    reference = np.asarray(reference).ravel()
    result = np.asarray(result).ravel()
    if reference.shape != result.shape:
        raise ValueError(f"sizes differ: {reference.size} and {result.size}")
    mismatches = np.flatnonzero(reference != result)
    return int(mismatches[0]) if mismatches.size else None


def bandwidth_gbps(n, ms, reps=NUM_REPS):
    """Effective bandwidth of reading and writing ``n`` floats ``reps`` times in ``ms``."""
    if ms <= 0:
        raise ValueError(f"elapsed time must be positive, got {ms}")
    return 2 * n * np.dtype(np.float32).itemsize * 1e-6 * reps / ms


_ROUTINES = (
    ("copy", copy_tiles, False),
    ("shared memory copy", copy_shared, False),
    ("naive transpose", transpose_naive, True),
    ("coalesced transpose", transpose_coalesced, True),
    ("conflict-free transpose", transpose_no_bank_conflicts, True),
    ("swizzling transpose", transpose_swizzling, True),
)


def main(argv=None):
    """Run every kernel on an ``n x n`` matrix and print its bandwidth; optional size."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    usage = "usage: transpose [size]"
    if len(argv) > 1:
        print(usage)
        return 1
    try:
        size = int(argv[0]) if argv else DEFAULT_SIZE
    except ValueError:
        print(usage)
        return 1

    print("\nDevice : host")
    print(
        f"Matrix size: {size} {size}, Block size: {TILE_DIM} {BLOCK_ROWS}, "
        f"Tile size: {TILE_DIM} {TILE_DIM}"
    )
    if size <= 0 or size % TILE_DIM:
        print("nx and ny must be a multiple of TILE_DIM")
        return 1
    grid = size // TILE_DIM
    print(f"dimGrid: {grid} {grid} 1. dimBlock: {TILE_DIM} {BLOCK_ROWS} 1")

    idata = np.arange(size * size, dtype=np.float32)
    gold = reference_transpose(idata, size)
    n = size * size

    print(f"{'Routine':>25}{'Bandwidth (GB/s)':>25}")
    for label, kernel, transposes in _ROUTINES:
        print(f"{label:>25}", end="")
        kernel(idata, size)
        start = time.perf_counter()
        for _ in range(NUM_REPS):
            result = kernel(idata, size)
        ms = max((time.perf_counter() - start) * 1e3, 1e-9)
        reference = gold if transposes else idata
        index = check_result(reference, result)
        if index is None:
            print(f"{bandwidth_gbps(n, ms):20.2f}")
        else:
            print(f"{index} {result[index]:f} {reference[index]:f}")
            print(f"{'*** FAILED ***':>25}")
    return 0
"""Compressed sparse row matrices, a 5-point Laplacian and incomplete Cholesky."""

import math
from dataclasses import dataclass

import numpy as np
import scipy.sparse

DEFAULT_GRID = 700
DEFAULT_MASS = 0.04

# Stencil neighbours in insertion order: up, left, centre, right, down.
_STENCIL_ROWS = np.array([-1, 0, 0, 0, 1])
_STENCIL_COLS = np.array([0, -1, 0, 1, 0])


@dataclass
class CsrMatrix:
    """A sparse matrix in compressed sparse row form with zero-based indices."""

    row_offsets: np.ndarray
    columns: np.ndarray
    values: np.ndarray
    ncols: int = None

    def __post_init__(self):
        self.row_offsets = np.asarray(self.row_offsets, dtype=np.int64).ravel()
        self.columns = np.asarray(self.columns, dtype=np.int64).ravel()
        self.values = np.asarray(self.values, dtype=np.float64).ravel()
        if self.row_offsets.size < 1:
            raise ValueError("row_offsets must hold at least one entry")
        if self.ncols is None:
            self.ncols = self.nrows
        self.ncols = int(self.ncols)
        if self.ncols < 0:
            raise ValueError(f"ncols must not be negative, got {self.ncols}")
        if self.row_offsets[0] != 0:
            raise ValueError("row_offsets must start at 0")
        if np.any(np.diff(self.row_offsets) < 0):
            raise ValueError("row_offsets must not decrease")
        if self.columns.size != self.values.size:
            raise ValueError(
                f"{self.columns.size} columns but {self.values.size} values"
            )
        if self.row_offsets[-1] != self.columns.size:
            raise ValueError(
                f"row_offsets end at {self.row_offsets[-1]} "
                f"but there are {self.columns.size} entries"
            )
        if self.columns.size and (
            self.columns.min() < 0 or self.columns.max() >= self.ncols
        ):
            raise ValueError(f"column index outside 0..{self.ncols - 1}")

    @property
    def nrows(self):
        """Number of rows."""
        return self.row_offsets.size - 1

    @property
    def nnz(self):
        """Number of stored entries."""
        return self.values.size

    @property
    def shape(self):
        """``(nrows, ncols)``."""
        return (self.nrows, self.ncols)

    def row(self, index):
        """Columns and values stored in row ``index``."""
        start, end = self.row_offsets[index], self.row_offsets[index + 1]
        return self.columns[start:end], self.values[start:end]

    def matvec(self, x):
        """Return the product of this matrix with the vector ``x``."""
        x = np.asarray(x, dtype=np.float64).ravel()
        if x.size != self.ncols:
            raise ValueError(f"vector has {x.size} entries, expected {self.ncols}")
        rows = np.repeat(np.arange(self.nrows), np.diff(self.row_offsets))
        return np.bincount(
            rows, weights=self.values * x[self.columns], minlength=self.nrows
        ).astype(np.float64)

    def to_scipy(self):
        """The same matrix as a ``scipy.sparse.csr_matrix``."""
        return scipy.sparse.csr_matrix(
            (self.values.copy(), self.columns.copy(), self.row_offsets.copy()),
            shape=self.shape,
        )


def laplace_matrix(grid=DEFAULT_GRID, mass=DEFAULT_MASS):
    """5-point Laplacian on a ``grid x grid`` mesh with Dirichlet boundaries.

    Each row holds ``4 + mass`` on the diagonal and ``-1`` for every
    neighbour inside the mesh, stored in the order up, left, centre, right,
    down.
    """
    if grid < 1:
        raise ValueError(f"grid must be positive, got {grid}")
    n = grid * grid
    cells = np.arange(n)
    i = cells // grid
    j = cells % grid
    u = i[:, None] + _STENCIL_ROWS[None, :]
    v = j[:, None] + _STENCIL_COLS[None, :]
    inside = (u >= 0) & (u < grid) & (v >= 0) & (v < grid)

    template = np.array([-1.0, -1.0, 4.0 + mass, -1.0, -1.0])
    columns = (u * grid + v)[inside]
    values = np.broadcast_to(template, inside.shape)[inside]
    row_offsets = np.concatenate(([0], np.cumsum(inside.sum(axis=1))))

    nnz = 5 * n - 4 * grid
    if columns.size != nnz:
        raise AssertionError(f"built {columns.size} entries, expected {nnz}")
    return CsrMatrix(row_offsets, columns, values, ncols=n)


def incomplete_cholesky(matrix):
    """Zero fill-in incomplete Cholesky factor of the lower triangle of ``matrix``.

    Entries above the diagonal are ignored.  The result is the lower
    triangular factor ``L`` (diagonal included) on the sparsity pattern of
    the lower triangle, so that ``L @ L.T`` matches ``matrix`` on that
    pattern.  A row without a diagonal entry is a structural zero pivot and a
    non-positive pivot is a numerical zero; both raise ``ValueError``.
    """
    if matrix.nrows != matrix.ncols:
        raise ValueError(f"matrix must be square, got {matrix.shape}")

    factor_rows = []
    out_offsets = [0]
    out_columns = []
    out_values = []
    for i in range(matrix.nrows):
        cols, vals = matrix.row(i)
        lower = cols <= i
        cols, vals = cols[lower], vals[lower]
        order = np.argsort(cols, kind="stable")
        cols = cols[order].tolist()
        vals = vals[order].tolist()
        if not cols or cols[-1] != i:
            raise ValueError(f"structural zero pivot at row {i}")

        row = {}
        for col, value in zip(cols, vals):
            if col < i:
                pivot_row = factor_rows[col]
                overlap = sum(
                    row[p] * lv for p, lv in pivot_row.items() if p < col and p in row
                )
                row[col] = (value - overlap) / pivot_row[col]
            else:
                pivot = value - sum(entry * entry for entry in row.values())
                if not pivot > 0.0:
                    raise ValueError(f"numerical zero pivot at row {i}")
                row[i] = math.sqrt(pivot)
        factor_rows.append(row)
        out_columns.extend(row.keys())
        out_values.extend(row.values())
        out_offsets.append(len(out_columns))

    return CsrMatrix(out_offsets, out_columns, out_values, ncols=matrix.ncols)
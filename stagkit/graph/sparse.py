"""Helpers for inspecting compressed sparse storage.

Every helper accepts any scipy sparse matrix (or dense array) and reads the
canonical CSR form: indices sorted within each row, duplicates summed,
no explicit zeros.
"""

from collections.abc import Mapping

import numpy as np
import scipy.sparse


def to_csr(matrix) -> scipy.sparse.csr_matrix:
    """Return a canonical float64 CSR copy of ``matrix``.

    Duplicate entries are summed and explicit zeros are dropped, so every
    stored entry is an edge.
    """
    csr = scipy.sparse.csr_matrix(matrix, dtype=np.float64, copy=True)
    csr.sum_duplicates()
    csr.eliminate_zeros()
    csr.sort_indices()
    return csr


def _canonical(matrix) -> scipy.sparse.csr_matrix:
    if (
        isinstance(matrix, scipy.sparse.csr_matrix)
        and matrix.has_canonical_format
        and np.all(matrix.data != 0)
    ):
        return matrix
    return to_csr(matrix)


def outer_starts(matrix) -> list[int]:
    """Row start offsets (length rows + 1) of the CSR storage."""
    return _canonical(matrix).indptr.tolist()


def inner_indices(matrix) -> list[int]:
    """Column index of each stored entry, row by row."""
    return _canonical(matrix).indices.tolist()


def values(matrix) -> list[float]:
    """Stored values, in the same order as :func:`inner_indices`."""
    return _canonical(matrix).data.tolist()


def is_symmetric(matrix) -> bool:
    """True if ``matrix`` is square and exactly equal to its transpose."""
    csr = _canonical(matrix)
    if csr.shape[0] != csr.shape[1]:
        return False
    return (csr != csr.T).nnz == 0


def sparse_column(
    entries: Mapping[int, float], size: int | None = None
) -> scipy.sparse.csc_matrix:
    """Build a single-column sparse vector from an ``{index: value}`` map.

    Args:
        entries: Non-zero entries of the vector.
        size: Number of rows. Defaults to the largest index plus one, so the
            vector only spans the index range that has been touched.

    Returns:
        A ``size x 1`` CSC matrix.
    """
    rows = np.fromiter(entries.keys(), dtype=np.int64, count=len(entries))
    data = np.fromiter(entries.values(), dtype=np.float64, count=len(entries))
    needed = int(rows.max()) + 1 if len(rows) else 0
    if size is None:
        size = needed
    elif size < needed:
        raise ValueError(f"size {size} is too small for index {needed - 1}")
    cols = np.zeros(len(rows), dtype=np.int64)
    return scipy.sparse.csc_matrix((data, (rows, cols)), shape=(size, 1))


def column_entries(vector) -> dict[int, float]:
    """Read the non-zero entries of a single-column sparse vector."""
    coo = scipy.sparse.coo_matrix(vector)
    coo.sum_duplicates()
    return {
        int(i): float(v) for i, v in zip(coo.row, coo.data) if v != 0.0
    }

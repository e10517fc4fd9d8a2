"""The Graph object: a symmetric sparse adjacency matrix and its derived views.

The degree matrix, Laplacian and normalised Laplacian are computed the first
time they are requested and cached for the lifetime of the graph. The
adjacency matrix itself is never modified after construction.
"""

import logging
import threading

import numpy as np
import scipy.sparse

from stagkit.graph.edge import Edge
from stagkit.graph.local import LocalGraph
from stagkit.graph.sparse import is_symmetric, to_csr

log = logging.getLogger(__name__)


class AsymmetricAdjacencyError(ValueError):
    """Raised when a Graph is constructed from a non-symmetric matrix."""


class Graph(LocalGraph):
    """An undirected weighted graph backed by a CSR adjacency matrix.

    Self-loops are permitted. Vertex queries beyond the last vertex return a
    degree of 0 and no neighbours.

    Args:
        adjacency: Square symmetric matrix, sparse or dense. A canonical
            float64 CSR copy is stored.

    Raises:
        AsymmetricAdjacencyError: If ``adjacency`` is not symmetric.
    """

    def __init__(self, adjacency) -> None:
        adjacency = to_csr(adjacency)
        if not is_symmetric(adjacency):
            raise AsymmetricAdjacencyError(
                "Graph adjacency matrix must be symmetric."
            )

        self._adjacency = adjacency
        self._n = adjacency.shape[0]

        # Derived matrices, None until first requested.
        self._degrees: np.ndarray | None = None
        self._degree_matrix: scipy.sparse.csr_matrix | None = None
        self._laplacian: scipy.sparse.csr_matrix | None = None
        self._normalised_laplacian: scipy.sparse.csr_matrix | None = None
        self._cache_lock = threading.RLock()

        log.debug("Graph created: n=%d, nnz=%d", self._n, adjacency.nnz)

    @classmethod
    def from_arrays(
        cls,
        outer_starts,
        inner_indices,
        values,
    ) -> "Graph":
        """Construct a graph from raw CSR arrays.

        Args:
            outer_starts: Row start offsets, length n + 1.
            inner_indices: Column index of each entry.
            values: Value of each entry.

        Returns:
            Graph with n = len(outer_starts) - 1 vertices.
        """
        n = len(outer_starts) - 1
        adjacency = scipy.sparse.csr_matrix(
            (
                np.asarray(values, dtype=np.float64),
                np.asarray(inner_indices, dtype=np.int64),
                np.asarray(outer_starts, dtype=np.int64),
            ),
            shape=(n, n),
        )
        return cls(adjacency)

    # ── Matrix views ───────────────────────────────────────────────

    def adjacency(self) -> scipy.sparse.csr_matrix:
        """The adjacency matrix of the graph."""
        return self._adjacency

    def degree_matrix(self) -> scipy.sparse.csr_matrix:
        """Diagonal matrix of weighted vertex degrees."""
        with self._cache_lock:
            if self._degree_matrix is None:
                degrees = self._degree_vector()
                idx = np.arange(self._n)
                self._degree_matrix = scipy.sparse.csr_matrix(
                    (degrees, (idx, idx)), shape=(self._n, self._n)
                )
            return self._degree_matrix

    def laplacian(self) -> scipy.sparse.csr_matrix:
        """The combinatorial Laplacian L = D - A."""
        with self._cache_lock:
            if self._laplacian is None:
                lap = (self.degree_matrix() - self._adjacency).tocsr()
                lap.sort_indices()
                self._laplacian = lap
            return self._laplacian

    def normalised_laplacian(self) -> scipy.sparse.csr_matrix:
        """The normalised Laplacian I - D^{-1/2} A D^{-1/2}.

        An isolated vertex has no defined D^{-1/2} entry. Its inverse square
        root degree is taken to be 0 and its identity entry is dropped, so
        the row and column of an isolated vertex are entirely zero.
        """
        with self._cache_lock:
            if self._normalised_laplacian is None:
                degrees = self.degree_matrix().diagonal()
                connected = degrees > 0
                inv_sqrt = np.zeros(self._n, dtype=np.float64)
                inv_sqrt[connected] = 1.0 / np.sqrt(degrees[connected])

                d_inv_sqrt = scipy.sparse.diags(inv_sqrt, format="csr")
                identity = scipy.sparse.diags(
                    connected.astype(np.float64), format="csr"
                )
                norm_lap = (
                    identity - d_inv_sqrt @ self._adjacency @ d_inv_sqrt
                ).tocsr()
                norm_lap.sort_indices()

                n_isolated = int(self._n - connected.sum())
                if n_isolated:
                    log.info(
                        "Normalised Laplacian: %d isolated vertices have "
                        "zero rows",
                        n_isolated,
                    )
                self._normalised_laplacian = norm_lap
            return self._normalised_laplacian

    # ── Global statistics ──────────────────────────────────────────

    def total_volume(self) -> float:
        """Sum of the weighted degrees of all vertices."""
        return float(self._adjacency.sum())

    def number_of_vertices(self) -> int:
        return self._n

    def number_of_edges(self) -> int:
        """Number of stored non-zeros divided by two.

        Self-loops occupy a single stored entry, so each one counts as half
        an edge and the result under-counts graphs that contain them.
        """
        return self._adjacency.nnz // 2

    # ── LocalGraph interface ───────────────────────────────────────

    def degree(self, v: int) -> float:
        if not 0 <= v < self._n:
            return 0.0
        return float(self._degree_vector()[v])

    def degree_unweighted(self, v: int) -> int:
        if not 0 <= v < self._n:
            return 0
        indptr = self._adjacency.indptr
        return int(indptr[v + 1] - indptr[v])

    def neighbors(self, v: int) -> list[Edge]:
        if not 0 <= v < self._n:
            return []
        start, end = self._row_bounds(v)
        return [
            Edge(v, int(u), float(w))
            for u, w in zip(
                self._adjacency.indices[start:end],
                self._adjacency.data[start:end],
            )
        ]

    def neighbors_unweighted(self, v: int) -> list[int]:
        if not 0 <= v < self._n:
            return []
        start, end = self._row_bounds(v)
        return self._adjacency.indices[start:end].tolist()

    # ── Helpers ────────────────────────────────────────────────────

    def _degree_vector(self) -> np.ndarray:
        with self._cache_lock:
            if self._degrees is None:
                self._degrees = np.asarray(
                    self._adjacency.sum(axis=1), dtype=np.float64
                ).ravel()
            return self._degrees

    def _row_bounds(self, v: int) -> tuple[int, int]:
        indptr = self._adjacency.indptr
        return int(indptr[v]), int(indptr[v + 1])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Graph):
            return NotImplemented
        a, b = self._adjacency, other._adjacency
        return (
            a.shape == b.shape
            and np.array_equal(a.indptr, b.indptr)
            and np.array_equal(a.indices, b.indices)
            and np.array_equal(a.data, b.data)
        )

    def __repr__(self) -> str:
        return (
            f"Graph(n={self._n}, edges={self.number_of_edges()}, "
            f"volume={self.total_volume():g})"
        )

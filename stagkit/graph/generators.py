"""Standard graph constructors and an undirected stochastic block model.

The stochastic block model follows the usual construction: a block
probability matrix is expanded to an n x n edge probability matrix, the
upper triangle is sampled as independent Bernoulli draws and mirrored to make
the adjacency symmetric.
"""

import logging

import numpy as np
import scipy.sparse

from stagkit.graph.graph import Graph

log = logging.getLogger(__name__)


def _from_triplets(n: int, rows, cols, weights=None) -> Graph:
    rows = np.asarray(rows, dtype=np.int64)
    cols = np.asarray(cols, dtype=np.int64)
    if weights is None:
        weights = np.ones(len(rows), dtype=np.float64)
    adj = scipy.sparse.csr_matrix((weights, (rows, cols)), shape=(n, n))
    return Graph(adj)


def cycle_graph(n: int) -> Graph:
    """The cycle graph on n vertices, each joined to i - 1 and i + 1 (mod n)."""
    if n < 3:
        raise ValueError(f"cycle graph needs at least 3 vertices, got {n}")
    i = np.arange(n)
    rows = np.concatenate([i, i])
    cols = np.concatenate([(i + 1) % n, (i - 1) % n])
    return _from_triplets(n, rows, cols)


def complete_graph(n: int) -> Graph:
    """The complete graph on n vertices, without self-loops."""
    if n < 1:
        raise ValueError(f"complete graph needs at least 1 vertex, got {n}")
    dense = np.ones((n, n), dtype=np.float64)
    np.fill_diagonal(dense, 0.0)
    return Graph(scipy.sparse.csr_matrix(dense))


def path_graph(n: int) -> Graph:
    """The path 0 - 1 - ... - (n - 1)."""
    if n < 1:
        raise ValueError(f"path graph needs at least 1 vertex, got {n}")
    i = np.arange(n - 1)
    return _from_triplets(
        n, np.concatenate([i, i + 1]), np.concatenate([i + 1, i])
    )


def star_graph(n: int) -> Graph:
    """A star with centre 0 and n - 1 leaves."""
    if n < 2:
        raise ValueError(f"star graph needs at least 2 vertices, got {n}")
    leaves = np.arange(1, n)
    centre = np.zeros(n - 1, dtype=np.int64)
    return _from_triplets(
        n, np.concatenate([centre, leaves]), np.concatenate([leaves, centre])
    )


def barbell_graph(n: int) -> Graph:
    """Two complete graphs on n vertices joined by a single edge.

    Vertices 0..n-1 form the first clique and n..2n-1 the second. The bridge
    joins vertex n - 1 to vertex n.
    """
    if n < 2:
        raise ValueError(f"barbell graph needs cliques of size >= 2, got {n}")
    clique = np.ones((n, n), dtype=np.float64)
    np.fill_diagonal(clique, 0.0)
    adj = scipy.sparse.block_diag([clique, clique], format="lil")
    adj[n - 1, n] = 1.0
    adj[n, n - 1] = 1.0
    return Graph(adj.tocsr())


def build_probability_matrix(n: int, k: int, p: float, q: float) -> np.ndarray:
    """Build the n x n SBM edge probability matrix.

    P[i, j] = p when i and j share a block and q otherwise, with a zero
    diagonal (no self-loops).

    Args:
        n: Number of vertices.
        k: Number of equal-sized blocks.
        p: In-block edge probability.
        q: Between-block edge probability.

    Returns:
        Symmetric probability matrix of shape (n, n).
    """
    block_size = n // k
    blocks = np.arange(n) // block_size

    omega = np.full((k, k), q, dtype=np.float64)
    np.fill_diagonal(omega, p)

    P = omega[blocks][:, blocks]
    np.fill_diagonal(P, 0.0)
    return P


def sample_adjacency(
    P: np.ndarray, rng: np.random.Generator
) -> scipy.sparse.csr_matrix:
    """Sample a symmetric adjacency matrix from probability matrix P.

    Each unordered pair {i, j} with i < j is sampled once as Bernoulli(P[i,j])
    and mirrored.
    """
    n = P.shape[0]
    uniform = rng.random((n, n))
    upper = np.triu(uniform < P, k=1).astype(np.float64)
    return scipy.sparse.csr_matrix(upper + upper.T)


def sbm(
    n: int,
    k: int,
    p: float,
    q: float,
    rng: np.random.Generator | None = None,
) -> Graph:
    """Sample an undirected stochastic block model graph.

    Args:
        n: Number of vertices, divisible by k.
        k: Number of blocks. Vertex i belongs to block i // (n // k).
        p: In-block edge probability.
        q: Between-block edge probability.
        rng: Random generator. Defaults to ``np.random.default_rng()``.

    Returns:
        Graph with unit edge weights.

    Raises:
        ValueError: If n is not divisible by k or a probability is outside
            [0, 1].
    """
    if k < 1 or n % k != 0:
        raise ValueError(
            f"n ({n}) must be evenly divisible by k ({k}) "
            f"for equal-sized blocks"
        )
    for name, prob in (("p", p), ("q", q)):
        if not 0.0 <= prob <= 1.0:
            raise ValueError(f"{name} must be in [0, 1], got {prob}")
    if rng is None:
        rng = np.random.default_rng()

    P = build_probability_matrix(n, k, p, q)
    adj = sample_adjacency(P, rng)
    log.info("SBM sampled: n=%d, k=%d, edges=%d", n, k, adj.nnz // 2)
    return Graph(adj)

"""Approximate personalised PageRank by the ACL push method.

Andersen, Chung and Lang, "Local graph partitioning using PageRank vectors",
FOCS 2006.

The personalised PageRank of a seed distribution s is the vector pr(s)
satisfying pr(s) = alpha * s + (1 - alpha) * pr(s) W, where W = D^{-1} A is
the random walk matrix. The push method maintains an estimate p and a
residual r with

    p + pr(r) = pr(s)

at every step. A push at vertex u moves alpha * r[u] into p[u] and spreads
the remaining (1 - alpha) * r[u] over the neighbours of u in proportion to
edge weight, so on a weighted graph neighbour v of u receives
(1 - alpha) * r[u] * w(u, v) / degree(u); this is the step of the walk W.
On an unweighted graph the spread is even. Pushing stops once
r[u] <= epsilon * degree(u) for every u.

Only the vertices reached by a push are ever stored, so the running time
depends on alpha and epsilon rather than on the size of the graph.
"""

import logging
from collections import deque

import numpy as np
import scipy.sparse
import scipy.sparse.linalg

from stagkit.graph.graph import Graph
from stagkit.graph.local import LocalGraph
from stagkit.graph.sparse import column_entries, sparse_column

log = logging.getLogger(__name__)


def _check_seed(seed_vector) -> dict[int, float]:
    if not scipy.sparse.issparse(seed_vector):
        raise ValueError(
            f"seed vector must be a scipy sparse matrix, "
            f"got {type(seed_vector).__name__}"
        )
    if seed_vector.ndim != 2 or seed_vector.shape[1] != 1:
        raise ValueError(
            f"seed vector must have exactly one column, "
            f"got shape {seed_vector.shape}"
        )
    return column_entries(seed_vector)


def _push(
    graph: LocalGraph,
    p: dict[int, float],
    r: dict[int, float],
    alpha: float,
    u: int,
) -> list[int]:
    """Push the residual at u. Returns the vertices whose residual changed."""
    ru = r.pop(u, 0.0)
    p[u] = p.get(u, 0.0) + alpha * ru

    deg = graph.degree(u)
    if deg <= 0:
        return []

    spread = (1.0 - alpha) * ru / deg
    touched = []
    for e in graph.neighbors(u):
        r[e.v2] = r.get(e.v2, 0.0) + spread * e.weight
        touched.append(e.v2)
    return touched


def approximate_pagerank(
    graph: LocalGraph,
    seed_vector,
    alpha: float,
    epsilon: float,
) -> tuple[scipy.sparse.csc_matrix, scipy.sparse.csc_matrix]:
    """Compute an approximate personalised PageRank vector.

    Args:
        graph: Any LocalGraph. Only neighbourhoods of pushed vertices are
            queried.
        seed_vector: Single-column scipy sparse matrix holding the seed
            distribution, usually a unit mass on one vertex.
        alpha: Teleport probability (locality), in (0, 1].
        epsilon: Residual tolerance per unit of degree, positive.

    Returns:
        (p, r): the approximate PageRank vector and the residual, as
        single-column CSC matrices. Their length is the largest vertex index
        touched plus one, and never shorter than the seed vector.

    Raises:
        ValueError: If the seed vector is not a single-column sparse matrix,
            or alpha or epsilon are out of range.
    """
    r = _check_seed(seed_vector)
    if not 0.0 < alpha <= 1.0:
        raise ValueError(f"alpha must be in (0, 1], got {alpha}")
    if epsilon <= 0.0:
        raise ValueError(f"epsilon must be positive, got {epsilon}")

    p: dict[int, float] = {}
    size = seed_vector.shape[0]

    def violates(v: int) -> bool:
        return r.get(v, 0.0) > epsilon * graph.degree(v)

    queue = deque(v for v in sorted(r) if violates(v))
    queued = set(queue)
    n_pushes = 0

    while queue:
        u = queue.popleft()
        queued.discard(u)
        for v in _push(graph, p, r, alpha, u):
            if v not in queued and violates(v):
                queue.append(v)
                queued.add(v)
        n_pushes += 1

    log.debug(
        "Approximate PageRank: alpha=%g, epsilon=%g, pushes=%d, support=%d",
        alpha,
        epsilon,
        n_pushes,
        len(p),
    )

    # Entries pushed to zero are not part of the support.
    r = {v: x for v, x in r.items() if x != 0.0}
    size = max([size, *(v + 1 for v in p), *(v + 1 for v in r)])
    return sparse_column(p, size), sparse_column(r, size)


def personalised_pagerank(
    graph: Graph, seed_vector, alpha: float
) -> np.ndarray:
    """Exact personalised PageRank of a seed distribution.

    Solves pr (I - (1 - alpha) W) = alpha * s with W = D^{-1} A. Isolated
    vertices have no outgoing walk, so their rows of W are zero.

    Args:
        graph: A Graph (the whole vertex set is needed).
        seed_vector: Single-column sparse matrix of length at most n.
        alpha: Teleport probability in (0, 1].

    Returns:
        Dense vector of length n.
    """
    entries = _check_seed(seed_vector)
    if not 0.0 < alpha <= 1.0:
        raise ValueError(f"alpha must be in (0, 1], got {alpha}")

    n = graph.number_of_vertices()
    s = np.zeros(n, dtype=np.float64)
    for v, x in entries.items():
        if v >= n:
            raise ValueError(f"seed vertex {v} is outside the graph (n={n})")
        s[v] = x

    degrees = graph.degree_matrix().diagonal()
    inv_deg = np.zeros(n, dtype=np.float64)
    inv_deg[degrees > 0] = 1.0 / degrees[degrees > 0]
    walk = scipy.sparse.diags(inv_deg) @ graph.adjacency()

    # Row-vector system, solved in transposed form.
    system = (
        scipy.sparse.identity(n, format="csc") - (1.0 - alpha) * walk.T
    ).tocsc()
    return np.asarray(scipy.sparse.linalg.spsolve(system, alpha * s)).ravel()


def pagerank_residual_bound(graph: LocalGraph, residual) -> float:
    """Largest residual per unit of degree, max_u r[u] / degree(u).

    After :func:`approximate_pagerank` terminates this is at most epsilon.
    Residual on a zero-degree vertex gives ``inf``.
    """
    bound = 0.0
    for v, x in column_entries(residual).items():
        deg = graph.degree(v)
        if deg > 0:
            bound = max(bound, x / deg)
        elif x > 0:
            return float("inf")
    return bound

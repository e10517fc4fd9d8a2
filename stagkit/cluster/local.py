"""Local clustering: find a low-conductance cluster around a seed vertex.

Both entry points work through the LocalGraph interface only, so the cost
depends on the size of the cluster found rather than the size of the graph.
"""

import logging

from stagkit.cluster.pagerank import approximate_pagerank
from stagkit.cluster.sweep import sweep_set_conductance
from stagkit.config.defaults import (
    ACL_VOLUME_FACTOR,
    DEFAULT_ACL_ERROR,
    DEFAULT_START_LOCALITY,
    MIN_LOCALITY,
)
from stagkit.graph.local import LocalGraph
from stagkit.graph.sparse import column_entries, sparse_column

log = logging.getLogger(__name__)


def local_cluster_acl(
    graph: LocalGraph,
    seed_vertex: int,
    locality: float,
    error: float = DEFAULT_ACL_ERROR,
) -> list[int]:
    """The ACL local clustering algorithm.

    Computes an approximate personalised PageRank vector p from a unit mass
    on ``seed_vertex`` and returns the best sweep set of p / degree.

    Args:
        graph: Any LocalGraph.
        seed_vertex: Starting vertex.
        locality: PageRank teleport probability alpha in (0, 1]. Larger
            values give smaller, more local clusters.
        error: PageRank tolerance epsilon.

    Returns:
        Vertex indices of the cluster, in sweep order.
    """
    if seed_vertex < 0:
        raise ValueError(f"seed_vertex must be non-negative, got {seed_vertex}")
    seed = sparse_column({seed_vertex: 1.0})
    p, _ = approximate_pagerank(graph, seed, locality, error)

    normalised = {}
    for v, x in column_entries(p).items():
        deg = graph.degree(v)
        if deg > 0:
            normalised[v] = x / deg

    cluster = sweep_set_conductance(graph, sparse_column(normalised, p.shape[0]))
    log.debug(
        "ACL from vertex %d (alpha=%g, epsilon=%g): support=%d, cluster=%d",
        seed_vertex,
        locality,
        error,
        p.nnz,
        len(cluster),
    )
    return cluster


def local_cluster(
    graph: LocalGraph,
    seed_vertex: int,
    target_volume: float,
) -> list[int]:
    """Find a cluster around ``seed_vertex`` with roughly the target volume.

    The PageRank tolerance is fixed at 1 / (ACL_VOLUME_FACTOR * target_volume),
    which bounds the support volume well above the target. The locality starts
    at DEFAULT_START_LOCALITY and is halved until the ACL cluster reaches
    ``target_volume`` or the locality would fall below MIN_LOCALITY. The last
    cluster computed is returned, so a seed in a component smaller than the
    target yields the best cluster found at the smallest locality.

    Args:
        graph: Any LocalGraph.
        seed_vertex: Starting vertex.
        target_volume: Desired cluster volume, positive.

    Returns:
        Vertex indices of the cluster, in sweep order.
    """
    if target_volume <= 0:
        raise ValueError(f"target_volume must be positive, got {target_volume}")

    error = 1.0 / (ACL_VOLUME_FACTOR * target_volume)
    locality = DEFAULT_START_LOCALITY

    while True:
        cluster = local_cluster_acl(graph, seed_vertex, locality, error)
        volume = sum(graph.vertices_degree(cluster))
        log.debug(
            "local_cluster: alpha=%g gives volume %g (target %g)",
            locality,
            volume,
            target_volume,
        )
        if volume >= target_volume or locality / 2 < MIN_LOCALITY:
            break
        locality /= 2

    log.info(
        "Local cluster from vertex %d: %d vertices, volume %g, alpha=%g",
        seed_vertex,
        len(cluster),
        volume,
        locality,
    )
    return cluster

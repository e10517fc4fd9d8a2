"""Graph clustering: approximate PageRank, sweep sets, local and spectral."""

from stagkit.cluster.local import local_cluster, local_cluster_acl
from stagkit.cluster.pagerank import (
    approximate_pagerank,
    pagerank_residual_bound,
    personalised_pagerank,
)
from stagkit.cluster.spectral import compute_eigensystem, spectral_cluster
from stagkit.cluster.sweep import conductance, sweep_set_conductance

__all__ = [
    "approximate_pagerank",
    "compute_eigensystem",
    "conductance",
    "local_cluster",
    "local_cluster_acl",
    "pagerank_residual_bound",
    "personalised_pagerank",
    "spectral_cluster",
    "sweep_set_conductance",
]

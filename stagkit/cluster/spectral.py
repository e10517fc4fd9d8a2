"""Spectral clustering with the normalised Laplacian.

Each vertex is embedded using its entries in the k eigenvectors of the
normalised Laplacian with the smallest eigenvalues, and the embedded points
are grouped with k-means.
"""

import logging

import numpy as np
import scipy.linalg
import scipy.sparse
import scipy.sparse.linalg
from sklearn.cluster import KMeans

from stagkit.config.defaults import DEFAULT_RANDOM_STATE, DENSE_EIGEN_LIMIT
from stagkit.graph.graph import Graph

log = logging.getLogger(__name__)

# Shift for ARPACK; the matrix is PSD so L - sigma I is positive definite.
EIGEN_SHIFT = -1e-3


def compute_eigensystem(
    matrix: scipy.sparse.spmatrix,
    k: int,
    random_state: int = DEFAULT_RANDOM_STATE,
) -> tuple[np.ndarray, np.ndarray]:
    """Compute the k smallest eigenpairs of a symmetric matrix.

    Small matrices, and requests for nearly all eigenpairs, use the dense
    solver. Otherwise ARPACK is run in shift-invert mode just below zero,
    with a start vector drawn from ``random_state`` so results are
    repeatable.

    Args:
        matrix: Symmetric sparse matrix of shape (n, n).
        k: Number of eigenpairs, 1 <= k <= n.
        random_state: Seed for the ARPACK start vector.

    Returns:
        (eigenvalues, eigenvectors): shapes (k,) and (n, k), eigenvalues in
        ascending order.
    """
    n = matrix.shape[0]
    if not 1 <= k <= n:
        raise ValueError(f"k must be between 1 and n={n}, got {k}")

    if n <= DENSE_EIGEN_LIMIT or k >= n - 1:
        eigenvalues, eigenvectors = scipy.linalg.eigh(
            matrix.toarray(), subset_by_index=[0, k - 1]
        )
    else:
        v0 = np.random.default_rng(random_state).random(n)
        eigenvalues, eigenvectors = scipy.sparse.linalg.eigsh(
            matrix, k=k, sigma=EIGEN_SHIFT, which="LM", v0=v0
        )
        order = np.argsort(eigenvalues)
        eigenvalues, eigenvectors = eigenvalues[order], eigenvectors[:, order]

    return eigenvalues, eigenvectors


def spectral_cluster(
    graph: Graph,
    k: int,
    random_state: int = DEFAULT_RANDOM_STATE,
) -> np.ndarray:
    """Partition a graph into k clusters by spectral clustering.

    Args:
        graph: The graph to cluster.
        k: Number of clusters, 1 <= k <= number of vertices.
        random_state: Seed for the eigensolver start vector and k-means
            initialisation. Fixed seeds give fixed labels.

    Returns:
        Integer array of length n; entry i is the cluster of vertex i, in
        [0, k).
    """
    n = graph.number_of_vertices()
    if not 1 <= k <= n:
        raise ValueError(f"k must be between 1 and n={n}, got {k}")

    eigenvalues, embedding = compute_eigensystem(
        graph.normalised_laplacian(), k, random_state
    )
    log.debug("Spectral embedding: eigenvalues %s", np.round(eigenvalues, 6))

    kmeans = KMeans(n_clusters=k, random_state=random_state, n_init=10)
    labels = kmeans.fit_predict(embedding)

    log.info(
        "Spectral clustering: n=%d, k=%d, cluster sizes %s",
        n,
        k,
        np.bincount(labels, minlength=k).tolist(),
    )
    return labels.astype(np.int64)

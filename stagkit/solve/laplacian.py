"""Solving Laplacian systems L x = b for a graph.

The Laplacian of a connected graph is singular with the all-ones vector in
its null space, so L x = b has a solution exactly when the entries of b sum
to zero. Solutions are then unique up to adding a constant vector.
"""

import logging

import numpy as np

from stagkit.config.defaults import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_SOLVER_METHOD,
)
from stagkit.graph.graph import Graph
from stagkit.solve.iterative import (
    conjugate_gradient_iteration,
    gauss_seidel_iteration,
    jacobi_iteration,
)

log = logging.getLogger(__name__)

# p^T L p below this is treated as a null-space direction.
NULL_SPACE_TOLERANCE = 1e-10


def solve_laplacian_jacobi(
    graph: Graph,
    b,
    eps: float,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> np.ndarray:
    """Solve L x = b by Jacobi iteration. See :func:`jacobi_iteration`.

    An isolated vertex puts a zero on the diagonal of L, so graphs with one
    raise ValueError before any iteration. Use the conjugate gradient
    methods for such graphs.
    """
    return jacobi_iteration(graph.laplacian(), b, eps, max_iterations)


def solve_laplacian_gauss_seidel(
    graph: Graph,
    b,
    eps: float,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> np.ndarray:
    """Solve L x = b by Gauss-Seidel. See :func:`gauss_seidel_iteration`.

    As with :func:`solve_laplacian_jacobi`, a graph with an isolated vertex
    has a zero diagonal entry in L and raises ValueError.
    """
    return gauss_seidel_iteration(graph.laplacian(), b, eps, max_iterations)


def solve_laplacian_conjugate_gradient(
    graph: Graph,
    b,
    eps: float,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> np.ndarray:
    """Solve L x = b by conjugate gradient. See
    :func:`conjugate_gradient_iteration`."""
    return conjugate_gradient_iteration(graph.laplacian(), b, eps, max_iterations)


def solve_laplacian_exact_conjugate_gradient(graph: Graph, b) -> np.ndarray:
    """Solve L x = b by the exact conjugate gradient method.

    This is O(n^3) and only suitable for small graphs.

    The standard basis e_1, ..., e_n is made L-conjugate by Gram-Schmidt in
    the inner product <u, v> = u^T L v, giving directions p_k with
    p_i^T L p_j = 0 for i != j. Writing x = sum_k alpha_k p_k and multiplying
    L x = b by p_k gives

        alpha_k = (p_k^T b) / (p_k^T L p_k).

    Because L is singular, Gram-Schmidt produces one direction per connected
    component with p^T L p = 0. These lie in the null space and are skipped,
    so the result solves L x = b whenever b is in the range of L.

    Args:
        graph: The graph whose Laplacian defines the system.
        b: Right-hand side, length n.

    Returns:
        Dense solution vector.
    """
    L = graph.laplacian().toarray()
    n = L.shape[0]
    b = np.asarray(b, dtype=np.float64).ravel()
    if b.shape[0] != n:
        raise ValueError(f"b has length {b.shape[0]} but the graph has {n} vertices")

    basis: list[np.ndarray] = []
    basis_images: list[np.ndarray] = []  # L p for each p in basis
    basis_curvatures: list[float] = []  # p^T L p
    x = np.zeros(n, dtype=np.float64)
    skipped = 0

    for i in range(n):
        p = np.zeros(n, dtype=np.float64)
        p[i] = 1.0
        for q, Lq, qLq in zip(basis, basis_images, basis_curvatures):
            p -= (Lq @ p) / qLq * q
        Lp = L @ p
        pLp = float(p @ Lp)
        if pLp <= NULL_SPACE_TOLERANCE * max(1.0, float(p @ p)):
            skipped += 1
            continue
        basis.append(p)
        basis_images.append(Lp)
        basis_curvatures.append(pLp)
        x += (p @ b) / pLp * p

    log.debug(
        "Exact conjugate gradient: %d directions, %d null-space skipped",
        len(basis),
        skipped,
    )
    return x


_SOLVERS = {
    "jacobi": solve_laplacian_jacobi,
    "gauss_seidel": solve_laplacian_gauss_seidel,
    "conjugate_gradient": solve_laplacian_conjugate_gradient,
}


def solve_laplacian(
    graph: Graph,
    b,
    eps: float,
    method: str = DEFAULT_SOLVER_METHOD,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> np.ndarray:
    """Solve L x = b with the named method.

    Args:
        graph: The graph whose Laplacian defines the system.
        b: Right-hand side, length n.
        eps: Error tolerance for the iterative methods.
        method: "jacobi", "gauss_seidel", "conjugate_gradient" or
            "exact_conjugate_gradient" (which ignores eps and max_iterations).
        max_iterations: Iteration cap for the iterative methods.

    Raises:
        ValueError: For an unknown method.
        ConvergenceError: If an iterative method does not converge.
    """
    if method == "exact_conjugate_gradient":
        return solve_laplacian_exact_conjugate_gradient(graph, b)
    if method not in _SOLVERS:
        raise ValueError(
            f"unknown solver method {method!r}, expected one of "
            f"{[*_SOLVERS, 'exact_conjugate_gradient']}"
        )
    log.info("Solving Laplacian system with %s (eps=%g)", method, eps)
    return _SOLVERS[method](graph, b, eps, max_iterations)

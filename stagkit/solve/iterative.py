"""Fixed-point iterative solvers for sparse linear systems A x = b.

All solvers start from x_0 = 0 and measure the error of iterate x_k as

    e_k = || A x_k - b ||_2.

They return the first iterate with e_k <= eps. At most max_iterations
updates are applied, so x_0 through x_max_iterations are checked. If none
reaches eps, ConvergenceError is raised; an approximate answer is never
returned as if it had converged.
"""

import logging

import numpy as np
import scipy.sparse
import scipy.sparse.linalg

from stagkit.config.defaults import DEFAULT_MAX_ITERATIONS

log = logging.getLogger(__name__)


class ConvergenceError(RuntimeError):
    """Raised when an iterative solver does not converge.

    Attributes:
        iterations: Number of updates applied.
        error: Error of the last iterate.
    """

    def __init__(self, iterations: int, error: float) -> None:
        super().__init__(
            f"Iterative solver failed to converge after {iterations} "
            f"iterations (last error {error:.3g})."
        )
        self.iterations = iterations
        self.error = error


def _prepare(
    A, b, max_iterations: int
) -> tuple[scipy.sparse.csr_matrix, np.ndarray]:
    A = scipy.sparse.csr_matrix(A, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64).ravel()
    if A.shape[0] != A.shape[1]:
        raise ValueError(f"matrix must be square, got shape {A.shape}")
    if b.shape[0] != A.shape[0]:
        raise ValueError(
            f"b has length {b.shape[0]} but the matrix has {A.shape[0]} rows"
        )
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
    return A, b


def _nonzero_diagonal(A: scipy.sparse.csr_matrix) -> np.ndarray:
    diag = A.diagonal()
    zero = np.flatnonzero(diag == 0)
    if len(zero):
        raise ValueError(
            f"matrix has zero diagonal entries at rows {zero[:10].tolist()}"
        )
    return diag


def _fail(name: str, iterations: int, error: float) -> ConvergenceError:
    log.warning(
        "%s did not converge in %d iterations (error %.3g)",
        name,
        iterations,
        error,
    )
    return ConvergenceError(iterations, error)


def jacobi_iteration(
    A,
    b,
    eps: float,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> np.ndarray:
    """Solve A x = b by Jacobi iteration.

    With P = diag(A), each step solves P x_{k+1} = (P - A) x_k + b.
    Convergence is guaranteed when A is strictly diagonally dominant.

    Args:
        A: Square sparse matrix with a non-zero diagonal.
        b: Right-hand side vector.
        eps: Error tolerance on || A x - b ||_2.
        max_iterations: Maximum number of updates to apply.

    Returns:
        Dense solution vector.

    Raises:
        ConvergenceError: If the error does not reach eps in time.
        ValueError: On mismatched shapes or a zero diagonal entry.
    """
    A, b = _prepare(A, b, max_iterations)
    diag = _nonzero_diagonal(A)

    x = np.zeros_like(b)
    error = np.inf
    for k in range(max_iterations + 1):
        residual = b - A @ x
        error = float(np.linalg.norm(residual))
        if error <= eps:
            log.debug("Jacobi converged after %d iterations", k)
            return x
        if k == max_iterations:
            break
        # P^{-1} ((P - A) x + b) = x + P^{-1} (b - A x)
        x = x + residual / diag

    raise _fail("Jacobi iteration", max_iterations, error)


def gauss_seidel_iteration(
    A,
    b,
    eps: float,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> np.ndarray:
    """Solve A x = b by the Gauss-Seidel method.

    With P the lower-triangular part of A (diagonal included), each step
    solves the triangular system P x_{k+1} = (P - A) x_k + b. Convergence is
    guaranteed when A is strictly diagonally dominant or symmetric positive
    definite.

    Args:
        A: Square sparse matrix with a non-zero diagonal.
        b: Right-hand side vector.
        eps: Error tolerance on || A x - b ||_2.
        max_iterations: Maximum number of updates to apply.

    Returns:
        Dense solution vector.

    Raises:
        ConvergenceError: If the error does not reach eps in time.
        ValueError: On mismatched shapes or a zero diagonal entry.
    """
    A, b = _prepare(A, b, max_iterations)
    _nonzero_diagonal(A)
    lower = scipy.sparse.tril(A, format="csr")
    strict_upper = scipy.sparse.triu(A, k=1, format="csr")  # equals A - P

    x = np.zeros_like(b)
    error = np.inf
    for k in range(max_iterations + 1):
        error = float(np.linalg.norm(A @ x - b))
        if error <= eps:
            log.debug("Gauss-Seidel converged after %d iterations", k)
            return x
        if k == max_iterations:
            break
        x = scipy.sparse.linalg.spsolve_triangular(
            lower, b - strict_upper @ x, lower=True
        )

    raise _fail("Gauss-Seidel iteration", max_iterations, error)


def conjugate_gradient_iteration(
    A,
    b,
    eps: float,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> np.ndarray:
    """Solve A x = b by the conjugate gradient method.

    A must be symmetric positive semi-definite, and b must lie in the range
    of A (for a connected graph Laplacian: b sums to zero).

    Args:
        A: Symmetric positive semi-definite sparse matrix.
        b: Right-hand side vector.
        eps: Error tolerance on || A x - b ||_2.
        max_iterations: Maximum number of updates to apply.

    Returns:
        Dense solution vector.

    Raises:
        ConvergenceError: If the error does not reach eps in time, or the
            search direction degenerates.
    """
    A, b = _prepare(A, b, max_iterations)

    x = np.zeros_like(b)
    r = b.copy()
    p = r.copy()
    rr = float(r @ r)
    error = np.inf
    for k in range(max_iterations + 1):
        error = float(np.linalg.norm(A @ x - b))
        if error <= eps:
            log.debug("Conjugate gradient converged after %d iterations", k)
            return x
        if k == max_iterations:
            break

        Ap = A @ p
        curvature = float(p @ Ap)
        if curvature <= 0:
            # p lies in the null space of A: b is not in the range of A.
            raise _fail("Conjugate gradient", k + 1, error)
        step = rr / curvature
        x = x + step * p
        r = r - step * Ap
        rr_next = float(r @ r)
        p = r + (rr_next / rr) * p
        rr = rr_next

    raise _fail("Conjugate gradient", max_iterations, error)

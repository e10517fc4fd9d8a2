"""Tests for the Laplacian and general linear system solvers."""

import numpy as np
import pytest
import scipy.sparse

from stagkit.graph import Graph, barbell_graph, complete_graph, cycle_graph, sbm
from stagkit.solve import (
    ConvergenceError,
    conjugate_gradient_iteration,
    gauss_seidel_iteration,
    jacobi_iteration,
    solve_laplacian,
    solve_laplacian_conjugate_gradient,
    solve_laplacian_exact_conjugate_gradient,
    solve_laplacian_gauss_seidel,
    solve_laplacian_jacobi,
)

ITERATIVE = [jacobi_iteration, gauss_seidel_iteration, conjugate_gradient_iteration]


def diagonally_dominant_system(n: int = 30):
    """L + I for a random graph: strictly diagonally dominant and SPD."""
    g = sbm(n, 3, 0.4, 0.1, np.random.default_rng(0))
    A = g.laplacian() + scipy.sparse.identity(n, format="csr")
    b = np.random.default_rng(1).standard_normal(n)
    return A, b


def zero_sum_vector(n: int, seed: int = 2) -> np.ndarray:
    b = np.random.default_rng(seed).standard_normal(n)
    return b - b.mean()


class TestGeneralSolvers:
    """Jacobi, Gauss-Seidel and CG on A x = b."""

    @pytest.mark.parametrize("solver", ITERATIVE)
    def test_converges_on_sdd_matrix(self, solver) -> None:
        A, b = diagonally_dominant_system()
        x = solver(A, b, 1e-8)
        assert np.linalg.norm(A @ x - b) <= 1e-8

    @pytest.mark.parametrize("solver", ITERATIVE)
    def test_max_iterations_one_raises(self, solver) -> None:
        A, b = diagonally_dominant_system()
        with pytest.raises(ConvergenceError) as excinfo:
            solver(A, b, 1e-8, max_iterations=1)
        assert excinfo.value.iterations == 1
        assert excinfo.value.error > 1e-8

    def test_final_update_is_checked_jacobi(self) -> None:
        # x_1 = D^{-1} b is exact for a diagonal matrix.
        A = 2.0 * scipy.sparse.identity(3, format="csr")
        x = jacobi_iteration(A, np.ones(3), 1e-12, max_iterations=1)
        np.testing.assert_allclose(x, 0.5)

    def test_final_update_is_checked_gauss_seidel(self) -> None:
        # One triangular solve is exact for a lower-triangular matrix.
        A = scipy.sparse.csr_matrix(np.array([[2.0, 0.0], [1.0, 2.0]]))
        x = gauss_seidel_iteration(A, [2.0, 3.0], 1e-12, max_iterations=1)
        np.testing.assert_allclose(x, [1.0, 1.0])

    def test_final_update_is_checked_conjugate_gradient(self) -> None:
        # b is an eigenvector, so the first step lands on the solution.
        A = scipy.sparse.diags([2.0, 2.0, 5.0], format="csr")
        x = conjugate_gradient_iteration(
            A, [1.0, 1.0, 0.0], 1e-12, max_iterations=1
        )
        np.testing.assert_allclose(x, [0.5, 0.5, 0.0])

    def test_convergence_error_is_not_value_error(self) -> None:
        assert not issubclass(ConvergenceError, ValueError)
        assert issubclass(ConvergenceError, RuntimeError)

    def test_zero_rhs_returns_immediately(self) -> None:
        A, _ = diagonally_dominant_system()
        x = jacobi_iteration(A, np.zeros(A.shape[0]), 1e-12, max_iterations=1)
        np.testing.assert_array_equal(x, 0.0)

    def test_shape_mismatch(self) -> None:
        A, b = diagonally_dominant_system()
        with pytest.raises(ValueError, match="length"):
            jacobi_iteration(A, b[:-1], 1e-6)

    def test_zero_diagonal_rejected(self) -> None:
        A = scipy.sparse.csr_matrix(np.array([[0.0, 1.0], [1.0, 2.0]]))
        with pytest.raises(ValueError, match="zero diagonal"):
            gauss_seidel_iteration(A, np.ones(2), 1e-6)

    def test_bad_max_iterations(self) -> None:
        A, b = diagonally_dominant_system()
        with pytest.raises(ValueError, match="max_iterations"):
            conjugate_gradient_iteration(A, b, 1e-6, max_iterations=0)


class TestLaplacianSolvers:
    """L x = b for graph Laplacians with b orthogonal to the ones vector."""

    def test_jacobi_complete_graph(self) -> None:
        g = complete_graph(6)
        b = zero_sum_vector(6)
        x = solve_laplacian_jacobi(g, b, 1e-8)
        assert np.linalg.norm(g.laplacian() @ x - b) <= 1e-8

    def test_gauss_seidel_barbell(self) -> None:
        g = barbell_graph(5)
        b = zero_sum_vector(10)
        x = solve_laplacian_gauss_seidel(g, b, 1e-6, max_iterations=5000)
        assert np.linalg.norm(g.laplacian() @ x - b) <= 1e-6

    def test_conjugate_gradient_cycle(self) -> None:
        g = cycle_graph(25)
        b = zero_sum_vector(25)
        x = solve_laplacian_conjugate_gradient(g, b, 1e-8)
        assert np.linalg.norm(g.laplacian() @ x - b) <= 1e-8

    def test_jacobi_fails_on_bipartite_graph(self) -> None:
        # The Jacobi iteration matrix of an even cycle has eigenvalue -1.
        g = cycle_graph(4)
        b = np.array([1.0, -1.0, 1.0, -1.0])
        with pytest.raises(ConvergenceError):
            solve_laplacian_jacobi(g, b, 1e-6, max_iterations=200)

    @pytest.mark.parametrize(
        "solver", [solve_laplacian_jacobi, solve_laplacian_gauss_seidel]
    )
    def test_isolated_vertex_has_zero_diagonal(self, solver) -> None:
        g = Graph(np.array([[0.0, 1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 0.0]]))
        with pytest.raises(ValueError, match="zero diagonal"):
            solver(g, np.array([1.0, -1.0, 0.0]), 1e-6)

    def test_exact_conjugate_gradient(self) -> None:
        g = sbm(20, 2, 0.6, 0.2, np.random.default_rng(4))
        b = zero_sum_vector(20)
        x = solve_laplacian_exact_conjugate_gradient(g, b)
        np.testing.assert_allclose(g.laplacian() @ x, b, atol=1e-8)

    def test_exact_conjugate_gradient_effective_resistance(self) -> None:
        # Effective resistance between adjacent vertices of C_n is (n-1)/n.
        g = cycle_graph(5)
        b = np.zeros(5)
        b[0], b[1] = 1.0, -1.0
        x = solve_laplacian_exact_conjugate_gradient(g, b)
        assert x[0] - x[1] == pytest.approx(4 / 5)

    @pytest.mark.parametrize(
        "method",
        ["jacobi", "gauss_seidel", "conjugate_gradient", "exact_conjugate_gradient"],
    )
    def test_dispatch(self, method: str) -> None:
        g = complete_graph(5)
        b = zero_sum_vector(5)
        x = solve_laplacian(g, b, 1e-8, method=method)
        assert np.linalg.norm(g.laplacian() @ x - b) <= 1e-7

    def test_unknown_method(self) -> None:
        with pytest.raises(ValueError, match="unknown solver method"):
            solve_laplacian(complete_graph(3), np.zeros(3), 1e-6, method="sor")

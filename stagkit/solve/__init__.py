"""Iterative and exact solvers for Laplacian linear systems."""

from stagkit.solve.iterative import (
    ConvergenceError,
    conjugate_gradient_iteration,
    gauss_seidel_iteration,
    jacobi_iteration,
)
from stagkit.solve.laplacian import (
    solve_laplacian,
    solve_laplacian_conjugate_gradient,
    solve_laplacian_exact_conjugate_gradient,
    solve_laplacian_gauss_seidel,
    solve_laplacian_jacobi,
)

__all__ = [
    "ConvergenceError",
    "conjugate_gradient_iteration",
    "gauss_seidel_iteration",
    "jacobi_iteration",
    "solve_laplacian",
    "solve_laplacian_conjugate_gradient",
    "solve_laplacian_exact_conjugate_gradient",
    "solve_laplacian_gauss_seidel",
    "solve_laplacian_jacobi",
]

"""stagkit: spectral and local clustering and Laplacian solvers for sparse graphs."""

__version__ = "0.1.0"

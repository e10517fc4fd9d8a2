"""Named default constants shared by the clustering and solver entry points.

Every constant here is a default only: each public function that uses one
accepts an override argument.
"""

# Iterative solvers
DEFAULT_MAX_ITERATIONS = 1000
DEFAULT_SOLVER_EPS = 1e-6
DEFAULT_SOLVER_METHOD = "conjugate_gradient"

# ACL local clustering
DEFAULT_ACL_ERROR = 0.001
DEFAULT_START_LOCALITY = 0.5  # first alpha tried by local_cluster
MIN_LOCALITY = 0.001  # local_cluster stops halving alpha below this
ACL_VOLUME_FACTOR = 10.0  # epsilon = 1 / (factor * target_volume)

# Spectral clustering
DEFAULT_RANDOM_STATE = 42
DENSE_EIGEN_LIMIT = 500  # use dense eigh at or below this many vertices

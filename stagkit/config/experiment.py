"""Run configuration dataclasses, all frozen and slotted for immutability."""

from dataclasses import dataclass, field

from stagkit.config.defaults import (
    DEFAULT_ACL_ERROR,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_RANDOM_STATE,
    DEFAULT_SOLVER_EPS,
    DEFAULT_SOLVER_METHOD,
)

GRAPH_FORMATS = ("edgelist", "adjacencylist", "npz")
TASKS = ("local", "acl", "spectral", "solve")
SOLVER_METHODS = (
    "jacobi",
    "gauss_seidel",
    "conjugate_gradient",
    "exact_conjugate_gradient",
)


@dataclass(frozen=True, slots=True)
class GraphSourceConfig:
    """Where to load the input graph from."""

    path: str = "graph.edgelist"
    format: str = "edgelist"  # one of GRAPH_FORMATS


@dataclass(frozen=True, slots=True)
class LocalClusterConfig:
    """Parameters for the ACL and target-volume local clustering tasks."""

    seed_vertex: int = 0
    locality: float = 0.1  # alpha, used by the "acl" task
    error: float = DEFAULT_ACL_ERROR  # epsilon, used by the "acl" task
    target_volume: float = 100.0  # used by the "local" task


@dataclass(frozen=True, slots=True)
class SpectralConfig:
    """Parameters for spectral clustering."""

    k: int = 2
    random_state: int = DEFAULT_RANDOM_STATE


@dataclass(frozen=True, slots=True)
class SolverConfig:
    """Parameters for the Laplacian solve task.

    The right-hand side is the vector e_source - e_sink, which is orthogonal
    to the all-ones vector and therefore solvable on a connected graph.
    """

    method: str = DEFAULT_SOLVER_METHOD
    eps: float = DEFAULT_SOLVER_EPS
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    source: int = 0
    sink: int = 1


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Top-level run configuration composing all sub-configs.

    Cross-parameter validation runs in __post_init__ to reject invalid
    configurations before any graph is loaded.
    """

    graph: GraphSourceConfig = field(default_factory=GraphSourceConfig)
    local: LocalClusterConfig = field(default_factory=LocalClusterConfig)
    spectral: SpectralConfig = field(default_factory=SpectralConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    task: str = "local"
    description: str = ""
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.task not in TASKS:
            raise ValueError(f"task must be one of {TASKS}, got {self.task!r}")
        if self.graph.format not in GRAPH_FORMATS:
            raise ValueError(
                f"graph.format must be one of {GRAPH_FORMATS}, "
                f"got {self.graph.format!r}"
            )
        if not 0.0 < self.local.locality <= 1.0:
            raise ValueError(
                f"local.locality must be in (0, 1], got {self.local.locality}"
            )
        if self.local.error <= 0.0:
            raise ValueError(f"local.error must be positive, got {self.local.error}")
        if self.local.target_volume <= 0.0:
            raise ValueError(
                f"local.target_volume must be positive, "
                f"got {self.local.target_volume}"
            )
        if self.spectral.k < 1:
            raise ValueError(f"spectral.k must be >= 1, got {self.spectral.k}")
        if self.solver.method not in SOLVER_METHODS:
            raise ValueError(
                f"solver.method must be one of {SOLVER_METHODS}, "
                f"got {self.solver.method!r}"
            )
        if self.solver.max_iterations < 1:
            raise ValueError(
                f"solver.max_iterations must be >= 1, "
                f"got {self.solver.max_iterations}"
            )
        if self.solver.source == self.solver.sink:
            raise ValueError(
                f"solver.source and solver.sink must differ, "
                f"both are {self.solver.source}"
            )

"""Run configuration: frozen dataclasses, defaults, hashing, JSON round trip."""

from stagkit.config.experiment import (
    GraphSourceConfig,
    LocalClusterConfig,
    RunConfig,
    SolverConfig,
    SpectralConfig,
)
from stagkit.config.hashing import config_hash, run_config_hash
from stagkit.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
)

# All-default run configuration.
DEFAULT_CONFIG = RunConfig()

__all__ = [
    "DEFAULT_CONFIG",
    "GraphSourceConfig",
    "LocalClusterConfig",
    "RunConfig",
    "SolverConfig",
    "SpectralConfig",
    "config_from_dict",
    "config_from_json",
    "config_hash",
    "config_to_dict",
    "config_to_json",
    "run_config_hash",
]

"""Integration tests for the command-line entry points.

Runs each task end to end on a barbell graph written to a temporary
edgelist file.
"""

import subprocess
import sys
from dataclasses import replace
from pathlib import Path

import pytest

from run_clustering import run_task
from stagkit.config import (
    GraphSourceConfig,
    LocalClusterConfig,
    RunConfig,
    SolverConfig,
    SpectralConfig,
)
from stagkit.config.serialization import config_to_json
from stagkit.graph import barbell_graph, load_adjacencylist, save_edgelist

REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def barbell_config(tmp_path: Path) -> RunConfig:
    """Config pointing at a saved barbell graph with two 8-cliques."""
    path = tmp_path / "barbell.edgelist"
    save_edgelist(barbell_graph(8), path)
    return RunConfig(
        graph=GraphSourceConfig(path=str(path), format="edgelist"),
        local=LocalClusterConfig(seed_vertex=2, locality=0.3, target_volume=50.0),
        spectral=SpectralConfig(k=2),
        solver=SolverConfig(source=0, sink=15),
        description="CLI test",
        tags=("test",),
    )


def _write_config(tmp_path: Path, config: RunConfig) -> Path:
    config_path = tmp_path / "run.json"
    config_path.write_text(config_to_json(config))
    return config_path


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, *args],
        capture_output=True,
        text=True,
        timeout=60,
        cwd=REPO_ROOT,
    )


class TestRunTask:
    """run_task summaries for each task."""

    def test_acl(self, barbell_config: RunConfig) -> None:
        summary = run_task(replace(barbell_config, task="acl"))
        assert summary["task"] == "acl"
        assert summary["cluster"] == list(range(8))
        # Clique volume 8 * 7 + 1 bridge edge.
        assert summary["volume"] == pytest.approx(57.0)
        assert summary["conductance"] == pytest.approx(1 / 57)

    def test_local(self, barbell_config: RunConfig) -> None:
        summary = run_task(barbell_config)
        assert summary["cluster"] == list(range(8))

    def test_spectral(self, barbell_config: RunConfig) -> None:
        summary = run_task(replace(barbell_config, task="spectral"))
        assert sorted(summary["sizes"]) == [8, 8]
        assert len(set(summary["labels"][:8])) == 1

    @pytest.mark.parametrize("method", ["conjugate_gradient", "exact_conjugate_gradient"])
    def test_solve(self, barbell_config: RunConfig, method: str) -> None:
        config = replace(
            barbell_config,
            task="solve",
            solver=replace(barbell_config.solver, method=method, eps=1e-9),
        )
        summary = run_task(config)
        assert summary["residual"] <= 1e-8
        # Within a clique K_8 the resistance between two non-bridge vertices
        # is 2/8; vertex 0 to bridge 7, the bridge, and 8 to 15 are in series.
        assert summary["effective_resistance"] == pytest.approx(0.25 + 1 + 0.25)


class TestCommandLine:
    """The scripts run as subprocesses."""

    def test_dry_run(self, tmp_path: Path, barbell_config: RunConfig) -> None:
        config_path = _write_config(tmp_path, replace(barbell_config, task="acl"))
        result = _run("run_clustering.py", "--config", str(config_path), "--dry-run")
        assert result.returncode == 0
        assert "Config hash:" in result.stdout
        assert "dry-run" in result.stdout.lower()

    def test_full_run(self, tmp_path: Path, barbell_config: RunConfig) -> None:
        config_path = _write_config(tmp_path, barbell_config)
        result = _run("run_clustering.py", "--config", str(config_path))
        assert result.returncode == 0
        assert "Cluster: [0, 1, 2, 3, 4, 5, 6, 7]" in result.stdout

    def test_missing_config(self, tmp_path: Path) -> None:
        result = _run("run_clustering.py", "--config", str(tmp_path / "none.json"))
        assert result.returncode == 1
        assert "not found" in result.stderr

    def test_missing_graph_fails(self, tmp_path: Path) -> None:
        config = RunConfig(graph=GraphSourceConfig(path=str(tmp_path / "none.edgelist")))
        config_path = _write_config(tmp_path, config)
        result = _run("run_clustering.py", "--config", str(config_path))
        assert result.returncode == 1

    def test_convert_graph(self, tmp_path: Path) -> None:
        source = tmp_path / "g.edgelist"
        destination = tmp_path / "g.adjacencylist"
        save_edgelist(barbell_graph(4), source)
        result = _run("convert_graph.py", str(source), str(destination))
        assert result.returncode == 0
        assert load_adjacencylist(destination) == barbell_graph(4)

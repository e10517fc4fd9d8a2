#!/usr/bin/env python3
"""Entry point for running a clustering or solver task on a graph file.

Loads the graph named in the config, runs the configured task and prints a
summary of the result.

Usage:
    python run_clustering.py --config run.json
    python run_clustering.py --config run.json --dry-run
    python run_clustering.py --config run.json --verbose
"""

import argparse
import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

import numpy as np

from stagkit.config import RunConfig, config_from_json, run_config_hash

log = logging.getLogger(__name__)


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that prints stage banners with elapsed time."""
    print(f"\n=== {name} ===")
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    elapsed = time.monotonic() - t0
    print(f"... done in {elapsed:.2f}s")
    log.info("Completed: %s in %.2fs", name, elapsed)


def run_task(config: RunConfig) -> dict:
    """Load the configured graph and run the configured task.

    Returns:
        Summary dictionary of the result, also printed to stdout.
    """
    # Lazy imports to keep --dry-run fast
    from stagkit.cluster import (
        conductance,
        local_cluster,
        local_cluster_acl,
        spectral_cluster,
    )
    from stagkit.graph import load_graph
    from stagkit.solve import solve_laplacian

    with stage_timer("Load Graph"):
        graph = load_graph(config.graph.path, config.graph.format)
        print(f"Graph: n={graph.number_of_vertices()}, "
              f"edges={graph.number_of_edges()}, "
              f"volume={graph.total_volume():g}")

    summary: dict = {"task": config.task}

    if config.task in ("local", "acl"):
        lc = config.local
        with stage_timer("Local Clustering"):
            if config.task == "acl":
                cluster = local_cluster_acl(
                    graph, lc.seed_vertex, lc.locality, lc.error
                )
            else:
                cluster = local_cluster(graph, lc.seed_vertex, lc.target_volume)
        summary["cluster"] = sorted(cluster)
        summary["volume"] = sum(graph.vertices_degree(cluster))
        summary["conductance"] = conductance(graph, cluster)
        print(f"Cluster size: {len(cluster)}, volume: {summary['volume']:g}, "
              f"conductance: {summary['conductance']:.4f}")
        print(f"Cluster: {summary['cluster']}")

    elif config.task == "spectral":
        with stage_timer("Spectral Clustering"):
            labels = spectral_cluster(
                graph, config.spectral.k, config.spectral.random_state
            )
        summary["labels"] = labels.tolist()
        summary["sizes"] = np.bincount(labels, minlength=config.spectral.k).tolist()
        print(f"Cluster sizes: {summary['sizes']}")

    else:
        sc = config.solver
        b = np.zeros(graph.number_of_vertices())
        b[sc.source] = 1.0
        b[sc.sink] = -1.0
        with stage_timer(f"Laplacian Solve ({sc.method})"):
            x = solve_laplacian(graph, b, sc.eps, sc.method, sc.max_iterations)
        summary["effective_resistance"] = float(x[sc.source] - x[sc.sink])
        summary["residual"] = float(np.linalg.norm(graph.laplacian() @ x - b))
        print(f"Effective resistance {sc.source}-{sc.sink}: "
              f"{summary['effective_resistance']:.6f} "
              f"(residual {summary['residual']:.3g})")

    return summary


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run a clustering or Laplacian solver task on a graph"
    )
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to run config JSON file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the task plan without running it",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Error: config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = config_from_json(config_path.read_text())
    except Exception:
        log.exception("Invalid config %s", config_path)
        sys.exit(1)

    print(f"Config hash: {run_config_hash(config)}")
    print(f"Graph:       {config.graph.path} ({config.graph.format})")
    print(f"Task:        {config.task}")

    if args.dry_run:
        if config.task == "acl":
            lc = config.local
            print(f"  ACL from vertex {lc.seed_vertex}: "
                  f"locality={lc.locality}, error={lc.error}")
        elif config.task == "local":
            lc = config.local
            print(f"  Local cluster from vertex {lc.seed_vertex}: "
                  f"target_volume={lc.target_volume}")
        elif config.task == "spectral":
            print(f"  Spectral clustering: k={config.spectral.k}, "
                  f"random_state={config.spectral.random_state}")
        else:
            sc = config.solver
            print(f"  Solve L x = e_{sc.source} - e_{sc.sink}: "
                  f"method={sc.method}, eps={sc.eps}, "
                  f"max_iterations={sc.max_iterations}")
        print("\n[dry-run] Config loaded successfully. Exiting.")
        return

    try:
        run_task(config)
    except Exception:
        log.exception("Task failed")
        sys.exit(1)


if __name__ == "__main__":
    main()

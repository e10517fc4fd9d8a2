"""Sweep sets: the lowest-conductance prefix of a vertex ordering."""

import logging

from stagkit.graph.graph import Graph
from stagkit.graph.local import LocalGraph
from stagkit.graph.sparse import column_entries

log = logging.getLogger(__name__)


def sweep_set_conductance(graph: LocalGraph, vector) -> list[int]:
    """Find the sweep set of a vector with minimum conductance.

    The support of ``vector`` is sorted by value, largest first (ties broken
    by vertex index), and each prefix S_i of the ordering is scored by

        cut(S_i) / vol(S_i).

    The cut and volume are updated incrementally as each vertex is added, so
    only neighbourhoods of support vertices are queried. The vector is used
    as given: to sweep over p / degree, normalise before calling.

    The denominator is vol(S) rather than min(vol(S), vol(V \\ S)), since a
    LocalGraph does not know its total volume. This is only a conductance
    when the support volume is at most half the graph volume. Callers must
    ensure that holds; otherwise the sweep may return a degenerate set such
    as the whole support.

    Args:
        graph: Any LocalGraph.
        vector: Single-column sparse matrix.

    Returns:
        The shortest prefix achieving the minimum, as a list of vertex
        indices in sweep order. Empty if the vector has no support or every
        prefix has zero volume.
    """
    entries = column_entries(vector)
    order = sorted(entries, key=lambda v: (-entries[v], v))

    in_set: set[int] = set()
    cut = 0.0
    volume = 0.0
    best_conductance = float("inf")
    best_length = 0

    for i, v in enumerate(order, start=1):
        volume += graph.degree(v)
        for e in graph.neighbors(v):
            if e.v2 == v:
                continue
            if e.v2 in in_set:
                cut -= e.weight
            else:
                cut += e.weight
        in_set.add(v)

        if volume <= 0:
            continue
        phi = cut / volume
        if phi < best_conductance:
            best_conductance = phi
            best_length = i

    log.debug(
        "Sweep over %d vertices: best prefix %d, conductance %g",
        len(order),
        best_length,
        best_conductance,
    )
    return order[:best_length]


def conductance(graph: Graph, vertices) -> float:
    """Conductance cut(S) / min(vol(S), vol(V \\ S)) of a vertex set.

    Returns ``inf`` when either side has zero volume.
    """
    members = set(vertices)
    cut = 0.0
    volume = 0.0
    for v in members:
        volume += graph.degree(v)
        for e in graph.neighbors(v):
            if e.v2 not in members:
                cut += e.weight
    denominator = min(volume, graph.total_volume() - volume)
    if denominator <= 0:
        return float("inf")
    return cut / denominator

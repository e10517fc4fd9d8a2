"""Graphs: sparse utilities, the Graph object, LocalGraph, constructors, I/O."""

from stagkit.graph.edge import Edge
from stagkit.graph.generators import (
    barbell_graph,
    build_probability_matrix,
    complete_graph,
    cycle_graph,
    path_graph,
    sample_adjacency,
    sbm,
    star_graph,
)
from stagkit.graph.graph import AsymmetricAdjacencyError, Graph
from stagkit.graph.graphio import (
    GraphFormatError,
    adjacencylist_to_edgelist,
    edgelist_to_adjacencylist,
    load_adjacencylist,
    load_edgelist,
    load_graph,
    load_npz,
    save_adjacencylist,
    save_edgelist,
    save_npz,
)
from stagkit.graph.local import LocalGraph
from stagkit.graph.sparse import (
    column_entries,
    inner_indices,
    is_symmetric,
    outer_starts,
    sparse_column,
    to_csr,
    values,
)

__all__ = [
    "AsymmetricAdjacencyError",
    "Edge",
    "Graph",
    "GraphFormatError",
    "LocalGraph",
    "adjacencylist_to_edgelist",
    "barbell_graph",
    "build_probability_matrix",
    "column_entries",
    "complete_graph",
    "cycle_graph",
    "edgelist_to_adjacencylist",
    "inner_indices",
    "is_symmetric",
    "load_adjacencylist",
    "load_edgelist",
    "load_graph",
    "load_npz",
    "outer_starts",
    "path_graph",
    "sample_adjacency",
    "save_adjacencylist",
    "save_edgelist",
    "save_npz",
    "sbm",
    "sparse_column",
    "star_graph",
    "to_csr",
    "values",
]

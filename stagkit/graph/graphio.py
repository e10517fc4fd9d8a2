"""Reading and writing graphs to disk.

Two text formats are supported.

Edgelist: one edge per line, as ``u, v, w`` / ``u, v`` / ``u v w`` / ``u v``.
A missing weight means 1. Each edge is stored in both directions.

Adjacencylist: one vertex per line, as ``u: v1 w1 v2 w2 ...``. Every stored
entry of the adjacency matrix appears, so each edge appears twice.

In both formats, blank lines and lines starting with ``#`` or ``//`` are
ignored. Graphs can also be stored in binary form with :func:`save_npz`.
"""

import logging
import re
from pathlib import Path

import numpy as np
import scipy.sparse

from stagkit.graph.graph import Graph

log = logging.getLogger(__name__)

_SEPARATOR = re.compile(r"\s*,\s*|\s+")


class GraphFormatError(ValueError):
    """Raised when a graph file cannot be parsed."""


def _content_lines(path: Path):
    """Yield (line_number, stripped_line) for every non-comment line."""
    with open(path) as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.strip()
            if not line or line.startswith("#") or line.startswith("//"):
                continue
            yield lineno, line


def _build_graph(rows, cols, weights, n: int | None = None) -> Graph:
    rows = np.asarray(rows, dtype=np.int64)
    cols = np.asarray(cols, dtype=np.int64)
    weights = np.asarray(weights, dtype=np.float64)
    if n is None:
        n = int(max(rows.max(), cols.max())) + 1 if len(rows) else 0
    # Duplicate (u, v) entries are summed.
    adj = scipy.sparse.csr_matrix((weights, (rows, cols)), shape=(n, n))
    return Graph(adj)


def parse_edgelist_line(line: str) -> tuple[int, int, float]:
    """Parse one content line of an edgelist file.

    Raises:
        ValueError: If the line does not hold two integers and an optional
            float.
    """
    tokens = [t for t in _SEPARATOR.split(line.strip()) if t]
    if len(tokens) not in (2, 3):
        raise ValueError(f"expected 2 or 3 fields, got {len(tokens)}")
    u, v = int(tokens[0]), int(tokens[1])
    weight = float(tokens[2]) if len(tokens) == 3 else 1.0
    if u < 0 or v < 0:
        raise ValueError(f"vertex indices must be non-negative, got {u}, {v}")
    return u, v, weight


def parse_adjacencylist_line(line: str) -> tuple[int, list[tuple[int, float]]]:
    """Parse one content line of an adjacencylist file.

    Returns:
        (vertex, [(neighbour, weight), ...]).
    """
    head, sep, rest = line.partition(":")
    if not sep:
        raise ValueError("missing ':' after the vertex index")
    u = int(head.strip())
    tokens = rest.split()
    if len(tokens) % 2 != 0:
        raise ValueError("neighbours must be given as 'vertex weight' pairs")
    neighbours = [
        (int(tokens[i]), float(tokens[i + 1])) for i in range(0, len(tokens), 2)
    ]
    if u < 0 or any(v < 0 for v, _ in neighbours):
        raise ValueError("vertex indices must be non-negative")
    return u, neighbours


def load_edgelist(path: str | Path) -> Graph:
    """Load a graph from an edgelist file.

    Args:
        path: Edgelist file.

    Returns:
        Graph on max vertex index + 1 vertices.

    Raises:
        FileNotFoundError: If the file does not exist.
        GraphFormatError: If a content line cannot be parsed.
    """
    path = Path(path)
    rows: list[int] = []
    cols: list[int] = []
    weights: list[float] = []
    for lineno, line in _content_lines(path):
        try:
            u, v, w = parse_edgelist_line(line)
        except ValueError as e:
            raise GraphFormatError(f"{path}:{lineno}: {e}: {line!r}") from e
        rows.append(u)
        cols.append(v)
        weights.append(w)
        if u != v:
            rows.append(v)
            cols.append(u)
            weights.append(w)

    graph = _build_graph(rows, cols, weights)
    log.info(
        "Loaded edgelist %s: n=%d, edges=%d",
        path,
        graph.number_of_vertices(),
        graph.number_of_edges(),
    )
    return graph


def _undirected_entries(graph: Graph):
    """Yield (u, v, w) once per undirected edge, with u <= v."""
    coo = scipy.sparse.triu(graph.adjacency(), format="coo")
    order = np.lexsort((coo.col, coo.row))
    for i in order:
        yield int(coo.row[i]), int(coo.col[i]), float(coo.data[i])


def save_edgelist(graph: Graph, path: str | Path) -> None:
    """Save a graph as an edgelist file, one line per undirected edge."""
    path = Path(path)
    with open(path, "w") as f:
        f.write("# This file was automatically generated by stagkit\n")
        f.write("# <source>, <destination>, <weight>\n")
        for u, v, w in _undirected_entries(graph):
            f.write(f"{u}, {v}, {w!r}\n")
    log.info("Saved edgelist %s", path)


def load_adjacencylist(path: str | Path) -> Graph:
    """Load a graph from an adjacencylist file.

    Raises:
        FileNotFoundError: If the file does not exist.
        GraphFormatError: If a content line cannot be parsed.
    """
    path = Path(path)
    rows: list[int] = []
    cols: list[int] = []
    weights: list[float] = []
    max_vertex = -1
    for lineno, line in _content_lines(path):
        try:
            u, neighbours = parse_adjacencylist_line(line)
        except ValueError as e:
            raise GraphFormatError(f"{path}:{lineno}: {e}: {line!r}") from e
        max_vertex = max(max_vertex, u)
        for v, w in neighbours:
            rows.append(u)
            cols.append(v)
            weights.append(w)
            max_vertex = max(max_vertex, v)

    graph = _build_graph(rows, cols, weights, n=max_vertex + 1)
    log.info(
        "Loaded adjacencylist %s: n=%d, edges=%d",
        path,
        graph.number_of_vertices(),
        graph.number_of_edges(),
    )
    return graph


def save_adjacencylist(graph: Graph, path: str | Path) -> None:
    """Save a graph as an adjacencylist file, one line per vertex."""
    path = Path(path)
    with open(path, "w") as f:
        f.write("# This file was automatically generated by stagkit\n")
        f.write("# <vertex>: <neighbour> <weight> <neighbour> <weight> ...\n")
        for u in range(graph.number_of_vertices()):
            pairs = " ".join(f"{e.v2} {e.weight!r}" for e in graph.neighbors(u))
            f.write(f"{u}: {pairs}\n" if pairs else f"{u}:\n")
    log.info("Saved adjacencylist %s", path)


def edgelist_to_adjacencylist(
    edgelist_path: str | Path, adjacencylist_path: str | Path
) -> None:
    """Convert an edgelist file to an adjacencylist file."""
    save_adjacencylist(load_edgelist(edgelist_path), adjacencylist_path)


def adjacencylist_to_edgelist(
    adjacencylist_path: str | Path, edgelist_path: str | Path
) -> None:
    """Convert an adjacencylist file to an edgelist file."""
    save_edgelist(load_adjacencylist(adjacencylist_path), edgelist_path)


def save_npz(graph: Graph, path: str | Path) -> None:
    """Save the adjacency matrix of a graph with scipy's compressed npz format."""
    scipy.sparse.save_npz(str(path), graph.adjacency())
    log.info("Saved graph %s", path)


def load_npz(path: str | Path) -> Graph:
    """Load a graph saved by :func:`save_npz`."""
    graph = Graph(scipy.sparse.load_npz(str(path)))
    log.info("Loaded graph %s: n=%d", path, graph.number_of_vertices())
    return graph


def load_graph(path: str | Path, fmt: str) -> Graph:
    """Load a graph in one of the formats "edgelist", "adjacencylist", "npz"."""
    loaders = {
        "edgelist": load_edgelist,
        "adjacencylist": load_adjacencylist,
        "npz": load_npz,
    }
    if fmt not in loaders:
        raise ValueError(f"unknown graph format {fmt!r}, expected one of {list(loaders)}")
    return loaders[fmt](path)

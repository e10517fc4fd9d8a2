"""The LocalGraph capability: neighbourhood queries without a global view.

Local algorithms (approximate PageRank, sweep sets) only ever ask for the
degree and neighbours of individual vertices. Anything implementing these
four methods can be clustered, including graphs that are generated on the
fly or read lazily from disk.
"""

from abc import ABC, abstractmethod

from stagkit.graph.edge import Edge


class LocalGraph(ABC):
    """Abstract graph supporting per-vertex degree and neighbour queries.

    Implementations must accept any non-negative vertex index. A vertex the
    implementation does not know about has degree 0 and no neighbours; it is
    never an error to ask.
    """

    @abstractmethod
    def degree(self, v: int) -> float:
        """Weighted degree of vertex v."""

    @abstractmethod
    def degree_unweighted(self, v: int) -> int:
        """Number of edges incident to vertex v."""

    @abstractmethod
    def neighbors(self, v: int) -> list[Edge]:
        """Edges incident to v, each with ``v1 == v``."""

    @abstractmethod
    def neighbors_unweighted(self, v: int) -> list[int]:
        """Indices of the vertices adjacent to v."""

    def vertices_degree(self, vertices) -> list[float]:
        """Weighted degrees of several vertices."""
        return [self.degree(v) for v in vertices]

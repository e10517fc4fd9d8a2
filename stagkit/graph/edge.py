"""Weighted edge value type."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Edge:
    """A directed view of one undirected edge, as read from a vertex's row.

    Equality is structural: two edges are equal when the source, destination
    and weight all match.
    """

    v1: int  # source vertex
    v2: int  # destination vertex
    weight: float

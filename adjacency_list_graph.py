"""
Concrete directed, weighted graph implementation.

Implements the Graph interface using a simple adjacency-list representation.
"""

from numbers import Real
from typing import Dict, Iterator, Tuple
import math

from errors import UnknownNodeError
from graph import Graph
from node_ids import NodeId


class AdjacencyListGraph(Graph):
    """
    Directed, weighted graph backed by a node -> (neighbor -> weight) mapping.

    Negative weights are stored as given; the engine rejects such a graph
    before any traversal starts.
    """

    def __init__(self) -> None:
        self._adj: Dict[NodeId, Dict[NodeId, float]] = {}
        self._negative_edges = 0

    # --- Construction API (builders/tests only, not part of Graph) ----------

    def add_node(self, node: NodeId) -> None:
        """Ensure node exists in the graph."""
        self._adj.setdefault(node, {})

    def add_edge(self, src: NodeId, dst: NodeId, weight: float) -> None:
        """
        Add or update a directed edge src -> dst with weight.
        Auto-adds nodes if they don't exist.
        """
        _check_weight(weight)
        self.add_node(src)
        self.add_node(dst)

        edges = self._adj[src]
        previous = edges.get(dst)
        if previous is not None and previous < 0:
            self._negative_edges -= 1
        if weight < 0:
            self._negative_edges += 1
        edges[dst] = weight

    def add_undirected_edge(self, a: NodeId, b: NodeId, weight: float) -> None:
        """Add a -> b and b -> a with the same weight."""
        self.add_edge(a, b, weight)
        self.add_edge(b, a, weight)

    # --- Graph interface -----------------------------------------------------

    def size(self) -> int:
        return len(self._adj)

    def keys(self) -> Iterator[NodeId]:
        return iter(self._adj)

    def neighbors(self, node: NodeId) -> Tuple[Tuple[NodeId, float], ...]:
        try:
            edges = self._adj[node]
        except KeyError:
            raise UnknownNodeError(node) from None
        return tuple(edges.items())

    def has_negative_edge(self) -> bool:
        return self._negative_edges > 0

    def __contains__(self, node: object) -> bool:
        return node in self._adj


def _check_weight(weight: float) -> None:
    if isinstance(weight, bool) or not isinstance(weight, Real):
        raise ValueError(f"Edge weight must be a real number, got {weight!r}")
    if math.isnan(weight):
        raise ValueError("Edge weight must not be NaN")

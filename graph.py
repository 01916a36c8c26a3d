"""
Directed, weighted graph abstraction for the shortest-path engine.

Nodes are opaque hashable identifiers.
Edges are directed: u -> v with a non-negative numeric weight.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Sequence, Tuple

from node_ids import NodeId


class Graph(ABC):
    """Read-only view of a directed, weighted graph."""

    @abstractmethod
    def size(self) -> int:
        """Number of registered nodes."""
        raise NotImplementedError

    @abstractmethod
    def keys(self) -> Iterator[NodeId]:
        """
        Iterate over all node identifiers.

        Every call starts a fresh pass; the order is stable for one graph
        instance so repeated scans are deterministic.
        """
        raise NotImplementedError

    @abstractmethod
    def neighbors(self, node: NodeId) -> Sequence[Tuple[NodeId, float]]:
        """
        Outgoing (neighbor, weight) pairs for a node, in insertion order.

        Raises UnknownNodeError if the node was never registered.
        """
        raise NotImplementedError

    @abstractmethod
    def has_negative_edge(self) -> bool:
        """True if any stored weight is below zero."""
        raise NotImplementedError

    def __contains__(self, node: object) -> bool:
        return any(node == key for key in self.keys())

    def __len__(self) -> int:
        return self.size()

"""Exceptions raised by the shortest-path engine and its graph stores."""

from typing import Hashable


class ShortestPathError(Exception):
    """Base exception for shortest-path computations."""


class InvalidGraphError(ShortestPathError, ValueError):
    """Raised when a graph is empty or carries a negative edge weight."""


class UnknownNodeError(ShortestPathError, KeyError):
    """Raised when a node identifier is not registered in the graph."""

    def __init__(self, node: Hashable) -> None:
        super().__init__(node)
        self.node = node

    def __str__(self) -> str:
        return f"unknown node: {self.node!r}"


class EmptyFrontierError(ShortestPathError, IndexError):
    """Raised when popping from an empty frontier."""

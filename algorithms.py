"""
Algorithm interfaces for shortest-path computation.

Keeps the engine contract and its result types separate from the concrete
Dijkstra implementation and from whatever consumes its traces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Tuple
import math

from graph import Graph
from node_ids import NodeId

if TYPE_CHECKING:
    from tracing import CancelToken, TraceEvent, TraceResult


# Distance reported for targets that cannot be reached.
UNREACHABLE = math.inf


class EngineState(Enum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    TERMINATED = "terminated"


class Outcome(Enum):
    """
    How a run terminated.

    FOUND: the target was settled with a finite distance.
    EXHAUSTED: the frontier ran dry (or only unreachable nodes remained)
        before the target was reached.
    CANCELLED: a traced run was stopped through its cancel token.
    """

    FOUND = "found"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PathResult:
    """
    Final answer of one run.

    Unpacks as (distance, path) so callers can write
    ``distance, path = engine.shortest_path(...)``.
    """

    distance: float
    path: Tuple[NodeId, ...]
    outcome: Outcome

    @property
    def found(self) -> bool:
        return self.outcome is Outcome.FOUND

    def __iter__(self) -> Iterator[object]:
        yield self.distance
        yield self.path

    @classmethod
    def exhausted(cls) -> "PathResult":
        return cls(UNREACHABLE, (), Outcome.EXHAUSTED)

    @classmethod
    def cancelled(cls) -> "PathResult":
        return cls(UNREACHABLE, (), Outcome.CANCELLED)


class ShortestPathEngine(ABC):
    """
    Interface for single-source, single-target shortest-path computation.
    """

    @abstractmethod
    def shortest_path(self, graph: Graph, source: NodeId, target: NodeId) -> PathResult:
        """
        Compute the cheapest source -> target path.

        Returns:
            PathResult with outcome FOUND, or EXHAUSTED with UNREACHABLE
            distance and an empty path.
        """
        raise NotImplementedError

    @abstractmethod
    def shortest_path_traced(
        self,
        graph: Graph,
        source: NodeId,
        target: NodeId,
        cancel: Optional["CancelToken"] = None,
        on_event: Optional[Callable[["TraceEvent"], None]] = None,
    ) -> "TraceResult":
        """
        Same computation, also recording the ordered event trace.

        Returns:
            TraceResult holding every emitted event and the final PathResult
            (which may carry outcome CANCELLED).
        """
        raise NotImplementedError

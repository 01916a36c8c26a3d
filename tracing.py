"""
Trace events emitted by traced shortest-path runs.

A trace is a finite, append-only sequence of events in the exact order the
engine discovered them. It carries no timing; a renderer replaying it
decides its own pacing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union
import threading

from algorithms import Outcome, PathResult
from config import PathUpdateMode, TraceConfig
from node_ids import NodeId


@dataclass(frozen=True)
class NodeFinalized:
    """A node was popped from the frontier with its final distance."""

    index: int
    iteration: int
    node: NodeId
    distance: float


@dataclass(frozen=True)
class EdgeRelaxed:
    """source -> target improved the best known distance to target."""

    index: int
    iteration: int
    source: NodeId
    target: NodeId
    distance: float


@dataclass(frozen=True)
class PathUpdated:
    """Best known path from the run's source to target."""

    index: int
    iteration: int
    target: NodeId
    path: Tuple[NodeId, ...]


TraceEvent = Union[NodeFinalized, EdgeRelaxed, PathUpdated]


class CancelToken:
    """Cooperative cancellation flag, safe to set from another thread."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class TraceRecorder:
    """
    Collects events for one run, numbering them as they are appended.

    The optional listener sees each event right after it is recorded.
    """

    def __init__(
        self,
        config: Optional[TraceConfig] = None,
        listener: Optional[Callable[[TraceEvent], None]] = None,
    ) -> None:
        self.config = config or TraceConfig()
        self._listener = listener
        self._events: List[TraceEvent] = []

    @property
    def every_node_paths(self) -> bool:
        return self.config.path_updates is PathUpdateMode.EVERY_NODE

    @property
    def events(self) -> Tuple[TraceEvent, ...]:
        return tuple(self._events)

    def node_finalized(self, iteration: int, node: NodeId, distance: float) -> None:
        self._append(NodeFinalized(len(self._events), iteration, node, distance))

    def edge_relaxed(self, iteration: int, source: NodeId, target: NodeId, distance: float) -> None:
        self._append(EdgeRelaxed(len(self._events), iteration, source, target, distance))

    def path_updated(self, iteration: int, target: NodeId, path: Tuple[NodeId, ...]) -> None:
        self._append(PathUpdated(len(self._events), iteration, target, tuple(path)))

    def _append(self, event: TraceEvent) -> None:
        self._events.append(event)
        if self._listener is not None:
            self._listener(event)


@dataclass(frozen=True)
class TraceResult:
    events: Tuple[TraceEvent, ...]
    result: PathResult

    @property
    def outcome(self) -> Outcome:
        return self.result.outcome

    @property
    def cancelled(self) -> bool:
        return self.result.outcome is Outcome.CANCELLED

    def finalized_nodes(self) -> List[NodeId]:
        return [e.node for e in self.events if isinstance(e, NodeFinalized)]

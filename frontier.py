"""
Priority frontier used by the Dijkstra engine to pick the next node to settle.

Decrease-key is expressed as remove_exact(old, node) followed by
insert(new, node) so that any min-priority container can back the engine.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Tuple
import heapq
import itertools

from errors import EmptyFrontierError
from node_ids import NodeId


class Frontier(ABC):
    """Min-priority container over (priority, node) entries."""

    @abstractmethod
    def insert(self, priority: float, node: NodeId) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove_exact(self, priority: float, node: NodeId) -> None:
        """
        Remove one entry matching both priority and node.

        A missing entry is not an error; the call is then a no-op.
        """
        raise NotImplementedError

    @abstractmethod
    def pop_min(self) -> Tuple[float, NodeId]:
        """
        Remove and return the entry with the smallest priority.

        Raises EmptyFrontierError when the frontier is empty.
        """
        raise NotImplementedError

    @abstractmethod
    def size(self) -> int:
        raise NotImplementedError

    def is_empty(self) -> bool:
        return self.size() == 0

    def __len__(self) -> int:
        return self.size()


class HeapFrontier(Frontier):
    """
    Binary-heap frontier with lazy deletion.

    remove_exact only decrements a live count for (priority, node); the heap
    entry stays behind and is skipped when it surfaces. Ties are broken by
    insertion counter. The heap is rebuilt once dead entries outnumber live ones.
    """

    def __init__(self) -> None:
        self._heap: List[Tuple[float, int, NodeId]] = []
        self._live: Dict[Tuple[float, NodeId], int] = {}
        self._size = 0
        self._counter = itertools.count()

    def insert(self, priority: float, node: NodeId) -> None:
        heapq.heappush(self._heap, (priority, next(self._counter), node))
        key = (priority, node)
        self._live[key] = self._live.get(key, 0) + 1
        self._size += 1

    def remove_exact(self, priority: float, node: NodeId) -> None:
        key = (priority, node)
        if not self._take(key):
            return
        if len(self._heap) > 2 * self._size + 16:
            self._compact()

    def pop_min(self) -> Tuple[float, NodeId]:
        while self._heap:
            priority, _, node = heapq.heappop(self._heap)
            if self._take((priority, node)):
                return priority, node
        raise EmptyFrontierError("pop from an empty frontier")

    def size(self) -> int:
        return self._size

    def _take(self, key: Tuple[float, NodeId]) -> bool:
        count = self._live.get(key, 0)
        if count == 0:
            return False
        if count == 1:
            del self._live[key]
        else:
            self._live[key] = count - 1
        self._size -= 1
        return True

    def _compact(self) -> None:
        # Keep the earliest heap entries for each live key, in heap order.
        remaining = dict(self._live)
        kept: List[Tuple[float, int, NodeId]] = []
        for entry in sorted(self._heap):
            key = (entry[0], entry[2])
            if remaining.get(key, 0) > 0:
                remaining[key] -= 1
                kept.append(entry)
        self._heap = kept  # sorted lists satisfy the heap invariant

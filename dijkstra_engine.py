"""
Frontier-driven Dijkstra engine.

Computes single-source, single-target shortest paths over any Graph
implementation that satisfies the Graph interface, optionally recording the
ordered trace of settled nodes, relaxed edges and path updates.
"""

from typing import Callable, Dict, List, Optional, Set, Tuple

from algorithms import UNREACHABLE, EngineState, Outcome, PathResult, ShortestPathEngine
from config import TraceConfig
from errors import InvalidGraphError, UnknownNodeError
from frontier import Frontier, HeapFrontier
from graph import Graph
from node_ids import NodeId
from tracing import CancelToken, TraceEvent, TraceRecorder, TraceResult


class DijkstraRun:
    """
    State of one label-setting run: UNINITIALIZED -> RUNNING -> TERMINATED.

    The distance, predecessor and frontier state belong to this run alone
    and are dropped with it.
    """

    def __init__(
        self,
        graph: Graph,
        source: NodeId,
        target: NodeId,
        frontier_factory: Callable[[], Frontier] = HeapFrontier,
        recorder: Optional[TraceRecorder] = None,
    ) -> None:
        self.graph = graph
        self.source = source
        self.target = target
        self.state = EngineState.UNINITIALIZED
        self.result: Optional[PathResult] = None

        self._frontier_factory = frontier_factory
        self._recorder = recorder
        self._frontier: Optional[Frontier] = None
        self._dist: Dict[NodeId, float] = {}
        self._prev: Dict[NodeId, Optional[NodeId]] = {}
        self._settled: Set[NodeId] = set()

        # Instrumentation counters.
        self.iterations = 0
        self.edges_examined = 0
        self.relaxed = 0
        self.frontier_pops = 0
        self.frontier_inserts = 0
        self.frontier_removals = 0

    def initialise(self) -> None:
        """
        Validate the graph and seed the frontier with every node.

        Validation happens before the frontier is created, so a rejected
        graph never reaches a frontier operation.
        """
        if self.state is not EngineState.UNINITIALIZED:
            raise RuntimeError(f"Run already {self.state.value}")

        _validate(self.graph, self.source, self.target)

        for node in self.graph.keys():
            self._dist[node] = UNREACHABLE
            self._prev[node] = None
        self._dist[self.source] = 0

        self._frontier = self._frontier_factory()
        for node, distance in self._dist.items():
            self._frontier.insert(distance, node)
            self.frontier_inserts += 1

        self.state = EngineState.RUNNING

    def step(self) -> Optional[PathResult]:
        """
        Run one outer iteration.

        Returns the final PathResult once the run terminates, else None.
        """
        if self.state is not EngineState.RUNNING:
            raise RuntimeError(f"Run is {self.state.value}, not running")
        frontier = self._frontier
        assert frontier is not None

        if frontier.is_empty():
            return self._terminate(PathResult.exhausted())

        d_u, u = frontier.pop_min()
        self.frontier_pops += 1

        # Skip outdated entries
        if u in self._settled or d_u != self._dist[u]:
            return None

        self._settled.add(u)
        self.iterations += 1
        recorder = self._recorder
        if recorder is not None:
            recorder.node_finalized(self.iterations, u, d_u)

        if u == self.target:
            if d_u == UNREACHABLE:
                return self._terminate(PathResult.exhausted())
            path = self._reconstruct_path(u)
            if recorder is not None:
                recorder.path_updated(self.iterations, u, path)
            return self._terminate(PathResult(d_u, path, Outcome.FOUND))

        if d_u == UNREACHABLE:
            # Nothing is reachable through u; avoid sentinel arithmetic.
            return None

        if recorder is not None and recorder.every_node_paths:
            recorder.path_updated(self.iterations, u, self._reconstruct_path(u))

        self._relax_from(u, d_u)
        return None

    def cancel(self) -> PathResult:
        return self._terminate(PathResult.cancelled())

    def _relax_from(self, u: NodeId, d_u: float) -> None:
        frontier = self._frontier
        assert frontier is not None
        for v, w in self.graph.neighbors(u):
            self.edges_examined += 1
            try:
                d_v = self._dist[v]
            except KeyError:
                raise UnknownNodeError(v) from None

            alt = d_u + w
            if d_v > alt:
                frontier.remove_exact(d_v, v)
                frontier.insert(alt, v)
                self.frontier_removals += 1
                self.frontier_inserts += 1
                self._dist[v] = alt
                self._prev[v] = u
                self.relaxed += 1
                if self._recorder is not None:
                    self._recorder.edge_relaxed(self.iterations, u, v, alt)

    def _reconstruct_path(self, node: NodeId) -> Tuple[NodeId, ...]:
        path: List[NodeId] = [node]
        current = self._prev[node]
        while current is not None:
            path.append(current)
            current = self._prev[current]
        path.reverse()
        return tuple(path)

    def _terminate(self, result: PathResult) -> PathResult:
        self.state = EngineState.TERMINATED
        self.result = result
        return result


def _validate(graph: Graph, source: NodeId, target: NodeId) -> None:
    if graph.size() == 0:
        raise InvalidGraphError("Graph has no nodes")
    if graph.has_negative_edge():
        raise InvalidGraphError("Graph has a negative edge weight")
    if source not in graph:
        raise UnknownNodeError(source)
    if target not in graph:
        raise UnknownNodeError(target)


class SimpleDijkstraEngine(ShortestPathEngine):
    """
    Single-target Dijkstra over a remove-then-reinsert frontier.

    Complexity:
        O((V + E) log V) with the default HeapFrontier.

    The last_* counters describe the most recent call on this instance.
    """

    def __init__(
        self,
        frontier_factory: Callable[[], Frontier] = HeapFrontier,
        config: Optional[TraceConfig] = None,
    ) -> None:
        self._frontier_factory = frontier_factory
        self.config = config or TraceConfig()
        self._reset_counters()

    def shortest_path(self, graph: Graph, source: NodeId, target: NodeId) -> PathResult:
        run = DijkstraRun(graph, source, target, self._frontier_factory)
        return self._drive(run, cancel=None)

    def shortest_path_traced(
        self,
        graph: Graph,
        source: NodeId,
        target: NodeId,
        cancel: Optional[CancelToken] = None,
        on_event: Optional[Callable[[TraceEvent], None]] = None,
    ) -> TraceResult:
        recorder = TraceRecorder(self.config, listener=on_event)
        run = DijkstraRun(graph, source, target, self._frontier_factory, recorder)
        result = self._drive(run, cancel)
        return TraceResult(recorder.events, result)

    def _drive(self, run: DijkstraRun, cancel: Optional[CancelToken]) -> PathResult:
        self._reset_counters()
        try:
            run.initialise()
            while run.state is EngineState.RUNNING:
                if cancel is not None and cancel.cancelled:
                    run.cancel()
                    break
                run.step()
        finally:
            self._collect_counters(run)
        assert run.result is not None
        return run.result

    def _reset_counters(self) -> None:
        self.last_iterations = 0
        self.last_edges_examined = 0
        self.last_relaxed = 0
        self.last_frontier_pops = 0
        self.last_frontier_inserts = 0
        self.last_frontier_removals = 0

    def _collect_counters(self, run: DijkstraRun) -> None:
        self.last_iterations = run.iterations
        self.last_edges_examined = run.edges_examined
        self.last_relaxed = run.relaxed
        self.last_frontier_pops = run.frontier_pops
        self.last_frontier_inserts = run.frontier_inserts
        self.last_frontier_removals = run.frontier_removals


def shortest_path(graph: Graph, source: NodeId, target: NodeId) -> Tuple[float, List[NodeId]]:
    """
    Cheapest source -> target distance and path.

    An unreachable target yields (UNREACHABLE, []).
    """
    result = SimpleDijkstraEngine().shortest_path(graph, source, target)
    return result.distance, list(result.path)


def shortest_path_traced(
    graph: Graph,
    source: NodeId,
    target: NodeId,
    cancel_token: Optional[CancelToken] = None,
    config: Optional[TraceConfig] = None,
) -> TraceResult:
    """Traced variant of shortest_path; see SimpleDijkstraEngine.shortest_path_traced."""
    return SimpleDijkstraEngine(config=config).shortest_path_traced(graph, source, target, cancel_token)

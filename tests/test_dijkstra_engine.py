"""
Unit tests for SimpleDijkstraEngine using AdjacencyListGraph.
"""

from dataclasses import dataclass
from typing import Dict, List
import math

import pytest

from adjacency_list_graph import AdjacencyListGraph
from algorithms import UNREACHABLE, EngineState, Outcome, PathResult
from dijkstra_engine import DijkstraRun, SimpleDijkstraEngine, shortest_path
from errors import InvalidGraphError, UnknownNodeError
from frontier import HeapFrontier
from graph_builder import build_random_graph
from node_ids import pack_cell


@dataclass(frozen=True)
class DummyNode:
    """
    Minimal hashable node identifier for Dijkstra tests.
    """
    _id: str


def _abcd_graph() -> AdjacencyListGraph:
    # A -> B (1), A -> C (4), B -> C (2), B -> D (5), C -> D (1), isolated E
    g = AdjacencyListGraph()
    g.add_edge("A", "B", 1)
    g.add_edge("A", "C", 4)
    g.add_edge("B", "C", 2)
    g.add_edge("B", "D", 5)
    g.add_edge("C", "D", 1)
    g.add_node("E")
    return g


def _brute_force_distance(g: AdjacencyListGraph, source, target) -> float:
    """Minimum weight over all simple source -> target paths."""
    best = math.inf

    def walk(node, cost, seen):
        nonlocal best
        if node == target:
            best = min(best, cost)
            return
        for nbr, w in g.neighbors(node):
            if nbr not in seen:
                walk(nbr, cost + w, seen | {nbr})

    walk(source, 0, {source})
    return best


def _path_weight(g: AdjacencyListGraph, path: List) -> float:
    total = 0
    for u, v in zip(path, path[1:]):
        weights: Dict = dict(g.neighbors(u))
        assert v in weights, f"{u} -> {v} is not an edge"
        total += weights[v]
    return total


class CountingFrontier(HeapFrontier):
    """HeapFrontier that records how many operations it served."""

    created = 0

    def __init__(self) -> None:
        super().__init__()
        type(self).created += 1
        self.ops = 0

    def insert(self, priority, node):
        self.ops += 1
        super().insert(priority, node)

    def remove_exact(self, priority, node):
        self.ops += 1
        super().remove_exact(priority, node)


def test_dijkstra_basic_paths():
    g = _abcd_graph()
    engine = SimpleDijkstraEngine()

    result = engine.shortest_path(g, "A", "D")
    assert result.outcome is Outcome.FOUND
    assert result.distance == 4
    assert result.path == ("A", "B", "C", "D")

    distance, path = engine.shortest_path(g, "A", "C")
    assert distance == 3
    assert path == ("A", "B", "C")


def test_module_level_shortest_path_returns_tuple():
    distance, path = shortest_path(_abcd_graph(), "A", "D")
    assert distance == 4
    assert path == ["A", "B", "C", "D"]


def test_dijkstra_unreachable_target_is_exhausted():
    g = _abcd_graph()
    result = SimpleDijkstraEngine().shortest_path(g, "A", "E")

    assert result.outcome is Outcome.EXHAUSTED
    assert result.distance == UNREACHABLE
    assert result.path == ()
    assert not result.found


def test_edges_are_directed():
    g = _abcd_graph()
    result = SimpleDijkstraEngine().shortest_path(g, "D", "A")
    assert result == PathResult.exhausted()


def test_source_equals_target():
    g = _abcd_graph()
    result = SimpleDijkstraEngine().shortest_path(g, "B", "B")
    assert result == PathResult(0, ("B",), Outcome.FOUND)


def test_zero_weight_edges():
    g = AdjacencyListGraph()
    g.add_edge("A", "B", 0)
    g.add_edge("B", "C", 0)
    g.add_edge("A", "C", 1)

    assert shortest_path(g, "A", "C") == (0, ["A", "B", "C"])


def test_dataclass_and_packed_identifiers():
    a, b, c = DummyNode("A"), DummyNode("B"), DummyNode("C")
    g = AdjacencyListGraph()
    g.add_edge(a, b, 1.0)
    g.add_edge(a, c, 4.0)
    g.add_edge(b, c, 2.0)
    assert shortest_path(g, a, c) == (3.0, [a, b, c])

    p = [pack_cell(x, 0) for x in range(3)]
    g = AdjacencyListGraph()
    g.add_edge(p[0], p[1], 1)
    g.add_edge(p[1], p[2], 1)
    assert shortest_path(g, p[0], p[2]) == (2, p)


def test_negative_edge_rejected_before_frontier_use():
    g = _abcd_graph()
    g.add_edge("C", "B", -1)

    CountingFrontier.created = 0
    engine = SimpleDijkstraEngine(frontier_factory=CountingFrontier)
    with pytest.raises(InvalidGraphError):
        engine.shortest_path(g, "A", "D")
    assert CountingFrontier.created == 0
    assert engine.last_frontier_inserts == 0


def test_empty_graph_rejected():
    with pytest.raises(InvalidGraphError):
        SimpleDijkstraEngine().shortest_path(AdjacencyListGraph(), "A", "B")


@pytest.mark.parametrize("source, target", [("Z", "A"), ("A", "Z")])
def test_unknown_source_or_target(source, target):
    with pytest.raises(UnknownNodeError):
        SimpleDijkstraEngine().shortest_path(_abcd_graph(), source, target)


def test_run_state_machine():
    g = _abcd_graph()
    run = DijkstraRun(g, "A", "C")
    assert run.state is EngineState.UNINITIALIZED

    run.initialise()
    assert run.state is EngineState.RUNNING

    result = None
    while result is None:
        result = run.step()
    assert run.state is EngineState.TERMINATED
    assert run.result == result == PathResult(3, ("A", "B", "C"), Outcome.FOUND)

    with pytest.raises(RuntimeError):
        run.step()
    with pytest.raises(RuntimeError):
        run.initialise()


def test_instrumentation_counters():
    g = _abcd_graph()
    engine = SimpleDijkstraEngine()
    engine.shortest_path(g, "A", "D")

    # A, B, C, D settled; relaxations A->B, A->C, B->C, B->D, C->D.
    assert engine.last_iterations == 4
    assert engine.last_relaxed == 5
    assert engine.last_frontier_removals == 5
    assert engine.last_frontier_inserts == g.size() + 5
    assert engine.last_edges_examined == 5


def test_idempotent_results():
    g = build_random_graph(30, 3, 9, seed=11)
    engine = SimpleDijkstraEngine()

    first = [engine.shortest_path(g, "n0", f"n{i}") for i in range(30)]
    second = [engine.shortest_path(g, "n0", f"n{i}") for i in range(30)]
    assert first == second


@pytest.mark.parametrize("seed", range(8))
def test_matches_brute_force_on_small_random_graphs(seed):
    g = build_random_graph(7, 2, 6, seed=seed)
    engine = SimpleDijkstraEngine()
    names = list(g.keys())

    for source in names:
        for target in names:
            result = engine.shortest_path(g, source, target)
            expected = _brute_force_distance(g, source, target)
            assert result.distance == expected
            if result.found:
                assert result.path[0] == source
                assert result.path[-1] == target
                assert _path_weight(g, list(result.path)) == result.distance
            else:
                assert result.path == ()


def test_shared_graph_is_not_mutated():
    g = _abcd_graph()
    before = {node: g.neighbors(node) for node in g.keys()}
    SimpleDijkstraEngine().shortest_path(g, "A", "D")
    assert {node: g.neighbors(node) for node in g.keys()} == before

"""
Tests for the grid compiler and the random graph generator.
"""

import math

import numpy as np
import pytest

from dijkstra_engine import shortest_path
from graph_builder import build_grid_graph, build_random_graph
from node_ids import pack_cell, unpack_cell


def test_grid_open_cells_become_nodes():
    grid = [
        [1, 1, -1],
        [1, -1, 1],
    ]
    g = build_grid_graph(grid)

    assert set(g.keys()) == {"0-0", "1-0", "0-1", "2-1"}
    # Walls never appear as neighbours; entering a cell costs its value.
    assert g.neighbors("0-0") == (("1-0", 1), ("0-1", 1))
    assert g.neighbors("2-1") == ()


def test_grid_shortest_path_avoids_walls_and_expensive_cells():
    grid = np.array(
        [
            [1, 1, 1, 1],
            [1, -1, 9, 1],
            [1, -1, 1, 1],
            [1, 1, 1, 1],
        ]
    )
    g = build_grid_graph(grid)

    distance, path = shortest_path(g, "0-0", "2-2")
    assert distance == 6
    assert path[0] == "0-0" and path[-1] == "2-2"
    assert "2-1" not in path
    assert "1-1" not in path and "1-2" not in path


def test_grid_with_packed_identifiers():
    g = build_grid_graph(np.ones((3, 3)), encoder=pack_cell)

    distance, path = shortest_path(g, pack_cell(0, 0), pack_cell(2, 2))
    assert distance == 4.0
    assert [unpack_cell(node) for node in path][-1] == (2, 2)
    assert len(path) == 5


def test_grid_diagonal_moves():
    g = build_grid_graph(np.ones((3, 3), dtype=int), diagonal=True)

    assert shortest_path(g, "0-0", "2-2") == (2, ["0-0", "1-1", "2-2"])


def test_grid_nan_is_wall_and_isolated_cell_is_unreachable():
    grid = np.array([[1.0, np.nan, 1.0]])
    g = build_grid_graph(grid)

    assert g.size() == 2
    distance, path = shortest_path(g, "0-0", "2-0")
    assert distance == math.inf
    assert path == []


def test_grid_weights_are_python_numbers():
    g = build_grid_graph(np.array([[2, 3]], dtype=np.int64))
    ((_, weight),) = g.neighbors("0-0")
    assert type(weight) is int


@pytest.mark.parametrize("grid", [[1, 2, 3], [[["x"]]], [["a", "b"]]])
def test_grid_rejects_bad_shapes_and_dtypes(grid):
    with pytest.raises(ValueError):
        build_grid_graph(grid)


def test_random_graph_is_seeded():
    a = build_random_graph(20, 3, 10, seed=42)
    b = build_random_graph(20, 3, 10, seed=42)

    assert list(a.keys()) == [f"n{i}" for i in range(20)]
    assert all(a.neighbors(n) == b.neighbors(n) for n in a.keys())


def test_random_graph_degree_and_weight_bounds():
    g = build_random_graph(10, 4, 7, seed=0, min_weight=2)

    for node in g.keys():
        edges = g.neighbors(node)
        assert len(edges) == 4
        assert node not in {nbr for nbr, _ in edges}
        assert all(2 <= w <= 7 for _, w in edges)
    assert not g.has_negative_edge()


def test_random_graph_caps_degree():
    g = build_random_graph(3, 10, 5, seed=1)
    assert all(len(g.neighbors(n)) == 2 for n in g.keys())


@pytest.mark.parametrize(
    "kwargs",
    [
        {"nodes": -1, "degree": 1, "max_weight": 1},
        {"nodes": 3, "degree": 1, "max_weight": 1, "min_weight": -1},
        {"nodes": 3, "degree": 1, "max_weight": 1, "min_weight": 2},
    ],
)
def test_random_graph_rejects_bad_parameters(kwargs):
    with pytest.raises(ValueError):
        build_random_graph(**kwargs)

"""
Utilities to compile cost grids and random parameters into graph stores.
"""

from typing import Iterable, List, Tuple
import random

import numpy as np

from adjacency_list_graph import AdjacencyListGraph
from node_ids import CellEncoder, dash_key


# (dx, dy) steps for the 4- and 8-neighbourhoods.
ORTHOGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((1, 0), (0, 1), (-1, 0), (0, -1))
DIAGONAL_STEPS: Tuple[Tuple[int, int], ...] = ((1, 1), (-1, 1), (-1, -1), (1, -1))


def build_grid_graph(
    costs: Iterable,
    encoder: CellEncoder = dash_key,
    diagonal: bool = False,
) -> AdjacencyListGraph:
    """
    Compile a 2-D cost grid into a directed graph of open cells.

    Args:
        costs: array-like indexed [y][x]. A negative, NaN or infinite cell
            is a wall; any other value is the cost of stepping into that cell.
        encoder: maps (x, y) to the node identifier used in the graph.
        diagonal: also connect the four diagonal neighbours.
    """
    grid = np.asarray(costs)
    if grid.ndim != 2:
        raise ValueError(f"Cost grid must be 2-D, got shape {grid.shape}")
    if not np.issubdtype(grid.dtype, np.number):
        raise ValueError(f"Cost grid must be numeric, got dtype {grid.dtype}")

    with np.errstate(invalid="ignore"):
        open_mask = np.isfinite(grid) & (grid >= 0)
    height, width = grid.shape
    steps = ORTHOGONAL_STEPS + DIAGONAL_STEPS if diagonal else ORTHOGONAL_STEPS

    graph = AdjacencyListGraph()
    for y, x in np.argwhere(open_mask):
        graph.add_node(encoder(int(x), int(y)))

    for y, x in np.argwhere(open_mask):
        src = encoder(int(x), int(y))
        for dx, dy in steps:
            tx, ty = int(x) + dx, int(y) + dy
            if 0 <= tx < width and 0 <= ty < height and open_mask[ty, tx]:
                graph.add_edge(src, encoder(tx, ty), grid[ty, tx].item())
    return graph


def build_random_graph(
    nodes: int,
    degree: int,
    max_weight: int,
    seed: int | None = None,
    min_weight: int = 0,
) -> AdjacencyListGraph:
    """
    Generate a directed graph with integer weights.

    Args:
        nodes: number of nodes, named "n0" .. "n{nodes-1}".
        degree: distinct random out-neighbours per node (capped at nodes - 1).
        max_weight: inclusive upper bound for edge weights.
        seed: RNG seed for reproducibility.
        min_weight: inclusive lower bound for edge weights.
    """
    if nodes < 0 or degree < 0:
        raise ValueError("nodes and degree must be non-negative")
    if min_weight < 0 or max_weight < min_weight:
        raise ValueError("Weights must satisfy 0 <= min_weight <= max_weight")

    rng = random.Random(seed)
    names: List[str] = [f"n{i}" for i in range(nodes)]

    graph = AdjacencyListGraph()
    for name in names:
        graph.add_node(name)

    fan_out = min(degree, max(nodes - 1, 0))
    for i, name in enumerate(names):
        others = names[:i] + names[i + 1:]
        for neighbor in rng.sample(others, fan_out):
            graph.add_edge(name, neighbor, rng.randint(min_weight, max_weight))
    return graph

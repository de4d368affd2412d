# File: src/steel_framing_generator/stud_network/connectivity.py

"""Connectivity graph construction for a line network.

Builds an undirected networkx graph with one node per input line. Two lines
are neighbors when the minimum distance between the finite segments is
within the intersection tolerance.

Node attributes:
    visited: Set by the orientation propagator once the member has a normal.

Neighbor order is discovery order: pairs are scanned with ``i < j`` in
ascending order, and networkx keeps adjacency in insertion order.
"""

from typing import List, Sequence

import networkx as nx

from ..utils.geometry_helpers import LineSegment, segment_to_segment_distance
from ..utils.logging_config import get_logger

logger = get_logger(__name__)


def build_connectivity_graph(
    lines: Sequence[LineSegment],
    tolerance: float,
) -> nx.Graph:
    """Build the connectivity graph of a line network.

    Every unordered pair of lines is checked, which is fine for the member
    count of one assembly (tens to low hundreds of lines).

    Args:
        lines: Input line segments; the list index is the node id.
        tolerance: Max segment-to-segment distance for two lines to touch.

    Returns:
        networkx Graph with nodes 0..N-1 and a ``visited`` node attribute.
    """
    graph = nx.Graph()
    for index in range(len(lines)):
        graph.add_node(index, visited=False)

    for i in range(len(lines)):
        for j in range(i + 1, len(lines)):
            if segment_to_segment_distance(lines[i], lines[j]) <= tolerance:
                graph.add_edge(i, j)

    logger.info(
        "Connectivity graph: %d lines, %d intersections (tol=%.4f)",
        graph.number_of_nodes(),
        graph.number_of_edges(),
        tolerance,
    )
    return graph


def ordered_neighbors(graph: nx.Graph, index: int) -> List[int]:
    """Neighbors of a node in discovery order."""
    return list(graph.adj[index])


def describe_connectivity(graph: nx.Graph) -> List[str]:
    """One ``"i: n1, n2, "`` line per node, for inspecting a network by eye."""
    rows = []
    for index in graph.nodes:
        row = f"{index}: "
        for neighbor in ordered_neighbors(graph, index):
            row += f"{neighbor}, "
        rows.append(row)
    return rows

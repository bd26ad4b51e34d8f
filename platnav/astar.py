"""platnav/astar.py — Best-first path search over the navmesh.

Search state is allocated per call and discarded afterwards. The open set is
a heap that tolerates duplicate entries; stale ones are skipped when popped
for a node that is already closed.

The heuristic is the straight-line distance to the live goal *position*,
not to the goal node. The goal node itself is never given costs, so it sorts
ahead of everything once it has been reached through any connection.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Optional

from platnav.geometry import Vec2
from platnav.navmesh import Connection, GraphNode, Navmesh


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class SearchNode:
    """Working copy of a graph node for one search."""

    position: Vec2
    id: int
    connections: list[Connection] = field(default_factory=list)
    g_cost: float = 0.0
    h_cost: float = 0.0
    parent: Optional[int] = None

    @classmethod
    def from_graph_node(cls, node: GraphNode) -> SearchNode:
        return cls(
            position=node.position,
            id=node.id,
            connections=[*node.walkable, *node.jumpable],
        )

    @property
    def f_cost(self) -> float:
        return self.g_cost + self.h_cost


@dataclass(frozen=True)
class PathNode:
    id: int
    position: Vec2


Path = list[PathNode]


# ---------------------------------------------------------------------------
# Start node
# ---------------------------------------------------------------------------

def nearest_start_node(navmesh: Navmesh, start_position: Vec2) -> Optional[GraphNode]:
    """Node nearest the start position; ties go to the one nearer the goal."""
    best: Optional[GraphNode] = None
    best_distance = float("inf")
    best_goal_distance = float("inf")

    for node in navmesh.nodes:
        distance = (start_position - node.position).length_squared()
        if distance > best_distance:
            continue

        goal_distance = (navmesh.goal_position - node.position).length_squared()
        if distance == best_distance and goal_distance >= best_goal_distance:
            continue

        best = node
        best_distance = distance
        best_goal_distance = goal_distance

    return best


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

def _reconstruct(goal: SearchNode, closed: dict[int, SearchNode]) -> Path:
    path = [PathNode(goal.id, goal.position)]
    parent_id = goal.parent
    while parent_id is not None:
        parent = closed[parent_id]
        path.append(PathNode(parent.id, parent.position))
        parent_id = parent.parent
    path.reverse()
    return path


def find_path(navmesh: Navmesh, start_position: Vec2) -> Optional[Path]:
    """Search from the node nearest ``start_position`` to the goal node.

    Returns:
        Nodes from the start node to the goal node inclusive, or None when
        no goal is set or the goal is unreachable.
    """
    goal_node = navmesh.goal_node
    if goal_node is None:
        return None

    start_graph_node = nearest_start_node(navmesh, start_position)
    if start_graph_node is None:
        return None

    start = SearchNode.from_graph_node(start_graph_node)
    start.h_cost = (navmesh.goal_position - start.position).length()

    counter = itertools.count()
    open_heap: list[tuple[float, int, SearchNode]] = [(start.f_cost, next(counter), start)]
    closed: dict[int, SearchNode] = {}

    while open_heap:
        _, _, current = heapq.heappop(open_heap)

        if current.id == goal_node.id:
            return _reconstruct(current, closed)

        if current.id in closed:
            continue
        closed[current.id] = current

        for connection in current.connections:
            neighbour = SearchNode.from_graph_node(navmesh.nodes[connection.node_id])

            if neighbour.id != goal_node.id:
                neighbour.g_cost = current.g_cost + connection.distance
                neighbour.h_cost = (navmesh.goal_position - neighbour.position).length()

            neighbour.parent = current.id
            heapq.heappush(open_heap, (neighbour.f_cost, next(counter), neighbour))

    return None


def path_length(path: Path) -> float:
    """Sum of straight-line distances between consecutive path nodes."""
    return sum(
        (b.position - a.position).length() for a, b in zip(path, path[1:])
    )

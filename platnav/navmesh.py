"""platnav/navmesh.py — Navigation graph built from level polygons.

Nodes sit on walkable polygon edges and reference each other by integer id,
which after construction equals the node's index in ``Navmesh.nodes``.
Construction is a fixed pipeline, each stage depending on the previous one:

    place -> symmetrize -> deduplicate -> renumber -> jump-connect
          -> normals -> corners

The graph is read-only after ``build_navmesh``; only the goal-tracking
fields of ``Navmesh`` change afterwards.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from platnav.ballistics import LineRef, jumpability_check
from platnav.constants import (
    AGENT_RADIUS,
    DUPLICATE_DISTANCE_SQUARED,
    NODE_SPACING,
    WALKABLE_DOT_THRESHOLD,
)
from platnav.geometry import UNIT_X, ZERO, Vec2, line_intersect
from platnav.level import Level


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

class ConnectionKind(Enum):
    WALKABLE = "walkable"
    JUMPABLE = "jumpable"
    DROPPABLE = "droppable"  # reserved, never populated


@dataclass
class Connection:
    """Directed edge to another node, by id."""

    node_id: int
    distance: float
    kind: ConnectionKind = ConnectionKind.WALKABLE
    effort: float = 0.0  # launch speed for jumps


@dataclass
class GraphNode:
    id: int
    position: Vec2
    polygon_index: int
    lines: list[LineRef] = field(default_factory=list)
    walkable: list[Connection] = field(default_factory=list)
    jumpable: list[Connection] = field(default_factory=list)
    droppable: list[Connection] = field(default_factory=list)
    normal: Vec2 = ZERO
    is_corner: bool = False
    is_external_corner: Optional[bool] = None

    @property
    def line_indices(self) -> list[int]:
        return [line_index for _, line_index in self.lines]

    def has_jump_to(self, node_id: int) -> bool:
        return any(c.node_id == node_id for c in self.jumpable)


@dataclass
class Navmesh:
    """Graph nodes plus the goal the agent is currently steering toward."""

    nodes: list[GraphNode] = field(default_factory=list)
    goal_node: Optional[GraphNode] = None
    goal_position: Vec2 = ZERO
    active: bool = False

    def connection_count(self, kind: ConnectionKind) -> int:
        attr = kind.value
        return sum(len(getattr(node, attr)) for node in self.nodes)


# ---------------------------------------------------------------------------
# Stage 1: node placement
# ---------------------------------------------------------------------------

def _push_node(
    navmesh: Navmesh,
    position: Vec2,
    polygon_index: int,
    line: LineRef,
    link_previous: bool,
    spacing: float,
) -> None:
    node_id = len(navmesh.nodes)
    node = GraphNode(id=node_id, position=position, polygon_index=polygon_index, lines=[line])
    if link_previous:
        node.walkable.append(Connection(node_id=node_id - 1, distance=spacing))
    navmesh.nodes.append(node)


def place_nodes(navmesh: Navmesh, level: Level) -> None:
    """Place evenly spaced nodes along every walkable edge.

    Container polygons come in pairs; the parity flag is toggled before the
    test, so the first container of each pair is skipped. Each edge gets
    ``ceil(length / NODE_SPACING)`` nodes from its start plus one at its
    end, chained by one-way walkable connections.
    """
    outer_container_seen = False

    for polygon_index, polygon in enumerate(level.polygons):
        if polygon.is_container:
            outer_container_seen = not outer_container_seen

        if outer_container_seen and polygon.is_container:
            continue

        for line_index in range(polygon.line_count):
            start, end = polygon.line(line_index)
            start_to_end = end - start
            length = start_to_end.length()
            if length == 0.0:
                continue

            direction = start_to_end / length
            if direction.dot(UNIT_X) <= WALKABLE_DOT_THRESHOLD:
                continue

            count = max(1, math.ceil(length / NODE_SPACING))
            spacing = length / count
            line = (polygon_index, line_index)

            for j in range(count):
                _push_node(navmesh, start + direction * (j * spacing), polygon_index, line,
                           link_previous=j > 0, spacing=spacing)
            _push_node(navmesh, end, polygon_index, line, link_previous=True, spacing=spacing)


# ---------------------------------------------------------------------------
# Stage 2: symmetrize
# ---------------------------------------------------------------------------

def make_walkable_connections_two_way(navmesh: Navmesh) -> None:
    """Mirror every placement connection. Ids still equal indices here."""
    for node_index, node in enumerate(navmesh.nodes):
        for connection in list(node.walkable):
            navmesh.nodes[connection.node_id].walkable.append(
                Connection(node_id=node_index, distance=connection.distance)
            )


# ---------------------------------------------------------------------------
# Stage 3: deduplicate
# ---------------------------------------------------------------------------

def remove_duplicate_nodes(
    navmesh: Navmesh,
    tolerance: float = DUPLICATE_DISTANCE_SQUARED,
) -> int:
    """Merge nodes closer than ``tolerance`` (squared distance).

    The later node's connections and lines move to the earlier node, and
    every connection that targeted the later node is redirected. Returns
    the number of nodes removed.
    """
    nodes = navmesh.nodes
    removed = 0

    i = 0
    while i < len(nodes):
        j = i + 1
        while j < len(nodes):
            first, second = nodes[i], nodes[j]
            if (first.position - second.position).length_squared() >= tolerance:
                j += 1
                continue

            first.walkable.extend(second.walkable)
            first.lines.extend(line for line in second.lines if line not in first.lines)
            del nodes[j]
            removed += 1

            for node in nodes:
                for connection in node.walkable:
                    if connection.node_id == second.id:
                        connection.node_id = first.id

            # Adjacent nodes collapsing into one would leave a loop
            first.walkable = [c for c in first.walkable if c.node_id != first.id]
        i += 1

    return removed


# ---------------------------------------------------------------------------
# Stage 4: renumber
# ---------------------------------------------------------------------------

def make_node_ids_indices(navmesh: Navmesh) -> None:
    """Set each id to its array index and retarget connections to match."""
    index_of = {node.id: index for index, node in enumerate(navmesh.nodes)}

    for index, node in enumerate(navmesh.nodes):
        node.id = index
        for connection in (*node.walkable, *node.jumpable, *node.droppable):
            connection.node_id = index_of[connection.node_id]


# ---------------------------------------------------------------------------
# Stage 5: jump connections
# ---------------------------------------------------------------------------

def _line_of_sight_blocked(
    start: Vec2,
    end: Vec2,
    level: Level,
    excluded: set[LineRef],
) -> bool:
    for polygon_index, line_index, line_start, line_end in level.lines():
        if (polygon_index, line_index) in excluded:
            continue
        if line_intersect(line_start, line_end, start, end) is not None:
            return True
    return False


def make_jumpable_connections(navmesh: Navmesh, level: Level, radius: float) -> None:
    """Add one-way jump connections between nodes on different polygons."""
    for main_node in navmesh.nodes:
        jumps: list[Connection] = []

        for other_node in navmesh.nodes:
            if other_node is main_node or other_node.polygon_index == main_node.polygon_index:
                continue

            excluded = set(main_node.lines) | set(other_node.lines)
            if _line_of_sight_blocked(main_node.position, other_node.position, level, excluded):
                continue

            effort = jumpability_check(
                main_node.position, other_node.position, level, radius, excluded,
            )
            if effort is None:
                continue

            jumps.append(Connection(
                node_id=other_node.id,
                distance=(other_node.position - main_node.position).length(),
                kind=ConnectionKind.JUMPABLE,
                effort=effort,
            ))

        main_node.jumpable = jumps


# ---------------------------------------------------------------------------
# Stage 6: normals
# ---------------------------------------------------------------------------

def edge_normal(level: Level, line: LineRef) -> Vec2:
    """Unit normal of an edge: its direction rotated 90° counter-clockwise."""
    polygon_index, line_index = line
    start, end = level.polygons[polygon_index].line(line_index)
    return (end - start).perp().normalize_or_zero()


def calculate_normals(navmesh: Navmesh, level: Level) -> None:
    for node in navmesh.nodes:
        normal = ZERO
        for line in node.lines:
            normal = normal + edge_normal(level, line)
        node.normal = normal.normalize_or_zero()


# ---------------------------------------------------------------------------
# Stage 7: corners
# ---------------------------------------------------------------------------

def setup_corners(navmesh: Navmesh) -> None:
    """Flag nodes on more than one edge and classify them.

    A corner is external (convex) when its walkable neighbours lie, on
    balance, behind its normal.
    """
    for node in navmesh.nodes:
        node.is_corner = len(node.lines) > 1
        if not node.is_corner:
            node.is_external_corner = None
            continue

        line_dir = ZERO
        for connection in node.walkable:
            line_dir = line_dir + (navmesh.nodes[connection.node_id].position - node.position)

        node.is_external_corner = line_dir.dot(node.normal) < 0.0


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_navmesh(level: Level, radius: float = AGENT_RADIUS) -> Navmesh:
    """Run the full construction pipeline over a level.

    Args:
        level: Level polygons.
        radius: Agent radius used to validate jump trajectories.

    Returns:
        Navmesh with no goal set and ``active`` False.
    """
    navmesh = Navmesh()
    place_nodes(navmesh, level)
    make_walkable_connections_two_way(navmesh)
    remove_duplicate_nodes(navmesh)
    make_node_ids_indices(navmesh)
    make_jumpable_connections(navmesh, level, radius)
    calculate_normals(navmesh, level)
    setup_corners(navmesh)
    return navmesh

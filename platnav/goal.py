"""platnav/goal.py — Goal tracking: the point the agent is pathing toward.

Runs once per tick before the agent steps. It is the only writer of the
navmesh goal fields (``goal_position``, ``goal_node``, ``active``).
"""

from __future__ import annotations

from typing import Optional

from platnav.constants import GOAL_MOVE_SPEED
from platnav.geometry import Vec2
from platnav.navmesh import GraphNode, Navmesh


def nearest_node(navmesh: Navmesh, position: Vec2) -> Optional[GraphNode]:
    """Linear scan for the node nearest position (first minimum wins)."""
    closest: Optional[GraphNode] = None
    closest_distance = float("inf")
    for node in navmesh.nodes:
        distance = (position - node.position).length_squared()
        if distance < closest_distance:
            closest_distance = distance
            closest = node
    return closest


def refresh_goal_node(navmesh: Navmesh) -> None:
    """Recompute goal_node from goal_position, or clear it when inactive."""
    if navmesh.active:
        navmesh.goal_node = nearest_node(navmesh, navmesh.goal_position)
    else:
        navmesh.goal_node = None


def set_goal(navmesh: Navmesh, position: Vec2) -> None:
    navmesh.goal_position = position
    if navmesh.active:
        refresh_goal_node(navmesh)


def move_goal(navmesh: Navmesh, direction: Vec2, speed: float = GOAL_MOVE_SPEED) -> None:
    """Advance the goal point by direction * speed (direction is normalized)."""
    navmesh.goal_position = navmesh.goal_position + direction.normalize_or_zero() * speed
    if navmesh.active:
        refresh_goal_node(navmesh)


def set_active(navmesh: Navmesh, active: bool) -> None:
    navmesh.active = active
    refresh_goal_node(navmesh)


def toggle_active(navmesh: Navmesh) -> bool:
    """Flip pathfinding on or off. Returns the new state."""
    set_active(navmesh, not navmesh.active)
    return navmesh.active

"""platnav — Navmesh construction, A* search, and jump-aware steering for 2D platformer agents."""

from platnav.astar import PathNode, SearchNode, find_path
from platnav.ballistics import jumpability_check, launch_velocity, sample_trajectory
from platnav.geometry import Vec2, line_intersect
from platnav.level import Level, Polygon, load_level, parse_level
from platnav.navmesh import Connection, ConnectionKind, GraphNode, Navmesh, build_navmesh
from platnav.steering import MoveInputs, PathFollowingStrategy, steer

__all__ = [
    "Vec2",
    "line_intersect",
    "Level",
    "Polygon",
    "load_level",
    "parse_level",
    "Connection",
    "ConnectionKind",
    "GraphNode",
    "Navmesh",
    "build_navmesh",
    "jumpability_check",
    "launch_velocity",
    "sample_trajectory",
    "PathNode",
    "SearchNode",
    "find_path",
    "MoveInputs",
    "PathFollowingStrategy",
    "steer",
]

"""platnav/steering.py — Path following: turn a node path into a move command.

Only the first edge of the path matters each tick. Target points are pushed
off the surface along the node normal by the agent radius so the agent body
clears corners. Strategy selection, in priority order:

1. Falling: aim at the next node.
2. Jump edge: approach the take-off node, then aim at the landing node once
   about to pass the take-off node or nearly stopped.
3. Corner: aim at the next node.
4. Flat: aim at the next node once it is closer than the edge length,
   otherwise at the current node.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from platnav.astar import Path
from platnav.ballistics import launch_velocity
from platnav.constants import STATIONARY_SPEED_SQUARED
from platnav.geometry import ZERO, Vec2
from platnav.navmesh import GraphNode, Navmesh
from platnav.physics import AgentPhysics


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

class PathFollowingStrategy(Enum):
    NONE = "none"
    AGENT_TO_CURRENT_NODE_OFFSET = "agent_to_current_node_offset"
    AGENT_TO_NEXT_NODE_OFFSET = "agent_to_next_node_offset"


@dataclass(frozen=True)
class PathEdge:
    """The first edge of a path, with radius-offset endpoints."""

    current: GraphNode
    next: GraphNode
    offset_current: Vec2
    offset_next: Vec2
    is_jumpable: bool

    @classmethod
    def from_path(cls, navmesh: Navmesh, path: Path, radius: float) -> PathEdge:
        current = navmesh.nodes[path[0].id]
        nxt = navmesh.nodes[path[1].id]
        return cls(
            current=current,
            next=nxt,
            offset_current=current.position + current.normal * radius,
            offset_next=nxt.position + nxt.normal * radius,
            is_jumpable=current.has_jump_to(nxt.id),
        )


@dataclass
class MoveInputs:
    """Steering output for one tick."""

    move_dir: Vec2 = ZERO
    jump_velocity: Vec2 = ZERO
    jump_from: Optional[Vec2] = None
    jump_to: Optional[Vec2] = None
    strategy: PathFollowingStrategy = PathFollowingStrategy.NONE


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------

def agent_on_other_side_next_frame(
    agent_position: Vec2,
    agent_velocity: Vec2,
    node_position: Vec2,
    vertical: bool,
) -> bool:
    """True if one more tick of velocity moves the agent across the node.

    Compares along y when vertical (wall contact), otherwise along x.
    """
    axis = 1 if vertical else 0
    next_position = agent_position + agent_velocity

    side_now = math.copysign(1.0, agent_position[axis] - node_position[axis])
    side_next = math.copysign(1.0, next_position[axis] - node_position[axis])
    return side_now != side_next


def select_strategy(edge: PathEdge, physics: AgentPhysics) -> PathFollowingStrategy:
    if physics.falling:
        return PathFollowingStrategy.AGENT_TO_NEXT_NODE_OFFSET

    if edge.is_jumpable:
        crossing = agent_on_other_side_next_frame(
            physics.position, physics.velocity, edge.current.position, physics.on_wall,
        )
        stationary = physics.velocity.length_squared() < STATIONARY_SPEED_SQUARED
        if crossing or stationary:
            return PathFollowingStrategy.AGENT_TO_NEXT_NODE_OFFSET
        return PathFollowingStrategy.AGENT_TO_CURRENT_NODE_OFFSET

    if edge.current.is_corner:
        return PathFollowingStrategy.AGENT_TO_NEXT_NODE_OFFSET

    to_next = edge.offset_next - physics.position
    along_edge = edge.offset_next - edge.offset_current
    if to_next.length_squared() <= along_edge.length_squared():
        return PathFollowingStrategy.AGENT_TO_NEXT_NODE_OFFSET
    return PathFollowingStrategy.AGENT_TO_CURRENT_NODE_OFFSET


def target_for_strategy(strategy: PathFollowingStrategy, edge: PathEdge) -> Optional[Vec2]:
    if strategy is PathFollowingStrategy.AGENT_TO_CURRENT_NODE_OFFSET:
        return edge.offset_current
    if strategy is PathFollowingStrategy.AGENT_TO_NEXT_NODE_OFFSET:
        return edge.offset_next
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def steer(navmesh: Navmesh, path: Optional[Path], physics: AgentPhysics) -> MoveInputs:
    """Pick a movement direction and, for a jump edge, a launch velocity.

    A missing path or one with a single node yields no movement.
    """
    if path is None or len(path) <= 1:
        return MoveInputs()

    edge = PathEdge.from_path(navmesh, path, physics.radius)
    strategy = select_strategy(edge, physics)
    target = target_for_strategy(strategy, edge)

    inputs = MoveInputs(strategy=strategy)
    if target is not None:
        inputs.move_dir = (target - physics.position).normalize_or_zero()

    if strategy is PathFollowingStrategy.AGENT_TO_NEXT_NODE_OFFSET and edge.is_jumpable:
        inputs.jump_velocity = launch_velocity(edge.current.position, edge.next.position)
        inputs.jump_from = edge.offset_current
        inputs.jump_to = edge.offset_next

    return inputs

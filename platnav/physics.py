"""platnav/physics.py — Agent physical state and per-tick force model.

Collision detection is not done here. An external resolver fills in
``normal``, ``grounded`` and ``walled`` after each integration step.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from platnav.constants import (
    ACCELERATION_SCALERS,
    AGENT_RADIUS,
    GRAVITY_STRENGTH,
    WANDER_MAX_SPEED,
)
from platnav.geometry import ZERO, Vec2


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

class JumpKind(Enum):
    GROUND = "ground"
    WALL = "wall"


@dataclass
class AgentPhysics:
    """All physics-relevant mutable state for one agent."""

    position: Vec2 = ZERO
    prev_position: Vec2 = ZERO
    velocity: Vec2 = ZERO
    acceleration: Vec2 = ZERO
    radius: float = AGENT_RADIUS
    normal: Vec2 = ZERO  # contact normal, surface -> agent; zero while airborne
    grounded: bool = False
    walled: int = 0  # -1 wall to the left, 1 wall to the right
    has_wall_jumped: bool = False

    @property
    def falling(self) -> bool:
        return self.normal.length_squared() == 0.0

    @property
    def on_wall(self) -> bool:
        if self.walled != 0:
            return True
        return not self.falling and abs(self.normal.x) > abs(self.normal.y)


# ---------------------------------------------------------------------------
# Forces
# ---------------------------------------------------------------------------

def apply_movement_acceleration(
    physics: AgentPhysics,
    move_dir: Vec2,
    max_speed: float = WANDER_MAX_SPEED,
) -> None:
    """Blend velocity toward move_dir * max_speed. No steering while airborne."""
    if physics.falling:
        physics.acceleration = ZERO
        return

    accelerating, decelerating = ACCELERATION_SCALERS
    scale = decelerating if move_dir.length_squared() == 0.0 else accelerating
    physics.acceleration = (move_dir * max_speed - physics.velocity) * scale


def apply_gravity_toward_normal(physics: AgentPhysics) -> None:
    """Straight-down gravity in the air; into the surface while in contact."""
    if physics.falling:
        physics.acceleration = Vec2(physics.acceleration.x, -GRAVITY_STRENGTH)
    else:
        physics.acceleration = physics.acceleration - physics.normal * GRAVITY_STRENGTH


def apply_jump(physics: AgentPhysics, jump_velocity: Vec2) -> Optional[JumpKind]:
    """Launch if a jump was requested and the agent is standing on something.

    Returns the kind of jump performed, or None.
    """
    if jump_velocity.length_squared() == 0.0 or physics.falling:
        return None

    if physics.grounded:
        kind = JumpKind.GROUND
    elif physics.walled != 0:
        kind = JumpKind.WALL
    else:
        return None

    physics.velocity = jump_velocity
    physics.acceleration = Vec2(0.0, -GRAVITY_STRENGTH)
    physics.grounded = False
    physics.walled = 0
    physics.has_wall_jumped = kind is JumpKind.WALL
    return kind


def integrate(physics: AgentPhysics) -> None:
    """Explicit Euler step: velocity first, then position."""
    physics.velocity = physics.velocity + physics.acceleration
    physics.prev_position = physics.position
    physics.position = physics.position + physics.velocity

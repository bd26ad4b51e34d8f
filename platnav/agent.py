"""platnav/agent.py — Platformer AI agent: search, steer, and move one tick.

Tick order: find path -> steer -> movement acceleration -> gravity -> jump
-> integrate. Collision resolution happens afterwards, outside this module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from platnav.astar import Path, find_path
from platnav.geometry import Vec2
from platnav.navmesh import Navmesh
from platnav.physics import (
    AgentPhysics,
    JumpKind,
    apply_gravity_toward_normal,
    apply_jump,
    apply_movement_acceleration,
    integrate,
)
from platnav.steering import MoveInputs, steer


@dataclass
class PlatformerAI:
    """Per-agent memory carried between ticks."""

    jump_from_pos: Optional[Vec2] = None
    jump_to_pos: Optional[Vec2] = None
    last_path: Optional[Path] = None
    last_inputs: MoveInputs = field(default_factory=MoveInputs)


@dataclass
class Agent:
    physics: AgentPhysics = field(default_factory=AgentPhysics)
    ai: PlatformerAI = field(default_factory=PlatformerAI)


def create_agent(x: float, y: float) -> Agent:
    return Agent(physics=AgentPhysics(position=Vec2(x, y), prev_position=Vec2(x, y)))


def platformer_ai_step(agent: Agent, navmesh: Navmesh) -> Optional[JumpKind]:
    """Advance one agent by one tick. Returns the jump performed, if any."""
    physics = agent.physics

    path = find_path(navmesh, physics.position)
    inputs = steer(navmesh, path, physics)
    agent.ai.last_path = path
    agent.ai.last_inputs = inputs

    apply_movement_acceleration(physics, inputs.move_dir)
    apply_gravity_toward_normal(physics)

    jump = apply_jump(physics, inputs.jump_velocity)
    if jump is not None:
        agent.ai.jump_from_pos = inputs.jump_from
        agent.ai.jump_to_pos = inputs.jump_to

    integrate(physics)
    return jump

"""platnav/simulation.py — Headless tick loop for one agent on one level.

Each tick: goal movement -> agent step -> optional collision resolver.
The navmesh is built once in create_sim and never rebuilt.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from platnav.agent import Agent, create_agent, platformer_ai_step
from platnav.geometry import ZERO, Vec2
from platnav.goal import move_goal, set_active, set_goal
from platnav.level import Level
from platnav.navmesh import Navmesh, build_navmesh
from platnav.physics import AgentPhysics, JumpKind

Collider = Callable[[AgentPhysics, Level], None]
"""Resolves contacts after integration: writes position, velocity, normal,
grounded and walled."""


# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

@dataclass
class JumpEvent:
    pass


@dataclass
class WallJumpEvent:
    pass


@dataclass
class NoPathEvent:
    pass


Event = JumpEvent | WallJumpEvent | NoPathEvent


# ---------------------------------------------------------------------------
# SimState
# ---------------------------------------------------------------------------

@dataclass
class SimState:
    level: Level
    navmesh: Navmesh
    agent: Agent
    frame: int = 0
    jumps: int = 0


@dataclass
class FrameSnapshot:
    frame: int
    x: float
    y: float
    x_vel: float
    y_vel: float
    grounded: bool
    walled: int
    strategy: str
    path_length: int  # nodes; 0 when there is no path


@dataclass
class SimResult:
    snapshots: list[FrameSnapshot] = field(default_factory=list)
    events: list[list[Event]] = field(default_factory=list)

    @property
    def final(self) -> FrameSnapshot:
        return self.snapshots[-1]

    def positions(self) -> np.ndarray:
        """Agent positions as an (n, 2) array."""
        if not self.snapshots:
            return np.zeros((0, 2))
        return np.array([(s.x, s.y) for s in self.snapshots], dtype=float)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def create_sim(
    level: Level,
    start: Vec2,
    goal_position: Vec2,
    *,
    active: bool = True,
    navmesh: Optional[Navmesh] = None,
) -> SimState:
    """Build the navmesh (unless given) and place the agent and goal."""
    if navmesh is None:
        navmesh = build_navmesh(level)
    set_goal(navmesh, goal_position)
    set_active(navmesh, active)
    return SimState(level=level, navmesh=navmesh, agent=create_agent(start.x, start.y))


# ---------------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------------

def sim_step(
    sim: SimState,
    goal_direction: Vec2 = ZERO,
    collide: Optional[Collider] = None,
) -> list[Event]:
    """Advance the simulation by one tick and return its events."""
    events: list[Event] = []

    move_goal(sim.navmesh, goal_direction)

    jump = platformer_ai_step(sim.agent, sim.navmesh)
    if jump is JumpKind.GROUND:
        sim.jumps += 1
        events.append(JumpEvent())
    elif jump is JumpKind.WALL:
        sim.jumps += 1
        events.append(WallJumpEvent())

    if sim.navmesh.active and sim.agent.ai.last_path is None:
        events.append(NoPathEvent())

    if collide is not None:
        collide(sim.agent.physics, sim.level)

    sim.frame += 1
    return events


def _capture_snapshot(sim: SimState, frame: int) -> FrameSnapshot:
    p = sim.agent.physics
    path = sim.agent.ai.last_path
    return FrameSnapshot(
        frame=frame,
        x=p.position.x,
        y=p.position.y,
        x_vel=p.velocity.x,
        y_vel=p.velocity.y,
        grounded=p.grounded,
        walled=p.walled,
        strategy=sim.agent.ai.last_inputs.strategy.value,
        path_length=len(path) if path else 0,
    )


def run_simulation(
    sim: SimState,
    ticks: int,
    collide: Optional[Collider] = None,
    goal_direction: Callable[[int], Vec2] | None = None,
) -> SimResult:
    """Run ``ticks`` steps, recording a snapshot and event list per tick.

    Args:
        sim: State to advance in place.
        ticks: Number of ticks.
        collide: Optional contact resolver run after each agent step.
        goal_direction: Optional callable frame -> goal movement direction.
    """
    result = SimResult()
    for _ in range(ticks):
        frame = sim.frame
        direction = goal_direction(frame) if goal_direction else ZERO
        events = sim_step(sim, direction, collide)
        result.snapshots.append(_capture_snapshot(sim, frame))
        result.events.append(events)
    return result

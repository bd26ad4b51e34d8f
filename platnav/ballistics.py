"""platnav/ballistics.py — Minimum-energy jump solver and swept-path validation.

Closed form for a projectile under constant acceleration ``g`` travelling
``delta_p`` in time ``t``::

    v = delta_p / t - g * t / 2

Minimising launch energy |v|^2 over t gives t^4 = 4 |delta_p|^2 / |g|^2.
A launch speed budget ``v_max`` can reach the target iff

    (delta_p . g + v_max^2)^2 - |g|^2 |delta_p|^2 >= 0
"""

from __future__ import annotations

from typing import Collection, Optional

import numpy as np

from platnav.constants import GRAVITY_STRENGTH, JUMP_FORCE, TRAJECTORY_STEPS
from platnav.geometry import Vec2, line_intersect
from platnav.level import Level

GRAVITY = Vec2(0.0, -GRAVITY_STRENGTH)

LineRef = tuple[int, int]
"""(polygon_index, line_index) of one level edge."""


# ---------------------------------------------------------------------------
# Closed form
# ---------------------------------------------------------------------------

def jump_discriminant(
    delta_p: Vec2,
    gravity: Vec2 = GRAVITY,
    v_max: float = JUMP_FORCE,
) -> float:
    """Reachability discriminant; negative means out of range for v_max."""
    b = delta_p.dot(gravity) + v_max * v_max
    return b * b - gravity.dot(gravity) * delta_p.dot(delta_p)


def low_energy_time(delta_p: Vec2, gravity: Vec2 = GRAVITY) -> float:
    """Flight time of the minimum-energy trajectory."""
    return (4.0 * delta_p.dot(delta_p) / gravity.dot(gravity)) ** 0.25


def launch_velocity(start: Vec2, goal: Vec2, gravity: Vec2 = GRAVITY) -> Vec2:
    """Minimum-energy launch velocity from start to goal.

    Returns the zero vector when start and goal coincide.
    """
    delta_p = goal - start
    t = low_energy_time(delta_p, gravity)
    if t == 0.0:
        return Vec2()
    return delta_p / t - gravity * t / 2.0


def position_at(start: Vec2, velocity: Vec2, t: float, gravity: Vec2 = GRAVITY) -> Vec2:
    """Kinematic position after time t."""
    return start + velocity * t + gravity * t * t / 2.0


def sample_trajectory(
    start: Vec2,
    goal: Vec2,
    steps: int = TRAJECTORY_STEPS,
    gravity: Vec2 = GRAVITY,
) -> np.ndarray:
    """Sample the minimum-energy arc at steps + 1 evenly spaced times.

    Returns an array of shape (steps + 1, 2); row 0 is start and the last
    row is goal exactly.
    """
    velocity = launch_velocity(start, goal, gravity)
    t_total = low_energy_time(goal - start, gravity)
    ts = np.linspace(0.0, t_total, steps + 1)

    xs = start.x + velocity.x * ts + gravity.x * ts * ts / 2.0
    ys = start.y + velocity.y * ts + gravity.y * ts * ts / 2.0
    points = np.column_stack([xs, ys])
    points[-1] = goal.as_tuple()
    return points


# ---------------------------------------------------------------------------
# Obstruction sweep
# ---------------------------------------------------------------------------

def _capsule_hits(
    seg_start: Vec2,
    seg_end: Vec2,
    radius: float,
    line_start: Vec2,
    line_end: Vec2,
) -> bool:
    """Sweep two offset rails of half-width radius against one edge."""
    direction = (seg_end - seg_start).normalize_or_zero()
    normal = direction.perp()
    offset = normal * radius

    if line_intersect(seg_start + offset, seg_end + offset, line_start, line_end) is not None:
        return True
    return line_intersect(seg_start - offset, seg_end - offset, line_start, line_end) is not None


def trajectory_clear(
    start: Vec2,
    goal: Vec2,
    level: Level,
    radius: float,
    excluded: Collection[LineRef] = (),
    gravity: Vec2 = GRAVITY,
    steps: int = TRAJECTORY_STEPS,
) -> bool:
    """True if a capsule following the arc misses every non-excluded edge."""
    velocity = launch_velocity(start, goal, gravity)
    timestep = low_energy_time(goal - start, gravity) / steps

    samples = [position_at(start, velocity, timestep * i, gravity) for i in range(1, steps)]
    samples.append(goal)

    for polygon_index, line_index, line_start, line_end in level.lines():
        if (polygon_index, line_index) in excluded:
            continue

        prev = start
        for pos in samples:
            if _capsule_hits(prev, pos, radius, line_start, line_end):
                return False
            prev = pos

    return True


def jumpability_check(
    start: Vec2,
    goal: Vec2,
    level: Level,
    radius: float,
    excluded: Collection[LineRef] = (),
    gravity: Vec2 = GRAVITY,
    v_max: float = JUMP_FORCE,
) -> Optional[float]:
    """Launch speed of a feasible, unobstructed jump from start to goal, or None.

    The sweep only runs when the discriminant allows the jump at all.
    """
    delta_p = goal - start
    if delta_p.length_squared() == 0.0:
        return None
    if jump_discriminant(delta_p, gravity, v_max) < 0.0:
        return None
    if not trajectory_clear(start, goal, level, radius, excluded, gravity):
        return None
    return launch_velocity(start, goal, gravity).length()

"""platnav/constants.py — Tuning constants for navmesh, jumps, and agent physics.

Units are pixels and frames. The y axis points up, so gravity pulls toward -y.
"""

# ---------------------------------------------------------------------------
# World
# ---------------------------------------------------------------------------

GRAVITY_STRENGTH = 0.5

# ---------------------------------------------------------------------------
# Navmesh construction
# ---------------------------------------------------------------------------

NODE_SPACING = 20.0
"""Maximum distance between consecutive nodes placed along one edge."""

DUPLICATE_DISTANCE_SQUARED = 1.0
"""Nodes closer than this (squared) are merged into one."""

WALKABLE_DOT_THRESHOLD = -0.1
"""Edges whose unit direction dotted with +X is above this get nodes."""

# ---------------------------------------------------------------------------
# Agent
# ---------------------------------------------------------------------------

AGENT_RADIUS = 8.0
JUMP_FORCE = 8.0  # launch speed budget (vMax)
WANDER_MAX_SPEED = 3.0

ACCELERATION_SCALERS = (0.2, 0.4)
"""Velocity blend factors: (accelerating, decelerating)."""

STATIONARY_SPEED_SQUARED = 0.1

# ---------------------------------------------------------------------------
# Ballistics
# ---------------------------------------------------------------------------

TRAJECTORY_STEPS = 10
"""Trajectory is split into this many segments (9 interior samples + endpoint)."""

# ---------------------------------------------------------------------------
# Goal tracking
# ---------------------------------------------------------------------------

GOAL_MOVE_SPEED = 4.0

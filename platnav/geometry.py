"""platnav/geometry.py — 2D vector type and segment intersection.

Shared by navmesh construction, the ballistic solver, and steering.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


# ---------------------------------------------------------------------------
# Vec2
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Vec2:
    """Immutable 2D vector (y up)."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec2:
        return Vec2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __getitem__(self, index: int) -> float:
        """Axis access: 0 = x, 1 = y."""
        if index == 0:
            return self.x
        if index == 1:
            return self.y
        raise IndexError(f"Vec2 index out of range: {index}")

    def dot(self, other: Vec2) -> float:
        return self.x * other.x + self.y * other.y

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def perp(self) -> Vec2:
        """Rotate 90° counter-clockwise."""
        return Vec2(-self.y, self.x)

    def normalize_or_zero(self) -> Vec2:
        """Unit vector in the same direction, or the zero vector if degenerate."""
        length = self.length()
        if length == 0.0 or not math.isfinite(length):
            return ZERO
        return Vec2(self.x / length, self.y / length)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


ZERO = Vec2(0.0, 0.0)
UNIT_X = Vec2(1.0, 0.0)


# ---------------------------------------------------------------------------
# Intersection
# ---------------------------------------------------------------------------

def line_intersect(a1: Vec2, a2: Vec2, b1: Vec2, b2: Vec2) -> Optional[Vec2]:
    """Intersection point of segments a1-a2 and b1-b2, or None.

    Endpoints count as touching. Parallel (including collinear) segments
    never intersect.
    """
    a = a2 - a1
    b = b2 - b1
    denom = b.y * a.x - b.x * a.y
    if denom == 0.0:
        return None

    offset = a1 - b1
    ua = (b.x * offset.y - b.y * offset.x) / denom
    ub = (a.x * offset.y - a.y * offset.x) / denom

    if 0.0 <= ua <= 1.0 and 0.0 <= ub <= 1.0:
        return a1 + a * ua
    return None

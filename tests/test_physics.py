"""Tests for platnav.physics — movement, gravity, jumps, integration."""

from __future__ import annotations

import pytest

from platnav.geometry import Vec2
from platnav.physics import (
    AgentPhysics,
    JumpKind,
    apply_gravity_toward_normal,
    apply_jump,
    apply_movement_acceleration,
    integrate,
)

UP = Vec2(0.0, 1.0)


def _grounded(**kwargs) -> AgentPhysics:
    return AgentPhysics(normal=UP, grounded=True, **kwargs)


# ---------------------------------------------------------------------------
# State flags
# ---------------------------------------------------------------------------

class TestFlags:
    def test_falling_without_contact(self):
        assert AgentPhysics().falling
        assert not _grounded().falling

    def test_on_wall_from_walled(self):
        assert AgentPhysics(walled=-1).on_wall

    def test_on_wall_from_steep_normal(self):
        assert AgentPhysics(normal=Vec2(-1.0, 0.0)).on_wall
        assert not _grounded().on_wall

    def test_airborne_is_not_on_wall(self):
        assert not AgentPhysics().on_wall


# ---------------------------------------------------------------------------
# Movement
# ---------------------------------------------------------------------------

class TestMovementAcceleration:
    def test_no_air_control(self):
        physics = AgentPhysics(velocity=Vec2(2.0, 0.0), acceleration=Vec2(1.0, 1.0))
        apply_movement_acceleration(physics, Vec2(1.0, 0.0))
        assert physics.acceleration == Vec2(0.0, 0.0)

    def test_accelerate_toward_direction(self):
        physics = _grounded()
        apply_movement_acceleration(physics, Vec2(1.0, 0.0))
        assert physics.acceleration.x == pytest.approx(0.6)
        assert physics.acceleration.y == pytest.approx(0.0)

    def test_decelerate_without_direction(self):
        physics = _grounded(velocity=Vec2(2.0, 0.0))
        apply_movement_acceleration(physics, Vec2(0.0, 0.0))
        assert physics.acceleration.x == pytest.approx(-0.8)

    def test_converges_to_max_speed(self):
        physics = _grounded()
        for _ in range(60):
            apply_movement_acceleration(physics, Vec2(1.0, 0.0), max_speed=3.0)
            physics.velocity = physics.velocity + physics.acceleration
        assert physics.velocity.x == pytest.approx(3.0, abs=1e-3)


# ---------------------------------------------------------------------------
# Gravity
# ---------------------------------------------------------------------------

class TestGravity:
    def test_airborne_gravity_overrides_y(self):
        physics = AgentPhysics(acceleration=Vec2(0.3, 2.0))
        apply_gravity_toward_normal(physics)
        assert physics.acceleration == Vec2(0.3, -0.5)

    def test_contact_gravity_into_floor(self):
        physics = _grounded(acceleration=Vec2(0.6, 0.0))
        apply_gravity_toward_normal(physics)
        assert physics.acceleration == Vec2(0.6, -0.5)

    def test_contact_gravity_into_wall(self):
        physics = AgentPhysics(normal=Vec2(-1.0, 0.0), walled=1)
        apply_gravity_toward_normal(physics)
        assert physics.acceleration.x == pytest.approx(0.5)
        assert physics.acceleration.y == pytest.approx(0.0)


# ---------------------------------------------------------------------------
# Jumping
# ---------------------------------------------------------------------------

class TestJump:
    def test_no_request(self):
        physics = _grounded()
        assert apply_jump(physics, Vec2(0.0, 0.0)) is None
        assert physics.grounded

    def test_cannot_jump_in_air(self):
        physics = AgentPhysics(grounded=True)  # stale flag with no contact normal
        assert apply_jump(physics, Vec2(2.0, 4.0)) is None

    def test_ground_jump(self):
        physics = _grounded(velocity=Vec2(1.0, 0.0))
        assert apply_jump(physics, Vec2(2.0, 4.0)) is JumpKind.GROUND
        assert physics.velocity == Vec2(2.0, 4.0)
        assert physics.acceleration == Vec2(0.0, -0.5)
        assert not physics.grounded
        assert not physics.has_wall_jumped

    def test_wall_jump(self):
        physics = AgentPhysics(normal=Vec2(-1.0, 0.0), walled=1)
        assert apply_jump(physics, Vec2(-3.0, 5.0)) is JumpKind.WALL
        assert physics.walled == 0
        assert physics.has_wall_jumped

    def test_contact_without_support(self):
        physics = AgentPhysics(normal=Vec2(0.0, -1.0))
        assert apply_jump(physics, Vec2(1.0, 1.0)) is None


# ---------------------------------------------------------------------------
# Integration
# ---------------------------------------------------------------------------

class TestIntegrate:
    def test_velocity_then_position(self):
        physics = AgentPhysics(
            position=Vec2(10.0, 20.0),
            velocity=Vec2(1.0, 0.0),
            acceleration=Vec2(0.0, -0.5),
        )
        integrate(physics)
        assert physics.velocity == Vec2(1.0, -0.5)
        assert physics.position == Vec2(11.0, 19.5)
        assert physics.prev_position == Vec2(10.0, 20.0)

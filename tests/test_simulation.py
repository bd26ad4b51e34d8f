"""Tests for platnav/simulation.py — SimState, create_sim, sim_step, run_simulation."""

from __future__ import annotations

import platnav.simulation as simulation
from platnav.geometry import Vec2
from platnav.navmesh import build_navmesh
from platnav.physics import JumpKind
from platnav.simulation import (
    JumpEvent,
    NoPathEvent,
    SimResult,
    WallJumpEvent,
    create_sim,
    run_simulation,
    sim_step,
)
from tests.levels import flat_ground_collider, single_floor, two_floors


# ---------------------------------------------------------------------------
# create_sim
# ---------------------------------------------------------------------------

def test_create_sim_builds_navmesh():
    sim = create_sim(single_floor(), Vec2(10.0, 8.0), Vec2(100.0, 0.0))
    assert len(sim.navmesh.nodes) == 6
    assert sim.navmesh.active
    assert sim.navmesh.goal_node.position == Vec2(100.0, 0.0)
    assert sim.agent.physics.position == Vec2(10.0, 8.0)
    assert sim.frame == 0
    assert sim.jumps == 0


def test_create_sim_inactive():
    sim = create_sim(single_floor(), Vec2(10.0, 8.0), Vec2(100.0, 0.0), active=False)
    assert sim.navmesh.goal_node is None
    assert sim.navmesh.goal_position == Vec2(100.0, 0.0)


def test_create_sim_reuses_navmesh():
    level = single_floor()
    navmesh = build_navmesh(level)
    sim = create_sim(level, Vec2(), Vec2(40.0, 0.0), navmesh=navmesh)
    assert sim.navmesh is navmesh


# ---------------------------------------------------------------------------
# sim_step
# ---------------------------------------------------------------------------

def test_step_advances_frame():
    sim = create_sim(single_floor(), Vec2(10.0, 8.0), Vec2(100.0, 0.0))
    sim_step(sim, collide=flat_ground_collider)
    sim_step(sim, collide=flat_ground_collider)
    assert sim.frame == 2


def test_step_calls_collider():
    calls = []
    sim = create_sim(single_floor(), Vec2(10.0, 8.0), Vec2(100.0, 0.0))
    sim_step(sim, collide=lambda physics, level: calls.append(level.name))
    assert calls == ["single_floor"]


def test_no_path_event():
    sim = create_sim(two_floors(gap=200.0), Vec2(10.0, 8.0), Vec2(350.0, 0.0))
    events = sim_step(sim)
    assert any(isinstance(e, NoPathEvent) for e in events)


def test_no_path_event_only_when_active():
    sim = create_sim(two_floors(gap=200.0), Vec2(10.0, 8.0), Vec2(350.0, 0.0), active=False)
    assert sim_step(sim) == []


def test_wall_jump_event(monkeypatch):
    monkeypatch.setattr(simulation, "platformer_ai_step", lambda agent, navmesh: JumpKind.WALL)
    sim = create_sim(single_floor(), Vec2(10.0, 8.0), Vec2(100.0, 0.0), active=False)
    events = sim_step(sim)
    assert len(events) == 1
    assert isinstance(events[0], WallJumpEvent)
    assert sim.jumps == 1


def test_goal_moves_with_direction():
    sim = create_sim(single_floor(), Vec2(10.0, 8.0), Vec2(0.0, 0.0))
    for _ in range(5):
        sim_step(sim, goal_direction=Vec2(1.0, 0.0))
    assert sim.navmesh.goal_position == Vec2(20.0, 0.0)
    assert sim.navmesh.goal_node.position == Vec2(20.0, 0.0)


# ---------------------------------------------------------------------------
# run_simulation
# ---------------------------------------------------------------------------

def test_run_records_every_tick():
    sim = create_sim(single_floor(), Vec2(10.0, 8.0), Vec2(100.0, 0.0))
    result = run_simulation(sim, 10, collide=flat_ground_collider)
    assert isinstance(result, SimResult)
    assert [s.frame for s in result.snapshots] == list(range(10))
    assert len(result.events) == 10
    assert result.positions().shape == (10, 2)


def test_empty_result_positions():
    assert SimResult().positions().shape == (0, 2)


def test_walks_to_goal_on_flat_floor():
    sim = create_sim(single_floor(200.0), Vec2(10.0, 8.0), Vec2(190.0, 0.0))
    result = run_simulation(sim, 150, collide=flat_ground_collider)
    assert 150.0 < result.final.x < 210.0
    assert result.final.y == 8.0
    assert result.final.grounded
    assert sim.jumps == 0

    xs = result.positions()[:, 0]
    assert xs[40] > xs[10]


def test_jumps_gap_to_reach_goal():
    sim = create_sim(two_floors(), Vec2(10.0, 8.0), Vec2(260.0, 0.0))
    result = run_simulation(sim, 200, collide=flat_ground_collider)
    jumps = [e for frame in result.events for e in frame if isinstance(e, JumpEvent)]
    assert jumps
    assert sim.jumps >= 1
    assert result.final.x > 160.0
    assert max(s.y for s in result.snapshots) > 15.0


def test_snapshot_reports_strategy_and_path():
    sim = create_sim(single_floor(), Vec2(10.0, 8.0), Vec2(100.0, 0.0))
    result = run_simulation(sim, 3, collide=flat_ground_collider)
    snap = result.snapshots[-1]
    assert snap.strategy.startswith("agent_to_")
    assert snap.path_length > 1


def test_goal_direction_callable():
    sim = create_sim(single_floor(), Vec2(10.0, 8.0), Vec2(0.0, 0.0), active=False)
    run_simulation(sim, 4, goal_direction=lambda frame: Vec2(0.0, 1.0) if frame < 2 else Vec2())
    assert sim.navmesh.goal_position == Vec2(0.0, 8.0)

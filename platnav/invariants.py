"""platnav/invariants.py — Structural checks for a built navmesh.

Library module: tests and the CLI call check_navmesh and assert on or print
the returned violations.
"""

from __future__ import annotations

from dataclasses import dataclass

from platnav.constants import DUPLICATE_DISTANCE_SQUARED
from platnav.navmesh import ConnectionKind, Navmesh

DISTANCE_TOLERANCE = 1e-6


# ---------------------------------------------------------------------------
# Violation
# ---------------------------------------------------------------------------

@dataclass
class Violation:
    """A single navmesh invariant violation."""

    node: int
    invariant: str
    details: str
    severity: str  # "error" or "warning"


# ---------------------------------------------------------------------------
# Individual checkers
# ---------------------------------------------------------------------------

def _check_ids(navmesh: Navmesh) -> list[Violation]:
    violations: list[Violation] = []
    count = len(navmesh.nodes)
    for index, node in enumerate(navmesh.nodes):
        if node.id != index:
            violations.append(Violation(
                node=index,
                invariant="id_not_index",
                details=f"Node at index {index} has id {node.id}",
                severity="error",
            ))
        for connection in (*node.walkable, *node.jumpable, *node.droppable):
            if not 0 <= connection.node_id < count:
                violations.append(Violation(
                    node=index,
                    invariant="dangling_connection",
                    details=(
                        f"{connection.kind.value} connection targets "
                        f"{connection.node_id}, only {count} nodes"
                    ),
                    severity="error",
                ))
    return violations


def _check_walkable_symmetry(navmesh: Navmesh) -> list[Violation]:
    violations: list[Violation] = []
    count = len(navmesh.nodes)
    for index, node in enumerate(navmesh.nodes):
        for connection in node.walkable:
            if not 0 <= connection.node_id < count:
                continue  # reported by _check_ids
            other = navmesh.nodes[connection.node_id]
            mirrored = any(
                back.node_id == index
                and abs(back.distance - connection.distance) <= DISTANCE_TOLERANCE
                for back in other.walkable
            )
            if not mirrored:
                violations.append(Violation(
                    node=index,
                    invariant="walkable_not_symmetric",
                    details=(
                        f"{index} -> {connection.node_id} "
                        f"(d={connection.distance:.3f}) has no matching return"
                    ),
                    severity="error",
                ))
    return violations


def _check_duplicates(navmesh: Navmesh) -> list[Violation]:
    violations: list[Violation] = []
    nodes = navmesh.nodes
    for i in range(len(nodes)):
        for j in range(i + 1, len(nodes)):
            d2 = (nodes[i].position - nodes[j].position).length_squared()
            if d2 < DUPLICATE_DISTANCE_SQUARED:
                violations.append(Violation(
                    node=i,
                    invariant="duplicate_nodes",
                    details=f"Nodes {i} and {j} are {d2:.3f} apart (squared)",
                    severity="error",
                ))
    return violations


def _check_corners(navmesh: Navmesh) -> list[Violation]:
    violations: list[Violation] = []
    for index, node in enumerate(navmesh.nodes):
        expected_corner = len(node.lines) > 1
        if node.is_corner != expected_corner:
            violations.append(Violation(
                node=index,
                invariant="corner_flag_mismatch",
                details=f"is_corner={node.is_corner} but node lies on {len(node.lines)} edges",
                severity="error",
            ))
        if node.is_corner != (node.is_external_corner is not None):
            violations.append(Violation(
                node=index,
                invariant="corner_classification",
                details=(
                    f"is_corner={node.is_corner} with "
                    f"is_external_corner={node.is_external_corner}"
                ),
                severity="warning",
            ))
    return violations


def _check_connection_kinds(navmesh: Navmesh) -> list[Violation]:
    violations: list[Violation] = []
    groups = (
        ("walkable", ConnectionKind.WALKABLE),
        ("jumpable", ConnectionKind.JUMPABLE),
        ("droppable", ConnectionKind.DROPPABLE),
    )
    for index, node in enumerate(navmesh.nodes):
        for attr, kind in groups:
            for connection in getattr(node, attr):
                if connection.kind is not kind:
                    violations.append(Violation(
                        node=index,
                        invariant="connection_kind_mismatch",
                        details=f"{connection.kind.value} connection stored in {attr}",
                        severity="warning",
                    ))
    return violations


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def check_navmesh(navmesh: Navmesh) -> list[Violation]:
    """Scan a navmesh for structural invariant violations.

    Returns:
        List of Violation objects, sorted by node index.
    """
    violations: list[Violation] = []
    violations.extend(_check_ids(navmesh))
    violations.extend(_check_walkable_symmetry(navmesh))
    violations.extend(_check_duplicates(navmesh))
    violations.extend(_check_corners(navmesh))
    violations.extend(_check_connection_kinds(navmesh))
    violations.sort(key=lambda v: v.node)
    return violations

"""platnav/cli — Build a navmesh for a level file and plan a path.

Usage::

    python -m platnav.cli levels/box_room.yaml --start 20 8 --goal 280 60
    python -m platnav.cli levels/box_room.yaml --start 20 8 --goal 280 60 -o out/path.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from platnav.astar import Path as NodePath
from platnav.astar import find_path, path_length
from platnav.geometry import Vec2
from platnav.goal import set_active, set_goal
from platnav.invariants import Violation, check_navmesh
from platnav.level import load_level
from platnav.navmesh import ConnectionKind, Navmesh, build_navmesh


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------

def navmesh_summary(navmesh: Navmesh) -> dict:
    corners = [n for n in navmesh.nodes if n.is_corner]
    return {
        "nodes": len(navmesh.nodes),
        "walkable_connections": navmesh.connection_count(ConnectionKind.WALKABLE),
        "jumpable_connections": navmesh.connection_count(ConnectionKind.JUMPABLE),
        "corners": len(corners),
        "external_corners": sum(1 for n in corners if n.is_external_corner),
    }


def print_summary(name: str, summary: dict) -> None:
    print(
        f"{name}: {summary['nodes']} nodes, "
        f"{summary['walkable_connections']} walkable, "
        f"{summary['jumpable_connections']} jumpable, "
        f"{summary['corners']} corners ({summary['external_corners']} external)"
    )


def print_violations(violations: list[Violation]) -> None:
    for v in violations:
        print(f"  [{v.severity}] node {v.node}: {v.invariant}: {v.details}")


def print_path(path: Optional[NodePath]) -> None:
    if path is None:
        print("no path")
        return
    print(f"path: {len(path)} nodes, length {path_length(path):.1f}")
    for node in path:
        print(f"  {node.id:>5d}  ({node.position.x:8.1f}, {node.position.y:8.1f})")


# ---------------------------------------------------------------------------
# JSON serialization
# ---------------------------------------------------------------------------

def _result_to_dict(
    level_name: str,
    summary: dict,
    violations: list[Violation],
    path: Optional[NodePath],
) -> dict:
    return {
        "level": level_name,
        "navmesh": summary,
        "violations": [
            {"node": v.node, "invariant": v.invariant, "details": v.details, "severity": v.severity}
            for v in violations
        ],
        "path": None if path is None else [
            {"id": n.id, "x": n.position.x, "y": n.position.y} for n in path
        ],
    }


def save_result(data: dict, path: Path | str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    """Plan a path from the command line."""
    parser = argparse.ArgumentParser(description="Build a platformer navmesh and plan a path")
    parser.add_argument("level", help="Level YAML/JSON file")
    parser.add_argument(
        "--start", nargs=2, type=float, metavar=("X", "Y"), required=True,
        help="Agent start position",
    )
    parser.add_argument(
        "--goal", nargs=2, type=float, metavar=("X", "Y"), required=True,
        help="Goal position",
    )
    parser.add_argument("--output", "-o", help="Output file path for results JSON")
    args = parser.parse_args(argv)

    try:
        level = load_level(args.level)
    except FileNotFoundError:
        print(f"level file not found: {args.level}", file=sys.stderr)
        sys.exit(1)
    except ValueError as exc:
        parser.error(f"invalid level {args.level}: {exc}")

    navmesh = build_navmesh(level)
    summary = navmesh_summary(navmesh)
    print_summary(level.name, summary)

    violations = check_navmesh(navmesh)
    print_violations(violations)

    set_goal(navmesh, Vec2(*args.goal))
    set_active(navmesh, True)
    path = find_path(navmesh, Vec2(*args.start))
    print_path(path)

    if args.output:
        save_result(_result_to_dict(level.name, summary, violations, path), args.output)

    sys.exit(0 if path is not None else 1)


if __name__ == "__main__":
    main()

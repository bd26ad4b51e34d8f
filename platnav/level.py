"""platnav/level.py — Level polygons and level-file loading.

A level is an ordered list of polygons. Each polygon is an ordered point list
whose consecutive pairs form its edges; a closed outline repeats its first
point at the end. Container polygons come in (outer, inner) pairs.

Level files are YAML (or JSON, which parses as YAML)::

    name: box_room
    polygons:
      - container: true
        points: [[-10, -10], [310, -10], [310, 210], [-10, 210], [-10, -10]]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from platnav.geometry import Vec2


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class Polygon:
    """One outline of level geometry."""

    points: list[Vec2]
    is_container: bool = False

    @property
    def line_count(self) -> int:
        return max(0, len(self.points) - 1)

    def line(self, line_index: int) -> tuple[Vec2, Vec2]:
        """Endpoints of edge ``line_index`` (points[i] -> points[i + 1])."""
        return self.points[line_index], self.points[line_index + 1]


@dataclass
class Level:
    """Immutable level geometry consumed by the navmesh builder."""

    polygons: list[Polygon] = field(default_factory=list)
    name: str = ""

    def lines(self):
        """Yield ``(polygon_index, line_index, start, end)`` for every edge."""
        for polygon_index, polygon in enumerate(self.polygons):
            for line_index in range(polygon.line_count):
                start, end = polygon.line(line_index)
                yield polygon_index, line_index, start, end


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

_LEVEL_KEYS = frozenset({"name", "polygons"})
_POLYGON_KEYS = frozenset({"container", "points"})


def _parse_point(raw, where: str) -> Vec2:
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise ValueError(f"{where}: expected an [x, y] pair, got {raw!r}")
    try:
        return Vec2(float(raw[0]), float(raw[1]))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{where}: non-numeric coordinate in {raw!r}") from exc


def _parse_polygon(data: dict, index: int) -> Polygon:
    if not isinstance(data, dict):
        raise ValueError(f"polygons[{index}]: expected a mapping, got {type(data).__name__}")
    unknown = set(data) - _POLYGON_KEYS
    if unknown:
        raise ValueError(f"polygons[{index}]: unknown keys {sorted(unknown)}")
    if "points" not in data:
        raise ValueError(f"polygons[{index}]: missing 'points'")

    raw_points = data["points"]
    if not isinstance(raw_points, list) or len(raw_points) < 2:
        raise ValueError(f"polygons[{index}]: need at least 2 points")

    points = [
        _parse_point(p, f"polygons[{index}].points[{i}]")
        for i, p in enumerate(raw_points)
    ]
    is_container = data.get("container", False)
    if not isinstance(is_container, bool):
        raise ValueError(
            f"polygons[{index}].container: expected a boolean, got {is_container!r}"
        )
    return Polygon(points=points, is_container=is_container)


def parse_level(data: dict) -> Level:
    """Build a Level from a raw mapping (as loaded from YAML/JSON).

    Raises:
        ValueError: If the mapping is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError("level data must be a mapping")
    unknown = set(data) - _LEVEL_KEYS
    if unknown:
        raise ValueError(f"level data: unknown keys {sorted(unknown)}")
    raw_polygons = data.get("polygons")
    if not isinstance(raw_polygons, list):
        raise ValueError("level data needs a 'polygons' list")
    return Level(
        polygons=[_parse_polygon(p, i) for i, p in enumerate(raw_polygons)],
        name=str(data.get("name", "")),
    )


def load_level(path: Path | str) -> Level:
    """Load a level from a YAML or JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the content is malformed.
    """
    path = Path(path)
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"{path}: invalid YAML: {exc}") from exc
    level = parse_level(data)
    if not level.name:
        level.name = path.stem
    return level

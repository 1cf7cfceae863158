"""Core geometric types for outline representation.

This module defines the geometric types produced by the drawing subsystem
and consumed by the composition engine:
- Point: A 2D point (also used as a translation offset)
- Segment: An on-curve point with relative cubic handles
- Path: One stroke or filled shape of a glyph
- Outline: The ordered list of paths that make up a glyph
- BoundingBox: Axis-aligned box in y-up font units

All coordinates are font units with y growing upward.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fontTools.misc.transform import Transform


class PathKind(str, Enum):
    """Drawing tool that produced a path.

    Stroked kinds carry their geometry in ``points``; ``OUTLINE`` paths
    carry closed cubic contours in ``segment_groups``.
    """

    PEN = "pen"
    LINE = "line"
    CURVE = "curve"
    DOT = "dot"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    CALLIGRAPHY = "calligraphy"
    OUTLINE = "outline"


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable. Offsets returned by the positioning engine are
    Points as well.

    Attributes:
        x: X coordinate in font units
        y: Y coordinate in font units
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def translated(self, dx: float, dy: float) -> "Point":
        """Return a copy moved by (dx, dy)."""
        return Point(self.x + dx, self.y + dy)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=float(data["x"]), y=float(data["y"]))


ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class Segment:
    """An on-curve point with incoming and outgoing cubic handles.

    Handles are stored relative to ``point``, so translating a segment only
    moves ``point``.

    Attributes:
        point: On-curve point
        handle_in: Incoming control handle, relative to point
        handle_out: Outgoing control handle, relative to point
    """

    point: Point
    handle_in: Point = ORIGIN
    handle_out: Point = ORIGIN

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "point": self.point.to_dict(),
            "handleIn": self.handle_in.to_dict(),
            "handleOut": self.handle_out.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Segment":
        """Deserialize from dictionary."""
        return cls(
            point=Point.from_dict(data["point"]),
            handle_in=Point.from_dict(data.get("handleIn", {"x": 0, "y": 0})),
            handle_out=Point.from_dict(data.get("handleOut", {"x": 0, "y": 0})),
        )


@dataclass(frozen=True)
class Path:
    """A single drawn path.

    Attributes:
        kind: Drawing tool that produced the path
        points: Ordered points of a stroked path
        segment_groups: Closed cubic contours of an outline path
        group_id: Optional grouping tag (component index for composed glyphs)
    """

    kind: PathKind = PathKind.PEN
    points: tuple[Point, ...] = ()
    segment_groups: tuple[tuple[Segment, ...], ...] = ()
    group_id: str | None = None

    def is_drawn(self) -> bool:
        """Check if the path carries any geometry."""
        return len(self.points) > 0 or any(len(group) > 0 for group in self.segment_groups)

    def translated(self, dx: float, dy: float) -> "Path":
        """Return a copy moved by (dx, dy)."""
        if dx == 0 and dy == 0:
            return self
        return Path(
            kind=self.kind,
            points=tuple(p.translated(dx, dy) for p in self.points),
            segment_groups=tuple(
                tuple(
                    Segment(s.point.translated(dx, dy), s.handle_in, s.handle_out)
                    for s in group
                )
                for group in self.segment_groups
            ),
            group_id=self.group_id,
        )

    def transformed(self, transform: Transform) -> "Path":
        """Return a copy with an affine transform applied.

        Absolute points go through the full transform; relative handles only
        through its linear part.
        """

        def apply(p: Point) -> Point:
            x, y = transform.transformPoint((p.x, p.y))
            return Point(x, y)

        def apply_vector(v: Point) -> Point:
            return Point(
                transform.xx * v.x + transform.yx * v.y,
                transform.xy * v.x + transform.yy * v.y,
            )

        return Path(
            kind=self.kind,
            points=tuple(apply(p) for p in self.points),
            segment_groups=tuple(
                tuple(
                    Segment(apply(s.point), apply_vector(s.handle_in), apply_vector(s.handle_out))
                    for s in group
                )
                for group in self.segment_groups
            ),
            group_id=self.group_id,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = {
            "type": self.kind.value,
            "points": [p.to_dict() for p in self.points],
        }
        if self.segment_groups:
            data["segmentGroups"] = [
                [s.to_dict() for s in group] for group in self.segment_groups
            ]
        if self.group_id is not None:
            data["groupId"] = self.group_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Path":
        """Deserialize from dictionary."""
        return cls(
            kind=PathKind(data.get("type", PathKind.PEN.value)),
            points=tuple(Point.from_dict(p) for p in data.get("points") or []),
            segment_groups=tuple(
                tuple(Segment.from_dict(s) for s in group)
                for group in data.get("segmentGroups") or []
            ),
            group_id=data.get("groupId"),
        )


@dataclass(frozen=True)
class Outline:
    """An ordered list of paths forming one glyph.

    Outlines are immutable; every operation returns a new outline and keeps
    path order.

    Attributes:
        paths: Paths in drawing order
    """

    paths: tuple[Path, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.paths)

    def is_empty(self) -> bool:
        """Check if the outline has no paths at all."""
        return len(self.paths) == 0

    def is_drawn(self) -> bool:
        """Check if any path carries geometry.

        An outline holding only zero-length paths is not drawn.
        """
        return any(path.is_drawn() for path in self.paths)

    def translated(self, dx: float, dy: float) -> "Outline":
        """Return a copy with every path moved by (dx, dy)."""
        return Outline(tuple(path.translated(dx, dy) for path in self.paths))

    def transformed(self, transform: Transform) -> "Outline":
        """Return a copy with an affine transform applied to every path."""
        return Outline(tuple(path.transformed(transform) for path in self.paths))

    def concat(self, other: "Outline") -> "Outline":
        """Return this outline's paths followed by ``other``'s."""
        return Outline(self.paths + other.paths)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"paths": [p.to_dict() for p in self.paths]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Outline":
        """Deserialize from dictionary."""
        return cls(tuple(Path.from_dict(p) for p in data.get("paths") or []))


EMPTY_OUTLINE = Outline()


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box.

    ``(x, y)`` is the bottom-left corner in y-up font units.

    Attributes:
        x: Left edge
        y: Bottom edge
        width: Horizontal extent
        height: Vertical extent
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2)

    @classmethod
    def from_extents(
        cls, min_x: float, min_y: float, max_x: float, max_y: float
    ) -> "BoundingBox":
        """Build a box from (min_x, min_y, max_x, max_y) extents."""
        return cls(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y)

    def to_extents(self) -> tuple[float, float, float, float]:
        """Return (min_x, min_y, max_x, max_y)."""
        return (self.x, self.y, self.right, self.top)

    def translated(self, dx: float, dy: float) -> "BoundingBox":
        """Return a copy moved by (dx, dy)."""
        return BoundingBox(self.x + dx, self.y + dy, self.width, self.height)

    def intersects(self, other: "BoundingBox") -> bool:
        """Check whether two boxes overlap (touching edges count)."""
        return not (
            self.right < other.x
            or self.x > other.right
            or self.top < other.y
            or self.y > other.top
        )

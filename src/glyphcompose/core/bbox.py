"""Bounding-box calculation for stroked outlines.

Stroked paths (pen, line, curve, calligraphy, ...) describe the centre line
of a stroke, so their extent is grown by half the stroke thickness on every
side. Filled ``outline`` paths and ``dot`` paths already describe their
inked area and are measured as-is.

How curves are measured depends on ``BBoxPrecision``:

- ANCHORS: only the stored points (fast, underestimates curved strokes)
- SAMPLED: curves flattened by adaptive subdivision
- EXACT: curve extrema via fontTools' BoundsPen
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from fontTools.pens.boundsPen import BoundsPen

from glyphcompose.config import BBoxPrecision
from glyphcompose.core._bezier import (
    flatten_cubic,
    flatten_quadratic,
    implied_quadratics,
    segment_cubics,
)
from glyphcompose.domain import BoundingBox, FontMetrics, Outline, Path, PathKind, Point


Extents = tuple[float, float, float, float]

# Freehand kinds whose interior points are implied-on-curve quadratic controls
SPLINE_KINDS = frozenset({PathKind.PEN, PathKind.CALLIGRAPHY})


def _extents_of(points: Iterable[Point]) -> Extents | None:
    xs: list[float] = []
    ys: list[float] = []
    for p in points:
        xs.append(p.x)
        ys.append(p.y)
    if not xs:
        return None
    return (min(xs), min(ys), max(xs), max(ys))


def _union(a: Extents | None, b: Extents | None) -> Extents | None:
    if a is None:
        return b
    if b is None:
        return a
    return (min(a[0], b[0]), min(a[1], b[1]), max(a[2], b[2]), max(a[3], b[3]))


def _grow(extents: Extents | None, amount: float) -> Extents | None:
    if extents is None or amount == 0:
        return extents
    return (
        extents[0] - amount,
        extents[1] - amount,
        extents[2] + amount,
        extents[3] + amount,
    )


def _is_quadratic_curve(path: Path) -> bool:
    return path.kind == PathKind.CURVE and len(path.points) == 3


def sample_points(path: Path, tolerance: float = 1.0) -> list[Point]:
    """Flatten a path into the points its extent is measured from.

    Args:
        path: Path to flatten
        tolerance: Maximum deviation from the true curve

    Returns:
        Points along the path's centre line (or contour for outline paths)
    """
    if path.segment_groups:
        sampled: list[Point] = []
        for group in path.segment_groups:
            for p0, p1, p2, p3 in segment_cubics(group):
                sampled.extend(flatten_cubic(p0, p1, p2, p3, tolerance))
            if len(group) == 1:
                sampled.append(group[0].point)
        return sampled

    points = list(path.points)
    if path.kind in SPLINE_KINDS and len(points) > 2:
        sampled = []
        for p0, p1, p2 in implied_quadratics(points):
            sampled.extend(flatten_quadratic(p0, p1, p2, tolerance))
        return sampled
    if _is_quadratic_curve(path):
        return flatten_quadratic(points[0], points[1], points[2], tolerance)
    return points


def _anchor_points(path: Path) -> list[Point]:
    if path.segment_groups:
        return [s.point for group in path.segment_groups for s in group]
    return list(path.points)


def _exact_extents(path: Path) -> Extents | None:
    """Curve extrema of one path, computed with BoundsPen."""
    pen = BoundsPen(None)

    if path.segment_groups:
        for group in path.segment_groups:
            if not group:
                continue
            pen.moveTo(group[0].point.to_tuple())
            for _, c1, c2, end in segment_cubics(group):
                pen.curveTo(c1.to_tuple(), c2.to_tuple(), end.to_tuple())
            pen.closePath()
        return pen.bounds

    points = path.points
    pen.moveTo(points[0].to_tuple())
    if path.kind in SPLINE_KINDS and len(points) > 2:
        for _, control, end in implied_quadratics(points):
            pen.qCurveTo(control.to_tuple(), end.to_tuple())
    elif _is_quadratic_curve(path):
        pen.qCurveTo(points[1].to_tuple(), points[2].to_tuple())
    else:
        for p in points[1:]:
            pen.lineTo(p.to_tuple())
    pen.endPath()
    return pen.bounds


def _dot_extents(path: Path, stroke_thickness: float) -> Extents:
    center = path.points[0]
    if len(path.points) > 1:
        edge = path.points[1]
        radius = math.hypot(edge.x - center.x, edge.y - center.y)
    else:
        radius = stroke_thickness / 2
    return (center.x - radius, center.y - radius, center.x + radius, center.y + radius)


def path_extents(
    path: Path,
    stroke_thickness: float,
    precision: BBoxPrecision = BBoxPrecision.SAMPLED,
    tolerance: float = 1.0,
) -> Extents | None:
    """Inked (min_x, min_y, max_x, max_y) of a single path, or None."""
    if not path.is_drawn():
        return None

    if path.kind == PathKind.DOT and path.points:
        return _dot_extents(path, stroke_thickness)

    if precision == BBoxPrecision.EXACT:
        extents = _exact_extents(path)
    elif precision == BBoxPrecision.ANCHORS:
        extents = _extents_of(_anchor_points(path))
    else:
        extents = _extents_of(sample_points(path, tolerance))

    if path.segment_groups:
        return extents
    return _grow(extents, stroke_thickness / 2)


def glyph_bbox(
    outline: Outline | Iterable[Path],
    stroke_thickness: float,
    precision: BBoxPrecision = BBoxPrecision.SAMPLED,
    tolerance: float = 1.0,
) -> BoundingBox | None:
    """Compute the inked bounding box of an outline.

    Args:
        outline: Outline (or any iterable of paths) to measure
        stroke_thickness: Stroke width used to draw the paths
        precision: How curves are measured
        tolerance: Flattening tolerance for SAMPLED precision

    Returns:
        BoundingBox, or None when nothing is drawn

    Example:
        >>> glyph_bbox(Outline(), 15) is None
        True
    """
    extents: Extents | None = None
    for path in outline:
        extents = _union(extents, path_extents(path, stroke_thickness, precision, tolerance))

    if extents is None:
        return None
    return BoundingBox.from_extents(*extents)


@dataclass(frozen=True)
class ZoneBoxes:
    """Bounding boxes of the vertical zones of a glyph.

    Zones overlap by half a stroke so ink sitting on a guide line counts
    for both neighbours.

    Attributes:
        ascender: Ink at or above the topline
        x_height: Ink between baseline and topline
        descender: Ink at or below the baseline
        full: Whole-glyph bounding box
    """

    ascender: BoundingBox | None
    x_height: BoundingBox | None
    descender: BoundingBox | None
    full: BoundingBox


def zone_bboxes(
    outline: Outline,
    metrics: FontMetrics,
    stroke_thickness: float,
    precision: BBoxPrecision = BBoxPrecision.SAMPLED,
    tolerance: float = 1.0,
) -> ZoneBoxes | None:
    """Split an outline's ink into ascender, x-height and descender zones.

    Args:
        outline: Outline to measure
        metrics: Font metrics providing baseline and topline
        stroke_thickness: Stroke width used to draw the paths
        precision: Precision for the full bounding box
        tolerance: Flattening tolerance

    Returns:
        ZoneBoxes, or None when nothing is drawn
    """
    full = glyph_bbox(outline, stroke_thickness, precision, tolerance)
    if full is None:
        return None

    half = stroke_thickness / 2
    ascender: list[Point] = []
    x_height: list[Point] = []
    descender: list[Point] = []

    for path in outline:
        for p in sample_points(path, tolerance):
            if p.y >= metrics.topline - half:
                ascender.append(p)
            if metrics.baseline - half <= p.y <= metrics.topline + half:
                x_height.append(p)
            if p.y <= metrics.baseline + half:
                descender.append(p)

    def zone(points: list[Point]) -> BoundingBox | None:
        extents = _grow(_extents_of(points), half)
        return BoundingBox.from_extents(*extents) if extents is not None else None

    return ZoneBoxes(
        ascender=zone(ascender),
        x_height=zone(x_height),
        descender=zone(descender),
        full=full,
    )

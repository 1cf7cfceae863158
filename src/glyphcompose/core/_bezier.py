"""Internal Bezier helpers for bounding-box measurement.

Not intended for public use; ``glyphcompose.core.bbox`` is the consumer.
"""

import math
from collections.abc import Iterator, Sequence

from glyphcompose.domain import Point, Segment

# Recursion stops here even if a degenerate curve never becomes flat
MAX_SUBDIVISION_DEPTH = 16


def _mid(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def flatten_quadratic(
    p0: Point, p1: Point, p2: Point, tolerance: float, depth: int = 0
) -> list[Point]:
    """Flatten a quadratic Bezier curve using recursive subdivision.

    Args:
        p0: Start point
        p1: Control point
        p2: End point
        tolerance: Maximum distance from true curve
        depth: Current recursion depth

    Returns:
        Points approximating the curve, endpoints included
    """
    # Curve point at t=0.5 versus the chord midpoint
    curve_mid = Point(
        0.25 * p0.x + 0.5 * p1.x + 0.25 * p2.x,
        0.25 * p0.y + 0.5 * p1.y + 0.25 * p2.y,
    )
    chord_mid = _mid(p0, p2)
    if depth >= MAX_SUBDIVISION_DEPTH or (
        math.hypot(curve_mid.x - chord_mid.x, curve_mid.y - chord_mid.y) <= tolerance
    ):
        return [p0, curve_mid, p2]

    left = flatten_quadratic(p0, _mid(p0, p1), curve_mid, tolerance, depth + 1)
    right = flatten_quadratic(curve_mid, _mid(p1, p2), p2, tolerance, depth + 1)
    return left[:-1] + right


def flatten_cubic(
    p0: Point, p1: Point, p2: Point, p3: Point, tolerance: float, depth: int = 0
) -> list[Point]:
    """Flatten a cubic Bezier curve using De Casteljau subdivision.

    Args:
        p0: Start point
        p1: First control point
        p2: Second control point
        p3: End point
        tolerance: Maximum distance from true curve
        depth: Current recursion depth

    Returns:
        Points approximating the curve, endpoints included
    """
    q1 = _mid(p0, p1)
    q2 = _mid(p1, p2)
    q3 = _mid(p2, p3)
    r1 = _mid(q1, q2)
    r2 = _mid(q2, q3)
    curve_mid = _mid(r1, r2)

    chord_mid = _mid(p0, p3)
    if depth >= MAX_SUBDIVISION_DEPTH or (
        math.hypot(curve_mid.x - chord_mid.x, curve_mid.y - chord_mid.y) <= tolerance
    ):
        return [p0, curve_mid, p3]

    left = flatten_cubic(p0, q1, r1, curve_mid, tolerance, depth + 1)
    right = flatten_cubic(curve_mid, r2, q3, p3, tolerance, depth + 1)
    return left[:-1] + right


def implied_quadratics(points: Sequence[Point]) -> Iterator[tuple[Point, Point, Point]]:
    """Decode a freehand polyline into quadratic pieces.

    Interior points are off-curve controls; on-curve points are implied at
    the midpoint between consecutive controls. The first and last points
    are on-curve.

    Yields:
        (start, control, end) triples
    """
    if len(points) < 3:
        return
    start = points[0]
    for i in range(1, len(points) - 2):
        end = _mid(points[i], points[i + 1])
        yield start, points[i], end
        start = end
    yield start, points[-2], points[-1]


def segment_cubics(
    group: Sequence[Segment],
) -> Iterator[tuple[Point, Point, Point, Point]]:
    """Split a closed segment group into absolute cubic control quads."""
    count = len(group)
    if count < 2:
        return
    for i in range(count):
        current = group[i]
        following = group[(i + 1) % count]
        yield (
            current.point,
            current.point.translated(current.handle_out.x, current.handle_out.y),
            following.point.translated(following.handle_in.x, following.handle_in.y),
            following.point,
        )

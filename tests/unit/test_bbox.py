"""Unit tests for bounding-box calculation."""

import pytest

from glyphcompose.config import BBoxPrecision
from glyphcompose.core._bezier import flatten_cubic, flatten_quadratic, implied_quadratics
from glyphcompose.core.bbox import glyph_bbox, sample_points, zone_bboxes
from glyphcompose.domain import (
    EMPTY_OUTLINE,
    BoundingBox,
    FontMetrics,
    Outline,
    Path,
    PathKind,
    Point,
    Segment,
)


def line(x0: float, y0: float, x1: float, y1: float) -> Path:
    return Path(kind=PathKind.LINE, points=(Point(x0, y0), Point(x1, y1)))


def square(x0: float, y0: float, x1: float, y1: float) -> Path:
    corners = (Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1))
    return Path(kind=PathKind.OUTLINE, segment_groups=(tuple(Segment(p) for p in corners),))


ARCH = (Point(0, 0), Point(50, 100), Point(100, 0))


class TestGlyphBBox:
    """Tests for glyph_bbox."""

    def test_empty_outline_is_none(self) -> None:
        """Test nothing drawn gives no box, whatever the stroke."""
        assert glyph_bbox(EMPTY_OUTLINE, 15) is None
        assert glyph_bbox([], 40) is None
        assert glyph_bbox(Outline((Path(), Path(kind=PathKind.DOT))), 15) is None

    def test_stroke_grows_centre_line(self) -> None:
        """Test stroked paths grow by half the stroke on every side."""
        bbox = glyph_bbox(Outline((line(0, 0, 100, 0),)), 10)
        assert bbox == BoundingBox(-5, -5, 110, 10)

    def test_filled_outline_is_not_grown(self) -> None:
        """Test outline paths are measured as drawn."""
        outline = Outline((square(0, 0, 100, 100),))
        for precision in BBoxPrecision:
            assert glyph_bbox(outline, 30, precision=precision) == BoundingBox(0, 0, 100, 100)

    def test_dot_radius_defaults_to_half_stroke(self) -> None:
        """Test a single-point dot uses half the stroke as radius."""
        dot = Path(kind=PathKind.DOT, points=(Point(50, 50),))
        assert glyph_bbox(Outline((dot,)), 20) == BoundingBox(40, 40, 20, 20)

    def test_dot_radius_from_edge_point(self) -> None:
        """Test a second point sets the dot radius."""
        dot = Path(kind=PathKind.DOT, points=(Point(50, 50), Point(50, 80)))
        assert glyph_bbox(Outline((dot,)), 20) == BoundingBox(20, 20, 60, 60)

    def test_union_of_paths(self) -> None:
        """Test the box covers every path."""
        outline = Outline((line(0, 0, 10, 0), square(200, 300, 250, 400)))
        assert glyph_bbox(outline, 0) == BoundingBox(0, 0, 250, 400)

    def test_anchor_precision_uses_control_points(self) -> None:
        """Test ANCHORS measures stored points only."""
        curve = Outline((Path(kind=PathKind.CURVE, points=ARCH),))
        bbox = glyph_bbox(curve, 0, precision=BBoxPrecision.ANCHORS)
        assert bbox is not None
        assert bbox.top == 100

    @pytest.mark.parametrize("precision", [BBoxPrecision.SAMPLED, BBoxPrecision.EXACT])
    def test_curve_precision_follows_the_curve(self, precision: BBoxPrecision) -> None:
        """Test SAMPLED and EXACT find the curve's true extreme."""
        curve = Outline((Path(kind=PathKind.CURVE, points=ARCH),))
        bbox = glyph_bbox(curve, 0, precision=precision)
        assert bbox is not None
        assert bbox.top == pytest.approx(50, abs=1.0)
        assert bbox.x == pytest.approx(0)
        assert bbox.right == pytest.approx(100)

    def test_pen_path_uses_implied_quadratics(self) -> None:
        """Test freehand pen points are treated as a spline."""
        pen = Outline((Path(kind=PathKind.PEN, points=ARCH),))
        bbox = glyph_bbox(pen, 0, precision=BBoxPrecision.EXACT)
        assert bbox is not None
        assert bbox.top == pytest.approx(50)


class TestFlattening:
    """Tests for curve flattening helpers."""

    def test_quadratic_endpoints_kept(self) -> None:
        """Test flattening starts and ends on the curve endpoints."""
        points = flatten_quadratic(*ARCH, tolerance=0.5)
        assert points[0] == ARCH[0]
        assert points[-1] == ARCH[2]
        assert len(points) > 3

    def test_straight_cubic_is_not_subdivided(self) -> None:
        """Test a flat cubic comes back as start, middle, end."""
        points = flatten_cubic(Point(0, 0), Point(10, 0), Point(20, 0), Point(30, 0), 1.0)
        assert points == [Point(0, 0), Point(15, 0), Point(30, 0)]

    def test_implied_quadratics(self) -> None:
        """Test on-curve points are implied between controls."""
        points = [Point(0, 0), Point(10, 10), Point(20, 10), Point(30, 0)]
        pieces = list(implied_quadratics(points))
        assert pieces == [
            (Point(0, 0), Point(10, 10), Point(15, 10)),
            (Point(15, 10), Point(20, 10), Point(30, 0)),
        ]

    def test_sample_points_of_line(self) -> None:
        """Test straight paths are measured from their points."""
        path = line(0, 0, 100, 50)
        assert sample_points(path) == [Point(0, 0), Point(100, 50)]


class TestZoneBBoxes:
    """Tests for zone_bboxes."""

    METRICS = FontMetrics(baseline=0, topline=500)

    def test_empty_outline(self) -> None:
        """Test no zones for an empty outline."""
        assert zone_bboxes(EMPTY_OUTLINE, self.METRICS, 10) is None

    def test_zones_split_by_guides(self) -> None:
        """Test ink is assigned to the zones it falls in."""
        outline = Outline(
            (line(0, 600, 50, 600), line(100, 250, 200, 250), line(300, -100, 400, -100))
        )
        zones = zone_bboxes(outline, self.METRICS, 10)

        assert zones is not None
        assert zones.ascender == BoundingBox(-5, 595, 60, 10)
        assert zones.x_height == BoundingBox(95, 245, 110, 10)
        assert zones.descender == BoundingBox(295, -105, 110, 10)
        assert zones.full == BoundingBox(-5, -105, 410, 710)

    def test_missing_zone_is_none(self) -> None:
        """Test a glyph with only x-height ink has no ascender or descender."""
        zones = zone_bboxes(Outline((line(0, 250, 100, 250),)), self.METRICS, 10)
        assert zones is not None
        assert zones.ascender is None
        assert zones.descender is None
        assert zones.x_height is not None

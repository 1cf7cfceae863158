"""Automatic kerning.

For each pair the right glyph is slid towards the left glyph and the
tightest kerning value is binary-searched between -units_per_em/2 and 0.
A value is rejected when the ascender or descender zones of the two glyphs
collide, or when the x-height gap drops below the target distance. Glyphs
with no x-height ink fall back to a whole-glyph collision test.
"""

from collections.abc import Callable, Iterable, Sequence

import structlog

from glyphcompose.config import GlyphComposeSettings, get_default_settings
from glyphcompose.core.bbox import ZoneBoxes, zone_bboxes
from glyphcompose.domain import (
    BoundingBox,
    Character,
    FontMetrics,
    KerningCache,
    KerningRecommendation,
    Outline,
    PairKey,
)

logger = structlog.get_logger(__name__)

OutlineLookup = Callable[[Character], Outline]


def _side_bearing(value: int | None, default: int) -> int:
    return default if value is None else value


def target_distance(
    left: Character,
    right: Character,
    metrics: FontMetrics,
    recommendations: Sequence[KerningRecommendation] = (),
) -> float:
    """Desired x-height gap between two glyphs.

    A matching recommendation may give a number, ``"lsb"`` (the right
    glyph's left side bearing) or ``"rsb"`` (the left glyph's right side
    bearing). Otherwise the gap is the sum of the outer side bearings, with
    negative bearings replaced by the defaults.
    """
    recommendation = next(
        (r for r in recommendations if r.left == left.name and r.right == right.name),
        None,
    )
    goal = recommendation.goal if recommendation is not None else None

    if isinstance(goal, (int, float)):
        return float(goal)
    if goal == "lsb":
        return _side_bearing(right.lsb, metrics.default_lsb)
    if goal == "rsb":
        return _side_bearing(left.rsb, metrics.default_rsb)
    if isinstance(goal, str):
        try:
            return float(goal)
        except ValueError:
            logger.debug("Unusable kerning goal", left=left.name, right=right.name, goal=goal)

    rsb = _side_bearing(left.rsb, metrics.default_rsb)
    lsb = _side_bearing(right.lsb, metrics.default_lsb)
    return (rsb if rsb >= 0 else metrics.default_rsb) + (lsb if lsb >= 0 else metrics.default_lsb)


def _shifted(box: BoundingBox | None, dx: float) -> BoundingBox | None:
    return box.translated(dx, 0) if box is not None else None


def _collide(a: BoundingBox | None, b: BoundingBox | None) -> bool:
    return a is not None and b is not None and a.intersects(b)


def kern_value(
    left: Character,
    right: Character,
    left_zones: ZoneBoxes,
    right_zones: ZoneBoxes,
    metrics: FontMetrics,
    target: float,
) -> int:
    """Binary-search the tightest acceptable kerning value for one pair.

    Args:
        left: Left character (side bearings)
        right: Right character (side bearings)
        left_zones: Zone boxes of the left outline
        right_zones: Zone boxes of the right outline
        metrics: Font metrics
        target: Desired x-height gap

    Returns:
        Kerning value in font units (0 or negative)
    """
    spacing = _side_bearing(left.rsb, metrics.default_rsb) + _side_bearing(
        right.lsb, metrics.default_lsb
    )
    low = -round(metrics.units_per_em / 2)
    high = 0
    best = 0

    while low <= high:
        candidate = (low + high) // 2
        right_start = left_zones.full.right + spacing + candidate
        dx = right_start - right_zones.full.x

        if _collide(left_zones.ascender, _shifted(right_zones.ascender, dx)) or _collide(
            left_zones.descender, _shifted(right_zones.descender, dx)
        ):
            valid = False
        elif left_zones.x_height is not None and right_zones.x_height is not None:
            gap = right_zones.x_height.x + dx - left_zones.x_height.right
            valid = gap >= target
        else:
            valid = not _collide(left_zones.full, _shifted(right_zones.full, dx))

        if valid:
            best = candidate
            high = candidate - 1
        else:
            low = candidate + 1

    return best


def auto_kern(
    pairs: Iterable[tuple[Character, Character]],
    outline_of: OutlineLookup,
    metrics: FontMetrics,
    recommendations: Sequence[KerningRecommendation] = (),
    settings: GlyphComposeSettings | None = None,
    progress: Callable[[int, int], None] | None = None,
) -> KerningCache:
    """Compute kerning values for a batch of pairs.

    The project's kerning cache is never touched; the returned fragment is
    merged by the caller.

    Args:
        pairs: (left, right) character pairs
        outline_of: Returns the outline to measure for a character
        metrics: Font metrics
        recommendations: Authored target distances
        settings: Application settings (bbox precision)
        progress: Optional (processed, total) callback

    Returns:
        KerningCache holding one value per measurable pair
    """
    settings = settings or get_default_settings()
    pairs = list(pairs)
    result = KerningCache()
    zones: dict[str, ZoneBoxes | None] = {}

    def zones_for(character: Character) -> ZoneBoxes | None:
        if character.name not in zones:
            zones[character.name] = zone_bboxes(
                outline_of(character),
                metrics,
                metrics.stroke_thickness,
                precision=settings.bbox.precision,
                tolerance=settings.bbox.flatten_tolerance,
            )
        return zones[character.name]

    for index, (left, right) in enumerate(pairs, start=1):
        left_zones = zones_for(left)
        right_zones = zones_for(right)
        if left.unicode is None or right.unicode is None or left_zones is None or right_zones is None:
            logger.debug("Auto kerning skipped", left=left.name, right=right.name)
        else:
            target = target_distance(left, right, metrics, recommendations)
            value = kern_value(left, right, left_zones, right_zones, metrics, target)
            result.set(PairKey(left.unicode, right.unicode), value)
            logger.debug("Auto kerned", left=left.name, right=right.name, value=value)

        if progress is not None:
            progress(index, len(pairs))

    return result

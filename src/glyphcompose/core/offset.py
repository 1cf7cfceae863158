"""Mark offset calculation.

``compute_offset`` is the pure core: bounding boxes and an optional anchor
rule in, translation out. ``MarkPositioner`` gathers its inputs from a
project (bounding boxes, anchor rule, movement constraint) for one pair.
"""

from collections.abc import Sequence

import structlog

from glyphcompose.config import GlyphComposeSettings, PlacementConfig, get_default_settings
from glyphcompose.core.anchors import attachment_point, combining_class_rule, resolve_anchor_rule
from glyphcompose.core.bbox import glyph_bbox
from glyphcompose.core.groups import ClassExpander, ClassTable
from glyphcompose.core.matcher import RuleMatcher
from glyphcompose.domain import (
    AnchorRule,
    BoundingBox,
    Character,
    FontMetrics,
    MarkAttachmentTable,
    MovementConstraint,
    Outline,
    Point,
    PositioningRule,
    Project,
)

logger = structlog.get_logger(__name__)


def apply_constraint(offset: Point, constraint: MovementConstraint) -> Point:
    """Pin the axis a constraint does not allow to move.

    HORIZONTAL keeps x and pins y to 0; VERTICAL keeps y and pins x to 0.
    """
    if constraint == MovementConstraint.HORIZONTAL:
        return Point(offset.x, 0.0)
    if constraint == MovementConstraint.VERTICAL:
        return Point(0.0, offset.y)
    return offset


def fallback_offset(
    base_bbox: BoundingBox,
    mark_bbox: BoundingBox,
    metrics: FontMetrics,
    placement: PlacementConfig,
) -> Point:
    """Centre the mark over the base and rest it on the base's top.

    When the base's ink stops well below the topline (more than
    ``top_ink_tolerance``), the topline is used as the reference top so
    marks line up across short and tall bases.
    """
    dx = base_bbox.center.x - mark_bbox.center.x

    reference_top = base_bbox.top
    if reference_top < metrics.topline - placement.top_ink_tolerance:
        reference_top = metrics.topline

    dy = reference_top + placement.mark_gap - mark_bbox.y
    return Point(dx, dy)


def anchored_offset(base_bbox: BoundingBox, mark_bbox: BoundingBox, anchor: AnchorRule) -> Point:
    """Offset that moves the mark's anchor onto the base's (adjusted) anchor."""
    target = attachment_point(base_bbox, anchor.base_point).translated(anchor.dx, anchor.dy)
    source = attachment_point(mark_bbox, anchor.mark_point)
    return Point(target.x - source.x, target.y - source.y)


def compute_offset(
    base_bbox: BoundingBox | None,
    mark_bbox: BoundingBox | None,
    anchor: AnchorRule | None,
    metrics: FontMetrics,
    constraint: MovementConstraint = MovementConstraint.NONE,
    placement: PlacementConfig | None = None,
) -> Point | None:
    """Compute the translation that attaches a mark to a base.

    Args:
        base_bbox: Base bounding box
        mark_bbox: Mark bounding box
        anchor: Anchor rule for the pair, or None for the geometric default
        metrics: Font metrics (topline for the default placement)
        constraint: Movement constraint of the matched positioning rule
        placement: Default placement settings

    Returns:
        Offset to add to every mark coordinate, or None when either box is
        missing (the pair cannot be positioned yet)
    """
    if base_bbox is None or mark_bbox is None:
        return None

    if anchor is not None:
        offset = anchored_offset(base_bbox, mark_bbox, anchor)
    else:
        offset = fallback_offset(base_bbox, mark_bbox, metrics, placement or PlacementConfig())

    return apply_constraint(offset, constraint)


class MarkPositioner:
    """Computes default offsets for base/mark pairs of one project.

    Example:
        positioner = MarkPositioner.for_project(project, settings)
        offset = positioner.offset_for(base, mark, base_outline, mark_outline)
    """

    def __init__(
        self,
        metrics: FontMetrics,
        mark_attachment: MarkAttachmentTable | None = None,
        classes: ClassTable | ClassExpander | None = None,
        rules: Sequence[PositioningRule] | RuleMatcher = (),
        settings: GlyphComposeSettings | None = None,
    ) -> None:
        self.metrics = metrics
        self.settings = settings or get_default_settings()
        self._table = mark_attachment or {}
        if isinstance(classes, ClassExpander):
            self._expander = classes
        else:
            self._expander = ClassExpander(classes or {})
        if isinstance(rules, RuleMatcher):
            self._matcher = rules
        else:
            self._matcher = RuleMatcher(rules, self._expander)

    @classmethod
    def for_project(
        cls, project: Project, settings: GlyphComposeSettings | None = None
    ) -> "MarkPositioner":
        """Bind a positioner to a project's rules, classes and metrics."""
        expander = ClassExpander(project.class_table())
        return cls(
            metrics=project.metrics,
            mark_attachment=project.mark_attachment,
            classes=expander,
            rules=RuleMatcher(project.positioning_rules, expander),
            settings=settings,
        )

    @property
    def matcher(self) -> RuleMatcher:
        return self._matcher

    @property
    def expander(self) -> ClassExpander:
        return self._expander

    def bbox(self, outline: Outline) -> BoundingBox | None:
        """Bounding box with the configured precision."""
        return glyph_bbox(
            outline,
            self.metrics.stroke_thickness,
            precision=self.settings.bbox.precision,
            tolerance=self.settings.bbox.flatten_tolerance,
        )

    def anchor_for(self, base: Character, mark: Character) -> AnchorRule | None:
        """Authored anchor rule, then (if enabled) the combining-class rule."""
        rule = resolve_anchor_rule(base.name, mark.name, self._table, self._expander)
        if rule is None and self.settings.placement.use_combining_class:
            rule = combining_class_rule(mark.unicode, self.settings.placement.mark_gap)
        return rule

    def offset_for(
        self,
        base: Character,
        mark: Character,
        base_outline: Outline,
        mark_outline: Outline,
    ) -> Point | None:
        """Default offset for a pair, or None when either outline is undrawn."""
        base_bbox = self.bbox(base_outline)
        mark_bbox = self.bbox(mark_outline)
        if base_bbox is None or mark_bbox is None:
            logger.debug("Offset skipped, empty outline", base=base.name, mark=mark.name)
            return None

        return compute_offset(
            base_bbox,
            mark_bbox,
            self.anchor_for(base, mark),
            self.metrics,
            constraint=self._matcher.constraint_for(base.name, mark.name),
            placement=self.settings.placement,
        )

"""Core composition and positioning algorithms for glyphcompose.

This module contains the engine:

- Group expansion (class references to concrete glyph names)
- Bounding boxes of stroked outlines
- Positioning rule matching
- Mark offset calculation (anchors and geometric default)
- Glyph composition (link, composite, position, kern, plain)
- Accept operations (single pair, batch, reset, copy)
- Substitution rule resolution and automatic kerning

Everything except the accept operations is pure; accept operations return
an AcceptResult instead of touching the project.

Key functions:
- expand: Expand tokens into glyph names
- glyph_bbox: Inked bounding box of an outline
- match: First positioning rule covering a pair
- compute_offset: Mark translation for a base/mark pair
- accept_pair / accept_all: Fill the positioning and kerning caches
- auto_kern: Compute kerning values for pairs

Key classes:
- ClassExpander: Memoising group expansion
- RuleMatcher: Ordered positioning rule matching
- MarkPositioner: Default offsets for a project's pairs
- GlyphResolver: Character to outline composition
- AcceptResult: Pending cache and outline changes
"""

from glyphcompose.core.accept import (
    AcceptResult,
    accept_all,
    accept_pair,
    copy_positions,
    is_pair_eligible,
    reset_pairs,
)
from glyphcompose.core.anchors import attachment_point, combining_class_rule, resolve_anchor_rule
from glyphcompose.core.bbox import ZoneBoxes, glyph_bbox, zone_bboxes
from glyphcompose.core.groups import ClassExpander, class_name, expand, is_class_reference, is_member
from glyphcompose.core.kerning import auto_kern, target_distance
from glyphcompose.core.matcher import (
    MatchResult,
    RuleMatcher,
    constraint_for,
    ligature_name_for,
    match,
)
from glyphcompose.core.offset import MarkPositioner, apply_constraint, compute_offset
from glyphcompose.core.resolver import GlyphResolver, export_glyph_name, pair_key
from glyphcompose.core.substitution import (
    ResolvedLookup,
    ResolvedRule,
    components_for,
    ligature_outputs,
    resolve_lookup,
)

__all__ = [
    # Accept
    "AcceptResult",
    # Groups
    "ClassExpander",
    # Resolver
    "GlyphResolver",
    # Offsets
    "MarkPositioner",
    # Matcher
    "MatchResult",
    # Substitution
    "ResolvedLookup",
    "ResolvedRule",
    "RuleMatcher",
    # Bounding boxes
    "ZoneBoxes",
    "accept_all",
    "accept_pair",
    "apply_constraint",
    "attachment_point",
    "auto_kern",
    "class_name",
    "combining_class_rule",
    "components_for",
    "compute_offset",
    "constraint_for",
    "copy_positions",
    "expand",
    "export_glyph_name",
    "glyph_bbox",
    "is_class_reference",
    "is_member",
    "is_pair_eligible",
    "ligature_name_for",
    "ligature_outputs",
    "match",
    "pair_key",
    "reset_pairs",
    "resolve_anchor_rule",
    "resolve_lookup",
    "target_distance",
    "zone_bboxes",
]

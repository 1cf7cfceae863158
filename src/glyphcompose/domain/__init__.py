"""Domain models for glyphcompose.

This module contains the models the composition engine works on:
outlines, characters, authored rules, metrics, result caches, and the
project that bundles them. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Independent of the authoring tool's JSON encoding (see glyphcompose.io)

Key classes:
- Point, Segment, Path, Outline, BoundingBox: Outline geometry
- Character, CharacterSet, GlyphTransform: Character records
- LigatureRule, ContextualRule, MultipleRule, SingleRule: Substitution shapes
- PositioningRule, AnchorRule, AttachmentClass: Positioning rules
- PairKey, PositioningCache, KerningCache: Result caches
- FontMetrics, OutlineStore, Project: Project state
"""

from glyphcompose.domain.cache import KerningCache, PairKey, PositioningCache
from glyphcompose.domain.character import (
    Character,
    CharacterSet,
    GlyphClass,
    GlyphTransform,
    TransformMode,
)
from glyphcompose.domain.metrics import FontMetrics
from glyphcompose.domain.outline import (
    EMPTY_OUTLINE,
    BoundingBox,
    Outline,
    Path,
    PathKind,
    Point,
    Segment,
)
from glyphcompose.domain.project import OutlineStore, Project
from glyphcompose.domain.rules import (
    AnchorRule,
    AttachmentClass,
    AttachmentPoint,
    ContextualRule,
    KerningRecommendation,
    LigatureRule,
    Lookup,
    MarkAttachmentTable,
    MovementConstraint,
    MultipleRule,
    PositioningRule,
    RuleKind,
    SingleRule,
    SubstitutionRule,
)

__all__: list[str] = [
    # Enums
    "AttachmentPoint",
    "GlyphClass",
    "MovementConstraint",
    "PathKind",
    "RuleKind",
    "TransformMode",
    # Geometry
    "EMPTY_OUTLINE",
    "BoundingBox",
    "Outline",
    "Path",
    "Point",
    "Segment",
    # Characters
    "Character",
    "CharacterSet",
    "GlyphTransform",
    # Rules
    "AnchorRule",
    "AttachmentClass",
    "ContextualRule",
    "KerningRecommendation",
    "LigatureRule",
    "Lookup",
    "MarkAttachmentTable",
    "MultipleRule",
    "PositioningRule",
    "SingleRule",
    "SubstitutionRule",
    # Caches and project
    "FontMetrics",
    "KerningCache",
    "OutlineStore",
    "PairKey",
    "PositioningCache",
    "Project",
]

"""Converters between the project document and domain models.

This module handles the conversion between the pydantic document models
(``glyphcompose.io.schema``) and the engine's domain models, normalising
the encodings older project files still carry:

- ``"base-mark"`` / ``"left-right"`` cache keys
- three ``compositeTransform`` encodings
- ``link`` stored as a list
- anchor adjustments stored as strings
- substitution rules nested under script and feature tags in ``fontRules``

The tool stores geometry in drawing-canvas units with y growing downward.
The engine works y-up with the baseline at 0, so every vertical value is
mapped through ``y' = baseLineY - y`` (positions) or ``dy' = -dy``
(offsets, handles, shifts) on the way in and back on the way out.
"""

from typing import Any

import structlog
from fontTools.misc.transform import Transform

from glyphcompose.domain import (
    AnchorRule,
    AttachmentClass,
    AttachmentPoint,
    Character,
    CharacterSet,
    ContextualRule,
    FontMetrics,
    GlyphClass,
    GlyphTransform,
    KerningCache,
    KerningRecommendation,
    LigatureRule,
    Lookup,
    MarkAttachmentTable,
    MovementConstraint,
    MultipleRule,
    Outline,
    OutlineStore,
    PairKey,
    Point,
    PositioningCache,
    PositioningRule,
    Project,
    SingleRule,
    TransformMode,
)
from glyphcompose.exceptions import InvalidRuleError
from glyphcompose.io.schema import (
    AttachmentClassModel,
    CharacterModel,
    CharacterSetModel,
    GlyphDataModel,
    KerningRecordModel,
    MetricsModel,
    PositioningRuleModel,
    PositionRecordModel,
    ProjectDocument,
)

logger = structlog.get_logger(__name__)

# fontRules keys that are not script tags
RESERVED_RULE_KEYS = frozenset({"groups", "lookups"})

# Feature keys that hold substitution rules
RULE_GROUPS = ("liga", "context", "multi", "single")


# --- Canvas coordinates ---------------------------------------------------


def canvas_flip(baseline_y: float) -> Transform:
    """Affine map between canvas and engine coordinates.

    The map is its own inverse, so the same transform converts in both
    directions.

    Examples:
        >>> canvas_flip(700).transformPoint((10, 600))
        (10, 100)
    """
    return Transform(1, 0, 0, -1, 0, baseline_y)


def flip_offset(dy: float) -> float:
    """Flip a vertical offset between canvas and engine direction."""
    return -dy if dy else 0.0


def parse_pair_key(key: str) -> PairKey:
    """Parse a legacy ``"first-second"`` cache key.

    Args:
        key: Two decimal unicode values joined by a hyphen

    Returns:
        PairKey

    Raises:
        ValueError: If the key is not two integers

    Examples:
        >>> parse_pair_key("65-769")
        PairKey(first=65, second=769)
    """
    first, sep, second = key.partition("-")
    if not sep:
        raise ValueError(f"Malformed pair key: {key!r}")
    return PairKey(int(first), int(second))


def split_names(value: str | list[Any] | None) -> list[str]:
    """Split a comma-separated name list, or flatten a list of them."""
    if value is None:
        return []
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    names: list[str] = []
    for item in value:
        names.extend(split_names(item))
    return names


# --- Characters -----------------------------------------------------------


def _transform_mode(value: Any) -> TransformMode:
    try:
        return TransformMode(value)
    except ValueError:
        return TransformMode.RELATIVE


def _number(value: Any, default: float) -> float:
    return float(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else default


def normalize_transforms(raw: list[Any] | None, count: int) -> tuple[GlyphTransform, ...]:
    """Normalise a stored ``compositeTransform`` to one transform per component.

    Accepted encodings:
    - list of objects ``[{"scale", "x", "y", "mode"}, ...]``
    - list of lists ``[[scale, y, "absolute" | "touching"?], ...]``
    - simple ``[scale, y]``, applied to every component

    Stored y shifts are canvas offsets and come back flipped to y-up.

    Args:
        raw: Stored value (None when absent)
        count: Number of components of the character

    Returns:
        Tuple of transforms (empty when nothing is stored)

    Raises:
        InvalidRuleError: If the value matches none of the encodings
    """
    if not raw:
        return ()

    first = raw[0]
    if isinstance(first, dict):
        return tuple(
            GlyphTransform(
                scale=_number(entry.get("scale"), 1.0),
                x=_number(entry.get("x"), 0.0),
                y=flip_offset(_number(entry.get("y"), 0.0)),
                mode=_transform_mode(entry.get("mode")),
            )
            for entry in raw
        )

    if isinstance(first, list):
        transforms = []
        for entry in raw:
            if "touching" in entry:
                mode = TransformMode.TOUCHING
            elif "absolute" in entry:
                mode = TransformMode.ABSOLUTE
            else:
                mode = TransformMode.RELATIVE
            scale = _number(entry[0], 1.0) if len(entry) > 0 else 1.0
            y = flip_offset(_number(entry[1], 0.0)) if len(entry) > 1 else 0.0
            transforms.append(GlyphTransform(scale=scale, y=y, mode=mode))
        return tuple(transforms)

    if isinstance(first, (int, float)):
        shared = GlyphTransform(
            scale=_number(first, 1.0),
            y=flip_offset(_number(raw[1], 0.0)) if len(raw) > 1 else 0.0,
        )
        return (shared,) * max(count, 1)

    raise InvalidRuleError(f"unrecognised compositeTransform encoding: {raw!r}")


def _pair(value: list[str] | None, field_name: str, owner: str) -> tuple[str, str] | None:
    if value is None:
        return None
    if len(value) != 2:
        raise InvalidRuleError(f"'{owner}' {field_name} must name two glyphs, got {value!r}")
    return (value[0], value[1])


def character_from_model(model: CharacterModel) -> Character:
    """Convert a stored character record.

    A ``link`` list naming one glyph becomes a link; a list naming several
    glyphs is built like a composite.

    Raises:
        InvalidRuleError: If position/kern pairs or transforms are malformed
    """
    link: str | None = None
    composite = tuple(model.composite) if model.composite else None

    links = [model.link] if isinstance(model.link, str) else list(model.link or [])
    if len(links) == 1:
        link = links[0]
    elif len(links) > 1 and composite is None:
        composite = tuple(links)

    count = 1 if link is not None else len(composite or ())
    try:
        glyph_class = GlyphClass(model.glyph_class) if model.glyph_class else None
    except ValueError:
        glyph_class = None

    return Character(
        name=model.name,
        unicode=model.unicode,
        composite=composite,
        link=link,
        position=_pair(model.position, "position", model.name),
        kern=_pair(model.kern, "kern", model.name),
        transforms=normalize_transforms(model.composite_transform, count),
        hidden=model.hidden,
        lsb=model.lsb,
        rsb=model.rsb,
        glyph_class=glyph_class,
    )


def character_to_model(character: Character) -> CharacterModel:
    """Convert a character back to its stored record."""
    return CharacterModel(
        name=character.name,
        unicode=character.unicode,
        lsb=character.lsb,
        rsb=character.rsb,
        glyph_class=character.glyph_class.value if character.glyph_class else None,
        composite=list(character.composite) if character.composite else None,
        link=[character.link] if character.link is not None else None,
        position=list(character.position) if character.position else None,
        kern=list(character.kern) if character.kern else None,
        composite_transform=[
            {**t.to_dict(), "y": flip_offset(t.y)} for t in character.transforms
        ] or None,
        hidden=character.hidden,
    )


# --- Rules ----------------------------------------------------------------


def anchor_rule_from_entry(entry: list[Any]) -> AnchorRule:
    """Convert a ``[basePoint, markPoint, dx?, dy?]`` anchor entry.

    Adjustments are stored as strings; unparseable values count as 0. The
    stored dy grows downward.

    Raises:
        InvalidRuleError: If the entry has the wrong length or point names
    """
    if len(entry) not in (2, 4):
        raise InvalidRuleError(f"anchor entry must have 2 or 4 items, got {entry!r}")
    try:
        base_point = AttachmentPoint(entry[0])
        mark_point = AttachmentPoint(entry[1])
    except ValueError as e:
        raise InvalidRuleError(f"unknown attachment point in {entry!r}") from e

    def offset(value: Any) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return 0.0

    if len(entry) == 2:
        return AnchorRule(base_point, mark_point)
    return AnchorRule(
        base_point, mark_point, dx=offset(entry[2]), dy=flip_offset(offset(entry[3]))
    )


def anchor_rule_to_entry(rule: AnchorRule) -> list[str]:
    """Convert an anchor rule back to its stored list form."""
    entry = [rule.base_point.value, rule.mark_point.value]
    if rule.dx or rule.dy:
        entry += [f"{rule.dx:g}", f"{flip_offset(rule.dy):g}"]
    return entry


def positioning_rule_from_model(model: PositioningRuleModel) -> PositioningRule:
    """Convert a stored positioning rule. A gsub tag makes the rule fuse."""
    try:
        movement = MovementConstraint(model.movement) if model.movement else MovementConstraint.NONE
    except ValueError as e:
        raise InvalidRuleError(f"unknown movement constraint {model.movement!r}") from e

    return PositioningRule(
        base=tuple(model.base),
        mark=tuple(model.mark),
        movement=movement,
        fuse=bool(model.gsub),
        gpos=model.gpos,
        gsub=model.gsub,
        ligature_map=model.ligature_map or {},
    )


def positioning_rule_to_model(rule: PositioningRule) -> PositioningRuleModel:
    return PositioningRuleModel(
        base=list(rule.base),
        mark=list(rule.mark),
        gpos=rule.gpos,
        gsub=rule.gsub,
        ligature_map=rule.ligature_map or None,
        movement=None if rule.movement is MovementConstraint.NONE else rule.movement.value,
    )


def attachment_class_from_model(model: AttachmentClassModel) -> AttachmentClass:
    return AttachmentClass(
        members=tuple(model.members),
        name=model.name,
        exceptions=tuple(model.exceptions or ()),
        applies=tuple(model.applies or ()),
        except_pairs=tuple(model.except_pairs or ()),
    )


def attachment_class_to_model(cls: AttachmentClass) -> AttachmentClassModel:
    return AttachmentClassModel(
        name=cls.name,
        members=list(cls.members),
        exceptions=list(cls.exceptions) or None,
        applies=list(cls.applies) or None,
        except_pairs=list(cls.except_pairs) or None,
    )


def recommendation_from_entry(entry: list[Any]) -> KerningRecommendation:
    """Convert a ``[left, right, goal?]`` recommendation.

    Raises:
        InvalidRuleError: If the entry does not name two glyphs
    """
    if len(entry) not in (2, 3) or not all(isinstance(n, str) for n in entry[:2]):
        raise InvalidRuleError(f"kerning recommendation must be [left, right, goal?], got {entry!r}")
    goal = entry[2] if len(entry) == 3 else None
    return KerningRecommendation(left=entry[0], right=entry[1], goal=goal)


def recommendation_to_entry(rec: KerningRecommendation) -> list[Any]:
    return [rec.left, rec.right] if rec.goal is None else [rec.left, rec.right, rec.goal]


def _ligatures(output: str, value: Any) -> list[LigatureRule]:
    # A list of lists holds several component sequences for one output
    if isinstance(value, list) and value and all(isinstance(v, list) for v in value):
        return [LigatureRule(tuple(split_names(v)), output) for v in value]
    components = split_names(value)
    if not components:
        raise InvalidRuleError(f"ligature '{output}' has no components")
    return [LigatureRule(tuple(components), output)]


def _contextual(replacement: str, value: Any) -> ContextualRule:
    if not isinstance(value, dict):
        raise InvalidRuleError(f"contextual rule '{replacement}' must be an object")
    target = split_names(value.get("replace"))
    if not target:
        raise InvalidRuleError(f"contextual rule '{replacement}' has no target")
    return ContextualRule(
        target=tuple(target),
        replacement=replacement,
        left=tuple(split_names(value.get("left"))),
        right=tuple(split_names(value.get("right"))),
    )


def lookup_from_feature(name: str, feature: dict[str, Any]) -> Lookup:
    """Build a lookup from one feature or lookup block.

    Block layout (keys are outputs, values are inputs):
    ``liga``: ligature -> components, ``context``: replacement ->
    ``{replace, left, right}``, ``multi``: "out1,out2" -> input,
    ``single``: output -> input. Other keys are ignored.

    Raises:
        InvalidRuleError: If a rule block has an unusable shape
    """
    lookup = Lookup(name=name)
    for group in RULE_GROUPS:
        entries = feature.get(group)
        if entries is None:
            continue
        if not isinstance(entries, dict):
            raise InvalidRuleError(f"'{name}.{group}' must be an object")

        for key, value in entries.items():
            if group == "liga":
                for rule in _ligatures(key, value):
                    lookup.add(rule)
            elif group == "context":
                lookup.add(_contextual(key, value))
            elif group == "multi":
                if not isinstance(value, str):
                    raise InvalidRuleError(f"multiple substitution '{key}' needs one input glyph")
                lookup.add(MultipleRule(input=value, outputs=tuple(split_names(key))))
            else:
                if not isinstance(value, str):
                    raise InvalidRuleError(f"single substitution '{key}' needs one input glyph")
                lookup.add(SingleRule(input=value, output=key))
    return lookup


def lookups_from_rules(font_rules: dict[str, Any] | None) -> list[Lookup]:
    """Collect lookups from every script's features and the named lookups.

    Feature lookups come first, in document order, named by their feature
    tag; standalone lookups follow under their own names.
    """
    if not font_rules:
        return []

    lookups: list[Lookup] = []
    for key, block in font_rules.items():
        if key in RESERVED_RULE_KEYS or not isinstance(block, dict):
            continue
        for feature_tag, feature in block.items():
            if isinstance(feature, dict):
                lookups.append(lookup_from_feature(feature_tag, feature))

    for name, block in (font_rules.get("lookups") or {}).items():
        if isinstance(block, dict):
            lookups.append(lookup_from_feature(name, block))

    return lookups


def lookup_to_block(lookup: Lookup) -> dict[str, Any]:
    """Convert a lookup back to a ``{liga, context, multi, single}`` block."""
    block: dict[str, Any] = {}
    if lookup.ligatures:
        liga: dict[str, Any] = {}
        for rule in lookup.ligatures:
            components = list(rule.components)
            if rule.output not in liga:
                liga[rule.output] = components
            elif liga[rule.output] and isinstance(liga[rule.output][0], list):
                liga[rule.output].append(components)
            else:
                liga[rule.output] = [liga[rule.output], components]
        block["liga"] = liga
    if lookup.contextual:
        block["context"] = {
            rule.replacement: {
                "replace": list(rule.target),
                "left": list(rule.left),
                "right": list(rule.right),
            }
            for rule in lookup.contextual
        }
    if lookup.multiple:
        block["multi"] = {",".join(rule.outputs): rule.input for rule in lookup.multiple}
    if lookup.single:
        block["single"] = {rule.output: rule.input for rule in lookup.single}
    return block


# --- Metrics, outlines, caches --------------------------------------------


def metrics_from_model(model: MetricsModel, stroke_thickness: float) -> FontMetrics:
    """Convert canvas guide lines to y-up metrics with the baseline at 0.

    Ascender and descender are already font units and pass through.

    Examples:
        >>> metrics_from_model(MetricsModel(topLineY=300, baseLineY=700), 15).topline
        400.0
    """
    base = model.base_line_y

    def guide(y: float | None) -> float | None:
        return None if y is None else base - y

    return FontMetrics(
        units_per_em=model.units_per_em,
        ascender=model.ascender,
        descender=model.descender,
        baseline=0.0,
        topline=base - model.top_line_y,
        super_topline=guide(model.super_top_line_y),
        sub_baseline=guide(model.sub_base_line_y),
        default_lsb=model.default_lsb,
        default_rsb=model.default_rsb,
        stroke_thickness=stroke_thickness,
    )


def metrics_to_model(metrics: FontMetrics, baseline_y: float) -> MetricsModel:
    """Convert y-up metrics back to canvas guide lines below ``baseline_y``."""

    def guide(y: float | None) -> float | None:
        return None if y is None else baseline_y - y

    return MetricsModel(
        units_per_em=metrics.units_per_em,
        ascender=metrics.ascender,
        descender=metrics.descender,
        base_line_y=baseline_y - metrics.baseline,
        top_line_y=baseline_y - metrics.topline,
        super_top_line_y=guide(metrics.super_topline),
        sub_base_line_y=guide(metrics.sub_baseline),
        default_lsb=metrics.default_lsb,
        default_rsb=metrics.default_rsb,
    )


def outline_from_model(model: GlyphDataModel, baseline_y: float) -> Outline:
    """Convert stored canvas glyph data to a y-up Outline.

    Raises:
        InvalidRuleError: If a path uses an unknown drawing tool
    """
    try:
        outline = Outline.from_dict(model.model_dump(by_alias=True, exclude_none=True))
    except ValueError as e:
        raise InvalidRuleError(f"unknown path type: {e}") from e
    return outline.transformed(canvas_flip(baseline_y))


def outline_to_model(outline: Outline, baseline_y: float) -> GlyphDataModel:
    return GlyphDataModel.model_validate(outline.transformed(canvas_flip(baseline_y)).to_dict())


def positioning_from_entries(
    entries: list[tuple[str, Any] | PositionRecordModel],
) -> PositioningCache:
    """Read cached mark offsets, flipping their canvas dy to y-up."""
    cache = PositioningCache()
    for entry in entries:
        if isinstance(entry, PositionRecordModel):
            cache.set(PairKey(entry.base, entry.mark), Point(entry.x, flip_offset(entry.y)))
        else:
            key, point = entry
            cache.set(parse_pair_key(key), Point(point.x, flip_offset(point.y)))
    return cache


def kerning_from_entries(entries: list[tuple[str, float] | KerningRecordModel]) -> KerningCache:
    cache = KerningCache()
    for entry in entries:
        if isinstance(entry, KerningRecordModel):
            cache.set(PairKey(entry.left, entry.right), round(entry.value))
        else:
            key, value = entry
            cache.set(parse_pair_key(key), round(value))
    return cache


# --- Documents ------------------------------------------------------------


def document_to_project(document: ProjectDocument) -> Project:
    """Convert a validated project document to a Project.

    Args:
        document: Validated document

    Returns:
        Project with outline revision 0

    Raises:
        InvalidRuleError: If an authored rule has an unusable shape
        ValueError: If a legacy cache key is malformed
    """
    font_rules = document.font_rules or {}
    groups: dict[str, list[str]] = dict(font_rules.get("groups") or {})
    groups.update(document.groups)

    mark_attachment: MarkAttachmentTable = {
        base: {mark: anchor_rule_from_entry(entry) for mark, entry in marks.items()}
        for base, marks in document.mark_attachment_rules.items()
    }
    baseline_y = document.metrics.base_line_y

    project = Project(
        character_sets=[
            CharacterSet(
                name=char_set.name_key,
                characters=[character_from_model(c) for c in char_set.characters],
            )
            for char_set in document.character_sets
        ],
        groups=groups,
        lookups=lookups_from_rules(font_rules),
        positioning_rules=[positioning_rule_from_model(r) for r in document.positioning_rules],
        mark_attachment=mark_attachment,
        mark_classes=[attachment_class_from_model(c) for c in document.mark_attachment_classes],
        base_classes=[attachment_class_from_model(c) for c in document.base_attachment_classes],
        kerning_recommendations=[
            recommendation_from_entry(entry) for entry in document.recommended_kerning
        ],
        metrics=metrics_from_model(document.metrics, document.settings.stroke_thickness),
        outlines=OutlineStore(
            {unicode: outline_from_model(g, baseline_y) for unicode, g in document.glyphs}
        ),
        positioning=positioning_from_entries(document.mark_positioning),
        kerning=kerning_from_entries(document.kerning),
    )

    logger.debug(
        "Project converted",
        characters=sum(len(s.characters) for s in project.character_sets),
        outlines=len(project.outlines),
        lookups=len(project.lookups),
        positioned=len(project.positioning),
        kerned=len(project.kerning),
    )
    return project


def project_to_document(project: Project, base: ProjectDocument | None = None) -> ProjectDocument:
    """Convert a Project to a document, keeping tool-only state from ``base``.

    Engine-owned fields are rebuilt from the project; everything else (tool
    settings, unknown keys, non-rule ``fontRules`` entries) is copied from
    ``base``. Caches are written as structured records. Geometry is flipped
    back onto the canvas of ``base`` (the default guides without one).

    Args:
        project: Project to serialize
        base: Document the project was loaded from, if any

    Returns:
        New ProjectDocument
    """
    document = base.model_copy(deep=True) if base is not None else ProjectDocument()

    if base is not None and base.font_rules is not None:
        # Rules are never edited by the engine; keep the authored layout
        font_rules = dict(document.font_rules or {})
    else:
        font_rules = {
            "lookups": {lookup.name: lookup_to_block(lookup) for lookup in project.lookups}
        }
    font_rules["groups"] = dict(project.groups)

    # Geometry goes back onto the canvas the project was drawn on
    baseline_y = document.metrics.base_line_y
    document.settings.stroke_thickness = project.metrics.stroke_thickness

    document.glyphs = [
        (unicode, outline_to_model(outline, baseline_y))
        for unicode, outline in project.outlines.items()
    ]
    document.kerning = [
        KerningRecordModel(left=key.first, right=key.second, value=value)
        for key, value in project.kerning.items()
    ]
    document.mark_positioning = [
        PositionRecordModel(
            base=key.first, mark=key.second, x=offset.x, y=flip_offset(offset.y)
        )
        for key, offset in project.positioning.items()
    ]
    document.character_sets = [
        CharacterSetModel(
            name_key=char_set.name,
            characters=[character_to_model(c) for c in char_set.characters],
        )
        for char_set in project.character_sets
    ]
    document.font_rules = font_rules
    document.metrics = metrics_to_model(project.metrics, baseline_y)
    document.positioning_rules = [positioning_rule_to_model(r) for r in project.positioning_rules]
    document.mark_attachment_rules = {
        base_name: {mark: anchor_rule_to_entry(rule) for mark, rule in marks.items()}
        for base_name, marks in project.mark_attachment.items()
    }
    document.mark_attachment_classes = [attachment_class_to_model(c) for c in project.mark_classes]
    document.base_attachment_classes = [attachment_class_to_model(c) for c in project.base_classes]
    document.recommended_kerning = [
        recommendation_to_entry(r) for r in project.kerning_recommendations
    ]
    # Merged into fontRules.groups above
    document.groups = {}
    return document

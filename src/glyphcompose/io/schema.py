"""Pydantic models of the project document.

The document is the JSON file written by the authoring tool. Field names
follow its camelCase keys through aliases; unknown keys on the top-level
document are kept so a load/save round trip does not lose tool state.

Several fields accept more than one encoding (legacy ``"base-mark"`` cache
keys next to structured records, list or string links, three transform
encodings). The models only check the outer shape; ``glyphcompose.io.
converter`` normalises the variants.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PointModel(_Model):
    x: float
    y: float


class SegmentModel(_Model):
    point: PointModel
    handle_in: PointModel = Field(default_factory=lambda: PointModel(x=0, y=0), alias="handleIn")
    handle_out: PointModel = Field(default_factory=lambda: PointModel(x=0, y=0), alias="handleOut")


class PathModel(_Model):
    """One drawn path. Tool-only keys such as ``id`` and ``angle`` are dropped."""

    type: str = "pen"
    points: list[PointModel] = Field(default_factory=list)
    segment_groups: list[list[SegmentModel]] | None = Field(default=None, alias="segmentGroups")
    group_id: str | None = Field(default=None, alias="groupId")


class GlyphDataModel(_Model):
    paths: list[PathModel] = Field(default_factory=list)


class CharacterModel(_Model):
    """Character record as stored in a character set."""

    name: str
    unicode: int | None = None
    lsb: int | None = None
    rsb: int | None = None
    glyph_class: str | None = Field(default=None, alias="glyphClass")
    composite: list[str] | None = None
    link: list[str] | str | None = None
    position: list[str] | None = None
    kern: list[str] | None = None
    composite_transform: list[Any] | None = Field(default=None, alias="compositeTransform")
    hidden: bool = False


class CharacterSetModel(_Model):
    name_key: str = Field(alias="nameKey")
    characters: list[CharacterModel] = Field(default_factory=list)


class MetricsModel(_Model):
    """Font metrics. Guide lines are canvas y values (growing downward)."""

    units_per_em: int = Field(default=1000, alias="unitsPerEm")
    ascender: float = 800.0
    descender: float = -200.0
    # Guides of a newly created project
    top_line_y: float = Field(default=300.0, alias="topLineY")
    base_line_y: float = Field(default=700.0, alias="baseLineY")
    super_top_line_y: float | None = Field(default=None, alias="superTopLineY")
    sub_base_line_y: float | None = Field(default=None, alias="subBaseLineY")
    default_lsb: int = Field(default=50, alias="defaultLSB")
    default_rsb: int = Field(default=50, alias="defaultRSB")


class SettingsModel(BaseModel):
    """Tool settings. Only the stroke thickness is read; the rest is carried."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    stroke_thickness: float = Field(default=15.0, alias="strokeThickness")


class PositioningRuleModel(_Model):
    base: list[str]
    mark: list[str] = Field(default_factory=list)
    gpos: str | None = None
    gsub: str | None = None
    ligature_map: dict[str, dict[str, str]] | None = Field(default=None, alias="ligatureMap")
    movement: str | None = None


class AttachmentClassModel(_Model):
    name: str | None = None
    members: list[str]
    exceptions: list[str] | None = None
    applies: list[str] | None = None
    except_pairs: list[str] | None = Field(default=None, alias="exceptPairs")


class PositionRecordModel(_Model):
    """Structured positioning cache entry."""

    base: int
    mark: int
    x: float
    y: float


class KerningRecordModel(_Model):
    """Structured kerning cache entry."""

    left: int
    right: int
    value: int


class ProjectDocument(BaseModel):
    """Top-level project document."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str | None = None
    script_id: str | None = Field(default=None, alias="scriptId")
    settings: SettingsModel = Field(default_factory=SettingsModel)
    glyphs: list[tuple[int, GlyphDataModel]] = Field(default_factory=list)
    kerning: list[tuple[str, float] | KerningRecordModel] = Field(default_factory=list)
    mark_positioning: list[tuple[str, PointModel] | PositionRecordModel] = Field(
        default_factory=list, alias="markPositioning"
    )
    character_sets: list[CharacterSetModel] = Field(default_factory=list, alias="characterSets")
    font_rules: dict[str, Any] | None = Field(default=None, alias="fontRules")
    metrics: MetricsModel = Field(default_factory=MetricsModel)
    positioning_rules: list[PositioningRuleModel] = Field(
        default_factory=list, alias="positioningRules"
    )
    mark_attachment_rules: dict[str, dict[str, list[str | float]]] = Field(
        default_factory=dict, alias="markAttachmentRules"
    )
    mark_attachment_classes: list[AttachmentClassModel] = Field(
        default_factory=list, alias="markAttachmentClasses"
    )
    base_attachment_classes: list[AttachmentClassModel] = Field(
        default_factory=list, alias="baseAttachmentClasses"
    )
    recommended_kerning: list[list[str | float]] = Field(
        default_factory=list, alias="recommendedKerning"
    )
    groups: dict[str, list[str]] = Field(default_factory=dict)
    saved_at: str | None = Field(default=None, alias="savedAt")

    def dump(self) -> dict[str, Any]:
        """Serialize with the document's camelCase keys, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

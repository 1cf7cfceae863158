"""Font metrics used by positioning and kerning."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FontMetrics:
    """Vertical guides and spacing defaults of a project.

    All values are y-up font units.

    Attributes:
        units_per_em: Units per em
        ascender: Ascender height
        descender: Descender depth (negative)
        baseline: Baseline guide
        topline: Top guide (x-height or headline, script dependent)
        super_topline: Superscript reference line
        sub_baseline: Subscript reference line
        default_lsb: Left side bearing used when a glyph has none
        default_rsb: Right side bearing used when a glyph has none
        stroke_thickness: Stroke width of drawn paths
    """

    units_per_em: int = 1000
    ascender: float = 800.0
    descender: float = -200.0
    baseline: float = 0.0
    topline: float = 500.0
    super_topline: float | None = None
    sub_baseline: float | None = None
    default_lsb: int = 50
    default_rsb: int = 50
    stroke_thickness: float = 15.0

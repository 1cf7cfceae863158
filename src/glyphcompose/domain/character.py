"""Character records and their structural descriptors.

A character is one entry of the project's character set. Besides its
identity it may carry one of four structural descriptors that tell the
composition engine how its outline is built:

- composite: a static ligature of listed components
- link: a geometric alias of another glyph
- position: a base + mark attachment pair
- kern: a kerning-pair preview entry
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fontTools.misc.transform import Transform

from glyphcompose.domain.outline import BoundingBox


class GlyphClass(str, Enum):
    """OpenType GDEF-style glyph class."""

    BASE = "base"
    LIGATURE = "ligature"
    MARK = "mark"


class TransformMode(str, Enum):
    """How a component is laid out relative to its neighbours.

    The resolver only applies the geometric part of a transform; the mode
    is carried through for the export layer.
    """

    RELATIVE = "relative"
    ABSOLUTE = "absolute"
    TOUCHING = "touching"


@dataclass(frozen=True, slots=True)
class GlyphTransform:
    """Glyph-local transform stored on a character record.

    Scaling happens about the centre of the component's bounding box, then
    the (x, y) translation is applied.

    Attributes:
        scale: Uniform scale factor
        x: Horizontal shift in font units
        y: Vertical shift in font units
        mode: Layout mode recorded for export
    """

    scale: float = 1.0
    x: float = 0.0
    y: float = 0.0
    mode: TransformMode = TransformMode.RELATIVE

    def is_identity(self) -> bool:
        """Check if applying the transform would leave geometry unchanged."""
        return self.scale == 1.0 and self.x == 0 and self.y == 0

    def to_affine(self, bbox: BoundingBox | None) -> Transform:
        """Build the affine transform for a component with the given bbox.

        Args:
            bbox: Component bounding box (scaling is skipped when None)

        Returns:
            fontTools Transform
        """
        transform = Transform().translate(self.x, self.y)
        if bbox is not None and self.scale != 1.0:
            cx, cy = bbox.center.to_tuple()
            transform = transform.translate(cx, cy).scale(self.scale).translate(-cx, -cy)
        return transform

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"scale": self.scale, "x": self.x, "y": self.y, "mode": self.mode.value}


@dataclass(frozen=True)
class Character:
    """One entry of the project character set.

    At most one descriptor is normally set; when several are, the resolver
    applies link, composite, position, kern in that order.

    Attributes:
        name: Canonical glyph name
        unicode: Unicode scalar value (None for unencoded glyphs)
        composite: Component names of a static ligature
        link: Name of the glyph this one aliases
        position: (base name, mark name) attachment pair
        kern: (left name, right name) kerning preview pair
        transforms: Per-component transforms (index 0 applies to ``link``)
        hidden: Hidden from the character grid
        lsb: Left side bearing override
        rsb: Right side bearing override
        glyph_class: GDEF-style class
    """

    name: str
    unicode: int | None = None
    composite: tuple[str, ...] | None = None
    link: str | None = None
    position: tuple[str, str] | None = None
    kern: tuple[str, str] | None = None
    transforms: tuple[GlyphTransform, ...] = field(default_factory=tuple)
    hidden: bool = False
    lsb: int | None = None
    rsb: int | None = None
    glyph_class: GlyphClass | None = None

    def transform_for(self, index: int) -> GlyphTransform | None:
        """Get the stored transform for a component index, if any."""
        if 0 <= index < len(self.transforms):
            return self.transforms[index]
        return None

    def component_names(self) -> tuple[str, ...]:
        """Names of every glyph this character is built from."""
        if self.link is not None:
            return (self.link,)
        if self.composite:
            return self.composite
        if self.position is not None:
            return self.position
        if self.kern is not None:
            return self.kern
        return ()

    def is_constructed(self) -> bool:
        """Check if the character has any structural descriptor."""
        return bool(self.component_names())


@dataclass
class CharacterSet:
    """Named, ordered group of characters.

    Attributes:
        name: Set key (also usable as a ``$name`` class reference)
        characters: Characters in canonical order
    """

    name: str
    characters: list[Character] = field(default_factory=list)

    def names(self) -> list[str]:
        """Glyph names of the set, in order."""
        return [c.name for c in self.characters]

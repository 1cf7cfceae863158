"""Authored substitution and positioning rules.

Substitution rules come in four shapes that share no fields, so each shape
is its own frozen dataclass and ``SubstitutionRule`` is their union. The
``kind`` class attribute is the discriminator.

Every name field holds tokens: literal glyph names or class references
(``@group`` / ``$set``), resolved later by group expansion.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Literal


class RuleKind(str, Enum):
    """Substitution rule shape."""

    LIGATURE = "ligature"
    CONTEXTUAL = "contextual"
    MULTIPLE = "multiple"
    SINGLE = "single"


@dataclass(frozen=True)
class LigatureRule:
    """Ordered input components replaced by one output glyph."""

    kind: ClassVar[Literal[RuleKind.LIGATURE]] = RuleKind.LIGATURE

    components: tuple[str, ...]
    output: str


@dataclass(frozen=True)
class ContextualRule:
    """Target sequence replaced by one glyph, conditioned on context.

    Attributes:
        target: Glyph sequence to replace
        replacement: Replacement glyph
        left: Backtrack context (may be empty)
        right: Lookahead context (may be empty)
    """

    kind: ClassVar[Literal[RuleKind.CONTEXTUAL]] = RuleKind.CONTEXTUAL

    target: tuple[str, ...]
    replacement: str
    left: tuple[str, ...] = ()
    right: tuple[str, ...] = ()


@dataclass(frozen=True)
class MultipleRule:
    """One input glyph replaced by a sequence."""

    kind: ClassVar[Literal[RuleKind.MULTIPLE]] = RuleKind.MULTIPLE

    input: str
    outputs: tuple[str, ...]


@dataclass(frozen=True)
class SingleRule:
    """One input glyph replaced by one output glyph."""

    kind: ClassVar[Literal[RuleKind.SINGLE]] = RuleKind.SINGLE

    input: str
    output: str


SubstitutionRule = LigatureRule | ContextualRule | MultipleRule | SingleRule


@dataclass
class Lookup:
    """Named collection of substitution rules, one list per shape.

    Attributes:
        name: Lookup or feature name
        ligatures: Ligature rules in authored order
        contextual: Contextual rules in authored order
        multiple: Multiple substitution rules in authored order
        single: Single substitution rules in authored order
    """

    name: str
    ligatures: list[LigatureRule] = field(default_factory=list)
    contextual: list[ContextualRule] = field(default_factory=list)
    multiple: list[MultipleRule] = field(default_factory=list)
    single: list[SingleRule] = field(default_factory=list)

    def rules(self) -> list[SubstitutionRule]:
        """All rules, grouped by shape, each group in authored order."""
        return [*self.ligatures, *self.contextual, *self.multiple, *self.single]

    def add(self, rule: SubstitutionRule) -> None:
        """Append a rule to the collection matching its shape."""
        match rule:
            case LigatureRule():
                self.ligatures.append(rule)
            case ContextualRule():
                self.contextual.append(rule)
            case MultipleRule():
                self.multiple.append(rule)
            case SingleRule():
                self.single.append(rule)


class MovementConstraint(str, Enum):
    """Axis along which a mark may move relative to its base."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    NONE = "none"


@dataclass(frozen=True)
class PositioningRule:
    """Mark-to-base positioning rule.

    Attributes:
        base: Base tokens
        mark: Mark tokens (empty matches only mark-less lookups)
        movement: Movement constraint for computed offsets
        fuse: Bake base + mark into one literal outline on accept
        gpos: GPOS feature tag, if any
        gsub: GSUB feature tag, if any (its presence sets ``fuse``)
        ligature_map: Per-pair ligature name overrides (base -> mark -> name)
    """

    base: tuple[str, ...]
    mark: tuple[str, ...] = ()
    movement: MovementConstraint = MovementConstraint.NONE
    fuse: bool = False
    gpos: str | None = None
    gsub: str | None = None
    ligature_map: dict[str, dict[str, str]] = field(default_factory=dict, hash=False, compare=False)


class AttachmentPoint(str, Enum):
    """Named point on a bounding box."""

    TOP_LEFT = "topLeft"
    TOP_CENTER = "topCenter"
    TOP_RIGHT = "topRight"
    MID_LEFT = "midLeft"
    MID_RIGHT = "midRight"
    BOTTOM_LEFT = "bottomLeft"
    BOTTOM_CENTER = "bottomCenter"
    BOTTOM_RIGHT = "bottomRight"


@dataclass(frozen=True, slots=True)
class AnchorRule:
    """Anchor pairing for one base/mark combination.

    The mark's ``mark_point`` is aligned to the base's ``base_point``
    shifted by (dx, dy).
    """

    base_point: AttachmentPoint
    mark_point: AttachmentPoint
    dx: float = 0.0
    dy: float = 0.0


MarkAttachmentTable = dict[str, dict[str, AnchorRule]]
"""Base token -> mark token -> anchor rule."""


@dataclass(frozen=True)
class AttachmentClass:
    """Glyphs that share one accepted offset.

    The first expanded member is the class leader. Accepting a pair for any
    member cascades the offset to the other members.

    Attributes:
        members: Member tokens
        name: Optional display name
        exceptions: Partner tokens the class does not apply to
        applies: Partner tokens the class is restricted to (empty = all)
        except_pairs: "base-mark" name pairs positioned independently
    """

    members: tuple[str, ...]
    name: str | None = None
    exceptions: tuple[str, ...] = ()
    applies: tuple[str, ...] = ()
    except_pairs: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class KerningRecommendation:
    """Authored target spacing for a kerning pair.

    ``goal`` is a number of font units, ``"lsb"`` / ``"rsb"`` to reuse a
    side bearing, or None for the default spacing.
    """

    left: str
    right: str
    goal: float | str | None = None

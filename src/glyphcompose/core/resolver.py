"""Glyph composition.

Turns a character record into the outline to render or export. The
character's structural descriptor decides how, checked in this order (the
first one set wins):

1. link      - the linked glyph's outline, with the stored transform
2. composite - component outlines concatenated in listed order
3. position  - base outline plus the mark moved by the accepted offset
4. kern      - stored outline (a kerning-pair placeholder)
5. plain     - stored outline

Resolution never raises on incomplete data: missing glyphs contribute
nothing, cycles are cut, and unaccepted position pairs fall back to the
configured policy.
"""

from collections.abc import Iterable, Mapping, Sequence

import structlog

from glyphcompose.config import GlyphComposeSettings, UnresolvedPolicy, get_default_settings
from glyphcompose.core.bbox import glyph_bbox
from glyphcompose.domain import (
    EMPTY_OUTLINE,
    Character,
    CharacterSet,
    GlyphTransform,
    Outline,
    PairKey,
    PositioningCache,
    Project,
)

logger = structlog.get_logger(__name__)

# Space, ZWNJ and ZWJ have no ink but still count as renderable
INVISIBLE_UNICODES = frozenset({0x0020, 0x200C, 0x200D})


def export_glyph_name(unicode: int) -> str:
    """AGL-style glyph name for a code point.

    Examples:
        >>> export_glyph_name(32)
        'space'
        >>> export_glyph_name(0x915)
        'uni0915'
        >>> export_glyph_name(0x1F600)
        'u1F600'
    """
    if unicode == 0x20:
        return "space"
    if unicode < 0x10000:
        return f"uni{unicode:04X}"
    return f"u{unicode:X}"


def pair_key(
    names: Sequence[str] | None, characters: Mapping[str, Character]
) -> PairKey | None:
    """Cache key for a (first, second) name pair.

    Returns None when either glyph is unknown or unencoded.
    """
    if not names or len(names) != 2:
        return None
    first = characters.get(names[0])
    second = characters.get(names[1])
    if first is None or second is None or first.unicode is None or second.unicode is None:
        return None
    return PairKey(first.unicode, second.unicode)


class GlyphResolver:
    """Resolves characters of one project into outlines.

    Results are memoised. The memo is dropped whenever the outline store
    revision advances, the positioning cache is replaced or edited, or the
    character sets are replaced, so a resolver can be kept for the lifetime
    of an editing session. The resolver holds on to the objects it last saw
    and compares them by identity.

    Example:
        resolver = GlyphResolver(project)
        outline = resolver.resolve(project.require("ka_aa"))
    """

    def __init__(self, project: Project, settings: GlyphComposeSettings | None = None) -> None:
        self.project = project
        self.settings = settings or get_default_settings()
        self._memo: dict[str, Outline] = {}
        self._state: tuple[int, PositioningCache, int, list[CharacterSet]] | None = None
        self._characters: dict[str, Character] = {}

    def _sync(self) -> None:
        positioning = self.project.positioning
        state = (
            self.project.outlines.revision,
            positioning,
            positioning.revision,
            self.project.character_sets,
        )
        if not self._same_state(state):
            if self._state is not None:
                logger.debug("Composition memo dropped", revision=state[0])
            self._memo.clear()
            self._characters = self.project.characters_by_name()
            self._state = state

    def _same_state(
        self, state: tuple[int, PositioningCache, int, list[CharacterSet]]
    ) -> bool:
        if self._state is None:
            return False
        revision, positioning, cache_revision, character_sets = self._state
        return (
            state[0] == revision
            and state[1] is positioning
            and state[2] == cache_revision
            and state[3] is character_sets
        )

    def invalidate(self) -> None:
        """Drop memoised compositions explicitly."""
        self._state = None

    @property
    def max_depth(self) -> int:
        return self.settings.resolver.max_depth

    def character(self, name: str) -> Character | None:
        """Look up a character by name."""
        self._sync()
        return self._characters.get(name)

    def stored(self, character: Character) -> Outline:
        """The character's own stored outline (empty when undrawn)."""
        return self.project.outlines.get(character.unicode)

    def is_drawn(self, character: Character) -> bool:
        """Check if the character has a drawn stored outline."""
        return self.project.outlines.is_drawn(character.unicode)

    def resolve(self, character: Character) -> Outline:
        """Resolve a character into the outline to render.

        Args:
            character: Character to resolve

        Returns:
            Composed outline; empty when there is nothing to draw
        """
        self._sync()
        cached = self._memo.get(character.name)
        if cached is not None:
            return cached

        outline = self._resolve(character, depth=0, chain=())
        self._memo[character.name] = outline
        return outline

    def resolve_name(self, name: str) -> Outline:
        """Resolve by name; unknown names resolve to an empty outline."""
        character = self.character(name)
        if character is None:
            return EMPTY_OUTLINE
        return self.resolve(character)

    def _component(self, name: str, depth: int, chain: tuple[str, ...]) -> Outline:
        component = self._characters.get(name)
        if component is None:
            logger.debug("Component missing", component=name, chain=list(chain))
            return EMPTY_OUTLINE
        if name in chain:
            logger.debug("Composition cycle cut", component=name, chain=list(chain))
            return self.stored(component)
        if depth >= self.max_depth:
            return self.stored(component)
        return self._resolve(component, depth, chain)

    def _transformed(self, outline: Outline, transform: GlyphTransform | None) -> Outline:
        if transform is None or transform.is_identity() or not outline.is_drawn():
            return outline
        bbox = glyph_bbox(
            outline,
            self.project.metrics.stroke_thickness,
            precision=self.settings.bbox.precision,
            tolerance=self.settings.bbox.flatten_tolerance,
        )
        return outline.transformed(transform.to_affine(bbox))

    def _resolve(self, character: Character, depth: int, chain: tuple[str, ...]) -> Outline:
        chain = chain + (character.name,)

        if character.link is not None:
            source = self._component(character.link, depth + 1, chain)
            return self._transformed(source, character.transform_for(0))

        if character.composite:
            outline = EMPTY_OUTLINE
            for index, name in enumerate(character.composite):
                component = self._component(name, depth + 1, chain)
                outline = outline.concat(self._transformed(component, character.transform_for(index)))
            return outline

        if character.position is not None:
            return self._resolve_position(character, depth, chain)

        return self.stored(character)

    def _resolve_position(
        self, character: Character, depth: int, chain: tuple[str, ...]
    ) -> Outline:
        own = self.stored(character)
        if own.is_drawn():
            return own

        base_name, mark_name = character.position
        base = self._component(base_name, depth + 1, chain)
        mark = self._component(mark_name, depth + 1, chain)

        key = pair_key(character.position, self._characters)
        offset = self.project.positioning.get(key) if key is not None else None
        if offset is not None:
            return base.concat(mark.translated(offset.x, offset.y))

        if self.settings.resolver.unresolved_policy == UnresolvedPolicy.EMPTY:
            return EMPTY_OUTLINE
        return base

    def is_renderable(self, character: Character) -> bool:
        """Check if the character can be shown.

        Drawn characters are renderable; constructed characters are when
        every component they name is drawn.
        """
        self._sync()
        if self.is_drawn(character):
            return True

        if character.is_constructed():
            return all(
                (component := self._characters.get(name)) is not None
                and self.resolve(component).is_drawn()
                for name in character.component_names()
            )

        return character.unicode in INVISIBLE_UNICODES

    def is_complete(self, character: Character) -> bool:
        """Check if the character needs no further work.

        Complete means drawn, an accepted position or kern pair, or a
        link/composite whose components are all drawn.
        """
        self._sync()
        if self.is_drawn(character):
            return True

        if character.position is not None:
            key = pair_key(character.position, self._characters)
            if key is not None and key in self.project.positioning:
                return True

        if character.kern is not None:
            key = pair_key(character.kern, self._characters)
            if key is not None and key in self.project.kerning:
                return True

        names = (character.link,) if character.link is not None else character.composite
        if names:
            return all(
                (component := self._characters.get(name)) is not None
                and self.is_drawn(component)
                for name in names
            )

        return False

    def renderable(
        self, characters: Iterable[Character] | None = None, include_hidden: bool = False
    ) -> list[tuple[Character, Outline]]:
        """Resolve characters and drop those that come out empty.

        Args:
            characters: Characters to resolve (default: the whole project in
                canonical order)
            include_hidden: Keep characters flagged hidden

        Returns:
            (character, outline) pairs with drawn outlines, in input order
        """
        if characters is None:
            characters = self.project.iter_characters()

        result: list[tuple[Character, Outline]] = []
        for character in characters:
            if character.hidden and not include_hidden:
                continue
            outline = self.resolve(character)
            if outline.is_drawn():
                result.append((character, outline))
        return result

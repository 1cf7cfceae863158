"""Project state consumed by the composition engine.

The project bundles everything the engine reads: the character set, the
class table, authored rules, metrics, the outline store, and the two
result caches. Only the accept operations produce new caches or outlines,
and they do so through ``AcceptResult.apply_to`` in a single step.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from glyphcompose.domain.cache import KerningCache, PositioningCache
from glyphcompose.domain.character import Character, CharacterSet
from glyphcompose.domain.metrics import FontMetrics
from glyphcompose.domain.outline import EMPTY_OUTLINE, Outline
from glyphcompose.domain.rules import (
    AttachmentClass,
    KerningRecommendation,
    Lookup,
    MarkAttachmentTable,
    PositioningRule,
)
from glyphcompose.exceptions import CharacterNotFoundError


class OutlineStore:
    """Outlines keyed by unicode, with a revision counter.

    The drawing subsystem owns the outlines. Any change must go through
    ``update`` / ``remove`` (or an explicit ``bump``) so the revision
    advances and cached compositions are treated as stale.
    """

    def __init__(self, outlines: Mapping[int, Outline] | None = None, revision: int = 0) -> None:
        self._outlines: dict[int, Outline] = dict(outlines or {})
        self._revision = revision

    @property
    def revision(self) -> int:
        """Monotonically increasing change counter."""
        return self._revision

    def __contains__(self, unicode: object) -> bool:
        return unicode in self._outlines

    def __len__(self) -> int:
        return len(self._outlines)

    def get(self, unicode: int | None) -> Outline:
        """Get the stored outline, or an empty outline when undrawn."""
        if unicode is None:
            return EMPTY_OUTLINE
        return self._outlines.get(unicode, EMPTY_OUTLINE)

    def is_drawn(self, unicode: int | None) -> bool:
        """Check if a stored outline exists and carries geometry."""
        return self.get(unicode).is_drawn()

    def items(self) -> list[tuple[int, Outline]]:
        """Stored outlines sorted by unicode."""
        return sorted(self._outlines.items())

    def bump(self) -> int:
        """Advance the revision counter and return the new value."""
        self._revision += 1
        return self._revision

    def update(self, entries: Mapping[int, Outline]) -> None:
        """Replace outlines and advance the revision once."""
        if not entries:
            return
        self._outlines.update(entries)
        self.bump()

    def remove(self, unicodes: Iterable[int]) -> None:
        """Drop outlines and advance the revision once if anything changed."""
        self.apply_changes({}, unicodes)

    def apply_changes(self, updates: Mapping[int, Outline], removals: Iterable[int] = ()) -> None:
        """Remove then replace outlines, advancing the revision at most once."""
        changed = False
        for unicode in removals:
            if self._outlines.pop(unicode, None) is not None:
                changed = True
        if updates:
            self._outlines.update(updates)
            changed = True
        if changed:
            self.bump()


@dataclass
class Project:
    """Everything the engine needs to resolve glyphs.

    Attributes:
        character_sets: Ordered character sets (canonical order)
        groups: Glyph class table
        lookups: Substitution lookups
        positioning_rules: Positioning rules in authored order
        mark_attachment: Anchor table
        mark_classes: Mark attachment classes
        base_classes: Base attachment classes
        kerning_recommendations: Authored kerning targets
        metrics: Font metrics
        outlines: Outline store
        positioning: Accepted mark offsets
        kerning: Accepted kerning values
    """

    character_sets: list[CharacterSet] = field(default_factory=list)
    groups: dict[str, list[str]] = field(default_factory=dict)
    lookups: list[Lookup] = field(default_factory=list)
    positioning_rules: list[PositioningRule] = field(default_factory=list)
    mark_attachment: MarkAttachmentTable = field(default_factory=dict)
    mark_classes: list[AttachmentClass] = field(default_factory=list)
    base_classes: list[AttachmentClass] = field(default_factory=list)
    kerning_recommendations: list[KerningRecommendation] = field(default_factory=list)
    metrics: FontMetrics = field(default_factory=FontMetrics)
    outlines: OutlineStore = field(default_factory=OutlineStore)
    positioning: PositioningCache = field(default_factory=PositioningCache)
    kerning: KerningCache = field(default_factory=KerningCache)

    def iter_characters(self) -> Iterator[Character]:
        """Characters in canonical order, first occurrence of a name only."""
        seen: set[str] = set()
        for char_set in self.character_sets:
            for char in char_set.characters:
                if char.name not in seen:
                    seen.add(char.name)
                    yield char

    def characters_by_name(self) -> dict[str, Character]:
        """Name -> character lookup."""
        return {char.name: char for char in self.iter_characters()}

    def find(self, name: str) -> Character | None:
        """Find a character by name."""
        for char in self.iter_characters():
            if char.name == name:
                return char
        return None

    def require(self, name: str) -> Character:
        """Find a character by name or raise CharacterNotFoundError."""
        char = self.find(name)
        if char is None:
            raise CharacterNotFoundError(name)
        return char

    def class_table(self) -> dict[str, list[str]]:
        """Class table used for expansion.

        Character sets are folded in under their set name so ``$set``
        references resolve; explicit groups win on a name collision.
        """
        table = {char_set.name: char_set.names() for char_set in self.character_sets}
        table.update(self.groups)
        return table

    def replace_character(self, updated: Character) -> None:
        """Swap the record with the same name in every set that holds it."""
        for char_set in self.character_sets:
            char_set.characters = [
                updated if char.name == updated.name else char
                for char in char_set.characters
            ]

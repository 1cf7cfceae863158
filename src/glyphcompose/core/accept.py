"""Accept operations: the only writers of the positioning and kerning caches.

Every operation works on copies of the project's caches and returns an
``AcceptResult``. Nothing is visible to the project until the caller
applies the result, which swaps caches and baked outlines in one step:

    result = accept_all(project)
    result.apply_to(project)

Attachment classes let one accepted offset stand for a whole class. The
first expanded member of a class is its leader; accepting a pair cascades
its offset to the sibling pairs that are drawn and not yet accepted.
Pairs listed in a class's ``except_pairs`` are positioned independently.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

import structlog

from glyphcompose.config import GlyphComposeSettings, get_default_settings
from glyphcompose.core.groups import ClassExpander
from glyphcompose.core.offset import MarkPositioner
from glyphcompose.core.resolver import GlyphResolver, pair_key
from glyphcompose.domain import (
    AttachmentClass,
    Character,
    KerningCache,
    Outline,
    PairKey,
    Point,
    PositioningCache,
    Project,
)
from glyphcompose.utils.logging import AcceptLogger, AcceptStats

logger = structlog.get_logger(__name__)

ProgressCallback = Callable[[int, int], None]
"""Called with (processed, total) after each candidate pair."""


@dataclass
class AcceptResult:
    """Outcome of an accept operation, not yet applied to the project.

    Attributes:
        positioning: New positioning cache
        kerning: New kerning cache
        baked: Fused outlines to store, keyed by unicode
        removed: Stored outlines to drop, keyed by unicode
        stats: Per-run counts
    """

    positioning: PositioningCache
    kerning: KerningCache
    baked: dict[int, Outline] = field(default_factory=dict)
    removed: set[int] = field(default_factory=set)
    stats: AcceptStats = field(default_factory=AcceptStats)

    @property
    def positioned(self) -> int:
        return self.stats.positioned_count

    @property
    def cascaded(self) -> int:
        return self.stats.cascaded_count

    @property
    def fused(self) -> int:
        return self.stats.fused_count

    @property
    def kerned(self) -> int:
        return self.stats.kerned_count

    @property
    def skipped(self) -> int:
        return self.stats.skipped_count

    @property
    def resolved_count(self) -> int:
        """Pairs that received a cache entry (positioned + kerned + cascaded)."""
        return self.stats.resolved_count

    def apply_to(self, project: Project) -> None:
        """Swap the new caches and outlines into the project in one step."""
        project.positioning = self.positioning
        project.kerning = self.kerning
        project.outlines.apply_changes(self.baked, self.removed)


def find_attachment_class(
    name: str, classes: Sequence[AttachmentClass], expander: ClassExpander
) -> AttachmentClass | None:
    """First attachment class whose members include ``name``."""
    for attachment_class in classes:
        if expander.contains(attachment_class.members, name):
            return attachment_class
    return None


def class_applies(
    attachment_class: AttachmentClass, partner: str, expander: ClassExpander
) -> bool:
    """Check whether a class is in effect for the given partner glyph."""
    if attachment_class.applies and not expander.contains(attachment_class.applies, partner):
        return False
    return not expander.contains(attachment_class.exceptions, partner)


def is_pair_eligible(
    base_name: str,
    mark_name: str,
    mark_classes: Sequence[AttachmentClass],
    base_classes: Sequence[AttachmentClass],
    expander: ClassExpander,
) -> bool:
    """Check whether a pair is positioned on its own rather than by cascade.

    A pair is ineligible when its mark (or base) is a non-leader member of
    an attachment class that applies to the partner, unless the pair is
    listed in that class's ``except_pairs``.
    """
    pair_name = f"{base_name}-{mark_name}"

    for member, partner, classes in (
        (mark_name, base_name, mark_classes),
        (base_name, mark_name, base_classes),
    ):
        attachment_class = find_attachment_class(member, classes, expander)
        if attachment_class is None or not class_applies(attachment_class, partner, expander):
            continue
        if pair_name in attachment_class.except_pairs:
            return True
        if expander.leader(attachment_class.members) != member:
            return False

    return True


class _AcceptSession:
    """Working state shared by one accept operation."""

    def __init__(
        self,
        project: Project,
        settings: GlyphComposeSettings | None,
        accept_logger: AcceptLogger | None = None,
    ) -> None:
        self.project = project
        self.settings = settings or get_default_settings()
        self.positioner = MarkPositioner.for_project(project, self.settings)
        self.expander = self.positioner.expander
        self.matcher = self.positioner.matcher
        self.resolver = GlyphResolver(project, self.settings)
        self.characters = project.characters_by_name()
        self.log = accept_logger or AcceptLogger()

        self.positioning = project.positioning.copy()
        self.kerning = project.kerning.copy()
        self.baked: dict[int, Outline] = {}
        self.removed: set[int] = set()

        self.targets: dict[PairKey, Character] = {}
        for character in project.iter_characters():
            key = pair_key(character.position, self.characters)
            if key is not None:
                self.targets.setdefault(key, character)

    def result(self) -> AcceptResult:
        self.log.log_summary()
        return AcceptResult(
            positioning=self.positioning,
            kerning=self.kerning,
            baked=self.baked,
            removed=self.removed,
            stats=self.log.stats,
        )

    def _bake(self, key: PairKey, base: Outline, mark: Outline, offset: Point) -> bool:
        target = self.targets.get(key)
        if target is None or target.unicode is None:
            return False
        self.baked[target.unicode] = base.concat(mark.translated(offset.x, offset.y))
        self.removed.discard(target.unicode)
        return True

    def is_fused(self, base: Character, mark: Character) -> bool:
        result = self.matcher.match(base.name, mark.name)
        return result is not None and result.fuse

    def position(
        self,
        base: Character,
        mark: Character,
        offset: Point | None = None,
        cascade: bool = True,
    ) -> bool:
        """Accept one pair. Returns False when the pair was skipped."""
        pair_label = f"{base.name}-{mark.name}"
        if base.unicode is None or mark.unicode is None:
            self.log.log_skipped(pair_label, "unencoded glyph")
            return False

        base_outline = self.resolver.resolve(base)
        mark_outline = self.resolver.resolve(mark)
        if not base_outline.is_drawn() or not mark_outline.is_drawn():
            self.log.log_skipped(pair_label, "glyph not drawn")
            return False

        if offset is None:
            offset = self.positioner.offset_for(base, mark, base_outline, mark_outline)
            if offset is None:
                self.log.log_skipped(pair_label, "empty bounding box")
                return False

        key = PairKey(base.unicode, mark.unicode)
        self.positioning.set(key, offset)
        fused = self.is_fused(base, mark) and self._bake(key, base_outline, mark_outline, offset)
        self.log.log_positioned(base.name, mark.name, offset.x, offset.y, fused)

        if cascade:
            self._cascade(base, mark, offset)
        return True

    def _siblings(
        self,
        member: Character,
        partner: Character,
        classes: Sequence[AttachmentClass],
        pair_name: Callable[[str], str],
    ) -> list[Character]:
        attachment_class = find_attachment_class(member.name, classes, self.expander)
        if attachment_class is None or not class_applies(attachment_class, partner.name, self.expander):
            return [member]

        siblings = [member]
        for name in self.expander.expand(attachment_class.members):
            if name == member.name or pair_name(name) in attachment_class.except_pairs:
                continue
            character = self.characters.get(name)
            if character is not None:
                siblings.append(character)
        return siblings

    def _cascade(self, base: Character, mark: Character, offset: Point) -> None:
        marks = self._siblings(
            mark, base, self.project.mark_classes, lambda name: f"{base.name}-{name}"
        )
        bases = self._siblings(
            base, mark, self.project.base_classes, lambda name: f"{name}-{mark.name}"
        )

        for other_base in bases:
            for other_mark in marks:
                if other_base is base and other_mark is mark:
                    continue
                key = pair_key((other_base.name, other_mark.name), self.characters)
                if key is None or key in self.positioning or key not in self.targets:
                    continue

                base_outline = self.resolver.resolve(other_base)
                mark_outline = self.resolver.resolve(other_mark)
                if not base_outline.is_drawn() or not mark_outline.is_drawn():
                    continue

                self.positioning.set(key, offset)
                self.log.log_cascaded(other_base.name, other_mark.name, f"{base.name}-{mark.name}")
                if self.is_fused(other_base, other_mark) and self._bake(
                    key, base_outline, mark_outline, offset
                ):
                    self.log.log_fused(self.targets[key].name)

    def kern(self, character: Character) -> bool:
        """Insert a neutral kerning value for an unaccepted kern pair."""
        key = pair_key(character.kern, self.characters)
        if key is None:
            self.log.log_skipped(character.name, "unknown kerning glyph")
            return False
        if key in self.kerning:
            return False

        left, right = (self.characters[name] for name in character.kern)
        if not self.resolver.resolve(left).is_drawn() or not self.resolver.resolve(right).is_drawn():
            self.log.log_skipped(character.name, "glyph not drawn")
            return False

        self.kerning.set(key, 0)
        self.log.log_kerned(left.name, right.name, 0)
        return True

    def pair(self, names: tuple[str, str]) -> tuple[Character, Character] | None:
        first = self.characters.get(names[0])
        second = self.characters.get(names[1])
        if first is None or second is None:
            self.log.log_skipped("-".join(names), "unknown glyph")
            return None
        return first, second


def accept_pair(
    project: Project,
    base_name: str,
    mark_name: str,
    offset: Point | None = None,
    settings: GlyphComposeSettings | None = None,
    cascade: bool = True,
) -> AcceptResult:
    """Accept the offset of one base/mark pair.

    Args:
        project: Project to read from (not modified)
        base_name: Base glyph name
        mark_name: Mark glyph name
        offset: Offset to accept (default: the computed default offset)
        settings: Application settings
        cascade: Also position attachment-class siblings

    Returns:
        AcceptResult to apply to the project
    """
    session = _AcceptSession(project, settings)
    pair = session.pair((base_name, mark_name))
    if pair is not None:
        session.position(*pair, offset=offset, cascade=cascade)
    return session.result()


def accept_all(
    project: Project,
    settings: GlyphComposeSettings | None = None,
    progress: ProgressCallback | None = None,
    accept_logger: AcceptLogger | None = None,
) -> AcceptResult:
    """Accept default offsets and neutral kerning for every unresolved pair.

    Characters are processed in canonical order. Pass 1 positions pairs
    that stand on their own (class leaders and independent pairs) and
    cascades their offsets; pass 2 positions whatever is still unresolved.
    Kern pairs without a value get 0. Pairs that are not ready yet are
    skipped and counted.

    Args:
        project: Project to read from (not modified)
        settings: Application settings
        progress: Optional (processed, total) callback
        accept_logger: Logger collecting per-pair events

    Returns:
        AcceptResult to apply to the project
    """
    session = _AcceptSession(project, settings, accept_logger)

    position_chars: list[Character] = []
    kern_chars: list[Character] = []
    for character in project.iter_characters():
        if character.position is not None:
            position_chars.append(character)
        elif character.kern is not None:
            kern_chars.append(character)

    total = len(position_chars) + len(kern_chars)
    processed = 0

    def tick() -> None:
        nonlocal processed
        processed += 1
        if progress is not None:
            progress(processed, total)

    deferred: list[tuple[Character, Character]] = []
    for character in position_chars:
        pair = session.pair(character.position)
        if pair is None:
            tick()
            continue
        base, mark = pair
        key = pair_key(character.position, session.characters)
        if key is not None and key in session.positioning:
            tick()
            continue
        if is_pair_eligible(
            base.name,
            mark.name,
            project.mark_classes,
            project.base_classes,
            session.expander,
        ):
            session.position(base, mark)
            tick()
        else:
            deferred.append((base, mark))

    for base, mark in deferred:
        key = pair_key((base.name, mark.name), session.characters)
        if key is None or key not in session.positioning:
            session.position(base, mark, cascade=False)
        tick()

    for character in kern_chars:
        session.kern(character)
        tick()

    return session.result()


def reset_pairs(
    project: Project,
    pairs: Iterable[tuple[str, str]],
    settings: GlyphComposeSettings | None = None,
) -> AcceptResult:
    """Forget accepted values (and fused outlines) for the given name pairs."""
    session = _AcceptSession(project, settings)
    for names in pairs:
        key = pair_key(names, session.characters)
        if key is None:
            continue
        dropped = session.positioning.discard(key)
        dropped = session.kerning.discard(key) or dropped
        if not dropped:
            continue

        logger.debug("Pair reset", base=names[0], mark=names[1])
        target = session.targets.get(key)
        if target is not None and target.unicode is not None:
            base, mark = session.characters[names[0]], session.characters[names[1]]
            if session.is_fused(base, mark) and project.outlines.is_drawn(target.unicode):
                session.removed.add(target.unicode)
                session.baked.pop(target.unicode, None)
    return session.result()


def copy_positions(
    project: Project,
    source: tuple[str, str],
    targets: Iterable[tuple[str, str]],
    settings: GlyphComposeSettings | None = None,
) -> AcceptResult:
    """Reuse the accepted offset of ``source`` for each target pair.

    Nothing is copied when the source pair has no accepted offset.
    """
    session = _AcceptSession(project, settings)
    key = pair_key(source, session.characters)
    offset = session.positioning.get(key) if key is not None else None
    if offset is None:
        session.log.log_skipped("-".join(source), "source pair not accepted")
        return session.result()

    for names in targets:
        pair = session.pair(names)
        if pair is not None:
            session.position(*pair, offset=offset, cascade=False)
    return session.result()

"""Positioning and kerning result caches.

Both caches are keyed by a two-field ``PairKey`` of unicode values instead
of a ``"first-second"`` string. Caches are plain containers: the accept
operations in ``glyphcompose.core.accept`` work on copies and hand the new
cache back to the caller, so nothing here is shared mutable state.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

from glyphcompose.domain.outline import Point

V = TypeVar("V")
C = TypeVar("C", bound="PairCache")


@dataclass(frozen=True, slots=True, order=True)
class PairKey:
    """Ordered pair of unicode scalar values.

    Attributes:
        first: Base (positioning) or left (kerning) unicode
        second: Mark (positioning) or right (kerning) unicode
    """

    first: int
    second: int

    def involves(self, unicode: int) -> bool:
        """Check if either side of the pair is ``unicode``."""
        return self.first == unicode or self.second == unicode

    def legacy_key(self) -> str:
        """Render the ``"first-second"`` form used by older project files."""
        return f"{self.first}-{self.second}"


class PairCache(Generic[V]):
    """Mapping of PairKey to a resolved value.

    ``revision`` counts in-place edits so readers can tell a changed cache
    from the one they last saw.
    """

    def __init__(self, entries: Iterable[tuple[PairKey, V]] = ()) -> None:
        self._entries: dict[PairKey, V] = dict(entries)
        self._revision = 0

    @property
    def revision(self) -> int:
        return self._revision

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PairKey]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PairCache):
            return NotImplemented
        return type(self) is type(other) and self._entries == other._entries

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self._entries)} entries)"

    def get(self, key: PairKey) -> V | None:
        """Get the value for a pair, or None when unresolved."""
        return self._entries.get(key)

    def items(self) -> list[tuple[PairKey, V]]:
        """Entries sorted by key, for reproducible output."""
        return sorted(self._entries.items())

    def copy(self: C) -> C:
        """Return an independent copy of the same cache type."""
        return type(self)(self._entries.items())

    def set(self, key: PairKey, value: V) -> None:
        """Insert or replace an entry.

        Only the accept operations call this, and only on copies.
        """
        self._entries[key] = value
        self._revision += 1

    def discard(self, key: PairKey) -> bool:
        """Remove an entry if present. Returns True when removed."""
        if self._entries.pop(key, None) is None:
            return False
        self._revision += 1
        return True


class PositioningCache(PairCache[Point]):
    """(base, mark) -> accepted mark offset."""


class KerningCache(PairCache[int]):
    """(left, right) -> accepted kerning adjustment."""

"""Glyph class (group) expansion.

Rules are written over tokens: literal glyph names or references to named
classes. ``@name`` is a rule group reference and ``$name`` the legacy
position-group / character-set reference; both resolve against the same
class table.

Expansion is an explicit stack traversal. The chain of classes currently
being expanded is part of the traversal state, so a class that references
itself (directly or through other classes) is truncated instead of
recursing forever.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence

import structlog

logger = structlog.get_logger(__name__)

CLASS_PREFIXES = ("@", "$")

ClassTable = Mapping[str, Sequence[str]]


def is_class_reference(token: str) -> bool:
    """Check if a token refers to a class rather than a glyph.

    Examples:
        >>> is_class_reference("@vowelSigns")
        True
        >>> is_class_reference("ka")
        False
    """
    token = token.strip()
    return len(token) > 1 and token[0] in CLASS_PREFIXES


def class_name(token: str) -> str | None:
    """Get the class name a token refers to, or None for literals."""
    token = token.strip()
    if not is_class_reference(token):
        return None
    return token[1:]


def _walk(tokens: Iterable[str], classes: ClassTable) -> Iterator[str]:
    """Yield literal tokens depth-first, truncating class cycles.

    Each stack frame is (member iterator, class name or None for the root).
    ``chain`` mirrors the class names of the frames on the stack.
    """
    stack: list[tuple[Iterator[str], str | None]] = [(iter(tokens), None)]
    chain: list[str] = []

    while stack:
        members, owner = stack[-1]
        token = next(members, None)

        if token is None:
            stack.pop()
            if owner is not None:
                chain.pop()
            continue

        token = token.strip()
        if not token:
            continue

        name = class_name(token)
        if name is None or name not in classes:
            # Literals, and references to unknown classes, pass through as-is
            yield token
            continue

        if name in chain:
            logger.debug("Class cycle truncated", group=name, chain=list(chain))
            continue

        chain.append(name)
        stack.append((iter(classes[name]), name))


def expand(tokens: Iterable[str] | None, classes: ClassTable) -> list[str]:
    """Expand tokens into an ordered, de-duplicated list of glyph names.

    Args:
        tokens: Literal names and/or class references
        classes: Class table (name -> member tokens)

    Returns:
        Glyph names in first-seen order

    Examples:
        >>> expand(["@vowels", "ka"], {"vowels": ["aa", "i", "@vowels"]})
        ['aa', 'i', 'ka']
        >>> expand(["@missing"], {})
        ['@missing']
    """
    if not tokens:
        return []
    return list(dict.fromkeys(_walk(tokens, classes)))


def is_member(name: str, tokens: Iterable[str] | None, classes: ClassTable) -> bool:
    """Check whether ``name`` is in the expansion of ``tokens``.

    Stops at the first hit instead of expanding everything.
    """
    if not tokens:
        return False
    return any(literal == name for literal in _walk(tokens, classes))


class ClassExpander:
    """Memoising expander bound to one class table.

    The class table must not change while the expander is in use; build a
    new expander after editing groups.

    Example:
        expander = ClassExpander(project.class_table())
        marks = expander.expand(rule.mark)
    """

    def __init__(self, classes: ClassTable) -> None:
        self._classes = classes
        self._cache: dict[tuple[str, ...], tuple[str, ...]] = {}
        self._sets: dict[tuple[str, ...], frozenset[str]] = {}

    @property
    def classes(self) -> ClassTable:
        """The class table this expander resolves against."""
        return self._classes

    def expand(self, tokens: Iterable[str] | None) -> list[str]:
        """Memoised ``expand``."""
        key = tuple(tokens or ())
        if key not in self._cache:
            self._cache[key] = tuple(expand(key, self._classes))
        return list(self._cache[key])

    def members(self, tokens: Iterable[str] | None) -> frozenset[str]:
        """Expanded tokens as a set, for membership tests."""
        key = tuple(tokens or ())
        if key not in self._sets:
            self._sets[key] = frozenset(self.expand(key))
        return self._sets[key]

    def contains(self, tokens: Iterable[str] | None, name: str) -> bool:
        """Check whether ``name`` is in the expansion of ``tokens``."""
        return name in self.members(tokens)

    def leader(self, tokens: Iterable[str] | None) -> str | None:
        """First expanded member, or None for an empty expansion."""
        expanded = self.expand(tokens)
        return expanded[0] if expanded else None

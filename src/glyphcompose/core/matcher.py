"""Positioning rule matching.

Rules are tried in authored order and the first rule whose expanded base
and mark sets cover the pair wins, so reordering rules can change the
result. Matching never raises: a pair no rule covers simply has no match
and moves freely.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from glyphcompose.core.groups import ClassExpander, ClassTable
from glyphcompose.domain import MovementConstraint, PositioningRule


@dataclass(frozen=True)
class MatchResult:
    """The rule that covers a base/mark pair.

    Attributes:
        rule: Matched rule
        index: Position of the rule in the authored list
        movement: Movement constraint for the pair
        fuse: Whether accepted pairs are baked into one outline
    """

    rule: PositioningRule
    index: int
    movement: MovementConstraint
    fuse: bool


class RuleMatcher:
    """Matches base/mark pairs against an ordered rule list.

    Example:
        matcher = RuleMatcher(project.positioning_rules, project.class_table())
        result = matcher.match("ka", "aa_sign")
        if result is not None and result.fuse:
            ...
    """

    def __init__(
        self,
        rules: Sequence[PositioningRule],
        classes: ClassTable | ClassExpander,
    ) -> None:
        self._rules = list(rules)
        self._expander = classes if isinstance(classes, ClassExpander) else ClassExpander(classes)

    @property
    def rules(self) -> list[PositioningRule]:
        return list(self._rules)

    @property
    def expander(self) -> ClassExpander:
        return self._expander

    def _covers(self, rule: PositioningRule, base_name: str, mark_name: str | None) -> bool:
        if not self._expander.contains(rule.base, base_name):
            return False
        marks = self._expander.members(rule.mark)
        if mark_name is None:
            return not marks
        return mark_name in marks

    def match(self, base_name: str, mark_name: str | None) -> MatchResult | None:
        """Find the first rule covering the pair.

        Args:
            base_name: Base glyph name
            mark_name: Mark glyph name, or None to match mark-less rules

        Returns:
            MatchResult, or None when no rule covers the pair
        """
        for index, rule in enumerate(self._rules):
            if self._covers(rule, base_name, mark_name):
                return MatchResult(
                    rule=rule,
                    index=index,
                    movement=rule.movement,
                    fuse=rule.fuse,
                )
        return None

    def constraint_for(self, base_name: str, mark_name: str | None) -> MovementConstraint:
        """Movement constraint for the pair; NONE when no rule matches."""
        result = self.match(base_name, mark_name)
        return result.movement if result is not None else MovementConstraint.NONE

    def rules_for_base(self, base_name: str) -> list[PositioningRule]:
        """Rules whose base set holds ``base_name``, in authored order."""
        return [rule for rule in self._rules if self._expander.contains(rule.base, base_name)]


def match(
    base_name: str,
    mark_name: str | None,
    rules: Sequence[PositioningRule],
    classes: ClassTable,
) -> MatchResult | None:
    """Find the first positioning rule covering a base/mark pair.

    Examples:
        >>> rule = PositioningRule(base=("charX",), mark=("@vowelSigns",))
        >>> match("charX", "markA", [rule], {"vowelSigns": ["markA"]}).index
        0
        >>> match("charX", "markC", [rule], {"vowelSigns": ["markA"]}) is None
        True
    """
    return RuleMatcher(rules, classes).match(base_name, mark_name)


def constraint_for(
    base_name: str,
    mark_name: str | None,
    rules: Sequence[PositioningRule],
    classes: ClassTable,
) -> MovementConstraint:
    """Movement constraint for a pair; NONE when no rule matches."""
    return RuleMatcher(rules, classes).constraint_for(base_name, mark_name)


def ligature_name_for(rule: PositioningRule, base_name: str, mark_name: str) -> str | None:
    """Ligature name override the rule defines for a pair, if any."""
    return rule.ligature_map.get(base_name, {}).get(mark_name)

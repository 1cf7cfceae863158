"""Substitution rule resolution.

Authored substitution rules may name classes anywhere a glyph is expected.
Resolution replaces every class reference with its concrete members while
keeping rule order, which is what a feature compiler needs to emit GSUB
lookups.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import structlog

from glyphcompose.core.groups import ClassExpander, ClassTable, is_class_reference
from glyphcompose.domain import (
    ContextualRule,
    LigatureRule,
    Lookup,
    MultipleRule,
    RuleKind,
    SingleRule,
    SubstitutionRule,
)

logger = structlog.get_logger(__name__)

Slot = tuple[str, ...]
"""Glyphs accepted at one position of a rule."""


@dataclass(frozen=True)
class ResolvedRule:
    """A substitution rule with every class reference expanded.

    Attributes:
        kind: Rule shape
        inputs: One slot per input position
        outputs: Output glyph sequence
        left: Backtrack slots (contextual rules only)
        right: Lookahead slots (contextual rules only)
    """

    kind: RuleKind
    inputs: tuple[Slot, ...]
    outputs: tuple[str, ...]
    left: tuple[Slot, ...] = ()
    right: tuple[Slot, ...] = ()


@dataclass
class ResolvedLookup:
    """A lookup whose rules are ready for a feature compiler."""

    name: str
    rules: list[ResolvedRule] = field(default_factory=list)

    def of_kind(self, kind: RuleKind) -> list[ResolvedRule]:
        return [rule for rule in self.rules if rule.kind == kind]

    def single_mapping(self) -> dict[str, str]:
        """Input glyph -> output glyph for every single substitution."""
        mapping: dict[str, str] = {}
        for rule in self.of_kind(RuleKind.SINGLE):
            for glyph in rule.inputs[0]:
                mapping.setdefault(glyph, rule.outputs[0])
        return mapping


def _slots(tokens: Iterable[str], expander: ClassExpander) -> tuple[Slot, ...]:
    return tuple(tuple(expander.expand([token])) for token in tokens if token.strip())


def _single_output(token: str, expander: ClassExpander) -> str:
    expanded = expander.expand([token])
    if len(expanded) != 1:
        logger.debug("Output class is not a single glyph", token=token, members=len(expanded))
    return expanded[0] if expanded else token


def resolve_rule(rule: SubstitutionRule, expander: ClassExpander) -> list[ResolvedRule]:
    """Expand one authored rule.

    Single substitutions from a class to a class of the same size become one
    rule per member pair (class-to-class mapping); everything else stays one
    rule.
    """
    match rule:
        case LigatureRule():
            return [
                ResolvedRule(
                    kind=RuleKind.LIGATURE,
                    inputs=_slots(rule.components, expander),
                    outputs=(_single_output(rule.output, expander),),
                )
            ]
        case ContextualRule():
            return [
                ResolvedRule(
                    kind=RuleKind.CONTEXTUAL,
                    inputs=_slots(rule.target, expander),
                    outputs=(_single_output(rule.replacement, expander),),
                    left=_slots(rule.left, expander),
                    right=_slots(rule.right, expander),
                )
            ]
        case MultipleRule():
            return [
                ResolvedRule(
                    kind=RuleKind.MULTIPLE,
                    inputs=_slots([rule.input], expander),
                    outputs=tuple(_single_output(token, expander) for token in rule.outputs),
                )
            ]
        case SingleRule():
            inputs = expander.expand([rule.input])
            outputs = expander.expand([rule.output])
            if is_class_reference(rule.output) and len(outputs) == len(inputs) and len(inputs) > 1:
                return [
                    ResolvedRule(kind=RuleKind.SINGLE, inputs=((src,),), outputs=(dst,))
                    for src, dst in zip(inputs, outputs)
                ]
            return [
                ResolvedRule(
                    kind=RuleKind.SINGLE,
                    inputs=(tuple(inputs),),
                    outputs=(_single_output(rule.output, expander),),
                )
            ]
    raise TypeError(f"Unsupported substitution rule: {rule!r}")


def resolve_lookup(lookup: Lookup, classes: ClassTable | ClassExpander) -> ResolvedLookup:
    """Expand every rule of a lookup, keeping the authored order.

    Args:
        lookup: Authored lookup
        classes: Class table or a shared expander

    Returns:
        ResolvedLookup
    """
    expander = classes if isinstance(classes, ClassExpander) else ClassExpander(classes)
    resolved = ResolvedLookup(name=lookup.name)
    for rule in lookup.rules():
        resolved.rules.extend(resolve_rule(rule, expander))
    return resolved


def ligature_outputs(
    lookups: Sequence[Lookup], classes: ClassTable | ClassExpander
) -> dict[str, tuple[str, ...]]:
    """Ligature glyph -> component sequence, first authored rule wins.

    Components are the first member of each slot.
    """
    expander = classes if isinstance(classes, ClassExpander) else ClassExpander(classes)
    outputs: dict[str, tuple[str, ...]] = {}
    for lookup in lookups:
        for rule in resolve_lookup(lookup, expander).of_kind(RuleKind.LIGATURE):
            if any(not slot for slot in rule.inputs):
                continue
            outputs.setdefault(rule.outputs[0], tuple(slot[0] for slot in rule.inputs))
    return outputs


def components_for(
    name: str, lookups: Sequence[Lookup], classes: ClassTable | ClassExpander
) -> tuple[str, ...] | None:
    """Components of the ligature rule producing ``name``, if any."""
    return ligature_outputs(lookups, classes).get(name)

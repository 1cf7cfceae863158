"""Unit tests for substitution rule resolution."""

from glyphcompose.core.groups import ClassExpander
from glyphcompose.core.substitution import (
    components_for,
    ligature_outputs,
    resolve_lookup,
    resolve_rule,
)
from glyphcompose.domain import (
    ContextualRule,
    LigatureRule,
    Lookup,
    MultipleRule,
    RuleKind,
    SingleRule,
)

CLASSES = {
    "consonants": ["ka", "kha"],
    "half": ["ka.half", "kha.half"],
    "matras": ["aa", "i"],
}


def expander() -> ClassExpander:
    return ClassExpander(CLASSES)


class TestResolveRule:
    """Tests for resolve_rule."""

    def test_ligature_slots(self) -> None:
        """Test each component becomes one slot."""
        rule = LigatureRule(components=("@consonants", "virama"), output="conj")
        [resolved] = resolve_rule(rule, expander())
        assert resolved.kind == RuleKind.LIGATURE
        assert resolved.inputs == (("ka", "kha"), ("virama",))
        assert resolved.outputs == ("conj",)

    def test_contextual_keeps_context(self) -> None:
        """Test backtrack and lookahead are expanded too."""
        rule = ContextualRule(target=("i",), replacement="i.alt", left=("@consonants",), right=())
        [resolved] = resolve_rule(rule, expander())
        assert resolved.left == (("ka", "kha"),)
        assert resolved.right == ()
        assert resolved.inputs == (("i",),)

    def test_multiple_outputs(self) -> None:
        """Test a decomposition keeps its output order."""
        rule = MultipleRule(input="ksha", outputs=("ka", "virama", "ssa"))
        [resolved] = resolve_rule(rule, expander())
        assert resolved.outputs == ("ka", "virama", "ssa")

    def test_class_to_class_single_is_zipped(self) -> None:
        """Test equal-sized classes map member to member."""
        rule = SingleRule(input="@consonants", output="@half")
        resolved = resolve_rule(rule, expander())
        assert [(r.inputs[0], r.outputs[0]) for r in resolved] == [
            (("ka",), "ka.half"),
            (("kha",), "kha.half"),
        ]

    def test_class_to_glyph_single(self) -> None:
        """Test a class mapping to one glyph stays one rule."""
        [resolved] = resolve_rule(SingleRule(input="@matras", output="dot"), expander())
        assert resolved.inputs == (("aa", "i"),)
        assert resolved.outputs == ("dot",)

    def test_blank_tokens_are_dropped(self) -> None:
        """Test empty tokens do not create slots."""
        [resolved] = resolve_rule(LigatureRule(components=("ka", " "), output="x"), expander())
        assert resolved.inputs == (("ka",),)


class TestResolveLookup:
    """Tests for resolve_lookup and ligature lookups."""

    def make_lookup(self) -> Lookup:
        lookup = Lookup(name="akhn")
        lookup.add(LigatureRule(components=("ka", "virama", "ssa"), output="k_ssa"))
        lookup.add(LigatureRule(components=("ka", "virama", "ssa"), output="k_ssa.alt"))
        lookup.add(LigatureRule(components=("@consonants", "nukta"), output="qa"))
        lookup.add(SingleRule(input="@consonants", output="@half"))
        return lookup

    def test_order_is_kept(self) -> None:
        """Test rules keep their authored order within each shape."""
        resolved = resolve_lookup(self.make_lookup(), CLASSES)
        assert resolved.name == "akhn"
        assert [r.outputs[0] for r in resolved.of_kind(RuleKind.LIGATURE)] == [
            "k_ssa",
            "k_ssa.alt",
            "qa",
        ]

    def test_single_mapping(self) -> None:
        """Test the flattened single substitution map."""
        resolved = resolve_lookup(self.make_lookup(), CLASSES)
        assert resolved.single_mapping() == {"ka": "ka.half", "kha": "kha.half"}

    def test_ligature_outputs_uses_slot_leaders(self) -> None:
        """Test class slots contribute their first member."""
        outputs = ligature_outputs([self.make_lookup()], CLASSES)
        assert outputs["qa"] == ("ka", "nukta")
        assert outputs["k_ssa"] == ("ka", "virama", "ssa")

    def test_components_for(self) -> None:
        """Test lookup of the rule producing a glyph."""
        lookups = [self.make_lookup()]
        assert components_for("k_ssa.alt", lookups, CLASSES) == ("ka", "virama", "ssa")
        assert components_for("ka", lookups, CLASSES) is None

    def test_first_lookup_wins(self) -> None:
        """Test an output defined twice keeps the first definition."""
        other = Lookup(name="liga")
        other.add(LigatureRule(components=("x", "y"), output="k_ssa"))
        outputs = ligature_outputs([self.make_lookup(), other], CLASSES)
        assert outputs["k_ssa"] == ("ka", "virama", "ssa")

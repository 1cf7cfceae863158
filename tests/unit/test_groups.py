"""Unit tests for class (group) expansion."""

from glyphcompose.core.groups import (
    ClassExpander,
    class_name,
    expand,
    is_class_reference,
    is_member,
)

CLASSES = {
    "vowelSigns": ["markA", "markB"],
    "consonants": ["ka", "kha", "@nukta"],
    "nukta": ["ka.nukta"],
    "all": ["@consonants", "@vowelSigns"],
}


class TestClassReferences:
    """Tests for token classification."""

    def test_prefixes(self) -> None:
        """Test both class prefixes are recognised."""
        assert is_class_reference("@vowelSigns")
        assert is_class_reference("$latin")
        assert not is_class_reference("ka")

    def test_bare_prefix_is_literal(self) -> None:
        """Test a lone prefix character is a glyph name, not a class."""
        assert not is_class_reference("@")
        assert class_name("@") is None

    def test_class_name(self) -> None:
        """Test the prefix is stripped."""
        assert class_name(" @vowelSigns ") == "vowelSigns"
        assert class_name("ka") is None


class TestExpand:
    """Tests for expand."""

    def test_expand_rule_mark_tokens(self) -> None:
        """Test a class reference expands to its members in order."""
        assert expand(["@vowelSigns"], CLASSES) == ["markA", "markB"]

    def test_flat_list_is_unchanged(self) -> None:
        """Test expanding literal names returns the same list."""
        names = ["ka", "markB", "kha", "markA"]
        assert expand(names, CLASSES) == names

    def test_expansion_is_idempotent(self) -> None:
        """Test expanding an expansion changes nothing."""
        once = expand(["@all"], CLASSES)
        assert expand(once, CLASSES) == once

    def test_nested_classes_depth_first(self) -> None:
        """Test nested references expand in place."""
        assert expand(["@all"], CLASSES) == ["ka", "kha", "ka.nukta", "markA", "markB"]

    def test_duplicates_keep_first_position(self) -> None:
        """Test de-duplication keeps first-seen order."""
        assert expand(["markB", "@vowelSigns", "markB"], CLASSES) == ["markB", "markA"]

    def test_unknown_class_is_literal(self) -> None:
        """Test unknown references pass through unchanged."""
        assert expand(["@missing", "ka"], CLASSES) == ["@missing", "ka"]

    def test_empty_and_none(self) -> None:
        """Test empty input gives an empty list."""
        assert expand(None, CLASSES) == []
        assert expand([], CLASSES) == []
        assert expand(["", "  "], CLASSES) == []

    def test_self_reference_terminates(self) -> None:
        """Test a class referencing itself is truncated."""
        classes = {"loop": ["a", "@loop", "b"]}
        assert expand(["@loop"], classes) == ["a", "b"]

    def test_transitive_cycle_terminates(self) -> None:
        """Test a cycle through several classes is truncated."""
        classes = {"x": ["a", "@y"], "y": ["b", "@z"], "z": ["c", "@x"]}
        assert expand(["@x"], classes) == ["a", "b", "c"]

    def test_sibling_reuse_is_not_a_cycle(self) -> None:
        """Test the same class used twice side by side expands both times."""
        classes = {"pair": ["@one", "@one"], "one": ["a"], "both": ["@one", "@pair"]}
        assert expand(["@both"], classes) == ["a"]

    def test_deep_nesting_does_not_overflow(self) -> None:
        """Test long reference chains expand without recursion limits."""
        classes = {f"c{i}": [f"@c{i + 1}"] for i in range(2000)}
        classes["c2000"] = ["end"]
        assert expand(["@c0"], classes) == ["end"]


class TestIsMember:
    """Tests for is_member."""

    def test_member_through_nested_class(self) -> None:
        """Test membership through nested classes."""
        assert is_member("ka.nukta", ["@all"], CLASSES)
        assert not is_member("markC", ["@all"], CLASSES)

    def test_empty_tokens(self) -> None:
        """Test nothing is a member of an empty token list."""
        assert not is_member("ka", None, CLASSES)


class TestClassExpander:
    """Tests for ClassExpander."""

    def test_expand_matches_function(self) -> None:
        """Test the memoised expansion matches expand."""
        expander = ClassExpander(CLASSES)
        assert expander.expand(["@all"]) == expand(["@all"], CLASSES)

    def test_expand_returns_copies(self) -> None:
        """Test callers cannot corrupt the memo."""
        expander = ClassExpander(CLASSES)
        first = expander.expand(["@vowelSigns"])
        first.append("junk")
        assert expander.expand(["@vowelSigns"]) == ["markA", "markB"]

    def test_contains_and_leader(self) -> None:
        """Test membership and the class leader."""
        expander = ClassExpander(CLASSES)
        assert expander.contains(["@vowelSigns"], "markB")
        assert expander.leader(["@vowelSigns"]) == "markA"
        assert expander.leader(["@missingClassOnlyLiteral"]) == "@missingClassOnlyLiteral"
        assert expander.leader([]) is None

    def test_members_is_frozenset(self) -> None:
        """Test members returns a set view."""
        expander = ClassExpander(CLASSES)
        assert expander.members(["@consonants"]) == frozenset({"ka", "kha", "ka.nukta"})

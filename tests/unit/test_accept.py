"""Unit tests for the accept operations."""

from glyphcompose.core.accept import (
    accept_all,
    accept_pair,
    copy_positions,
    is_pair_eligible,
    reset_pairs,
)
from glyphcompose.core.groups import ClassExpander
from glyphcompose.domain import (
    AttachmentClass,
    Character,
    CharacterSet,
    KerningCache,
    Outline,
    OutlineStore,
    PairKey,
    Path,
    PathKind,
    Point,
    PositioningRule,
    Project,
    Segment,
)

KA = 0x0915
M1 = 0xE100
M2 = 0xE101
KA_M1 = 0xE200
KA_M2 = 0xE201


def square(x0: float, y0: float, x1: float, y1: float) -> Outline:
    corners = (Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1))
    path = Path(kind=PathKind.OUTLINE, segment_groups=(tuple(Segment(p) for p in corners),))
    return Outline((path,))


BASE = square(0, 0, 500, 700)
MARK = square(0, 0, 100, 100)
DEFAULT_OFFSET = Point(200, 700)


def make_project(**kwargs) -> Project:
    characters = [
        Character("ka", KA),
        Character("m1", M1),
        Character("m2", M2),
        Character("ka_m1", KA_M1, position=("ka", "m1")),
        Character("ka_m2", KA_M2, position=("ka", "m2")),
        Character("ka_ka", 0xE300, kern=("ka", "ka")),
    ]
    return Project(
        character_sets=[CharacterSet("main", characters)],
        outlines=OutlineStore({KA: BASE, M1: MARK, M2: MARK}),
        **kwargs,
    )


class TestAcceptPair:
    """Tests for accept_pair."""

    def test_default_offset(self) -> None:
        """Test the computed default offset is accepted."""
        project = make_project()
        result = accept_pair(project, "ka", "m1")
        assert result.positioning.get(PairKey(KA, M1)) == DEFAULT_OFFSET
        assert result.positioned == 1

    def test_explicit_offset(self) -> None:
        """Test a caller-supplied offset is stored as given."""
        project = make_project()
        result = accept_pair(project, "ka", "m1", offset=Point(1, 2))
        assert result.positioning.get(PairKey(KA, M1)) == Point(1, 2)

    def test_project_untouched_until_applied(self) -> None:
        """Test accept works on copies."""
        project = make_project()
        result = accept_pair(project, "ka", "m1")
        assert len(project.positioning) == 0

        result.apply_to(project)

        assert project.positioning.get(PairKey(KA, M1)) == DEFAULT_OFFSET

    def test_unknown_glyph_is_skipped(self) -> None:
        """Test unknown names are counted as skipped."""
        result = accept_pair(make_project(), "ka", "nope")
        assert result.skipped == 1
        assert len(result.positioning) == 0

    def test_undrawn_mark_is_skipped(self) -> None:
        """Test a pair with an undrawn glyph is not positioned."""
        project = make_project()
        project.outlines.remove([M1])
        result = accept_pair(project, "ka", "m1")
        assert result.skipped == 1
        assert result.stats.skipped == [("ka-m1", "glyph not drawn")]

    def test_cascade_to_class_siblings(self) -> None:
        """Test accepting the leader pair positions the sibling pair too."""
        project = make_project(mark_classes=[AttachmentClass(members=("m1", "m2"))])

        result = accept_pair(project, "ka", "m1")

        assert result.positioning.get(PairKey(KA, M2)) == DEFAULT_OFFSET
        assert result.cascaded == 1
        assert result.resolved_count == 2

    def test_cascade_respects_except_pairs(self) -> None:
        """Test excepted pairs are left for independent positioning."""
        project = make_project(
            mark_classes=[AttachmentClass(members=("m1", "m2"), except_pairs=("ka-m2",))]
        )
        result = accept_pair(project, "ka", "m1")
        assert PairKey(KA, M2) not in result.positioning

    def test_cascade_disabled(self) -> None:
        """Test cascade=False positions only the requested pair."""
        project = make_project(mark_classes=[AttachmentClass(members=("m1", "m2"))])
        result = accept_pair(project, "ka", "m1", cascade=False)
        assert len(result.positioning) == 1


class TestFusedPairs:
    """Tests for pairs whose rule bakes the outline."""

    RULES = [PositioningRule(base=("ka",), mark=("m1",), fuse=True, gsub="akhn")]

    def test_baked_outline_is_base_plus_moved_mark(self) -> None:
        """Test the baked outline equals base plus the translated mark."""
        project = make_project(positioning_rules=self.RULES)

        result = accept_pair(project, "ka", "m1")

        expected = BASE.concat(MARK.translated(DEFAULT_OFFSET.x, DEFAULT_OFFSET.y))
        assert result.baked == {KA_M1: expected}
        assert result.fused == 1

    def test_apply_bumps_revision_once(self) -> None:
        """Test caches and outlines change in one step."""
        project = make_project(positioning_rules=self.RULES)
        before = project.outlines.revision

        accept_pair(project, "ka", "m1").apply_to(project)

        assert project.outlines.revision == before + 1
        assert project.outlines.is_drawn(KA_M1)

    def test_reset_drops_baked_outline(self) -> None:
        """Test resetting a fused pair removes its offset and baked outline."""
        project = make_project(positioning_rules=self.RULES)
        accept_pair(project, "ka", "m1").apply_to(project)

        result = reset_pairs(project, [("ka", "m1")])
        result.apply_to(project)

        assert PairKey(KA, M1) not in project.positioning
        assert not project.outlines.is_drawn(KA_M1)


class TestAcceptAll:
    """Tests for accept_all."""

    def test_positions_and_kerns(self) -> None:
        """Test every ready pair is resolved."""
        result = accept_all(make_project())
        assert result.positioned == 2
        assert result.kerned == 1
        assert result.kerning.get(PairKey(KA, KA)) == 0

    def test_kern_pair_gets_zero_once(self) -> None:
        """Test a second run leaves accepted kerning alone."""
        project = make_project()
        accept_all(project).apply_to(project)

        second = accept_all(project)

        assert second.kerned == 0
        assert second.kerning == KerningCache([(PairKey(KA, KA), 0)])

    def test_existing_values_are_kept(self) -> None:
        """Test accepted offsets are never recomputed."""
        project = make_project()
        accept_pair(project, "ka", "m1", offset=Point(9, 9)).apply_to(project)

        result = accept_all(project)

        assert result.positioning.get(PairKey(KA, M1)) == Point(9, 9)
        assert result.positioned == 1

    def test_class_leader_first(self) -> None:
        """Test siblings are filled by cascade from the leader."""
        project = make_project(mark_classes=[AttachmentClass(members=("m1", "m2"))])
        result = accept_all(project)
        assert result.positioned == 1
        assert result.cascaded == 1

    def test_undrawn_leader_falls_back_to_second_pass(self) -> None:
        """Test a sibling is positioned on its own when the leader cannot be."""
        project = make_project(mark_classes=[AttachmentClass(members=("m1", "m2"))])
        project.outlines.remove([M1])

        result = accept_all(project)

        assert PairKey(KA, M2) in result.positioning
        assert result.positioned == 1
        assert result.skipped == 1

    def test_progress_reports_every_candidate(self) -> None:
        """Test the progress callback reaches the total."""
        calls: list[tuple[int, int]] = []
        accept_all(make_project(), progress=lambda done, total: calls.append((done, total)))
        assert calls[-1] == (3, 3)
        assert len(calls) == 3


class TestEligibility:
    """Tests for is_pair_eligible."""

    EXPANDER = ClassExpander({})

    def test_leader_and_sibling(self) -> None:
        """Test only the leader of a mark class stands on its own."""
        classes = [AttachmentClass(members=("m1", "m2"))]
        assert is_pair_eligible("ka", "m1", classes, [], self.EXPANDER)
        assert not is_pair_eligible("ka", "m2", classes, [], self.EXPANDER)

    def test_except_pair(self) -> None:
        """Test excepted pairs are independent."""
        classes = [AttachmentClass(members=("m1", "m2"), except_pairs=("ka-m2",))]
        assert is_pair_eligible("ka", "m2", classes, [], self.EXPANDER)

    def test_class_not_applying_to_partner(self) -> None:
        """Test a class restricted to other bases does not apply."""
        classes = [AttachmentClass(members=("m1", "m2"), applies=("kha",))]
        assert is_pair_eligible("ka", "m2", classes, [], self.EXPANDER)

    def test_base_class(self) -> None:
        """Test base classes defer non-leader bases."""
        classes = [AttachmentClass(members=("ka", "kha"))]
        assert not is_pair_eligible("kha", "m1", [], classes, self.EXPANDER)


class TestCopyPositions:
    """Tests for copy_positions."""

    def test_copies_accepted_offset(self) -> None:
        """Test the source offset is reused for each target."""
        project = make_project()
        accept_pair(project, "ka", "m1", offset=Point(5, 6)).apply_to(project)

        result = copy_positions(project, ("ka", "m1"), [("ka", "m2")])

        assert result.positioning.get(PairKey(KA, M2)) == Point(5, 6)

    def test_unaccepted_source(self) -> None:
        """Test nothing is copied without an accepted source."""
        result = copy_positions(make_project(), ("ka", "m1"), [("ka", "m2")])
        assert len(result.positioning) == 0
        assert result.skipped == 1

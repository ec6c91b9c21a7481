"""Unit tests for interface resolution and effective member sets."""

from builders import StubOracle, class_decl, interface, param, signature
from strictimpl.analysis.interface_resolver import InterfaceResolver


def names(members) -> list[tuple[str, str]]:
    return [(member.owner_name, member.name) for member in members]


class TestResolve:
    def test_no_implements_clause(self) -> None:
        resolver = InterfaceResolver(StubOracle([interface("A", [signature("foo", owner="A")])]))

        assert resolver.resolve(class_decl("C")) == []

    def test_unresolved_reference_is_dropped(self) -> None:
        a = interface("A", [signature("foo", owner="A")])
        resolver = InterfaceResolver(StubOracle([a]))

        resolved = resolver.resolve(class_decl("C", implements=["Missing", "A"]))

        assert [r.name for r in resolved] == ["A"]

    def test_repeated_reference_resolves_once(self) -> None:
        a = interface("A", [signature("foo", owner="A")])
        resolver = InterfaceResolver(StubOracle([a]))

        resolved = resolver.resolve(class_decl("C", implements=["A", "A"]))

        assert len(resolved) == 1

    def test_merged_fragments_form_one_interface(self) -> None:
        first = interface("A", [signature("foo", owner="A")])
        second = interface("A", [signature("bar", owner="A", ordinal=1)], fragment=1)
        resolver = InterfaceResolver(StubOracle([first, second]))

        resolved = resolver.resolve(class_decl("C", implements=["A"]))

        assert [r.declaration_id for r in resolved] == ["id-A"]
        assert [m.name for m in resolved[0].members] == ["foo", "bar"]

    def test_fragment_member_shadows_ancestor_of_sibling_fragment(self) -> None:
        base = interface("Base", [signature("foo", [param("x", "string | number")], owner="Base")])
        first = interface("A", [signature("foo", [param("x", "string")], owner="A")])
        second = interface("A", [], extends=["Base"], fragment=1)
        resolver = InterfaceResolver(StubOracle([base, first, second]))

        resolved = resolver.resolve(class_decl("C", implements=["A"]))

        assert len(resolved) == 1
        assert names(resolved[0].members) == [("A", "foo")]

    def test_class_declarations_are_ignored(self) -> None:
        base = class_decl("Base")
        resolver = InterfaceResolver(StubOracle([base]))

        assert resolver.resolve(class_decl("C", implements=["Base"])) == []


class TestEffectiveMembers:
    def test_inherits_ancestor_members(self) -> None:
        a = interface("A", [signature("foo", owner="A")])
        b = interface("B", [signature("bar", owner="B")], extends=["A"])
        resolver = InterfaceResolver(StubOracle([a, b]))

        assert names(resolver.effective_members(b)) == [("B", "bar"), ("A", "foo")]

    def test_closer_member_shadows_ancestor(self) -> None:
        a = interface("A", [signature("foo", [param("x", "string")], owner="A")])
        b = interface("B", [signature("foo", [param("x", "number")], owner="B")], extends=["A"])
        resolver = InterfaceResolver(StubOracle([a, b]))

        assert names(resolver.effective_members(b)) == [("B", "foo")]

    def test_same_level_members_are_unioned(self) -> None:
        a = interface("A", [signature("foo", owner="A")])
        b = interface("B", [signature("foo", owner="B")])
        c = interface("C", extends=["A", "B"])
        resolver = InterfaceResolver(StubOracle([a, b, c]))

        assert names(resolver.effective_members(c)) == [("A", "foo"), ("B", "foo")]

    def test_diamond_visits_shared_ancestor_once(self) -> None:
        root = interface("Root", [signature("base", owner="Root")])
        left = interface("Left", extends=["Root"])
        right = interface("Right", extends=["Root"])
        bottom = interface("Bottom", extends=["Left", "Right"])
        resolver = InterfaceResolver(StubOracle([root, left, right, bottom]))

        assert names(resolver.effective_members(bottom)) == [("Root", "base")]

    def test_cyclic_extends_terminates(self) -> None:
        a = interface("A", [signature("foo", owner="A")], extends=["B"])
        b = interface("B", [signature("bar", owner="B")], extends=["A"])
        resolver = InterfaceResolver(StubOracle([a, b]))

        assert names(resolver.effective_members(a)) == [("A", "foo"), ("B", "bar")]

    def test_self_extension_terminates(self) -> None:
        a = interface("A", [signature("foo", owner="A")], extends=["A"])
        resolver = InterfaceResolver(StubOracle([a]))

        assert names(resolver.effective_members(a)) == [("A", "foo")]

    def test_overloads_are_kept(self) -> None:
        a = interface(
            "A",
            [
                signature("foo", [param("x", "string")], owner="A", ordinal=0),
                signature("foo", [param("x", "number")], owner="A", ordinal=1),
            ],
        )
        resolver = InterfaceResolver(StubOracle([a]))

        assert len(resolver.effective_members(a)) == 2

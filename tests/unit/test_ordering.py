"""
Unit tests for priorities and sorting
"""

import pytest

from code_sorter.core.code_part import EXPORT_DEFAULT_GROUP, CodePart, PartKind
from code_sorter.core.ordering import Sorter, Visibility, get_priority, get_visibility


def make_part(kind, name="", group=1, **flags):
    return CodePart(
        kind=kind,
        content=name,
        line_start=1,
        line_end=1,
        name=name,
        group_number=group,
        **flags,
    )


class TestPriority:
    """Test the priority table"""

    @pytest.mark.parametrize(
        "kind, priority",
        [
            (PartKind.CONSTRUCTOR, 1),
            (PartKind.IMPORT, 1),
            (PartKind.VARIABLE, 2),
            (PartKind.INTERFACE, 3),
            (PartKind.ENUM, 4),
            (PartKind.CLASS, 5),
            (PartKind.EXPORT, 7),
            (PartKind.EXPORT_DEFAULT, 99),
            (PartKind.COMMENT, 8),
        ],
    )
    def test_kind_priority(self, kind, priority):
        assert get_priority(make_part(kind)) == priority

    @pytest.mark.parametrize(
        "flags, priority",
        [
            ({"is_public": True, "is_static": True}, 2),
            ({"is_public": True}, 3),
            ({"is_exported": True}, 3),
            ({"is_static": True}, 4),
            ({}, 5),
            ({"is_protected": True}, 5),
            ({"is_private": True, "is_static": True}, 6),
            ({"is_private": True}, 7),
        ],
    )
    def test_function_priority(self, flags, priority):
        assert get_priority(make_part(PartKind.FUNCTION, "f", **flags)) == priority

    def test_visibility(self):
        assert get_visibility(make_part(PartKind.FUNCTION, is_exported=True)) is (
            Visibility.PUBLIC
        )
        assert get_visibility(make_part(PartKind.FUNCTION, is_private=True)) is (
            Visibility.PRIVATE
        )
        assert get_visibility(make_part(PartKind.FUNCTION)) is Visibility.UNSPECIFIED


class TestGroupedSorter:
    """Test the default group-first ordering"""

    def test_group_number_comes_first(self):
        parts = [
            make_part(PartKind.IMPORT, "b", group=2),
            make_part(PartKind.VARIABLE, "a", group=1),
        ]

        assert [p.name for p in Sorter().sort(parts)] == ["a", "b"]

    def test_constructor_first_in_group(self):
        parts = [
            make_part(PartKind.FUNCTION, "alpha", is_public=True, is_static=True),
            make_part(PartKind.CONSTRUCTOR, "constructor"),
        ]

        assert [p.name for p in Sorter().sort(parts)] == ["constructor", "alpha"]

    def test_visibility_tiers(self):
        parts = [
            make_part(PartKind.FUNCTION, "privateOne", is_private=True),
            make_part(PartKind.FUNCTION, "plain"),
            make_part(PartKind.FUNCTION, "publicOne", is_public=True),
            make_part(PartKind.FUNCTION, "staticPlain", is_static=True),
            make_part(PartKind.FUNCTION, "publicStatic", is_public=True, is_static=True),
        ]

        assert [p.name for p in Sorter().sort(parts)] == [
            "publicStatic",
            "publicOne",
            "staticPlain",
            "plain",
            "privateOne",
        ]

    def test_names_compare_case_insensitively(self):
        parts = [
            make_part(PartKind.FUNCTION, "beta"),
            make_part(PartKind.FUNCTION, "Alpha"),
            make_part(PartKind.FUNCTION, "alphabet"),
        ]

        assert [p.name for p in Sorter().sort(parts)] == ["Alpha", "alphabet", "beta"]

    def test_equal_keys_keep_original_order(self):
        first = CodePart(PartKind.IMPORT, "import a;", 1, 1, group_number=1)
        second = CodePart(PartKind.IMPORT, "import b;", 2, 2, group_number=1)

        assert Sorter().sort([first, second]) == [first, second]
        assert Sorter().sort([second, first]) == [second, first]

    def test_export_default_sorts_last(self):
        parts = [
            make_part(PartKind.EXPORT_DEFAULT, "App", group=EXPORT_DEFAULT_GROUP),
            make_part(PartKind.CLASS, "App", group=40),
        ]

        assert Sorter().sort(parts)[-1].kind is PartKind.EXPORT_DEFAULT


class TestKindSorter:
    """Test priority-first ordering across groups"""

    def test_priority_decides_across_groups(self):
        parts = [
            make_part(PartKind.FUNCTION, "run", group=1),
            make_part(PartKind.VARIABLE, "limit", group=2),
            make_part(PartKind.IMPORT, "", group=3),
        ]

        ordered = Sorter(strategy="kind").sort(parts)

        assert [p.kind for p in ordered] == [
            PartKind.IMPORT,
            PartKind.VARIABLE,
            PartKind.FUNCTION,
        ]

    def test_layers_across_groups(self):
        parts = [
            make_part(PartKind.CLASS, "Service", group=1),
            make_part(PartKind.FUNCTION, "helper", group=2),
            make_part(PartKind.FUNCTION, "api", group=3, is_exported=True),
            make_part(PartKind.EXPORT, "URL", group=4),
            make_part(PartKind.VARIABLE, "LIMIT", group=5),
            make_part(PartKind.INTERFACE, "User", group=6),
        ]

        ordered = Sorter(strategy="kind").sort(parts)

        assert [p.name for p in ordered] == [
            "LIMIT",
            "URL",
            "User",
            "api",
            "helper",
            "Service",
        ]

    def test_standalone_comments_stay_first(self):
        parts = [
            make_part(PartKind.IMPORT, "", group=2),
            make_part(PartKind.COMMENT, "", group=1),
        ]

        ordered = Sorter(strategy="kind").sort(parts)

        assert ordered[0].kind is PartKind.COMMENT

    def test_export_default_stays_last(self):
        parts = [
            make_part(PartKind.EXPORT_DEFAULT, "App", group=EXPORT_DEFAULT_GROUP),
            make_part(PartKind.EXPORT, "value", group=3),
        ]

        ordered = Sorter(strategy="kind").sort(parts)

        assert ordered[-1].kind is PartKind.EXPORT_DEFAULT


def test_invalid_strategy():
    with pytest.raises(ValueError, match="Invalid ordering strategy"):
        Sorter(strategy="random")

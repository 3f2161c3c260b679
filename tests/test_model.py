"""
Tests for the relation model objects and diagnostics.
"""

import pytest
from relbitmap.model import UncompressedRelation, split_type_name
from relbitmap.diagnostics import (
    Diagnostic,
    ErrorKind,
    Location,
    ParseResult,
    Severity,
    ERROR_KINDS,
    INVALID_DOCUMENT,
    INVALID_HEADER,
    INVALID_ROW_LENGTH,
)


class TestSplitTypeName:

    def test_namespace_and_simple_name(self):
        assert split_type_name("Zoo.Maps.AnimalColor") == ("Zoo.Maps", "AnimalColor")

    def test_no_separator(self):
        assert split_type_name("AnimalColor") == ("AnimalColor", "AnimalColor")

    def test_leading_separator_is_not_a_namespace(self):
        assert split_type_name(".AnimalColor") == (".AnimalColor", ".AnimalColor")

    def test_trailing_separator_keeps_full_simple_name(self):
        assert split_type_name("Zoo.") == ("Zoo", "Zoo.")


class TestUncompressedRelation:

    def test_defaults_are_unusable(self):
        relation = UncompressedRelation(relation_name="X")
        assert not relation.is_usable
        assert relation.row_count == 0
        assert relation.column_count == 0

    def test_usable_needs_columns(self):
        relation = UncompressedRelation(relation_name="X", row_domain_name="A", column_domain_name="B")
        assert not relation.is_usable
        relation.column_members.append("c")
        assert relation.is_usable

    def test_is_set(self):
        relation = UncompressedRelation(relation_name="X", true_cells={(1, 2)})
        assert relation.is_set(1, 2)
        assert not relation.is_set(2, 1)

    def test_instances_do_not_share_collections(self):
        first = UncompressedRelation(relation_name="A")
        second = UncompressedRelation(relation_name="B")
        first.row_members.append("r")
        first.true_cells.add((0, 0))
        assert second.row_members == []
        assert second.true_cells == set()


class TestDiagnostics:

    def test_error_kind_ids(self):
        assert INVALID_DOCUMENT.id == "SQLSG001"
        assert INVALID_HEADER.id == "SQLSG002"
        assert INVALID_ROW_LENGTH.id == "SQLSG003"
        assert set(ERROR_KINDS) == {"SQLSG001", "SQLSG002", "SQLSG003"}
        assert all(kind.severity == Severity.ERROR for kind in ERROR_KINDS.values())

    def test_error_kinds_are_frozen(self):
        with pytest.raises(AttributeError):
            INVALID_HEADER.title = "changed"

    def test_location_for_line(self):
        location = Location.for_line("m.csv", 4, "Cat,x")
        assert location.line == 4
        assert location.start_character == 0
        assert location.end_character == 4
        assert location.text_span == (0, 5)

    def test_str_uses_title_without_message(self):
        diagnostic = Diagnostic(INVALID_HEADER, Location.for_line("m.csv", 0, ""))
        assert str(diagnostic) == "m.csv:0: SQLSG002 invalid csv header"

    def test_str_prefers_message(self):
        kind = ErrorKind("X001", "custom")
        diagnostic = Diagnostic(kind, Location.for_line("", 3, "abc"), "details")
        assert str(diagnostic) == ":3: X001 details"

    def test_parse_result_ok(self):
        relation = UncompressedRelation(
            relation_name="X", row_domain_name="A", column_domain_name="B", column_members=["c"],
        )
        assert ParseResult(relation=relation).ok
        assert not ParseResult(relation=None).ok
        assert not ParseResult(
            relation=relation,
            diagnostics=[Diagnostic(INVALID_ROW_LENGTH, Location.for_line("", 1, "r"))],
        ).ok

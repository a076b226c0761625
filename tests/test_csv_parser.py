"""
Tests for the CSV loader (raw tables -> ReferenceTables).
"""

import pytest
from clause_engine.csv_parser import (
    build_clauses,
    build_entry_categories,
    build_tags,
    build_templates,
    load_reference_dir,
    load_table_rows,
    parse_reference_csv,
)
from clause_engine.errors import TableLoadError
from clause_engine.model import ReferenceTables
from clause_engine.resolver import resolve_template


class TestLoadTableRows:

    def test_header_and_rows(self):
        header, rows = load_table_rows("A,B\n1,2\n\n3,4\n")
        assert header == ["A", "B"]
        assert rows == [["1", "2"], ["3", "4"]]

    def test_empty_csv(self):
        with pytest.raises(TableLoadError):
            load_table_rows("")

    def test_blank_rows_only(self):
        with pytest.raises(TableLoadError):
            load_table_rows(" , \n\n")


class TestBuilders:

    def test_templates(self, lease_csv):
        templates = build_templates(*load_table_rows(lease_csv["templates"]))
        assert templates[0].name == "Lease"
        assert templates[0].variable_names == ("Tenant", "Landlord")
        assert templates[1].variable_names == ()

    def test_templates_name_falls_back_to_first_column(self):
        with pytest.warns(UserWarning):
            templates = build_templates(*load_table_rows("Title,Variable_Array\nLease,Tenant\n"))
        assert templates[0].name == "Lease"

    def test_clauses_parse_numeric_lists(self, lease_csv):
        with pytest.warns(UserWarning, match="PC_ID"):
            clauses = build_clauses(*load_table_rows(lease_csv["clauses"]))
        assert [c.pc_id for c in clauses] == [1, 2, 3]
        assert clauses[2].include_if == (10, 30)
        assert clauses[2].tag_ids == (10, 30)
        assert clauses[1].exclude_if == (20,)
        assert clauses[0].name == "Pets"

    def test_clauses_fall_back_to_first_column(self):
        clauses = build_clauses(*load_table_rows("Id,Tags_Array\n7,1\n"))
        assert clauses[0].pc_id == 7

    def test_tags(self, lease_csv):
        tags = build_tags(*load_table_rows(lease_csv["tags"]))
        assert [t.tag_id for t in tags] == [10, 20, 30]
        assert tags[0].priority == 1
        assert tags[2].priority is None
        assert tags[2].helper_text == "Leave blank if none"
        assert tags[0].entry_category == "Bool"

    def test_tags_without_entry_type_column_default_to_text(self):
        tags = build_tags(*load_table_rows("Tag_ID,Question\n5,Why?\n"))
        assert tags[0].entry_type == "Text"
        assert tags[0].question == "Why?"

    def test_entry_categories_alternate_option_header(self, lease_csv):
        categories = build_entry_categories(*load_table_rows(lease_csv["entry_categories"]))
        assert len(categories) == 1
        assert categories[0].options == ("Yes", "No")

    def test_entry_categories_missing_columns(self):
        with pytest.warns(UserWarning):
            assert build_entry_categories(*load_table_rows("Foo,Bar\n1,2\n")) == ()


def test_parse_reference_csv_resolves_lease(lease_csv):
    with pytest.warns(UserWarning):
        tables = parse_reference_csv(**lease_csv)
    assert isinstance(tables, ReferenceTables)
    assert tables.template_names() == ["Lease", "Blank Form"]

    resolution = resolve_template(tables, "lease")
    assert resolution.clause_ids == (1, 2, 3)
    assert resolution.tag_ids == (10, 20, 30)


def test_load_reference_dir(tmp_path, write_reference_dir):
    write_reference_dir(tmp_path)
    with pytest.warns(UserWarning):
        tables = load_reference_dir(str(tmp_path))
    assert len(tables.clauses) == 3
    assert [(c.category, c.options) for c in tables.entry_categories] == [("Bool", ("Yes", "No"))]


def test_load_reference_dir_without_entry_categories(tmp_path, write_reference_dir):
    write_reference_dir(tmp_path, entry_categories=False)
    with pytest.warns(UserWarning):
        tables = load_reference_dir(str(tmp_path))
    assert tables.entry_categories == ()


def test_load_reference_dir_missing_file(tmp_path, lease_csv):
    (tmp_path / "templates.csv").write_text(lease_csv["templates"], encoding="utf-8")
    with pytest.raises(FileNotFoundError):
        load_reference_dir(str(tmp_path))

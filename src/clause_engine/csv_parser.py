"""
CSV Loader (loading boundary: raw tables -> ReferenceTables).

Each reference table is one CSV file: a header row followed by data rows.
Header spelling is not guaranteed, so every column is located with the
Column Resolver:

    Templates:        Name, Variable_Array
    Variables:        Object_Name, Variable_Type, Associated_Clause_Array
    Clauses:          PC_ID (else first column), Include_If_List,
                      Exclude_If_List, Tags_Array, Name
    Tags:             Tag_ID (else first column), Tag_Category, Priority,
                      Question, Entry_Type, Entry_Category, Helper_Text
    Entry categories: Category, Options (or Answers / Values)

This is the only module that knows about header spelling. Rows that
cannot be keyed (no numeric id) are skipped with a UserWarning.
"""

import csv
import logging
import os
import warnings
from io import StringIO
from typing import Any, List, Optional, Sequence, Tuple

from clause_engine.columns import (
    NOT_FOUND,
    find_column,
    find_column_or,
    parse_ids,
    parse_list,
    to_number,
)
from clause_engine.errors import TableLoadError
from clause_engine.model import (
    ClauseRow,
    EntryCategory,
    ReferenceTables,
    TagRow,
    TemplateRow,
    VariableRow,
)

logger = logging.getLogger(__name__)

Header = List[str]
Rows = List[List[str]]

TABLE_FILES = {
    "templates": "templates.csv",
    "variables": "variables.csv",
    "clauses": "clauses.csv",
    "tags": "tags.csv",
}
ENTRY_CATEGORIES_FILE = "entry_categories.csv"


def load_table_rows(csv_content: str) -> Tuple[Header, Rows]:
    """
    Split CSV content into a header row and data rows.

    Blank rows are dropped.

    Raises:
        TableLoadError: If the CSV has no header row
    """
    reader = csv.reader(StringIO(csv_content))
    rows = [row for row in reader if any(cell.strip() for cell in row)]
    if not rows:
        raise TableLoadError("CSV is empty")
    header = [cell.strip() for cell in rows[0]]
    return header, rows[1:]


def _cell(row: Sequence[Any], index: int) -> str:
    if index == NOT_FOUND or index >= len(row):
        return ""
    value = row[index]
    return "" if value is None else str(value).strip()


def _warn_missing(table: str, column: str) -> None:
    warnings.warn(f"{table} table has no {column} column", UserWarning)


def build_templates(header: Header, rows: Rows) -> Tuple[TemplateRow, ...]:
    i_name = find_column(header, r"name")
    if i_name == NOT_FOUND:
        _warn_missing("Template", "Name")
        i_name = 0
    i_vars = find_column(header, r"variable\s*array")

    return tuple(
        TemplateRow(name=_cell(row, i_name), variable_names=tuple(parse_list(_cell(row, i_vars))))
        for row in rows
    )


def build_variables(header: Header, rows: Rows) -> Tuple[VariableRow, ...]:
    i_obj = find_column(header, r"object\s*name")
    i_type = find_column(header, r"variable\s*type")
    i_assoc = find_column(header, r"associated\s*clause\s*array")
    if i_obj == NOT_FOUND:
        _warn_missing("Variable", "Object_Name")

    return tuple(
        VariableRow(
            object_name=_cell(row, i_obj),
            variable_type=_cell(row, i_type),
            clause_ids=tuple(parse_ids(_cell(row, i_assoc))),
        )
        for row in rows
    )


def build_clauses(header: Header, rows: Rows) -> Tuple[ClauseRow, ...]:
    i_pc = find_column_or(header, r"pc\s*id", 0)
    i_inc = find_column(header, r"include\s*if\s*list")
    i_exc = find_column(header, r"exclude\s*if\s*list")
    i_tags = find_column(header, r"tags\s*array")
    i_name = find_column(header, r"name")

    clauses: List[ClauseRow] = []
    for row_num, row in enumerate(rows, start=2):  # header is line 1
        pc_id = to_number(_cell(row, i_pc))
        if pc_id is None:
            warnings.warn(f"Clause row {row_num} has no numeric PC_ID; skipped", UserWarning)
            continue
        clauses.append(ClauseRow(
            pc_id=pc_id,
            include_if=tuple(parse_ids(_cell(row, i_inc))),
            exclude_if=tuple(parse_ids(_cell(row, i_exc))),
            tag_ids=tuple(parse_ids(_cell(row, i_tags))),
            name=_cell(row, i_name),
        ))
    return tuple(clauses)


def build_tags(header: Header, rows: Rows) -> Tuple[TagRow, ...]:
    i_id = find_column_or(header, r"tag\s*id", 0)
    i_cat = find_column(header, r"tag\s*category")
    i_pri = find_column(header, r"priority")
    i_que = find_column(header, r"question")
    i_type = find_column(header, r"entry\s*type")
    i_ec = find_column(header, r"entry\s*category")
    i_help = find_column(header, r"helper\s*text")

    tags: List[TagRow] = []
    for row_num, row in enumerate(rows, start=2):
        tag_id = to_number(_cell(row, i_id))
        if tag_id is None:
            warnings.warn(f"Tag row {row_num} has no numeric Tag_ID; skipped", UserWarning)
            continue
        tags.append(TagRow(
            tag_id=tag_id,
            tag_category=_cell(row, i_cat),
            priority=to_number(_cell(row, i_pri)),
            question=_cell(row, i_que),
            entry_type=_cell(row, i_type) if i_type != NOT_FOUND else "Text",
            entry_category=_cell(row, i_ec),
            helper_text=_cell(row, i_help),
        ))
    return tuple(tags)


def build_entry_categories(header: Header, rows: Rows) -> Tuple[EntryCategory, ...]:
    i_cat = find_column(header, r"category")
    i_opt = find_column(header, r"options")
    if i_opt == NOT_FOUND:
        i_opt = find_column(header, r"answers")
    if i_opt == NOT_FOUND:
        i_opt = find_column(header, r"values")

    if i_cat == NOT_FOUND or i_opt == NOT_FOUND:
        warnings.warn(
            "EntryCategory table missing required columns (Category, Options). "
            'Options can also be named "Answers" or "Values".',
            UserWarning,
        )
        return ()

    categories: List[EntryCategory] = []
    for row in rows:
        name = _cell(row, i_cat)
        if not name:
            continue
        categories.append(EntryCategory(category=name, options=tuple(parse_list(_cell(row, i_opt)))))
    return tuple(categories)


def parse_reference_csv(
    templates: str,
    variables: str,
    clauses: str,
    tags: str,
    entry_categories: Optional[str] = None,
) -> ReferenceTables:
    """
    Parse the reference tables from CSV strings.

    Args:
        templates, variables, clauses, tags: CSV content of each table
        entry_categories: Optional CSV content of the EntryCategory table

    Returns:
        ReferenceTables snapshot

    Raises:
        TableLoadError: If any table has no header row
    """
    categories: Tuple[EntryCategory, ...] = ()
    if entry_categories is not None:
        categories = build_entry_categories(*load_table_rows(entry_categories))

    return ReferenceTables(
        templates=build_templates(*load_table_rows(templates)),
        variables=build_variables(*load_table_rows(variables)),
        clauses=build_clauses(*load_table_rows(clauses)),
        tags=build_tags(*load_table_rows(tags)),
        entry_categories=categories,
    )


def _read_file(filepath: str) -> str:
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            return f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"CSV file not found: {filepath}")


def load_reference_dir(directory: str) -> ReferenceTables:
    """
    Load reference tables from a directory of CSV files.

    Expects templates.csv, variables.csv, clauses.csv and tags.csv;
    entry_categories.csv is optional.

    Raises:
        FileNotFoundError: If a required file is missing
        TableLoadError: If a file has no header row
    """
    contents = {
        table: _read_file(os.path.join(directory, filename))
        for table, filename in TABLE_FILES.items()
    }

    categories_path = os.path.join(directory, ENTRY_CATEGORIES_FILE)
    if os.path.exists(categories_path):
        contents["entry_categories"] = _read_file(categories_path)
    else:
        logger.warning(
            "%s not found in %s; continuing without option lists",
            ENTRY_CATEGORIES_FILE, directory,
        )

    tables = parse_reference_csv(**contents)
    logger.debug(
        "Loaded %d templates, %d variables, %d clauses, %d tags from %s",
        len(tables.templates), len(tables.variables),
        len(tables.clauses), len(tables.tags), directory,
    )
    return tables


__all__ = [
    "load_table_rows",
    "build_templates",
    "build_variables",
    "build_clauses",
    "build_tags",
    "build_entry_categories",
    "parse_reference_csv",
    "load_reference_dir",
]

"""
Serialization helpers for reference tables and cycle results.

Reference tables round-trip losslessly through dict / JSON / YAML.
Cycle results are one-way: they are the descriptors handed to the
presentation layer, keyed the way the spreadsheet names its columns.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Tuple

import yaml

from clause_engine.columns import Number, parse_ids, to_number, unique_numbers
from clause_engine.cycle import CycleResult
from clause_engine.model import (
    ClauseRow,
    EntryCategory,
    Question,
    ReferenceTables,
    TagRow,
    TemplateRow,
    VariableRow,
)


def question_to_dict(q: Question) -> Dict[str, Any]:
    return {
        "Tag_ID": q.tag_id,
        "Question": q.question,
        "Entry_Type": q.entry_type,
        "Entry_Category": q.entry_category,
        "Helper_Text": q.helper_text,
        "Priority": q.priority,
        "Tag_Category": q.tag_category,
        "Options": list(q.options),
    }


def cycle_to_dict(result: CycleResult) -> Dict[str, Any]:
    return {
        "status": result.status.value,
        "completionRatio": result.completion_ratio,
        "questions": [question_to_dict(q) for q in result.questions],
        "tagTruth": {str(k): v.value for k, v in sorted(result.tag_truth.items())},
        "verdicts": {str(k): v.value for k, v in sorted(result.verdicts.items())},
        "included": list(result.included_clause_ids),
        "excluded": list(result.excluded_clause_ids),
        "pending": list(result.pending_clause_ids),
        "stalled": list(result.stalled_clause_ids),
    }


def cycle_to_json(result: CycleResult) -> str:
    return json.dumps(cycle_to_dict(result), sort_keys=True)


def cycle_to_yaml(result: CycleResult) -> str:
    return yaml.safe_dump(cycle_to_dict(result), sort_keys=False)


def _ids(values: Any) -> Tuple[Number, ...]:
    # Snapshots may hold a delimited cell ("10, 30") or a list of str/int ids
    if values is None:
        return ()
    if isinstance(values, str):
        return tuple(parse_ids(values))
    if isinstance(values, (int, float)):
        return tuple(unique_numbers([values]))
    return tuple(unique_numbers(values))


def template_to_dict(t: TemplateRow) -> Dict[str, Any]:
    return {"name": t.name, "variable_names": list(t.variable_names)}


def template_from_dict(d: Dict[str, Any]) -> TemplateRow:
    return TemplateRow(name=d["name"], variable_names=tuple(d.get("variable_names", [])))


def variable_to_dict(v: VariableRow) -> Dict[str, Any]:
    return {"object_name": v.object_name, "variable_type": v.variable_type, "clause_ids": list(v.clause_ids)}


def variable_from_dict(d: Dict[str, Any]) -> VariableRow:
    return VariableRow(
        object_name=d["object_name"],
        variable_type=d.get("variable_type", ""),
        clause_ids=_ids(d.get("clause_ids")),
    )


def clause_to_dict(c: ClauseRow) -> Dict[str, Any]:
    return {
        "pc_id": c.pc_id,
        "name": c.name,
        "include_if": list(c.include_if),
        "exclude_if": list(c.exclude_if),
        "tag_ids": list(c.tag_ids),
    }


def clause_from_dict(d: Dict[str, Any]) -> ClauseRow:
    return ClauseRow(
        pc_id=to_number(d["pc_id"]),
        name=d.get("name", ""),
        include_if=_ids(d.get("include_if")),
        exclude_if=_ids(d.get("exclude_if")),
        tag_ids=_ids(d.get("tag_ids")),
    )


def tag_to_dict(t: TagRow) -> Dict[str, Any]:
    return {
        "tag_id": t.tag_id,
        "tag_category": t.tag_category,
        "priority": t.priority,
        "question": t.question,
        "entry_type": t.entry_type,
        "entry_category": t.entry_category,
        "helper_text": t.helper_text,
    }


def tag_from_dict(d: Dict[str, Any]) -> TagRow:
    return TagRow(
        tag_id=to_number(d["tag_id"]),
        tag_category=d.get("tag_category", ""),
        priority=to_number(d.get("priority")),
        question=d.get("question", ""),
        entry_type=d.get("entry_type", "Text"),
        entry_category=d.get("entry_category", ""),
        helper_text=d.get("helper_text", ""),
    )


def entry_category_to_dict(e: EntryCategory) -> Dict[str, Any]:
    return {"category": e.category, "options": list(e.options)}


def entry_category_from_dict(d: Dict[str, Any]) -> EntryCategory:
    return EntryCategory(category=d["category"], options=tuple(d.get("options", [])))


def tables_to_dict(t: ReferenceTables) -> Dict[str, Any]:
    return {
        "templates": [template_to_dict(x) for x in t.templates],
        "variables": [variable_to_dict(x) for x in t.variables],
        "clauses": [clause_to_dict(x) for x in t.clauses],
        "tags": [tag_to_dict(x) for x in t.tags],
        "entry_categories": [entry_category_to_dict(x) for x in t.entry_categories],
    }


def tables_from_dict(d: Dict[str, Any]) -> ReferenceTables:
    return ReferenceTables(
        templates=tuple(template_from_dict(x) for x in d.get("templates", [])),
        variables=tuple(variable_from_dict(x) for x in d.get("variables", [])),
        clauses=tuple(clause_from_dict(x) for x in d.get("clauses", [])),
        tags=tuple(tag_from_dict(x) for x in d.get("tags", [])),
        entry_categories=tuple(entry_category_from_dict(x) for x in d.get("entry_categories", [])),
    )


def tables_to_json(t: ReferenceTables) -> str:
    return json.dumps(tables_to_dict(t), sort_keys=True)


def tables_from_json(s: str) -> ReferenceTables:
    return tables_from_dict(json.loads(s))


def tables_to_yaml(t: ReferenceTables) -> str:
    return yaml.safe_dump(tables_to_dict(t))


def tables_from_yaml(s: str) -> ReferenceTables:
    return tables_from_dict(yaml.safe_load(s) or {})

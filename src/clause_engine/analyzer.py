"""
Reference Analyzer — diagnostics for the clause/tag wiring of a template.

Answers questions the questionnaire itself cannot:
    - Which resolved clause ids have no clause row?
    - Which tags do in-scope clauses mention that the tag table lacks?
    - Which include/exclude tags are never asked for their clause?
    - Which clauses can never be INCLUDED, whatever the user answers?

IMPORTANT: This is read-only. It does not modify tables or resolutions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set

from clause_engine.columns import Number, unique_numbers
from clause_engine.config import DEFAULT_CONFIG, EngineConfig
from clause_engine.model import ReferenceTables, Resolution


@dataclass
class ReferenceReport:
    """Analysis report for one resolved template."""

    template_name: str
    total_clauses: int = 0
    total_tags: int = 0

    missing_clause_ids: List[Number] = field(default_factory=list)
    unknown_tag_ids: Set[Number] = field(default_factory=set)
    no_display_tag_ids: Set[Number] = field(default_factory=set)

    # pc_id -> include/exclude tags missing from that clause's Tags_Array
    unasked_condition_tags: Dict[Number, Set[Number]] = field(default_factory=dict)
    # pc_id -> reason the clause can never be INCLUDED
    never_included: Dict[Number, str] = field(default_factory=dict)

    max_tags_per_clause: int = 0
    avg_tags_per_clause: float = 0.0

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        if msg not in self.warnings:
            self.warnings.append(msg)


def _fmt(ids) -> str:
    return ", ".join(str(i) for i in sorted(ids))


def analyze_template(
    tables: ReferenceTables,
    resolution: Resolution,
    config: EngineConfig = DEFAULT_CONFIG,
) -> ReferenceReport:
    """
    Inspect the clause and tag wiring reachable from a resolved template.

    A clause is reported as never included when one of its conditions
    can never reach the value inclusion needs:
        - an include or exclude tag is outside the askable tag universe
          (it stays UNKNOWN forever)
        - an exclude tag is not a bool tag (non-bool answers never become NO)
    """
    report = ReferenceReport(template_name=resolution.template_name)
    report.total_clauses = len(resolution.clause_ids)
    report.total_tags = len(resolution.tag_ids)

    clause_index = tables.clause_index()
    tag_index = tables.tag_index()
    universe = set(resolution.tag_ids)

    tag_counts: List[int] = []
    for pc_id in resolution.clause_ids:
        clause = clause_index.get(pc_id)
        if clause is None:
            report.missing_clause_ids.append(pc_id)
            continue

        asked = set(unique_numbers(clause.tag_ids))
        include = unique_numbers(clause.include_if)
        exclude = unique_numbers(clause.exclude_if)
        tag_counts.append(len(asked))

        for tag_id in asked | set(include) | set(exclude):
            if tag_id not in tag_index:
                report.unknown_tag_ids.add(tag_id)

        unasked = (set(include) | set(exclude)) - asked
        if unasked:
            report.unasked_condition_tags[pc_id] = unasked

        unreachable = [t for t in include + exclude if t not in universe]
        if unreachable:
            report.never_included[pc_id] = f"condition tags never asked: {_fmt(unreachable)}"
            continue
        non_bool = [
            t for t in exclude
            if t in tag_index and not config.is_bool_category(tag_index[t].entry_category)
        ]
        if non_bool:
            report.never_included[pc_id] = f"exclude tags cannot be answered No: {_fmt(non_bool)}"

    for tag_id in resolution.tag_ids:
        tag = tag_index.get(tag_id)
        if tag is not None and config.is_no_display(tag.entry_type):
            report.no_display_tag_ids.add(tag_id)

    if tag_counts:
        report.max_tags_per_clause = max(tag_counts)
        report.avg_tags_per_clause = sum(tag_counts) / len(tag_counts)

    if report.missing_clause_ids:
        report.add_warning(f"Clause IDs without a clause row: {_fmt(report.missing_clause_ids)}")
    if report.unknown_tag_ids:
        report.add_warning(f"Tag IDs missing from Tag table: {_fmt(report.unknown_tag_ids)}")
    for pc_id, tags in sorted(report.unasked_condition_tags.items()):
        report.add_warning(f"Clause {pc_id} has conditions on tags not in its Tags_Array: {_fmt(tags)}")
    for pc_id, reason in sorted(report.never_included.items()):
        report.add_warning(f"Clause {pc_id} can never be included ({reason})")
    if report.no_display_tag_ids:
        report.add_warning(f"No Display tags in scope: {_fmt(report.no_display_tag_ids)}")

    return report

"""
Template Resolver and Clause -> Tag Collector.

Runs once per template selection to fix the universe of clause and tag
identifiers a questionnaire works on:

    template name -> Variable_Array names -> clause-type variables
                  -> Associated_Clause_Array ids -> Tags_Array ids

Every anomaly (missing template, empty variable list, unmatched variable,
unknown clause id) is recorded as a diagnostic string. Nothing here
raises on bad reference data.
"""

import logging
from typing import Iterable, List, Tuple

from .columns import Number, sorted_ids, unique_numbers
from .model import ReferenceTables, Resolution

logger = logging.getLogger(__name__)


def resolve_clause_ids(tables: ReferenceTables, template_name: str) -> Tuple[List[Number], List[str]]:
    """
    Resolve a template name to its clause identifiers.

    Args:
        tables: Reference data snapshot
        template_name: Name as chosen by the caller

    Returns:
        (clause_ids, diagnostics) with clause_ids deduplicated and ascending
    """
    diagnostics: List[str] = []

    if not tables.has_required_tables():
        diagnostics.append("One or more tables are empty.")
        return [], diagnostics

    template = tables.get_template(template_name)
    if template is None:
        diagnostics.append(f"Template not found: {template_name}")
        return [], diagnostics

    if not template.variable_names:
        diagnostics.append("Template Variable_Array is empty.")
        return [], diagnostics

    collected: List[Number] = []
    missing: List[str] = []
    for name in template.variable_names:
        matches = tables.find_clause_variables(name)
        if not matches:
            missing.append(name)
            continue
        for variable in matches:
            collected.extend(unique_numbers(variable.clause_ids))

    if missing:
        diagnostics.append(
            f'Variables not found (or not type "Clause"): {", ".join(missing)}'
        )

    clause_ids = sorted_ids(collected)
    diagnostics.append(
        f"Resolved {len(clause_ids)} clause IDs from {len(template.variable_names)} variable names."
    )
    return clause_ids, diagnostics


def collect_tag_ids(tables: ReferenceTables, clause_ids: Iterable[Number]) -> Tuple[List[Number], List[str]]:
    """
    Collect the tag universe referenced by a set of clauses.

    Clause ids without a row in the clause table are skipped. Tag ids are
    kept only when the tag table knows them; a clause may still name an
    unknown tag in its include/exclude lists, where it evaluates as UNKNOWN.

    Returns:
        (tag_ids, diagnostics) with tag_ids deduplicated and ascending
    """
    diagnostics: List[str] = []
    index = tables.clause_index()

    referenced: List[Number] = []
    unknown_clauses: List[Number] = []
    for pc_id in unique_numbers(clause_ids):
        clause = index.get(pc_id)
        if clause is None:
            unknown_clauses.append(pc_id)
            continue
        referenced.extend(unique_numbers(clause.tag_ids))

    if unknown_clauses:
        diagnostics.append(
            f"Clause IDs missing from Clause table: {', '.join(str(i) for i in unknown_clauses)}"
        )

    known_tags = tables.tag_index()
    tag_ids = [tag_id for tag_id in sorted_ids(referenced) if tag_id in known_tags]
    skipped = len(sorted_ids(referenced)) - len(tag_ids)
    if skipped:
        diagnostics.append(f"Skipped {skipped} tag IDs not present in Tag table.")

    diagnostics.append(f"Collected {len(tag_ids)} unique tag IDs from clauses.")
    return tag_ids, diagnostics


def resolve_template(tables: ReferenceTables, template_name: str) -> Resolution:
    """
    Resolve a template to its clause and tag universe.

    An empty Resolution (no clause ids) is a normal outcome; the
    diagnostics explain why.
    """
    clause_ids, diagnostics = resolve_clause_ids(tables, template_name)
    tag_ids: List[Number] = []
    if clause_ids:
        tag_ids, tag_diagnostics = collect_tag_ids(tables, clause_ids)
        diagnostics.extend(tag_diagnostics)

    logger.debug(
        "Resolved template %r: %d clauses, %d tags",
        template_name, len(clause_ids), len(tag_ids),
    )
    return Resolution(
        template_name=template_name,
        clause_ids=tuple(clause_ids),
        tag_ids=tuple(tag_ids),
        diagnostics=tuple(diagnostics),
    )

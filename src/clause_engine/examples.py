"""
Example reference data for a small lease agreement.

Template "Lease" references the Tenant and Landlord variables, which bind
clauses 1-3. Clause 1 needs the pets tag, clause 2 is vetoed by the
sublet tag, clause 3 needs pets plus a deposit amount.
"""
from clause_engine.model import (
    ClauseRow,
    EntryCategory,
    ReferenceTables,
    TagRow,
    TemplateRow,
    VariableRow,
)


def build_example_lease_tables() -> ReferenceTables:
    templates = (
        TemplateRow(name="Lease", variable_names=("Tenant", "Landlord")),
        TemplateRow(name="Short_Term Rental", variable_names=("Tenant", "Guest")),
        TemplateRow(name="Blank Form", variable_names=()),
    )

    variables = (
        VariableRow(object_name="Tenant", variable_type="Clause", clause_ids=(1, 2)),
        VariableRow(object_name="Landlord", variable_type="Clause", clause_ids=(2, 3)),
        # Non-clause variables are ignored by resolution
        VariableRow(object_name="Landlord", variable_type="Text", clause_ids=(99,)),
        VariableRow(object_name="Guest", variable_type="Text"),
    )

    clauses = (
        ClauseRow(pc_id=1, name="Pets", include_if=(10,), tag_ids=(10,)),
        ClauseRow(pc_id=2, name="Subletting", exclude_if=(20,), tag_ids=(20,)),
        ClauseRow(pc_id=3, name="Pet Deposit", include_if=(10, 30), tag_ids=(10, 30)),
    )

    tags = (
        TagRow(
            tag_id=10,
            tag_category="Occupancy",
            priority=1,
            question="Are pets allowed?",
            entry_type="Radio",
            entry_category="Bool",
        ),
        TagRow(
            tag_id=20,
            tag_category="Occupancy",
            priority=2,
            question="Is subletting prohibited?",
            entry_type="Radio",
            entry_category="Bool",
        ),
        TagRow(
            tag_id=30,
            tag_category="Money",
            question="Pet deposit amount",
            entry_type="Text",
            entry_category="Currency",
            helper_text="Leave blank if no deposit is charged",
        ),
    )

    entry_categories = (
        EntryCategory(category="Bool", options=("Yes", "No")),
    )

    return ReferenceTables(
        templates=templates,
        variables=variables,
        clauses=clauses,
        tags=tags,
        entry_categories=entry_categories,
    )

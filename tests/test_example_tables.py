"""
Test the example lease reference data used by the demos.
"""

from clause_engine.examples import build_example_lease_tables


def test_example_lease_tables_structure():
    tables = build_example_lease_tables()

    assert tables.template_names() == ["Lease", "Short_Term Rental", "Blank Form"]
    assert len(tables.clauses) == 3
    assert len(tables.tags) == 3

    # Landlord has a clause row and a non-clause row
    landlord = tables.find_clause_variables("Landlord")
    assert len(landlord) == 1
    assert landlord[0].clause_ids == (2, 3)

    pets = tables.tag_index()[10]
    assert pets.is_bool
    assert [c.category for c in tables.entry_categories] == [pets.entry_category]

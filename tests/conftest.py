"""
Shared fixtures: the lease reference tables as CSV text and on disk.

Headers are deliberately misspelled in places: the loader must find
columns by pattern, not by exact name or position.
"""

import pytest

LEASE_CSV = {
    "templates": '''Doc_URL,name,Variable Array
http://x,Lease,"Tenant, Landlord"
http://y,Blank Form,
''',
    "variables": '''Variable_ID,Object_Name,Variable_Type,Associated_Clause_Array
1,Tenant,Clause,"1,2"
2,Landlord,clause,2;3
3,Landlord,Text,99
''',
    "clauses": '''PC ID,Name,Include_If_List,Exclude_If_List,Tags_Array
1,Pets,10,,10
2,Subletting,,20,20
3,Pet Deposit,"10, 30",,10|30
x,Broken,,,
''',
    "tags": '''Tag_ID,Tag,Tag_Category,Question,Entry_Type,Entry_Category,Helper_Text,Priority
10,Pets,Occupancy,Are pets allowed?,Radio,Bool,,1
20,Sublet,Occupancy,Is subletting prohibited?,Radio,Bool,,2
30,Deposit,Money,Pet deposit amount,Text,Currency,Leave blank if none,
''',
    "entry_categories": '''Category,Answers
Bool,Yes;No
,Orphan
''',
}


@pytest.fixture
def lease_csv():
    return dict(LEASE_CSV)


@pytest.fixture
def write_reference_dir():
    """Write the lease CSV files into a directory; returns the directory."""
    def write(path, entry_categories=True):
        for table, content in LEASE_CSV.items():
            if table == "entry_categories" and not entry_categories:
                continue
            (path / f"{table}.csv").write_text(content, encoding="utf-8")
        return path
    return write

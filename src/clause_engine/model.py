"""
Core Reference and Result Objects

Defines the data structures the clause engine works on:
    - Reference rows (templates, variables, clauses, tags, entry categories)
    - ReferenceTables (root container of reference data)
    - Tri-state values (Truth for tags, Verdict for clauses)
    - Resolution, Question and ScheduleResult (engine outputs)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about spreadsheets, CSV or header spelling
        - Are immutable (frozen dataclasses holding tuples)
        - Use numeric identifiers (int when integral, float otherwise)
    Fuzzy column lookup happens once, in the loader, before rows exist.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .columns import canon, unique_numbers

Number = Union[int, float]


class Truth(Enum):
    """
    Tri-state truth value of a tag for one resolution cycle.

    The integer values match the spreadsheet convention
    (-1 = no, 0 = unknown, 1 = yes) for serialization only.
    Engine code compares members, never raw integers.
    """

    NO = -1
    UNKNOWN = 0
    YES = 1


class Verdict(Enum):
    """Tri-state verdict of a clause for one resolution cycle."""

    EXCLUDED = -1
    PENDING = 0
    INCLUDED = 1


class Status(Enum):
    """
    Questionnaire status reported after a resolution cycle.

        EMPTY:   template resolved to zero clauses, nothing to ask
        ASK:     questions are pending
        DONE:    no more input needed (terminal)
        STALLED: clauses remain pending but nothing askable is left
                 (only reported when EngineConfig.report_stalled is set)
    """

    EMPTY = "empty"
    ASK = "ask"
    DONE = "done"
    STALLED = "stalled"


@dataclass(frozen=True)
class TemplateRow:
    """
    A document template.

    Properties:
        name: Lookup key, matched case/space/underscore-insensitively
        variable_names: Ordered variable-object names the template references
    """

    name: str
    variable_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class VariableRow:
    """
    A variable object. Several rows may share one object_name.

    Only rows whose variable_type is canonically "clause" bind clauses.
    """

    object_name: str
    variable_type: str = ""
    clause_ids: Tuple[Number, ...] = ()

    @property
    def is_clause(self) -> bool:
        return canon(self.variable_type) == "clause"


@dataclass(frozen=True)
class ClauseRow:
    """
    An optional document clause gated by tag conditions.

    Properties:
        pc_id:
            Unique numeric identifier

        include_if:
            Tag ids that must all be YES for the clause to be included

        exclude_if:
            Tag ids that veto the clause when any of them is YES

        tag_ids:
            Tag ids whose answers this clause needs. This is the list the
            scheduler asks from; it may differ from include_if + exclude_if.

        name:
            Optional display name
    """

    pc_id: Number
    include_if: Tuple[Number, ...] = ()
    exclude_if: Tuple[Number, ...] = ()
    tag_ids: Tuple[Number, ...] = ()
    name: str = ""


@dataclass(frozen=True)
class TagRow:
    """
    An atomic fact gating clauses, usually answered by the user.

    A priority of None means "ask last". An entry_type of "No Display"
    marks tags that are not meant to be asked directly.
    """

    tag_id: Number
    tag_category: str = ""
    priority: Optional[Number] = None
    question: str = ""
    entry_type: str = "Text"
    entry_category: str = ""
    helper_text: str = ""

    @property
    def is_bool(self) -> bool:
        return canon(self.entry_category) == "bool"


@dataclass(frozen=True)
class EntryCategory:
    """Option list for one entry category (drives dropdown/radio answers)."""

    category: str
    options: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ReferenceTables:
    """
    Root container for the reference data of one evaluation session.

    This is the snapshot every engine call reads. It is never mutated;
    reloading the spreadsheet produces a new instance.

    INVARIANTS:
        - Clause pc_id and tag tag_id are numeric
        - Identifier lists inside rows are numeric tuples
    """

    templates: Tuple[TemplateRow, ...] = ()
    variables: Tuple[VariableRow, ...] = ()
    clauses: Tuple[ClauseRow, ...] = ()
    tags: Tuple[TagRow, ...] = ()
    entry_categories: Tuple[EntryCategory, ...] = ()

    def has_required_tables(self) -> bool:
        """True when templates, variables and clauses all have rows."""
        return bool(self.templates and self.variables and self.clauses)

    def template_names(self) -> List[str]:
        """Unique, non-empty template names in table order."""
        names: List[str] = []
        for template in self.templates:
            name = template.name.strip()
            if name and name not in names:
                names.append(name)
        return names

    def get_template(self, name: str) -> Optional[TemplateRow]:
        """
        Retrieve a template by canonical name.

        Returns:
            First matching TemplateRow or None if not found
        """
        key = canon(name)
        for template in self.templates:
            if canon(template.name) == key:
                return template
        return None

    def find_clause_variables(self, object_name: str) -> List[VariableRow]:
        """All clause-type variable rows whose object_name canonically matches."""
        key = canon(object_name)
        return [
            var for var in self.variables
            if canon(var.object_name) == key and var.is_clause
        ]

    def clause_index(self) -> Dict[Number, ClauseRow]:
        """Map pc_id -> ClauseRow. Later duplicates win, as with a plain dict build."""
        return {clause.pc_id: clause for clause in self.clauses}

    def tag_index(self) -> Dict[Number, TagRow]:
        """Map tag_id -> TagRow, first occurrence wins."""
        index: Dict[Number, TagRow] = {}
        for tag in self.tags:
            index.setdefault(tag.tag_id, tag)
        return index

    def clauses_for(self, clause_ids: Iterable[Number]) -> List[ClauseRow]:
        """Clause rows restricted to the given identifiers, in table order."""
        wanted = set(unique_numbers(clause_ids))
        return [clause for clause in self.clauses if clause.pc_id in wanted]

    def tags_for(self, tag_ids: Iterable[Number]) -> List[TagRow]:
        """Tag rows restricted to the given identifiers, in table order."""
        wanted = set(unique_numbers(tag_ids))
        return [tag for tag in self.tags if tag.tag_id in wanted]
        for category in self.entry_categories:
            if canon(category.category) == key:
                return category.options
        return ()


@dataclass(frozen=True)
class Resolution:
    """
    Clause and tag universe of one template selection.

    Properties:
        template_name: Name as requested by the caller
        clause_ids: Resolved clause ids (deduplicated, ascending)
        tag_ids: Tag ids referenced by those clauses and present in the tag table
        diagnostics: Human-readable resolution notes, in the order they arose
    """

    template_name: str
    clause_ids: Tuple[Number, ...] = ()
    tag_ids: Tuple[Number, ...] = ()
    diagnostics: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.clause_ids


@dataclass(frozen=True)
class Question:
    """
    One question descriptor handed to the presentation layer.

    Built from a TagRow, plus the option list of its entry category.
    """

    tag_id: Number
    question: str
    entry_type: str = "Text"
    entry_category: str = ""
    helper_text: str = ""
    priority: Optional[Number] = None
    tag_category: str = ""
    options: Tuple[str, ...] = ()

    def sort_key(self) -> Tuple[float, Number]:
        """Priority ascending (missing priority last), then tag id ascending."""
        priority = float("inf") if self.priority is None else self.priority
        return (priority, self.tag_id)


@dataclass(frozen=True)
class ScheduleResult:
    """Output of the question scheduler."""

    status: Status
    questions: Tuple[Question, ...] = ()
    completion_ratio: float = 0.0
    stalled_clause_ids: Tuple[Number, ...] = field(default_factory=tuple)

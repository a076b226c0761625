"""
Tests for the Question Scheduler.

Status rules:
    - done  iff no clause is pending, or pending clauses have no askable tag
    - ask   implies a non-empty batch, unique by tag id, sorted by
            (priority asc with missing last, tag id asc)
"""

import pytest
from clause_engine.config import EngineConfig
from clause_engine.model import (
    ClauseRow,
    EntryCategory,
    Status,
    TagRow,
    Truth,
    Verdict,
)
from clause_engine.scheduler import completion_ratio, next_questions, question_for_tag


CLAUSES = [
    ClauseRow(pc_id=1, include_if=(10,), tag_ids=(10,)),
    ClauseRow(pc_id=2, exclude_if=(20,), tag_ids=(20,)),
    ClauseRow(pc_id=3, include_if=(10, 30), tag_ids=(30, 10)),
]
CATALOG = [
    TagRow(tag_id=10, priority=2, question="Pets?", entry_category="Bool"),
    TagRow(tag_id=20, priority=1, question="Sublet?", entry_category="Bool"),
    TagRow(tag_id=30, question="Deposit?"),
]


def schedule(verdicts, truth, **kwargs):
    return next_questions(
        verdicts,
        CLAUSES,
        [1, 2, 3],
        truth,
        [10, 20, 30],
        CATALOG,
        **kwargs,
    )


class TestCompletionRatio:

    def test_empty_universe(self):
        assert completion_ratio({}, []) == 0.0

    def test_counts_only_definite_values_in_universe(self):
        truth = {10: Truth.YES, 20: Truth.UNKNOWN, 30: Truth.NO, 99: Truth.YES}
        assert completion_ratio(truth, [10, 20, 30, 40]) == 0.5


def test_all_resolved_is_done():
    verdicts = {1: Verdict.INCLUDED, 2: Verdict.EXCLUDED, 3: Verdict.INCLUDED}
    truth = {10: Truth.YES, 20: Truth.YES, 30: Truth.YES}
    result = schedule(verdicts, truth)
    assert result.status is Status.DONE
    assert result.questions == ()
    assert result.completion_ratio == 1.0


def test_done_with_unanswered_tags_has_partial_ratio():
    """Every clause decided, yet tag 30 never answered."""
    verdicts = {1: Verdict.EXCLUDED, 2: Verdict.INCLUDED, 3: Verdict.EXCLUDED}
    truth = {10: Truth.NO, 20: Truth.NO}
    result = schedule(verdicts, truth)
    assert result.status is Status.DONE
    assert result.completion_ratio == pytest.approx(2 / 3)


def test_ask_sorted_by_priority_then_id():
    verdicts = {1: Verdict.PENDING, 2: Verdict.PENDING, 3: Verdict.PENDING}
    result = schedule(verdicts, {})
    assert result.status is Status.ASK
    assert [q.tag_id for q in result.questions] == [20, 10, 30]
    assert result.completion_ratio == 0.0


def test_answered_tags_are_not_asked_again():
    verdicts = {1: Verdict.INCLUDED, 2: Verdict.PENDING, 3: Verdict.PENDING}
    truth = {10: Truth.YES, 20: Truth.UNKNOWN}
    result = schedule(verdicts, truth)
    assert [q.tag_id for q in result.questions] == [20, 30]


def test_questions_are_unique():
    verdicts = {1: Verdict.PENDING, 3: Verdict.PENDING}
    result = schedule(verdicts, {})
    ids = [q.tag_id for q in result.questions]
    assert len(ids) == len(set(ids)) == 2


def test_clauses_outside_universe_are_ignored():
    verdicts = {1: Verdict.PENDING}
    result = next_questions(verdicts, CLAUSES, [2], {}, [20], CATALOG)
    assert result.status is Status.DONE


def test_fallback_done_when_nothing_askable():
    """Clause 5 waits on tag 99, which is not in its Tags_Array."""
    clauses = [ClauseRow(pc_id=5, include_if=(99,), tag_ids=())]
    result = next_questions({5: Verdict.PENDING}, clauses, [5], {}, [], CATALOG)
    assert result.status is Status.DONE
    assert result.questions == ()
    assert result.stalled_clause_ids == (5,)


def test_report_stalled_config():
    clauses = [ClauseRow(pc_id=5, include_if=(99,), tag_ids=(10,))]
    result = next_questions(
        {5: Verdict.PENDING}, clauses, [5], {10: Truth.YES}, [10], CATALOG,
        config=EngineConfig(report_stalled=True),
    )
    assert result.status is Status.STALLED
    assert result.stalled_clause_ids == (5,)


def test_missing_catalog_entry_gets_fallback_question():
    clauses = [ClauseRow(pc_id=7, include_if=(55,), tag_ids=(55, 10))]
    result = next_questions({7: Verdict.PENDING}, clauses, [7], {}, [10], CATALOG)
    assert result.status is Status.ASK
    assert [q.tag_id for q in result.questions] == [10, 55]
    fallback = result.questions[1]
    assert fallback.question == "Answer for Tag 55"
    assert fallback.entry_type == "Text"
    assert fallback.priority is None


def test_options_attached_from_entry_categories():
    verdicts = {1: Verdict.PENDING}
    result = schedule(verdicts, {}, entry_categories=[EntryCategory("bool", ("Yes", "No"))])
    assert result.questions[0].options == ("Yes", "No")


def test_options_first_category_wins_and_unknown_is_empty():
    categories = [
        EntryCategory("Bool", ("Yes", "No")),
        EntryCategory(" BOOL ", ("Y", "N")),
        EntryCategory("Currency", ()),
    ]
    result = schedule({1: Verdict.PENDING, 3: Verdict.PENDING}, {}, entry_categories=categories)
    options = {q.tag_id: q.options for q in result.questions}
    assert options[10] == ("Yes", "No")
    assert all(opts == () for tag_id, opts in options.items() if tag_id != 10)


def test_question_for_tag_copies_descriptor_fields():
    tag = TagRow(
        tag_id=1, tag_category="C", priority=3, question="Q",
        entry_type="Drop Down", entry_category="Colours", helper_text="H",
    )
    q = question_for_tag(1, tag, ["Red"])
    assert (q.tag_id, q.question, q.entry_type, q.entry_category) == (1, "Q", "Drop Down", "Colours")
    assert (q.helper_text, q.priority, q.tag_category, q.options) == ("H", 3, "C", ("Red",))

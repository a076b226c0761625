"""
Question Scheduler.

Given clause verdicts, decides whether more input is needed and which
questions to surface next.

State machine (recomputed from scratch on every call):

    idle  -> caller has not chosen a template (not handled here)
    empty -> template resolved to zero clauses (see cycle.run_cycle)
    ask   -> at least one pending clause has an unanswered tag
    done  -> every clause is decided, or nothing askable is left

When clauses are still pending but none of their tags can be asked, the
scheduler falls back to done so the caller never waits on an empty
batch. EngineConfig.report_stalled turns that case into Status.STALLED.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from .columns import Number, canon, unique_numbers
from .config import DEFAULT_CONFIG, EngineConfig
from .model import (
    ClauseRow,
    EntryCategory,
    Question,
    ScheduleResult,
    Status,
    TagRow,
    Truth,
    Verdict,
)

logger = logging.getLogger(__name__)


def completion_ratio(truth: Mapping[Number, Truth], tag_ids: Iterable[Number]) -> float:
    """Fraction of the tag universe holding a definite (YES/NO) truth value."""
    universe = unique_numbers(tag_ids)
    if not universe:
        return 0.0
    decided = sum(
        1 for tag_id in universe
        if truth.get(tag_id, Truth.UNKNOWN) is not Truth.UNKNOWN
    )
    return decided / len(universe)


def question_for_tag(
    tag_id: Number,
    tag: Optional[TagRow],
    options: Iterable[str] = (),
    config: EngineConfig = DEFAULT_CONFIG,
) -> Question:
    """Question descriptor for a tag, or a minimal stand-in when the catalog lacks it."""
    if tag is None:
        return Question(
            tag_id=tag_id,
            question=config.fallback_question.format(tag_id=tag_id),
            entry_type=config.fallback_entry_type,
        )
    return Question(
        tag_id=tag.tag_id,
        question=tag.question,
        entry_type=tag.entry_type,
        entry_category=tag.entry_category,
        helper_text=tag.helper_text,
        priority=tag.priority,
        tag_category=tag.tag_category,
        options=tuple(options),
    )


def _options_index(entry_categories: Iterable[EntryCategory]) -> Dict[str, tuple]:
    index: Dict[str, tuple] = {}
    for category in entry_categories:
        key = canon(category.category)
        if key:
            index.setdefault(key, tuple(category.options))
    return index


def next_questions(
    verdicts: Mapping[Number, Verdict],
    clauses: Iterable[ClauseRow],
    clause_ids: Iterable[Number],
    truth: Mapping[Number, Truth],
    tag_ids: Iterable[Number],
    catalog: Iterable[TagRow],
    entry_categories: Iterable[EntryCategory] = (),
    config: EngineConfig = DEFAULT_CONFIG,
) -> ScheduleResult:
    """
    Decide completion status and the next ordered batch of questions.

    Args:
        verdicts: Clause verdicts of this cycle
        clauses: Clause rows in scope (source of Tags_Array)
        clause_ids: Clause universe of the template
        truth: Tag truth values of this cycle
        tag_ids: Tag universe of the template (drives completion_ratio)
        catalog: Tag rows used to describe questions
        entry_categories: Option lists attached to descriptors

    Returns:
        ScheduleResult. For Status.ASK, questions are unique by tag id and
        sorted by (priority asc with missing last, tag id asc).
    """
    ratio = completion_ratio(truth, tag_ids)

    unresolved = [
        pc_id for pc_id in unique_numbers(clause_ids)
        if verdicts.get(pc_id) is Verdict.PENDING
    ]
    if not unresolved:
        return ScheduleResult(status=Status.DONE, completion_ratio=ratio)

    rows_by_id = {clause.pc_id: clause for clause in clauses}
    referenced: List[Number] = []
    for pc_id in unresolved:
        clause = rows_by_id.get(pc_id)
        if clause is None:
            continue
        referenced.extend(unique_numbers(clause.tag_ids))

    pending = [
        tag_id for tag_id in unique_numbers(referenced)
        if truth.get(tag_id, Truth.UNKNOWN) is Truth.UNKNOWN
    ]

    if not pending:
        status = Status.STALLED if config.report_stalled else Status.DONE
        logger.warning(
            "%d clauses unresolved with no askable tag left: %s",
            len(unresolved), unresolved,
        )
        return ScheduleResult(
            status=status,
            completion_ratio=ratio,
            stalled_clause_ids=tuple(unresolved),
        )

    tags_by_id: Dict[Number, TagRow] = {}
    for tag in catalog:
        tags_by_id.setdefault(tag.tag_id, tag)
    options = _options_index(entry_categories)

    questions: List[Question] = []
    seen = set()
    for tag_id in pending:
        tag = tags_by_id.get(tag_id)
        option_list = options.get(canon(tag.entry_category), ()) if tag else ()
        question = question_for_tag(tag_id, tag, option_list, config)
        if question.tag_id in seen:
            continue
        seen.add(question.tag_id)
        questions.append(question)

    questions.sort(key=Question.sort_key)
    return ScheduleResult(status=Status.ASK, questions=tuple(questions), completion_ratio=ratio)

"""
Tag Answer Evaluator and Clause Evaluator.

Both are pure, full recomputations run on every answer change:

    raw answers --evaluate_tags--> {tag_id: Truth}
    {tag_id: Truth} --evaluate_clauses--> {pc_id: Verdict}

Neither function keeps state or mutates its inputs.
"""

import logging
from typing import Any, Dict, Iterable, Mapping

from .columns import Number, canon, to_number, unique_numbers
from .config import DEFAULT_CONFIG, EngineConfig
from .model import ClauseRow, TagRow, Truth, Verdict

logger = logging.getLogger(__name__)


def answer_truth(tag: TagRow, raw_answer: Any, config: EngineConfig = DEFAULT_CONFIG) -> Truth:
    """
    Truth value of one raw answer under the tag's entry semantics.

    Bool tags map "yes"/"no" (canonically) to YES/NO and anything else to
    UNKNOWN. Every other tag, "No Display" ones included, is YES when the
    answer is non-blank and UNKNOWN otherwise; such tags never become NO.
    """
    text = "" if raw_answer is None else str(raw_answer)

    if config.is_bool_category(tag.entry_category):
        value = canon(text)
        if value == canon(config.yes_answer):
            return Truth.YES
        if value == canon(config.no_answer):
            return Truth.NO
        return Truth.UNKNOWN

    return Truth.YES if text.strip() else Truth.UNKNOWN


def evaluate_tags(
    answers: Mapping[Any, Any],
    tags: Iterable[TagRow],
    config: EngineConfig = DEFAULT_CONFIG,
) -> Dict[Number, Truth]:
    """
    Convert a raw answer mapping into tag truth values.

    Args:
        answers: Tag id (str or number) -> raw answer text
        tags: Tag rows in scope; answers for other ids are ignored

    Returns:
        Truth per answered, in-scope tag. Unanswered tags are absent.
    """
    rows: Dict[Number, TagRow] = {}
    for tag in tags:
        rows.setdefault(tag.tag_id, tag)

    truth: Dict[Number, Truth] = {}
    for key, raw_answer in (answers or {}).items():
        tag_id = to_number(key)
        if tag_id is None or tag_id not in rows:
            continue
        truth[tag_id] = answer_truth(rows[tag_id], raw_answer, config)
    return truth


def tag_value(truth: Mapping[Number, Truth], tag_id: Any) -> Truth:
    """Truth of a tag, UNKNOWN when absent (absence never means NO)."""
    number = to_number(tag_id)
    if number is None:
        return Truth.UNKNOWN
    return truth.get(number, Truth.UNKNOWN)


def clause_verdict(clause: ClauseRow, truth: Mapping[Number, Truth]) -> Verdict:
    """
    Verdict of one clause.

    Order matters: both veto checks run before the inclusion check, so a
    clause that is EXCLUDED cannot become INCLUDED within the same cycle.
    """
    include = unique_numbers(clause.include_if)
    exclude = unique_numbers(clause.exclude_if)

    # A required condition was explicitly denied.
    if any(tag_value(truth, t) is Truth.NO for t in include):
        return Verdict.EXCLUDED
    # A disqualifying condition is explicitly present.
    if any(tag_value(truth, t) is Truth.YES for t in exclude):
        return Verdict.EXCLUDED

    include_met = all(tag_value(truth, t) is Truth.YES for t in include)
    exclude_cleared = all(tag_value(truth, t) is Truth.NO for t in exclude)
    if include_met and exclude_cleared:
        return Verdict.INCLUDED
    return Verdict.PENDING


def evaluate_clauses(truth: Mapping[Number, Truth], clauses: Iterable[ClauseRow]) -> Dict[Number, Verdict]:
    """Verdict per clause row, keyed by pc_id."""
    verdicts = {clause.pc_id: clause_verdict(clause, truth) for clause in clauses}
    logger.debug(
        "Evaluated %d clauses: %d included, %d excluded",
        len(verdicts),
        sum(1 for v in verdicts.values() if v is Verdict.INCLUDED),
        sum(1 for v in verdicts.values() if v is Verdict.EXCLUDED),
    )
    return verdicts

"""
Resolution cycle: one full recomputation from an answer snapshot.

    answers -> tag truth -> clause verdicts -> next questions

The caller owns the answer mapping and calls run_cycle again after every
change. Nothing is cached between calls.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from .columns import Number, to_number
from .config import DEFAULT_CONFIG, EngineConfig
from .evaluator import evaluate_clauses, evaluate_tags
from .model import Question, ReferenceTables, Resolution, Status, Truth, Verdict
from .scheduler import next_questions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleResult:
    """Everything one resolution cycle derives from the current answers."""

    status: Status
    questions: Tuple[Question, ...] = ()
    completion_ratio: float = 0.0
    tag_truth: Dict[Number, Truth] = field(default_factory=dict)
    verdicts: Dict[Number, Verdict] = field(default_factory=dict)
    stalled_clause_ids: Tuple[Number, ...] = ()

    def _clauses_with(self, verdict: Verdict) -> Tuple[Number, ...]:
        return tuple(sorted(pc for pc, v in self.verdicts.items() if v is verdict))

    @property
    def included_clause_ids(self) -> Tuple[Number, ...]:
        return self._clauses_with(Verdict.INCLUDED)

    @property
    def excluded_clause_ids(self) -> Tuple[Number, ...]:
        return self._clauses_with(Verdict.EXCLUDED)

    @property
    def pending_clause_ids(self) -> Tuple[Number, ...]:
        return self._clauses_with(Verdict.PENDING)


def run_cycle(
    tables: ReferenceTables,
    resolution: Resolution,
    answers: Mapping[Any, Any],
    config: EngineConfig = DEFAULT_CONFIG,
) -> CycleResult:
    """
    Run one resolution cycle for a resolved template.

    Args:
        tables: Reference data snapshot the resolution was computed from
        resolution: Output of resolver.resolve_template
        answers: Current raw answers, tag id -> text

    Returns:
        CycleResult. Status.EMPTY when the template has no clauses.
    """
    if resolution.is_empty:
        return CycleResult(status=Status.EMPTY)

    tags = tables.tags_for(resolution.tag_ids)
    clauses = tables.clauses_for(resolution.clause_ids)

    truth = evaluate_tags(answers, tags, config)
    verdicts = evaluate_clauses(truth, clauses)
    schedule = next_questions(
        verdicts,
        clauses,
        resolution.clause_ids,
        truth,
        resolution.tag_ids,
        tags,
        tables.entry_categories,
        config,
    )

    logger.debug(
        "Cycle for %r: status=%s, %d questions, %.0f%% tags answered",
        resolution.template_name,
        schedule.status.value,
        len(schedule.questions),
        schedule.completion_ratio * 100,
    )
    return CycleResult(
        status=schedule.status,
        questions=schedule.questions,
        completion_ratio=schedule.completion_ratio,
        tag_truth=truth,
        verdicts=verdicts,
        stalled_clause_ids=schedule.stalled_clause_ids,
    )


Proposals = Union[Mapping[Any, Any], Iterable[Tuple[Any, Any]]]


def merge_proposed_answers(
    answers: Mapping[Any, Any],
    proposals: Proposals,
    overwrite: bool = False,
) -> Dict[str, str]:
    """
    Merge proposed answers (e.g. guessed from free text) into a copy of `answers`.

    Keys are normalised to the string form of the numeric tag id. For a
    tag proposed more than once, the first proposal wins. Existing
    non-blank answers are kept unless `overwrite` is set. Proposals whose
    key is not a number are ignored.

    Returns:
        New answer mapping; `answers` is left untouched
    """
    merged: Dict[str, str] = {}
    for key, value in (answers or {}).items():
        tag_id = to_number(key)
        merged[str(tag_id) if tag_id is not None else str(key)] = "" if value is None else str(value)

    items = proposals.items() if isinstance(proposals, Mapping) else proposals
    proposed = set()
    for key, value in items:
        tag_id = to_number(key)
        if tag_id is None or tag_id in proposed:
            continue
        proposed.add(tag_id)
        slot = str(tag_id)
        if not overwrite and merged.get(slot, "").strip():
            continue
        merged[slot] = "" if value is None else str(value)
    return merged

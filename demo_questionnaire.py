#!/usr/bin/env python3
"""
Questionnaire Demo: CSV -> Resolution -> Cycles until done

Shows the full workflow:
1. Load the reference tables and starting answers from sample_data/lease
2. Resolve the "Lease" template to its clauses and tags
3. Answer the highest-priority question each cycle until done
4. Analyze the template wiring
"""

import os

from clause_engine.analyzer import analyze_template
from clause_engine.cli import load_answers
from clause_engine.csv_parser import load_reference_dir
from clause_engine.cycle import merge_proposed_answers, run_cycle
from clause_engine.model import Status
from clause_engine.resolver import resolve_template

# Scripted answers standing in for the user
SCRIPTED = {10: "Yes", 20: "No", 30: "250", 40: "Yes", 50: "No"}


def main():
    data_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "sample_data", "lease")

    print("=" * 70)
    print("QUESTIONNAIRE DEMO: CSV -> Resolution -> Cycles")
    print("=" * 70)

    print("\n1. LOADING REFERENCE TABLES...")
    tables = load_reference_dir(data_dir)
    print(f"   Templates: {tables.template_names()}")
    print(f"   Clauses:   {len(tables.clauses)}")
    print(f"   Tags:      {len(tables.tags)}")

    print("\n2. RESOLVING TEMPLATE 'Lease'...")
    resolution = resolve_template(tables, "Lease")
    print(f"   Clause IDs: {list(resolution.clause_ids)}")
    print(f"   Tag IDs:    {list(resolution.tag_ids)}")
    for note in resolution.diagnostics:
        print(f"   - {note}")

    print("\n3. ANSWERING QUESTIONS...")
    answers = merge_proposed_answers({}, load_answers(os.path.join(data_dir, "answers.yaml")))
    print(f"   Starting answers: {answers}")
    cycle = 1
    while True:
        result = run_cycle(tables, resolution, answers)
        print(f"   Cycle {cycle}: status={result.status.value} "
              f"completion={result.completion_ratio:.0%} "
              f"included={list(result.included_clause_ids)} "
              f"excluded={list(result.excluded_clause_ids)}")
        if result.status is not Status.ASK:
            break
        question = result.questions[0]
        answer = SCRIPTED[question.tag_id]
        print(f"      Q[{question.tag_id}] {question.question} -> {answer}")
        answers = merge_proposed_answers(answers, {question.tag_id: answer})
        cycle += 1

    print("\n4. ANALYZING TEMPLATE...")
    report = analyze_template(tables, resolution)
    if report.warnings:
        for i, warning in enumerate(report.warnings, 1):
            print(f"   {i}. {warning}")
    else:
        print("   No warnings - reference data looks clean.")

    print("\n" + "=" * 70)


if __name__ == "__main__":
    main()

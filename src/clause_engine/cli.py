"""
Command-line front end: run one resolution cycle over CSV reference data.

    clause-engine sample_data/lease Lease --answers sample_data/lease/answers.yaml
    clause-engine data/ --list-templates
    clause-engine data/ "Lease" --analyze

The answers file is a YAML (or JSON) mapping of tag id -> answer text.
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

import yaml

from clause_engine.analyzer import analyze_template
from clause_engine.config import load_config
from clause_engine.csv_parser import load_reference_dir
from clause_engine.cycle import CycleResult, run_cycle
from clause_engine.errors import ClauseEngineError
from clause_engine.resolver import resolve_template
from clause_engine.serialization import cycle_to_json, cycle_to_yaml

logger = logging.getLogger(__name__)


def load_answers(path: Optional[str]) -> Dict[Any, Any]:
    """Read an answers file; None yields an empty mapping."""
    if path is None:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ClauseEngineError(f"Invalid answers file {path}: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ClauseEngineError(f"Answers file {path} must hold a mapping of tag id -> answer")
    return data


def format_cycle(result: CycleResult, diagnostics: List[str]) -> str:
    lines = [
        f"Status:     {result.status.value}",
        f"Completion: {result.completion_ratio:.0%}",
        f"Included:   {list(result.included_clause_ids)}",
        f"Excluded:   {list(result.excluded_clause_ids)}",
        f"Pending:    {list(result.pending_clause_ids)}",
    ]
    if result.stalled_clause_ids:
        lines.append(f"Stalled:    {list(result.stalled_clause_ids)}")
    if result.questions:
        lines.append("")
        lines.append("Next questions:")
        for q in result.questions:
            priority = "-" if q.priority is None else q.priority
            lines.append(f"  [{q.tag_id}] (priority {priority}) {q.question}")
            if q.options:
                lines.append(f"      options: {', '.join(q.options)}")
            if q.helper_text:
                lines.append(f"      {q.helper_text}")
    if diagnostics:
        lines.append("")
        lines.append("Diagnostics:")
        lines.extend(f"  - {d}" for d in diagnostics)
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clause-engine",
        description="Resolve the clauses of a document template and list the next questions",
    )
    parser.add_argument("data_dir", help="Directory holding templates.csv, variables.csv, clauses.csv, tags.csv")
    parser.add_argument("template", nargs="?", help="Template name (case/space/underscore-insensitive)")
    parser.add_argument("--answers", help="YAML/JSON file mapping tag id -> answer")
    parser.add_argument("--config", help="YAML file overriding engine settings")
    parser.add_argument("--format", choices=["text", "json", "yaml"], default="text")
    parser.add_argument("--list-templates", action="store_true", help="List template names and exit")
    parser.add_argument("--analyze", action="store_true", help="Print reference-data warnings for the template")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        tables = load_reference_dir(args.data_dir)
        answers = load_answers(args.answers)
    except (ClauseEngineError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.list_templates:
        for name in tables.template_names():
            print(name)
        return 0

    if not args.template:
        print("error: a template name is required", file=sys.stderr)
        return 2

    resolution = resolve_template(tables, args.template)
    result = run_cycle(tables, resolution, answers, config)

    if args.format == "json":
        print(cycle_to_json(result))
    elif args.format == "yaml":
        print(cycle_to_yaml(result), end="")
    else:
        print(format_cycle(result, list(resolution.diagnostics)))

    if args.analyze:
        report = analyze_template(tables, resolution, config)
        print()
        if report.warnings:
            print("Warnings:")
            for i, warning in enumerate(report.warnings, 1):
                print(f"  {i}. {warning}")
        else:
            print("No warnings - reference data looks clean.")

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""CLI command handlers for pro-match.

Each public function corresponds to a CLI subcommand and encapsulates
the wiring, orchestration, and output for that command.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from promatch.config import OUTPUT_FORMATS, Settings
from promatch.export import EXPORTERS
from promatch.matching import PERSONALITY_TABLE, MatchEngine, build_candidate_query
from promatch.models import format_personality
from promatch.monitoring import CollectingReporter
from promatch.reference import load_candidates, load_project, load_scope_tables, table_for

_EXTENSIONS = {"markdown": "md", "csv": "csv", "json": "json"}


def handle_match(args: argparse.Namespace, settings: Settings) -> None:
    """Rank a candidate pool against a project and print the shortlist."""
    project = load_project(args.project)
    candidates = load_candidates(args.candidates)
    tables = load_scope_tables(args.scope_tables or settings.data.scope_tables_path)
    limit = args.limit if args.limit is not None else settings.matching.limit

    reporter = CollectingReporter()
    engine = MatchEngine(reporter=reporter)
    matches = engine.match(project, candidates, table_for(tables, project), limit=limit)

    print(f"\n{'=' * 60}")
    print(f" Matches for project {project.id or '(unnamed)'}")
    print(f"{'=' * 60}")
    print(f" Candidates scored: {len(candidates)}")
    print(f" Returned:          {len(matches)}")
    if reporter.scopes:
        print(f" Missing scopes:    {', '.join(reporter.scopes)}")
    print(f"{'=' * 60}\n")

    for i, m in enumerate(matches, 1):
        label = m.candidate.name or m.candidate.id
        print(f"{i}. [{m.score}] {label}")
        print(f"   {m.score_explanation()}")
        if args.explain:
            print(_indent_json(m.explain.to_dict()))
        print()

    fmt = args.format or settings.output.default_format
    if args.output or args.format:
        output_path = Path(args.output) if args.output else (
            Path(settings.output.output_dir) / f"matches.{_EXTENSIONS[fmt]}"
        )
        output_path.parent.mkdir(parents=True, exist_ok=True)
        EXPORTERS[fmt]().export(matches, str(output_path), project_id=project.id)
        print(f"Exported {fmt} → {output_path}")


def handle_criteria(args: argparse.Namespace, settings: Settings) -> None:
    """Print the hard-filter criteria for the project's candidate query."""
    project = load_project(args.project)
    tables = load_scope_tables(args.scope_tables or settings.data.scope_tables_path)
    query = build_candidate_query(project, table_for(tables, project))
    print(json.dumps(query.to_dict(), indent=2))


def handle_tables() -> None:
    """Summarise the built-in personality compatibility table.

    The table is validated when it is imported, so reaching this point
    means every row is a full permutation of the 16 codes.
    """
    print(f"Personality table: {len(PERSONALITY_TABLE)} codes, all rows complete")
    for code in PERSONALITY_TABLE:
        row = PERSONALITY_TABLE.lookup(code)
        top = ", ".join(format_personality(c) for c in row[:3])
        print(f"  {format_personality(code)}: {top}, …")


def _indent_json(data: object) -> str:
    """Indent a JSON dump under a ranked entry."""
    return "\n".join(f"   {line}" for line in json.dumps(data, indent=2).splitlines())


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="pro-match",
        description="Rank service pros against a project's requirements",
    )
    parser.add_argument(
        "--settings",
        type=str,
        default=None,
        help="Path to settings.toml (default: config/settings.toml if present)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # -- match ---------------------------------------------------------------
    match_p = sub.add_parser("match", help="Rank a candidate pool against a project")
    match_p.add_argument("--project", type=str, required=True, help="Project JSON file")
    match_p.add_argument("--candidates", type=str, required=True, help="Candidate pool JSON file")
    match_p.add_argument(
        "--scope-tables",
        type=str,
        default=None,
        help="Scope score tables JSON (default: [data].scope_tables_path)",
    )
    match_p.add_argument(
        "--limit",
        type=int,
        default=None,
        metavar="N",
        help="Number of pros to return (default: [matching].limit)",
    )
    match_p.add_argument(
        "--format",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Also export results in this format",
    )
    match_p.add_argument("--output", type=str, default=None, help="Export file path")
    match_p.add_argument(
        "--explain",
        action="store_true",
        help="Print the full explain trace for each match",
    )

    # -- criteria ------------------------------------------------------------
    criteria_p = sub.add_parser("criteria", help="Print candidate query criteria for a project")
    criteria_p.add_argument("--project", type=str, required=True, help="Project JSON file")
    criteria_p.add_argument("--scope-tables", type=str, default=None, help="Scope score tables JSON")

    # -- tables --------------------------------------------------------------
    sub.add_parser("tables", help="Validate and summarise the personality table")

    return parser

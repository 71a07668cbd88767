"""JSON loaders for match inputs.

In production the project, the candidate pool and the scope score
tables come from the storage layer.  The CLI and tests read the same
shapes from JSON files:

- project: one object with the project's match data
- candidates: a list of pro profiles (already hard-filtered)
- scope tables: ``{work_type: {scope: {"proType": {...}, "specialty": {...}}}}``
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from promatch.errors import ActionableError
from promatch.models import Candidate, ProjectRequirement, ScopeScoreEntry, ScopeScoreTable


def _read_json(path: str | Path, what: str) -> Any:
    filepath = Path(path)
    if not filepath.exists():
        raise ActionableError.validation(
            what,
            f"file not found: {filepath}",
            suggestion=f"Pass an existing JSON file for the {what}",
        )
    try:
        return json.loads(filepath.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ActionableError.parse(
            source=str(filepath),
            location=f"line {exc.lineno} column {exc.colno}",
            raw_error=exc.msg,
        ) from None


def load_project(path: str | Path) -> ProjectRequirement:
    data = _read_json(path, "project")
    if not isinstance(data, dict):
        raise ActionableError.validation("project", "expected a JSON object")
    # Stored projects nest their match data
    match_data = data.get("matchData")
    if isinstance(match_data, dict):
        data = {"id": data.get("id", ""), "omitPros": data.get("omitPros", []), **match_data}
    return ProjectRequirement.from_dict(data)


def load_candidates(path: str | Path) -> list[Candidate]:
    data = _read_json(path, "candidates")
    if not isinstance(data, list):
        raise ActionableError.validation("candidates", "expected a JSON list of candidates")
    return [Candidate.from_dict(item) for item in data]


def parse_scope_table(data: dict[str, Any]) -> ScopeScoreTable:
    table: ScopeScoreTable = {}
    for scope, entry in data.items():
        if not isinstance(entry, dict):
            raise ActionableError.validation(
                f"scope_tables.{scope}", "each scope entry must be an object"
            )
        table[str(scope)] = ScopeScoreEntry.from_dict(entry)
    return table


def load_scope_tables(path: str | Path) -> dict[str, ScopeScoreTable]:
    """Load every work type's scope table from one JSON file."""
    data = _read_json(path, "scope_tables")
    if not isinstance(data, dict):
        raise ActionableError.validation("scope_tables", "expected a JSON object keyed by work type")
    tables: dict[str, ScopeScoreTable] = {}
    for work_type, scopes in data.items():
        if not isinstance(scopes, dict):
            raise ActionableError.validation(
                f"scope_tables.{work_type}", "expected an object keyed by scope"
            )
        tables[str(work_type)] = parse_scope_table(scopes)
    return tables


def table_for(tables: dict[str, ScopeScoreTable], project: ProjectRequirement) -> ScopeScoreTable:
    """Pick the project's work-type table; an unknown work type yields an empty table.

    An empty table means every scope is missing, which matching reports
    and tolerates.
    """
    if project.work_type in tables:
        return tables[project.work_type]
    if not project.work_type and len(tables) == 1:
        return next(iter(tables.values()))
    return {}

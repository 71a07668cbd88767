"""JSON input loader tests.

Covers: TestProjectLoading, TestCandidateLoading, TestScopeTableLoading
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from promatch.errors import ActionableError, ErrorType
from promatch.reference import load_candidates, load_project, load_scope_tables, table_for

if TYPE_CHECKING:
    from pathlib import Path

MATCH_DATA = {
    "type": "Renovation",
    "scopeMain": ["Kitchen"],
    "priority": {"cost": 1, "time": 2, "design": 3},
    "personality": "ENTJ",
}


class TestProjectLoading:
    """REQUIREMENT: Projects load from flat or stored (nested) documents.

    WHO: The CLI reading a project exported from storage
    WHAT: A top-level ``matchData`` object is unwrapped and merged with
          the document's id and omitPros; a flat document is read as-is;
          a missing file is a VALIDATION error; broken JSON is a PARSE
          error with its position
    WHY: Operators paste stored documents straight into files
    """

    def test_nested_match_data_is_unwrapped(self, write_json) -> None:
        """id and omitPros come from the outer document."""
        path = write_json("project.json", {"id": "p-1", "omitPros": ["pro-4"], "matchData": MATCH_DATA})
        project = load_project(path)
        assert project.id == "p-1"
        assert project.omit_candidates == ["pro-4"]
        assert project.scopes == ["Kitchen"]

    def test_flat_document_is_read(self, write_json) -> None:
        """A document without matchData is the match data itself."""
        project = load_project(write_json("project.json", {"id": "p-2", **MATCH_DATA}))
        assert project.id == "p-2"
        assert project.work_type == "Renovation"

    def test_missing_file_is_validation_error(self, tmp_path: Path) -> None:
        """The loader names the missing file."""
        with pytest.raises(ActionableError) as exc_info:
            load_project(tmp_path / "absent.json")
        assert exc_info.value.error_type == ErrorType.VALIDATION
        assert "absent.json" in exc_info.value.error

    def test_broken_json_is_parse_error(self, tmp_path: Path) -> None:
        """Syntax errors report line and column."""
        path = tmp_path / "project.json"
        path.write_text('{"id": "p-1",\n  "scopeMain": [}', encoding="utf-8")
        with pytest.raises(ActionableError) as exc_info:
            load_project(path)
        assert exc_info.value.error_type == ErrorType.PARSE
        assert "line 2" in exc_info.value.error

    def test_list_document_is_rejected(self, write_json) -> None:
        """A project must be an object."""
        with pytest.raises(ActionableError):
            load_project(write_json("project.json", [MATCH_DATA]))


class TestCandidateLoading:
    """REQUIREMENT: Candidate pools load from a JSON list.

    WHO: The CLI
    WHAT: Each entry becomes a Candidate; an object instead of a list is
          refused
    WHY: The pool is an ordered sequence; order decides ties
    """

    def test_pool_keeps_file_order(self, write_json) -> None:
        """Candidates come back in file order."""
        path = write_json("pool.json", [{"id": "b"}, {"id": "a"}])
        assert [c.id for c in load_candidates(path)] == ["b", "a"]

    def test_object_is_rejected(self, write_json) -> None:
        """A single object is not a pool."""
        with pytest.raises(ActionableError):
            load_candidates(write_json("pool.json", {"id": "a"}))


class TestScopeTableLoading:
    """REQUIREMENT: Scope tables are keyed by work type, then scope.

    WHO: The engine, which needs the table for the project's work type
    WHAT: Every work type parses; table_for picks the project's work
          type; an unknown work type yields an empty table; a project
          without a work type uses the only table when there is one
    WHY: An empty table degrades to "every scope missing", which is
         reported and tolerated
    """

    TABLES = {
        "Renovation": {"Kitchen": {"proType": {"Designer": "D1"}, "specialty": {"Tiling": 2}}},
        "NewBuild": {"Foundation": {"proType": {"GeneralContractor": "A1"}}},
    }

    def test_tables_parse_per_work_type(self, write_json) -> None:
        """Entries are parsed into ScopeScoreEntry records."""
        tables = load_scope_tables(write_json("scopes.json", self.TABLES))
        assert set(tables) == {"Renovation", "NewBuild"}
        assert tables["Renovation"]["Kitchen"].specialties == {"Tiling": 2}

    def test_table_for_project_work_type(self, write_json, make_project) -> None:
        """The Renovation project gets the Renovation table."""
        tables = load_scope_tables(write_json("scopes.json", self.TABLES))
        assert set(table_for(tables, make_project())) == {"Kitchen"}

    def test_unknown_work_type_gets_empty_table(self, write_json, make_project) -> None:
        """No table for 'Demolition' means no scope entries."""
        tables = load_scope_tables(write_json("scopes.json", self.TABLES))
        assert table_for(tables, make_project(work_type="Demolition")) == {}

    def test_single_table_serves_untyped_project(self, write_json, make_project) -> None:
        """A project without a work type uses the only table."""
        tables = load_scope_tables(write_json("scopes.json", {"Renovation": self.TABLES["Renovation"]}))
        assert set(table_for(tables, make_project(work_type=""))) == {"Kitchen"}

    def test_non_object_scope_entry_is_rejected(self, write_json) -> None:
        """A scope entry must be an object."""
        with pytest.raises(ActionableError):
            load_scope_tables(write_json("scopes.json", {"Renovation": {"Kitchen": ["D1"]}}))

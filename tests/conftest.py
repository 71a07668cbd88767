"""Global test configuration — shared fixtures and safety guards.

This conftest provides:

1. **Output guard** — makes the real ``output/`` directory read-only so
   tests that forget to use ``tmp_path`` get an immediate ``PermissionError``.

2. **Domain factories** — ``make_project``, ``make_candidate`` and
   ``make_scope_table`` build realistic match inputs with overridable
   defaults, so each test only spells out the fields it is about.

3. **File fixtures** — ``write_json`` and ``write_settings`` put inputs
   on disk under ``tmp_path`` for loader and CLI tests.
"""

from __future__ import annotations

import contextlib
import json
import stat
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from promatch.models import (
    Candidate,
    PriorityRanking,
    ProjectRequirement,
    ScopeScoreEntry,
    parse_personality,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

_PROJECT_OUTPUT = Path(__file__).resolve().parent.parent / "output"

# Kitchen/Bathroom marks shared across test files.  Individual tests that
# need other marks build their own table with ``make_scope_table``.
KITCHEN = {
    "proType": {"GeneralContractor": "A1", "Designer": "D1", "Handyman": "C3"},
    "specialty": {"Cabinetry": 1, "Countertops": 2, "Tiling": 3},
}
BATHROOM = {
    "proType": {"GeneralContractor": "A2", "Plumber": "T1", "Handyman": "C2"},
    "specialty": {"Tiling": 1, "Plumbing": 1, "Waterproofing": 2},
}


# ---------------------------------------------------------------------------
# Domain factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_project():
    """Factory fixture — returns a callable that produces a ProjectRequirement.

    Defaults: Kitchen scope, cost > time > design, an ENTJ homeowner,
    no wanted qualities, exploring mindset.

    Usage::

        def test_something(make_project):
            project = make_project()
            project = make_project(scopes=["Kitchen", "Bathroom"], exact_mindset=True)
            project = make_project(priority=(3, 1, 2))  # cost, time, design
    """

    def _factory(
        scopes: list[str] | None = None,
        priority: tuple[int, int, int] = (1, 2, 3),
        personality: str = "ENTJ",
        wanted_qualities: list[str] | None = None,
        exact_mindset: bool = False,
        project_id: str = "project-1",
        work_type: str = "Renovation",
        budget: str | None = None,
        omit_candidates: list[str] | None = None,
    ) -> ProjectRequirement:
        cost, time, design = priority
        return ProjectRequirement(
            id=project_id,
            work_type=work_type,
            scopes=scopes if scopes is not None else ["Kitchen"],
            priority=PriorityRanking(cost=cost, time=time, design=design),
            personality=parse_personality(personality),
            wanted_qualities=frozenset(wanted_qualities or []),
            exact_mindset=exact_mindset,
            budget=budget,
            omit_candidates=omit_candidates or [],
        )

    return _factory


@pytest.fixture
def make_candidate():
    """Factory fixture — returns a callable that produces a Candidate.

    Defaults produce a pro with no matching data and an ENTJ personality
    so each test opts in to exactly the dimensions it exercises.

    Usage::

        def test_something(make_candidate):
            pro = make_candidate("pro-1", provider_types=["Designer"])
            pro = make_candidate("pro-2", personality="")  # unfilled profile
    """

    def _factory(
        candidate_id: str = "pro-1",
        provider_types: list[str] | None = None,
        specialties: list[str] | None = None,
        qualities: list[str] | None = None,
        personality: str = "ENTJ",
        name: str | None = None,
    ) -> Candidate:
        return Candidate(
            id=candidate_id,
            name=name,
            provider_types=frozenset(provider_types or []),
            specialties=frozenset(specialties or []),
            qualities=frozenset(qualities or []),
            personality=parse_personality(personality, strict=False),
        )

    return _factory


@pytest.fixture
def make_scope_table():
    """Factory fixture — returns a callable that produces a ScopeScoreTable.

    Called with no arguments it yields the shared Kitchen and Bathroom
    entries.  Keyword arguments map scope names to raw entry dicts.

    Usage::

        def test_something(make_scope_table):
            table = make_scope_table()
            table = make_scope_table(Kitchen={"proType": {"X": "C1"}})
    """

    def _factory(**scopes: dict[str, Any]) -> dict[str, ScopeScoreEntry]:
        raw = scopes or {"Kitchen": KITCHEN, "Bathroom": BATHROOM}
        return {name: ScopeScoreEntry.from_dict(entry) for name, entry in raw.items()}

    return _factory


# ---------------------------------------------------------------------------
# File fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def write_json(tmp_path: Path):
    """Factory fixture — writes a JSON document under ``tmp_path`` and returns its path."""

    def _factory(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _factory


@pytest.fixture
def write_settings(tmp_path: Path):
    """Factory fixture — writes a settings.toml whose output dir is under ``tmp_path``."""

    def _factory(extra: str = "", *, limit: int = 6) -> Path:
        path = tmp_path / "settings.toml"
        path.write_text(
            f"[matching]\nlimit = {limit}\n\n"
            f'[output]\ndefault_format = "markdown"\noutput_dir = "{(tmp_path / "output").as_posix()}"\n\n'
            + extra,
            encoding="utf-8",
        )
        return path

    return _factory


# ---------------------------------------------------------------------------
# Output safety guard
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def _guard_real_output_dir() -> Iterator[None]:
    """Make the real output/ directory read-only during tests.

    Restores original permissions after the session, even on failure.
    If the directory does not exist the guard is silently skipped —
    CI environments may not have it.
    """
    if not _PROJECT_OUTPUT.is_dir():
        yield
        return

    original_mode = _PROJECT_OUTPUT.stat().st_mode
    _PROJECT_OUTPUT.chmod(original_mode & ~(stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH))
    try:
        yield
    finally:
        with contextlib.suppress(OSError):
            _PROJECT_OUTPUT.chmod(original_mode)

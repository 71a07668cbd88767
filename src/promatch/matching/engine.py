"""Match engine: project + pre-filtered pool → ranked, explained shortlist.

The engine owns the control flow and delegates the domain logic:

1. Resolve the project's scopes against the work type's score table,
   reporting each missing scope to monitoring once and skipping it
2. Score every candidate (:class:`CandidateScorer`)
3. Reduce pool maxima and scale (:class:`PoolNormalizer`)
4. Sort and truncate (:class:`RankingSelector`)

Any failure along the way surfaces as a single
``ActionableError.match`` chained to its cause.  A ranking built on a
partially scored pool would scale against the wrong maxima, so nothing
partial is ever returned.

:func:`build_candidate_query` derives the criteria the external
candidate store needs for its hard-filter query from the same scope
data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from promatch.errors import ActionableError
from promatch.matching.normalizer import PoolNormalizer
from promatch.matching.ranker import DEFAULT_LIMIT, RankingSelector
from promatch.matching.scorer import CandidateScorer
from promatch.matching.tables import BUDGET_RANGES, GENERAL_CONTRACTOR, PERSONALITY_TABLE
from promatch.monitoring import LoggingReporter, notify_missing_scope

if TYPE_CHECKING:
    from collections.abc import Sequence

    from promatch.matching.ranker import MatchedPro
    from promatch.matching.tables import PersonalityCompatibilityTable
    from promatch.models import Candidate, ProjectRequirement, ScopeScoreEntry, ScopeScoreTable
    from promatch.monitoring import MissingScopeReporter

logger = logging.getLogger(__name__)


def resolve_scopes(
    project: ProjectRequirement,
    table: ScopeScoreTable,
    reporter: MissingScopeReporter,
) -> list[tuple[str, ScopeScoreEntry]]:
    """Pair each project scope with its table entry, in project order.

    Scopes without an entry are reported once and left out.
    """
    resolved: list[tuple[str, ScopeScoreEntry]] = []
    for scope in project.scopes:
        entry = table.get(scope)
        if entry is None:
            notify_missing_scope(reporter, scope, project.work_type or None)
            continue
        resolved.append((scope, entry))
    return resolved


class MatchEngine:
    """Ranks a pre-filtered candidate pool against one project.

    Parameters
    ----------
    reporter:
        Monitoring sink for missing scope data.  Defaults to logging.
    table:
        Personality compatibility table.  Defaults to the built-in one.
    normalizer:
        Pool scaler.  Defaults to the fixed component weights.
    """

    def __init__(
        self,
        *,
        reporter: MissingScopeReporter | None = None,
        table: PersonalityCompatibilityTable = PERSONALITY_TABLE,
        normalizer: PoolNormalizer | None = None,
    ) -> None:
        self._reporter = reporter or LoggingReporter()
        self._table = table
        self._normalizer = normalizer or PoolNormalizer()

    def match(
        self,
        project: ProjectRequirement,
        candidates: Sequence[Candidate],
        scope_table: ScopeScoreTable,
        *,
        limit: int = DEFAULT_LIMIT,
    ) -> list[MatchedPro]:
        """Score, scale, and rank *candidates*; return at most *limit*.

        Raises ``ActionableError`` (MATCH) on any failure.
        """
        try:
            return self._match(project, candidates, scope_table, limit)
        except Exception as exc:
            cause = exc.error if isinstance(exc, ActionableError) else str(exc)
            logger.error("Match for project '%s' failed: %s", project.id, cause)
            raise ActionableError.match(project.id, cause) from exc

    def _match(
        self,
        project: ProjectRequirement,
        candidates: Sequence[Candidate],
        scope_table: ScopeScoreTable,
        limit: int,
    ) -> list[MatchedPro]:
        selector = RankingSelector(limit)
        scope_entries = resolve_scopes(project, scope_table, self._reporter)
        scorer = CandidateScorer(project, scope_entries, table=self._table)

        # Phase 1: raw scores for the whole pool
        raw_pool = [scorer.score(candidate) for candidate in candidates]

        # Phase 2: maxima reduction, then scaling
        scaled, maxima = self._normalizer.normalize(raw_pool)

        # Phase 3: rank and truncate
        ranked = selector.select(scaled)

        logger.info(
            "Matched project '%s': %d candidates scored, %d returned "
            "(max type=%d specialty=%d qualities=%d personality=%d)",
            project.id,
            len(raw_pool),
            len(ranked),
            maxima.type_score,
            maxima.specialty_score,
            maxima.qualities_score,
            maxima.personality_score,
        )
        return ranked


def match_pros(
    project: ProjectRequirement,
    candidates: Sequence[Candidate],
    scope_table: ScopeScoreTable,
    *,
    limit: int = DEFAULT_LIMIT,
    reporter: MissingScopeReporter | None = None,
) -> list[MatchedPro]:
    """Convenience wrapper around :meth:`MatchEngine.match`."""
    return MatchEngine(reporter=reporter).match(project, candidates, scope_table, limit=limit)


# ---------------------------------------------------------------------------
# Candidate query criteria
# ---------------------------------------------------------------------------


@dataclass
class CandidateQuery:
    """Hard-filter criteria for the external candidate store.

    A candidate qualifies when it offers any of ``provider_types`` and
    any of ``specialties``, its minimum budget fits under
    ``budget_ceiling`` (no ceiling when ``None``) and its id is not in
    ``omit_candidates``.  Geography, visibility and contract exclusion
    are resolved by the store itself.
    """

    provider_types: list[str] = field(default_factory=list)
    specialties: list[str] = field(default_factory=list)
    budget_ceiling: int | None = None
    omit_candidates: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider_types": self.provider_types,
            "specialties": self.specialties,
            "budget_ceiling": self.budget_ceiling,
            "omit_candidates": self.omit_candidates,
        }


def build_candidate_query(
    project: ProjectRequirement,
    scope_table: ScopeScoreTable,
    *,
    reporter: MissingScopeReporter | None = None,
) -> CandidateQuery:
    """Collect provider types and specialties marked by the project's scopes.

    A homeowner who knows exactly what they want only gets general
    contractors, whatever the scopes list.
    """
    provider_types: dict[str, None] = {}
    specialties: dict[str, None] = {}
    for _scope, entry in resolve_scopes(project, scope_table, reporter or LoggingReporter()):
        specialties.update(dict.fromkeys(entry.specialties))
        if not project.exact_mindset:
            provider_types.update(dict.fromkeys(entry.provider_types))

    if project.exact_mindset:
        provider_types[GENERAL_CONTRACTOR] = None

    ceiling = BUDGET_RANGES.get(project.budget) if project.budget else None

    return CandidateQuery(
        provider_types=list(provider_types),
        specialties=list(specialties),
        budget_ceiling=ceiling,
        omit_candidates=list(project.omit_candidates),
    )

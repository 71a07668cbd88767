"""Raw per-candidate scoring.

The CandidateScorer turns one pro profile into four unbounded component
scores plus an explain trace recording every mark that contributed:

1. **Type fit** — for each scope, the best-fitting provider type the pro
   offers.  A mark's category picks the row of ``TYPE_SCORES``
   (``A`` always uses the top row, ``C``/``T``/``D`` use the row the
   homeowner ranked that tradeoff at) and its digit picks the column.
   Per-scope maxima are summed across scopes.

2. **Specialty fit** — same shape with the single-row
   ``SPECIALTY_SCORES``.

3. **Qualities** — ``QUALITIES_UNIT`` per quality the homeowner wants
   and the pro has.

4. **Personality** — ``PERSONALITY_UNIT`` times the number of places
   from the bottom of the homeowner's compatibility list the pro's code
   sits.  A pro whose code is not on the list (an empty or partial
   profile) keeps ``compatible_index = -1`` and scores 0.

Scoring is a pure function of its inputs; pool-relative scaling happens
later in :mod:`promatch.matching.normalizer`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from promatch.errors import ActionableError
from promatch.matching.tables import (
    GENERAL_CONTRACTOR,
    PERSONALITY_TABLE,
    PERSONALITY_UNIT,
    QUALITIES_UNIT,
    SPECIALTY_SCORES,
    TYPE_SCORES,
    PersonalityCompatibilityTable,
)
from promatch.models import FIT_LEVELS, Mark, format_personality

if TYPE_CHECKING:
    from promatch.models import (
        Candidate,
        PersonalityCode,
        PriorityRanking,
        ProjectRequirement,
        ScopeScoreEntry,
    )

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Explain trace
# ---------------------------------------------------------------------------


@dataclass
class TypeMatch:
    scope: str
    provider_type: str
    mark: str
    score: int


@dataclass
class SpecialtyMatch:
    scope: str
    specialty: str
    mark: int
    score: int


@dataclass
class TypeExplain:
    score: float = 0.0
    score_abs: int = 0
    matched: list[TypeMatch] = field(default_factory=list)


@dataclass
class SpecialtyExplain:
    score: float = 0.0
    score_abs: int = 0
    matched: list[SpecialtyMatch] = field(default_factory=list)


@dataclass
class QualitiesExplain:
    score: float = 0.0
    score_abs: int = 0
    intersection: list[str] = field(default_factory=list)


@dataclass
class PersonalityExplain:
    score: float = 0.0
    score_abs: int = 0
    compatible_index: int = -1


@dataclass
class ScoreExplain:
    """Human-inspectable record of how a candidate's score was built.

    ``score_abs`` fields are filled by the scorer, ``score`` fields by the
    normalizer, so the trace always describes the numbers actually used.
    """

    provider_type: TypeExplain = field(default_factory=TypeExplain)
    specialty: SpecialtyExplain = field(default_factory=SpecialtyExplain)
    qualities: QualitiesExplain = field(default_factory=QualitiesExplain)
    personality: PersonalityExplain = field(default_factory=PersonalityExplain)

    def to_dict(self) -> dict[str, Any]:
        return {
            "proType": {
                "score": self.provider_type.score,
                "scoreAbs": self.provider_type.score_abs,
                "matched": [
                    {"scope": m.scope, "proType": m.provider_type, "score": m.score, "mark": m.mark}
                    for m in self.provider_type.matched
                ],
            },
            "specialty": {
                "score": self.specialty.score,
                "scoreAbs": self.specialty.score_abs,
                "matched": [
                    {"scope": m.scope, "specialty": m.specialty, "score": m.score, "mark": m.mark}
                    for m in self.specialty.matched
                ],
            },
            "qualities": {
                "score": self.qualities.score,
                "scoreAbs": self.qualities.score_abs,
                "intersection": list(self.qualities.intersection),
            },
            "personality": {
                "score": self.personality.score,
                "scoreAbs": self.personality.score_abs,
                "compatibleIndex": self.personality.compatible_index,
            },
        }


@dataclass
class RawScores:
    """Unbounded component scores for one candidate."""

    candidate: Candidate
    type_score: int
    specialty_score: int
    qualities_score: int
    personality_score: int
    explain: ScoreExplain

    @property
    def is_valid(self) -> bool:
        """Every component is non-negative."""
        return all(
            s >= 0
            for s in (
                self.type_score,
                self.specialty_score,
                self.qualities_score,
                self.personality_score,
            )
        )


# ---------------------------------------------------------------------------
# Mark scoring helpers
# ---------------------------------------------------------------------------


def type_mark_score(mark: Mark, priority: PriorityRanking) -> int:
    """Score a decoded provider-type mark under the homeowner's priorities."""
    category = mark.category.priority
    # Absolute marks always score from the top tier
    row = 0 if category is None else priority.tier_for(category)
    return TYPE_SCORES[row][mark.fit_level - 1]


def specialty_mark_score(fit_level: int) -> int:
    if fit_level not in FIT_LEVELS:
        raise ActionableError.validation(
            "specialty", f"fit level {fit_level!r} outside 1..3"
        )
    return SPECIALTY_SCORES[fit_level - 1]


# ---------------------------------------------------------------------------
# Scorer
# ---------------------------------------------------------------------------


class CandidateScorer:
    """Computes raw component scores for candidates of one project.

    Parameters
    ----------
    project:
        The demand side.  Its personality code is resolved against the
        compatibility table once, at construction.
    scope_entries:
        Score table entries for the project's scopes, in project order.
        Scopes without an entry are expected to be dropped (and reported)
        by the caller before this point.
    table:
        Compatibility table; defaults to the built-in one.
    """

    def __init__(
        self,
        project: ProjectRequirement,
        scope_entries: list[tuple[str, ScopeScoreEntry]],
        *,
        table: PersonalityCompatibilityTable = PERSONALITY_TABLE,
    ) -> None:
        self._project = project
        self._scope_entries = scope_entries
        self._compatible = table.lookup(project.personality)

    @property
    def compatible_personalities(self) -> tuple[PersonalityCode, ...]:
        return self._compatible

    def score(self, candidate: Candidate) -> RawScores:
        """Score one candidate; no side effects beyond the returned record."""
        explain = ScoreExplain()
        type_score = 0
        specialty_score = 0

        provider_types = self._considered_provider_types(candidate)

        for scope, entry in self._scope_entries:
            best_type = 0
            for provider_type in sorted(provider_types):
                raw_mark = entry.provider_types.get(provider_type)
                if not raw_mark:
                    continue
                current = type_mark_score(Mark.parse(raw_mark), self._project.priority)
                best_type = max(best_type, current)
                explain.provider_type.matched.append(
                    TypeMatch(scope=scope, provider_type=provider_type, mark=raw_mark, score=current)
                )
            type_score += best_type

            best_specialty = 0
            for specialty in sorted(candidate.specialties):
                fit_level = entry.specialties.get(specialty)
                if not fit_level:
                    continue
                current = specialty_mark_score(fit_level)
                best_specialty = max(best_specialty, current)
                explain.specialty.matched.append(
                    SpecialtyMatch(scope=scope, specialty=specialty, mark=fit_level, score=current)
                )
            specialty_score += best_specialty

        explain.provider_type.score_abs = type_score
        explain.specialty.score_abs = specialty_score

        intersection = sorted(candidate.qualities & self._project.wanted_qualities)
        qualities_score = len(intersection) * QUALITIES_UNIT
        explain.qualities.intersection = intersection
        explain.qualities.score_abs = qualities_score

        index = PersonalityCompatibilityTable.compatible_index(self._compatible, candidate.personality)
        if index < 0:
            logger.warning(
                "Candidate %s personality '%s' is not on the compatibility list; scoring 0",
                candidate.id,
                format_personality(candidate.personality),
            )
            personality_score = 0
        else:
            personality_score = (len(self._compatible) - index) * PERSONALITY_UNIT
        explain.personality.compatible_index = index
        explain.personality.score_abs = personality_score

        return RawScores(
            candidate=candidate,
            type_score=type_score,
            specialty_score=specialty_score,
            qualities_score=qualities_score,
            personality_score=personality_score,
            explain=explain,
        )

    def _considered_provider_types(self, candidate: Candidate) -> frozenset[str]:
        """Provider types eligible for type scoring.

        A homeowner who knows exactly what they want is matched against
        the implicit general-contractor type only.
        """
        if self._project.exact_mindset:
            return candidate.provider_types & {GENERAL_CONTRACTOR}
        return candidate.provider_types

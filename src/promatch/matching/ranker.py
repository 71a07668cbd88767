"""Final ranking of a scaled candidate pool."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from promatch.matching.normalizer import ScaledScores
    from promatch.matching.scorer import ScoreExplain
    from promatch.models import Candidate

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 6


@dataclass
class MatchedPro:
    """A candidate with its final score and full breakdown."""

    candidate: Candidate
    score: int
    type_score: float
    specialty_score: float
    qualities_score: float
    personality_score: float
    explain: ScoreExplain

    @property
    def id(self) -> str:
        return self.candidate.id

    @classmethod
    def from_scaled(cls, scaled: ScaledScores) -> MatchedPro:
        return cls(
            candidate=scaled.raw.candidate,
            score=scaled.final_score,
            type_score=scaled.type_score,
            specialty_score=scaled.specialty_score,
            qualities_score=scaled.qualities_score,
            personality_score=scaled.personality_score,
            explain=scaled.raw.explain,
        )

    def score_explanation(self) -> str:
        """Human-readable score breakdown for export output."""
        return " | ".join([
            f"Type: {self.type_score:.2f}",
            f"Specialty: {self.specialty_score:.2f}",
            f"Qualities: {self.qualities_score:.2f}",
            f"Personality: {self.personality_score:.2f}",
        ])

    def to_dict(self, *, explain: bool = True) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.candidate.id,
            "score": self.score,
            "typeScore": self.type_score,
            "specialtyScore": self.specialty_score,
            "qualitiesScore": self.qualities_score,
            "personalityScore": self.personality_score,
        }
        if self.candidate.name is not None:
            result["name"] = self.candidate.name
        if explain:
            result["explain"] = self.explain.to_dict()
        return result


class RankingSelector:
    """Orders a scaled pool by final score and keeps the top *limit*."""

    def __init__(self, limit: int = DEFAULT_LIMIT) -> None:
        if limit < 0:
            msg = f"limit must be >= 0, got {limit}"
            raise ValueError(msg)
        self.limit = limit

    def select(self, scaled: list[ScaledScores]) -> list[MatchedPro]:
        """Sort descending by final score; equal scores keep pool order."""
        matched = [MatchedPro.from_scaled(s) for s in scaled]
        # list.sort is stable, so ties keep their original relative order
        matched.sort(key=lambda m: m.score, reverse=True)
        selected = matched[: self.limit]
        logger.debug("Selected %d of %d scored candidates", len(selected), len(matched))
        return selected

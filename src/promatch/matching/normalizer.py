"""Pool-relative scaling of raw component scores.

Raw scores are unbounded and only meaningful relative to the rest of the
pool, so scaling runs in two phases:

1. **Reduction** — fold every candidate's raw scores into
   :class:`PoolMaxima`.  Partial maxima from independently scored slices
   of the pool combine with :meth:`PoolMaxima.merge`.

2. **Scaling** — map :func:`scale_score` over each component against the
   finished maxima.  Nothing is scaled until the reduction is complete,
   because the first candidate's scaled score depends on the last
   candidate's raw score.

Each component's contribution lies in ``[MIN_SCORE * w, 100 * w]`` for
weight fraction ``w``; a component nobody scores on contributes its full
weight to everyone.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from promatch.matching.tables import MIN_SCORE, WEIGHTS, ComponentWeights

if TYPE_CHECKING:
    from promatch.matching.scorer import RawScores


def scale_score(current: float, maximum: float, weight: float) -> float:
    """Rescale *current* against the pool *maximum* into a weighted share.

    Example with the type weight (50):

        ratio = 50 / 100 = 0.5
        spread = (100 - 75) * 0.5 = 12.5
        fraction = (1 + 300) / (1 + 900) = 0.334
        result = 0.334 * 12.5 + 75 * 0.5 = 41.68

    The ``1 +`` offsets keep ``fraction`` defined when the maximum is 0.
    """
    ratio = weight / 100
    spread = (100 - MIN_SCORE) * ratio
    fraction = (1 + current) / (1 + maximum)
    return fraction * spread + MIN_SCORE * ratio


@dataclass(frozen=True)
class PoolMaxima:
    """Largest raw value of each component seen across the pool."""

    type_score: int = 0
    specialty_score: int = 0
    qualities_score: int = 0
    personality_score: int = 0

    def merge(self, other: PoolMaxima) -> PoolMaxima:
        return PoolMaxima(
            type_score=max(self.type_score, other.type_score),
            specialty_score=max(self.specialty_score, other.specialty_score),
            qualities_score=max(self.qualities_score, other.qualities_score),
            personality_score=max(self.personality_score, other.personality_score),
        )

    @classmethod
    def of(cls, raw: RawScores) -> PoolMaxima:
        return cls(
            type_score=raw.type_score,
            specialty_score=raw.specialty_score,
            qualities_score=raw.qualities_score,
            personality_score=raw.personality_score,
        )

    @classmethod
    def reduce(cls, pool: Iterable[RawScores]) -> PoolMaxima:
        """Fold a pool of raw scores; an empty pool yields all zeros."""
        maxima = cls()
        for raw in pool:
            maxima = maxima.merge(cls.of(raw))
        return maxima


@dataclass
class ScaledScores:
    """Weighted, pool-relative contributions for one candidate."""

    raw: RawScores
    type_score: float
    specialty_score: float
    qualities_score: float
    personality_score: float

    @property
    def total(self) -> float:
        return self.type_score + self.specialty_score + self.qualities_score + self.personality_score

    @property
    def final_score(self) -> int:
        """Rounded total; halves round up."""
        return int(self.total + 0.5)


class PoolNormalizer:
    """Scales a fully scored pool against its own maxima."""

    def __init__(self, weights: ComponentWeights = WEIGHTS) -> None:
        self.weights = weights

    def normalize(self, pool: list[RawScores]) -> tuple[list[ScaledScores], PoolMaxima]:
        """Reduce maxima over *pool*, then scale every member.

        The explain trace on each raw record receives the scaled values.
        Input order is preserved.
        """
        maxima = PoolMaxima.reduce(pool)
        return [self.scale(raw, maxima) for raw in pool], maxima

    def scale(self, raw: RawScores, maxima: PoolMaxima) -> ScaledScores:
        scaled = ScaledScores(
            raw=raw,
            type_score=scale_score(raw.type_score, maxima.type_score, self.weights.type),
            specialty_score=scale_score(
                raw.specialty_score, maxima.specialty_score, self.weights.specialty
            ),
            qualities_score=scale_score(
                raw.qualities_score, maxima.qualities_score, self.weights.qualities
            ),
            personality_score=scale_score(
                raw.personality_score, maxima.personality_score, self.weights.personality
            ),
        )
        explain = raw.explain
        explain.provider_type.score = scaled.type_score
        explain.specialty.score = scaled.specialty_score
        explain.qualities.score = scaled.qualities_score
        explain.personality.score = scaled.personality_score
        return scaled

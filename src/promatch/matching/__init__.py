"""Matching core — scoring, pool normalization, and ranking."""

from promatch.matching.engine import (
    CandidateQuery,
    MatchEngine,
    build_candidate_query,
    match_pros,
    resolve_scopes,
)
from promatch.matching.normalizer import PoolMaxima, PoolNormalizer, ScaledScores, scale_score
from promatch.matching.ranker import DEFAULT_LIMIT, MatchedPro, RankingSelector
from promatch.matching.scorer import CandidateScorer, RawScores, ScoreExplain
from promatch.matching.tables import PERSONALITY_TABLE, PersonalityCompatibilityTable

__all__ = [
    "DEFAULT_LIMIT",
    "PERSONALITY_TABLE",
    "CandidateQuery",
    "CandidateScorer",
    "MatchEngine",
    "MatchedPro",
    "PersonalityCompatibilityTable",
    "PoolMaxima",
    "PoolNormalizer",
    "RankingSelector",
    "RawScores",
    "ScaledScores",
    "ScoreExplain",
    "build_candidate_query",
    "match_pros",
    "resolve_scopes",
    "scale_score",
]

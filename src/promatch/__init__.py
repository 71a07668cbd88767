"""pro-match — ranks service pros against a project's requirements."""

from promatch.errors import ActionableError, ErrorType
from promatch.matching import MatchedPro, MatchEngine, build_candidate_query, match_pros
from promatch.models import Candidate, PriorityRanking, ProjectRequirement, ScopeScoreEntry

__version__ = "0.1.0"

__all__ = [
    "ActionableError",
    "Candidate",
    "ErrorType",
    "MatchEngine",
    "MatchedPro",
    "PriorityRanking",
    "ProjectRequirement",
    "ScopeScoreEntry",
    "build_candidate_query",
    "match_pros",
]

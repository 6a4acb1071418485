"""Project/candidate matching.

This module scores professional profiles against a project's
requirements, keeps one current score per (project, profile) pair and
returns the best candidates.

Public API:
    - MatchingService: Request handler (fetch, score, store, rank)
    - MatchingRepository: SQLite store for projects, profiles and scores
    - calculate_score: Pure scoring function
    - generate_reason: Recommendation text for a breakdown
    - MatchingConfig: Configuration settings
"""

from src.matching.config import (
    MatchingConfig,
    get_matching_config,
    reset_matching_config,
)
from src.matching.engine import calculate_score
from src.matching.errors import (
    MatchingError,
    NoCandidatesError,
    PersistenceError,
    ProjectNotFoundError,
)
from src.matching.models import (
    CandidateProfile,
    MatchOutcome,
    MatchingScore,
    ProfileDetails,
    Project,
    ProjectRequirements,
    RankedCandidate,
    ScoreBreakdown,
)
from src.matching.reason import generate_reason
from src.matching.repository import MatchingRepository
from src.matching.service import MatchingService

__all__ = [
    "MatchingService",
    "MatchingRepository",
    "calculate_score",
    "generate_reason",
    "Project",
    "ProjectRequirements",
    "CandidateProfile",
    "ProfileDetails",
    "ScoreBreakdown",
    "MatchingScore",
    "RankedCandidate",
    "MatchOutcome",
    "MatchingError",
    "ProjectNotFoundError",
    "NoCandidatesError",
    "PersistenceError",
    "MatchingConfig",
    "get_matching_config",
    "reset_matching_config",
]

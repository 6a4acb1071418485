"""Deterministic compatibility scoring.

Every function here is pure: the same requirements and profile always
produce the same breakdown, and nothing outside the arguments and the
static tables in :mod:`src.matching.matchers` is read.
"""

from __future__ import annotations

from src.matching.matchers import (
    AVAILABILITY_SCORE,
    DOMAIN_MATCH_CAP,
    EXPERIENCE_CAP,
    LEVEL_MATCH_CAP,
    RELATED_TOOL_BONUS,
    TOOL_MATCH_CAP,
    find_matching_tools,
    has_related_tool,
    ideal_years_for,
    level_ordinal,
    round_half_up,
)
from src.matching.models import (
    MatchDetails,
    ProfileDetails,
    ProjectRequirements,
    ScoreBreakdown,
    SkillLevel,
)

# Flat tool score when a project names no tools.
NO_TOOLS_REQUIRED_SCORE = 20


def score_level(required: SkillLevel | None, candidate: SkillLevel | None) -> int:
    """Score the candidate's primary tier against the required tier (max 30)."""
    required_rank = level_ordinal(required)
    candidate_rank = level_ordinal(candidate)
    if required_rank is None or candidate_rank is None:
        return 0

    if candidate_rank == required_rank:
        return LEVEL_MATCH_CAP
    if candidate_rank > required_rank:
        return 25
    if candidate_rank == required_rank - 1:
        return 15
    return 5


def score_tools(required: list[str], available: list[str]) -> float:
    """Score tool coverage with a related-tool bonus (max 25).

    The base is the rounded share of required tools the candidate has.
    Each missing tool with a related tool present adds 2.5, and the sum
    is clamped to the cap.
    """
    if not required:
        return NO_TOOLS_REQUIRED_SCORE

    matched, missing = find_matching_tools(required, available)
    base = round_half_up(TOOL_MATCH_CAP * len(matched) / len(required))

    bonus = 0.0
    for tool in missing:
        if has_related_tool(tool, available):
            bonus += RELATED_TOOL_BONUS

    return min(TOOL_MATCH_CAP, base + bonus)


def score_domain(business_domain: str | None, domains: list[str]) -> int:
    """Score business domain experience (max 20)."""
    if business_domain and business_domain in domains:
        return DOMAIN_MATCH_CAP
    if domains:
        return 10
    return 5


def score_experience(years: float, difficulty: str | None) -> int:
    """Score years of experience against the difficulty's ideal (max 15)."""
    ideal = ideal_years_for(difficulty)
    if years >= ideal:
        return EXPERIENCE_CAP
    if years >= ideal * 0.7:
        return 10
    return 5


def score_availability(profile_details: ProfileDetails) -> int:
    """Score availability (max 10).

    Every professional is currently treated as available.
    """
    return AVAILABILITY_SCORE


def calculate_score(
    requirements: ProjectRequirements, profile_details: ProfileDetails
) -> ScoreBreakdown:
    """Compute the full score breakdown of a profile against requirements."""
    level = score_level(requirements.required_level, profile_details.primary_level)
    tool = score_tools(requirements.required_tools, profile_details.tools)
    domain = score_domain(
        requirements.business_domain, profile_details.experience.domains
    )
    experience = score_experience(
        profile_details.experience.years, requirements.project_difficulty
    )
    availability = score_availability(profile_details)

    return ScoreBreakdown(
        level_match_score=level,
        tool_match_score=tool,
        domain_match_score=domain,
        experience_score=experience,
        availability_score=availability,
        total_score=level + tool + domain + experience + availability,
    )


def build_match_details(
    requirements: ProjectRequirements, profile_details: ProfileDetails
) -> MatchDetails:
    """Snapshot the level and tool inputs behind a score."""
    matched, _missing = find_matching_tools(
        requirements.required_tools, profile_details.tools
    )
    required_level = requirements.required_level
    profile_level = profile_details.primary_level
    return MatchDetails(
        required_level=required_level.value if required_level else None,
        profile_level=profile_level.value if profile_level else None,
        matched_tools=matched,
    )

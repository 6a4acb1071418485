"""Recommendation reason text for a score breakdown."""

from __future__ import annotations

from src.matching.matchers import find_matching_tools
from src.matching.models import ProfileDetails, ProjectRequirements, ScoreBreakdown

FALLBACK_REASON = "Candidate is viable for this project."


def generate_reason(
    breakdown: ScoreBreakdown,
    requirements: ProjectRequirements,
    profile_details: ProfileDetails,
) -> str:
    """Build a short justification from the strongest score components.

    Clauses appear in a fixed order (level, tools, domain, experience);
    each one is included only when its component clears a threshold.
    """
    reasons: list[str] = []

    if breakdown.level_match_score >= 25:
        reasons.append("Skill level matches the requirement")

    if breakdown.tool_match_score >= 20:
        matched, _missing = find_matching_tools(
            requirements.required_tools, profile_details.tools
        )
        if matched:
            reasons.append(f"Experienced with {', '.join(matched)}")

    if breakdown.domain_match_score >= 15:
        domain = requirements.business_domain or "a related field"
        reasons.append(f"Track record in {domain}")

    if breakdown.experience_score >= 10:
        years = profile_details.experience.years
        reasons.append(f"{years:g} years of AI experience")

    if not reasons:
        return FALLBACK_REASON
    return ". ".join(reasons) + "."

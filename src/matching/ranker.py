"""Ordering and truncation of scored candidates."""

from __future__ import annotations

from collections.abc import Iterable

from src.matching.models import RankedCandidate

DEFAULT_RESULT_LIMIT = 10


def rank_key(candidate: RankedCandidate) -> tuple[float, str]:
    """Sort key: highest total first, then profile id ascending."""
    return (-candidate.total_score, candidate.profile_id)


def rank_scores(
    candidates: Iterable[RankedCandidate], limit: int = DEFAULT_RESULT_LIMIT
) -> list[RankedCandidate]:
    """Return the top ``limit`` candidates by total score."""
    if limit <= 0:
        return []
    return sorted(candidates, key=rank_key)[:limit]

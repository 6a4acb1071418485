"""Recompute and store matching scores for a candidate population."""

from __future__ import annotations

import asyncio

from src.matching.config import MatchingConfig, get_matching_config
from src.matching.engine import build_match_details, calculate_score
from src.matching.errors import PersistenceError
from src.matching.models import (
    CandidateProfile,
    MatchingScore,
    Project,
    RankedCandidate,
    SyncResult,
)
from src.matching.reason import generate_reason
from src.matching.repository import MatchingRepository
from src.utils.logging import get_logger

logger = get_logger("matching.synchronizer")


class ScoreSynchronizer:
    """Score every candidate and replace its stored score.

    Writes for different candidates run concurrently (bounded by
    ``max_concurrency``). A candidate whose write fails is dropped from
    the result; any other error aborts the batch and cancels the writes
    still pending. Writes that already completed are kept.
    """

    def __init__(
        self,
        repository: MatchingRepository,
        config: MatchingConfig | None = None,
    ) -> None:
        self.repository = repository
        self.config = config or get_matching_config()

    def build_score(self, project: Project, candidate: CandidateProfile) -> MatchingScore:
        """Compute the score record for one candidate without storing it."""
        requirements = project.requirements
        details = candidate.profile_details

        breakdown = calculate_score(requirements, details)
        return MatchingScore(
            project_id=project.id,
            profile_id=candidate.id,
            breakdown=breakdown,
            match_percentage=breakdown.percentage,
            recommendation_reason=generate_reason(breakdown, requirements, details),
            match_details=build_match_details(requirements, details),
        )

    async def _sync_one(
        self,
        project: Project,
        candidate: CandidateProfile,
        semaphore: asyncio.Semaphore,
    ) -> RankedCandidate | None:
        score = self.build_score(project, candidate)

        async with semaphore:
            try:
                await self.repository.upsert_score(score)
            except PersistenceError as e:
                logger.warning("Dropping candidate %s: %s", candidate.id, e)
                return None

        logger.debug(
            "Stored score %.1f for candidate %s on project %s",
            score.breakdown.total_score,
            candidate.id,
            project.id,
        )
        return RankedCandidate(
            profile_id=candidate.id,
            profile_name=candidate.full_name,
            breakdown=score.breakdown,
        )

    async def synchronize(
        self, project: Project, candidates: list[CandidateProfile]
    ) -> SyncResult:
        """Score and store every candidate.

        Returns:
            The stored candidates in input order, plus the ids whose
            write failed.
        """
        semaphore = asyncio.Semaphore(self.config.max_concurrency)
        tasks = [
            asyncio.create_task(self._sync_one(project, candidate, semaphore))
            for candidate in candidates
        ]

        try:
            outcomes = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        result = SyncResult()
        for candidate, outcome in zip(candidates, outcomes, strict=True):
            if outcome is None:
                result.failed_profile_ids.append(candidate.id)
            else:
                result.written.append(outcome)

        if result.failed_profile_ids:
            logger.warning(
                "Project %s: %d of %d score write(s) failed",
                project.id,
                len(result.failed_profile_ids),
                len(candidates),
            )
        return result

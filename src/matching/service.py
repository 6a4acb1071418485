"""Matching request handling."""

from __future__ import annotations

from typing import Any

from src.matching.config import MatchingConfig, get_matching_config
from src.matching.errors import NoCandidatesError, ProjectNotFoundError
from src.matching.fetcher import CandidateFetcher
from src.matching.models import MatchOutcome, RankedCandidate
from src.matching.ranker import rank_scores
from src.matching.repository import MatchingRepository
from src.matching.synchronizer import ScoreSynchronizer
from src.utils.logging import get_logger

logger = get_logger("matching.service")

GENERIC_FAILURE_MESSAGE = "Failed to calculate matching scores"


class MatchingService:
    """Compute, store and rank matching scores for a project.

    One call to :meth:`calculate` handles one request: it resolves the
    candidate population, rewrites each candidate's stored score and
    returns the best candidates. There is no transaction spanning the
    batch, so scores written before a failure stay in place.
    """

    def __init__(
        self,
        repository: MatchingRepository,
        config: MatchingConfig | None = None,
    ) -> None:
        self.repository = repository
        self.config = config or get_matching_config()
        self.fetcher = CandidateFetcher(repository)
        self.synchronizer = ScoreSynchronizer(repository, config=self.config)

    async def calculate(
        self, project_id: str, profile_id: str | None = None
    ) -> MatchOutcome:
        """Recompute scores for a project and return the ranked top list."""
        try:
            project, candidates = await self.fetcher.fetch(project_id, profile_id)
            synced = await self.synchronizer.synchronize(project, candidates)
        except ProjectNotFoundError as e:
            logger.warning("%s", e)
            return MatchOutcome.failure(str(e), kind="project_not_found")
        except NoCandidatesError as e:
            logger.warning("%s", e)
            return MatchOutcome.failure(str(e), kind="no_candidates")
        except Exception:
            logger.exception("Matching failed for project %s", project_id)
            return MatchOutcome.failure(GENERIC_FAILURE_MESSAGE, kind="unexpected")

        ranked = rank_scores(synced.written, limit=self.config.result_limit)
        logger.info(
            "Project %s: scored %d candidate(s), returning top %d",
            project_id,
            len(synced.written),
            len(ranked),
        )
        return MatchOutcome(
            success=True,
            matching_scores=ranked,
            failed_profile_ids=synced.failed_profile_ids,
        )

    async def handle_request(self, payload: Any) -> dict:
        """Handle a wire request ``{"project_id": ..., "profile_id"?: ...}``.

        Returns:
            ``{"success": True, "matchingScores": [...]}`` or ``{"error": ...}``.
        """
        if not isinstance(payload, dict):
            return MatchOutcome.failure(
                "Request body must be an object", kind="invalid_request"
            ).to_dict()

        project_id = payload.get("project_id")
        profile_id = payload.get("profile_id")

        if not isinstance(project_id, str) or not project_id.strip():
            return MatchOutcome.failure(
                "project_id is required", kind="invalid_request"
            ).to_dict()
        if profile_id is not None and not isinstance(profile_id, str):
            return MatchOutcome.failure(
                "profile_id must be a string", kind="invalid_request"
            ).to_dict()

        outcome = await self.calculate(project_id.strip(), profile_id or None)
        return outcome.to_dict()

    async def list_scores(
        self, project_id: str, limit: int | None = None
    ) -> list[RankedCandidate]:
        """Return the stored scores of a project, best first."""
        return await self.repository.list_ranked(project_id, limit=limit)

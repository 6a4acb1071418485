"""Candidate population lookup."""

from __future__ import annotations

from src.matching.errors import NoCandidatesError, ProjectNotFoundError
from src.matching.models import CandidateProfile, Project
from src.matching.repository import MatchingRepository
from src.utils.logging import get_logger

logger = get_logger("matching.fetcher")


class CandidateFetcher:
    """Resolve a project and the professionals to score against it."""

    def __init__(self, repository: MatchingRepository) -> None:
        self.repository = repository

    async def fetch(
        self, project_id: str, profile_id: str | None = None
    ) -> tuple[Project, list[CandidateProfile]]:
        """Return the project and its candidate population.

        The population is always limited to professional profiles. When
        ``profile_id`` is given it is narrowed to that single profile.

        Raises:
            ProjectNotFoundError: If the project does not exist.
            NoCandidatesError: If no professional profile qualifies.
        """
        project = await self.repository.get_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)

        candidates = await self.repository.list_professionals(profile_id)
        if not candidates:
            raise NoCandidatesError(project_id, profile_id)

        logger.debug(
            "Fetched %d candidate(s) for project %s", len(candidates), project_id
        )
        return project, candidates

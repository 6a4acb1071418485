"""Error types raised by the matching engine."""

from __future__ import annotations


class MatchingError(Exception):
    """Base error for matching failures."""


class ProjectNotFoundError(MatchingError):
    """The requested project id does not exist."""

    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project not found: {project_id}")
        self.project_id = project_id


class NoCandidatesError(MatchingError):
    """No professional profiles are eligible for scoring."""

    def __init__(self, project_id: str, profile_id: str | None = None) -> None:
        if profile_id:
            message = f"No professional profile found with id: {profile_id}"
        else:
            message = f"No professional profiles found for project: {project_id}"
        super().__init__(message)
        self.project_id = project_id
        self.profile_id = profile_id


class PersistenceError(MatchingError):
    """Writing a single matching score failed."""

    def __init__(self, project_id: str, profile_id: str, reason: str = "") -> None:
        message = f"Failed to store score for profile {profile_id} on project {project_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.project_id = project_id
        self.profile_id = profile_id

"""Pytest configuration and shared fixtures."""

import pytest

from src.matching.config import MatchingConfig, reset_matching_config
from src.matching.models import CandidateProfile, Project
from src.utils.logging import reset_logging


def build_professional(
    profile_id: str,
    name: str | None = None,
    level: str | None = "developer",
    tools: list[str] | None = None,
    years: float = 2,
    domains: list[str] | None = None,
) -> CandidateProfile:
    """Build a professional profile with sensible defaults."""
    return CandidateProfile(
        id=profile_id,
        kind="professional",
        full_name=name or f"Pro {profile_id}",
        profile_details={
            "skill_levels": [level] if level else [],
            "tools": tools if tools is not None else ["ChatGPT"],
            "experience": {"years": years, "domains": domains or []},
        },
    )


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Keep logging and config state from leaking between tests."""
    reset_logging()
    reset_matching_config()
    yield
    reset_logging()
    reset_matching_config()


@pytest.fixture
def make_professional():
    """Factory for professional profiles."""
    return build_professional


@pytest.fixture
def matching_config() -> MatchingConfig:
    """Matching config that ignores any local .env file."""
    return MatchingConfig(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def sample_project() -> Project:
    """Project requiring a developer with ChatGPT in sales support."""
    return Project(
        id="proj-1",
        title="Sales assistant bot",
        client_id="client-1",
        requirements={
            "required_level": "developer",
            "required_tools": ["ChatGPT"],
            "business_domain": "営業支援",
            "project_difficulty": "intermediate",
        },
    )


@pytest.fixture
async def repo(tmp_path):
    """An initialized repository backed by a temporary database."""
    from src.matching.repository import MatchingRepository

    repository = MatchingRepository(tmp_path / "matching.db")
    await repository.initialize()
    yield repository
    await repository.close()


@pytest.fixture
async def seeded_repo(repo, sample_project):
    """Repository holding the sample project, three professionals and a client.

    Expected totals against the sample project:
    pro-a 100, pro-c 45 (expert, no tools), pro-b 37.5 (user, related tool only).
    """
    await repo.upsert_project(sample_project)
    await repo.upsert_profile(
        build_professional("pro-a", "Aiko", tools=["ChatGPT"], domains=["営業支援"])
    )
    await repo.upsert_profile(
        build_professional("pro-b", "Ben", level="user", tools=["Claude"], years=1)
    )
    await repo.upsert_profile(
        build_professional("pro-c", "Chie", level="expert", tools=[], years=0.5)
    )
    await repo.upsert_profile(
        CandidateProfile(id="client-1", kind="client", full_name="Client Co")
    )
    return repo

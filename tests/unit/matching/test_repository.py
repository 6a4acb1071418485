"""Tests for the MatchingRepository database layer."""

import sqlite3

import pytest

from src.matching.models import (
    CandidateProfile,
    MatchDetails,
    MatchingScore,
    Project,
    ScoreBreakdown,
)


def _score(project_id: str, profile_id: str, level: float = 30) -> MatchingScore:
    breakdown = ScoreBreakdown(level, 25, 20, 15, 10, level + 70)
    return MatchingScore(
        project_id=project_id,
        profile_id=profile_id,
        breakdown=breakdown,
        match_percentage=breakdown.percentage,
        recommendation_reason="Skill level matches the requirement.",
        match_details=MatchDetails("developer", "developer", ["ChatGPT"]),
    )


class TestDatabaseInitialization:
    """Test database initialization."""

    @pytest.mark.asyncio
    async def test_creates_database_file_if_not_exists(self, tmp_path):
        """Should create the database file and parent directory."""
        from src.matching.repository import MatchingRepository

        db_path = tmp_path / "nested" / "matching.db"
        assert not db_path.exists()

        repo = MatchingRepository(db_path)
        await repo.initialize()

        assert db_path.exists()
        await repo.close()

    @pytest.mark.asyncio
    async def test_creates_matching_scores_table(self, repo):
        """Should create matching_scores with all score columns."""
        async with repo._get_connection() as conn:
            cursor = await conn.execute("PRAGMA table_info(matching_scores)")
            columns = await cursor.fetchall()
            column_names = [col[1] for col in columns]

        for col in [
            "project_id",
            "profile_id",
            "level_match_score",
            "tool_match_score",
            "domain_match_score",
            "experience_score",
            "availability_score",
            "total_score",
            "match_percentage",
            "recommendation_reason",
            "match_details",
            "calculated_at",
        ]:
            assert col in column_names

    @pytest.mark.asyncio
    async def test_handles_existing_database_gracefully(self, tmp_path):
        """Initializing twice should not raise."""
        from src.matching.repository import MatchingRepository

        db_path = tmp_path / "matching.db"
        repo1 = MatchingRepository(db_path)
        await repo1.initialize()
        await repo1.close()

        repo2 = MatchingRepository(db_path)
        await repo2.initialize()
        await repo2.close()


class TestProjectsAndProfiles:
    """Test project and profile storage."""

    @pytest.mark.asyncio
    async def test_get_project_round_trips_requirements(self, repo, sample_project):
        """Stored projects come back with their requirements."""
        await repo.upsert_project(sample_project)

        project = await repo.get_project("proj-1")

        assert project == sample_project

    @pytest.mark.asyncio
    async def test_get_project_returns_none_if_not_found(self, repo):
        """Unknown project ids resolve to None."""
        assert await repo.get_project("missing") is None

    @pytest.mark.asyncio
    async def test_upsert_project_replaces(self, repo, sample_project):
        """Upserting the same id overwrites the stored project."""
        await repo.upsert_project(sample_project)
        await repo.upsert_project(Project(id="proj-1", title="Renamed"))

        project = await repo.get_project("proj-1")

        assert project.title == "Renamed"
        assert project.requirements.required_tools == []

    @pytest.mark.asyncio
    async def test_list_professionals_excludes_clients(self, seeded_repo):
        """Only professional profiles are listed, ordered by id."""
        profiles = await seeded_repo.list_professionals()

        assert [p.id for p in profiles] == ["pro-a", "pro-b", "pro-c"]

    @pytest.mark.asyncio
    async def test_list_professionals_by_id(self, seeded_repo):
        """A profile id narrows the list to that profile."""
        profiles = await seeded_repo.list_professionals("pro-b")

        assert [p.id for p in profiles] == ["pro-b"]
        assert profiles[0].full_name == "Ben"

    @pytest.mark.asyncio
    async def test_list_professionals_by_client_id_is_empty(self, seeded_repo):
        """A client id never passes the professional filter."""
        assert await seeded_repo.list_professionals("client-1") == []

    @pytest.mark.asyncio
    async def test_get_profile_returns_any_kind(self, seeded_repo):
        """get_profile resolves clients as well as professionals."""
        profile = await seeded_repo.get_profile("client-1")

        assert isinstance(profile, CandidateProfile)
        assert profile.kind.value == "client"


class TestScores:
    """Test matching score storage."""

    @pytest.mark.asyncio
    async def test_upsert_score_inserts(self, repo):
        """A new pair is inserted."""
        await repo.upsert_score(_score("proj-1", "pro-a"))

        stored = await repo.get_score("proj-1", "pro-a")

        assert stored is not None
        assert stored.breakdown.total_score == 100
        assert stored.match_percentage == 100
        assert stored.match_details.matched_tools == ["ChatGPT"]
        assert stored.calculated_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_upsert_score_replaces_existing_pair(self, repo):
        """Rescoring a pair overwrites the row instead of adding one."""
        await repo.upsert_score(_score("proj-1", "pro-a", level=30))
        await repo.upsert_score(_score("proj-1", "pro-a", level=5))

        stored = await repo.get_score("proj-1", "pro-a")

        assert await repo.count_scores("proj-1") == 1
        assert stored.breakdown.level_match_score == 5
        assert stored.breakdown.total_score == 75

    @pytest.mark.asyncio
    async def test_pair_uniqueness_is_enforced_by_schema(self, repo):
        """A raw duplicate insert for the same pair is rejected."""
        await repo.upsert_score(_score("proj-1", "pro-a"))

        async with repo._get_connection() as conn:
            with pytest.raises(sqlite3.IntegrityError):
                await conn.execute(
                    """
                    INSERT INTO matching_scores (
                        project_id, profile_id, level_match_score, tool_match_score,
                        domain_match_score, experience_score, availability_score,
                        total_score, match_percentage, recommendation_reason,
                        match_details, calculated_at
                    ) VALUES ('proj-1', 'pro-a', 0, 0, 0, 0, 0, 0, 0, '', '{}', '')
                    """
                )

    @pytest.mark.asyncio
    async def test_upsert_score_wraps_database_errors(self, repo):
        """sqlite errors surface as PersistenceError for the pair."""
        from src.matching.errors import PersistenceError

        async with repo._get_connection() as conn:
            await conn.execute("DROP TABLE matching_scores")
            await conn.commit()

        with pytest.raises(PersistenceError) as exc_info:
            await repo.upsert_score(_score("proj-1", "pro-a"))

        assert exc_info.value.profile_id == "pro-a"
        assert exc_info.value.project_id == "proj-1"

    @pytest.mark.asyncio
    async def test_list_scores_orders_by_total_then_id(self, repo):
        """Stored scores list best first with ties broken by profile id."""
        await repo.upsert_score(_score("proj-1", "pro-b", level=15))
        await repo.upsert_score(_score("proj-1", "pro-c", level=30))
        await repo.upsert_score(_score("proj-1", "pro-a", level=15))
        await repo.upsert_score(_score("proj-2", "pro-a", level=30))

        scores = await repo.list_scores("proj-1")

        assert [s.profile_id for s in scores] == ["pro-c", "pro-a", "pro-b"]

    @pytest.mark.asyncio
    async def test_list_ranked_includes_names_and_limit(self, seeded_repo):
        """Ranked listing joins display names and honours the limit."""
        await seeded_repo.upsert_score(_score("proj-1", "pro-a", level=30))
        await seeded_repo.upsert_score(_score("proj-1", "pro-b", level=5))

        ranked = await seeded_repo.list_ranked("proj-1", limit=1)

        assert len(ranked) == 1
        assert ranked[0].profile_id == "pro-a"
        assert ranked[0].profile_name == "Aiko"

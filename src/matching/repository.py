"""Database repository for projects, profiles and matching scores.

This module provides async SQLite operations. Matching scores are keyed
by (project_id, profile_id) and written with a single upsert statement,
so concurrent recomputations for the same project can neither duplicate
nor lose a row.
"""

import asyncio
import json
import sqlite3
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from src.matching.errors import PersistenceError
from src.matching.models import (
    CandidateProfile,
    MatchDetails,
    MatchingScore,
    ProfileKind,
    Project,
    RankedCandidate,
    ScoreBreakdown,
)

CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS projects (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL DEFAULT '',
    client_id TEXT,
    requirements TEXT NOT NULL DEFAULT '{}'
);
CREATE TABLE IF NOT EXISTS profiles (
    id TEXT PRIMARY KEY,
    kind TEXT NOT NULL,
    full_name TEXT,
    profile_details TEXT NOT NULL DEFAULT '{}'
);
CREATE TABLE IF NOT EXISTS matching_scores (
    project_id TEXT NOT NULL,
    profile_id TEXT NOT NULL,
    level_match_score REAL NOT NULL,
    tool_match_score REAL NOT NULL,
    domain_match_score REAL NOT NULL,
    experience_score REAL NOT NULL,
    availability_score REAL NOT NULL,
    total_score REAL NOT NULL,
    match_percentage INTEGER NOT NULL,
    recommendation_reason TEXT NOT NULL,
    match_details TEXT NOT NULL,
    calculated_at TEXT NOT NULL,
    UNIQUE (project_id, profile_id)
);
"""

CREATE_INDEX_SQL = """
CREATE INDEX IF NOT EXISTS idx_profiles_kind ON profiles(kind);
CREATE INDEX IF NOT EXISTS idx_scores_project_total
    ON matching_scores(project_id, total_score DESC);
"""

UPSERT_SCORE_SQL = """
INSERT INTO matching_scores (
    project_id, profile_id, level_match_score, tool_match_score,
    domain_match_score, experience_score, availability_score, total_score,
    match_percentage, recommendation_reason, match_details, calculated_at
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT (project_id, profile_id) DO UPDATE SET
    level_match_score = excluded.level_match_score,
    tool_match_score = excluded.tool_match_score,
    domain_match_score = excluded.domain_match_score,
    experience_score = excluded.experience_score,
    availability_score = excluded.availability_score,
    total_score = excluded.total_score,
    match_percentage = excluded.match_percentage,
    recommendation_reason = excluded.recommendation_reason,
    match_details = excluded.match_details,
    calculated_at = excluded.calculated_at
"""


class MatchingRepository:
    """Async SQLite repository for the matching engine.

    Projects and profiles are read-only inputs to scoring; they are
    written here only by the catalog loader.
    """

    def __init__(self, db_path: Path | str):
        """Initialize the repository.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()

    @asynccontextmanager
    async def _get_connection(self) -> AsyncGenerator[aiosqlite.Connection, None]:
        """Get the shared database connection, opening it on first use."""
        if self._connection is None:
            self._connection = await aiosqlite.connect(self.db_path)
            self._connection.row_factory = aiosqlite.Row
        yield self._connection

    async def initialize(self) -> None:
        """Initialize the database, creating tables if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        async with self._get_connection() as conn:
            await conn.executescript(CREATE_TABLES_SQL)
            await conn.executescript(CREATE_INDEX_SQL)
            await conn.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None

    async def upsert_project(self, project: Project) -> None:
        """Insert a project or replace the stored copy."""
        async with self._write_lock, self._get_connection() as conn:
            await conn.execute(
                """
                INSERT INTO projects (id, title, client_id, requirements)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (id) DO UPDATE SET
                    title = excluded.title,
                    client_id = excluded.client_id,
                    requirements = excluded.requirements
                """,
                (
                    project.id,
                    project.title,
                    project.client_id,
                    json.dumps(project.requirements.to_dict(), ensure_ascii=False),
                ),
            )
            await conn.commit()

    async def upsert_profile(self, profile: CandidateProfile) -> None:
        """Insert a profile or replace the stored copy."""
        async with self._write_lock, self._get_connection() as conn:
            await conn.execute(
                """
                INSERT INTO profiles (id, kind, full_name, profile_details)
                VALUES (?, ?, ?, ?)
                ON CONFLICT (id) DO UPDATE SET
                    kind = excluded.kind,
                    full_name = excluded.full_name,
                    profile_details = excluded.profile_details
                """,
                (
                    profile.id,
                    profile.kind.value,
                    profile.full_name,
                    json.dumps(profile.profile_details.to_dict(), ensure_ascii=False),
                ),
            )
            await conn.commit()

    async def get_project(self, project_id: str) -> Project | None:
        """Get a project by id.

        Returns:
            The project if found, None otherwise.
        """
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM projects WHERE id = ?",
                (project_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None

        return Project(
            id=row["id"],
            title=row["title"],
            client_id=row["client_id"],
            requirements=json.loads(row["requirements"] or "{}"),
        )

    async def get_profile(self, profile_id: str) -> CandidateProfile | None:
        """Get a profile of any kind by id."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM profiles WHERE id = ?",
                (profile_id,),
            )
            row = await cursor.fetchone()

        if row is None:
            return None

        return self._row_to_profile(row)

    async def list_professionals(
        self, profile_id: str | None = None
    ) -> list[CandidateProfile]:
        """List professional profiles, optionally narrowed to one id.

        Args:
            profile_id: Optional profile id to restrict the result to.

        Returns:
            Professional profiles ordered by id.
        """
        async with self._get_connection() as conn:
            if profile_id is not None:
                cursor = await conn.execute(
                    """
                    SELECT * FROM profiles
                    WHERE kind = ? AND id = ?
                    ORDER BY id
                    """,
                    (ProfileKind.PROFESSIONAL.value, profile_id),
                )
            else:
                cursor = await conn.execute(
                    "SELECT * FROM profiles WHERE kind = ? ORDER BY id",
                    (ProfileKind.PROFESSIONAL.value,),
                )
            rows = await cursor.fetchall()

        return [self._row_to_profile(row) for row in rows]

    async def upsert_score(self, score: MatchingScore) -> None:
        """Store a matching score, replacing any current score for the pair.

        Raises:
            PersistenceError: If the database rejects the write.
        """
        breakdown = score.breakdown
        try:
            async with self._write_lock, self._get_connection() as conn:
                await conn.execute(
                    UPSERT_SCORE_SQL,
                    (
                        score.project_id,
                        score.profile_id,
                        breakdown.level_match_score,
                        breakdown.tool_match_score,
                        breakdown.domain_match_score,
                        breakdown.experience_score,
                        breakdown.availability_score,
                        breakdown.total_score,
                        score.match_percentage,
                        score.recommendation_reason,
                        json.dumps(score.match_details.to_dict(), ensure_ascii=False),
                        score.calculated_at.isoformat(),
                    ),
                )
                await conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(score.project_id, score.profile_id, str(e)) from e

    async def get_score(self, project_id: str, profile_id: str) -> MatchingScore | None:
        """Get the current score for a (project, profile) pair."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM matching_scores
                WHERE project_id = ? AND profile_id = ?
                """,
                (project_id, profile_id),
            )
            row = await cursor.fetchone()

        if row is None:
            return None

        return self._row_to_score(row)

    async def list_scores(self, project_id: str) -> list[MatchingScore]:
        """List stored scores for a project, best first (ties by profile id)."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM matching_scores
                WHERE project_id = ?
                ORDER BY total_score DESC, profile_id ASC
                """,
                (project_id,),
            )
            rows = await cursor.fetchall()

        return [self._row_to_score(row) for row in rows]

    async def list_ranked(
        self, project_id: str, limit: int | None = None
    ) -> list[RankedCandidate]:
        """List stored scores for a project with profile display names."""
        query = """
            SELECT s.*, p.full_name AS profile_name
            FROM matching_scores AS s
            LEFT JOIN profiles AS p ON p.id = s.profile_id
            WHERE s.project_id = ?
            ORDER BY s.total_score DESC, s.profile_id ASC
        """
        params: tuple = (project_id,)
        if limit is not None:
            query += " LIMIT ?"
            params = (project_id, limit)

        async with self._get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()

        return [
            RankedCandidate(
                profile_id=row["profile_id"],
                profile_name=row["profile_name"],
                breakdown=self._row_to_breakdown(row),
            )
            for row in rows
        ]

    async def count_scores(self, project_id: str) -> int:
        """Return the number of stored scores for a project."""
        async with self._get_connection() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) AS count FROM matching_scores WHERE project_id = ?",
                (project_id,),
            )
            row = await cursor.fetchone()

        return int(row["count"]) if row is not None else 0

    def _row_to_profile(self, row: aiosqlite.Row) -> CandidateProfile:
        return CandidateProfile(
            id=row["id"],
            kind=row["kind"],
            full_name=row["full_name"],
            profile_details=json.loads(row["profile_details"] or "{}"),
        )

    def _row_to_breakdown(self, row: aiosqlite.Row) -> ScoreBreakdown:
        return ScoreBreakdown(
            level_match_score=row["level_match_score"],
            tool_match_score=row["tool_match_score"],
            domain_match_score=row["domain_match_score"],
            experience_score=row["experience_score"],
            availability_score=row["availability_score"],
            total_score=row["total_score"],
        )

    def _row_to_score(self, row: aiosqlite.Row) -> MatchingScore:
        """Convert a database row to a MatchingScore."""
        calculated_at = datetime.fromisoformat(row["calculated_at"])
        if calculated_at.tzinfo is None:
            calculated_at = calculated_at.replace(tzinfo=UTC)

        return MatchingScore(
            project_id=row["project_id"],
            profile_id=row["profile_id"],
            breakdown=self._row_to_breakdown(row),
            match_percentage=row["match_percentage"],
            recommendation_reason=row["recommendation_reason"],
            match_details=MatchDetails.from_dict(json.loads(row["match_details"])),
            calculated_at=calculated_at,
        )

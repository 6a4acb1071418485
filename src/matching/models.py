"""Data models for the matching engine.

Input records (projects, profiles) are pydantic models so catalog files
and stored JSON columns are validated on the way in. Scoring output is
plain dataclasses, mirroring how results are built inside the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from src.matching.matchers import (
    AVAILABILITY_SCORE,
    DOMAIN_MATCH_CAP,
    EXPERIENCE_CAP,
    LEVEL_MATCH_CAP,
    TOOL_MATCH_CAP,
    round_half_up,
)


class SkillLevel(str, Enum):
    """Skill tier of a professional, ordered supporter < user < developer < expert."""

    SUPPORTER = "supporter"
    USER = "user"
    DEVELOPER = "developer"
    EXPERT = "expert"


class ProjectDifficulty(str, Enum):
    """Difficulty of a project, used to pick the ideal years of experience."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ProfileKind(str, Enum):
    """Kind of profile. Only professionals are scored."""

    CLIENT = "client"
    PROFESSIONAL = "professional"


class ProjectRequirements(BaseModel):
    """Structured requirements a project places on candidates."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    required_level: SkillLevel | None = Field(
        default=None,
        validation_alias=AliasChoices("required_level", "required_ai_level"),
        description="Target skill tier",
    )
    required_tools: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("required_tools", "required_ai_tools"),
        description="Ordered list of required tool names",
    )
    business_domain: str | None = Field(
        default=None, description="Business domain the work belongs to"
    )
    project_difficulty: ProjectDifficulty = Field(
        default=ProjectDifficulty.INTERMEDIATE, description="Project difficulty"
    )

    @field_validator("required_tools", mode="before")
    @classmethod
    def default_tools(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("project_difficulty", mode="before")
    @classmethod
    def default_difficulty(cls, v: Any) -> Any:
        return ProjectDifficulty.INTERMEDIATE if v in (None, "") else v

    @field_validator("required_level", "business_domain", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return None if v == "" else v

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")


class Project(BaseModel):
    """A project whose requirements candidates are scored against."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Project identifier")
    title: str = Field(default="", description="Project title")
    client_id: str | None = Field(
        default=None, description="Identifier of the requesting client profile"
    )
    requirements: ProjectRequirements = Field(
        default_factory=ProjectRequirements,
        validation_alias=AliasChoices("requirements", "pro_requirements"),
    )

    @field_validator("requirements", mode="before")
    @classmethod
    def default_requirements(cls, v: Any) -> Any:
        return {} if v is None else v

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> Project:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


class Experience(BaseModel):
    """Professional experience summary."""

    years: float = Field(default=0, ge=0, description="Years of experience")
    domains: list[str] = Field(
        default_factory=list, description="Business domains worked in"
    )

    @field_validator("years", mode="before")
    @classmethod
    def default_years(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("domains", mode="before")
    @classmethod
    def default_domains(cls, v: Any) -> Any:
        return [] if v is None else v


class ProfileDetails(BaseModel):
    """Skill, tool and experience details of a professional."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    skill_levels: list[SkillLevel] = Field(
        default_factory=list,
        validation_alias=AliasChoices("skill_levels", "ai_skills"),
        description="Skill tiers; the first entry is the primary tier",
    )
    tools: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("tools", "ai_tools"),
        description="Tools the professional can use",
    )
    experience: Experience = Field(
        default_factory=Experience,
        validation_alias=AliasChoices("experience", "ai_experience"),
    )

    @field_validator("skill_levels", "tools", mode="before")
    @classmethod
    def default_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("experience", mode="before")
    @classmethod
    def default_experience(cls, v: Any) -> Any:
        return {} if v is None else v

    @property
    def primary_level(self) -> SkillLevel | None:
        """The primary skill tier, or None when no tier is recorded."""
        return self.skill_levels[0] if self.skill_levels else None

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")


class CandidateProfile(BaseModel):
    """A profile that may be scored against projects."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Profile identifier")
    kind: ProfileKind = Field(
        default=ProfileKind.PROFESSIONAL,
        validation_alias=AliasChoices("kind", "user_type"),
    )
    full_name: str | None = Field(default=None, description="Display name")
    profile_details: ProfileDetails = Field(default_factory=ProfileDetails)

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        # Older exports label professionals as "pro".
        if isinstance(v, str) and v.strip().lower() == "pro":
            return ProfileKind.PROFESSIONAL
        return v

    @field_validator("profile_details", mode="before")
    @classmethod
    def default_details(cls, v: Any) -> Any:
        return {} if v is None else v

    def to_dict(self) -> dict:
        """Serialize to a dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> CandidateProfile:
        """Deserialize from a dictionary."""
        return cls.model_validate(data)


_COMPONENT_CAPS = {
    "level_match_score": LEVEL_MATCH_CAP,
    "tool_match_score": TOOL_MATCH_CAP,
    "domain_match_score": DOMAIN_MATCH_CAP,
    "experience_score": EXPERIENCE_CAP,
    "availability_score": AVAILABILITY_SCORE,
}


@dataclass(frozen=True)
class ScoreBreakdown:
    """Five capped component scores and their sum."""

    level_match_score: float
    tool_match_score: float
    domain_match_score: float
    experience_score: float
    availability_score: float
    total_score: float

    def __post_init__(self) -> None:
        for name, cap in _COMPONENT_CAPS.items():
            value = getattr(self, name)
            if not (0 <= value <= cap):
                raise ValueError(f"{name} must be between 0 and {cap} (got {value})")

        expected = sum(getattr(self, name) for name in _COMPONENT_CAPS)
        if abs(self.total_score - expected) > 1e-9:
            raise ValueError(
                f"total_score must equal the sum of components "
                f"(got {self.total_score}, expected {expected})"
            )
        if not (0 <= self.total_score <= 100):
            raise ValueError(f"total_score must be between 0 and 100 (got {self.total_score})")

    @property
    def percentage(self) -> int:
        """Total score rounded to a whole percentage."""
        return round_half_up(self.total_score)

    def to_dict(self) -> dict[str, float]:
        return {
            "level_match_score": self.level_match_score,
            "tool_match_score": self.tool_match_score,
            "domain_match_score": self.domain_match_score,
            "experience_score": self.experience_score,
            "availability_score": self.availability_score,
            "total_score": self.total_score,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ScoreBreakdown:
        return cls(
            level_match_score=data["level_match_score"],
            tool_match_score=data["tool_match_score"],
            domain_match_score=data["domain_match_score"],
            experience_score=data["experience_score"],
            availability_score=data["availability_score"],
            total_score=data["total_score"],
        )


@dataclass(frozen=True)
class MatchDetails:
    """Snapshot of the inputs that drove a score."""

    required_level: str | None
    profile_level: str | None
    matched_tools: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "required_level": self.required_level,
            "profile_level": self.profile_level,
            "matched_tools": list(self.matched_tools),
        }

    @classmethod
    def from_dict(cls, data: dict) -> MatchDetails:
        return cls(
            required_level=data.get("required_level"),
            profile_level=data.get("profile_level"),
            matched_tools=list(data.get("matched_tools") or []),
        )


@dataclass
class MatchingScore:
    """The current score of one candidate against one project.

    Attributes:
        project_id: Project the score belongs to.
        profile_id: Scored professional profile.
        breakdown: Component scores and total.
        match_percentage: Total rounded to a whole number.
        recommendation_reason: Human-readable justification.
        match_details: Snapshot of level and tool inputs.
        calculated_at: When the score was computed (UTC).
    """

    project_id: str
    profile_id: str
    breakdown: ScoreBreakdown
    match_percentage: int
    recommendation_reason: str
    match_details: MatchDetails
    calculated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict:
        return {
            "project_id": self.project_id,
            "profile_id": self.profile_id,
            **self.breakdown.to_dict(),
            "match_percentage": self.match_percentage,
            "recommendation_reason": self.recommendation_reason,
            "match_details": self.match_details.to_dict(),
            "calculated_at": self.calculated_at.isoformat(),
        }


@dataclass(frozen=True)
class RankedCandidate:
    """A successfully stored candidate score, as shown in ranked output."""

    profile_id: str
    profile_name: str | None
    breakdown: ScoreBreakdown

    @property
    def total_score(self) -> float:
        return self.breakdown.total_score

    def to_dict(self) -> dict:
        return {
            "profile_id": self.profile_id,
            "profile_name": self.profile_name,
            **self.breakdown.to_dict(),
        }


@dataclass
class SyncResult:
    """Outcome of synchronizing scores for one candidate population.

    Candidates whose score could not be stored are listed in
    ``failed_profile_ids`` and are absent from ``written``.
    """

    written: list[RankedCandidate] = field(default_factory=list)
    failed_profile_ids: list[str] = field(default_factory=list)


@dataclass
class MatchOutcome:
    """Result of one matching request: a ranked list or an error."""

    success: bool
    matching_scores: list[RankedCandidate] = field(default_factory=list)
    error: str | None = None
    error_kind: str | None = None
    failed_profile_ids: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.success and self.error:
            raise ValueError("MatchOutcome.success=True is incompatible with error")
        if not self.success and not self.error:
            raise ValueError("MatchOutcome.success=False requires an error message")

    @classmethod
    def failure(cls, error: str, kind: str) -> MatchOutcome:
        return cls(success=False, error=error, error_kind=kind)

    def to_dict(self) -> dict:
        """Serialize to the request/response wire shape."""
        if not self.success:
            return {"error": self.error}
        return {
            "success": True,
            "matchingScores": [entry.to_dict() for entry in self.matching_scores],
        }

"""Configuration settings for the matching engine."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MatchingConfig(BaseSettings):
    """Matching engine configuration settings.

    Values can be overridden via environment variables with the
    `MATCHING_` prefix or a .env file. Scoring caps and lookup tables
    live in :mod:`src.matching.matchers`.
    """

    model_config = SettingsConfigDict(
        env_prefix="MATCHING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    result_limit: Annotated[int, Field(gt=0)] = Field(
        default=10,
        description="Maximum number of ranked candidates returned per request",
    )
    max_concurrency: Annotated[int, Field(gt=0)] = Field(
        default=8,
        description="Maximum number of score writes in flight per request",
    )


# Singleton instance for easy import
_matching_config: MatchingConfig | None = None


def get_matching_config() -> MatchingConfig:
    """Get the matching configuration singleton."""
    global _matching_config
    if _matching_config is None:
        _matching_config = MatchingConfig()
    return _matching_config


def reset_matching_config() -> None:
    """Reset the matching configuration singleton (useful for testing)."""
    global _matching_config
    _matching_config = None

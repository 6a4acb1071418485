"""Lookup tables and tool matching utilities for the matching engine."""

from __future__ import annotations

import math
from collections.abc import Iterable
from types import MappingProxyType

# Component caps. The five caps sum to 100.
LEVEL_MATCH_CAP = 30
TOOL_MATCH_CAP = 25
DOMAIN_MATCH_CAP = 20
EXPERIENCE_CAP = 15
AVAILABILITY_SCORE = 10

# Ordinal of each skill tier.
SKILL_LEVELS: MappingProxyType[str, int] = MappingProxyType(
    {
        "supporter": 1,
        "user": 2,
        "developer": 3,
        "expert": 4,
    }
)

# Tools that can stand in for a missing required tool (bonus scoring only).
# The relation is directed: Python -> R does not imply R -> Python.
RELATED_TOOLS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "ChatGPT": ("Claude", "Gemini", "Copilot"),
        "Claude": ("ChatGPT", "Gemini"),
        "Python": ("JavaScript", "R"),
        "TensorFlow": ("PyTorch", "Keras"),
        "Midjourney": ("Stable Diffusion", "DALL-E"),
    }
)

RELATED_TOOL_BONUS = 2.5

# Ideal years of experience per project difficulty.
IDEAL_YEARS: MappingProxyType[str, float] = MappingProxyType(
    {
        "beginner": 0.5,
        "intermediate": 1.5,
        "advanced": 3.0,
    }
)

DEFAULT_DIFFICULTY = "intermediate"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (12.5 -> 13).

    Python's built-in ``round`` uses banker's rounding (12.5 -> 12),
    which would under-score exactly-half tool matches.
    """
    return math.floor(value + 0.5)


def level_ordinal(level: str | None) -> int | None:
    """Return the ordinal of a skill tier, or None for unknown/absent tiers."""
    if level is None:
        return None
    return SKILL_LEVELS.get(str(getattr(level, "value", level)))


def find_matching_tools(
    required: Iterable[str], available: Iterable[str]
) -> tuple[list[str], list[str]]:
    """Return the required tools present in ``available``, and those missing.

    Both lists keep the order of ``required``. Names compare exactly.
    """
    available_set = set(available)
    matched: list[str] = []
    missing: list[str] = []

    for tool in required:
        if tool in available_set:
            matched.append(tool)
        else:
            missing.append(tool)

    return matched, missing


def has_related_tool(tool: str, available: Iterable[str]) -> bool:
    """Return True if any tool related to ``tool`` is in ``available``."""
    related = RELATED_TOOLS.get(tool, ())
    if not related:
        return False
    available_set = set(available)
    return any(candidate in available_set for candidate in related)


def ideal_years_for(difficulty: str | None) -> float:
    """Return the ideal years of experience for a project difficulty."""
    key = str(getattr(difficulty, "value", difficulty) or DEFAULT_DIFFICULTY)
    return IDEAL_YEARS.get(key, IDEAL_YEARS[DEFAULT_DIFFICULTY])

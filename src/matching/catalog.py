"""Catalog loading: projects and profiles from YAML or JSON files."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from src.matching.models import CandidateProfile, Project
from src.matching.repository import MatchingRepository
from src.utils.logging import get_logger

logger = get_logger("matching.catalog")


class Catalog(BaseModel):
    """A batch of projects and profiles to seed the store with."""

    projects: list[Project] = Field(default_factory=list)
    profiles: list[CandidateProfile] = Field(default_factory=list)


class CatalogService:
    """Service for loading catalog files and importing them into the store."""

    def load_catalog(self, path: Path | str) -> Catalog:
        """Load and validate a catalog from YAML or JSON.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file cannot be parsed or is not a mapping.
            pydantic.ValidationError: If a record is invalid.
        """
        catalog_path = Path(path)
        if not catalog_path.exists():
            raise FileNotFoundError(f"Catalog not found: {catalog_path}")

        suffix = catalog_path.suffix.lower()
        if suffix in {".yaml", ".yml"}:
            data = self._load_yaml(catalog_path)
        elif suffix == ".json":
            data = self._load_json(catalog_path)
        else:
            data = self._load_unknown(catalog_path)

        for key in ("projects", "profiles"):
            if data.get(key) is None:
                data[key] = []

        return Catalog.model_validate(data)

    async def import_catalog(
        self, repository: MatchingRepository, catalog: Catalog
    ) -> tuple[int, int]:
        """Write every project and profile of a catalog to the store.

        Returns:
            (projects written, profiles written)
        """
        for project in catalog.projects:
            await repository.upsert_project(project)
        for profile in catalog.profiles:
            await repository.upsert_profile(profile)

        logger.info(
            "Imported %d project(s) and %d profile(s)",
            len(catalog.projects),
            len(catalog.profiles),
        )
        return len(catalog.projects), len(catalog.profiles)

    def _load_yaml(self, path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML catalog: {path}") from e

        return self._ensure_mapping(data, path)

    def _load_json(self, path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON catalog: {path}") from e

        return self._ensure_mapping(data, path)

    def _load_unknown(self, path: Path) -> dict:
        """Auto-detect the format when the file extension is unknown."""
        raw = path.read_text(encoding="utf-8")

        # JSON is valid YAML, but try it first for clearer errors.
        if raw.lstrip().startswith("{"):
            try:
                return self._ensure_mapping(json.loads(raw), path)
            except json.JSONDecodeError:
                pass

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid catalog format: {path}") from e

        return self._ensure_mapping(data, path)

    @staticmethod
    def _ensure_mapping(data: object, path: Path) -> dict:
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Catalog must be a mapping/dict: {path}")
        return data

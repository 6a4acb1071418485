"""Main entry point for Talent Match."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from src import __version__
from src.config.settings import Settings
from src.utils.logging import configure_logging


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("--limit must be a positive integer")
    return number


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="talent-match",
        description="Talent Match: score professionals against project requirements",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src load catalog.yaml
  python -m src match proj-001
  python -m src match proj-001 --profile-id pro-042
  python -m src scores proj-001 --limit 5
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )

    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Override database path (defaults to settings)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands",
    )

    load_parser = subparsers.add_parser(
        "load",
        help="Load projects and profiles from a YAML or JSON catalog",
    )
    load_parser.add_argument(
        "catalog",
        type=Path,
        help="Path to a catalog file with 'projects' and 'profiles' lists",
    )

    match_parser = subparsers.add_parser(
        "match",
        help="Recompute matching scores for a project and print the top candidates",
    )
    match_parser.add_argument("project_id", help="Project to score candidates for")
    match_parser.add_argument(
        "--profile-id",
        default=None,
        help="Only rescore this professional profile",
    )

    scores_parser = subparsers.add_parser(
        "scores",
        help="Print stored matching scores for a project",
    )
    scores_parser.add_argument("project_id", help="Project to list scores for")
    scores_parser.add_argument(
        "--limit",
        type=_positive_int,
        default=None,
        help="Maximum number of scores to print",
    )

    return parser


async def _run_load(db_path: Path, catalog_path: Path) -> int:
    from src.matching.catalog import CatalogService
    from src.matching.repository import MatchingRepository

    service = CatalogService()
    try:
        catalog = service.load_catalog(catalog_path)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        print(f"Error loading catalog: {e}", file=sys.stderr)
        return 1

    repo = MatchingRepository(db_path)
    await repo.initialize()
    try:
        projects, profiles = await service.import_catalog(repo, catalog)
    finally:
        await repo.close()

    print(f"Loaded {projects} project(s) and {profiles} profile(s) into {db_path}")
    return 0


async def _run_match(db_path: Path, project_id: str, profile_id: str | None) -> int:
    from src.matching.repository import MatchingRepository
    from src.matching.service import MatchingService

    repo = MatchingRepository(db_path)
    await repo.initialize()
    try:
        service = MatchingService(repo)
        response = await service.handle_request(
            {"project_id": project_id, "profile_id": profile_id}
        )
    finally:
        await repo.close()

    _print_json(response)
    return 0 if response.get("success") else 1


async def _run_scores(db_path: Path, project_id: str, limit: int | None) -> int:
    from src.matching.repository import MatchingRepository
    from src.matching.service import MatchingService

    repo = MatchingRepository(db_path)
    await repo.initialize()
    try:
        ranked = await MatchingService(repo).list_scores(project_id, limit=limit)
    finally:
        await repo.close()

    if not ranked:
        print(f"No scores stored for project {project_id}")
        return 1

    _print_json([entry.to_dict() for entry in ranked])
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level)

    if parsed.command is None:
        parser.print_help()
        return 0

    db_path = parsed.db or settings.db_path
    logger.info(f"Talent Match v{__version__} running '{parsed.command}'")

    if parsed.command == "load":
        return asyncio.run(_run_load(db_path, parsed.catalog))

    if parsed.command == "match":
        return asyncio.run(_run_match(db_path, parsed.project_id, parsed.profile_id))

    if parsed.command == "scores":
        return asyncio.run(_run_scores(db_path, parsed.project_id, parsed.limit))

    print(f"Unknown command: {parsed.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())

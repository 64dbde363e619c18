#!/usr/bin/env python3
"""Script to print the pull requests merged since a release as a changelog."""

import argparse
import logging
import sys
import os

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.infrastructure.config import ConfigurationError, load_settings
from src.infrastructure.github_client import GitHubGraphQLClient
from src.application.changelog_formatter import render_changelog
from src.application.release_notes_service import RefNotFoundError, ReleaseNotesService
from src.domain.release import RepositoryRef

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="List pull requests merged since a release tag.",
    )
    parser.add_argument("--owner", required=True, help="Repository owner")
    parser.add_argument("--repo", required=True, help="Repository name")
    parser.add_argument("--previous-tag", required=True, help="Tag of the previous release")
    parser.add_argument(
        "--current-tag",
        help="Tag of the current release (defaults to today)",
    )
    parser.add_argument(
        "--no-authors",
        action="store_true",
        help="Omit pull request authors from the output",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Generate the changelog."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        return 1

    try:
        repository = RepositoryRef(owner=args.owner, name=args.repo)
        github_client = GitHubGraphQLClient(token=settings.github_token)
        service = ReleaseNotesService(github_client, settings.dependency_authors)

        report = service.build_report(repository, args.previous_tag, args.current_tag)
    except (RefNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.error(f"Release notes failed: {e}", exc_info=True)
        return 1

    if report.classification is None or report.classification.total == 0:
        print(
            f"No PRs found merged between {report.date_range.start} "
            f"and {report.date_range.end}"
        )
        return 0

    for line in render_changelog(report.classification, show_author=not args.no_authors):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Application service for building release notes from merged pull requests."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import FrozenSet, Iterable, List, Optional

from src.domain.release import (
    AuthorClassification,
    CommitInfo,
    DateRange,
    PullRequestRecord,
    ReleaseQuery,
    RepositoryRef,
)
from src.infrastructure.github_client import GitHubAPIError, GitHubGraphQLClient

logger = logging.getLogger(__name__)


class RefNotFoundError(Exception):
    """Raised when a tag or ref does not resolve to a commit date."""

    def __init__(self, repository: RepositoryRef, tag_expression: str):
        super().__init__(f"Release data not found for {tag_expression} in {repository.full_name}")
        self.repository = repository
        self.tag_expression = tag_expression


@dataclass
class ReleaseReport:
    """Result of a release notes run. ``classification`` is None if the search failed."""

    repository: RepositoryRef
    date_range: DateRange
    classification: Optional[AuthorClassification]


def to_utc_date(timestamp: str) -> str:
    """Truncate an ISO 8601 timestamp to its UTC calendar date."""
    parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def build_search_query(repository: RepositoryRef, date_range: DateRange) -> str:
    return f"repo:{repository.full_name} is:pr is:merged merged:{date_range.to_search_filter()}"


class ReleaseNotesService:
    """Service for collecting the pull requests merged since a release."""

    def __init__(
        self,
        github_client: GitHubGraphQLClient,
        dependency_authors: Iterable[str] = ()
    ):
        """
        Initialize release notes service.

        Args:
            github_client: GitHub API client
            dependency_authors: Logins whose pull requests are listed as dependency updates
        """
        self.github_client = github_client
        self.dependency_authors: FrozenSet[str] = frozenset(dependency_authors)

    def resolve_release_date(self, repository: RepositoryRef, tag_expression: str) -> CommitInfo:
        """
        Resolve the commit date of a tag, branch or SHA.

        Args:
            repository: Repository to query
            tag_expression: Ref expression

        Returns:
            CommitInfo with a YYYY-MM-DD date, or an empty CommitInfo if the ref
            could not be resolved
        """
        query = ReleaseQuery(repository=repository, tag_expression=tag_expression)
        logger.info(f"Resolving commit date for {query.tag_expression} in {repository.full_name}")

        try:
            committed_date = self.github_client.get_commit_date(query.repository, query.tag_expression)
        except GitHubAPIError as e:
            logger.error(f"Error querying GitHub GraphQL API for {tag_expression}: {e}")
            return CommitInfo()

        if not committed_date:
            logger.warning(f"Release data not found for {tag_expression}")
            return CommitInfo()

        return CommitInfo(date=to_utc_date(committed_date))

    def list_merged_pull_requests(self, repository: RepositoryRef, date_range: DateRange) -> Optional[List[PullRequestRecord]]:
        """
        List pull requests merged within a date range.

        Only the first page of search results is returned.

        Args:
            repository: Repository to query
            date_range: Merge window

        Returns:
            Pull requests in GitHub's order, or None if the search failed
        """
        if date_range.is_empty:
            logger.info(f"Empty date range {date_range.to_search_filter()}, skipping search")
            return []

        search_query = build_search_query(repository, date_range)
        logger.debug(f"Searching with query: {search_query}")

        try:
            pull_requests, total = self.github_client.search_pull_requests(search_query)
        except GitHubAPIError as e:
            logger.error(f"Error querying GitHub GraphQL API: {e}")
            return None

        logger.info(f"Finished querying GitHub GraphQL API, {len(pull_requests)} pull requests found")
        if total > len(pull_requests):
            logger.warning(
                f"{total} pull requests matched but only the first {len(pull_requests)} are listed"
            )
        return pull_requests

    def build_report(
        self,
        repository: RepositoryRef,
        previous_tag: str,
        current_tag: Optional[str] = None,
        today: Optional[str] = None
    ) -> ReleaseReport:
        """
        Build the release report for everything merged since ``previous_tag``.

        Args:
            repository: Repository to query
            previous_tag: Ref of the previous release (start of the window)
            current_tag: Ref of the current release. If None, the window ends today.
            today: End date override as YYYY-MM-DD. Defaults to the current UTC date.

        Returns:
            ReleaseReport

        Raises:
            RefNotFoundError: If either tag does not resolve
        """
        start = self.resolve_release_date(repository, previous_tag)
        if not start.found:
            raise RefNotFoundError(repository, previous_tag)

        if current_tag:
            end = self.resolve_release_date(repository, current_tag)
            if not end.found:
                raise RefNotFoundError(repository, current_tag)
            end_date = end.date
        else:
            end_date = today or datetime.now(timezone.utc).date().isoformat()

        date_range = DateRange(start=start.date, end=end_date)
        logger.info(f"Getting PRs starting: {date_range.start}, ending: {date_range.end}")

        pull_requests = self.list_merged_pull_requests(repository, date_range)
        if pull_requests is None:
            return ReleaseReport(repository, date_range, None)

        classification = AuthorClassification.partition(pull_requests, self.dependency_authors)
        return ReleaseReport(repository, date_range, classification)

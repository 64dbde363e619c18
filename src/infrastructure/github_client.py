"""GitHub GraphQL API client for release and pull request lookups."""

import logging
from typing import List, Optional, Dict, Any, Tuple
import requests

from src.domain.release import GHOST_LOGIN, PullRequestRecord, RepositoryRef

logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """Raised when a GitHub GraphQL request fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []


class GitHubGraphQLClient:
    """Client for the GitHub GraphQL API."""

    GRAPHQL_ENDPOINT = "https://api.github.com/graphql"
    REQUEST_TIMEOUT_SECONDS = 30
    SEARCH_PAGE_SIZE = 100  # GitHub search maximum for a single page

    COMMIT_DATE_QUERY = """
    query($owner: String!, $name: String!, $expression: String!) {
        repository(owner: $owner, name: $name) {
            object(expression: $expression) {
                ... on Commit {
                    oid
                    committedDate
                }
                ... on Tag {
                    target {
                        ... on Commit {
                            oid
                            committedDate
                        }
                    }
                }
            }
        }
    }
    """

    SEARCH_PULL_REQUESTS_QUERY = """
    query($searchQuery: String!, $limit: Int!) {
        search(query: $searchQuery, type: ISSUE, first: $limit) {
            issueCount
            nodes {
                ... on PullRequest {
                    title
                    url
                    author {
                        login
                    }
                }
            }
        }
    }
    """

    def __init__(self, token: str):
        """
        Initialize GitHub GraphQL client.

        Args:
            token: GitHub personal access token, sent as a bearer token on every request.
        """
        self.token = token
        self.headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.token}",
        }

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a GraphQL query.

        Args:
            query: GraphQL query string
            variables: Query variables

        Returns:
            GraphQL response data

        Raises:
            GitHubAPIError: On transport failure, non-200 status or GraphQL errors
        """
        payload = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = requests.post(
                self.GRAPHQL_ENDPOINT,
                json=payload,
                headers=self.headers,
                timeout=self.REQUEST_TIMEOUT_SECONDS
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error querying GitHub GraphQL API: {e}")
            raise GitHubAPIError(f"Network error: {e}") from e

        if response.status_code == 401:
            raise GitHubAPIError("Authentication failed. Check your GitHub token.", 401)
        if response.status_code != 200:
            logger.error(
                f"GitHub GraphQL API responded with {response.status_code} "
                f"{response.reason}: {response.text}"
            )
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} {response.reason}",
                response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GitHubAPIError(f"Invalid JSON in GitHub API response: {e}", response.status_code) from e

        if data.get("errors"):
            for err in data["errors"]:
                logger.error(
                    f"[GraphQL error]: Message: {err.get('message')}, "
                    f"Location: {err.get('locations')}, Path: {err.get('path')}"
                )
            error_messages = [err.get("message", "") for err in data["errors"]]
            raise GitHubAPIError(f"GraphQL errors: {error_messages}", response.status_code, data["errors"])

        return data.get("data") or {}

    def get_commit_date(self, repository: RepositoryRef, expression: str) -> Optional[str]:
        """
        Look up the committed date of the commit a ref expression points to.

        Annotated tags are followed to their target commit.

        Args:
            repository: Repository to query
            expression: Tag, branch or SHA

        Returns:
            ISO 8601 timestamp, or None if the ref does not resolve to a commit
        """
        variables = {
            "owner": repository.owner,
            "name": repository.name,
            "expression": expression,
        }
        data = self.execute(self.COMMIT_DATE_QUERY, variables)

        repo_node = data.get("repository") or {}
        obj = repo_node.get("object") or {}
        if "target" in obj:
            obj = obj.get("target") or {}
        return obj.get("committedDate")

    def search_pull_requests(self, search_query: str, limit: int = SEARCH_PAGE_SIZE) -> Tuple[List[PullRequestRecord], int]:
        """
        Search pull requests. Only the first page of results is fetched.

        Args:
            search_query: GitHub search query string (e.g., "repo:o/r is:pr is:merged")
            limit: Maximum number of results (max 100)

        Returns:
            Tuple of (pull requests in GitHub's order, total match count)
        """
        variables = {
            "searchQuery": search_query,
            "limit": min(limit, self.SEARCH_PAGE_SIZE),
        }
        data = self.execute(self.SEARCH_PULL_REQUESTS_QUERY, variables)

        search_result = data.get("search") or {}
        nodes = search_result.get("nodes") or []

        pull_requests = []
        for node in nodes:
            # Non-PR nodes come back as empty objects
            if not node or "url" not in node:
                continue
            author = node.get("author") or {}
            pull_requests.append(PullRequestRecord(
                title=node.get("title", ""),
                url=node["url"],
                author_login=author.get("login") or GHOST_LOGIN
            ))

        total = search_result.get("issueCount", len(pull_requests))
        return pull_requests, total
